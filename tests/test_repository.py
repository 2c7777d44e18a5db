import os
import sqlite3
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

from core import Flashcard, RecallItem, ReviewDifficulty, StudyProgress, TextCategory
from scheduler.review import replay
from storage.db import connect
from storage.repository import FlashcardRepository, RecallItemRepository


CREATED = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


class TestRecallItemRepository(unittest.TestCase):
    """Tests for RecallItemRepository."""

    @classmethod
    def setUpClass(cls):
        """Create a temporary database for testing."""
        cls.temp_db = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
        cls.temp_db.close()
        cls.conn = connect(Path(cls.temp_db.name))
        cls.repo = RecallItemRepository(cls.conn)

    @classmethod
    def tearDownClass(cls):
        """Clean up temporary database."""
        cls.conn.close()
        os.unlink(cls.temp_db.name)

    def setUp(self):
        """Clear items before each test."""
        self.conn.execute("DELETE FROM recall_items")
        self.conn.commit()

    def test_save_and_get_by_id(self):
        """Should store and load every field of an item."""
        item = RecallItem(content="Test item", created_at=CREATED,
                          text_category=TextCategory.LONG, is_manually_overridden=True)
        self.repo.save(item)

        loaded = self.repo.get_by_id(item.id)

        self.assertEqual(loaded, item)

    def test_get_by_id_not_found(self):
        """Should return None for unknown IDs."""
        self.assertIsNone(self.repo.get_by_id("missing"))

    def test_created_at_keeps_microseconds(self):
        """Reminders are computed from created_at, so it must survive unchanged."""
        created = CREATED.replace(microsecond=654321)
        item = RecallItem(content="precise", created_at=created)
        self.repo.save(item)

        self.assertEqual(self.repo.get_by_id(item.id).created_at, created)

    def test_save_replaces(self):
        """Saving an existing ID should update it."""
        item = RecallItem(content="Test item", created_at=CREATED)
        self.repo.save(item)
        item.text_category = TextCategory.SHORT
        self.repo.save(item)

        self.assertEqual(len(self.repo.list_all()), 1)
        self.assertEqual(self.repo.get_by_id(item.id).text_category, TextCategory.SHORT)

    def test_list_all_newest_first(self):
        older = RecallItem(content="older", created_at=CREATED)
        newer = RecallItem(content="newer", created_at=CREATED + timedelta(hours=1))
        self.repo.save(older)
        self.repo.save(newer)

        self.assertEqual([i.content for i in self.repo.list_all()], ["newer", "older"])

    def test_delete(self):
        item = RecallItem(content="To delete", created_at=CREATED)
        self.repo.save(item)
        self.repo.delete(item.id)

        self.assertIsNone(self.repo.get_by_id(item.id))

    def test_unknown_category_uses_default(self):
        """An unknown stored category should decode to the repository default."""
        self.conn.execute(
            "INSERT INTO recall_items (id, content, created_at, text_category) VALUES (?, ?, ?, ?)",
            ("odd", "text", CREATED.isoformat(), "enormous"),
        )
        self.conn.commit()

        with self.assertLogs("storage.repository", level="WARNING"):
            item = self.repo.get_by_id("odd")
        self.assertEqual(item.text_category, TextCategory.MEDIUM)


class TestLegacyDatabase(unittest.TestCase):
    """Tests for databases created before categories existed."""

    def setUp(self):
        self.temp_db = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
        self.temp_db.close()
        legacy = sqlite3.connect(self.temp_db.name)
        legacy.execute("CREATE TABLE recall_items (id TEXT PRIMARY KEY, content TEXT NOT NULL, created_at TEXT NOT NULL)")
        legacy.execute(
            "INSERT INTO recall_items (id, content, created_at) VALUES (?, ?, ?)",
            ("legacy-1", "Old entry", "2023-06-01T10:00:00"),
        )
        legacy.commit()
        legacy.close()

    def tearDown(self):
        os.unlink(self.temp_db.name)

    def test_migration_adds_columns(self):
        conn = connect(Path(self.temp_db.name))
        cols = {row["name"] for row in conn.execute("PRAGMA table_info(recall_items)").fetchall()}
        conn.close()

        self.assertIn("text_category", cols)
        self.assertIn("is_manually_overridden", cols)

    def test_legacy_rows_get_default_category(self):
        """Legacy rows should load with the medium default and no override."""
        conn = connect(Path(self.temp_db.name))
        try:
            with self.assertLogs("storage.repository", level="WARNING"):
                item = RecallItemRepository(conn).get_by_id("legacy-1")
        finally:
            conn.close()

        self.assertEqual(item.content, "Old entry")
        self.assertEqual(item.text_category, TextCategory.MEDIUM)
        self.assertFalse(item.is_manually_overridden)
        self.assertEqual(item.created_at, datetime(2023, 6, 1, 10, 0))

    def test_caller_supplied_default(self):
        conn = connect(Path(self.temp_db.name))
        try:
            with self.assertLogs("storage.repository", level="WARNING"):
                item = RecallItemRepository(conn, default_category=TextCategory.SHORT).get_by_id("legacy-1")
        finally:
            conn.close()

        self.assertEqual(item.text_category, TextCategory.SHORT)


class TestFlashcardRepository(unittest.TestCase):
    """Tests for FlashcardRepository."""

    @classmethod
    def setUpClass(cls):
        cls.temp_db = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
        cls.temp_db.close()
        cls.conn = connect(Path(cls.temp_db.name))
        cls.repo = FlashcardRepository(cls.conn)

    @classmethod
    def tearDownClass(cls):
        cls.conn.close()
        os.unlink(cls.temp_db.name)

    def setUp(self):
        self.conn.execute("DELETE FROM flashcards")
        self.conn.commit()

    def test_save_and_get_with_progress(self):
        """Study progress should survive a round trip."""
        progress = replay([ReviewDifficulty.EASY, ReviewDifficulty.HARD], now=CREATED + timedelta(days=1))
        card = Flashcard(front_content="2 + 2?", back_content="4", created_at=CREATED,
                         text_category=TextCategory.SHORT, study_progress=progress)
        self.repo.save(card)

        loaded = self.repo.get_by_id(card.id)

        self.assertEqual(loaded.front_content, "2 + 2?")
        self.assertEqual(loaded.study_progress.total_reviews, 2)
        self.assertEqual(loaded.study_progress.easy_count, 1)
        self.assertEqual(loaded.study_progress.hard_count, 1)
        self.assertAlmostEqual(loaded.study_progress.current_interval_multiplier, 0.91)
        self.assertEqual(loaded.study_progress.last_review_date, CREATED + timedelta(days=1))

    def test_new_card_defaults(self):
        card = Flashcard(front_content="Q", back_content="A", created_at=CREATED)
        self.repo.save(card)

        loaded = self.repo.get_by_id(card.id)

        self.assertEqual(loaded.study_progress, StudyProgress())
        self.assertEqual(loaded.text_category, TextCategory.MEDIUM)

    def test_list_and_delete(self):
        card = Flashcard(front_content="Q", back_content="A", created_at=CREATED)
        self.repo.save(card)
        self.assertEqual(len(self.repo.list_all()), 1)

        self.repo.delete(card.id)
        self.assertEqual(self.repo.list_all(), [])


if __name__ == "__main__":
    unittest.main()
