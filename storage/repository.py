import datetime as dt
import logging
import sqlite3
from typing import Optional, Protocol

from core import Flashcard, RecallItem, StudyProgress, TextCategory
from core.constants import DEFAULT_LEGACY_CATEGORY

logger = logging.getLogger(__name__)

LEGACY_DEFAULT = TextCategory(DEFAULT_LEGACY_CATEGORY)


def iso_datetime(value: Optional[dt.datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


def parse_datetime(value: Optional[str]) -> Optional[dt.datetime]:
    if not value:
        return None
    return dt.datetime.fromisoformat(value)


def decode_category(value: Optional[str], default: TextCategory, record_id: str) -> TextCategory:
    """Decode a stored category, substituting ``default`` for legacy rows."""
    category = TextCategory.from_value(value, default)
    if value is None or category.value != str(value).strip().lower():
        logger.warning("Record %s has category %r, using %s", record_id, value, category.value)
    return category


class RecallItemStore(Protocol):
    """Protocol for recall item persistence."""

    def save(self, item: RecallItem) -> None:
        ...

    def get_by_id(self, item_id: str) -> Optional[RecallItem]:
        ...

    def list_all(self) -> list[RecallItem]:
        ...

    def delete(self, item_id: str) -> None:
        ...


class FlashcardStore(Protocol):
    """Protocol for flashcard persistence."""

    def save(self, card: Flashcard) -> None:
        ...

    def get_by_id(self, card_id: str) -> Optional[Flashcard]:
        ...

    def list_all(self) -> list[Flashcard]:
        ...

    def delete(self, card_id: str) -> None:
        ...


class RecallItemRepository:
    """SQLite repository for recall items."""

    def __init__(self, conn: sqlite3.Connection, default_category: TextCategory = LEGACY_DEFAULT):
        self.conn = conn
        self.default_category = default_category

    def _from_row(self, row: sqlite3.Row) -> RecallItem:
        return RecallItem(
            id=row["id"],
            content=row["content"],
            created_at=parse_datetime(row["created_at"]),
            text_category=decode_category(row["text_category"], self.default_category, row["id"]),
            is_manually_overridden=bool(row["is_manually_overridden"]),
        )

    def save(self, item: RecallItem) -> None:
        """Insert or replace an item."""
        self.conn.execute(
            """
            INSERT OR REPLACE INTO recall_items (id, content, created_at, text_category, is_manually_overridden)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                item.id,
                item.content,
                iso_datetime(item.created_at),
                TextCategory(item.text_category).value,
                int(item.is_manually_overridden),
            ),
        )
        self.conn.commit()

    def get_by_id(self, item_id: str) -> Optional[RecallItem]:
        row = self.conn.execute("SELECT * FROM recall_items WHERE id = ?", (item_id,)).fetchone()
        if row:
            return self._from_row(row)
        return None

    def list_all(self) -> list[RecallItem]:
        """List items, newest first."""
        rows = self.conn.execute(
            "SELECT * FROM recall_items ORDER BY created_at DESC, rowid DESC"
        ).fetchall()
        return [self._from_row(row) for row in rows]

    def delete(self, item_id: str) -> None:
        self.conn.execute("DELETE FROM recall_items WHERE id = ?", (item_id,))
        self.conn.commit()


class FlashcardRepository:
    """SQLite repository for flashcards and their study progress."""

    def __init__(self, conn: sqlite3.Connection, default_category: TextCategory = LEGACY_DEFAULT):
        self.conn = conn
        self.default_category = default_category

    def _from_row(self, row: sqlite3.Row) -> Flashcard:
        progress = StudyProgress(
            total_reviews=row["total_reviews"],
            hard_count=row["hard_count"],
            good_count=row["good_count"],
            easy_count=row["easy_count"],
            last_review_date=parse_datetime(row["last_review_date"]),
            current_interval_multiplier=row["interval_multiplier"],
        )
        return Flashcard(
            id=row["id"],
            front_content=row["front_content"],
            back_content=row["back_content"],
            created_at=parse_datetime(row["created_at"]),
            text_category=decode_category(row["text_category"], self.default_category, row["id"]),
            is_manually_overridden=bool(row["is_manually_overridden"]),
            study_progress=progress,
        )

    def save(self, card: Flashcard) -> None:
        """Insert or replace a flashcard."""
        progress = card.study_progress
        self.conn.execute(
            """
            INSERT OR REPLACE INTO flashcards (
                id, front_content, back_content, created_at, text_category, is_manually_overridden,
                total_reviews, hard_count, good_count, easy_count, last_review_date, interval_multiplier
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                card.id,
                card.front_content,
                card.back_content,
                iso_datetime(card.created_at),
                TextCategory(card.text_category).value,
                int(card.is_manually_overridden),
                progress.total_reviews,
                progress.hard_count,
                progress.good_count,
                progress.easy_count,
                iso_datetime(progress.last_review_date),
                progress.current_interval_multiplier,
            ),
        )
        self.conn.commit()

    def get_by_id(self, card_id: str) -> Optional[Flashcard]:
        row = self.conn.execute("SELECT * FROM flashcards WHERE id = ?", (card_id,)).fetchone()
        if row:
            return self._from_row(row)
        return None

    def list_all(self) -> list[Flashcard]:
        """List flashcards, newest first."""
        rows = self.conn.execute(
            "SELECT * FROM flashcards ORDER BY created_at DESC, rowid DESC"
        ).fetchall()
        return [self._from_row(row) for row in rows]

    def delete(self, card_id: str) -> None:
        self.conn.execute("DELETE FROM flashcards WHERE id = ?", (card_id,))
        self.conn.commit()


class InMemoryRecallItemStore:
    """Dictionary-backed store for tests."""

    def __init__(self, items: Optional[list[RecallItem]] = None):
        self.items: dict[str, RecallItem] = {item.id: item for item in items or []}

    def save(self, item: RecallItem) -> None:
        self.items[item.id] = item

    def get_by_id(self, item_id: str) -> Optional[RecallItem]:
        return self.items.get(item_id)

    def list_all(self) -> list[RecallItem]:
        return sorted(self.items.values(), key=lambda item: item.created_at, reverse=True)

    def delete(self, item_id: str) -> None:
        self.items.pop(item_id, None)


class InMemoryFlashcardStore:
    """Dictionary-backed store for tests."""

    def __init__(self, cards: Optional[list[Flashcard]] = None):
        self.cards: dict[str, Flashcard] = {card.id: card for card in cards or []}

    def save(self, card: Flashcard) -> None:
        self.cards[card.id] = card

    def get_by_id(self, card_id: str) -> Optional[Flashcard]:
        return self.cards.get(card_id)

    def list_all(self) -> list[Flashcard]:
        return sorted(self.cards.values(), key=lambda card: card.created_at, reverse=True)

    def delete(self, card_id: str) -> None:
        self.cards.pop(card_id, None)
