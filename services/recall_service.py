# Recall Service
"""
Application flows around the scheduling core: add, recategorize, review and
delete items, and hand the resulting schedules to a notifier.

Collaborators are passed in; nothing here is a process-wide singleton.
"""
import datetime as dt
import logging
import threading
from dataclasses import replace
from typing import Any, Callable, Optional

from analysis import ClassificationResult, TextClassifier, default_classifier
from core import Flashcard, RecallItem, ReviewDifficulty, TextCategory, now as local_now
from core.constants import FLASHCARD_NOTIFICATION_TITLE, FRONT_CONTENT_PREVIEW_LENGTH, RECALL_NOTIFICATION_TITLE
from notifications import FLASHCARD_KIND, RECALL_KIND, Notifier, PendingNotification
from scheduler import ConflictResolver, ForgettingCurve, NotificationConflict, default_curve
from scheduler import review
from storage import FlashcardStore, RecallItemStore

from .debounce import Debouncer

logger = logging.getLogger(__name__)


class RecallService:
    """Manages recall items and flashcards and their reminder schedules."""

    def __init__(
        self,
        items: RecallItemStore,
        flashcards: FlashcardStore,
        notifier: Notifier,
        classifier: TextClassifier = default_classifier,
        resolver: Optional[ConflictResolver] = None,
        curve: ForgettingCurve = default_curve,
        clock: Callable[[], dt.datetime] = local_now,
    ):
        self.items = items
        self.flashcards = flashcards
        self.notifier = notifier
        self.classifier = classifier
        self.curve = curve
        self.resolver = resolver or ConflictResolver(curve=curve)
        self.clock = clock
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, card_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(card_id, threading.Lock())

    # Text analysis

    def analyze_text(self, content: str) -> ClassificationResult:
        return self.classifier.classify(content)

    def determine_category(self, content: str) -> TextCategory:
        return self.classifier.classify(content).category

    def live_analyzer(self, on_result: Callable[[str, ClassificationResult], None], **kwargs: Any) -> Debouncer:
        """Debounced ``analyze_text`` for text being typed."""
        return Debouncer(self.analyze_text, on_result, **kwargs)

    def request_notification_permission(self) -> bool:
        return self.notifier.request_authorization()

    # Scheduling helpers

    def _schedule(self, item_id: str, kind: str, title: str, body: str,
                  dates: list[dt.datetime], now: dt.datetime) -> int:
        upcoming = [date for date in dates if date > now]
        self.notifier.schedule(item_id, kind, title, body, upcoming)
        return len(upcoming)

    @staticmethod
    def _choose_category(content: str, manual: Optional[TextCategory],
                         classifier: TextClassifier) -> tuple[TextCategory, bool]:
        if manual is not None:
            return TextCategory(manual), True
        return classifier.classify(content).category, False

    # Recall items

    def check_for_conflicts(self, content: str, category: Optional[TextCategory] = None,
                            now: Optional[dt.datetime] = None) -> Optional[NotificationConflict]:
        """Return the night-window conflict adding ``content`` would cause, if any."""
        if not content.strip():
            return None
        category = TextCategory(category) if category is not None else self.determine_category(content)
        item = RecallItem(content=content, created_at=now or self.clock(), text_category=category)
        return self.resolver.resolve(item, item.created_at, category)

    def add_item(self, content: str, manual_category: Optional[TextCategory] = None,
                 conflict: Optional[NotificationConflict] = None,
                 now: Optional[dt.datetime] = None) -> Optional[RecallItem]:
        """Add an item and schedule its reminders.

        Args:
            content: Text to remember; blank content is ignored
            manual_category: Category chosen by the user, auto-detected when None
            conflict: Accepted conflict from ``check_for_conflicts``; its final
                schedule replaces the original one
            now: Creation time, read once from the clock when omitted

        Returns:
            The stored item, or None for blank content
        """
        if not content.strip():
            return None
        category, overridden = self._choose_category(content, manual_category, self.classifier)

        if conflict is not None and isinstance(conflict.item, RecallItem):
            item = replace(conflict.item, content=content, text_category=category,
                           is_manually_overridden=overridden)
            dates = conflict.final_schedule
        else:
            item = RecallItem(content=content, created_at=now or self.clock(),
                              text_category=category, is_manually_overridden=overridden)
            dates = self.curve.reminder_timestamps(item.created_at, category)

        self.items.save(item)
        scheduled = self._schedule(item.id, RECALL_KIND, RECALL_NOTIFICATION_TITLE,
                                   item.content[:FRONT_CONTENT_PREVIEW_LENGTH], dates, item.created_at)
        logger.info("Added item %s (%s), %d reminders", item.id, category.value, scheduled)
        return item

    def get_item(self, item_id: str) -> RecallItem:
        item = self.items.get_by_id(item_id)
        if item is None:
            raise KeyError(f"Recall item not found: {item_id}")
        return item

    def delete_item(self, item_id: str) -> None:
        """Delete an item and cancel its reminders."""
        item = self.get_item(item_id)
        self.notifier.cancel(item.id)
        self.items.delete(item.id)
        logger.info("Deleted item %s", item.id)

    def check_for_update_conflicts(self, item_id: str, category: TextCategory) -> Optional[NotificationConflict]:
        item = self.get_item(item_id)
        return self.resolver.resolve(item, item.created_at, category)

    def update_category(self, item_id: str, category: TextCategory,
                        conflict: Optional[NotificationConflict] = None,
                        now: Optional[dt.datetime] = None) -> RecallItem:
        """Override an item's category and reschedule its remaining reminders."""
        category = TextCategory(category)
        item = replace(self.get_item(item_id), text_category=category, is_manually_overridden=True)
        self.notifier.cancel(item.id)
        self.items.save(item)
        if conflict is not None:
            dates = conflict.final_schedule
        else:
            dates = self.curve.reminder_timestamps(item.created_at, category)
        self._schedule(item.id, RECALL_KIND, RECALL_NOTIFICATION_TITLE,
                       item.content[:FRONT_CONTENT_PREVIEW_LENGTH], dates, now or self.clock())
        logger.info("Item %s moved to %s", item.id, category.value)
        return item

    def reminder_dates(self, item: RecallItem) -> list[dt.datetime]:
        return self.curve.reminder_timestamps(item.created_at, item.text_category)

    def next_reminder_date(self, item: RecallItem, now: Optional[dt.datetime] = None) -> Optional[dt.datetime]:
        return self.curve.next_reminder(item.created_at, item.text_category, now or self.clock())

    # Flashcards

    @staticmethod
    def _review_anchor(card: Flashcard) -> dt.datetime:
        return card.study_progress.last_review_date or card.created_at

    def check_for_flashcard_conflicts(self, front: str, back: str,
                                      category: Optional[TextCategory] = None,
                                      now: Optional[dt.datetime] = None) -> Optional[NotificationConflict]:
        if not front.strip() or not back.strip():
            return None
        card = Flashcard(front_content=front, back_content=back, created_at=now or self.clock())
        card.text_category = (TextCategory(category) if category is not None
                              else self.determine_category(card.combined_content))
        return self.resolver.resolve(card, card.created_at, card.text_category,
                                     multiplier=card.study_progress.current_interval_multiplier)

    def add_flashcard(self, front: str, back: str, manual_category: Optional[TextCategory] = None,
                      conflict: Optional[NotificationConflict] = None,
                      now: Optional[dt.datetime] = None) -> Optional[Flashcard]:
        """Add a flashcard and schedule reminders with its adaptive multiplier."""
        if not front.strip() or not back.strip():
            return None
        combined = f"{front} {back}"
        category, overridden = self._choose_category(combined, manual_category, self.classifier)

        if conflict is not None and isinstance(conflict.item, Flashcard):
            card = replace(conflict.item, front_content=front, back_content=back,
                           text_category=category, is_manually_overridden=overridden)
            dates = conflict.final_schedule
        else:
            card = Flashcard(front_content=front, back_content=back, created_at=now or self.clock(),
                             text_category=category, is_manually_overridden=overridden)
            dates = self.flashcard_reminder_dates(card)

        self.flashcards.save(card)
        scheduled = self._schedule(card.id, FLASHCARD_KIND, FLASHCARD_NOTIFICATION_TITLE,
                                   card.front_preview, dates, card.created_at)
        logger.info("Added flashcard %s (%s), %d reminders", card.id, category.value, scheduled)
        return card

    def get_flashcard(self, card_id: str) -> Flashcard:
        card = self.flashcards.get_by_id(card_id)
        if card is None:
            raise KeyError(f"Flashcard not found: {card_id}")
        return card

    def delete_flashcard(self, card_id: str) -> None:
        try:
            with self._lock_for(card_id):
                card = self.get_flashcard(card_id)
                self.notifier.cancel(card.id)
                self.flashcards.delete(card.id)
        finally:
            with self._locks_guard:
                self._locks.pop(card_id, None)
        logger.info("Deleted flashcard %s", card.id)

    def flashcard_reminder_dates(self, card: Flashcard) -> list[dt.datetime]:
        """Adjusted schedule counted from the last review (or creation)."""
        return self.curve.adjusted_reminder_timestamps(
            self._review_anchor(card), card.text_category,
            card.study_progress.current_interval_multiplier,
        )

    def _reschedule_flashcard(self, card: Flashcard, now: dt.datetime, postpone: bool) -> None:
        self.notifier.cancel(card.id)
        dates = self.flashcard_reminder_dates(card)
        if postpone:
            conflict = self.resolver.resolve_schedule(card, dates)
            if conflict is not None:
                dates = conflict.final_schedule
        self._schedule(card.id, FLASHCARD_KIND, FLASHCARD_NOTIFICATION_TITLE,
                       card.front_preview, dates, now)

    def record_review(self, card_id: str, difficulty: ReviewDifficulty,
                      now: Optional[dt.datetime] = None, postpone: bool = False) -> Flashcard:
        """Record a review, update the multiplier and reschedule from the review time.

        Reviews of the same card are serialized.
        """
        now = now or self.clock()
        with self._lock_for(card_id):
            card = self.get_flashcard(card_id)
            card = replace(card, study_progress=review.record_review(card.study_progress, difficulty, now=now))
            self.flashcards.save(card)
            self._reschedule_flashcard(card, now, postpone)
        logger.info(
            "Reviewed flashcard %s as %s, multiplier %.3f",
            card.id, ReviewDifficulty(difficulty).value, card.study_progress.current_interval_multiplier,
        )
        return card

    def reset_progress(self, card_id: str, now: Optional[dt.datetime] = None) -> Flashcard:
        """Start a card's learning over: counters cleared, schedule counted from creation."""
        now = now or self.clock()
        with self._lock_for(card_id):
            card = self.get_flashcard(card_id)
            card = replace(card, study_progress=review.reset(card.study_progress))
            self.flashcards.save(card)
            self._reschedule_flashcard(card, now, postpone=False)
        return card

    def update_flashcard_category(self, card_id: str, category: TextCategory,
                                  now: Optional[dt.datetime] = None, postpone: bool = False) -> Flashcard:
        now = now or self.clock()
        with self._lock_for(card_id):
            card = replace(self.get_flashcard(card_id), text_category=TextCategory(category),
                           is_manually_overridden=True)
            self.flashcards.save(card)
            self._reschedule_flashcard(card, now, postpone)
        return card

    # Notifications

    def pending_notifications(self) -> list[PendingNotification]:
        return self.notifier.pending()

    def cancel_all_pending_notifications(self) -> None:
        self.notifier.cancel_all()
        logger.info("Cancelled all pending reminders")
