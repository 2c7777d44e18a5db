#!/usr/bin/env python3
"""recallcurve CLI - forgetting-curve reminders from the command line."""
import argparse
import csv
import json
import logging
import sqlite3
import sys
from pathlib import Path
from typing import Optional

from core import ReviewDifficulty, TextCategory, now as local_now
from notifications import SQLiteNotifier
from scheduler import ConflictResolver, NightWindowPolicy, NotificationConflict
from services import RecallService, format_countdown
from storage import FlashcardRepository, RecallItemRepository, connect

logger = logging.getLogger(__name__)


DEFAULT_DB = Path("data/recallcurve.db")
CATEGORIES = [c.value for c in TextCategory]
DIFFICULTIES = [d.value for d in ReviewDifficulty]


def _load_config(db_path: Path) -> dict:
    """Load optional settings from config.json beside the database, else from the working directory."""
    candidates = [db_path.parent / "config.json", Path.cwd() / "config.json"]
    config_path = next((p for p in candidates if p.exists()), None)
    if config_path is None:
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError):
        return {}


def build_service(conn: sqlite3.Connection, config: Optional[dict] = None) -> RecallService:
    config = config or {}
    policy = NightWindowPolicy(
        start_hour=config.get("night_start_hour", NightWindowPolicy.start_hour),
        wake_hour=config.get("wake_hour", NightWindowPolicy.wake_hour),
    )
    return RecallService(
        items=RecallItemRepository(conn),
        flashcards=FlashcardRepository(conn),
        notifier=SQLiteNotifier(conn),
        resolver=ConflictResolver(policy=policy),
    )


def _parse_import_file(path: Path) -> list[dict]:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if path.suffix.lower() == ".jsonl":
        rows = []
        with path.open("r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
                    rows.append(json.loads(line))
        return rows
    if path.suffix.lower() == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(data, list):
            return data
        raise ValueError("JSON file must be a list of objects.")
    if path.suffix.lower() == ".csv":
        with path.open("r", encoding="utf-8-sig", newline="") as f:
            return list(csv.DictReader(f))
    raise ValueError("Unsupported format. Use .jsonl, .json, or .csv")


def _category(value: Optional[str]) -> Optional[TextCategory]:
    return TextCategory(value) if value else None


def _import_category(row: dict) -> Optional[TextCategory]:
    """Category of an import row; unknown values fall back to auto-detection."""
    value = row.get("category")
    category = TextCategory.from_value(value, None)
    if value and category is None:
        logger.warning("Unknown category %r in import row, detecting it instead", value)
    return category


def _accept_postponement(conflict: NotificationConflict, args: argparse.Namespace) -> bool:
    """Decide between the postponed and the original schedule."""
    if args.postpone:
        return True
    if args.schedule_anyway:
        return False
    print(conflict.alert_message)
    for original, postponed in zip(conflict.conflicting_dates, conflict.postponed_dates):
        print(f"  {original:%Y-%m-%d %H:%M} -> {postponed:%Y-%m-%d %H:%M}")
    raw = input("Postpone to the morning? [Y/n] ").strip().lower()
    return raw in {"", "y", "yes"}


def add_item(service: RecallService, args: argparse.Namespace) -> None:
    content = args.text.strip()
    category = _category(args.category)
    now = local_now()
    conflict = service.check_for_conflicts(content, category=category, now=now)
    if conflict is not None and not _accept_postponement(conflict, args):
        conflict = None
    item = service.add_item(content, manual_category=category, conflict=conflict, now=now)
    if item is None:
        print("Nothing to add.")
        return
    print(f"Added item {item.id} ({item.text_category.display_name}).")


def add_flashcard(service: RecallService, args: argparse.Namespace) -> None:
    category = _category(args.category)
    now = local_now()
    conflict = service.check_for_flashcard_conflicts(args.front, args.back, category=category, now=now)
    if conflict is not None and not _accept_postponement(conflict, args):
        conflict = None
    card = service.add_flashcard(args.front, args.back, manual_category=category, conflict=conflict, now=now)
    if card is None:
        print("Both sides of a flashcard are required.")
        return
    print(f"Added flashcard {card.id} ({card.text_category.display_name}).")


def import_items(service: RecallService, args: argparse.Namespace) -> None:
    rows = _parse_import_file(Path(args.file))
    count = 0
    for row in rows:
        if row.get("front") and row.get("back"):
            added = service.add_flashcard(row["front"], row["back"], manual_category=_import_category(row))
        else:
            added = service.add_item((row.get("content") or "").strip(),
                                     manual_category=_import_category(row))
        if added is not None:
            count += 1
    if not count:
        print("No valid items found.")
        return
    print(f"Imported {count} items.")


def classify_text(service: RecallService, args: argparse.Namespace) -> None:
    result = service.analyze_text(args.text)
    print(f"{result.category.display_name}: {result.category.description}")
    print(result.detail_description)


def list_items(service: RecallService, args: argparse.Namespace) -> None:
    items = service.items.list_all()
    if not items:
        print("No items.")
        return

    now = local_now()
    for item in items[:args.limit]:
        upcoming = service.next_reminder_date(item, now=now)
        countdown = format_countdown((upcoming - now).total_seconds()) if upcoming else "Done!"
        manual = " (manual)" if item.is_manually_overridden else ""
        print(
            f"[{item.id}] {item.text_category.display_name}{manual} next in {countdown}\n"
            f"{item.content}\n"
        )


def list_flashcards(service: RecallService, args: argparse.Namespace) -> None:
    cards = service.flashcards.list_all()
    if not cards:
        print("No flashcards.")
        return

    for card in cards[:args.limit]:
        progress = card.study_progress
        print(
            f"[{card.id}] {card.text_category.display_name} "
            f"reviews={progress.total_reviews} success={progress.success_rate:.0%} "
            f"x{progress.current_interval_multiplier:.2f} ({progress.average_difficulty})\n"
            f"Q: {card.front_preview}\n"
        )


def review(service: RecallService, args: argparse.Namespace) -> None:
    cards = [service.get_flashcard(args.card)] if args.card else service.flashcards.list_all()[:args.limit]
    if not cards:
        print("No flashcards to review.")
        return

    reviewed = 0
    for card in cards:
        print(f"\n[{card.id}] {card.front_content}")
        if args.difficulty is None:
            input("Press Enter to reveal the answer...")
            print(card.back_content)
            raw = input("Rate recall h(ard)/g(ood)/e(asy) (q to quit): ").strip().lower()
            if raw == "q":
                break
            choices = {d.value[0]: d for d in ReviewDifficulty}
            if raw[:1] not in choices:
                print("Invalid rating. Skipping.")
                continue
            difficulty = choices[raw[:1]]
        else:
            difficulty = ReviewDifficulty(args.difficulty)

        updated = service.record_review(card.id, difficulty, postpone=args.postpone)
        reviewed += 1
        print(f"Rated {difficulty.value}, multiplier now x{updated.study_progress.current_interval_multiplier:.2f}")

    print(f"\nReviewed {reviewed} flashcard(s).")


def set_category(service: RecallService, args: argparse.Namespace) -> None:
    category = TextCategory(args.category)
    if service.items.get_by_id(args.id) is not None:
        item = service.update_category(args.id, category)
        print(f"Item {item.id} is now {category.display_name}.")
    else:
        card = service.update_flashcard_category(args.id, category)
        print(f"Flashcard {card.id} is now {category.display_name}.")


def reset_card(service: RecallService, args: argparse.Namespace) -> None:
    service.reset_progress(args.id)
    print(f"Progress reset for {args.id}.")


def delete(service: RecallService, args: argparse.Namespace) -> None:
    if service.items.get_by_id(args.id) is not None:
        service.delete_item(args.id)
    else:
        service.delete_flashcard(args.id)
    print(f"Deleted {args.id}.")


def pending(service: RecallService, args: argparse.Namespace) -> None:
    notifications = service.pending_notifications()
    if not notifications:
        print("No pending reminders.")
        return
    for n in notifications[:args.limit]:
        print(f"{n.fire_at:%Y-%m-%d %H:%M:%S}  {n.title}  {n.body}")


def notify(service: RecallService, args: argparse.Namespace) -> None:
    if args.cancel_all:
        service.cancel_all_pending_notifications()
        print("Cancelled all pending reminders.")
        return
    due = service.notifier.dispatch_due(local_now())
    for n in due:
        print(f"🔔 {n.title} {n.body}")
    if not due:
        print("Nothing due.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="recallcurve: forgetting-curve reminders.")
    parser.add_argument("--db", default=str(DEFAULT_DB), help="SQLite database path.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    def conflict_flags(p: argparse.ArgumentParser) -> None:
        group = p.add_mutually_exclusive_group()
        group.add_argument("--postpone", action="store_true", help="Move night reminders to the morning.")
        group.add_argument("--schedule-anyway", action="store_true", help="Keep night reminders.")

    p_add = sub.add_parser("add", help="Add one recall item.")
    p_add.add_argument("--text", required=True, help="Content to remember.")
    p_add.add_argument("--category", choices=CATEGORIES, help="Override the detected category.")
    conflict_flags(p_add)
    p_add.set_defaults(func=add_item)

    p_card = sub.add_parser("add-card", help="Add one flashcard.")
    p_card.add_argument("--front", required=True, help="Question side.")
    p_card.add_argument("--back", required=True, help="Answer side.")
    p_card.add_argument("--category", choices=CATEGORIES, help="Override the detected category.")
    conflict_flags(p_card)
    p_card.set_defaults(func=add_flashcard)

    p_import = sub.add_parser("import", help="Import items/flashcards from json/jsonl/csv.")
    p_import.add_argument("--file", required=True, help="Input file path.")
    p_import.set_defaults(func=import_items)

    p_classify = sub.add_parser("classify", help="Show the detected category of a text.")
    p_classify.add_argument("--text", required=True)
    p_classify.set_defaults(func=classify_text)

    p_list = sub.add_parser("list", help="List recall items.")
    p_list.add_argument("--limit", type=int, default=20, help="Max items.")
    p_list.set_defaults(func=list_items)

    p_cards = sub.add_parser("cards", help="List flashcards.")
    p_cards.add_argument("--limit", type=int, default=20, help="Max items.")
    p_cards.set_defaults(func=list_flashcards)

    p_review = sub.add_parser("review", help="Review flashcards.")
    p_review.add_argument("--card", help="Review a single flashcard.")
    p_review.add_argument("--limit", type=int, default=10, help="Max flashcards.")
    p_review.add_argument("--difficulty", choices=DIFFICULTIES, help="Apply one rating non-interactively.")
    p_review.add_argument("--postpone", action="store_true", help="Move night reminders to the morning.")
    p_review.set_defaults(func=review)

    p_set = sub.add_parser("set-category", help="Override the category of an item or flashcard.")
    p_set.add_argument("id")
    p_set.add_argument("category", choices=CATEGORIES)
    p_set.set_defaults(func=set_category)

    p_reset = sub.add_parser("reset", help="Reset a flashcard's study progress.")
    p_reset.add_argument("id")
    p_reset.set_defaults(func=reset_card)

    p_delete = sub.add_parser("delete", help="Delete an item or flashcard.")
    p_delete.add_argument("id")
    p_delete.set_defaults(func=delete)

    p_pending = sub.add_parser("pending", help="List pending reminders.")
    p_pending.add_argument("--limit", type=int, default=50)
    p_pending.set_defaults(func=pending)

    p_notify = sub.add_parser("notify", help="Deliver reminders that are due.")
    p_notify.add_argument("--cancel-all", action="store_true", help="Drop every pending reminder.")
    p_notify.set_defaults(func=notify)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    conn = connect(Path(args.db))
    try:
        args.func(build_service(conn, _load_config(Path(args.db))), args)
    except KeyError as exc:
        print(exc.args[0], file=sys.stderr)
        return 1
    except (OSError, ValueError) as exc:
        print(exc, file=sys.stderr)
        return 1
    finally:
        conn.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
