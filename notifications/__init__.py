# Notification delivery layer
"""
Reminder delivery is outside the scheduling core. The core hands over an
ordered list of fire times plus a title; a Notifier keeps them until they are due.

Providers:
- SQLiteNotifier: persistent queue polled by a dispatcher (``recallcurve notify``)
- InMemoryNotifier: test double
"""
import datetime as dt
import logging
import sqlite3
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol

logger = logging.getLogger(__name__)

RECALL_KIND = "recall"
FLASHCARD_KIND = "flashcard"


@dataclass
class PendingNotification:
    """One scheduled reminder."""
    item_id: str
    kind: str
    title: str
    body: str
    fire_at: dt.datetime
    id: Optional[int] = None


class Notifier(Protocol):
    """Protocol for notification delivery."""

    def request_authorization(self) -> bool:
        """Ask for permission to deliver reminders."""
        ...

    def schedule(self, item_id: str, kind: str, title: str, body: str,
                 fire_times: Iterable[dt.datetime]) -> None:
        """Schedule one reminder per fire time."""
        ...

    def cancel(self, item_id: str) -> None:
        """Cancel every pending reminder of an item."""
        ...

    def cancel_all(self) -> None:
        ...

    def pending(self) -> list[PendingNotification]:
        """Pending reminders ordered by fire time."""
        ...


class InMemoryNotifier:
    """Keeps reminders in a list. Used by tests."""

    def __init__(self):
        self.notifications: list[PendingNotification] = []
        self.authorized = False

    @property
    def name(self) -> str:
        return "memory"

    def request_authorization(self) -> bool:
        self.authorized = True
        return True

    def schedule(self, item_id: str, kind: str, title: str, body: str,
                 fire_times: Iterable[dt.datetime]) -> None:
        for fire_at in fire_times:
            self.notifications.append(PendingNotification(item_id, kind, title, body, fire_at))

    def cancel(self, item_id: str) -> None:
        self.notifications = [n for n in self.notifications if n.item_id != item_id]

    def cancel_all(self) -> None:
        self.notifications = []

    def pending(self) -> list[PendingNotification]:
        return sorted(self.notifications, key=lambda n: n.fire_at)

    def for_item(self, item_id: str) -> list[dt.datetime]:
        """Fire times scheduled for one item, sorted."""
        return sorted(n.fire_at for n in self.notifications if n.item_id == item_id)


class SQLiteNotifier:
    """Persists reminders in the ``notifications`` table.

    Fire times are stored as UTC ISO strings so they sort and compare as text.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    @property
    def name(self) -> str:
        return "sqlite"

    def request_authorization(self) -> bool:
        # Local queue, nothing to grant
        return True

    @staticmethod
    def _to_utc(value: dt.datetime) -> str:
        return value.astimezone(dt.timezone.utc).isoformat(timespec="seconds")

    def _from_row(self, row: sqlite3.Row) -> PendingNotification:
        return PendingNotification(
            id=row["id"],
            item_id=row["item_id"],
            kind=row["kind"],
            title=row["title"],
            body=row["body"],
            fire_at=dt.datetime.fromisoformat(row["fire_at"]).astimezone(),
        )

    def schedule(self, item_id: str, kind: str, title: str, body: str,
                 fire_times: Iterable[dt.datetime]) -> None:
        values = [(item_id, kind, title, body, self._to_utc(t)) for t in fire_times]
        self.conn.executemany(
            """
            INSERT INTO notifications (item_id, kind, title, body, fire_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            values,
        )
        self.conn.commit()
        logger.info("Scheduled %d %s reminders for %s", len(values), kind, item_id)

    def cancel(self, item_id: str) -> None:
        cursor = self.conn.execute(
            "DELETE FROM notifications WHERE item_id = ? AND delivered = 0", (item_id,)
        )
        self.conn.commit()
        logger.info("Cancelled %d reminders for %s", cursor.rowcount, item_id)

    def cancel_all(self) -> None:
        self.conn.execute("DELETE FROM notifications WHERE delivered = 0")
        self.conn.commit()

    def pending(self) -> list[PendingNotification]:
        rows = self.conn.execute(
            "SELECT * FROM notifications WHERE delivered = 0 ORDER BY fire_at ASC, id ASC"
        ).fetchall()
        return [self._from_row(row) for row in rows]

    def dispatch_due(self, now: dt.datetime) -> list[PendingNotification]:
        """Mark every reminder due at ``now`` as delivered and return them."""
        rows = self.conn.execute(
            """
            SELECT * FROM notifications
            WHERE delivered = 0 AND fire_at <= ?
            ORDER BY fire_at ASC, id ASC
            """,
            (self._to_utc(now),),
        ).fetchall()
        if rows:
            self.conn.executemany(
                "UPDATE notifications SET delivered = 1 WHERE id = ?",
                [(row["id"],) for row in rows],
            )
            self.conn.commit()
        return [self._from_row(row) for row in rows]


def get_notifier(conn: Optional[sqlite3.Connection] = None) -> Notifier:
    """Return the SQLite notifier when a connection is given, the in-memory one otherwise."""
    if conn is not None:
        return SQLiteNotifier(conn)
    return InMemoryNotifier()


__all__ = [
    "RECALL_KIND",
    "FLASHCARD_KIND",
    "PendingNotification",
    "Notifier",
    "InMemoryNotifier",
    "SQLiteNotifier",
    "get_notifier",
]
