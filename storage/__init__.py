# Storage layer
from .db import connect, migrate, SCHEMA_SQL
from .repository import (
    FlashcardRepository,
    FlashcardStore,
    InMemoryFlashcardStore,
    InMemoryRecallItemStore,
    RecallItemRepository,
    RecallItemStore,
)

__all__ = [
    "connect",
    "migrate",
    "SCHEMA_SQL",
    "RecallItemRepository",
    "FlashcardRepository",
    "RecallItemStore",
    "FlashcardStore",
    "InMemoryRecallItemStore",
    "InMemoryFlashcardStore",
]
