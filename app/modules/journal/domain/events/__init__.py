from .journal_events import (
    JOURNAL_ENTRIES_TOPIC,
    JournalEntryCreated,
    JournalEntryDeleted,
    JournalEntryEvent,
    JournalEntryUpdated,
)

__all__ = [
    "JOURNAL_ENTRIES_TOPIC",
    "JournalEntryCreated",
    "JournalEntryDeleted",
    "JournalEntryEvent",
    "JournalEntryUpdated",
]
