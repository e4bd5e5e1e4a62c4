# 📄 File: app/modules/journal/domain/events/journal_events.py
# 🧭 Purpose (Layman Explanation):
# Defines the announcements the journal makes when a memory is planted, rewritten or removed,
# so the garden screen and widgets know to redraw.
# 🧪 Purpose (Technical Summary):
# Domain events for the journal_entries aggregate, published on the event bus by the
# repository after each committed mutation; live queries subscribe by table topic.
# 🔗 Dependencies:
# app.shared.core.event_bus
# 🔄 Connected Modules / Calls From:
# journal_repository_impl.py (publisher), live queries (subscribers via topic)

from typing import Optional

from app.shared.core.event_bus import DomainEvent

from ..models.journal_entry import JournalEntry

# Aggregate type doubles as the bus topic for "anything in the table changed"
JOURNAL_ENTRIES_TOPIC = "journal_entries"


class JournalEntryEvent(DomainEvent):
    """Base for journal entry events; carries the entry id, date key and icon."""

    EVENT_TYPE = "journal_entry.changed"

    @classmethod
    def from_entry(cls, entry: JournalEntry, date_key: Optional[str] = None) -> "JournalEntryEvent":
        return cls(
            event_type=cls.EVENT_TYPE,
            aggregate_id=str(entry.id),
            aggregate_type=JOURNAL_ENTRIES_TOPIC,
            metadata={
                "date_key": date_key,
                "icon_type": entry.icon_type.value,
                "icon_variant": entry.icon_variant,
            },
        )


class JournalEntryCreated(JournalEntryEvent):
    """
    A memory was planted for a day that had none.

    Triggers:
    - Garden and widget live views re-query
    """
    EVENT_TYPE = "journal_entry.created"


class JournalEntryUpdated(JournalEntryEvent):
    """
    A day's memory was rewritten (text, icon type, re-rolled variant).

    Triggers:
    - Garden and widget live views re-query
    """
    EVENT_TYPE = "journal_entry.updated"


class JournalEntryDeleted(JournalEntryEvent):
    """
    A memory was removed.

    Triggers:
    - Garden and widget live views re-query
    - Garden year selection fallback
    """
    EVENT_TYPE = "journal_entry.deleted"
