from .journal_entry import ICON_VARIANT_MAX, ICON_VARIANT_MIN, IconType, JournalEntry

__all__ = [
    "ICON_VARIANT_MAX",
    "ICON_VARIANT_MIN",
    "IconType",
    "JournalEntry",
]
