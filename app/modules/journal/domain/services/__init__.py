from .journal_service import JournalService

__all__ = ["JournalService"]
