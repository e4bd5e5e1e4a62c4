from .journal_repository import JournalRepository

__all__ = ["JournalRepository"]
