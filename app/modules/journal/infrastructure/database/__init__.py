from .models import JournalEntryModel
from .journal_repository_impl import JournalRepositoryImpl

__all__ = [
    "JournalEntryModel",
    "JournalRepositoryImpl",
]
