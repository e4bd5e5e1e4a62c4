# 📄 File: app/modules/journal/domain/repositories/journal_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines the contract for how memories are saved, found, listed by year and removed,
# without saying which database technology sits underneath.
# 🧪 Purpose (Technical Summary):
# Repository interface (the Entry Store) for JournalEntry: CRUD, date/year queries,
# aggregates, and live query factories. Holds no domain rules of its own.
# 🔗 Dependencies:
# Domain models, app.shared.core.live_query, typing, abc
# 🔄 Connected Modules / Calls From:
# Journal service, infrastructure implementation, tests

from abc import ABC, abstractmethod
from typing import List, Optional

from app.shared.core.live_query import LiveQuery

from ..models.journal_entry import JournalEntry


class JournalRepository(ABC):
    """
    Repository interface for JournalEntry data access operations.

    Implementation Notes:
    - Methods return domain entities (JournalEntry), not database models
    - All operations are async; each runs in its own session
    - Writes are committed before the call returns (read-your-writes)
    - Every committed write re-emits all live queries of the table
    - Date keys are YYYY-MM-DD local calendar dates, derived with
      app.shared.utils.dates.local_date_key in the repository's zone
    """

    # =========================================================================
    # WRITES
    # =========================================================================

    @abstractmethod
    async def insert(self, entry: JournalEntry) -> int:
        """
        Insert a new entry.

        Returns:
            The newly assigned id

        Raises:
            ConflictError: If an entry already exists for the entry's local date
            StorageError: If the database operation fails
        """
        pass

    @abstractmethod
    async def update(self, entry: JournalEntry) -> JournalEntry:
        """
        Replace the stored row with the same id.

        The row keeps its stored date key unless the timestamp changes, so a
        rewrite under a different calendar zone stays on its original day.

        Raises:
            NotFoundError: If no row has entry.id (never upserts)
            ConflictError: If the new timestamp moves onto another entry's date
            StorageError: If the database operation fails
        """
        pass

    @abstractmethod
    async def delete(self, entry: JournalEntry) -> bool:
        """
        Delete the row with entry.id.

        Returns:
            True if deleted, False if it was already gone
        """
        pass

    # =========================================================================
    # POINT LOOKUPS
    # =========================================================================

    @abstractmethod
    async def get_by_id(self, entry_id: int) -> Optional[JournalEntry]:
        pass

    @abstractmethod
    async def get_by_local_date(self, date_key: str) -> Optional[JournalEntry]:
        """
        Entry for a local calendar date.

        If several rows ever match, the one with the lowest id is returned.
        """
        pass

    # =========================================================================
    # SNAPSHOT QUERIES
    # =========================================================================

    @abstractmethod
    async def get_all_ascending(self) -> List[JournalEntry]:
        """All entries, oldest first (garden layout order)."""
        pass

    @abstractmethod
    async def get_all_descending(self) -> List[JournalEntry]:
        """All entries, newest first."""
        pass

    @abstractmethod
    async def get_by_year(self, year: int, limit: Optional[int] = None) -> List[JournalEntry]:
        """Entries of one local calendar year, newest first; empty list when none."""
        pass

    @abstractmethod
    async def get_recent(self, limit: int) -> List[JournalEntry]:
        """The `limit` newest entries."""
        pass

    @abstractmethod
    async def count(self) -> int:
        pass

    @abstractmethod
    async def min_timestamp(self) -> Optional[int]:
        """Timestamp of the earliest entry, None when the table is empty."""
        pass

    @abstractmethod
    async def distinct_local_years(self) -> List[int]:
        """Years that have at least one entry, newest first."""
        pass

    # =========================================================================
    # LIVE QUERIES
    # =========================================================================

    @abstractmethod
    def observe_all_ascending(self) -> LiveQuery[List[JournalEntry]]:
        pass

    @abstractmethod
    def observe_all_descending(self) -> LiveQuery[List[JournalEntry]]:
        pass

    @abstractmethod
    def observe_by_year(self, year: int) -> LiveQuery[List[JournalEntry]]:
        pass

    @abstractmethod
    def observe_count(self) -> LiveQuery[int]:
        pass

    @abstractmethod
    def observe_min_timestamp(self) -> LiveQuery[Optional[int]]:
        pass

    @abstractmethod
    def observe_distinct_local_years(self) -> LiveQuery[List[int]]:
        pass
