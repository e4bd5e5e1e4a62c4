# 📄 File: app/modules/journal/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# This file defines how memories are stored in the journal's local database table,
# including the rule that one calendar day can hold only one memory.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM model for the journal_entries table, with a unique derived local_date
# column (one entry per calendar day) and check constraints on cosmetic ranges.
#
# 🔗 Dependencies:
# - SQLAlchemy ORM
# - app.shared.config.database (declarative base)
#
# 🔄 Connected Modules / Calls From:
# - journal_repository_impl.py (CRUD operations)
# - app.shared.config.database.create_schema (table creation)

"""
SQLAlchemy Models for the Journal

Models:
- JournalEntryModel: one row per local calendar day

The local_date column stores the YYYY-MM-DD key derived from timestamp at write
time. Its unique constraint is what keeps two concurrent saves for the same day
from both inserting.
"""

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Column,
    Float,
    Integer,
    String,
    Text,
)

from app.shared.config.database import DatabaseBase


# =============================================================================
# JOURNAL ENTRY MODEL
# =============================================================================

class JournalEntryModel(DatabaseBase):
    """
    SQLAlchemy model for a single day's memory.
    """
    __tablename__ = "journal_entries"

    __table_args__ = (
        CheckConstraint("icon_variant BETWEEN 1 AND 8", name="icon_variant_range"),
        CheckConstraint("grid_x >= 0.0 AND grid_x <= 1.0", name="grid_x_range"),
        CheckConstraint("grid_y >= 0.0 AND grid_y <= 1.0", name="grid_y_range"),
    )

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Entry identifier, assigned on insert"
    )

    text = Column(
        Text,
        nullable=False,
        comment="Memory text"
    )

    timestamp = Column(
        BigInteger,
        nullable=False,
        index=True,
        comment="Epoch milliseconds of the moment the memory belongs to"
    )

    local_date = Column(
        String(10),
        nullable=False,
        unique=True,
        comment="Local calendar date (YYYY-MM-DD) derived from timestamp"
    )

    icon_type = Column(
        String(32),
        nullable=False,
        default="simple",
        comment="Icon category"
    )

    icon_variant = Column(
        Integer,
        nullable=False,
        default=1,
        comment="Cosmetic variant within the icon type (1-8)"
    )

    grid_x = Column(
        Float,
        nullable=False,
        default=0.0,
        comment="Horizontal scatter position (0.0-1.0)"
    )

    grid_y = Column(
        Float,
        nullable=False,
        default=0.0,
        comment="Vertical scatter position (0.0-1.0)"
    )

    def __repr__(self) -> str:
        return f"<JournalEntryModel(id={self.id}, local_date={self.local_date})>"
