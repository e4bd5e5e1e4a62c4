# 📄 File: app/modules/journal/domain/models/journal_entry.py
# 🧭 Purpose (Layman Explanation):
# Defines what a "memory" is in Plant Memory: the words written for a day, the moment it
# belongs to, and which little plant (and which drawing of it) shows up in the garden.
# 🧪 Purpose (Technical Summary):
# Domain model for JournalEntry with field-level validation and the closed IconType
# enumeration; the calendar-date key is derived, never stored on the domain object.
# 🔗 Dependencies:
# pydantic, enum, app.shared.utils.dates
# 🔄 Connected Modules / Calls From:
# journal_service.py, journal_repository.py, journal_repository_impl.py, read projections

from enum import Enum
from datetime import tzinfo
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.shared.utils.dates import local_date_key, local_year

ICON_VARIANT_MIN = 1
ICON_VARIANT_MAX = 8


class IconType(str, Enum):
    """Icon categories a memory can be drawn as."""
    # Original plant types
    SIMPLE = "simple"
    TREE = "tree"
    CLUSTER = "cluster"
    GRASS = "grass"
    MUSHROOM = "mushroom"

    # Flowers
    SUNFLOWER = "sunflower"
    TULIP = "tulip"
    ROSE = "rose"
    DAISY = "daisy"

    # Plants
    CACTUS = "cactus"
    LEAF = "leaf"
    SEEDLING = "seedling"
    CLOVER = "clover"
    FERN = "fern"

    # Creatures
    BUTTERFLY = "butterfly"
    BEE = "bee"
    LADYBUG = "ladybug"
    SNAIL = "snail"
    BIRD = "bird"
    CAT = "cat"

    # Weather/Sky
    SUN = "sun"
    MOON = "moon"
    STAR = "star"
    CLOUD = "cloud"
    RAINBOW = "rainbow"
    RAINDROP = "raindrop"

    # Garden/Nature
    WATERING_CAN = "watering_can"
    POT = "pot"
    ACORN = "acorn"
    PINECONE = "pinecone"
    BIRDHOUSE = "birdhouse"

    # Fruits
    APPLE = "apple"
    CHERRY = "cherry"

    # Misc
    HEART = "heart"
    SPARKLE = "sparkle"
    FEATHER = "feather"
    SHELL = "shell"

    @classmethod
    def from_value(cls, value: str) -> "IconType":
        """
        Resolve a stored value, falling back to SIMPLE for unknown ones.

        Rows written by a newer build may carry icon types this build does
        not know; they still render as the simple plant.
        """
        try:
            return cls(value)
        except ValueError:
            return cls.SIMPLE


class JournalEntry(BaseModel):
    """
    A single day's memory.

    - id: assigned by the store on insert, stable for the entry's lifetime
    - text: the memory itself, never blank once stored
    - timestamp: epoch milliseconds; its local calendar date is the entry's day
    - icon_type / icon_variant: which drawing represents the memory (variant 1..8)
    - grid_x / grid_y: scatter position inside the day's garden cell (0.0..1.0)
    """

    model_config = ConfigDict(
        validate_assignment=True,
        frozen=False,
    )

    id: Optional[int] = None
    text: str
    timestamp: int
    icon_type: IconType = IconType.SIMPLE
    icon_variant: int = Field(default=ICON_VARIANT_MIN, ge=ICON_VARIANT_MIN, le=ICON_VARIANT_MAX)
    grid_x: float = Field(default=0.0, ge=0.0, le=1.0)
    grid_y: float = Field(default=0.0, ge=0.0, le=1.0)

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Memory text must not be blank")
        return v

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Timestamp must be a non-negative epoch millisecond value")
        return v

    def date_key(self, tz: Optional[tzinfo] = None) -> str:
        """Local calendar date (YYYY-MM-DD) this entry belongs to."""
        return local_date_key(self.timestamp, tz)

    def year(self, tz: Optional[tzinfo] = None) -> int:
        return local_year(self.timestamp, tz)

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    def __repr__(self) -> str:
        return f"<JournalEntry(id={self.id}, timestamp={self.timestamp}, icon={self.icon_type.value}/{self.icon_variant})>"
