# 📄 File: app/shared/config/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Contains the settings that tell the Plant Memory journal where its database lives,
# how chatty its logs are, and which calendar zone a "day" belongs to.
#
# 🧪 Purpose (Technical Summary):
# Configuration package initialization with exports for settings management
# and the declarative base shared by all ORM models.
#
# 🔗 Dependencies:
# - settings.py (application settings)
# - database.py (declarative base and metadata)
#
# 🔄 Connected Modules / Calls From:
# - app.main (application composition root)
# - Infrastructure components

"""
Configuration Management Package

Handles all application configuration including:
- Environment-based settings
- Database URL and SQLite behaviour
- Calendar zone and journal read limits
"""

from .settings import get_settings, Settings
from .database import DatabaseBase, metadata

__all__ = [
    "get_settings",
    "Settings",
    "DatabaseBase",
    "metadata",
]
