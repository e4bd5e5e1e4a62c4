# 📄 File: app/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Tells Python this 'app' folder contains the Plant Memory journal code
# and records the basic version and package information.
#
# 🧪 Purpose (Technical Summary):
# Application package initialization with version info for the Plant Memory
# journal core (store, service, read projections).
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - main.py (composition root)
# - Package imports throughout the application

"""
Plant Memory - one memory a day, grown into a garden

The journal core behind the Plant Memory app: a one-entry-per-day store,
the journal service above it, and the garden and widget read models.
"""

__version__ = "1.0.0"
__title__ = "Plant Memory"
__description__ = "One-entry-per-day journal store with live garden and widget views"
