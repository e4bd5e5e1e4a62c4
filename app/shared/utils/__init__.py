# 📄 File: app/shared/utils/__init__.py

# 🧭 Purpose (Layman Explanation):
# Sets up the small helper tools the rest of the app leans on: writing logs
# and working out which calendar day a moment belongs to.

# 🧪 Purpose (Technical Summary):
# Initializes the utilities package: structured logging (logging.py) and
# epoch-millisecond calendar helpers (dates.py).

# 🔗 Dependencies:
# - logging: Structured logging utilities
# - dates: Local calendar conversion

# 🔄 Connected Modules / Calls From:
# Used by: journal repository, journal service, read projections, app.main

"""
Shared Utilities Package

- Structured logging with JSON formatting
- Local calendar date keys, years and day arithmetic
"""
