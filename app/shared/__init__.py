# 📄 File: app/shared/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the 'shared' folder as a Python package containing the common tools every part
# of Plant Memory uses, like settings, logging and the database connection.
#
# 🧪 Purpose (Technical Summary):
# Shared kernel package initialization for configuration, infrastructure and
# cross-cutting concerns used by the journal module.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - app.modules.journal
# - app.main

"""
Shared Kernel - Common Utilities and Infrastructure

- Configuration management
- Database engine and session infrastructure
- Exceptions, event bus and live queries
- Logging and date utilities
"""

__all__ = []
