"""
Infrastructure layer package for the Plant Memory application.
Provides the async database engine and session management.
"""

__all__ = [
    # Database
    "database",
]
