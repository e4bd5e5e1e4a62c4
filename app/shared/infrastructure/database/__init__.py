"""
Database infrastructure: engine lifecycle and session management.
"""

from .connection import DatabaseConnectionManager
from .session import DatabaseSessionManager

__all__ = [
    "DatabaseConnectionManager",
    "DatabaseSessionManager",
]
