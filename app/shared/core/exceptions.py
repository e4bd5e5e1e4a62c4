# 📄 File: app/shared/core/exceptions.py
# 🧭 Purpose (Layman Explanation):
# This file defines the special error types the Plant Memory journal uses to say
# what went wrong (empty memory, missing entry, broken storage) instead of generic errors.
# 🧪 Purpose (Technical Summary):
# Custom exception hierarchy providing typed failures with error codes, structured
# details and dictionary serialization for callers and log records.
# 🔗 Dependencies:
# typing
# 🔄 Connected Modules / Calls From:
# Session manager, journal repository, journal service, read projections

from typing import Any, Dict, Optional


class PlantMemoryException(Exception):
    """
    Base exception class for the Plant Memory application.
    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__.upper()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            }
        }


# =============================================================================
# VALIDATION & DATA EXCEPTIONS
# =============================================================================

class ValidationError(PlantMemoryException):
    """
    Exception raised for data validation failures.
    Used when caller input breaks a domain rule (blank memory text, bad icon type).
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        if constraint:
            details["constraint"] = constraint

        super().__init__(
            message=message,
            details=details,
            error_code="VALIDATION_ERROR"
        )


class NotFoundError(PlantMemoryException):
    """
    Exception raised when a referenced entry no longer exists.
    Usually a benign race: the entry was deleted by another consumer.
    """

    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if resource_id is not None:
            details["resource_id"] = str(resource_id)

        super().__init__(
            message=message,
            details=details,
            error_code="NOT_FOUND"
        )


class ConflictError(PlantMemoryException):
    """
    Exception raised when a write collides with a unique key.
    For journal entries this is a second entry for an already-used calendar date.
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        resource_type: Optional[str] = None,
        field: Optional[str] = None,
        value: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if field:
            details["field"] = field
        if value:
            details["value"] = value

        super().__init__(
            message=message,
            details=details,
            error_code="CONFLICT"
        )


# =============================================================================
# STORAGE EXCEPTIONS
# =============================================================================

class StorageError(PlantMemoryException):
    """
    Exception raised for underlying storage failures (disk full, corruption,
    locked database). Never retried automatically by the core.
    """

    def __init__(
        self,
        message: str = "Storage operation failed",
        operation: Optional[str] = None,
        table: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if operation:
            details["operation"] = operation
        if table:
            details["table"] = table

        super().__init__(
            message=message,
            details=details,
            error_code="STORAGE_ERROR"
        )


__all__ = [
    "PlantMemoryException",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "StorageError",
]
