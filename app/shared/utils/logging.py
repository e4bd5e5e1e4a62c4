# 📄 File: app/shared/utils/logging.py

# 🧭 Purpose (Layman Explanation):
# This file sets up a logging system that records what happens to the journal
# (memories saved, overwritten, deleted, storage trouble) in a structured way.

# 🧪 Purpose (Technical Summary):
# Implements structured logging with JSON formatting, correlation context,
# database timing helpers and a cached structured logger facade.

# 🔗 Dependencies:
# - python-json-logger: JSON log formatting
# - logging: Python standard logging
# - contextvars: Correlation context tracking

# 🔄 Connected Modules / Calls From:
# Used by: All application modules for consistent logging, repository timing,
# business event logging, startup/shutdown logging

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional
from uuid import uuid4

from pythonjsonlogger.json import JsonFormatter

from app.shared.config.settings import Settings, get_settings

SERVICE_NAME = "plant-memory"

# Context variable for tying the log lines of one operation together
correlation_id_var: ContextVar[str] = ContextVar('correlation_id', default='')

# Global logging configuration
_logging_configured = False
_loggers_cache: Dict[str, "StructuredLogger"] = {}


class ContextualFormatter(logging.Formatter):
    """
    Text formatter that adds contextual information to log records.

    Adds the correlation ID, service name and an ISO timestamp to every
    record so plain-text logs can still be followed per operation.
    """

    def format(self, record):
        record.correlation_id = correlation_id_var.get('')
        record.service = SERVICE_NAME
        record.timestamp = datetime.now(timezone.utc).isoformat()
        message = super().format(record)

        extra_fields = getattr(record, 'extra_fields', None)
        if extra_fields:
            details = " ".join(f"{key}={value}" for key, value in extra_fields.items())
            message = f"{message} [{details}]"
        return message


class JSONFormatter(JsonFormatter):
    """
    JSON formatter for structured logging.

    Outputs logs in JSON format with consistent structure for
    log aggregation and analysis tools.
    """

    def __init__(self):
        super().__init__(
            "%(levelname)s %(name)s %(message)s %(module)s %(funcName)s %(lineno)d",
            rename_fields={"levelname": "level", "name": "logger", "funcName": "function", "lineno": "line"},
            timestamp=True,
        )

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['service'] = SERVICE_NAME

        correlation_id = correlation_id_var.get()
        if correlation_id:
            log_record['correlation_id'] = correlation_id


class PerformanceLogger:
    """
    Logger for tracking database timing information.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def log_database_query(
        self,
        query_type: str,
        table: str,
        duration_ms: float,
        rows_affected: int = None,
        extra: Dict = None
    ):
        """Log database query performance."""
        extra_fields = {
            'event_type': 'database_query',
            'query_type': query_type,
            'table': table,
            'duration_ms': round(duration_ms, 3),
            **(extra or {})
        }

        if rows_affected is not None:
            extra_fields['rows_affected'] = rows_affected

        self.logger.debug(
            f"DB {query_type} on {table} - {duration_ms:.2f}ms",
            extra={'extra_fields': extra_fields}
        )


class StructuredLogger:
    """
    Enhanced logger with structured logging capabilities.

    Provides methods for logging different types of events with
    consistent structure and contextual information.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.performance = PerformanceLogger(self.logger)

    def debug(self, message: str, extra: Dict = None, **kwargs):
        """Log debug message with extra fields."""
        self._log(logging.DEBUG, message, extra, **kwargs)

    def info(self, message: str, extra: Dict = None, **kwargs):
        """Log info message with extra fields."""
        self._log(logging.INFO, message, extra, **kwargs)

    def warning(self, message: str, extra: Dict = None, **kwargs):
        """Log warning message with extra fields."""
        self._log(logging.WARNING, message, extra, **kwargs)

    def error(self, message: str, extra: Dict = None, exc_info: bool = False, **kwargs):
        """Log error message with extra fields."""
        self._log(logging.ERROR, message, extra, exc_info=exc_info, **kwargs)

    def log(self, level: int, message: str, extra: Dict = None, **kwargs):
        self._log(level, message, extra, **kwargs)

    def _log(self, level: int, message: str, extra: Dict = None, **kwargs):
        """Internal log method with extra fields handling."""
        extra_fields = dict(extra or {})

        # Add any additional kwargs as extra fields
        for key, value in kwargs.items():
            if key not in ['exc_info', 'stack_info', 'stacklevel']:
                extra_fields[key] = value

        # Remove extra fields from kwargs to avoid conflict
        clean_kwargs = {k: v for k, v in kwargs.items()
                        if k in ['exc_info', 'stack_info', 'stacklevel']}

        if extra_fields:
            clean_kwargs['extra'] = {'extra_fields': extra_fields}

        self.logger.log(level, message, **clean_kwargs)

    def log_business_event(
        self,
        event_type: str,
        description: str,
        entity_id: str = None,
        entity_type: str = None,
        extra: Dict = None
    ):
        """Log business events (memory planted, overwritten, removed)."""
        extra_fields = {
            'event_type': 'business_event',
            'business_event_type': event_type,
            **(extra or {})
        }

        if entity_id is not None:
            extra_fields['entity_id'] = str(entity_id)
        if entity_type:
            extra_fields['entity_type'] = entity_type

        self.info(description, extra=extra_fields)


def setup_logging(
    settings: Optional[Settings] = None,
    log_level: str = None,
    log_format: str = None,
    log_file: str = None,
    enable_console: bool = True
) -> logging.Logger:
    """
    Setup application logging configuration.

    Explicit arguments win over settings; settings default to get_settings().
    Calling it a second time is a no-op.
    """
    global _logging_configured

    if _logging_configured:
        return logging.getLogger("startup")

    settings = settings or get_settings()
    log_level = log_level or settings.LOG_LEVEL
    log_format = log_format or settings.LOG_FORMAT
    log_file = log_file or settings.LOG_FILE

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    if log_format.lower() == 'json':
        formatter = JSONFormatter()
    else:
        formatter = ContextualFormatter('%(timestamp)s - %(name)s - %(levelname)s - %(message)s')

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger('aiosqlite').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)
    if not settings.DB_ECHO:
        logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

    _logging_configured = True
    return logging.getLogger("startup")


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        StructuredLogger instance
    """
    if name in _loggers_cache:
        return _loggers_cache[name]

    logger = StructuredLogger(name)
    _loggers_cache[name] = logger

    return logger


@contextmanager
def log_context(correlation_id: str = None):
    """
    Context manager tagging every log line inside it with one correlation ID.

    Args:
        correlation_id: Correlation identifier, generated when omitted
    """
    if correlation_id is None:
        correlation_id = str(uuid4())

    token = correlation_id_var.set(correlation_id)
    try:
        yield correlation_id
    finally:
        correlation_id_var.reset(token)


def log_startup_event(service_name: str, version: str, extra: Dict = None):
    """Log application startup event."""
    logger = get_logger('startup')
    logger.info(
        f"Service {service_name} starting up",
        extra={
            'event_type': 'service_startup',
            'service_name': service_name,
            'version': version,
            **(extra or {})
        }
    )


def log_shutdown_event(service_name: str, extra: Dict = None):
    """Log application shutdown event."""
    logger = get_logger('shutdown')
    logger.info(
        f"Service {service_name} shutting down",
        extra={
            'event_type': 'service_shutdown',
            'service_name': service_name,
            **(extra or {})
        }
    )
