"""
Tests for the structured logging helpers.
"""
import json
import logging

from app.shared.utils.logging import (
    ContextualFormatter,
    JSONFormatter,
    SERVICE_NAME,
    get_logger,
    log_context,
)


def make_record(message: str = "planted", extra_fields=None) -> logging.LogRecord:
    record = logging.LogRecord("app.test", logging.INFO, __file__, 10, message, None, None)
    if extra_fields is not None:
        record.extra_fields = extra_fields
    return record


class TestFormatters:

    def test_json_formatter_adds_service_and_correlation(self):
        with log_context("abc-123"):
            output = JSONFormatter().format(make_record())

        payload = json.loads(output)
        assert payload["message"] == "planted"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "app.test"
        assert payload["service"] == SERVICE_NAME
        assert payload["correlation_id"] == "abc-123"

    def test_text_formatter_appends_extra_fields(self):
        formatter = ContextualFormatter("%(levelname)s %(message)s")

        output = formatter.format(make_record(extra_fields={"date_key": "2025-03-02"}))

        assert output == "INFO planted [date_key=2025-03-02]"


class TestStructuredLogger:

    def test_extra_becomes_extra_fields(self, caplog):
        logger = get_logger("app.tests.structured")

        with caplog.at_level(logging.INFO, logger="app.tests.structured"):
            logger.info("Rewrote memory 4", extra={"icon_type": "cactus"})

        record = caplog.records[-1]
        assert record.getMessage() == "Rewrote memory 4"
        assert record.extra_fields == {"icon_type": "cactus"}

    def test_business_event_fields(self, caplog):
        logger = get_logger("app.tests.business")

        with caplog.at_level(logging.INFO, logger="app.tests.business"):
            logger.log_business_event("memory_planted", "Planted memory", entity_id=7, entity_type="journal_entry")

        fields = caplog.records[-1].extra_fields
        assert fields["business_event_type"] == "memory_planted"
        assert fields["entity_id"] == "7"
        assert fields["entity_type"] == "journal_entry"

    def test_loggers_are_cached(self):
        assert get_logger("app.tests.cached") is get_logger("app.tests.cached")

    def test_performance_logger_logs_at_debug(self, caplog):
        logger = get_logger("app.tests.performance")

        with caplog.at_level(logging.DEBUG, logger="app.tests.performance"):
            logger.performance.log_database_query("SELECT", "journal_entries", 1.23456, rows_affected=2)

        fields = caplog.records[-1].extra_fields
        assert caplog.records[-1].levelno == logging.DEBUG
        assert fields["duration_ms"] == 1.235
        assert fields["rows_affected"] == 2
