"""Unit tests for structured logging infrastructure.

- StructuredFormatter produces valid JSON
- Logger hierarchy configuration
- timed_operation context manager
"""

import json
import logging
import sys

import pytest
from prometheus_client import CollectorRegistry, Histogram

from metricline.logging_config import (
    StructuredFormatter,
    TextFormatter,
    configure_logging,
    get_handler,
)
from metricline.timing import timed_operation


def _record(msg="line_classified", level=logging.INFO, name="metricline.test", **extra):
    record = logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    def test_required_fields(self):
        log_data = json.loads(StructuredFormatter().format(_record()))

        assert log_data["level"] == "INFO"
        assert log_data["logger"] == "metricline.test"
        assert log_data["message"] == "line_classified"
        assert log_data["timestamp"].endswith("Z")

    def test_extras_in_context(self):
        output = StructuredFormatter().format(_record(line_number=3, kind="sample"))
        log_data = json.loads(output)

        assert log_data["context"] == {"line_number": 3, "kind": "sample"}

    def test_no_context_without_extras(self):
        assert "context" not in json.loads(StructuredFormatter().format(_record()))

    def test_sensitive_keys_redacted(self):
        output = StructuredFormatter().format(_record(token="abc", path="m.prom"))
        context = json.loads(output)["context"]

        assert context["token"] == "[REDACTED]"
        assert context["path"] == "m.prom"

    def test_private_attributes_skipped(self):
        output = StructuredFormatter().format(_record(_internal=1))
        assert "context" not in json.loads(output)

    def test_non_serializable_extras_stringified(self):
        output = StructuredFormatter().format(_record(obj=object()))
        assert json.loads(output)["context"]["obj"].startswith("<object")

    def test_exception_included(self):
        try:
            raise ValueError("bad line")
        except ValueError:
            record = _record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        log_data = json.loads(StructuredFormatter().format(record))
        assert "ValueError: bad line" in log_data["exception"]


class TestTextFormatter:
    def test_human_readable(self):
        output = TextFormatter().format(_record())
        assert "[INFO] metricline.test: line_classified" in output


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def restore_logger(self):
        logger = logging.getLogger("metricline")
        level = logger.level
        yield
        configure_logging(level=logging.getLevelName(level) if level else "INFO")

    def test_single_package_handler_after_repeated_calls(self):
        configure_logging()
        first = get_handler()
        configure_logging()

        handlers = logging.getLogger("metricline").handlers
        assert get_handler() is first
        assert handlers.count(first) == 1

    def test_foreign_handler_formatter_untouched(self):
        logger = logging.getLogger("metricline")
        foreign = logging.StreamHandler()
        own_formatter = logging.Formatter("%(message)s")
        foreign.setFormatter(own_formatter)
        logger.addHandler(foreign)
        try:
            configure_logging(log_format="text")
            assert foreign.formatter is own_formatter
            assert isinstance(get_handler().formatter, TextFormatter)
        finally:
            logger.removeHandler(foreign)

    def test_handler_reattached_after_removal(self):
        configure_logging()
        logger = logging.getLogger("metricline")
        logger.removeHandler(get_handler())

        configure_logging()

        assert get_handler() in logger.handlers

    def test_level_argument(self):
        configure_logging(level="DEBUG")
        assert logging.getLogger("metricline").level == logging.DEBUG

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("METRICLINE_LOG_LEVEL", "ERROR")
        configure_logging()
        assert logging.getLogger("metricline").level == logging.ERROR

    def test_unknown_level_falls_back_to_info(self):
        configure_logging(level="LOUD")
        assert logging.getLogger("metricline").level == logging.INFO

    def test_text_format(self):
        configure_logging(log_format="text")
        handler = get_handler()
        assert isinstance(handler.formatter, TextFormatter)

    def test_json_format_default(self, monkeypatch):
        monkeypatch.delenv("METRICLINE_LOG_FORMAT", raising=False)
        configure_logging()
        handler = get_handler()
        assert isinstance(handler.formatter, StructuredFormatter)

    def test_does_not_propagate(self):
        configure_logging()
        assert logging.getLogger("metricline").propagate is False


class TestTimedOperation:
    def test_success_logged_with_duration(self, log_records):
        logger = logging.getLogger("metricline.test")

        with timed_operation("scan_document", logger, extra={"path": "m.prom"}):
            pass

        [record] = log_records.records
        assert record.getMessage() == "scan_document_completed"
        assert record.status == "success"
        assert record.path == "m.prom"
        assert record.duration_ms >= 0

    def test_extra_mutations_visible_at_exit(self, log_records):
        logger = logging.getLogger("metricline.test")
        context = {"path": "m.prom"}

        with timed_operation("scan_document", logger, extra=context):
            context["sample"] = 3

        assert log_records.records[0].sample == 3

    def test_failure_logged_and_reraised(self, log_records):
        logger = logging.getLogger("metricline.test")

        with pytest.raises(OSError):
            with timed_operation("scan_document", logger):
                raise OSError("no such file")

        [record] = log_records.records
        assert record.levelno == logging.ERROR
        assert record.getMessage() == "scan_document_failed"
        assert record.status == "failed"
        assert record.error_type == "OSError"
        assert record.error == "no such file"

    def test_interruption_logged_at_info_and_reraised(self, log_records):
        logger = logging.getLogger("metricline.test")

        class Stop(Exception):
            pass

        with pytest.raises(Stop):
            with timed_operation("scan_document", logger, interrupt_on=(Stop,)):
                raise Stop()

        [record] = log_records.records
        assert record.levelno == logging.INFO
        assert record.getMessage() == "scan_document_interrupted"
        assert record.status == "interrupted"
        assert record.reason == "Stop"

    def test_histogram_observed_for_every_outcome(self):
        registry = CollectorRegistry()
        histogram = Histogram("scan_seconds", "Scan duration", registry=registry)
        logger = logging.getLogger("metricline.test")

        with timed_operation("ok", logger, histogram=histogram):
            pass
        with pytest.raises(ValueError):
            with timed_operation("bad", logger, histogram=histogram):
                raise ValueError("bad")

        assert registry.get_sample_value("scan_seconds_count") == 2
