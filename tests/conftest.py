"""Shared pytest fixtures for metricline tests.

Fixture Organization:
    - Classifier fixtures: fresh grammars and classifiers per test
    - Environment fixtures: isolated METRICLINE_* settings and config cache
    - Sample data fixtures: exposition documents and files
"""

import logging
import os

import pytest

from metricline.classifier import LineClassifier, get_classifier
from metricline.config import reset_config
from metricline.patterns import compile_patterns, reset_patterns

SAMPLE_EXPOSITION = """\
# HELP http_requests_total The total number of HTTP requests.
# TYPE http_requests_total counter
http_requests_total{method="post",code="200"} 1027 1395066363000
http_requests_total{method="post",code="400"} 3 1395066363000

# HELP process_open_fds Number of open file descriptors.
# TYPE process_open_fds gauge
process_open_fds 42
this-line is not exposition text
"""


class ListHandler(logging.Handler):
    """Logging handler that keeps records in memory for assertions."""

    def __init__(self):
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def messages(self) -> list[str]:
        return [r.getMessage() for r in self.records]


# =============================================================================
# Classifier Fixtures
# =============================================================================


@pytest.fixture
def classifier() -> LineClassifier:
    """Classifier over freshly compiled grammars (not the shared set)."""
    return LineClassifier(compile_patterns())


@pytest.fixture
def fresh_shared_patterns():
    """Drop the shared grammars before and after a test."""
    reset_patterns()
    get_classifier.cache_clear()
    yield
    reset_patterns()
    get_classifier.cache_clear()


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Remove METRICLINE_* variables and run from an empty directory.

    Changing directory keeps a developer's .env file out of the test.
    """
    for key in list(os.environ.keys()):
        if key.upper().startswith("METRICLINE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield monkeypatch
    reset_config()


@pytest.fixture
def log_records():
    """Capture records from the metricline logger hierarchy.

    The package logger does not propagate, so caplog cannot see it.
    """
    handler = ListHandler()
    logger = logging.getLogger("metricline")
    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    yield handler
    logger.removeHandler(handler)
    logger.setLevel(previous_level)


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def sample_exposition() -> str:
    return SAMPLE_EXPOSITION


@pytest.fixture
def exposition_file(tmp_path):
    path = tmp_path / "metrics.prom"
    path.write_text(SAMPLE_EXPOSITION, encoding="utf-8")
    return path
