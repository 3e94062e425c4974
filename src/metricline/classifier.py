"""Line classifier for Prometheus/OpenMetrics text exposition.

Classifies one line at a time against three grammars checked in a fixed
order, first match wins:

1. help comment   -> Docstring
2. type comment   -> TypeDeclaration
3. sample         -> Sample

Lines that are empty after trimming are Blank; anything else is
Unrecognized. classify() never raises and has no side effects.
"""

import logging
from collections.abc import Iterable, Iterator
from functools import lru_cache

from . import metrics
from .models import (
    Blank,
    ClassifiedLine,
    Docstring,
    LineKind,
    Sample,
    TypeDeclaration,
    Unrecognized,
)
from .patterns import LinePatterns, get_patterns

logger = logging.getLogger(__name__)

__all__ = [
    "LineClassifier",
    "classify",
    "classify_lines",
    "get_classifier",
    "summarize",
]

_BLANK = Blank()
_UNRECOGNIZED = Unrecognized()


class LineClassifier:
    """Classifies single exposition lines.

    Instances are immutable and hold only their compiled grammars, so one
    instance may be shared freely across threads.

    Attributes:
        patterns: Compiled grammars used for matching
    """

    __slots__ = ("_patterns",)

    def __init__(self, patterns: LinePatterns | None = None):
        """Create a classifier.

        Args:
            patterns: Grammars to use. Defaults to the shared process-wide set.

        Raises:
            PatternCompilationError: If the shared grammars fail to compile.
        """
        self._patterns = patterns if patterns is not None else get_patterns()

    @property
    def patterns(self) -> LinePatterns:
        return self._patterns

    def classify(self, line: str) -> ClassifiedLine:
        """Classify one line of exposition text.

        Args:
            line: A single line, with or without its trailing newline

        Returns:
            The first matching variant in priority order help, type, sample,
            or Blank / Unrecognized.
        """
        line = line.strip()
        if not line:
            return _BLANK

        match = self._patterns.help.match(line)
        if match:
            text = match.group(1)
            if text is None:
                return _UNRECOGNIZED
            return Docstring(text)

        match = self._patterns.type.match(line)
        if match:
            metric_name, type_name = match.group(1, 2)
            if metric_name and type_name:
                return TypeDeclaration(metric_name=metric_name, type_name=type_name)

        match = self._patterns.sample.match(line)
        if match is None:
            return _UNRECOGNIZED

        metric_name = match.group("name")
        value = match.group("value")
        if not metric_name or not value:
            return _UNRECOGNIZED

        return Sample(
            metric_name=metric_name,
            labels=match.group("labels"),
            value=value,
            timestamp=match.group("timestamp"),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(patterns={self._patterns!r})"


@lru_cache(maxsize=1)
def get_classifier() -> LineClassifier:
    """Get the shared default classifier.

    Wraps the shared grammars from get_patterns(), which are compiled exactly
    once. Call get_classifier.cache_clear() after reset_patterns() in tests.
    """
    return LineClassifier()


def classify(line: str) -> ClassifiedLine:
    """Classify one line with the shared default classifier."""
    return get_classifier().classify(line)


def classify_lines(
    lines: Iterable[str],
    classifier: LineClassifier | None = None,
    max_line_length: int = 0,
) -> Iterator[tuple[int, ClassifiedLine]]:
    """Classify each line of a document independently.

    Each line is classified on its own; nothing is carried between lines.
    Updates metricline_lines_classified_total per line.

    Args:
        lines: Iterable of lines (file objects work directly)
        classifier: Classifier to use (default: shared classifier)
        max_line_length: Lines longer than this (after trimming) are
            Unrecognized without matching. 0 disables the limit.

    Yields:
        (line_number, result) tuples, line numbers starting at 1
    """
    classifier = classifier or get_classifier()

    for line_number, line in enumerate(lines, start=1):
        if max_line_length and len(line.strip()) > max_line_length:
            logger.debug(
                "line_too_long",
                extra={"line_number": line_number, "length": len(line.strip())},
            )
            result = _UNRECOGNIZED
        else:
            result = classifier.classify(line)

        if result.kind is LineKind.UNRECOGNIZED:
            logger.debug(
                "line_unrecognized",
                extra={"line_number": line_number, "preview": line.strip()[:80]},
            )

        metrics.lines_classified_total.labels(kind=result.kind.value).inc()
        yield line_number, result


def summarize(results: Iterable[ClassifiedLine]) -> dict[str, int]:
    """Count results per kind.

    Args:
        results: Classified lines

    Returns:
        Dict keyed by every LineKind value (zero when a kind is absent)
    """
    counts = {kind.value: 0 for kind in LineKind}
    for result in results:
        counts[result.kind.value] += 1
    return counts
