"""Compiled grammars for exposition line classification.

Holds the three line grammars (help comment, type comment, sample) and a
thread-safe registry that compiles them once per process.

Grammar summary:
    help    ``#`` [ws] ``HELP`` ws <text>
    type    ``#`` [ws] ``TYPE`` ws <name> ws <type>
    sample  <name> [``{`` <labels> ``}``] ws <value> [ws <timestamp>]

Tokens use ``\\w`` (letters, digits, underscore). Timestamps use ``\\d``.
"""

import logging
import re
import threading
from dataclasses import dataclass

logger = logging.getLogger(__name__)

__all__ = [
    "HELP_PATTERN",
    "SAMPLE_PATTERN",
    "TYPE_PATTERN",
    "LinePatterns",
    "PatternCompilationError",
    "compile_patterns",
    "get_patterns",
    "reset_patterns",
]

HELP_PATTERN = r"^#\s*HELP\s+(.*)$"
TYPE_PATTERN = r"^#\s*TYPE\s+(\w+)\s+(\w+)"
SAMPLE_PATTERN = (
    r"^(?P<name>\w+)"
    r"(\{(?P<labels>[^}]+)\})?"
    r"\s+(?P<value>\w+)"
    r"(\s+(?P<timestamp>\d+))?"
)

_patterns = None
_patterns_lock = threading.Lock()


class PatternCompilationError(RuntimeError):
    """Raised when a built-in grammar fails to compile.

    This is a defect in the grammar definitions, never a property of the
    input being classified. It is not recoverable.
    """

    pass


@dataclass(frozen=True)
class LinePatterns:
    """Immutable set of compiled line grammars.

    Attributes:
        help: Matches ``# HELP`` comments, group 1 is the docstring text
        type: Matches ``# TYPE`` comments, groups 1 and 2 are name and type
        sample: Matches data lines with named groups name, labels, value,
            timestamp
    """

    help: re.Pattern
    type: re.Pattern
    sample: re.Pattern


def _compile(name: str, source: str) -> re.Pattern:
    try:
        return re.compile(source)
    except re.error as e:
        raise PatternCompilationError(
            f"Failed to compile {name} grammar {source!r}: {e}"
        ) from e


def compile_patterns(
    help_source: str = HELP_PATTERN,
    type_source: str = TYPE_PATTERN,
    sample_source: str = SAMPLE_PATTERN,
) -> LinePatterns:
    """Compile a fresh set of line grammars.

    Args:
        help_source: Regex for help comments
        type_source: Regex for type comments
        sample_source: Regex for sample lines

    Returns:
        LinePatterns with all three grammars compiled.

    Raises:
        PatternCompilationError: If any grammar is not a valid regex.
    """
    return LinePatterns(
        help=_compile("help", help_source),
        type=_compile("type", type_source),
        sample=_compile("sample", sample_source),
    )


def get_patterns() -> LinePatterns:
    """Get the process-wide compiled grammars.

    First call compiles, subsequent calls return the same instance.
    Thread-safe via threading.Lock: concurrent first callers block until a
    single thread has finished compiling.

    Returns:
        Shared LinePatterns instance.

    Raises:
        PatternCompilationError: If the built-in grammars fail to compile.
            Nothing is cached in that case.
    """
    global _patterns

    if _patterns is not None:
        return _patterns

    with _patterns_lock:
        # Double-check under lock
        if _patterns is None:
            _patterns = compile_patterns()
            logger.debug("line_patterns_compiled")
        return _patterns


def reset_patterns() -> None:
    """Drop the shared grammars so the next get_patterns() recompiles.

    Warning:
        Only use in test code.
    """
    global _patterns

    with _patterns_lock:
        _patterns = None
