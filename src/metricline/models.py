"""Result model for classified exposition lines.

A classified line is one of five immutable variants. Every variant carries a
``kind`` discriminant so callers can dispatch without isinstance chains:

    docstring     -> Docstring(text)
    type          -> TypeDeclaration(metric_name, type_name)
    sample        -> Sample(metric_name, labels, value, timestamp)
    blank         -> Blank()
    unrecognized  -> Unrecognized()

String fields are slices of the input line, left undecoded. Converting values
and timestamps to numbers or splitting label blocks is the consumer's job.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

__all__ = [
    "Blank",
    "ClassifiedLine",
    "Docstring",
    "LineKind",
    "Sample",
    "TypeDeclaration",
    "Unrecognized",
]


class LineKind(str, Enum):
    """Structural category of a single exposition line.

    Note: Uses (str, Enum) so values serialize directly to JSON. When
    formatting, use .value explicitly:
        f"{LineKind.SAMPLE.value}"  # "sample"
    """

    DOCSTRING = "docstring"  # "# HELP <text>"
    TYPE = "type"  # "# TYPE <metric_name> <type_name>"
    SAMPLE = "sample"  # "<name>[{labels}] <value> [<timestamp>]"
    BLANK = "blank"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class Docstring:
    """Free text following a ``# HELP`` marker.

    Attributes:
        text: Remainder of the line after the marker, unprocessed
    """

    kind: ClassVar[LineKind] = LineKind.DOCSTRING

    text: str

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "text": self.text}


@dataclass(frozen=True)
class TypeDeclaration:
    """Metric type declared by a ``# TYPE`` comment.

    Attributes:
        metric_name: Word-character token naming the metric
        type_name: Word-character token naming the type (counter, gauge, ...)
    """

    kind: ClassVar[LineKind] = LineKind.TYPE

    metric_name: str
    type_name: str

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "metric_name": self.metric_name,
            "type_name": self.type_name,
        }


@dataclass(frozen=True)
class Sample:
    """A data line.

    Attributes:
        metric_name: Word-character token naming the metric
        labels: Raw text between the braces, or None when no block is present
        value: Word-character value token (not validated as a number)
        timestamp: Digit-only timestamp token, or None when absent
    """

    kind: ClassVar[LineKind] = LineKind.SAMPLE

    metric_name: str
    labels: str | None
    value: str
    timestamp: str | None = None

    def to_dict(self) -> dict:
        """Convert to a JSON-ready dict.

        Optional fields are always present (as null) so consumers can rely on
        a fixed set of keys per kind.
        """
        return {
            "kind": self.kind.value,
            "metric_name": self.metric_name,
            "labels": self.labels,
            "value": self.value,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class Blank:
    """Line that is empty after trimming surrounding whitespace."""

    kind: ClassVar[LineKind] = LineKind.BLANK

    def to_dict(self) -> dict:
        return {"kind": self.kind.value}


@dataclass(frozen=True)
class Unrecognized:
    """Non-empty line that matched none of the grammars."""

    kind: ClassVar[LineKind] = LineKind.UNRECOGNIZED

    def to_dict(self) -> dict:
        return {"kind": self.kind.value}


ClassifiedLine = Union[Docstring, TypeDeclaration, Sample, Blank, Unrecognized]
