"""Command-line host for the line classifier.

Reads one or more exposition files (or stdin) and prints the classification
of every line.

Usage:
    metricline metrics.prom
    curl -s localhost:9100/metrics | metricline --output text --summary
    metricline --fail-on-unrecognized a.prom b.prom

Exit Codes:
    0: All inputs read (and, with --fail-on-unrecognized, all lines recognized)
    1: At least one unrecognized line with --fail-on-unrecognized
    2: Configuration error or unreadable input

A closed output stream (e.g. `metricline a.prom b.prom | head`) stops the
scan quietly; it is not counted against any input.
"""

import argparse
import json
import logging
import os
import sys
from collections.abc import Sequence
from typing import Optional, TextIO

from pydantic import ValidationError

from . import metrics
from .__version__ import __version__
from .classifier import LineClassifier, classify_lines, get_classifier, summarize
from .config import MetricLineConfig, get_config
from .logging_config import configure_logging
from .models import ClassifiedLine, LineKind
from .timing import timed_operation

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_UNRECOGNIZED = 1
EXIT_ERROR = 2

STDIN_PATH = "-"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="metricline",
        description="Classify lines of Prometheus text exposition documents.",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        default=[STDIN_PATH],
        help="Exposition files to classify ('-' or nothing reads stdin)",
    )
    parser.add_argument(
        "--output",
        choices=["json", "text"],
        default="json",
        help="Per-line output format (default: json)",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print per-kind counts for each input after its lines",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress per-line output (useful with --summary)",
    )
    parser.add_argument(
        "--fail-on-unrecognized",
        action="store_true",
        default=None,
        help="Exit 1 if any line is unrecognized (overrides METRICLINE_FAIL_ON_UNRECOGNIZED)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override METRICLINE_LOG_LEVEL",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


class OutputClosed(Exception):
    """Raised when the record stream is closed by the reader (e.g. `| head`)."""

    pass


def _text_field(value) -> str:
    # Tabs are the column separator
    return "" if value is None else str(value).replace("\t", "\\t")


def format_record(path: str, line_number: int, result: ClassifiedLine, output: str) -> str:
    """Render one classified line.

    Args:
        path: Input name ('-' for stdin)
        line_number: 1-based line number
        result: Classification of the line
        output: "json" or "text"

    Returns:
        A single output line without trailing newline. In text output, tabs
        inside field values are written as the two characters ``\\t``.
    """
    if output == "text":
        fields = [
            _text_field(value)
            for key, value in result.to_dict().items()
            if key != "kind"
        ]
        return "\t".join([_text_field(path), str(line_number), result.kind.value, *fields])

    return json.dumps({"path": path, "line": line_number, **result.to_dict()})


def _emit(text: str, out: TextIO) -> None:
    try:
        print(text, file=out)
    except BrokenPipeError as e:
        raise OutputClosed() from e


def scan_stream(
    stream: TextIO,
    path: str,
    args: argparse.Namespace,
    config: MetricLineConfig,
    classifier: LineClassifier,
    out: TextIO,
) -> dict[str, int]:
    """Classify every line of one input and write the records.

    Returns:
        Per-kind counts for the input

    Raises:
        OutputClosed: If `out` is closed by its reader.
        OSError, UnicodeDecodeError: If the input cannot be read.
    """
    counts = summarize([])
    for line_number, result in classify_lines(
        stream, classifier=classifier, max_line_length=config.max_line_length
    ):
        counts[result.kind.value] += 1
        if not args.quiet:
            _emit(format_record(path, line_number, result, args.output), out)

    if args.summary:
        if args.output == "text":
            summary = " ".join(f"{kind}={count}" for kind, count in counts.items())
            _emit(f"{_text_field(path)}\tsummary\t{summary}", out)
        else:
            _emit(json.dumps({"path": path, "summary": counts}), out)
    return counts


def _open_input(path: str, encoding: str) -> TextIO:
    if path == STDIN_PATH:
        return sys.stdin
    return open(path, encoding=encoding)


def _silence_stdout() -> None:
    # Interpreter shutdown flushes stdout again; point it at devnull so the
    # closed pipe does not raise a second time.
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())


def main(argv: Optional[Sequence[str]] = None, out: Optional[TextIO] = None) -> int:
    """Run the CLI.

    Args:
        argv: Argument list (default: sys.argv[1:])
        out: Stream for records (default: sys.stdout)

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    out = out or sys.stdout

    try:
        config = get_config()
    except ValidationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    configure_logging(level=args.log_level or config.log_level, log_format=config.log_format)

    fail_on_unrecognized = (
        args.fail_on_unrecognized
        if args.fail_on_unrecognized is not None
        else config.fail_on_unrecognized
    )
    classifier = get_classifier()

    exit_code = EXIT_SUCCESS
    for path in args.paths:
        context = {"path": path}
        try:
            with timed_operation(
                "scan_document",
                logger,
                extra=context,
                histogram=metrics.document_scan_seconds,
                interrupt_on=(OutputClosed,),
            ):
                stream = _open_input(path, config.input_encoding)
                try:
                    counts = scan_stream(stream, path, args, config, classifier, out)
                finally:
                    if stream is not sys.stdin:
                        stream.close()
                context.update(counts)
        except OutputClosed:
            # Reader went away; remaining inputs have nowhere to go
            if out is sys.stdout:
                _silence_stdout()
            break
        except (OSError, UnicodeDecodeError):
            # Already logged as scan_document_failed by timed_operation
            metrics.documents_scanned_total.labels(status="failed").inc()
            exit_code = EXIT_ERROR
            continue

        metrics.documents_scanned_total.labels(status="success").inc()
        if fail_on_unrecognized and counts[LineKind.UNRECOGNIZED.value]:
            logger.warning(
                "unrecognized_lines_found",
                extra={"path": path, "count": counts[LineKind.UNRECOGNIZED.value]},
            )
            exit_code = max(exit_code, EXIT_UNRECOGNIZED)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
