"""metricline - Prometheus text exposition line classifier.

Classifies single lines of a Prometheus/OpenMetrics plaintext exposition
document as help comments, type comments, samples, blank or unrecognized
lines. Values, labels and timestamps are returned as raw text.

Python Version: 3.10+ required
"""

# Logging Configuration - Configure before other imports
from .logging_config import StructuredFormatter, configure_logging

# Initialize structured logging on module import
configure_logging()

from .__version__ import __version__
from .classifier import (
    LineClassifier,
    classify,
    classify_lines,
    get_classifier,
    summarize,
)
from .config import MetricLineConfig, get_config, reset_config
from .models import (
    Blank,
    ClassifiedLine,
    Docstring,
    LineKind,
    Sample,
    TypeDeclaration,
    Unrecognized,
)
from .patterns import (
    LinePatterns,
    PatternCompilationError,
    compile_patterns,
    get_patterns,
)
from .timing import timed_operation

# Submodule export so tests can patch("metricline.metrics.lines_classified_total")
from . import metrics

__all__ = [
    "__version__",
    # Classifier
    "LineClassifier",
    "classify",
    "classify_lines",
    "get_classifier",
    "summarize",
    # Models
    "ClassifiedLine",
    "LineKind",
    "Docstring",
    "TypeDeclaration",
    "Sample",
    "Blank",
    "Unrecognized",
    # Patterns
    "LinePatterns",
    "PatternCompilationError",
    "compile_patterns",
    "get_patterns",
    # Configuration
    "MetricLineConfig",
    "get_config",
    "reset_config",
    # Logging
    "configure_logging",
    "StructuredFormatter",
    "timed_operation",
]
