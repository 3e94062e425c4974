"""
Prometheus metrics definitions for metricline.

Self-metrics for hosts that classify whole documents. The classify() hot path
records nothing; only the document-level helpers and the CLI update these.

Naming conventions: snake_case, metricline_ prefix.
"""

from prometheus_client import Counter, Histogram

# ==============================================================================
# COUNTERS - Monotonically increasing values
# ==============================================================================

lines_classified_total = Counter(
    "metricline_lines_classified_total",
    "Total exposition lines classified",
    ["kind"],
    # kind: docstring, type, sample, blank, unrecognized
)

documents_scanned_total = Counter(
    "metricline_documents_scanned_total",
    "Total exposition documents scanned by the CLI",
    ["status"],
    # status: success, failed
)

# ==============================================================================
# HISTOGRAMS - Distributions of observed values
# ==============================================================================

document_scan_seconds = Histogram(
    "metricline_document_scan_seconds",
    "Time spent classifying one exposition document",
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
)
