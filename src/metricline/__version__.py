"""Version information for metricline.

Single source of truth for version number.
Follows PEP 440 and semantic versioning principles.
"""

__version__ = "0.3.0"
__version_info__ = tuple(int(part) for part in __version__.split("."))

# Version history:
# 0.3.0 - CLI host, self-metrics, summary output
# 0.2.0 - Shared pattern registry with guarded one-time compilation
# 0.1.0 - Initial line classifier
