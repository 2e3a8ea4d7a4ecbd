"""perf-archiver: Archive benchmark results and catch performance regressions."""

from __future__ import annotations

from perf_archiver.archive import (
    ArchiveStore,
    Classification,
    Outcome,
    PerformanceArchiver,
    ResultValue,
)
from perf_archiver.core.exceptions import (
    ArchiveFormatError,
    ArchiveIOError,
    ConfigurationError,
    PerfArchiverError,
)

__version__ = "0.1.0"
__all__ = [
    # Archiver
    "ArchiveStore",
    "Classification",
    "Outcome",
    "PerformanceArchiver",
    "ResultValue",
    # Errors
    "ArchiveFormatError",
    "ArchiveIOError",
    "ConfigurationError",
    "PerfArchiverError",
    # Version
    "__version__",
]
