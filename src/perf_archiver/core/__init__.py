"""Core module for perf-archiver.

This module contains the exceptions, configuration and hashing helpers
used throughout the library.
"""

from __future__ import annotations

from perf_archiver.core.config import Settings
from perf_archiver.core.exceptions import (
    ArchiveFormatError,
    ArchiveIOError,
    ConfigurationError,
    PerfArchiverError,
)
from perf_archiver.core.hashing import canonical_json, config_key

__all__ = [
    "ArchiveFormatError",
    "ArchiveIOError",
    "ConfigurationError",
    "PerfArchiverError",
    "Settings",
    "canonical_json",
    "config_key",
]
