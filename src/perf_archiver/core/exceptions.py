"""Custom exceptions for perf-archiver.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from PerfArchiverError for easy catching.

A failed comparison against an archived baseline is not an exception;
it is reported as ``Outcome.FAILED`` by the classifier.
"""

from __future__ import annotations


class PerfArchiverError(Exception):
    """Base exception for all perf-archiver errors.

    Example:
        >>> try:
        ...     archiver.run("archive.yaml", "my_test", "node1")
        ... except PerfArchiverError as e:
        ...     print(f"perf-archiver error: {e}")
    """


class ArchiveFormatError(PerfArchiverError):
    """Raised when an archive file exists but cannot be parsed.

    This covers both YAML syntax errors and documents that do not
    follow the archive layout (wrong nesting, bad value types).

    Example:
        >>> raise ArchiveFormatError("archive.yaml: expected a mapping at top level")
    """


class ArchiveIOError(PerfArchiverError):
    """Raised when an archive file cannot be read or written.

    A missing archive file is not an error; it loads as an empty archive.

    Example:
        >>> raise ArchiveIOError("Cannot write archive.yaml: permission denied")
    """


class ConfigurationError(PerfArchiverError):
    """Raised when caller-supplied run inputs are invalid.

    Raised before the archive is touched, for example on an empty test
    name, an empty result set, or a negative tolerance.

    Example:
        >>> raise ConfigurationError("Tolerance must be >= 0, got -0.1")
    """
