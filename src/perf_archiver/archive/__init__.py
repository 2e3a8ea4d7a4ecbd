"""Performance archive module for perf-archiver.

This module provides the archive data model, result comparison, run
classification and YAML persistence.

Example:
    >>> from perf_archiver.archive import Outcome, PerformanceArchiver
    >>>
    >>> archiver = PerformanceArchiver()
    >>> archiver.set_config("Threads", 1)
    >>> archiver.set_result("Time", 10.0, tolerance=0.1)
    >>> outcome = archiver.run("performance.yaml", "my_test", "node1")
    >>> outcome is Outcome.FAILED
    False
"""

from __future__ import annotations

from perf_archiver.archive.archiver import PerformanceArchiver
from perf_archiver.archive.classifier import Classification, Outcome, classify
from perf_archiver.archive.comparison import (
    Comparison,
    ResultMismatch,
    ResultSetComparison,
    compare,
    compare_result_sets,
)
from perf_archiver.archive.machine import detect_hostname, detect_machine_config
from perf_archiver.archive.models import (
    EXACT,
    Archive,
    ConfigurationSet,
    MachineConfiguration,
    MachineEntry,
    ResultSet,
    ResultValue,
    TestEntry,
    TestVariant,
)
from perf_archiver.archive.store import ArchiveStore, dump_yaml

__all__ = [
    "EXACT",
    "Archive",
    "ArchiveStore",
    "Classification",
    "Comparison",
    "ConfigurationSet",
    "MachineConfiguration",
    "MachineEntry",
    "Outcome",
    "PerformanceArchiver",
    "ResultMismatch",
    "ResultSet",
    "ResultSetComparison",
    "ResultValue",
    "TestEntry",
    "TestVariant",
    "classify",
    "compare",
    "compare_result_sets",
    "detect_hostname",
    "detect_machine_config",
    "dump_yaml",
]
