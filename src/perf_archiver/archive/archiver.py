"""High-level API for archiving benchmark results.

This module provides PerformanceArchiver, the main interface for
recording a benchmark run and checking it against the archive.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import TextIO

from perf_archiver.archive.classifier import Classification, Outcome, classify
from perf_archiver.archive.machine import detect_hostname, detect_machine_config
from perf_archiver.archive.models import ConfigurationSet, ResultSet, ResultValue
from perf_archiver.archive.store import ArchiveStore
from perf_archiver.core.config import Settings
from perf_archiver.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _check_name(kind: str, name: str) -> None:
    if not isinstance(name, str) or not name:
        raise ConfigurationError(f"{kind} name must be a non-empty string, got {name!r}")


def _check_config_value(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ConfigurationError(f"Configuration value for {name!r} must be an int or a string, got {value!r}")


class PerformanceArchiver:
    """Record a benchmark run and check it against the archive.

    Usage is create, fill, run: set the machine description, the run
    configuration and the results, then call :meth:`run` with the
    archive path. Each call to :meth:`run` returns one :class:`Outcome`.

    Only a single process should run against a given archive file at a
    time (for example rank 0 of a parallel job). Callers with several
    writers must serialize access themselves, e.g. with a file lock.

    Attributes:
        last_classification: Details of the most recent run, if any.

    Example:
        >>> archiver = PerformanceArchiver()
        >>> archiver.set_machine_config("Node Type", "cpu-large")
        >>> archiver.set_config("Threads", 8)
        >>> archiver.set_result("Time", 10.0, tolerance=0.1)
        >>> archiver.set_result("Counter", 22)  # must match exactly
        >>> outcome = archiver.run("performance.yaml", "my_benchmark", "node1")
        >>> outcome
        <Outcome.NEW_MACHINE: 'NewMachine'>
    """

    def __init__(
        self,
        settings: Settings | None = None,
        detect_platform: bool = False,
    ) -> None:
        """Initialize an empty archiver.

        Args:
            settings: Settings (default: loaded from the environment).
            detect_platform: Add the detected Python platform to the machine
                description. Entries set with set_machine_config take precedence.
        """
        self._settings = settings or Settings()
        self._detect_platform = detect_platform
        self._machine_config: ConfigurationSet = {}
        self._config: ConfigurationSet = {}
        self._results: ResultSet = {}
        self.last_classification: Classification | None = None

    @property
    def machine_config(self) -> ConfigurationSet:
        """Machine description recorded with the run."""
        if self._detect_platform:
            return {**detect_machine_config(), **self._machine_config}
        return dict(self._machine_config)

    @property
    def config(self) -> ConfigurationSet:
        """Run configuration recorded with the run."""
        return dict(self._config)

    @property
    def results(self) -> ResultSet:
        """Results recorded with the run."""
        return dict(self._results)

    def set_machine_config(self, label: str, value: int | str) -> None:
        """Add an entry to the machine description.

        Args:
            label: Entry name, e.g. "Node Type".
            value: Integer or string value.

        Raises:
            ConfigurationError: If the label is empty or the value is not int/str.
        """
        _check_name("Machine configuration", label)
        _check_config_value(label, value)
        self._machine_config[label] = value

    def set_config(self, name: str, value: int | str) -> None:
        """Add an entry to the run configuration.

        Args:
            name: Setting name, e.g. "MPI_Ranks".
            value: Integer or string value.

        Raises:
            ConfigurationError: If the name is empty or the value is not int/str.
        """
        _check_name("Configuration", name)
        _check_config_value(name, value)
        self._config[name] = value

    def set_result(self, name: str, value: float, tolerance: float | None = None) -> None:
        """Add a result of the run.

        Args:
            name: Result name, e.g. "Time".
            value: Measured value.
            tolerance: Relative tolerance. If omitted, ``Settings.default_tolerance``
                applies when it is set; otherwise the value must match exactly.

        Raises:
            ConfigurationError: If the name is empty, the value is not a
                finite number, or the tolerance is negative.
        """
        _check_name("Result", name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigurationError(f"Result {name!r} must be a number, got {value!r}")
        if not math.isfinite(value):
            raise ConfigurationError(f"Result {name!r} must be finite, got {value}")
        if tolerance is None:
            tolerance = self._settings.default_tolerance
        if tolerance is not None and (math.isnan(tolerance) or tolerance < 0):
            raise ConfigurationError(f"Tolerance for {name!r} must be >= 0, got {tolerance}")
        self._results[name] = ResultValue(value=value, tolerance=tolerance)

    def reset(self) -> None:
        """Forget all configuration and results set so far."""
        self._machine_config.clear()
        self._config.clear()
        self._results.clear()
        self.last_classification = None

    def run(self, archive_path: str | Path, test_name: str, host_name: str = "") -> Outcome:
        """Check the run against the archive and record it where it is new.

        Loads the archive, classifies the run and writes the archive back
        if the outcome changed it. A Failed run never modifies the archive.

        Args:
            archive_path: Path of the YAML archive (created if missing).
            test_name: Name of the test.
            host_name: Machine name; detected if empty.

        Returns:
            The outcome of the run.

        Raises:
            ConfigurationError: If the test name or the result set is empty.
            ArchiveFormatError: If the archive cannot be parsed.
            ArchiveIOError: If the archive cannot be read or written.
        """
        if not test_name:
            raise ConfigurationError("Test name must not be empty")
        if not self._results:
            raise ConfigurationError(f"No results set for test {test_name!r}")

        machine_name = host_name or self._settings.hostname or detect_hostname()

        store = ArchiveStore.load(archive_path)
        classification = classify(
            store.archive,
            machine_name,
            self.machine_config,
            test_name,
            self.config,
            self.results,
        )
        if classification.changed:
            store.save()

        self.last_classification = classification
        logger.info(f"{test_name} on {machine_name}: {classification.outcome.value}")
        for mismatch in classification.mismatches:
            logger.warning(f"{test_name} on {machine_name}: {mismatch.message}")

        return classification.outcome

    @staticmethod
    def print_archive(archive_path: str | Path, output: TextIO | None = None) -> None:
        """Print the archive for inspection.

        Args:
            archive_path: Path of the YAML archive.
            output: Output stream (default: stdout).
        """
        from perf_archiver.reporters.console import ConsoleReporter

        ConsoleReporter(output=output).report_archive(ArchiveStore.load(archive_path))
