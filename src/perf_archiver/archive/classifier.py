"""Classification of a run against the archive.

This module walks the machine → configuration → test → variant
hierarchy, decides whether the run is new, passing, updated or failing,
and applies the corresponding change to the in-memory archive.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from perf_archiver.archive.comparison import ResultMismatch, compare_result_sets

if TYPE_CHECKING:
    from perf_archiver.archive.models import Archive, ConfigurationSet, ResultSet

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    """Outcome of one archiver run."""

    PASSED = "Passed"
    FAILED = "Failed"
    NEW_MACHINE = "NewMachine"
    NEW_CONFIGURATION = "NewConfiguration"
    NEW_TEST = "NewTest"
    NEW_TEST_CONFIGURATION = "NewTestConfiguration"
    UPDATED_TEST = "UpdatedTest"

    @property
    def changes_archive(self) -> bool:
        """Whether this outcome implies the archive was modified."""
        return self not in (Outcome.PASSED, Outcome.FAILED)


@dataclass
class Classification:
    """Result of classifying a run.

    Attributes:
        outcome: The outcome code.
        mismatches: Stored results the run did not reproduce (Failed only).
        new_results: Result names the run added to a matched test.

    Example:
        >>> classification = classify(archive, "node1", {}, "t1", {}, results)
        >>> if not classification.passed:
        ...     for mismatch in classification.mismatches:
        ...         print(mismatch.message)
    """

    outcome: Outcome
    mismatches: list[ResultMismatch] = field(default_factory=list)
    new_results: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        """True if the archive was modified."""
        return self.outcome.changes_archive

    @property
    def passed(self) -> bool:
        """True for every outcome except Failed."""
        return self.outcome is not Outcome.FAILED


def classify(
    archive: Archive,
    machine_name: str,
    machine_config: ConfigurationSet,
    test_name: str,
    test_config: ConfigurationSet,
    results: ResultSet,
) -> Classification:
    """Classify a run and record it in the archive where it is new.

    The first unmatched level decides the outcome. A matched variant
    passes if every stored result is reproduced; fresh result names not
    yet archived replace the stored results (UpdatedTest), unless some
    stored result failed, in which case nothing is written.

    Args:
        archive: Archive to look up and mutate in place.
        machine_name: Name of the machine (usually the hostname).
        machine_config: Description of the machine setup.
        test_name: Name of the test.
        test_config: Configuration of this test run.
        results: Results of this test run.

    Returns:
        Classification with the outcome and comparison details.
    """
    machine = archive.get_machine(machine_name)
    if machine is None:
        logger.debug(f"No entry for machine {machine_name!r}")
        machine = archive.add_machine(machine_name)
        machine.add(machine_config).add_test(test_name).add(test_config, results)
        return Classification(outcome=Outcome.NEW_MACHINE)

    machine_configuration = machine.find(machine_config)
    if machine_configuration is None:
        logger.debug(f"No matching configuration for machine {machine_name!r}")
        machine.add(machine_config).add_test(test_name).add(test_config, results)
        return Classification(outcome=Outcome.NEW_CONFIGURATION)

    test = machine_configuration.tests.get(test_name)
    if test is None:
        logger.debug(f"No entry for test {test_name!r}")
        machine_configuration.add_test(test_name).add(test_config, results)
        return Classification(outcome=Outcome.NEW_TEST)

    variant = test.find(test_config)
    if variant is None:
        logger.debug(f"No matching configuration for test {test_name!r}")
        test.add(test_config, results)
        return Classification(outcome=Outcome.NEW_TEST_CONFIGURATION)

    comparison = compare_result_sets(variant.results, results)
    if not comparison.matched:
        return Classification(
            outcome=Outcome.FAILED,
            mismatches=comparison.mismatches,
            new_results=comparison.new_results,
        )

    if comparison.new_results:
        variant.results = dict(results)
        return Classification(outcome=Outcome.UPDATED_TEST, new_results=comparison.new_results)

    return Classification(outcome=Outcome.PASSED)
