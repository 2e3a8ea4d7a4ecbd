"""Comparison of fresh results against archived baselines.

The comparison mode of the archived (stored) value decides how a fresh
value is judged:

- exact: values must be equal
- relative tolerance: ``|stored - fresh| <= tol * |stored|``, or
  ``|fresh| <= tol`` when the stored value is zero
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from perf_archiver.archive.models import ResultSet, ResultValue


class Comparison(str, Enum):
    """Result of comparing a single value."""

    MATCH = "match"
    MISMATCH = "mismatch"


def compare(stored: ResultValue, fresh: ResultValue) -> Comparison:
    """Compare a fresh value against its stored baseline.

    Args:
        stored: Archived baseline value; its tolerance is used.
        fresh: Newly measured value.

    Returns:
        Comparison.MATCH or Comparison.MISMATCH.

    Example:
        >>> compare(ResultValue(value=10.0, tolerance=0.1), ResultValue(value=10.8))
        <Comparison.MATCH: 'match'>
    """
    if stored.tolerance is None:
        matched = fresh.value == stored.value
    elif stored.value == 0:
        matched = abs(fresh.value) <= stored.tolerance
    else:
        matched = abs(stored.value - fresh.value) <= stored.tolerance * abs(stored.value)
    return Comparison.MATCH if matched else Comparison.MISMATCH


@dataclass
class ResultMismatch:
    """A stored result the fresh run did not reproduce.

    Attributes:
        name: Result name.
        stored_value: Archived baseline value.
        fresh_value: Fresh value, or None if the fresh run did not report it.
        tolerance: Relative tolerance of the baseline (None for exact).

    Example:
        >>> ResultMismatch(name="Time", stored_value=10.0, fresh_value=12.0, tolerance=0.1).message
        'Time: 12.0 outside 10.0 +/- 10.0%'
    """

    name: str
    stored_value: float
    fresh_value: float | None
    tolerance: float | None

    @property
    def message(self) -> str:
        """Human-readable description of the mismatch."""
        if self.fresh_value is None:
            return f"{self.name}: missing from run (baseline {self.stored_value})"
        if self.tolerance is None:
            return f"{self.name}: {self.fresh_value} != {self.stored_value} (exact)"
        return f"{self.name}: {self.fresh_value} outside {self.stored_value} +/- {self.tolerance * 100:.1f}%"


@dataclass
class ResultSetComparison:
    """Outcome of comparing a fresh result set against a stored one.

    Attributes:
        mismatches: Stored results that were missing or out of tolerance.
        new_results: Fresh result names absent from the stored set.
    """

    mismatches: list[ResultMismatch] = field(default_factory=list)
    new_results: list[str] = field(default_factory=list)

    @property
    def matched(self) -> bool:
        """True if every stored result was reproduced."""
        return not self.mismatches


def compare_result_sets(stored: ResultSet, fresh: ResultSet) -> ResultSetComparison:
    """Compare every stored result against the fresh run.

    Args:
        stored: Archived baseline results.
        fresh: Results of the current run.

    Returns:
        The mismatches and the names only present in the fresh run.
    """
    comparison = ResultSetComparison()

    for name, stored_value in stored.items():
        fresh_value = fresh.get(name)
        if fresh_value is None:
            comparison.mismatches.append(
                ResultMismatch(
                    name=name,
                    stored_value=stored_value.value,
                    fresh_value=None,
                    tolerance=stored_value.tolerance,
                )
            )
        elif compare(stored_value, fresh_value) is Comparison.MISMATCH:
            comparison.mismatches.append(
                ResultMismatch(
                    name=name,
                    stored_value=stored_value.value,
                    fresh_value=fresh_value.value,
                    tolerance=stored_value.tolerance,
                )
            )

    comparison.new_results = [name for name in fresh if name not in stored]
    return comparison
