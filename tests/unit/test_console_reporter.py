"""Unit tests for the console reporter."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from perf_archiver.archive.classifier import Classification, Outcome
from perf_archiver.archive.comparison import ResultMismatch
from perf_archiver.archive.store import ArchiveStore
from perf_archiver.reporters.console import OUTCOME_MESSAGES, ConsoleReporter, describe_outcome


@pytest.fixture
def output() -> io.StringIO:
    """Capture reporter output."""
    return io.StringIO()


class TestDescribeOutcome:
    """Tests for describe_outcome."""

    def test_every_outcome_has_message(self) -> None:
        """Every outcome code has a status line."""
        assert set(OUTCOME_MESSAGES) == set(Outcome)

    def test_accepts_value(self) -> None:
        """Outcome values are accepted as well as members."""
        assert describe_outcome("NewMachine") == "Archiver Passed. Adding new machine entry."  # type: ignore[arg-type]

    def test_unknown_outcome(self) -> None:
        """Unknown codes are a programming error."""
        with pytest.raises(ValueError, match="Unexpected outcome"):
            describe_outcome("Bogus")  # type: ignore[arg-type]


class TestConsoleReporter:
    """Tests for ConsoleReporter."""

    def test_no_colors_for_non_tty(self, output: io.StringIO) -> None:
        """Colors are disabled when the stream is not a terminal."""
        assert not ConsoleReporter(output=output).use_colors

    def test_report_passed(self, output: io.StringIO) -> None:
        """Passing outcomes print their status line."""
        ConsoleReporter(output=output).report_outcome("t1", Classification(outcome=Outcome.PASSED))

        assert "t1: Archiver Passed" in output.getvalue()

    def test_report_failed(self, output: io.StringIO) -> None:
        """Failed outcomes list each mismatch."""
        classification = Classification(
            outcome=Outcome.FAILED,
            mismatches=[ResultMismatch(name="Time", stored_value=10.0, fresh_value=12.0, tolerance=0.1)],
        )

        ConsoleReporter(output=output).report_outcome("t1", classification)

        text = output.getvalue()
        assert "t1: Archiver Failed" in text
        assert "Time: 12.0 outside 10.0 +/- 10.0%" in text

    def test_report_updated(self, output: io.StringIO) -> None:
        """Updated tests list the new results."""
        classification = Classification(outcome=Outcome.UPDATED_TEST, new_results=["Residual"])

        ConsoleReporter(output=output).report_outcome("t1", classification)

        assert "new results: Residual" in output.getvalue()

    def test_report_empty_archive(self, output: io.StringIO, tmp_path: Path) -> None:
        """Empty archives are reported as such."""
        ConsoleReporter(output=output).report_archive(ArchiveStore(tmp_path / "a.yaml"))

        assert "(empty archive)" in output.getvalue()
