"""Console reporter for perf-archiver.

This module provides terminal output for archives and run outcomes,
with colored status lines.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from perf_archiver.archive.classifier import Outcome

if TYPE_CHECKING:
    from perf_archiver.archive.classifier import Classification
    from perf_archiver.archive.store import ArchiveStore


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    CYAN = "\033[36m"


OUTCOME_MESSAGES: dict[Outcome, str] = {
    Outcome.PASSED: "Archiver Passed",
    Outcome.FAILED: "Archiver Failed",
    Outcome.NEW_MACHINE: "Archiver Passed. Adding new machine entry.",
    Outcome.NEW_CONFIGURATION: "Archiver Passed. Adding new machine configuration.",
    Outcome.NEW_TEST: "Archiver Passed. Adding new test entry.",
    Outcome.NEW_TEST_CONFIGURATION: "Archiver Passed. Adding new test entry configuration.",
    Outcome.UPDATED_TEST: "Archiver Passed. Updating test entry.",
}


def describe_outcome(outcome: Outcome) -> str:
    """Return the status line for an outcome.

    Args:
        outcome: Outcome of a run.

    Returns:
        Human-readable status line.

    Raises:
        ValueError: If the outcome is not a known outcome code.
    """
    try:
        return OUTCOME_MESSAGES[Outcome(outcome)]
    except (KeyError, ValueError) as e:
        raise ValueError(f"Unexpected outcome code: {outcome!r}") from e


class ConsoleReporter:
    """Reporter that outputs archives and run outcomes to the terminal.

    Attributes:
        use_colors: Whether to use ANSI colors in output.
        output: Output stream (defaults to stdout).

    Example:
        >>> reporter = ConsoleReporter()
        >>> reporter.report_outcome("performance_demo", archiver.last_classification)
          ✅ performance_demo: Archiver Passed. Adding new machine entry.
    """

    def __init__(self, use_colors: bool = True, output: TextIO | None = None) -> None:
        """Initialize ConsoleReporter.

        Args:
            use_colors: Whether to use ANSI colors. Defaults to True.
            output: Output stream. Defaults to sys.stdout.
        """
        self.output = output or sys.stdout
        self.use_colors = use_colors and _supports_color(self.output)

    def _color(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if self.use_colors:
            return f"{color}{text}{Colors.RESET}"
        return text

    def _print(self, text: str = "") -> None:
        """Print text to output stream."""
        print(text, file=self.output)

    def report_archive(self, store: ArchiveStore) -> None:
        """Print the archive as YAML under a header naming its file.

        Args:
            store: Loaded archive store.
        """
        self._print(self._color(f"# {store.path}", Colors.DIM))
        if not store.archive.machines:
            self._print(self._color("# (empty archive)", Colors.DIM))
            return
        self._print(store.to_yaml().rstrip("\n"))

    def report_outcome(self, test_name: str, classification: Classification) -> None:
        """Print the outcome of a run and any mismatching results.

        Args:
            test_name: Name of the test that ran.
            classification: Classification returned for the run.
        """
        message = f"{test_name}: {describe_outcome(classification.outcome)}"
        if classification.passed:
            self._print(self._color(f"  ✅ {message}", Colors.GREEN))
        else:
            self._print(self._color(f"  ❌ {message}", Colors.RED))

        for mismatch in classification.mismatches:
            self._print(self._color(f"     - {mismatch.message}", Colors.YELLOW))
        if classification.new_results and classification.passed:
            names = ", ".join(classification.new_results)
            self._print(self._color(f"     + new results: {names}", Colors.CYAN))


def _supports_color(stream: TextIO) -> bool:
    """Check if the output stream supports ANSI colors.

    Args:
        stream: Output stream to check.

    Returns:
        True if colors are supported, False otherwise.
    """
    if not hasattr(stream, "isatty"):
        return False
    if not stream.isatty():
        return False

    import os

    if os.environ.get("NO_COLOR"):
        return False

    return os.environ.get("TERM") != "dumb"
