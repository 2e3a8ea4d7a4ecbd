"""Reporters module for perf-archiver.

This module provides terminal output for archives and run outcomes.
"""

from __future__ import annotations

from perf_archiver.reporters.console import OUTCOME_MESSAGES, ConsoleReporter, describe_outcome

__all__ = [
    "OUTCOME_MESSAGES",
    "ConsoleReporter",
    "describe_outcome",
]
