"""CLI module for perf-archiver.

This module provides the command-line interface using Typer.
"""

from __future__ import annotations

from perf_archiver.cli.main import app

__all__ = ["app"]
