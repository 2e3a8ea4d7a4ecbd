"""Main CLI entry point for perf-archiver.

This module defines the Typer application and all CLI commands.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from typing import Annotated, Any

import typer

from perf_archiver import __version__
from perf_archiver.archive import ArchiveStore, Outcome, PerformanceArchiver, detect_hostname
from perf_archiver.core.config import Settings
from perf_archiver.core.exceptions import PerfArchiverError
from perf_archiver.reporters.console import ConsoleReporter

# Create the main Typer app
app = typer.Typer(
    name="perf-archiver",
    help="perf-archiver: Archive benchmark results and catch performance regressions.",
    add_completion=False,
    no_args_is_help=True,
)

# Global state for options
state: dict[str, bool] = {
    "json": False,
    "no_color": False,
}

_INTEGER = re.compile(r"[+-]?\d+")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"perf-archiver v{__version__}")
        raise typer.Exit()


def _parse_config_value(text: str) -> int | str:
    """Integers stay integers, anything else is kept as a string."""
    if _INTEGER.fullmatch(text):
        return int(text)
    return text


def _parse_pair(option: str, text: str) -> tuple[str, str]:
    name, sep, value = text.partition("=")
    if not sep or not name:
        typer.echo(f"Error: {option} expects NAME=VALUE, got {text!r}", err=True)
        raise typer.Exit(2)
    return name, value


def _parse_result(text: str) -> tuple[str, float, float | None]:
    """Parse NAME=VALUE[:TOLERANCE]; a missing tolerance or "exact" compares exactly."""
    name, measurement = _parse_pair("--result", text)
    value_text, _, tolerance_text = measurement.partition(":")
    try:
        value: float = int(value_text) if _INTEGER.fullmatch(value_text) else float(value_text)
        tolerance = None if tolerance_text in ("", "exact") else float(tolerance_text)
    except ValueError:
        typer.echo(f"Error: invalid result {text!r}, expected NAME=VALUE[:TOLERANCE]", err=True)
        raise typer.Exit(2) from None
    return name, value, tolerance


def _emit(command: str, status: str, data: dict[str, Any]) -> None:
    """Print a JSON envelope for --json output."""
    payload = {
        "command": command,
        "status": status,
        "version": __version__,
        "data": data,
    }
    typer.echo(json.dumps(payload, indent=2))


@app.callback()
def main(
    version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results in JSON format.",
        ),
    ] = False,
    no_color: Annotated[
        bool,
        typer.Option(
            "--no-color",
            help="Disable colored output.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            help="Enable debug logging.",
        ),
    ] = False,
) -> None:
    """perf-archiver: Archive benchmark results and catch performance regressions."""
    state["json"] = json_output
    state["no_color"] = no_color
    level = "DEBUG" if verbose else Settings().log_level.upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def version() -> None:
    """Show the current version."""
    typer.echo(f"perf-archiver v{__version__}")


@app.command()
def show(
    archive: Annotated[
        str | None,
        typer.Argument(help="Path to the YAML archive (default: PERF_ARCHIVER_ARCHIVE_PATH)."),
    ] = None,
) -> None:
    """Print the contents of an archive.

    Examples:
        perf-archiver show performance.yaml
        perf-archiver --json show performance.yaml
    """
    path = archive or Settings().archive_path
    try:
        store = ArchiveStore.load(path)
    except PerfArchiverError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2) from None

    if state["json"]:
        _emit("show", "ok", {"archive": str(store.path), "machines": store.archive.to_document()})
    else:
        ConsoleReporter(use_colors=not state["no_color"]).report_archive(store)


@app.command()
def run(
    test: Annotated[
        str,
        typer.Option(
            "--test",
            "-t",
            help="Name of the test.",
        ),
    ],
    results: Annotated[
        list[str],
        typer.Option(
            "--result",
            "-r",
            help="Result as NAME=VALUE[:TOLERANCE]; omit TOLERANCE for an exact match.",
        ),
    ],
    archive: Annotated[
        str | None,
        typer.Option(
            "--archive",
            "-a",
            help="Path to the YAML archive (default: PERF_ARCHIVER_ARCHIVE_PATH).",
        ),
    ] = None,
    host: Annotated[
        str | None,
        typer.Option(
            "--host",
            help="Machine name (default: PERF_ARCHIVER_HOSTNAME or the hostname).",
        ),
    ] = None,
    machine_config: Annotated[
        list[str] | None,
        typer.Option(
            "--machine-config",
            "-m",
            help="Machine description entry as KEY=VALUE.",
        ),
    ] = None,
    config: Annotated[
        list[str] | None,
        typer.Option(
            "--config",
            "-c",
            help="Run configuration entry as KEY=VALUE.",
        ),
    ] = None,
    detect_platform: Annotated[
        bool,
        typer.Option(
            "--detect-platform",
            help="Add the Python platform to the machine description.",
        ),
    ] = False,
) -> None:
    """Check a benchmark run against the archive and record it.

    Exits 0 when the run passes or is recorded as new, 1 when it fails
    against the archived baseline, and 2 on invalid input or archive errors.

    Examples:
        perf-archiver run -a perf.yaml -t scal -c Threads=4 -r Time=1.25:0.1
        perf-archiver run -t scal -m "Node Type=cpu" -r Time=1.25:0.1 -r Counter=22
    """
    settings = Settings()
    path = archive or settings.archive_path
    machine_name = host or settings.hostname or detect_hostname()
    archiver = PerformanceArchiver(settings=settings, detect_platform=detect_platform)

    try:
        for text in machine_config or []:
            key, value = _parse_pair("--machine-config", text)
            archiver.set_machine_config(key, _parse_config_value(value))
        for text in config or []:
            key, value = _parse_pair("--config", text)
            archiver.set_config(key, _parse_config_value(value))
        for text in results:
            archiver.set_result(*_parse_result(text))

        outcome = archiver.run(path, test, machine_name)
    except PerfArchiverError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2) from None

    classification = archiver.last_classification
    if classification is None:
        raise RuntimeError(f"No classification recorded for {test!r}")

    if state["json"]:
        _emit(
            "run",
            "fail" if outcome is Outcome.FAILED else "pass",
            {
                "archive": str(path),
                "test": test,
                "host": machine_name,
                "outcome": outcome.value,
                "mismatches": [m.message for m in classification.mismatches],
                "new_results": classification.new_results,
            },
        )
    else:
        ConsoleReporter(use_colors=not state["no_color"]).report_outcome(test, classification)

    sys.exit(1 if outcome is Outcome.FAILED else 0)


if __name__ == "__main__":
    app()
