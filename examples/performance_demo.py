"""Minimal example of the performance archiver.

The times and residuals are dummy values that mimic a real benchmark.
The first run creates the archive with one entry; later runs validate
the values against it and pass. Change ``time1`` and run again to see
the archiver fail.

Run with:
    python examples/performance_demo.py
"""

from __future__ import annotations

import logging
import sys

from perf_archiver import Outcome, PerformanceArchiver
from perf_archiver.reporters import describe_outcome


def run_example() -> bool:
    """Record one benchmark run and report how it compares to the archive."""
    # Some tests are run and produce some times...
    time1 = 10.0
    time2 = 13.3

    # ...and they produce some results
    residual = 0.001
    some_exact_counter = 22

    archive_name = "performance_demo.yaml"
    test_name = "performance_demo"
    host_name = ""  # detected if blank
    tolerance = 0.1  # for residual and times

    archiver = PerformanceArchiver()

    # Change to generate new entries under MachineConfigurations
    archiver.set_machine_config("Kokkos Config", "some node type")

    archiver.set_config("MPI_Ranks", 1)
    archiver.set_config("Teams", 1)
    archiver.set_config("Threads", 1)
    archiver.set_config("Filename", "somefilename")

    archiver.set_result("Time1", time1, tolerance)
    archiver.set_result("Time2", time2, tolerance)
    archiver.set_result("Residual", residual, tolerance)
    archiver.set_result("Counter", some_exact_counter)  # must match exactly

    outcome = archiver.run(archive_name, test_name, host_name)

    PerformanceArchiver.print_archive(archive_name)
    print(describe_outcome(outcome))

    return outcome is not Outcome.FAILED


def main() -> int:
    """Run the example and print the end result."""
    logging.basicConfig(level=logging.INFO)

    if run_example():
        print("End Result: TEST PASSED")
        return 0
    print("End Result: TEST FAILED")
    return 1


if __name__ == "__main__":
    sys.exit(main())
