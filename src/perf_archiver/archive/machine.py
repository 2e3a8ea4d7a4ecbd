"""Detection of the machine a benchmark runs on."""

from __future__ import annotations

import platform
import socket

from perf_archiver.archive.models import ConfigurationSet


def detect_hostname() -> str:
    """Return the hostname of this machine."""
    return socket.gethostname()


def detect_machine_config() -> ConfigurationSet:
    """Describe the interpreter and platform of this machine.

    Returns:
        Configuration set with Python, Implementation, System and Machine entries.

    Example:
        >>> detect_machine_config()["Implementation"]
        'CPython'
    """
    return {
        "Python": platform.python_version(),
        "Implementation": platform.python_implementation(),
        "System": platform.system(),
        "Machine": platform.machine(),
    }
