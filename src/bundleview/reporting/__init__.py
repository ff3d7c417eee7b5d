"""Progress and status reporting backends.

One reporter is active per process (``set_reporter`` / ``get_reporter``);
library code reports through it and the CLI picks the backend.
"""

import sys

from .base import (
    Reporter,
    TaskRecord,
    TaskStatus,
    TaskTracker,
    get_reporter,
    get_verbosity,
    set_reporter,
    set_verbosity,
    task,
)
from .jsonl import JsonLinesReporter
from .plain import PlainReporter
from .rich_reporter import RichReporter
from .silent import SilentReporter

__all__ = [
    "Reporter",
    "TaskRecord",
    "TaskStatus",
    "TaskTracker",
    "get_reporter",
    "set_reporter",
    "get_verbosity",
    "set_verbosity",
    "task",
    "JsonLinesReporter",
    "PlainReporter",
    "RichReporter",
    "SilentReporter",
    "make_reporter",
]

_BACKENDS = {
    "json": JsonLinesReporter,
    "plain": PlainReporter,
}


def make_reporter(kind: str, *, stream=None) -> Reporter:
    """Build the reporter named by a CLI flag or config value."""
    if kind == "silent":
        return SilentReporter()
    if kind == "rich":
        if sys.stderr.isatty():
            return RichReporter()
        kind = "plain"
    try:
        backend = _BACKENDS[kind]
    except KeyError:
        raise ValueError(f"Unknown reporter: {kind}") from None
    return backend(stream=stream)
