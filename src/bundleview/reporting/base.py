"""Reporter protocol, task records and the process-wide active reporter."""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterator, Optional

__all__ = [
    "TaskStatus",
    "TaskRecord",
    "Reporter",
    "TaskTracker",
    "STAT_KEYS",
    "set_reporter",
    "get_reporter",
    "set_verbosity",
    "get_verbosity",
    "task",
]

# Task meta keys rendered in completion lines, in this order.
STAT_KEYS = ("archives", "tables", "containers", "bytes")


class TaskStatus(Enum):
    RUNNING = auto()
    SUCCESS = auto()
    FAILED = auto()
    SKIPPED = auto()


@dataclass(slots=True)
class TaskRecord:
    task_id: str
    name: str
    total: Optional[int] = None
    completed: int = 0
    status: TaskStatus = TaskStatus.RUNNING
    start_time: float = field(default_factory=time.time)
    end_time: float | None = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def stats_text(self) -> str:
        stats = [f"{k}={self.meta[k]}" for k in STAT_KEYS if k in self.meta]
        return f" [{' '.join(stats)}]" if stats else ""

    def duration(self) -> float:
        return (self.end_time - self.start_time) if self.end_time else 0.0


_VERBOSITY: int = 0  # set by the CLI (-v repeats)


def set_verbosity(level: int) -> None:
    global _VERBOSITY
    _VERBOSITY = max(0, level)


def get_verbosity() -> int:
    return _VERBOSITY


class Reporter:
    """Sink for task progress and status lines.

    ``verbose`` output is gated by the process-wide verbosity level;
    ``warning`` falls back to ``status`` for backends without a warning style.
    """

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        raise NotImplementedError

    def advance(
        self, task_id: str, step: int = 1, **meta: Any
    ) -> None:
        raise NotImplementedError

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> None:
        raise NotImplementedError

    def status(self, message: str, **fields: Any) -> None:
        raise NotImplementedError

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        pass

    def error(self, message: str, **fields: Any) -> None:
        raise NotImplementedError

    def warning(self, message: str, **fields: Any) -> None:
        self.status(message, **fields)

    def section(self, title: str) -> None:
        raise NotImplementedError

    def flush(self) -> None:
        pass


class TaskTracker:
    """Task bookkeeping for reporters that render per-task lines."""

    def __init__(self) -> None:
        self._tasks: Dict[str, TaskRecord] = {}

    def _open_task(
        self, task_id: str, name: str, total: int | None, meta: Dict[str, Any]
    ) -> TaskRecord:
        rec = TaskRecord(task_id, name, total, meta=dict(meta))
        self._tasks[task_id] = rec
        return rec

    def _step_task(
        self, task_id: str, step: int, meta: Dict[str, Any]
    ) -> TaskRecord | None:
        rec = self._tasks.get(task_id)
        if rec is not None:
            rec.completed += step
            rec.meta.update(meta)
        return rec

    def _close_task(
        self, task_id: str, status: TaskStatus, meta: Dict[str, Any]
    ) -> TaskRecord | None:
        rec = self._tasks.pop(task_id, None)
        if rec is not None:
            rec.status = status
            rec.end_time = time.time()
            rec.meta.update(meta)
        return rec

    @property
    def open_tasks(self) -> int:
        return len(self._tasks)


_ACTIVE_REPORTER: Reporter | None = None


def set_reporter(rep: Reporter) -> None:
    global _ACTIVE_REPORTER
    _ACTIVE_REPORTER = rep


def get_reporter() -> Reporter:
    global _ACTIVE_REPORTER
    if _ACTIVE_REPORTER is None:
        from .plain import PlainReporter  # local import to avoid cycle

        _ACTIVE_REPORTER = PlainReporter(stream=sys.stderr)
    return _ACTIVE_REPORTER


@contextmanager
def task(
    task_id: str, name: str, total: int | None = None, **meta: Any
) -> Iterator[Dict[str, Any]]:
    """Run a block as one reporter task.

    The yielded dict collects final stats (see ``STAT_KEYS``) for the
    completion line; the task ends FAILED if the block raises.
    """
    rep = get_reporter()
    rep.start_task(task_id, name, total, **meta)
    final: Dict[str, Any] = {}
    try:
        yield final
    except Exception:
        rep.end_task(task_id, TaskStatus.FAILED, **final)
        raise
    rep.end_task(task_id, TaskStatus.SUCCESS, **final)
