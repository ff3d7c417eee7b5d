from __future__ import annotations

import sys
from typing import Any

from .base import Reporter, TaskRecord, TaskStatus, TaskTracker, get_verbosity

ICONS = {
    TaskStatus.SUCCESS: "✔",
    TaskStatus.FAILED: "✖",
    TaskStatus.SKIPPED: "→",
}

# level -> (label, ANSI color)
_LABELS = {
    "info": ("INFO", "32"),
    "warning": ("WARN", "33"),
    "error": ("ERROR", "31"),
}


def completion_line(rec: TaskRecord) -> str:
    """`` ✔ name done/total (1.23s) [k=v ...]`` for a closed task."""
    progress = f" {rec.completed}/{rec.total}" if rec.total is not None else ""
    return (
        f"{ICONS.get(rec.status, '?')} {rec.name}{progress} "
        f"({rec.duration():.2f}s){rec.stats_text()}"
    )


class PlainReporter(TaskTracker, Reporter):
    """Line-oriented reporter; colors only when writing to a terminal."""

    def __init__(self, stream=None, use_color: bool | None = None):
        super().__init__()
        self.stream = stream or sys.stderr
        if use_color is None:
            use_color = getattr(self.stream, "isatty", lambda: False)()
        self.use_color = use_color

    def _line(self, text: str) -> None:
        self.stream.write(text + "\n")

    def _labelled(self, level: str, message: str) -> None:
        label, color = _LABELS[level]
        if self.use_color:
            label = f"\x1b[{color}m{label}\x1b[0m"
        self._line(f"{label}: {message}")

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        self._open_task(task_id, name, total, meta)

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        rec = self._step_task(task_id, step, meta)
        if rec is None:
            return
        item = meta.get("current_item", f"item#{rec.completed}")
        total = "?" if rec.total is None else rec.total
        self._line(f"   · {rec.name}: {item} ({rec.completed}/{total})")

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> None:
        rec = self._close_task(task_id, status, final_meta)
        if rec is not None:
            self._line(" " + completion_line(rec))

    def status(self, message: str, **fields: Any) -> None:
        self._labelled("info", message)

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() < level:
            return
        label = f"VERB{level}"
        if self.use_color:
            label = f"\x1b[36m{label}\x1b[0m"
        self._line(f"{label}: {message}")

    def error(self, message: str, **fields: Any) -> None:
        self._labelled("error", message)

    def warning(self, message: str, **fields: Any) -> None:
        self._labelled("warning", message)

    def section(self, title: str) -> None:
        self.stream.write(f"\n[{title}]\n")
