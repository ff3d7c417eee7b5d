from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional, Tuple

from .base import Reporter, TaskStatus, TaskTracker, get_verbosity

# Status message prefix -> summary_type of the emitted "summary" event.
SUMMARY_PREFIXES: Dict[str, str] = {
    "ingest summary": "ingest",
    "index summary": "index",
    "lookup summary": "lookup",
}


def parse_summary(message: str) -> Optional[Tuple[str, Dict[str, str]]]:
    """Split ``"Ingest summary: a=1 b=2"`` into ``("ingest", {"a": "1", ...})``.

    Returns None when the message is not a summary line.
    """
    head, _, tail = message.partition(":")
    stype = SUMMARY_PREFIXES.get(head.strip().lower())
    if stype is None:
        return None
    pairs = dict(
        token.split("=", 1) for token in tail.split() if "=" in token
    )
    return stype, pairs


class JsonLinesReporter(TaskTracker, Reporter):
    """One JSON object per line; summary status lines also emit a
    ``summary`` event carrying their ``key=value`` pairs."""

    def __init__(self, stream=None):
        super().__init__()
        self.stream = stream or sys.stdout

    def _emit(self, event: str, *parts: Dict[str, Any]) -> None:
        payload: Dict[str, Any] = {}
        for part in parts:
            payload.update(part)
        payload["event"] = event
        self.stream.write(json.dumps(payload, sort_keys=True) + "\n")

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        self._open_task(task_id, name, total, meta)
        self._emit("task_start", meta, {"id": task_id, "name": name, "total": total})

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        rec = self._step_task(task_id, step, meta)
        if rec is not None:
            self._emit(
                "task_progress", meta, {"id": task_id, "completed": rec.completed}
            )

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> None:
        rec = self._close_task(task_id, status, final_meta)
        if rec is None:
            return
        self._emit(
            "task_end",
            rec.meta,
            {
                "id": task_id,
                "status": status.name.lower(),
                "completed": rec.completed,
                "total": rec.total,
                "duration_seconds": rec.duration(),
            },
        )

    def _message(self, level: str, message: str, fields: Dict[str, Any]) -> None:
        self._emit("status", fields, {"message": message, "level": level})

    def status(self, message: str, **fields: Any) -> None:
        summary = parse_summary(message)
        if summary is not None:
            stype, pairs = summary
            self._emit(
                "summary",
                pairs,
                fields,
                {"summary_type": stype, "level": "info", "raw": message},
            )
        self._message("info", message, fields)

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() >= level:
            self._message(f"verbose{level}", message, {**fields, "vlevel": level})

    def error(self, message: str, **fields: Any) -> None:
        self._message("error", message, fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._message("warning", message, fields)

    def section(self, title: str) -> None:
        self._emit("section", {"title": title})
