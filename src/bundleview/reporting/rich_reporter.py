from __future__ import annotations

import os
from typing import Any, Dict, List

from rich.console import Console
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TimeElapsedColumn,
)

from .base import Reporter, TaskStatus, TaskTracker, get_verbosity
from .plain import completion_line

TRANSIENT_ENV = "BUNDLEVIEW_PROGRESS_TRANSIENT"


def _env_flag(name: str) -> bool:
    return os.getenv(name, "0").lower() in ("1", "true", "yes")


class RichReporter(TaskTracker, Reporter):
    """Progress bars per ingest task, on stderr by default.

    With ``BUNDLEVIEW_PROGRESS_TRANSIENT`` set, bars are cleared when the
    last task closes and completion lines are printed afterwards.
    """

    def __init__(self, console: Console | None = None):
        super().__init__()
        self.console = console or Console(
            stderr=True, highlight=False, soft_wrap=False
        )
        self._transient = _env_flag(TRANSIENT_ENV)
        self.progress: Progress | None = None
        self._bars: Dict[str, Any] = {}
        self._deferred: List[str] = []

    def _progress(self) -> Progress:
        if self.progress is None:
            self.progress = Progress(
                SpinnerColumn(spinner_name="dots"),
                TextColumn("{task.fields[name]}"),
                BarColumn(bar_width=None),
                TextColumn("{task.completed}/{task.total}"),
                TextColumn("{task.fields[item]}", style="dim"),
                TimeElapsedColumn(),
                console=self.console,
                transient=self._transient,
                expand=True,
            )
            self.progress.start()
        return self.progress

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        self._open_task(task_id, name, total, meta)
        if total is None:
            self.console.rule(name)
            return
        self._bars[task_id] = self._progress().add_task(
            "", total=total, name=name, item=""
        )

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        rec = self._step_task(task_id, step, meta)
        bar = self._bars.get(task_id)
        if rec is None or bar is None or self.progress is None:
            return
        self.progress.update(
            bar, completed=rec.completed, item=str(meta.get("current_item", ""))
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
        bar = self._bars.pop(task_id, None)
        if bar is not None and self.progress is not None:
            self.progress.update(bar, completed=rec.completed, item="")
        line = completion_line(rec)
        if self._transient:
            self._deferred.append(line)
        else:
            self.console.print(line, markup=False)
        if not self.open_tasks:
            self.flush()

    def status(self, message: str, **fields: Any) -> None:
        self.console.print(f"[green]INFO[/]: {message}")

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() >= level:
            self.console.print(f"[cyan]VERB{level}[/]: {message}")

    def error(self, message: str, **fields: Any) -> None:
        self.console.print(f"[bold red]ERROR[/]: {message}")

    def warning(self, message: str, **fields: Any) -> None:
        self.console.print(f"[yellow]WARN[/]: {message}")

    def section(self, title: str) -> None:
        self.console.rule(title)

    def flush(self) -> None:
        if self.progress is None:
            return
        try:
            self.progress.stop()
        finally:
            self.progress = None
            self._bars.clear()
            if self._deferred:
                self.console.print("\n".join(self._deferred), markup=False)
                self._deferred.clear()
