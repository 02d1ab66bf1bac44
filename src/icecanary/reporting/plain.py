from __future__ import annotations

import sys
from typing import Any, Dict

from .base import Reporter, TaskRecord, TaskStatus, format_stats, get_verbosity

ICONS = {
    TaskStatus.SUCCESS: "✔",
    TaskStatus.FAILED: "✖",
}


class PlainReporter(Reporter):
    """Line-oriented reporter; ANSI colours only when writing to a TTY."""

    def __init__(self, stream=None, use_color: bool | None = None):
        self.stream = stream or sys.stderr
        if use_color is None:
            use_color = getattr(self.stream, "isatty", lambda: False)()
        self.use_color = use_color
        self._tasks: Dict[str, TaskRecord] = {}

    def _c(self, code: str, text: str) -> str:
        if not self.use_color:
            return text
        return f"\x1b[{code}m{text}\x1b[0m"

    def _line(self, text: str) -> None:
        self.stream.write(f"{text}\n")

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        self._tasks[task_id] = TaskRecord(task_id, name, total, meta=meta)

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        rec = self._tasks.get(task_id)
        if rec is None:
            return
        rec.completed += step
        item = meta.get("current_item", f"#{rec.completed}")
        total = "?" if rec.total is None else rec.total
        self._line(f"   · {rec.name}: {item} ({rec.completed}/{total})")

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **stats: Any,
    ) -> None:
        rec = self._tasks.pop(task_id, None)
        if rec is None:
            return
        rec.finish(status, stats)
        count = "" if rec.total is None else f" {rec.completed}/{rec.total}"
        self._line(
            f" {ICONS[status]} {rec.name}{count} ({rec.duration:.2f}s)"
            f"{format_stats(rec.meta)}"
        )

    def status(self, message: str) -> None:
        self._line(f"{self._c('32', 'INFO')}: {message}")

    def verbose(self, message: str, *, level: int = 1) -> None:
        if get_verbosity() >= level:
            self._line(f"{self._c('36', f'VERB{level}')}: {message}")

    def warning(self, message: str) -> None:
        self._line(f"{self._c('33', 'WARN')}: {message}")

    def error(self, message: str) -> None:
        self._line(f"{self._c('31', 'ERROR')}: {message}")

    def success(self, message: str) -> None:
        self._line(self._c("1;32", message))

    def section(self, title: str) -> None:
        self._line(f"\n[{title}]")
