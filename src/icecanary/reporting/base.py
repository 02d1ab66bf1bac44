"""Reporter interface and the process-wide active reporter.

Build code never prints directly. It reports through :func:`get_reporter`,
which the CLI points at a plain, rich or silent backend. The base
:class:`Reporter` accepts every call and outputs nothing.
"""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterator, Mapping, Optional

__all__ = [
    "TaskStatus",
    "TaskRecord",
    "Reporter",
    "STAT_KEYS",
    "format_stats",
    "set_reporter",
    "get_reporter",
    "set_verbosity",
    "get_verbosity",
    "task",
]

# Task meta keys shown on a completion line, in this order
STAT_KEYS = ("files", "merged")


class TaskStatus(Enum):
    RUNNING = auto()
    SUCCESS = auto()
    FAILED = auto()


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

    def finish(self, status: TaskStatus, stats: Mapping[str, Any]) -> None:
        self.status = status
        self.end_time = time.time()
        self.meta.update(stats)

    @property
    def duration(self) -> float:
        if self.end_time is None:
            return 0.0
        return self.end_time - self.start_time


def format_stats(meta: Mapping[str, Any]) -> str:
    """Render ``files=3 merged=1`` style stats; empty when none recorded."""
    stats = [f"{key}={meta[key]}" for key in STAT_KEYS if key in meta]
    return f" [{' '.join(stats)}]" if stats else ""


_VERBOSITY = 0


def set_verbosity(level: int) -> None:
    global _VERBOSITY
    _VERBOSITY = max(0, level)


def get_verbosity() -> int:
    return _VERBOSITY


class Reporter:
    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        pass

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        pass

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **stats: Any,
    ) -> None:
        pass

    def status(self, message: str) -> None:
        pass

    def verbose(self, message: str, *, level: int = 1) -> None:
        pass

    def warning(self, message: str) -> None:
        self.status(message)

    def error(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        self.status(message)

    def section(self, title: str) -> None:
        pass

    def flush(self) -> None:
        pass


_active: Reporter | None = None


def set_reporter(rep: Reporter) -> None:
    global _active
    _active = rep


def get_reporter() -> Reporter:
    global _active
    if _active is None:
        from .plain import PlainReporter

        _active = PlainReporter(stream=sys.stderr)
    return _active


@contextmanager
def task(
    task_id: str, name: str, total: int | None = None, **meta: Any
) -> Iterator[Dict[str, Any]]:
    """Report a unit of work; stats put in the yielded dict end the task."""
    rep = get_reporter()
    rep.start_task(task_id, name, total, **meta)
    stats: Dict[str, Any] = {}
    try:
        yield stats
    except Exception:
        rep.end_task(task_id, TaskStatus.FAILED, **stats)
        raise
    rep.end_task(task_id, TaskStatus.SUCCESS, **stats)
