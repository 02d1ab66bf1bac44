"""Completion tracking for the asynchronous steps of a build.

The build runs every stage synchronously; only upstream language merges
suspend. Each merge is registered with :class:`AsyncTracker` before the
driver seals it with :meth:`AsyncTracker.setup_callback`, so the pending
count can only reach zero once all work of the build is known.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

from .errors import E_STALLED, StalledAsyncError
from .logging import get_logger

__all__ = ["AsyncTracker"]


class AsyncTracker:
    def __init__(self) -> None:
        self._pending = 0
        self._sealed = False
        self._fired = False
        self._aborted = False
        self._callback: Optional[Callable[[], Any]] = None
        self._tasks: list[asyncio.Task] = []
        self._errors: list[BaseException] = []

    @property
    def pending(self) -> int:
        return self._pending

    @property
    def fired(self) -> bool:
        return self._fired

    def start(self) -> None:
        if self._sealed:
            raise RuntimeError("start() called after setup_callback()")
        self._pending += 1

    def end(self) -> None:
        if self._pending <= 0:
            raise RuntimeError("end() called without a matching start()")
        self._pending -= 1
        self._maybe_fire()

    def setup_callback(self, fn: Callable[[], Any]) -> None:
        if self._sealed:
            raise RuntimeError("completion callback already registered")
        self._callback = fn
        self._sealed = True
        self._maybe_fire()

    def _maybe_fire(self) -> None:
        if self._fired or not self._sealed or self._pending:
            return
        if self._errors or self._aborted:
            # A failed unit suppresses completion; join() reports the error.
            return
        self._fired = True
        assert self._callback is not None
        try:
            self._callback()
        except Exception as e:
            self._errors.append(e)

    def spawn(self, coro: Awaitable[Any], *, name: str | None = None) -> asyncio.Task:
        """Run ``coro`` as one unit of pending work.

        Must be called from inside a running event loop.
        """
        self.start()
        t = asyncio.ensure_future(coro)
        if name:
            t.set_name(name)
        t.add_done_callback(self._on_done)
        self._tasks.append(t)
        return t

    def _on_done(self, t: asyncio.Task) -> None:
        if not t.cancelled() and t.exception() is not None:
            self._errors.append(t.exception())
        self.end()

    async def join(self, timeout: float | None = None) -> None:
        """Wait for all spawned work, re-raising the first failure."""
        logger = get_logger()
        if self._tasks:
            logger.debug("waiting on %d pending task(s)", self._pending)
            done, not_done = await asyncio.wait(self._tasks, timeout=timeout)
            if not_done:
                self._aborted = True
                for t in not_done:
                    t.cancel()
                await asyncio.gather(*not_done, return_exceptions=True)
                raise StalledAsyncError(
                    code=E_STALLED,
                    message=(
                        f"{len(not_done)} asynchronous operation(s) did not "
                        f"finish within {timeout}s"
                    ),
                    context={"tasks": sorted(t.get_name() for t in not_done)},
                )
        if self._errors:
            raise self._errors[0]
