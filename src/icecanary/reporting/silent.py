from __future__ import annotations

from .base import Reporter


class SilentReporter(Reporter):
    """Quiet mode (``-r silent``); even the final success line is dropped."""

    def success(self, message: str) -> None:
        pass
