"""pack.png generation."""

from __future__ import annotations

from ..config import BuildConfig
from ..errors import config_error
from ..sink import OutputSink

__all__ = ["write_icon", "ICON_NAME"]

ICON_NAME = "pack.png"


def write_icon(config: BuildConfig, sink: OutputSink) -> bool:
    if not config.icon:
        return False
    path = config.resolve_path(config.icon)
    if not path.is_file():
        raise config_error(f"Icon file {path} not found.", {"icon": str(path)})
    sink.write(ICON_NAME, path.read_bytes())
    return True
