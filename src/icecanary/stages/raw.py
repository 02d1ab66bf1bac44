"""Raw asset copying."""

from __future__ import annotations

import os
from pathlib import Path

from ..config import BuildConfig
from ..errors import config_error
from ..logging import get_logger
from ..reporting import task
from ..sink import OutputSink

__all__ = ["copy_tree", "write_raw", "write_archive_raw"]


def copy_tree(sink: OutputSink, prefix: str, source_dir: Path) -> int:
    """Copy every file under ``source_dir`` to ``prefix/<relative path>``.

    Returns the number of files written. An empty ``prefix`` copies to the
    output root.
    """
    source_dir = Path(source_dir)
    if not source_dir.is_dir():
        raise config_error(
            f"Raw source directory {source_dir} not found.",
            {"path": str(source_dir)},
        )
    count = 0
    for root, dirs, files in os.walk(source_dir):
        dirs.sort()
        rel_root = Path(root).relative_to(source_dir).as_posix()
        for file in sorted(files):
            parts = [p for p in (prefix, rel_root, file) if p and p != "."]
            sink.write("/".join(parts), (Path(root) / file).read_bytes())
            count += 1
    return count


def write_raw(config: BuildConfig, sink: OutputSink) -> int:
    logger = get_logger()
    total = 0
    for name, path in config.raw.items():
        logger.info("Creating raw data from %s as %s", path, name)
        with task(f"raw.{name}", f"Copy raw {name}") as stats:
            stats["files"] = copy_tree(
                sink, f"assets/{name}", config.resolve_path(path)
            )
            total += stats["files"]
    return total


def write_archive_raw(config: BuildConfig, sink: OutputSink) -> int:
    if not config.archive_raw:
        return 0
    get_logger().info("Copying %s to output root", config.archive_raw)
    return copy_tree(sink, "", config.resolve_path(config.archive_raw))
