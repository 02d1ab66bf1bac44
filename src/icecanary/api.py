"""High-level build API for IceCanary."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import BuildConfig, load_config
from .errors import E_INTERNAL, IceCanaryError
from .fetcher import AssetFetcher, MojangAssetFetcher
from .logging import section
from .reporting import get_reporter, task
from .sink import OutputSink, create_sink, prepare_output_dir
from .stages.languages import LANGUAGES_TASK
from .stages import (
    write_archive_raw,
    write_icon,
    write_languages,
    write_metadata,
    write_raw,
)
from .tracker import AsyncTracker

__all__ = [
    "BuildOptions",
    "BuildResult",
    "build_pack",
    "build_pack_async",
    "run_stages",
    "DEFAULT_BUILD_FILE",
    "DEFAULT_OUTPUT_DIR",
]

DEFAULT_BUILD_FILE = Path("icecanary.yml")
DEFAULT_OUTPUT_DIR = Path("outputs")
SUCCESS_MESSAGE = "Successful!"


@dataclass(slots=True)
class BuildOptions:
    build_file: Path = DEFAULT_BUILD_FILE
    output_dir: Path = DEFAULT_OUTPUT_DIR
    archive: bool = True
    # Overrides config.mcver for upstream asset lookups only
    mc_version: Optional[str] = None
    # Seconds to wait for upstream merges; None waits forever
    fetch_timeout: Optional[float] = 60.0
    cache_dir: Optional[Path] = None
    fetcher: Optional[AssetFetcher] = None


@dataclass(slots=True)
class BuildResult:
    output_path: Path
    files_written: int
    merged_languages: int


def run_stages(
    config: BuildConfig,
    sink: OutputSink,
    tracker: AsyncTracker,
    fetcher: AssetFetcher | None,
    mc_version: str,
) -> int:
    """Run every generation stage in order; returns scheduled merges.

    All stages run synchronously. Merges are only registered on ``tracker``
    here; they complete once the caller yields to the event loop.
    """
    with task("stage.metadata", "Generate pack.mcmeta") as stats:
        write_metadata(config, sink)
        stats["files"] = 1
    with task("stage.icon", "Copy pack icon") as stats:
        stats["files"] = int(write_icon(config, sink))
    with task(
        LANGUAGES_TASK, "Generate languages", total=len(config.languages)
    ) as stats:
        merges = write_languages(config, sink, tracker, fetcher, mc_version)
        stats["merged"] = merges
    with task("stage.raw", "Copy raw assets") as stats:
        stats["files"] = write_raw(config, sink)
    with task("stage.archive_raw", "Copy archive root files") as stats:
        stats["files"] = write_archive_raw(config, sink)
    return merges


async def build_pack_async(options: BuildOptions) -> BuildResult:
    rep = get_reporter()
    config = load_config(options.build_file)
    mc_version = options.mc_version or config.mcver
    prepare_output_dir(options.output_dir)
    sink = create_sink(config, options.output_dir, archive=options.archive)
    fetcher = options.fetcher
    if fetcher is None:
        fetcher = MojangAssetFetcher(cache_dir=options.cache_dir)

    tracker = AsyncTracker()
    with section(f"Building {config.name}-{config.version}"):
        merges = run_stages(config, sink, tracker, fetcher, mc_version)
    if merges:
        rep.status(
            f"Waiting for {merges} upstream merge(s) (Minecraft {mc_version})"
        )

    finalized: list[Path] = []
    tracker.setup_callback(lambda: finalized.append(sink.finalize()))
    await tracker.join(options.fetch_timeout)
    if not finalized:
        raise IceCanaryError(
            code=E_INTERNAL,
            message="Build finished without finalizing its output",
            context={"pending": tracker.pending},
        )
    return BuildResult(
        output_path=finalized[0],
        files_written=sink.files_written,
        merged_languages=merges,
    )


def build_pack(options: BuildOptions) -> BuildResult:
    result = asyncio.run(build_pack_async(options))
    get_reporter().success(SUCCESS_MESSAGE)
    return result
