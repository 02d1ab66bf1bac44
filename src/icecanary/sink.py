"""Output sinks: where generated pack files end up.

Every stage writes through an :class:`OutputSink`. Two strategies exist:
:class:`DirectorySink` writes each file to disk immediately and
:class:`ArchiveSink` buffers entries in memory and emits a single ZIP archive
when finalized. Both apply the same naming rules so the two outputs hold
identical trees.
"""

from __future__ import annotations

import shutil
import zipfile
from pathlib import Path, PurePosixPath
from typing import Dict, Union

from .config import BuildConfig
from .logging import get_logger

__all__ = [
    "OutputSink",
    "DirectorySink",
    "ArchiveSink",
    "Content",
    "archive_comment",
    "create_sink",
    "normalize_entry_name",
    "prepare_output_dir",
    "LOWERCASE_PACK_FORMAT",
]

# Pack formats from this value on require lowercase resource paths.
LOWERCASE_PACK_FORMAT = 3

Content = Union[bytes, bytearray, str]


def normalize_entry_name(name: str) -> str:
    """Return ``name`` as a relative forward-slash path.

    Leading separators and drive markers are stripped; empty and ``.``
    segments are dropped. ``..`` segments raise ``ValueError``.
    """
    cleaned = name.replace("\\", "/")
    if len(cleaned) >= 2 and cleaned[1] == ":" and cleaned[0].isalpha():
        cleaned = cleaned[2:]
    parts = [p for p in cleaned.split("/") if p not in ("", ".")]
    if ".." in parts:
        raise ValueError(f"Entry name escapes output root: {name!r}")
    if not parts:
        raise ValueError(f"Empty entry name: {name!r}")
    return str(PurePosixPath(*parts))


def _to_bytes(content: Content) -> bytes:
    if isinstance(content, str):
        return content.encode("utf-8")
    return bytes(content)


class OutputSink:
    """Destination for generated files."""

    def __init__(self, packformat: int):
        self.packformat = packformat
        self.files_written = 0

    def entry_name(self, name: str) -> str:
        if self.packformat >= LOWERCASE_PACK_FORMAT:
            name = name.lower()
        return normalize_entry_name(name)

    def write(self, name: str, content: Content) -> str:
        entry = self.entry_name(name)
        self._write(entry, _to_bytes(content))
        self.files_written += 1
        get_logger().debug("wrote %s", entry)
        return entry

    def _write(self, entry: str, data: bytes) -> None:  # noqa: D401
        raise NotImplementedError

    def finalize(self) -> Path:  # noqa: D401
        raise NotImplementedError


class DirectorySink(OutputSink):
    def __init__(self, output_dir: Path, packformat: int):
        super().__init__(packformat)
        self.output_dir = Path(output_dir)

    def _write(self, entry: str, data: bytes) -> None:
        target = self.output_dir / entry
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    def finalize(self) -> Path:
        return self.output_dir


class ArchiveSink(OutputSink):
    def __init__(
        self,
        output_dir: Path,
        archive_name: str,
        packformat: int,
        comment: str = "",
    ):
        super().__init__(packformat)
        self.archive_path = Path(output_dir) / archive_name
        self.comment = comment
        self._entries: Dict[str, bytes] = {}
        self._finalized = False

    @property
    def entries(self) -> Dict[str, bytes]:
        return dict(self._entries)

    def _write(self, entry: str, data: bytes) -> None:
        if self._finalized:
            raise RuntimeError("archive already finalized")
        self._entries[entry] = data

    def finalize(self) -> Path:
        if self._finalized:
            raise RuntimeError("archive already finalized")
        self._finalized = True
        self.archive_path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(
            self.archive_path, "w", compression=zipfile.ZIP_DEFLATED
        ) as zf:
            for entry, data in self._entries.items():
                zf.writestr(entry, data)
            # ZIP comments are capped at 65535 bytes.
            zf.comment = self.comment.encode("utf-8")[:0xFFFF]
        get_logger().info("Zip file output to %s", self.archive_path)
        return self.archive_path


def archive_comment(config: BuildConfig) -> str:
    comment = (
        "Generated by IceCanary\n"
        f"Pack Name: {config.name}\n"
        f"Pack Version: {config.version}\n"
        f"Pack Description: {config.description}\n"
        f"Target Minecraft Version: {config.mcver}\n"
    )
    if config.packaging_comment:
        comment += f"\n{config.packaging_comment}"
    return comment


def create_sink(
    config: BuildConfig, output_dir: Path, archive: bool = True
) -> OutputSink:
    if not archive:
        return DirectorySink(output_dir, config.packformat)
    return ArchiveSink(
        output_dir,
        config.archive_name,
        config.packformat,
        comment=archive_comment(config),
    )


def prepare_output_dir(path: Path) -> None:
    """Create ``path``, or empty it if it already exists."""
    path = Path(path)
    if not path.exists():
        path.mkdir(parents=True)
        return
    if not path.is_dir():
        raise NotADirectoryError(path)
    for child in path.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()
