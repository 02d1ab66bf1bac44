"""Raw asset copying into assets/<name>/ and the output root."""

from __future__ import annotations

from pathlib import Path

import pytest

from icecanary.config import parse_config
from icecanary.errors import FatalConfigError
from icecanary.sink import ArchiveSink, DirectorySink
from icecanary.stages import copy_tree, write_archive_raw, write_raw


def _make_tree(root: Path) -> dict[str, bytes]:
    files = {
        "textures/block/stone.png": b"\x00\x01stone",
        "textures/item/Apple.png": b"apple",
        "models/item/apple.json": b'{"parent":"item/generated"}',
        "sounds.json": b"{}",
    }
    for rel, data in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)
    return files


def _config(base: Path, **extra):
    data = {"name": "P", "version": "1", "mcver": "1.16.5", "packformat": 2}
    data.update(extra)
    return parse_config(data, base)


def test_copy_tree_preserves_every_file_once(tmp_path: Path):
    src = tmp_path / "src"
    files = _make_tree(src)
    sink = ArchiveSink(tmp_path / "out", "p.zip", packformat=2)
    count = copy_tree(sink, "assets/mypack", src)
    assert count == len(files)
    assert sink.entries == {f"assets/mypack/{rel}": data for rel, data in files.items()}


def test_write_raw_uses_configured_names(tmp_path: Path):
    _make_tree(tmp_path / "res" / "mc")
    (tmp_path / "res" / "other").mkdir(parents=True)
    (tmp_path / "res" / "other" / "x.txt").write_bytes(b"x")
    cfg = _config(tmp_path, raw={"minecraft": "res/mc", "other": "res/other"})
    out = tmp_path / "out"
    sink = DirectorySink(out, packformat=2)
    assert write_raw(cfg, sink) == 5
    assert (out / "assets/minecraft/textures/item/Apple.png").read_bytes() == b"apple"
    assert (out / "assets/other/x.txt").read_bytes() == b"x"


def test_raw_copy_is_lowercased_for_new_formats(tmp_path: Path):
    _make_tree(tmp_path / "mc")
    sink = ArchiveSink(tmp_path / "out", "p.zip", packformat=4)
    copy_tree(sink, "assets/MyPack", tmp_path / "mc")
    assert "assets/mypack/textures/item/apple.png" in sink.entries
    assert all(name == name.lower() for name in sink.entries)


def test_archive_raw_goes_to_root(tmp_path: Path):
    extra = tmp_path / "extra"
    (extra / "docs").mkdir(parents=True)
    (extra / "LICENSE.txt").write_bytes(b"MIT")
    (extra / "docs" / "readme.md").write_bytes(b"# hi")
    sink = ArchiveSink(tmp_path / "out", "p.zip", packformat=2)
    assert write_archive_raw(_config(tmp_path, archive_raw="extra"), sink) == 2
    assert sink.entries == {"LICENSE.txt": b"MIT", "docs/readme.md": b"# hi"}


def test_archive_raw_absent_is_noop(tmp_path: Path):
    sink = ArchiveSink(tmp_path, "p.zip", packformat=2)
    assert write_archive_raw(_config(tmp_path), sink) == 0
    assert sink.entries == {}


def test_missing_raw_source_is_fatal(tmp_path: Path):
    sink = DirectorySink(tmp_path / "out", packformat=2)
    with pytest.raises(FatalConfigError):
        write_raw(_config(tmp_path, raw={"x": "missing"}), sink)
