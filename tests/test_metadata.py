"""pack.mcmeta and pack.png stages."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from icecanary.config import parse_config
from icecanary.errors import FatalConfigError
from icecanary.sink import DirectorySink
from icecanary.stages import build_pack_meta, write_icon, write_metadata


def _config(base: Path = Path("."), **extra):
    data = {"name": "P", "version": "1", "mcver": "1.16.5", "packformat": 6}
    data.update(extra)
    return parse_config(data, base)


def test_meta_without_languages_has_no_language_key():
    meta = build_pack_meta(_config(description="Hello"))
    assert meta == {"pack": {"description": "Hello", "pack_format": 6}}


def test_meta_language_defaults():
    cfg = _config(
        languages={
            "zh_meme": {"name": "Meme", "region": "China"},
            "ar_xx": {"name": "R", "region": "Z", "bidirectional": True},
        }
    )
    meta = build_pack_meta(cfg)
    assert meta["language"] == {
        "zh_meme": {"name": "Meme", "region": "China", "bidirectional": False},
        "ar_xx": {"name": "R", "region": "Z", "bidirectional": True},
    }


def test_write_metadata_emits_json(tmp_path: Path):
    sink = DirectorySink(tmp_path, packformat=6)
    write_metadata(_config(), sink)
    data = json.loads((tmp_path / "pack.mcmeta").read_text(encoding="utf-8"))
    assert data == {"pack": {"description": None, "pack_format": 6}}


def test_icon_copied_verbatim(tmp_path: Path):
    icon = tmp_path / "icon.png"
    icon.write_bytes(b"\x89PNG\r\n\x1a\nDATA")
    out = tmp_path / "out"
    sink = DirectorySink(out, packformat=6)
    assert write_icon(_config(tmp_path, icon="icon.png"), sink) is True
    assert (out / "pack.png").read_bytes() == icon.read_bytes()


def test_icon_absent_is_noop(tmp_path: Path):
    sink = DirectorySink(tmp_path, packformat=6)
    assert write_icon(_config(), sink) is False
    assert sink.files_written == 0


def test_icon_missing_file_is_fatal(tmp_path: Path):
    sink = DirectorySink(tmp_path / "out", packformat=6)
    with pytest.raises(FatalConfigError):
        write_icon(_config(tmp_path, icon="missing.png"), sink)
