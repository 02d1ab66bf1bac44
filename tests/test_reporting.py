"""Reporter output and task bookkeeping."""

from __future__ import annotations

import io
import re
from pathlib import Path

import pytest

from icecanary.api import BuildOptions, build_pack
from icecanary.reporting import (
    PlainReporter,
    SilentReporter,
    TaskStatus,
    set_reporter,
    task,
)
from pack_helper import FakeFetcher, write_build_file


def _plain() -> tuple[PlainReporter, io.StringIO]:
    stream = io.StringIO()
    rep = PlainReporter(stream=stream, use_color=False)
    set_reporter(rep)
    return rep, stream


def test_end_task_renders_counts_and_stats():
    rep, stream = _plain()
    rep.start_task("t", "Copy raw textures", total=2)
    rep.advance("t", current_item="a.png")
    rep.advance("t")
    rep.end_task("t", TaskStatus.SUCCESS, files=2, merged=0, ignored=5)
    lines = stream.getvalue().splitlines()
    assert lines[0] == "   · Copy raw textures: a.png (1/2)"
    assert lines[1] == "   · Copy raw textures: #2 (2/2)"
    assert re.fullmatch(
        r" ✔ Copy raw textures 2/2 \(\d+\.\d\ds\) \[files=2 merged=0\]", lines[2]
    )


def test_task_context_passes_stats_on_success():
    _, stream = _plain()
    with task("stage.raw", "Copy raw assets") as stats:
        stats["files"] = 3
    assert re.fullmatch(
        r" ✔ Copy raw assets \(\d+\.\d\ds\) \[files=3\]\n", stream.getvalue()
    )


def test_task_context_marks_failure_and_reraises():
    _, stream = _plain()
    with pytest.raises(OSError):
        with task("stage.icon", "Copy pack icon") as stats:
            stats["files"] = 0
            raise OSError("gone")
    assert stream.getvalue().startswith(" ✖ Copy pack icon (")
    assert stream.getvalue().endswith("[files=0]\n")


def test_unknown_task_ids_are_ignored():
    rep, stream = _plain()
    rep.advance("missing")
    rep.end_task("missing")
    assert stream.getvalue() == ""


def test_build_reports_stage_stats(tmp_path: Path):
    _, stream = _plain()
    (tmp_path / "res").mkdir()
    (tmp_path / "res" / "a.png").write_bytes(b"a")
    (tmp_path / "res" / "b.png").write_bytes(b"b")
    (tmp_path / "meme.json").write_text('{"k": "v"}', encoding="utf-8")
    cfg = {
        "name": "Test",
        "version": "1.0",
        "mcver": "1.16.5",
        "packformat": 4,
        "languages": {
            "zh_meme": {
                "name": "Meme",
                "region": "China",
                "data": {"file": "meme.json", "type": "merge", "lang": "zh_cn"},
            }
        },
        "raw": {"textures": "res"},
    }
    fetcher = FakeFetcher({"assets/minecraft/lang/zh_cn.json": {"x": "y"}})
    build_pack(
        BuildOptions(
            build_file=write_build_file(tmp_path, cfg),
            output_dir=tmp_path / "out",
            fetcher=fetcher,
        )
    )
    out = stream.getvalue()
    assert re.search(r"Copy raw textures \(\d+\.\d\ds\) \[files=2\]", out)
    assert re.search(r"Copy raw assets \(\d+\.\d\ds\) \[files=2\]", out)
    assert re.search(r"Generate languages 1/1 \(\d+\.\d\ds\) \[merged=1\]", out)
    assert re.search(r"Generate pack.mcmeta \(\d+\.\d\ds\) \[files=1\]", out)
    assert out.endswith("Successful!\n")


def test_silent_reporter_writes_nothing(capsys):
    set_reporter(SilentReporter())
    with task("stage.raw", "Copy raw assets", total=1) as stats:
        stats["files"] = 1
    rep = SilentReporter()
    rep.status("x")
    rep.error("x")
    rep.success("x")
    captured = capsys.readouterr()
    assert captured.out == "" and captured.err == ""


def test_rich_completion_line_shows_stats_literally():
    from rich.console import Console

    from icecanary.reporting import RichReporter

    buf = io.StringIO()
    rep = RichReporter(console=Console(file=buf, width=120, color_system=None))
    rep.start_task("stage.raw", "Copy raw assets")
    rep.end_task("stage.raw", TaskStatus.SUCCESS, files=4)
    assert re.search(r"✔ Copy raw assets \(\d+\.\d\ds\) \[files=4\]", buf.getvalue())
