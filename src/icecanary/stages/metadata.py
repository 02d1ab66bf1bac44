"""pack.mcmeta generation."""

from __future__ import annotations

import json
from typing import Any, Dict

from ..config import BuildConfig, resolve_language
from ..sink import OutputSink

__all__ = ["build_pack_meta", "write_metadata", "MCMETA_NAME"]

MCMETA_NAME = "pack.mcmeta"


def build_pack_meta(config: BuildConfig) -> Dict[str, Any]:
    meta: Dict[str, Any] = {
        "pack": {
            "description": config.description,
            "pack_format": config.packformat,
        }
    }
    if config.languages:
        languages = {}
        for code, entry in config.languages.items():
            lang = resolve_language(code, entry)
            languages[code] = {
                "name": lang.name,
                "region": lang.region,
                "bidirectional": lang.bidirectional,
            }
        meta["language"] = languages
    return meta


def write_metadata(config: BuildConfig, sink: OutputSink) -> None:
    meta = build_pack_meta(config)
    sink.write(
        MCMETA_NAME,
        json.dumps(meta, ensure_ascii=False, separators=(",", ":")),
    )
