"""Build file loading (YAML) for IceCanary."""

from __future__ import annotations
from pathlib import Path
from typing import Any, Mapping

import yaml

from ..errors import config_error
from .models import BuildConfig, LanguageData, LanguageEntry

__all__ = ["load_config", "parse_config"]

_REQUIRED = ("name", "version", "mcver", "packformat")


def load_config(path: str | Path) -> BuildConfig:
    p = Path(path)
    if not p.is_file():
        raise config_error(f"Build file {p} not found.", {"path": str(p)})
    try:
        data: Any = yaml.safe_load(p.read_text(encoding="utf-8"))
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise config_error(
            f"Failed to parse build file:\n{e}", {"path": str(p)}
        ) from e
    if not isinstance(data, dict):
        raise config_error(
            "Root of build file must be a mapping", {"path": str(p)}
        )
    return parse_config(data, p.parent)


def _scalar(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise config_error(f"'{key}' must be a scalar", {"field": key})
    return str(value)


def _parse_language(code: str, raw: Any) -> LanguageEntry:
    if not isinstance(raw, dict):
        raise config_error(
            f"Language '{code}' must be a mapping", {"language": code}
        )
    for key in ("name", "region"):
        if raw.get(key) is None:
            raise config_error(
                f"Language '{code}' is missing '{key}'",
                {"language": code, "field": key},
            )
    data = raw.get("data")
    lang_data = None
    if data is not None:
        if not isinstance(data, dict) or not data.get("file"):
            raise config_error(
                f"Language '{code}' data must declare a 'file'",
                {"language": code},
            )
        objective = data.get("objective")
        lang_data = LanguageData(
            file=str(data["file"]),
            format=_scalar(data, "format"),
            objective=None if objective is None else bool(objective),
            type=_scalar(data, "type"),
            lang=_scalar(data, "lang"),
        )
    bidirectional = raw.get("bidirectional")
    return LanguageEntry(
        name=str(raw["name"]),
        region=str(raw["region"]),
        bidirectional=None if bidirectional is None else bool(bidirectional),
        ns=_scalar(raw, "ns"),
        data=lang_data,
    )


def _string_map(data: Mapping[str, Any], key: str) -> dict[str, str]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise config_error(f"'{key}' must be a mapping", {"field": key})
    return {str(k): str(v) for k, v in value.items()}


def parse_config(data: Mapping[str, Any], base_dir: Path) -> BuildConfig:
    missing = [k for k in _REQUIRED if data.get(k) is None]
    if missing:
        raise config_error(
            "Build file is missing required fields: " + ", ".join(missing),
            {"missing": missing},
        )
    try:
        packformat = int(data["packformat"])
    except (TypeError, ValueError) as e:
        raise config_error(
            f"'packformat' must be an integer, got {data['packformat']!r}",
            {"field": "packformat"},
        ) from e

    languages_raw = data.get("languages") or {}
    if not isinstance(languages_raw, dict):
        raise config_error("'languages' must be a mapping", {"field": "languages"})
    languages = {
        str(code): _parse_language(str(code), entry)
        for code, entry in languages_raw.items()
    }
    return BuildConfig(
        name=str(data["name"]),
        version=str(data["version"]),
        mcver=str(data["mcver"]),
        packformat=packformat,
        description=data.get("description"),
        icon=_scalar(data, "icon"),
        languages=languages,
        raw=_string_map(data, "raw"),
        archive_raw=_scalar(data, "archive_raw"),
        packaging_comment=_scalar(data, "packaging_comment"),
        base_dir=base_dir,
    )
