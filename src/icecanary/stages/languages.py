"""Language file generation.

Each configured language becomes ``assets/<ns>/lang/<code>.json``. Entries
of type ``merge`` are completed with the upstream game translations for
``data.lang``; those run as tracker tasks and finish after every other
stage has issued its writes.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from ..config import BuildConfig, ResolvedLanguage, resolve_language
from ..errors import (
    E_LANG_DATA,
    E_LANG_FORMAT,
    LanguageDataError,
    UnsupportedFormatError,
    fetch_error,
)
from ..fetcher import AssetFetcher, fetch_asset_async
from ..flatten import flatten_texts
from ..logging import get_logger
from ..reporting import get_reporter
from ..sink import OutputSink
from ..tracker import AsyncTracker

__all__ = [
    "load_texts",
    "merge_texts",
    "encode_texts",
    "upstream_lang_path",
    "write_languages",
    "SUPPORTED_FORMATS",
    "LANGUAGES_TASK",
]

SUPPORTED_FORMATS = ("json", "yaml")
LANGUAGES_TASK = "stage.languages"


def _check_format(lang: ResolvedLanguage) -> None:
    if lang.format not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(
            code=E_LANG_FORMAT,
            message=f"Unknown format of language translate data for {lang.name}",
            context={"language": lang.code, "format": lang.format},
        )


def _parse(lang: ResolvedLanguage, text: str) -> Any:
    if lang.format == "yaml":
        return yaml.safe_load(text)
    return json.loads(text)


def load_texts(lang: ResolvedLanguage, base_dir: Path) -> Dict[str, Any]:
    _check_format(lang)
    assert lang.file is not None
    path = Path(lang.file)
    if not path.is_absolute():
        path = Path(base_dir) / path
    try:
        data = _parse(lang, path.read_text(encoding="utf-8"))
    except OSError as e:
        raise LanguageDataError(
            code=E_LANG_DATA,
            message=f"Cannot read language data {path}: {e}",
            context={"language": lang.code, "path": str(path)},
        ) from e
    except (ValueError, yaml.YAMLError) as e:
        raise LanguageDataError(
            code=E_LANG_DATA,
            message=f"Failed to parse language data {path}:\n{e}",
            context={"language": lang.code, "path": str(path)},
        ) from e
    if lang.objective:
        return flatten_texts(data)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise LanguageDataError(
            code=E_LANG_DATA,
            message=f"Language data {path} must be a mapping of keys to texts",
            context={"language": lang.code, "path": str(path)},
        )
    return data


def merge_texts(
    local: Mapping[str, Any], upstream: Mapping[str, Any]
) -> Dict[str, Any]:
    """Fill keys missing from ``local`` with ``upstream`` values."""
    merged = dict(local)
    for key, value in upstream.items():
        if key not in merged:
            merged[key] = value
    return merged


def encode_texts(texts: Mapping[str, Any]) -> str:
    return json.dumps(texts, ensure_ascii=False, separators=(",", ":"))


def upstream_lang_path(locale: str) -> str:
    return f"assets/minecraft/lang/{locale}.json"


async def _merge_and_write(
    lang: ResolvedLanguage,
    texts: Dict[str, Any],
    sink: OutputSink,
    fetcher: AssetFetcher,
    mc_version: str,
) -> None:
    asset = upstream_lang_path(lang.lang)
    raw = await fetch_asset_async(fetcher, mc_version, asset)
    try:
        upstream = json.loads(raw)
    except ValueError as e:
        raise fetch_error(
            f"Upstream language file {asset} is not valid JSON",
            {"version": mc_version, "asset": asset},
        ) from e
    merged = merge_texts(texts, upstream)
    sink.write(lang.output_path, encode_texts(merged))
    get_reporter().verbose(
        f"merged {len(merged) - len(texts)} upstream key(s) into {lang.code}"
    )


def write_languages(
    config: BuildConfig,
    sink: OutputSink,
    tracker: AsyncTracker,
    fetcher: AssetFetcher | None,
    mc_version: str,
) -> int:
    """Write language files; returns the number of merges scheduled.

    Merges are spawned on ``tracker`` and require a running event loop.
    """
    logger = get_logger()
    rep = get_reporter()
    merges = 0
    for code, entry in config.languages.items():
        lang = resolve_language(code, entry)
        rep.advance(LANGUAGES_TASK, current_item=code)
        if lang.file is None:
            logger.debug("language %s has no data, mcmeta only", code)
            continue
        logger.info("Creating language %s as %s", lang.name, code)
        texts = load_texts(lang, config.base_dir)
        if lang.is_merge:
            if fetcher is None:
                raise fetch_error(
                    f"Language {code} requires an asset fetcher for merging",
                    {"language": code},
                )
            tracker.spawn(
                _merge_and_write(lang, texts, sink, fetcher, mc_version),
                name=f"merge:{code}",
            )
            merges += 1
        else:
            sink.write(lang.output_path, encode_texts(texts))
    return merges
