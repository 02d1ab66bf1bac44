"""Dataclass models for the parsed build file."""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

DEFAULT_NAMESPACE = "minecraft"
DEFAULT_FORMAT = "json"
DEFAULT_MERGE_LANG = "zh_CN"
MERGE_TYPE = "merge"


@dataclass(frozen=True, slots=True)
class LanguageData:
    file: str
    format: Optional[str] = None
    objective: Optional[bool] = None
    type: Optional[str] = None
    lang: Optional[str] = None


@dataclass(frozen=True, slots=True)
class LanguageEntry:
    name: str
    region: str
    bidirectional: Optional[bool] = None
    ns: Optional[str] = None
    data: Optional[LanguageData] = None


@dataclass(frozen=True, slots=True)
class ResolvedLanguage:
    """A language entry with every optional field defaulted."""

    code: str
    name: str
    region: str
    bidirectional: bool
    ns: str
    file: Optional[str]
    format: str
    objective: bool
    type: Optional[str]
    lang: str

    @property
    def is_merge(self) -> bool:
        return self.type == MERGE_TYPE

    @property
    def output_path(self) -> str:
        return f"assets/{self.ns}/lang/{self.code}.json"


@dataclass(frozen=True, slots=True)
class BuildConfig:
    name: str
    version: str
    mcver: str
    packformat: int
    description: Optional[str] = None
    icon: Optional[str] = None
    languages: Dict[str, LanguageEntry] = field(default_factory=dict)
    raw: Dict[str, str] = field(default_factory=dict)
    archive_raw: Optional[str] = None
    packaging_comment: Optional[str] = None
    base_dir: Path = field(default_factory=Path)

    @property
    def archive_name(self) -> str:
        return f"{self.name}-{self.mcver}-{self.version}.zip"

    def resolve_path(self, value: str) -> Path:
        """Resolve a build-file relative path."""
        p = Path(value)
        return p if p.is_absolute() else self.base_dir / p


def resolve_language(code: str, entry: LanguageEntry) -> ResolvedLanguage:
    data = entry.data
    return ResolvedLanguage(
        code=code,
        name=entry.name,
        region=entry.region,
        bidirectional=bool(entry.bidirectional),
        ns=entry.ns or DEFAULT_NAMESPACE,
        file=data.file if data else None,
        format=(data.format if data and data.format else DEFAULT_FORMAT),
        objective=bool(data.objective) if data else False,
        type=data.type if data else None,
        lang=(data.lang if data and data.lang else DEFAULT_MERGE_LANG),
    )


__all__ = [
    "BuildConfig",
    "LanguageEntry",
    "LanguageData",
    "ResolvedLanguage",
    "resolve_language",
    "DEFAULT_NAMESPACE",
    "DEFAULT_FORMAT",
    "DEFAULT_MERGE_LANG",
    "MERGE_TYPE",
]
