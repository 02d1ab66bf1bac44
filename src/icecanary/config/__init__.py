from .loader import load_config, parse_config
from .models import (
    BuildConfig,
    LanguageData,
    LanguageEntry,
    ResolvedLanguage,
    resolve_language,
)

__all__ = [
    "load_config",
    "parse_config",
    "BuildConfig",
    "LanguageData",
    "LanguageEntry",
    "ResolvedLanguage",
    "resolve_language",
]
