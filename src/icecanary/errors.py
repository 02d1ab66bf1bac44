"""Error definitions for IceCanary."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_CONFIG = "E_CONFIG"
E_LANG_FORMAT = "E_LANG_FORMAT"
E_LANG_DATA = "E_LANG_DATA"
E_FETCH = "E_FETCH"
E_STALLED = "E_STALLED"
E_INTERNAL = "E_INTERNAL"


@dataclass
class IceCanaryError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )


class FatalConfigError(IceCanaryError):
    pass


class UnsupportedFormatError(IceCanaryError):
    pass


class LanguageDataError(IceCanaryError):
    pass


class AssetFetchError(IceCanaryError):
    pass


class StalledAsyncError(IceCanaryError):
    pass


def config_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> FatalConfigError:
    return FatalConfigError(code=E_CONFIG, message=message, context=context)


def fetch_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> AssetFetchError:
    return AssetFetchError(code=E_FETCH, message=message, context=context)


__all__ = [
    "IceCanaryError",
    "FatalConfigError",
    "UnsupportedFormatError",
    "LanguageDataError",
    "AssetFetchError",
    "StalledAsyncError",
    "config_error",
    "fetch_error",
    "E_CONFIG",
    "E_LANG_FORMAT",
    "E_LANG_DATA",
    "E_FETCH",
    "E_STALLED",
    "E_INTERNAL",
]
