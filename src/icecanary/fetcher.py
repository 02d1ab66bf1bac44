"""Upstream Minecraft asset lookup.

Assets such as ``assets/minecraft/lang/zh_cn.json`` are not shipped in the
client jar; they are content-addressed objects listed in the asset index of
a game version. Resolution goes version manifest -> version JSON -> asset
index -> object hash -> resource download.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

import requests

from .errors import fetch_error
from .logging import get_logger

__all__ = [
    "AssetFetcher",
    "MojangAssetFetcher",
    "fetch_asset_async",
    "VERSION_MANIFEST_URL",
    "RESOURCES_URL",
]

VERSION_MANIFEST_URL = (
    "https://piston-meta.mojang.com/mc/game/version_manifest_v2.json"
)
RESOURCES_URL = "https://resources.download.minecraft.net"
ASSET_PREFIX = "assets/"


class AssetFetcher(Protocol):
    def fetch_asset(self, mc_version: str, asset_path: str) -> bytes: ...


class MojangAssetFetcher:
    """Fetch game assets from Mojang's public endpoints.

    Metadata documents are memoised for the lifetime of the fetcher. When
    ``cache_dir`` is set, downloaded objects are stored there by hash and
    verified on reuse.
    """

    def __init__(
        self,
        cache_dir: Path | None = None,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
        manifest_url: str = VERSION_MANIFEST_URL,
    ):
        self.cache_dir = Path(cache_dir) if cache_dir else None
        self.session = session or requests.Session()
        self.timeout = timeout
        self.manifest_url = manifest_url
        self._json_cache: Dict[str, Any] = {}

    def _get(self, url: str) -> bytes:
        get_logger().debug("GET %s", url)
        try:
            res = self.session.get(url, timeout=self.timeout)
            res.raise_for_status()
        except requests.RequestException as e:
            raise fetch_error(
                f"Request failed: {url}: {e}", {"url": url}
            ) from e
        return res.content

    def _get_json(self, url: str) -> Any:
        if url not in self._json_cache:
            try:
                self._json_cache[url] = json.loads(self._get(url))
            except ValueError as e:
                raise fetch_error(
                    f"Invalid JSON from {url}", {"url": url}
                ) from e
        return self._json_cache[url]

    def asset_index(self, mc_version: str) -> Dict[str, Any]:
        manifest = self._get_json(self.manifest_url)
        entry = next(
            (
                v
                for v in manifest.get("versions", [])
                if v.get("id") == mc_version
            ),
            None,
        )
        if entry is None:
            raise fetch_error(
                f"Unknown Minecraft version {mc_version}",
                {"version": mc_version},
            )
        version_meta = self._get_json(entry["url"])
        return self._get_json(version_meta["assetIndex"]["url"])

    def _cached(self, digest: str) -> bytes | None:
        if self.cache_dir is None:
            return None
        path = self.cache_dir / digest[:2] / digest
        if not path.is_file():
            return None
        data = path.read_bytes()
        if hashlib.sha1(data).hexdigest() != digest:
            get_logger().warning("Discarding corrupt cache entry %s", path)
            return None
        return data

    def _store(self, digest: str, data: bytes) -> None:
        if self.cache_dir is None:
            return
        path = self.cache_dir / digest[:2] / digest
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    def fetch_asset(self, mc_version: str, asset_path: str) -> bytes:
        key = asset_path
        if key.startswith(ASSET_PREFIX):
            key = key[len(ASSET_PREFIX) :]
        objects = self.asset_index(mc_version).get("objects", {})
        # Asset names are lowercase from 1.11 on; configs often say zh_CN.
        obj = objects.get(key) or objects.get(key.lower())
        if obj is None:
            raise fetch_error(
                f"Asset {asset_path} not found for Minecraft {mc_version}",
                {"version": mc_version, "asset": asset_path},
            )
        digest = obj["hash"]
        data = self._cached(digest)
        if data is None:
            data = self._get(f"{RESOURCES_URL}/{digest[:2]}/{digest}")
            self._store(digest, data)
        return data


async def fetch_asset_async(
    fetcher: AssetFetcher, mc_version: str, asset_path: str
) -> bytes:
    """Run a blocking fetch on a daemon thread and await its result.

    Cancelling the awaiting task abandons the fetch: the thread is left to
    finish on its own and never holds up interpreter or event loop shutdown.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[bytes] = loop.create_future()

    def settle(result: Optional[bytes], exc: Optional[BaseException]) -> None:
        if future.done():
            return
        if exc is not None:
            future.set_exception(exc)
        else:
            future.set_result(result)

    def run() -> None:
        result: Optional[bytes] = None
        exc: Optional[BaseException] = None
        try:
            result = fetcher.fetch_asset(mc_version, asset_path)
        except Exception as e:
            exc = e
        try:
            loop.call_soon_threadsafe(settle, result, exc)
        except RuntimeError:
            # Loop already closed; the fetch was abandoned.
            get_logger().debug("discarding late fetch of %s", asset_path)

    threading.Thread(
        target=run, name=f"fetch:{asset_path}", daemon=True
    ).start()
    return await future
