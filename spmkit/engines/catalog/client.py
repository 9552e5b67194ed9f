"""Async package catalog client with retries on transient failures."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from spmkit.core.config import DEFAULT_CATALOG_URL
from spmkit.core.github import is_owner_repo
from spmkit.engines.catalog.schemas import PackageData, SearchResponse
from spmkit.engines.manifest_editor.models import DependencyReference
from spmkit.exceptions import CatalogError

log = structlog.get_logger("spmkit.catalog")

_MAX_RETRIES = 3
_RETRY_BASE_DELAY = 1.0  # seconds


class CatalogClient:
    """Thin async wrapper around the package catalog HTTP API."""

    def __init__(
        self,
        base_url: str = DEFAULT_CATALOG_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> CatalogClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    async def resolve(self, name: str) -> DependencyReference:
        """Resolve *name* to a repository URL and latest version.

        ``owner/repo`` names are looked up directly; anything else is
        searched and the most starred hit wins.
        """
        if is_owner_repo(name):
            return await self.fetch_package(name.strip())
        return await self.search(name.strip())

    async def fetch_package(self, owner_repo: str) -> DependencyReference:
        payload = await self._get_json(f"/data/package/{owner_repo}")
        try:
            data = PackageData.model_validate(payload)
        except ValidationError as exc:
            raise CatalogError(f"Bad JSON for package {owner_repo!r}: {exc}") from exc
        log.debug("catalog.package", name=owner_repo, url=data.gh_url, version=data.version)
        return DependencyReference(url=data.gh_url, version=data.version)

    async def search(self, query: str) -> DependencyReference:
        payload = await self._get_json(
            f"/api/search/{query}",
            params={"items": "1", "chart": "moststarred"},
        )
        try:
            response = SearchResponse.model_validate(payload)
        except ValidationError as exc:
            raise CatalogError(f"Bad JSON for search {query!r}: {exc}") from exc
        if not response.data.hits.hits:
            raise CatalogError(f"no package found matching {query!r}")
        source = response.data.hits.hits[0].source
        log.debug(
            "catalog.search",
            query=query,
            url=source.git_clone_url,
            version=source.latest_version,
        )
        return DependencyReference(url=source.git_clone_url, version=source.latest_version)

    # ── internal ───────────────────────────────────────────────────────────

    async def _get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        response = await self._request_with_retry(path, params)
        try:
            return response.json()
        except ValueError as exc:
            raise CatalogError(f"Bad JSON from {path}: {exc}") from exc

    async def _request_with_retry(
        self,
        path: str,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        """GET with exponential backoff on 5xx, timeouts and connection errors."""
        last_error = ""
        for attempt in range(_MAX_RETRIES):
            try:
                resp = await self._client.get(path, params=params)

                if resp.status_code < 400:
                    return resp
                if resp.status_code < 500:
                    raise CatalogError(f"catalog request {path} failed with HTTP {resp.status_code}")

                # 5xx — retry
                log.warning(
                    "catalog.server_error",
                    path=path,
                    status=resp.status_code,
                    attempt=attempt + 1,
                    max_retries=_MAX_RETRIES,
                )
                last_error = f"HTTP {resp.status_code}"
            except httpx.TransportError as exc:
                log.warning(
                    "catalog.transport_error",
                    path=path,
                    error=str(exc),
                    attempt=attempt + 1,
                    max_retries=_MAX_RETRIES,
                )
                last_error = str(exc) or type(exc).__name__

            if attempt < _MAX_RETRIES - 1:
                delay = _RETRY_BASE_DELAY * (2**attempt)
                await asyncio.sleep(delay)

        raise CatalogError(f"catalog request {path} failed after {_MAX_RETRIES} attempts: {last_error}")
