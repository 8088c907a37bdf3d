"""Async HTTP client for the Asana REST API."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

import httpx

from ..config import DEFAULT_API_BASE_URL
from ..errors import (
    AsanaApiError,
    AsanaAuthError,
    AsanaNotFoundError,
    AsanaRateLimitError,
    AsanaResponseError,
    AsanaTransportError,
)

logger = logging.getLogger(__name__)


class ResourceFetcher(Protocol):
    """Minimal read API the ingestion engine needs from a client."""

    async def fetch(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        ...


def _parse_retry_after(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return max(float(value.strip()), 0.0)
    except ValueError:
        return None


class AsanaClient:
    """Fetch Asana resources with a personal access token.

    Each call performs exactly one HTTP request. HTTP failures are translated to
    the :mod:`asana_ingest.errors` taxonomy so callers can tell a bad token apart
    from a missing task or a throttled one.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> AsanaClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        """GET ``path`` and return the ``data`` member of the response envelope."""

        logger.debug("GET %s", path, extra={"params": dict(params or {})})
        try:
            response = await self._client.get(path, params=dict(params or {}))
        except httpx.HTTPError as exc:
            raise AsanaTransportError(
                f"Asana API Error: request to {path} failed ({exc.__class__.__name__}: {exc})",
                path=path,
            ) from exc

        if response.is_error:
            raise self._error_for(response, path)

        try:
            payload = response.json()
        except ValueError as exc:
            raise AsanaResponseError(
                f"Asana API Error: response from {path} is not valid JSON",
                path=path,
                status_code=response.status_code,
            ) from exc

        if not isinstance(payload, dict) or "data" not in payload:
            raise AsanaResponseError(
                f"Asana API Error: response from {path} has no data envelope",
                path=path,
                status_code=response.status_code,
            )
        return payload["data"]

    @staticmethod
    def _error_for(response: httpx.Response, path: str) -> AsanaApiError:
        status = response.status_code
        logger.debug("Asana responded %s for %s", status, path)
        if status == 401:
            return AsanaAuthError("Unauthorized: Invalid Personal Access Token.", path=path)
        if status == 404:
            return AsanaNotFoundError(
                f"Not Found: Resource at {path} does not exist or you lack access.",
                path=path,
            )
        if status == 429:
            return AsanaRateLimitError(
                "Rate Limit Exceeded: Please wait a moment and try again.",
                path=path,
                retry_after=_parse_retry_after(response.headers.get("Retry-After")),
            )
        return AsanaTransportError(
            f"Asana API Error: {status} {response.reason_phrase}".rstrip(),
            path=path,
            status_code=status,
        )


__all__ = ["AsanaClient", "ResourceFetcher"]
