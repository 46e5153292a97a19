"""Shared HTTP plumbing for provider clients.

Every provider call goes through ``fetch_json`` so failures surface as a
``PerfToolingError`` with one of three codes: not found, fetch failed, or bad
payload. Timeouts are configured once on the shared client.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Protocol

import httpx
import structlog

from perf_tooling.errors import ErrorCode, PerfToolingError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from perf_tooling.config import Settings

log = structlog.get_logger()


class Provider(Protocol):
    """What the enrichment coordinator needs from a provider client."""

    name: str

    @property
    def configured(self) -> bool: ...


def build_http_client(settings: Settings) -> httpx.AsyncClient:
    """Return the AsyncClient shared by all providers."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.enrichment.timeout_seconds),
        headers={"User-Agent": settings.enrichment.user_agent},
        follow_redirects=True,
    )


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    provider: str,
    params: Mapping[str, str] | None = None,
    headers: Mapping[str, str] | None = None,
) -> Any:
    """GET *url* and decode the JSON body."""
    try:
        response = await client.get(url, params=params, headers=headers)
    except httpx.HTTPError as exc:
        raise PerfToolingError(
            ErrorCode.PROVIDER_FETCH_FAILED,
            f"{provider}: request to {url} failed: {exc}",
            recoverable=True,
        ) from exc

    log.debug("provider_response", provider=provider, url=url, status=response.status_code)
    if response.status_code == 404:
        raise PerfToolingError(
            ErrorCode.PROVIDER_NOT_FOUND,
            f"{provider}: not found: {url}",
            recoverable=False,
        )
    if not response.is_success:
        raise PerfToolingError(
            ErrorCode.PROVIDER_FETCH_FAILED,
            f"{provider}: HTTP {response.status_code} from {url}",
            recoverable=True,
        )

    try:
        return response.json()
    except json.JSONDecodeError as exc:
        raise PerfToolingError(
            ErrorCode.PROVIDER_BAD_PAYLOAD,
            f"{provider}: response from {url} is not JSON",
            recoverable=False,
        ) from exc


def bad_payload(provider: str, detail: str) -> PerfToolingError:
    return PerfToolingError(
        ErrorCode.PROVIDER_BAD_PAYLOAD,
        f"{provider}: unexpected payload: {detail}",
        recoverable=False,
    )
