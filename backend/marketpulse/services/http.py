"""
Shared httpx plumbing for the external clients.

Maps httpx and JSON failures onto the application's error taxonomy so the
providers only deal with ``TransportError`` and ``DecodeError``.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

import httpx

from marketpulse.core.exceptions import DecodeError, TransportError


@asynccontextmanager
async def client_scope(
    client: Optional[httpx.AsyncClient], timeout: float
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a short-lived one closed on exit."""
    if client is not None:
        yield client
    else:
        async with httpx.AsyncClient(timeout=timeout) as owned:
            yield owned


async def request_json(
    client: httpx.AsyncClient, method: str, url: str, **kwargs: Any
) -> Any:
    try:
        resp = await client.request(method, url, **kwargs)
    except httpx.InvalidURL as exc:
        raise TransportError(f"Invalid URL: {url}", url=url) from exc
    except httpx.TimeoutException as exc:
        raise TransportError(f"Request timed out: {method} {url}", url=url) from exc
    except httpx.HTTPError as exc:
        raise TransportError(f"Request failed: {method} {url}: {exc}", url=url) from exc

    if not resp.is_success:
        raise TransportError(
            f"Server error for {method} {url}",
            url=url,
            status_code=resp.status_code,
            body=resp.text,
        )

    try:
        return resp.json()
    except ValueError as exc:
        raise DecodeError(f"Invalid JSON in response from {url}") from exc
