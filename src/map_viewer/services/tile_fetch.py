import httpx

from ..config import CONNECT_TIMEOUT, REQUEST_TIMEOUT, USER_AGENT
from ..errors import TileFetchError


def build_http_client(
    concurrency: int,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    timeout = httpx.Timeout(REQUEST_TIMEOUT, connect=CONNECT_TIMEOUT)
    limits = httpx.Limits(
        max_connections=concurrency,
        max_keepalive_connections=concurrency,
    )
    return httpx.AsyncClient(
        headers={"User-Agent": USER_AGENT},
        timeout=timeout,
        limits=limits,
        follow_redirects=True,
        transport=transport,
    )


async def fetch_tile(client: httpx.AsyncClient, url: str) -> bytes:
    """
    Download one tile image. Any non-200 answer or transport problem is a
    TileFetchError; tiles are never retried.
    """
    try:
        resp = await client.get(url)
    except httpx.HTTPError as exc:
        raise TileFetchError(url, str(exc) or type(exc).__name__) from exc

    if resp.status_code != 200:
        raise TileFetchError(url, f"HTTP {resp.status_code}")
    if not resp.content:
        raise TileFetchError(url, "empty response")
    return resp.content
