"""HTTP fetch capability used by the parsers."""

from typing import Protocol, runtime_checkable

import httpx
import structlog

from .errors import FetchError

log = structlog.get_logger()

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; ReadItLater/0.1)"


@runtime_checkable
class Fetcher(Protocol):
    """Anything that can return the body of an HTTP request as text.

    Parsers depend only on this shape, never on a transport library.
    """

    async def request(
        self,
        url: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        content_type: str | None = None,
    ) -> str:
        """Perform a request and return the raw response body.

        Raises:
            FetchError: If the request fails or returns an error status.
        """
        ...


class HttpxFetcher:
    """Fetcher backed by ``httpx.AsyncClient``.

    A new client is opened per request, so one instance can serve
    concurrent tasks.
    """

    def __init__(self, timeout: float = 30.0) -> None:
        """Initialize the fetcher.

        Args:
            timeout: HTTP request timeout in seconds.
        """
        self._timeout = timeout

    async def request(
        self,
        url: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        content_type: str | None = None,
    ) -> str:
        request_headers = {"User-Agent": DEFAULT_USER_AGENT}
        if content_type:
            request_headers["Content-Type"] = content_type
        request_headers.update(headers or {})

        log.debug("http_request", method=method, url=url)

        async with httpx.AsyncClient(
            timeout=self._timeout,
            follow_redirects=True,
            headers=request_headers,
        ) as client:
            try:
                response = await client.request(method, url)
                response.raise_for_status()
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                log.warning("http_request_failed", method=method, url=url, error=str(e))
                raise FetchError(f"Failed to fetch URL: {e}", url=url) from e

        return response.text
