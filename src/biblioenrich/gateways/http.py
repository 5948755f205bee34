# ABOUTME: Async HTTP client abstraction for source gateway calls.
# ABOUTME: Provides rate limiting, retry with backoff, status predicates, and injectable transport.

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal, Protocol, runtime_checkable

import httpx

from biblioenrich.config import HTTP_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

ResponseType = Literal["json", "text", "bytes"]
StatusPredicate = Callable[[int], bool]


class SourceFetchError(Exception):
    """Raised when an HTTP request to a bibliographic source fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class HttpResponse:
    """Decoded response: final URL after redirects, status, and body."""

    status_code: int
    url: str
    data: Any


def is_success(status: int) -> bool:
    return 200 <= status < 300


def success_or_not_found(status: int) -> bool:
    """Status predicate for sources that answer 404 for "no such book"."""
    return is_success(status) or status == 404


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for async HTTP GET operations against bibliographic sources."""

    async def get(
        self,
        url: str,
        *,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        response_type: ResponseType = "json",
        accept_status: StatusPredicate | None = None,
    ) -> HttpResponse: ...


class BiblioHttpClient:
    """HTTP client with rate limiting and retry for source API calls.

    Wraps httpx.AsyncClient with a minimum interval between requests and
    retry logic for transient failures (429, 5xx). Redirects are followed so
    callers can inspect the final URL.
    """

    def __init__(
        self,
        *,
        min_request_interval: float = 0.1,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        client_kwargs: dict[str, Any] = {
            "headers": {"User-Agent": USER_AGENT},
            "timeout": HTTP_TIMEOUT,
            "follow_redirects": True,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**client_kwargs)
        self._min_interval = min_request_interval
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._last_request_time: float = 0.0
        self._rate_lock = asyncio.Lock()

    async def __aenter__(self) -> "BiblioHttpClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(
        self,
        url: str,
        *,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        response_type: ResponseType = "json",
        accept_status: StatusPredicate | None = None,
    ) -> HttpResponse:
        """Send a GET request with rate limiting and retry.

        Args:
            url: The URL to request.
            params: Optional query parameters.
            headers: Optional extra request headers.
            response_type: How to decode the body: "json", "text", or "bytes".
            accept_status: Predicate deciding which final statuses are valid
                answers. Defaults to 2xx. Retryable statuses are retried first.

        Returns:
            HttpResponse with the decoded body.

        Raises:
            SourceFetchError: On transport errors, undecodable bodies,
                unaccepted statuses, or exhausted retries.
        """
        accept = accept_status or is_success
        attempts = 1 + self._max_retries
        last_status = 0
        for attempt in range(attempts):
            await self._rate_limit()
            try:
                response = await self._client.get(url, params=params, headers=headers)
                last_status = response.status_code
            except httpx.HTTPError as exc:
                raise SourceFetchError(f"Request failed: {url}: {exc}") from exc

            if accept(response.status_code):
                return HttpResponse(
                    status_code=response.status_code,
                    url=str(response.url),
                    data=self._decode(response, response_type),
                )

            if response.status_code not in _RETRYABLE_STATUS_CODES:
                raise SourceFetchError(
                    f"HTTP {response.status_code} from {url}", status_code=response.status_code
                )

            if attempt < attempts - 1:
                delay = self._retry_delay * (2**attempt)
                logger.warning(
                    "HTTP %d from %s, retrying in %.1fs (attempt %d/%d)",
                    response.status_code,
                    url,
                    delay,
                    attempt + 1,
                    self._max_retries,
                )
                await asyncio.sleep(delay)

        raise SourceFetchError(
            f"HTTP {last_status} from {url} after {attempts} attempts", status_code=last_status
        )

    @staticmethod
    def _decode(response: httpx.Response, response_type: ResponseType) -> Any:
        if response_type == "bytes":
            return response.content
        if response_type == "text":
            return response.text
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise SourceFetchError(
                f"Invalid JSON from {response.url}: {exc}", status_code=response.status_code
            ) from exc

    async def _rate_limit(self) -> None:
        """Sleep if needed to maintain minimum interval between requests."""
        if self._min_interval <= 0:
            return
        async with self._rate_lock:
            now = time.monotonic()
            elapsed = now - self._last_request_time
            if elapsed < self._min_interval and self._last_request_time > 0:
                await asyncio.sleep(self._min_interval - elapsed)
            self._last_request_time = time.monotonic()
