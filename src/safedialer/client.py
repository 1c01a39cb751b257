"""SSRF-safe HTTP client built on httpx with retry logic and error handling."""

import logging
from typing import Optional

import httpcore
import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from .backend import AsyncSafeNetworkBackend, SafeNetworkBackend
from .models import FetchError, FetchResult, UnsafeDialError
from .settings import Settings

logger = logging.getLogger(__name__)

# Denials are never retried: UnsafeDialError is not one of these.
RETRYABLE_ERRORS = (httpx.TimeoutException, httpx.ConnectError)


def create_transport() -> httpx.HTTPTransport:
    """Return a sync transport whose connections pass through the address gate."""
    transport = httpx.HTTPTransport()
    limits = httpx.Limits()
    # httpx does not expose the network backend; swap the pool it built for one
    # with the same defaults.
    transport._pool = httpcore.ConnectionPool(
        ssl_context=httpx.create_ssl_context(),
        max_connections=limits.max_connections,
        max_keepalive_connections=limits.max_keepalive_connections,
        keepalive_expiry=limits.keepalive_expiry,
        network_backend=SafeNetworkBackend(),
    )
    return transport


def create_async_transport() -> httpx.AsyncHTTPTransport:
    """Return an async transport whose connections pass through the address gate."""
    transport = httpx.AsyncHTTPTransport()
    limits = httpx.Limits()
    transport._pool = httpcore.AsyncConnectionPool(
        ssl_context=httpx.create_ssl_context(),
        max_connections=limits.max_connections,
        max_keepalive_connections=limits.max_keepalive_connections,
        keepalive_expiry=limits.keepalive_expiry,
        network_backend=AsyncSafeNetworkBackend(),
    )
    return transport


class SafeHTTPClient:
    """Async HTTP client that only connects to public addresses on ports 80 and 443."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_wait: Optional[wait_base] = None,
    ):
        self.settings = settings
        self.timeout = settings.request_timeout
        self.max_retries = settings.max_retries
        self.retry_wait = retry_wait or wait_exponential(multiplier=1, min=1, max=10)

        self.client = httpx.AsyncClient(
            transport=transport or create_async_transport(),
            headers={"User-Agent": settings.user_agent},
            timeout=self.timeout,
            follow_redirects=settings.follow_redirects,
            max_redirects=settings.max_redirects,
        )

        logger.debug(
            "SafeHTTPClient initialized (timeout=%s, max_retries=%s, follow_redirects=%s)",
            self.timeout,
            self.max_retries,
            settings.follow_redirects,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.client.aclose()

    async def _send(self, method: str, url: str) -> FetchResult:
        async with self.client.stream(method, url) as response:
            length = response.headers.get("Content-Length")
            return FetchResult(
                url=str(response.url),
                status_code=response.status_code,
                reason_phrase=response.reason_phrase,
                http_version=response.http_version,
                headers=dict(response.headers),
                content_length=int(length) if length and length.isdigit() else None,
            )

    async def fetch(self, url: str, method: str = "GET") -> FetchResult:
        """Fetch *url* and return a summary of the response.

        Raises the matching UnsafeDialError if any connection attempt was
        refused by the address gate, and FetchError for other failures.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=self.retry_wait,
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            logger.debug("Safe fetch %s %s", method, url)
            async for attempt in retrying:
                with attempt:
                    return await self._send(method, url)
        except UnsafeDialError:
            raise
        except RETRYABLE_ERRORS as e:
            raise FetchError(
                "Connection failed",
                url=url,
                details=str(e),
                retryable=True,
            ) from e
        except httpx.HTTPError as e:
            raise FetchError("Request failed", url=url, details=str(e)) from e
        except Exception as e:
            logger.error(f"Unexpected error fetching {url}: {e}")
            raise FetchError("Request failed", url=url, details=str(e)) from e

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
