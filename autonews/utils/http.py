"""
HTTP utilities for autonews.
"""
import asyncio
import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import aiohttp
import async_timeout

from autonews.utils.exceptions import DecodeError, InvalidURLError, NetworkError

# Configure logging
logger = logging.getLogger(__name__)

MAX_CONCURRENT_REQUESTS = 6
REQUEST_TIMEOUT = 30  # seconds

DEFAULT_HEADERS = {
    'User-Agent': 'autonews/0.1 (+https://webapi.autodoc.ru)',
    'Accept': 'application/json, image/*;q=0.9, */*;q=0.8',
}


def validate_url(url: str) -> str:
    """
    Check that a URL string is usable for an HTTP request.

    Args:
        url: The URL to check

    Returns:
        The URL, unchanged

    Raises:
        InvalidURLError: If the URL has no http(s) scheme or no host
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidURLError(f"Empty URL: {url!r}")
    parsed = urlparse(url.strip())
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise InvalidURLError(f"Invalid URL: {url}")
    return url.strip()


class HttpClient:
    """
    Thin wrapper over an aiohttp session with a request timeout and a cap on
    in-flight requests. Failures are raised as autonews exceptions; nothing
    is retried.
    """
    def __init__(self, timeout: float = REQUEST_TIMEOUT,
                 max_concurrent: int = MAX_CONCURRENT_REQUESTS,
                 headers: Optional[Dict[str, str]] = None):
        self.timeout = timeout
        self.headers = dict(DEFAULT_HEADERS)
        if headers:
            self.headers.update(headers)
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._session = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """
        Lazy initialization of aiohttp session.

        Returns:
            aiohttp.ClientSession: The HTTP session
        """
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(headers=self.headers)
        return self._session

    async def close(self):
        """Close aiohttp session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def get_bytes(self, url: str) -> bytes:
        """
        Fetch a URL and return the raw response body.

        Args:
            url: The URL to fetch

        Returns:
            The response body

        Raises:
            InvalidURLError: If the URL cannot be requested
            NetworkError: On connection failure, timeout or non-2xx status
        """
        url = validate_url(url)
        async with self._semaphore:
            try:
                async with async_timeout.timeout(self.timeout):
                    async with self.session.get(url) as response:
                        response.raise_for_status()
                        return await response.read()
            except aiohttp.ClientResponseError as e:
                raise NetworkError(f"HTTP {e.status} for {url}", status=e.status) from e
            except aiohttp.ClientError as e:
                raise NetworkError(f"Request to {url} failed: {e}") from e
            except asyncio.TimeoutError as e:
                raise NetworkError(f"Request to {url} timed out after {self.timeout}s") from e

    async def get_text(self, url: str, encoding: str = 'utf-8') -> str:
        """Fetch a URL and return the body decoded as text."""
        body = await self.get_bytes(url)
        return body.decode(encoding, errors='replace')

    async def get_json(self, url: str) -> Any:
        """
        Fetch a URL and parse the body as JSON.

        Raises:
            DecodeError: If the body is not valid JSON
        """
        body = await self.get_bytes(url)
        try:
            return json.loads(body)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DecodeError(f"Invalid JSON from {url}: {e}") from e
