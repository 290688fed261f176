"""
Client for the paginated news API.
"""
import logging
from typing import Any

from autonews.core.models import NewsPage
from autonews.utils.http import HttpClient
from autonews.utils.images import decode_image

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://webapi.autodoc.ru'
DEFAULT_PAGE_SIZE = 15


class NewsApiClient:
    """
    Fetches feed pages and thumbnail images.

    Errors are raised to the caller (NetworkError, DecodeError,
    InvalidURLError); deciding what a failure means is left to the store and
    the prefetcher.
    """
    def __init__(self, http: HttpClient, base_url: str = DEFAULT_BASE_URL,
                 page_size: int = DEFAULT_PAGE_SIZE):
        """
        Initialize the NewsApiClient.

        Args:
            http: The HTTP client used for every request
            base_url: Scheme and host of the news API
            page_size: Number of items requested per page
        """
        if page_size <= 0:
            raise ValueError(f"Page size must be positive, got {page_size}")
        self.http = http
        self.base_url = base_url.rstrip('/')
        self.page_size = page_size

    def page_url(self, page: int) -> str:
        """
        Build the URL of a feed page.

        Args:
            page: 1-based page number

        Returns:
            The page URL
        """
        if page < 1:
            raise ValueError(f"Pages are 1-based, got {page}")
        return f"{self.base_url}/api/news/{page}/{self.page_size}"

    async def fetch_page(self, page: int) -> NewsPage:
        """
        Fetch and decode one page of the feed.

        Args:
            page: 1-based page number

        Returns:
            The decoded page
        """
        url = self.page_url(page)
        logger.debug(f"Fetching news page {page} from {url}")
        payload = await self.http.get_json(url)
        news_page = NewsPage.from_dict(payload)
        logger.info(
            f"Fetched page {page}: {len(news_page.items)} items, total {news_page.total_count}"
        )
        return news_page

    async def fetch_image(self, url: str) -> Any:
        """
        Fetch and decode a thumbnail image.

        Args:
            url: The image URL

        Returns:
            The decoded image
        """
        data = await self.http.get_bytes(url)
        return decode_image(data)
