"""
Thumbnail prefetching for autonews.
"""
import asyncio
import logging
from typing import Any, Dict, Iterable, Optional

from autonews.core.cache import ImageCache
from autonews.core.models import NewsItem
from autonews.core.tasks import TaskGroup
from autonews.utils.exceptions import AutonewsError

logger = logging.getLogger(__name__)


class ImagePrefetcher:
    """
    Populates the image cache ahead of display.

    Each cache miss is fetched in its own task, so a slow or failing image
    never holds up the others. A URL that is already being fetched is not
    requested a second time; concurrent callers share the pending fetch.
    """
    def __init__(self, client, cache: ImageCache, max_concurrent: Optional[int] = None):
        """
        Initialize the ImagePrefetcher.

        Args:
            client: Object with an async fetch_image(url) method
            cache: The shared image cache
            max_concurrent: Optional cap on image fetches running at once
        """
        self.client = client
        self.cache = cache
        self.tasks = TaskGroup(max_concurrent=max_concurrent, name="image-prefetch")
        self._pending: Dict[str, asyncio.Future] = {}

    def prefetch(self, items: Iterable[NewsItem]):
        """
        Start fetching the thumbnails of the given items that are not cached.

        Returns immediately; results land in the cache.

        Args:
            items: The news items whose thumbnails should be cached
        """
        for item in items:
            url = item.title_image_url
            if self.cache.get(url) is not None or url in self._pending:
                continue
            self._start(url)

    async def load(self, url: str) -> Optional[Any]:
        """
        Get an image from the cache, fetching it if needed.

        Args:
            url: The image URL

        Returns:
            The decoded image, or None if it could not be fetched
        """
        image = self.cache.get(url)
        if image is not None:
            return image
        pending = self._pending.get(url)
        if pending is None:
            pending = self._start(url)
        # A caller going away must not cancel the fetch for everyone else
        return await asyncio.shield(pending)

    def _start(self, url: str) -> asyncio.Future:
        task = self.tasks.spawn(self._fetch(url))
        self._pending[url] = task
        task.add_done_callback(lambda t: self._forget(url, t))
        return task

    def _forget(self, url: str, task: asyncio.Future):
        if self._pending.get(url) is task:
            del self._pending[url]

    async def _fetch(self, url: str) -> Optional[Any]:
        try:
            image = await self.client.fetch_image(url)
        except AutonewsError as e:
            logger.warning(f"Failed to load image {url}: {e}")
            return None
        self.cache.put(url, image)
        return image

    def cancel(self):
        """Cancel outstanding prefetches."""
        self.tasks.cancel()

    async def join(self):
        """Wait for outstanding prefetches to finish."""
        await self.tasks.join()
