"""
Wires the feed store, image cache, prefetcher and views together.
"""
import logging
from typing import Callable, Optional

from autonews.config import Config
from autonews.core.cache import ImageCache
from autonews.core.prefetcher import ImagePrefetcher
from autonews.core.store import NewsFeedStore
from autonews.fetchers.news_api import NewsApiClient
from autonews.utils.http import HttpClient
from autonews.views.binding import PresentationBinding, Renderer
from autonews.views.detail import DetailMode, DetailPresenter, EmbeddedPageView

logger = logging.getLogger(__name__)


class NewsApp:
    """
    Owns every long-lived object of a reading session. The image cache lives
    here and is handed to the components that need it.
    """
    def __init__(self, config: Config, renderer: Renderer,
                 output: Callable[[str], None] = print,
                 prefetch_images: Optional[bool] = None):
        self.config = config
        self.http = HttpClient(
            timeout=config.get('http.timeout_seconds', 30),
            max_concurrent=config.get('http.max_concurrent', 6),
        )
        self.client = NewsApiClient(
            self.http,
            base_url=config.get('api.base_url'),
            page_size=config.get('api.page_size', 15),
        )
        self.cache = ImageCache(capacity=config.get('images.cache_capacity'))
        self.prefetcher = ImagePrefetcher(
            self.client, self.cache, max_concurrent=config.get('images.max_concurrent')
        )
        if prefetch_images is None:
            prefetch_images = config.get('images.prefetch', True)
        self.store = NewsFeedStore(
            self.client,
            prefetcher=self.prefetcher if prefetch_images else None,
            threshold=config.get('feed.prefetch_threshold', 5),
        )
        try:
            mode = DetailMode(config.get('detail.mode', 'browser'))
        except ValueError:
            logger.warning(f"Unknown detail mode {config.get('detail.mode')!r}, using browser")
            mode = DetailMode.BROWSER
        self.detail = DetailPresenter(mode, embedded_view=EmbeddedPageView(self.http, output))
        self.binding = PresentationBinding(
            self.store, renderer, self.cache, self.prefetcher, detail=self.detail
        )

    async def close(self):
        """Cancel background work and release the HTTP session."""
        self.binding.close()
        self.prefetcher.cancel()
        await self.binding.tasks.join()
        await self.prefetcher.join()
        await self.http.close()
