"""
Glue between the news feed store and a list renderer.
"""
import asyncio
import logging
from typing import Any, Callable, Optional, Protocol

from autonews.core.cache import ImageCache
from autonews.core.models import NewsItem
from autonews.core.prefetcher import ImagePrefetcher
from autonews.core.store import FeedEvent, NewsFeedStore
from autonews.core.tasks import TaskGroup

logger = logging.getLogger(__name__)


class ImageSlot:
    """
    The image area of one list cell. Cells are reused, so a slot remembers
    which URL it is currently bound to.
    """
    def __init__(self, on_show: Optional[Callable[[], None]] = None):
        self.bound_url: Optional[str] = None
        self.image: Optional[Any] = None
        # Called whenever an image is placed in the slot
        self.on_show = on_show

    def bind(self, url: str):
        self.bound_url = url
        self.image = None

    def clear(self):
        self.bound_url = None
        self.image = None

    def show(self, image: Any):
        self.image = image
        if self.on_show is not None:
            self.on_show()


class Renderer(Protocol):
    """Interface of the list renderer driven by PresentationBinding."""

    def render_list(self, count: int) -> None:
        """Redraw the whole list, which now holds count items."""
        ...

    def render_item(self, index: int, item: NewsItem, slot: ImageSlot) -> None:
        """Draw one item into its cell."""
        ...


class PresentationBinding:
    """
    Keeps a renderer in step with a NewsFeedStore.

    Every store change triggers a full list redraw. Cells ask the binding for
    their thumbnail through bind_cell(); an image that arrives after the cell
    has been rebound to another item is cached but not shown.
    """
    def __init__(self, store: NewsFeedStore, renderer: Renderer, cache: ImageCache,
                 prefetcher: ImagePrefetcher, detail=None):
        """
        Initialize the PresentationBinding.

        Args:
            store: The feed store to observe
            renderer: The list renderer to drive
            cache: The shared image cache
            prefetcher: Used to fetch thumbnails that are not cached
            detail: Optional DetailPresenter opened on selection
        """
        self.store = store
        self.renderer = renderer
        self.cache = cache
        self.prefetcher = prefetcher
        self.detail = detail
        self.tasks = TaskGroup(name="presentation")
        self._page_task: Optional[asyncio.Task] = None
        self._unsubscribe = store.subscribe(self._on_feed_event)

    def _on_feed_event(self, event: FeedEvent):
        self.renderer.render_list(len(event.items))

    def render_item(self, index: int, slot: ImageSlot) -> NewsItem:
        """
        Bind a cell to the item at index and draw it.

        Returns:
            The item drawn
        """
        item = self.store.items[index]
        self.bind_cell(slot, item)
        self.renderer.render_item(index, item, slot)
        return item

    def bind_cell(self, slot: ImageSlot, item: NewsItem) -> Optional[asyncio.Task]:
        """
        Point a cell's image slot at an item's thumbnail.

        The previous image is dropped immediately. A cached thumbnail is shown
        right away; otherwise it is loaded in the background.

        Returns:
            The background load task, or None if the image was cached
        """
        url = item.title_image_url
        slot.bind(url)
        cached = self.cache.get(url)
        if cached is not None:
            slot.show(cached)
            return None
        return self.tasks.spawn(self._load_into(slot, url))

    async def _load_into(self, slot: ImageSlot, url: str):
        image = await self.prefetcher.load(url)
        if image is None:
            return
        if slot.bound_url != url:
            logger.debug(f"Cell was rebound before {url} arrived, not showing it")
            return
        slot.show(image)

    def on_item_visible(self, index: int) -> bool:
        """
        Tell the store an item became visible, loading the next page if needed.

        Returns:
            True if a page fetch was started
        """
        # The store only marks itself loading once the task runs
        if self._page_task is not None and not self._page_task.done():
            return False
        if not self.store.should_load_more(index):
            return False
        self._page_task = self.tasks.spawn(self.store.load_more_if_needed(index))
        return True

    async def wait_for_page(self):
        """Wait for the page fetch started by on_item_visible, if one is running."""
        if self._page_task is not None and not self._page_task.done():
            await self._page_task

    def on_item_selected(self, index: int) -> Optional[asyncio.Task]:
        """
        Open the detail view for the item at index.

        Returns:
            The task opening the item, or None when there is no detail presenter
        """
        if self.detail is None:
            return None
        item = self.store.items[index]
        return self.tasks.spawn(self.detail.open(item))

    def close(self):
        """Stop observing the store and cancel background work."""
        self._unsubscribe()
        self.tasks.cancel()
