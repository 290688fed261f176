"""
Paginated news feed state for autonews.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from autonews.core.models import NewsItem
from autonews.utils.exceptions import AutonewsError

# Configure logging
logger = logging.getLogger(__name__)

# Start loading the next page when the visible index is this close to the end
PREFETCH_THRESHOLD = 5


@dataclass
class FeedState:
    """
    Mutable feed state. Items are only ever appended until the next reset.
    """
    items: List[NewsItem] = field(default_factory=list)
    page: int = 1
    total_count: int = 0
    loading: bool = False


@dataclass(frozen=True)
class FeedEvent:
    """Snapshot of the feed handed to observers after each change."""
    items: Tuple[NewsItem, ...]
    loading: bool
    total_count: int
    page: int


FeedObserver = Callable[[FeedEvent], None]


class NewsFeedStore:
    """
    Owns the accumulated feed and decides when to fetch the next page.

    All state changes happen on the event loop thread, between awaits, so a
    page append and its loading-flag update are never interleaved with
    another fetch. Only one page fetch is in flight at a time.

    The page counter holds the last page that loaded successfully; a failed
    fetch leaves it untouched so the next trigger asks for the same page
    again.
    """
    def __init__(self, client, prefetcher=None, threshold: int = PREFETCH_THRESHOLD):
        """
        Initialize the NewsFeedStore.

        Args:
            client: Object with an async fetch_page(page) method returning a NewsPage
            prefetcher: Optional ImagePrefetcher fed with every appended page
            threshold: How many items before the end of the list to start the next fetch
        """
        self.client = client
        self.prefetcher = prefetcher
        self.threshold = threshold
        self.state = FeedState()
        self._observers: List[FeedObserver] = []
        # Bumped on every reset so fetches started before it are discarded
        self._generation = 0

    @property
    def items(self) -> Tuple[NewsItem, ...]:
        return tuple(self.state.items)

    @property
    def is_loading(self) -> bool:
        return self.state.loading

    @property
    def has_more(self) -> bool:
        return len(self.state.items) < self.state.total_count

    def subscribe(self, observer: FeedObserver) -> Callable[[], None]:
        """
        Register a callback invoked with a FeedEvent after every change.

        Args:
            observer: The callback

        Returns:
            A function that removes the observer again
        """
        self._observers.append(observer)

        def unsubscribe():
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def snapshot(self) -> FeedEvent:
        return FeedEvent(
            items=tuple(self.state.items),
            loading=self.state.loading,
            total_count=self.state.total_count,
            page=self.state.page,
        )

    def _notify(self):
        event = self.snapshot()
        for observer in list(self._observers):
            try:
                observer(event)
            except Exception as e:
                logger.exception(f"Feed observer {observer!r} failed: {e}")

    async def load_initial(self):
        """
        Reset the feed and load the first page.
        """
        self._generation += 1
        self.state = FeedState()
        logger.info("Reloading news feed from the first page")
        self._notify()
        await self._fetch_page(1)

    def should_load_more(self, visible_index: int) -> bool:
        """
        Check whether showing the item at visible_index should fetch the next page.
        """
        count = len(self.state.items)
        return (
            visible_index >= count - self.threshold
            and count < self.state.total_count
            and not self.state.loading
        )

    async def load_more_if_needed(self, visible_index: int) -> bool:
        """
        Fetch the next page if the item becoming visible is near the end of the list.

        Args:
            visible_index: Index of the item that is becoming visible

        Returns:
            True if a fetch was started, False if this was a no-op
        """
        if not self.should_load_more(visible_index):
            return False
        await self._fetch_page(self.state.page + 1)
        return True

    async def _fetch_page(self, page: int):
        generation = self._generation
        # Set before the first await so a concurrent trigger sees it
        self.state.loading = True
        self._notify()
        news_page = None
        stale = False
        try:
            news_page = await self.client.fetch_page(page)
        except AutonewsError as e:
            logger.error(f"Failed to load news page {page}: {e}")
        finally:
            stale = generation != self._generation
            if not stale:
                self.state.loading = False
        if stale:
            logger.debug(f"Discarding page {page} fetched before the feed was reset")
            return
        if news_page is not None:
            self.state.items.extend(news_page.items)
            self.state.total_count = news_page.total_count
            self.state.page = page
            logger.debug(
                f"Feed now holds {len(self.state.items)} of {self.state.total_count} items (page {page})"
            )
        self._notify()
        if self.prefetcher is not None and news_page is not None and news_page.items:
            self.prefetcher.prefetch(news_page.items)
