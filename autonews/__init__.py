"""
autonews - Paginated News Feed Reader

Loads the AutoDoc news feed page by page, keeps thumbnails in an in-memory
cache and opens articles in an embedded reader or the system browser.
"""

__version__ = "0.1.0"

from autonews.core.cache import ImageCache
from autonews.core.models import NewsItem, NewsPage
from autonews.core.prefetcher import ImagePrefetcher
from autonews.core.store import FeedEvent, FeedState, NewsFeedStore

__all__ = [
    "ImageCache",
    "ImagePrefetcher",
    "FeedEvent",
    "FeedState",
    "NewsFeedStore",
    "NewsItem",
    "NewsPage",
]
