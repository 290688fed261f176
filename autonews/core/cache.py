"""
In-memory image cache for autonews.
"""
import threading
from collections import OrderedDict
from typing import Any, Optional

# Default number of decoded thumbnails kept in memory
DEFAULT_CAPACITY = 256


class ImageCache:
    """
    Maps image URLs to decoded images.

    The cache is owned by the application and passed to whatever needs it.
    Access is serialized with a lock so prefetch tasks and worker threads can
    share one instance. With a capacity set, the least recently used entry is
    evicted on insert; with capacity=None the cache never evicts.
    """
    def __init__(self, capacity: Optional[int] = DEFAULT_CAPACITY):
        if capacity is not None and capacity <= 0:
            raise ValueError(f"Cache capacity must be positive or None, got {capacity}")
        self.capacity = capacity
        self._entries = OrderedDict()
        self._lock = threading.Lock()

    def get(self, url: str) -> Optional[Any]:
        """
        Get the cached image for a URL.

        Args:
            url: The image URL

        Returns:
            The decoded image, or None if it is not cached
        """
        with self._lock:
            image = self._entries.get(url)
            if image is not None:
                self._entries.move_to_end(url)
            return image

    def put(self, url: str, image: Any):
        """
        Cache an image, replacing any existing entry for the URL.

        Args:
            url: The image URL
            image: The decoded image
        """
        with self._lock:
            self._entries[url] = image
            self._entries.move_to_end(url)
            if self.capacity is not None:
                while len(self._entries) > self.capacity:
                    self._entries.popitem(last=False)

    def clear(self):
        """Drop every cached image."""
        with self._lock:
            self._entries.clear()

    def __contains__(self, url: str) -> bool:
        with self._lock:
            return url in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
