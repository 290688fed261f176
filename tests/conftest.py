"""
Shared test fixtures for autonews.

Provides factories for news items and pages, plus in-memory stand-ins for
the news API so no test touches the network.
"""

import asyncio
from typing import Dict, Iterable, Optional

import pytest

from autonews.core.models import NewsItem, NewsPage
from autonews.utils.exceptions import DecodeError, NetworkError


def make_item(index: int, **overrides) -> NewsItem:
    """Build a NewsItem whose fields are derived from index."""
    fields = dict(
        id=index,
        title=f"News {index}",
        description=f"Description {index}",
        published_date="2025-02-04T10:30:00",
        url=f"https://www.autodoc.ru/news/{index}",
        full_url=f"https://www.autodoc.ru/news/full/{index}",
        title_image_url=f"https://img.autodoc.ru/{index}.jpg",
        category_type="Автомобильные новости",
    )
    fields.update(overrides)
    return NewsItem(**fields)


def item_payload(index: int) -> Dict:
    """JSON shape of make_item(index), as the API sends it."""
    return {
        "id": index,
        "title": f"News {index}",
        "description": f"Description {index}",
        "publishedDate": "2025-02-04T10:30:00",
        "url": f"https://www.autodoc.ru/news/{index}",
        "fullUrl": f"https://www.autodoc.ru/news/full/{index}",
        "titleImageUrl": f"https://img.autodoc.ru/{index}.jpg",
        "categoryType": "Автомобильные новости",
    }


class FakeNewsClient:
    """
    Serves a feed of `total` generated items in pages of `page_size`.

    Pages listed in fail_pages raise NetworkError, pages in bad_pages raise
    DecodeError. Pages listed in gates wait for the matching asyncio.Event.
    """
    def __init__(self, total: int, page_size: int = 15,
                 fail_pages: Iterable[int] = (), bad_pages: Iterable[int] = ()):
        self.total = total
        self.page_size = page_size
        self.fail_pages = set(fail_pages)
        self.bad_pages = set(bad_pages)
        self.gates: Dict[int, asyncio.Event] = {}
        self.calls = []

    async def fetch_page(self, page: int) -> NewsPage:
        self.calls.append(page)
        gate = self.gates.get(page)
        if gate is not None:
            await gate.wait()
        if page in self.fail_pages:
            raise NetworkError(f"HTTP 500 for page {page}", status=500)
        if page in self.bad_pages:
            raise DecodeError(f"Invalid JSON for page {page}")
        start = (page - 1) * self.page_size
        end = min(start + self.page_size, self.total)
        items = tuple(make_item(i) for i in range(start, end))
        return NewsPage(items=items, total_count=self.total)


class FakeImageClient:
    """
    Returns a string standing in for a decoded image. URLs in fail_urls
    raise NetworkError; each call yields to the loop `delay` times.
    """
    def __init__(self, fail_urls: Iterable[str] = (), delay: int = 1):
        self.fail_urls = set(fail_urls)
        self.delay = delay
        self.gates: Dict[str, asyncio.Event] = {}
        self.calls = []

    async def fetch_image(self, url: str) -> str:
        self.calls.append(url)
        gate = self.gates.get(url)
        if gate is not None:
            await gate.wait()
        for _ in range(self.delay):
            await asyncio.sleep(0)
        if url in self.fail_urls:
            raise NetworkError(f"HTTP 404 for {url}", status=404)
        return f"image:{url}"


@pytest.fixture
def news_client():
    """A two-page feed: 30 items, 15 per page."""
    return FakeNewsClient(total=30)


@pytest.fixture
def image_client():
    return FakeImageClient()
