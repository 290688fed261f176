"""
Article detail views for autonews.

An article opens either in the embedded reader, which fetches the page and
shows its text, or in the system browser. The mode can be toggled; the
change applies to the next article opened.
"""
import asyncio
import logging
import re
import webbrowser
from enum import Enum
from typing import Callable, Optional

import trafilatura
from bs4 import BeautifulSoup

from autonews.core.models import NewsItem
from autonews.utils.exceptions import AutonewsError, InvalidURLError
from autonews.utils.http import HttpClient, validate_url

logger = logging.getLogger(__name__)


class DetailMode(Enum):
    EMBEDDED = "embedded"
    BROWSER = "browser"


class BrowserOpener:
    """Hands a URL to the system web browser."""

    def open(self, url: str) -> bool:
        return webbrowser.open(url, new=2)


def extract_text(html: str) -> str:
    """
    Extract readable article text from an HTML page.

    Args:
        html: The page HTML

    Returns:
        The article text, paragraphs separated by blank lines
    """
    text = trafilatura.extract(
        html,
        include_comments=False,
        include_tables=False,
        favor_recall=True,
    )
    if text:
        return text.strip()

    # Fallback to BeautifulSoup if trafilatura finds nothing
    soup = BeautifulSoup(html, 'html.parser')
    for elem in soup.find_all(['script', 'style', 'nav', 'footer', 'header', 'aside']):
        elem.decompose()
    root = soup.find('article') or soup.body or soup
    paragraphs = [
        p.get_text(strip=True)
        for p in root.find_all(['p', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6'])
        if p.get_text(strip=True)
    ]
    if paragraphs:
        return "\n\n".join(paragraphs)
    return re.sub(r'\s+', ' ', root.get_text(separator=' ')).strip()


class EmbeddedPageView:
    """
    Loads an article page and passes its title and text to an output callback.
    """
    def __init__(self, http: HttpClient, output: Callable[[str], None] = print):
        self.http = http
        self.output = output

    async def show(self, item: NewsItem) -> str:
        html = await self.http.get_text(item.full_url)
        text = extract_text(html)
        page = f"{item.title}\n\n{text}" if text else item.title
        self.output(page)
        return page


class DetailPresenter:
    """
    Opens a selected NewsItem in the current detail mode.
    """
    def __init__(self, mode: DetailMode = DetailMode.BROWSER,
                 embedded_view: Optional[EmbeddedPageView] = None,
                 browser_opener: Optional[BrowserOpener] = None):
        self.mode = mode
        self.embedded_view = embedded_view
        self.browser_opener = browser_opener or BrowserOpener()

    def toggle(self) -> DetailMode:
        """
        Switch between embedded and browser mode for subsequent selections.

        Returns:
            The new mode
        """
        if self.mode is DetailMode.EMBEDDED:
            self.mode = DetailMode.BROWSER
        else:
            self.mode = DetailMode.EMBEDDED
        logger.info(f"Articles will open in {self.mode.value} mode")
        return self.mode

    async def open(self, item: NewsItem) -> bool:
        """
        Open an article's full URL.

        Args:
            item: The selected news item

        Returns:
            True if the article was opened, False if it could not be
        """
        try:
            url = validate_url(item.full_url)
        except InvalidURLError as e:
            logger.warning(f"Cannot open news item {item.id}: {e}")
            return False

        if self.mode is DetailMode.BROWSER or self.embedded_view is None:
            logger.debug(f"Opening {url} in the browser")
            # webbrowser may run a console browser in the foreground
            loop = asyncio.get_running_loop()
            opened = await loop.run_in_executor(None, self.browser_opener.open, url)
            return bool(opened)

        try:
            await self.embedded_view.show(item)
        except AutonewsError as e:
            logger.warning(f"Failed to load article {url}: {e}")
            return False
        return True
