"""
News data models for autonews.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from autonews.utils.exceptions import DecodeError

PUBLISHED_DATE_FORMAT = '%Y-%m-%dT%H:%M:%S'
UNKNOWN_DATE = "Дата неизвестна"
MISSING_DESCRIPTION = "Описание отсутствует"

# Genitive month names, as used in "4 февраля 2025"
RU_MONTHS = (
    "января", "февраля", "марта", "апреля", "мая", "июня",
    "июля", "августа", "сентября", "октября", "ноября", "декабря",
)

# JSON key -> (attribute, type)
_ITEM_FIELDS = (
    ('id', 'id', int),
    ('title', 'title', str),
    ('description', 'description', str),
    ('publishedDate', 'published_date', str),
    ('url', 'url', str),
    ('fullUrl', 'full_url', str),
    ('titleImageUrl', 'title_image_url', str),
    ('categoryType', 'category_type', str),
)


@dataclass(frozen=True)
class NewsItem:
    """
    A single entry of the news feed, as delivered by the news API.
    """
    id: int
    title: str
    description: str
    published_date: str
    url: str
    full_url: str
    title_image_url: str
    category_type: str

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> 'NewsItem':
        """
        Build a NewsItem from one element of the `news` array.

        Raises:
            DecodeError: If a field is missing or has the wrong type
        """
        if not isinstance(payload, dict):
            raise DecodeError(f"News item must be an object, got {type(payload).__name__}")
        values = {}
        for key, attr, kind in _ITEM_FIELDS:
            if key not in payload:
                raise DecodeError(f"News item is missing '{key}'")
            value = payload[key]
            # bool is a subclass of int
            if not isinstance(value, kind) or isinstance(value, bool):
                raise DecodeError(
                    f"News item field '{key}' must be {kind.__name__}, got {type(value).__name__}"
                )
            values[attr] = value
        return cls(**values)

    @property
    def display_description(self) -> str:
        return self.description if self.description else MISSING_DESCRIPTION

    @property
    def display_date(self) -> str:
        return format_published_date(self.published_date)


@dataclass(frozen=True)
class NewsPage:
    """
    One page of the feed plus the server-side total across all pages.
    """
    items: Tuple[NewsItem, ...]
    total_count: int

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> 'NewsPage':
        """
        Build a NewsPage from a `{news: [...], totalCount: n}` response.

        Raises:
            DecodeError: If the envelope or any item does not match the schema
        """
        if not isinstance(payload, dict):
            raise DecodeError(f"Page response must be an object, got {type(payload).__name__}")
        news = payload.get('news')
        total = payload.get('totalCount')
        if not isinstance(news, list):
            raise DecodeError("Page response is missing the 'news' array")
        if not isinstance(total, int) or isinstance(total, bool):
            raise DecodeError("Page response is missing an integer 'totalCount'")
        return cls(items=tuple(NewsItem.from_dict(entry) for entry in news), total_count=total)


def parse_published_date(text: str) -> Optional[datetime]:
    """
    Parse a `yyyy-MM-ddTHH:mm:ss` timestamp as UTC.

    Returns:
        An aware datetime, or None if the string does not match the format
    """
    try:
        return datetime.strptime(text, PUBLISHED_DATE_FORMAT).replace(tzinfo=timezone.utc)
    except (TypeError, ValueError):
        return None


def format_published_date(text: str, fallback: str = UNKNOWN_DATE) -> str:
    """
    Render a published date as e.g. "4 февраля 2025".

    Args:
        text: The raw `publishedDate` value
        fallback: Returned when the value cannot be parsed

    Returns:
        The formatted date
    """
    moment = parse_published_date(text)
    if moment is None:
        return fallback
    return f"{moment.day} {RU_MONTHS[moment.month - 1]} {moment.year}"
