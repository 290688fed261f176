"""
Tests for the news data models
"""

from datetime import datetime, timezone

import pytest

from autonews.core.models import (
    MISSING_DESCRIPTION,
    UNKNOWN_DATE,
    NewsItem,
    NewsPage,
    format_published_date,
    parse_published_date,
)
from autonews.utils.exceptions import DecodeError
from tests.conftest import item_payload, make_item


class TestNewsItem:

    def test_from_dict_maps_fields(self):
        assert NewsItem.from_dict(item_payload(7)) == make_item(7)

    def test_is_immutable(self):
        item = make_item(1)
        with pytest.raises(AttributeError):
            item.title = "changed"

    def test_ignores_unknown_fields(self):
        payload = dict(item_payload(1), extra="ignored")
        assert NewsItem.from_dict(payload) == make_item(1)

    @pytest.mark.parametrize("key", ["id", "title", "fullUrl", "titleImageUrl"])
    def test_missing_field(self, key):
        payload = item_payload(1)
        del payload[key]
        with pytest.raises(DecodeError, match=key):
            NewsItem.from_dict(payload)

    @pytest.mark.parametrize("key, value", [
        ("id", "1"),
        ("id", True),
        ("title", None),
        ("publishedDate", 20250204),
    ])
    def test_wrong_type(self, key, value):
        payload = dict(item_payload(1), **{key: value})
        with pytest.raises(DecodeError):
            NewsItem.from_dict(payload)

    def test_not_an_object(self):
        with pytest.raises(DecodeError):
            NewsItem.from_dict(["id", 1])

    def test_display_description(self):
        assert make_item(1).display_description == "Description 1"
        assert make_item(1, description="").display_description == MISSING_DESCRIPTION

    def test_display_date(self):
        assert make_item(1).display_date == "4 февраля 2025"


class TestNewsPage:

    def test_from_dict(self):
        page = NewsPage.from_dict({
            "news": [item_payload(0), item_payload(1)],
            "totalCount": 1200,
        })

        assert page.items == (make_item(0), make_item(1))
        assert page.total_count == 1200

    def test_empty_page(self):
        page = NewsPage.from_dict({"news": [], "totalCount": 0})
        assert page.items == ()

    @pytest.mark.parametrize("payload", [
        {"totalCount": 10},
        {"news": [], "totalCount": "10"},
        {"news": {}, "totalCount": 10},
        {"news": []},
        [],
    ])
    def test_bad_envelope(self, payload):
        with pytest.raises(DecodeError):
            NewsPage.from_dict(payload)

    def test_bad_item_fails_whole_page(self):
        bad = item_payload(1)
        del bad["url"]
        with pytest.raises(DecodeError):
            NewsPage.from_dict({"news": [item_payload(0), bad], "totalCount": 2})


class TestPublishedDate:

    def test_parse_is_utc(self):
        assert parse_published_date("2025-02-04T10:30:00") == datetime(
            2025, 2, 4, 10, 30, tzinfo=timezone.utc
        )

    @pytest.mark.parametrize("text", ["", "2025-02-04", "04.02.2025 10:30", None])
    def test_parse_rejects_other_formats(self, text):
        assert parse_published_date(text) is None

    @pytest.mark.parametrize("text, expected", [
        ("2025-01-01T00:00:00", "1 января 2025"),
        ("2024-12-31T23:59:59", "31 декабря 2024"),
        ("2025-05-09T12:00:00", "9 мая 2025"),
    ])
    def test_format(self, text, expected):
        assert format_published_date(text) == expected

    def test_format_fallback(self):
        assert format_published_date("yesterday") == UNKNOWN_DATE
        assert format_published_date("yesterday", fallback="?") == "?"
