"""Tests for generate_feed.normalize.normalize module."""

from datetime import datetime, timezone

from generate_feed.normalize.normalize import (
    article_date,
    article_title,
    article_type,
    format_id,
    normalize_image_url,
    normalize_page_url,
    primary_id,
    sort_timestamp,
)


class TestNormalizeImageUrl:
    def test_article_path_gets_xchuxing_segment(self) -> None:
        assert normalize_image_url("article/foo.jpg") == "https://s1.xchuxing.com/xchuxing/article/foo.jpg"

    def test_leading_slash_is_stripped(self) -> None:
        assert normalize_image_url("/article/foo.jpg") == "https://s1.xchuxing.com/xchuxing/article/foo.jpg"

    def test_xchuxing_path_rooted_at_cdn(self) -> None:
        assert normalize_image_url("xchuxing/article/a.png") == "https://s1.xchuxing.com/xchuxing/article/a.png"

    def test_other_relative_path_rooted_at_cdn(self) -> None:
        assert normalize_image_url("/misc/a.png") == "https://s1.xchuxing.com/misc/a.png"

    def test_absolute_unchanged(self) -> None:
        assert normalize_image_url("https://example.com/x.jpg") == "https://example.com/x.jpg"

    def test_empty_and_non_string(self) -> None:
        assert normalize_image_url("") == ""
        assert normalize_image_url("   ") == ""
        assert normalize_image_url(None) == ""
        assert normalize_image_url(123) == ""


class TestNormalizePageUrl:
    def test_root_relative_gets_origin(self) -> None:
        assert normalize_page_url("/article/1") == "https://www.xchuxing.com/article/1"

    def test_absolute_unchanged(self) -> None:
        assert normalize_page_url("HTTP://Example.com/a") == "HTTP://Example.com/a"

    def test_other_passes_through(self) -> None:
        assert normalize_page_url("article/1") == "article/1"

    def test_empty_and_non_string(self) -> None:
        assert normalize_page_url(None) == ""
        assert normalize_page_url(["/a"]) == ""


class TestArticleTitle:
    def test_trims_string(self) -> None:
        assert article_title({"title": "  Hello  "}) == "Hello"

    def test_coerces_non_string(self) -> None:
        assert article_title({"title": 2024}) == "2024"

    def test_missing_is_empty(self) -> None:
        assert article_title({}) == ""
        assert article_title({"title": None}) == ""
        assert article_title(None) == ""


class TestArticleDate:
    def test_seconds(self) -> None:
        result = article_date({"created_at": 1700000000})
        assert result.year == 2023
        assert result == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    def test_milliseconds(self) -> None:
        assert article_date({"created_at": 1700000000000}) == article_date({"created_at": 1700000000})

    def test_falls_back_to_updated_at(self) -> None:
        assert article_date({"updated_at": 1700000000}) == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    def test_missing_uses_now(self) -> None:
        before = datetime.now(timezone.utc)
        assert article_date({}) >= before


class TestIdentifiers:
    def test_primary_id_prefers_object_id(self) -> None:
        assert primary_id({"object_id": 55, "id": 9}) == 55

    def test_primary_id_falls_back_to_id(self) -> None:
        assert primary_id({"object_id": None, "id": 9}) == 9

    def test_format_id(self) -> None:
        assert format_id(55.0) == "55"
        assert format_id("abc") == "abc"

    def test_article_type(self) -> None:
        assert article_type({"type": 12}) == 12
        assert article_type({"type": "13"}) == 13
        assert article_type({"type": "x"}) is None
        assert article_type({"type": True}) is None
        assert article_type({}) is None


class TestSortTimestamp:
    def test_numeric_and_missing(self) -> None:
        assert sort_timestamp({"created_at": 5}) == 5.0
        assert sort_timestamp({"created_at": "7"}) == 7.0
        assert sort_timestamp({}) == 0.0
        assert sort_timestamp({"created_at": "bad"}) == 0.0
