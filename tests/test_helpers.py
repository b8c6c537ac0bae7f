"""
Tests for helper utilities
"""
import pytest

from coolstream.core.config import settings
from coolstream.utils.helpers import (
    build_image_url,
    build_streaming_urls,
    sanitize_user_id,
    utcnow,
)


def test_build_image_url():
    assert build_image_url("/p.jpg", "w500") == "https://image.tmdb.org/t/p/w500/p.jpg"
    assert build_image_url("p.jpg", "w300") == "https://image.tmdb.org/t/p/w300/p.jpg"


def test_build_image_url_missing_path():
    assert build_image_url(None, "w500") is None
    assert build_image_url("", "w500") is None


def test_streaming_urls_movie():
    urls = build_streaming_urls(42, "movie")

    assert urls.vidsrc == "https://vidsrc.wtf/embed/movie/42"
    assert urls.viking_embed == "https://vembed.stream/play/42"
    assert urls.filmku == "https://filmku.stream/embed/42"


def test_streaming_urls_tv():
    urls = build_streaming_urls(42, "tv")

    assert urls.vidsrc == "https://vidsrc.wtf/embed/tv/42"
    assert urls.viking_embed == "https://vembed.stream/play/tv/42"
    assert urls.filmku == "https://filmku.stream/embed/tv/42"


def test_streaming_urls_follow_settings(monkeypatch):
    monkeypatch.setattr(settings, "VIDSRC_BASE_URL", "https://mirror.example/")

    assert build_streaming_urls(7, "movie").vidsrc == "https://mirror.example/embed/movie/7"


@pytest.mark.parametrize("raw, expected", [
    ("abc", "abc"),
    ("  abc  ", "abc"),
    ("", "default"),
    ("   ", "default"),
    (None, "default"),
])
def test_sanitize_user_id(raw, expected):
    assert sanitize_user_id(raw) == expected


def test_utcnow_is_timezone_aware():
    assert utcnow().utcoffset().total_seconds() == 0
