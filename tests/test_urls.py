# File: tests/test_urls.py
import pytest

from site_audit.errors import InvalidBaseURLError
from site_audit.urls import (
    is_file_url,
    is_likely_page_url,
    normalize,
    path_depth,
    require_base_url,
)

BASE = "https://example.com"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("/about", "https://example.com/about"),
        ("contact", "https://example.com/contact"),
        ("HTTPS://Example.COM/Blog/Post", "https://example.com/Blog/Post"),
        ("https://other.org/page", "https://other.org/page"),
        ("/page?x=1#top", "https://example.com/page?x=1#top"),
    ],
)
def test_normalize_accepts(raw, expected):
    assert normalize(raw, BASE) == expected


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "",
        "   ",
        "mailto:info@example.com",
        "javascript:void(0)",
        "tel:+123",
        "ftp://example.com/file",
        "/docs/manual.pdf",
        "/img/logo.PNG",
        "/download/archive.zip",
    ],
)
def test_normalize_rejects(raw):
    assert normalize(raw, BASE) is None


def test_normalize_same_origin():
    assert normalize("https://other.org/page", BASE, same_origin=True) is None
    assert normalize("/page", BASE, same_origin=True) == "https://example.com/page"


def test_is_file_url_ignores_query():
    assert is_file_url("https://example.com/a.pdf?download=1")
    assert not is_file_url("https://example.com/pdf-guide")


def test_is_likely_page_url():
    assert is_likely_page_url("https://example.com/about")
    assert is_likely_page_url("https://example.com/search?q=shoes")
    long_query = "https://example.com/p?" + "s=" + "a" * 120
    assert not is_likely_page_url(long_query)
    long_fragment = "https://example.com/p#" + "x" * 60
    assert not is_likely_page_url(long_fragment)
    assert not is_likely_page_url("https://example.com/brochure.pdf")


@pytest.mark.parametrize(
    "url,depth",
    [
        ("https://example.com", 0),
        ("https://example.com/", 0),
        ("https://example.com/about", 1),
        ("https://example.com/blog/2024/post/", 3),
    ],
)
def test_path_depth(url, depth):
    assert path_depth(url) == depth


def test_require_base_url():
    assert require_base_url("https://example.com/") == "https://example.com"
    for bad in ("", None, "example.com", "ftp://example.com", 42):
        with pytest.raises(InvalidBaseURLError):
            require_base_url(bad)


def test_invalid_base_url_is_value_error():
    with pytest.raises(ValueError):
        require_base_url("not a url")
