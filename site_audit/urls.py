# File: site_audit/urls.py
"""site_audit.urls: нормализация и проверка URL-кандидатов (без I/O и состояния)."""

from __future__ import annotations

from typing import Optional, Sequence
from urllib.parse import urljoin, urlparse, urlunparse

from site_audit.errors import InvalidBaseURLError

__all__: Sequence[str] = (
    "FILE_EXTENSIONS",
    "normalize",
    "require_base_url",
    "is_file_url",
    "is_likely_page_url",
    "has_query_or_fragment",
    "path_depth",
    "same_host",
)

FILE_EXTENSIONS: tuple[str, ...] = (
    # images
    ".jpg", ".jpeg", ".png", ".gif", ".svg", ".webp", ".ico", ".bmp", ".tif", ".tiff",
    # documents
    ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx", ".odt", ".csv",
    # archives
    ".zip", ".rar", ".7z", ".tar", ".gz", ".tgz", ".bz2",
    # audio / video
    ".mp3", ".wav", ".ogg", ".mp4", ".avi", ".mov", ".wmv", ".webm", ".mkv",
    # binaries
    ".exe", ".dmg", ".apk", ".msi",
)

MAX_QUERY_URL_LENGTH = 100
MAX_FRAGMENT_LENGTH = 50

_SKIPPED_PREFIXES = ("mailto:", "javascript:", "tel:", "data:")


def is_file_url(url: str) -> bool:
    """True if the URL path ends with a known binary/media/archive extension."""
    path = urlparse(url).path.lower()
    return path.endswith(FILE_EXTENSIONS)


def has_query_or_fragment(url: str) -> bool:
    return "?" in url or "#" in url


def path_depth(url: str) -> int:
    """Number of non-empty path segments."""
    try:
        path = urlparse(url).path
    except ValueError:
        return url.count("/")
    return len([part for part in path.split("/") if part])


def same_host(url: str, base_url: str) -> bool:
    return urlparse(url).hostname == urlparse(base_url).hostname


def normalize(raw: Optional[str], base_url: str, *, same_origin: bool = False) -> Optional[str]:
    """Resolve *raw* against *base_url* and validate it.

    Returns the absolute URL (scheme and host lower-cased, path untouched) or
    ``None`` when the candidate is rejected: empty, pseudo-scheme, not
    http(s), file-like, or (with ``same_origin``) on another hostname.
    """
    if not raw or not isinstance(raw, str):
        return None
    candidate = raw.strip()
    if not candidate or candidate.lower().startswith(_SKIPPED_PREFIXES):
        return None

    try:
        parsed = urlparse(urljoin(base_url, candidate))
    except ValueError:
        return None

    scheme = parsed.scheme.lower()
    if scheme not in ("http", "https") or not parsed.netloc:
        return None

    absolute = urlunparse(
        (scheme, parsed.netloc.lower(), parsed.path, parsed.params, parsed.query, parsed.fragment)
    )
    if is_file_url(absolute):
        return None
    if same_origin and not same_host(absolute, base_url):
        return None
    return absolute


def is_likely_page_url(url: str) -> bool:
    """Filter out file-like URLs and those carrying long session/tracking state."""
    if is_file_url(url):
        return False
    if "?" in url and len(url) > MAX_QUERY_URL_LENGTH:
        return False
    if "#" in url and len(url.split("#", 1)[1]) > MAX_FRAGMENT_LENGTH:
        return False
    return True


def require_base_url(base_url: object) -> str:
    """Validate the site root; an unusable one is a caller error and is raised."""
    if not isinstance(base_url, str) or not base_url.strip():
        raise InvalidBaseURLError(f"Base URL must be a non-empty string, got {base_url!r}")
    parsed = urlparse(base_url.strip())
    if parsed.scheme.lower() not in ("http", "https") or not parsed.hostname:
        raise InvalidBaseURLError(f"Base URL must be an absolute http(s) URL: {base_url!r}")
    return base_url.strip().rstrip("/")
