# site_audit/discovery/homepage.py
"""
Homepage link extraction: same-origin anchors that look like pages.
"""
from __future__ import annotations

from typing import List

from bs4 import BeautifulSoup
from bs4.element import Tag

from site_audit.config import AuditConfig
from site_audit.errors import Result
from site_audit.fetcher import Fetcher
from site_audit.logger import get_logger
from site_audit.urls import is_likely_page_url, normalize

logger = get_logger("discovery.homepage")


def extract_links(html: str | bytes, base_url: str) -> List[str]:
    """
    Extract internal HTTP(S) links from an HTML document.

    Relative links are resolved against *base_url* and a link is internal only
    when its hostname equals the hostname of *base_url*. mailto:, javascript:,
    file-like and external-host links are dropped. Order is preserved,
    duplicates removed.
    """
    soup = BeautifulSoup(html, "html.parser")
    links: List[str] = []
    seen: set[str] = set()
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        absolute = normalize(href_val, base_url, same_origin=True)
        if absolute is None or absolute in seen:
            continue
        seen.add(absolute)
        links.append(absolute)
    return links


class HomepageDiscoverer:
    """Fetches the homepage once and returns its likely-page internal links."""

    name = "homepage"

    def __init__(self, fetcher: Fetcher, config: AuditConfig) -> None:
        self.fetcher = fetcher
        self.max_links = config.homepage_max_links
        self.timeout = config.homepage_timeout

    async def discover(self, base_url: str) -> Result[List[str]]:
        logger.info("Analysing homepage links: %s", base_url)
        fetched = await self.fetcher.fetch_ok(base_url, timeout=self.timeout)
        if not fetched.ok:
            logger.warning("Homepage fetch failed for %s: %s", base_url, fetched.error)
            return Result.failure(fetched.error)  # type: ignore[arg-type]

        page = fetched.unwrap()
        links = [url for url in extract_links(page.body, base_url) if is_likely_page_url(url)]
        links = links[: self.max_links]
        logger.info("Found %d internal links on homepage", len(links))
        return Result.success(links)
