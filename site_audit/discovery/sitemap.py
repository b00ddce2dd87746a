# File: site_audit/discovery/sitemap.py
"""site_audit.discovery.sitemap: поиск sitemap по стандартным адресам и извлечение URL."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from lxml import etree

from site_audit.config import AuditConfig
from site_audit.errors import Result, SitemapParseError
from site_audit.fetcher import Fetcher
from site_audit.logger import get_logger
from site_audit.urls import normalize

logger = get_logger("discovery.sitemap")

SITEMAP_PATHS: Sequence[str] = (
    "/sitemap.xml",
    "/sitemap_index.xml",
    "/wp-sitemap.xml",  # WordPress
    "/sitemap.php",
    "/sitemap/",
)


@dataclass(slots=True)
class ParsedSitemap:
    """Page URLs (``<url><loc>``) and nested sitemaps (``<sitemap><loc>``)."""

    page_urls: List[str] = field(default_factory=list)
    nested_sitemaps: List[str] = field(default_factory=list)


def parse_sitemap(xml_content: bytes | str) -> ParsedSitemap:
    """Разбирает XML sitemap и возвращает URL из тегов <loc>.

    Args:
        xml_content: содержимое sitemap.xml (bytes или строка).

    Returns:
        ParsedSitemap с адресами страниц и вложенных sitemap.

    Raises:
        SitemapParseError: если документ не удаётся разобрать как XML.

    Пример:
    ```python
    from site_audit.discovery.sitemap import parse_sitemap

    with open('sitemap.xml', 'rb') as f:
        parsed = parse_sitemap(f.read())
    print(parsed.page_urls)
    ```
    """
    data = xml_content.encode("utf-8") if isinstance(xml_content, str) else xml_content
    if not data.strip():
        raise SitemapParseError("empty document")
    parser = etree.XMLParser(ns_clean=True, recover=True, resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(data, parser=parser)
    except etree.XMLSyntaxError as exc:
        raise SitemapParseError(str(exc)) from exc
    if root is None:
        raise SitemapParseError("document has no root element")

    parsed = ParsedSitemap()
    for loc in root.findall(".//{*}url/{*}loc"):
        if loc.text and loc.text.strip():
            parsed.page_urls.append(loc.text.strip())
    for loc in root.findall(".//{*}sitemap/{*}loc"):
        if loc.text and loc.text.strip():
            parsed.nested_sitemaps.append(loc.text.strip())
    return parsed


class SitemapDiscoverer:
    """Пробует стандартные адреса sitemap; побеждает первый, давший хотя бы один URL."""

    name = "sitemap"

    def __init__(self, fetcher: Fetcher, config: AuditConfig, paths: Sequence[str] = SITEMAP_PATHS) -> None:
        self.fetcher = fetcher
        self.max_urls = config.sitemap_max_urls
        self.timeout = config.timeout
        self.paths = tuple(paths)

    def candidate_urls(self, base_url: str) -> List[str]:
        base = base_url.rstrip("/")
        return [f"{base}{path}" for path in self.paths]

    async def discover(self, base_url: str) -> Result[List[str]]:
        """Возвращает до ``sitemap_max_urls`` проверенных URL; пустой список, если sitemap нет."""
        for sitemap_url in self.candidate_urls(base_url):
            logger.debug("Trying sitemap: %s", sitemap_url)
            fetched = await self.fetcher.fetch_ok(sitemap_url, timeout=self.timeout)
            if not fetched.ok:
                logger.info("Sitemap not available: %s (%s)", sitemap_url, fetched.error)
                continue
            try:
                parsed = parse_sitemap(fetched.unwrap().body)
            except SitemapParseError as exc:
                logger.info("Sitemap not parseable: %s (%s)", sitemap_url, exc)
                continue

            for nested in parsed.nested_sitemaps:
                # вложенные sitemap пока не загружаются
                logger.info("Nested sitemap found (not fetched): %s", nested)

            pages: List[str] = []
            for raw in parsed.page_urls:
                url = normalize(raw, base_url)
                if url is not None and url not in pages:
                    pages.append(url)
            if pages:
                logger.info("Sitemap found at %s: %d pages", sitemap_url, len(pages))
                return Result.success(pages[: self.max_urls])
            logger.debug("Sitemap %s yielded no page URLs", sitemap_url)

        return Result.success([])
