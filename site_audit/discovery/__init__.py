# File: site_audit/discovery/__init__.py
"""site_audit.discovery: обнаружение страниц сайта и их ранжирование."""

from .catalog import DEFAULT_PATHS, default_pages
from .coverage import estimate_coverage
from .engine import DiscoveryStrategy, PageDiscoveryEngine, default_strategies
from .homepage import HomepageDiscoverer, extract_links
from .ranker import PageRanker, rank
from .sitemap import SITEMAP_PATHS, ParsedSitemap, SitemapDiscoverer, parse_sitemap

__all__ = [
    "DEFAULT_PATHS",
    "default_pages",
    "estimate_coverage",
    "DiscoveryStrategy",
    "PageDiscoveryEngine",
    "default_strategies",
    "HomepageDiscoverer",
    "extract_links",
    "PageRanker",
    "rank",
    "SITEMAP_PATHS",
    "ParsedSitemap",
    "SitemapDiscoverer",
    "parse_sitemap",
]
