# File: site_audit/discovery/engine.py
"""site_audit.discovery.engine: упорядоченные стратегии обнаружения, ранжирование и метаданные."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from site_audit.config import AuditConfig
from site_audit.discovery.catalog import default_pages
from site_audit.discovery.coverage import estimate_coverage
from site_audit.discovery.homepage import HomepageDiscoverer
from site_audit.discovery.ranker import PageRanker
from site_audit.discovery.sitemap import SitemapDiscoverer
from site_audit.errors import AuditError, DiscoveryError, Result, describe_exception
from site_audit.fetcher import Fetcher
from site_audit.logger import get_logger
from site_audit.models import CandidateURL, DiscoveryMetadata, DiscoveryResult, PageSource
from site_audit.urls import require_base_url

logger = get_logger("discovery")

__all__ = ["DiscoveryStrategy", "PageDiscoveryEngine", "default_strategies"]

DiscoverFn = Callable[[str], Awaitable[Result[List[str]]]]


@dataclass(frozen=True, slots=True)
class DiscoveryStrategy:
    """Один источник кандидатов.

    ``always_run``: запускать даже при достаточном количестве уже найденных URL.
    """

    name: str
    source: PageSource
    discover: DiscoverFn
    always_run: bool = False


def _catalog_strategy() -> DiscoveryStrategy:
    async def _discover(base_url: str) -> Result[List[str]]:
        return Result.success(default_pages(base_url))

    return DiscoveryStrategy("default-catalog", PageSource.CATALOG, _discover, always_run=True)


def default_strategies(fetcher: Fetcher, config: AuditConfig) -> List[DiscoveryStrategy]:
    """Sitemap → ссылки главной страницы (если улик мало) → каталог (всегда)."""
    sitemap = SitemapDiscoverer(fetcher, config)
    homepage = HomepageDiscoverer(fetcher, config)
    return [
        DiscoveryStrategy(sitemap.name, PageSource.SITEMAP, sitemap.discover),
        DiscoveryStrategy(homepage.name, PageSource.HOMEPAGE, homepage.discover),
        _catalog_strategy(),
    ]


class PageDiscoveryEngine:
    """Запускает стратегии по порядку, объединяет URL и ранжирует их."""

    def __init__(
        self,
        strategies: Sequence[DiscoveryStrategy],
        config: AuditConfig,
        ranker: Optional[PageRanker] = None,
    ) -> None:
        self.strategies = list(strategies)
        self.config = config
        self.ranker = ranker or PageRanker(config.ranking)

    async def _run_strategy(self, strategy: DiscoveryStrategy, base_url: str) -> Result[List[str]]:
        try:
            return await strategy.discover(base_url)
        except AuditError as exc:
            return Result.failure(exc)
        except Exception as exc:  # источник не должен ронять обнаружение
            logger.exception("Discovery strategy %s crashed", strategy.name)
            return Result.failure(DiscoveryError(describe_exception(exc)))

    async def discover_pages(self, base_url: str, max_pages: Optional[int] = None) -> DiscoveryResult:
        """Возвращает все уникальные URL, приоритизированный срез и метаданные."""
        base_url = require_base_url(base_url)
        limit = max_pages if max_pages is not None else self.config.discovery_max_pages
        logger.info("Starting page discovery for %s", base_url)

        pool: Dict[str, CandidateURL] = {}
        source_counts: Dict[str, int] = {}
        errors: Dict[str, str] = {}
        ran: List[str] = []
        skipped: List[str] = []

        for strategy in self.strategies:
            if not strategy.always_run and len(pool) >= self.config.sufficient_evidence:
                logger.info(
                    "Skipping %s: %d pages already discovered (threshold %d)",
                    strategy.name, len(pool), self.config.sufficient_evidence,
                )
                skipped.append(strategy.name)
                continue

            ran.append(strategy.name)
            outcome = await self._run_strategy(strategy, base_url)
            if not outcome.ok:
                errors[strategy.source.value] = describe_exception(outcome.error)  # type: ignore[arg-type]
                logger.warning("Discovery source %s failed: %s", strategy.name, outcome.error)
            urls = outcome.value_or([])
            source_counts[strategy.source.value] = len(urls)
            for url in urls:
                pool.setdefault(url, CandidateURL(url, strategy.source))
            logger.info("%s: %d pages", strategy.name, len(urls))

        # после этой точки пул не меняется
        sealed = tuple(pool.values())
        ranked = self.ranker.rank(sealed)
        prioritized = ranked[:limit]

        metadata = DiscoveryMetadata(
            source_counts=source_counts,
            total_discovered=len(pool),
            coverage=estimate_coverage(len(ranked)),
            strategies_run=tuple(ran),
            strategies_skipped=tuple(skipped),
            errors=errors,
        )
        logger.info(
            "Discovered %d pages, prioritized %d (estimated coverage %s)",
            len(pool), len(prioritized), metadata.coverage_label,
        )
        return DiscoveryResult(all_pages=list(pool), prioritized_pages=prioritized, metadata=metadata)
