# File: site_audit/engine.py
"""site_audit.engine: фасад для CLI и тестов: обнаружение страниц и поэтапный аудит."""

from __future__ import annotations

import dataclasses
from typing import Mapping, Optional, Union

from aiohttp import ClientSession, ClientTimeout

from site_audit.analyzers import build_analyzers
from site_audit.analyzers.base import PageAnalyzer
from site_audit.config import AuditConfig
from site_audit.discovery.engine import PageDiscoveryEngine, default_strategies
from site_audit.fetcher import Fetcher
from site_audit.logger import get_logger
from site_audit.models import AuditMode, AuditRun, DiscoveryResult
from site_audit.pacing import Pacer, build_pacer
from site_audit.scheduler import TieredAuditScheduler
from site_audit.urls import require_base_url

logger = get_logger("engine")

__all__ = ["Engine", "discover_pages", "run_tiered_audit"]


class Engine:
    """Управляет сессией aiohttp и связывает обнаружение с планировщиком аудита.

    Использование::

        async with Engine(config) as engine:
            run = await engine.run_tiered_audit("https://example.com")
    """

    def __init__(
        self,
        config: AuditConfig,
        *,
        analyzers: Optional[Mapping[str, PageAnalyzer]] = None,
        pacer: Optional[Pacer] = None,
    ) -> None:
        self.config = config
        self.session: Optional[ClientSession] = None
        self._analyzers = analyzers
        self._pacer = pacer

    async def __aenter__(self) -> Engine:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.config.timeout),
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    @property
    def fetcher(self) -> Fetcher:
        if not self.session:
            raise RuntimeError("Session not initialized")
        return Fetcher(self.session, self.config)

    async def discover_pages(self, base_url: str, max_pages: Optional[int] = None) -> DiscoveryResult:
        """Находит, объединяет и ранжирует страницы сайта."""
        fetcher = self.fetcher
        discovery = PageDiscoveryEngine(default_strategies(fetcher, self.config), self.config)
        return await discovery.discover_pages(base_url, max_pages=max_pages)

    async def run_tiered_audit(
        self,
        base_url: str,
        max_pages: Optional[int] = None,
        mode: Union[AuditMode, str, None] = None,
    ) -> AuditRun:
        """Обнаружение + аудит не более ``max_pages`` страниц в порядке приоритета."""
        base_url = require_base_url(base_url)
        budget = max_pages if max_pages is not None else self.config.max_pages
        audit_mode = AuditMode(mode) if mode is not None else self.config.mode
        logger.info("Site-wide audit of %s: max %d pages, mode %s", base_url, budget, audit_mode.value)

        discovery = await self.discover_pages(base_url)
        pages = discovery.prioritized_pages[:budget]
        logger.info(
            "%d pages selected for analysis, estimated coverage %s",
            len(pages), discovery.metadata.coverage_label,
        )

        fetcher = self.fetcher
        scheduler = TieredAuditScheduler(
            fetcher,
            self._analyzers if self._analyzers is not None else build_analyzers(fetcher, self.config),
            pacer=self._pacer or build_pacer(self.config),
            critical_threshold=self.config.critical_score_threshold,
        )
        run = await scheduler.run(
            pages,
            audit_mode,
            base_url=base_url,
            coverage=discovery.metadata.coverage,
            max_pages=budget,
        )
        return dataclasses.replace(run, discovery=discovery)


def _resolve_base_url(config: AuditConfig, base_url: Optional[str]) -> str:
    if base_url:
        return base_url
    if config.base_url is None:
        raise ValueError("No base URL given and none configured")
    return str(config.base_url).rstrip("/")


async def discover_pages(config: AuditConfig, base_url: Optional[str] = None) -> DiscoveryResult:
    """Модульная обёртка: открывает сессию и запускает обнаружение."""
    async with Engine(config) as engine:
        return await engine.discover_pages(_resolve_base_url(config, base_url))


async def run_tiered_audit(
    config: AuditConfig,
    base_url: Optional[str] = None,
    max_pages: Optional[int] = None,
    mode: Union[AuditMode, str, None] = None,
) -> AuditRun:
    """Модульная обёртка: открывает сессию и запускает аудит сайта."""
    async with Engine(config) as engine:
        return await engine.run_tiered_audit(_resolve_base_url(config, base_url), max_pages, mode)
