# site_audit/scheduler.py
"""
Tiered audit scheduler: walks the ranked pages one at a time, picks an
analysis level per page and isolates per-page failures.
"""
from __future__ import annotations

import time
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from site_audit.aggregator import DEFAULT_CRITICAL_THRESHOLD, build_site_summary
from site_audit.analyzers.base import LEVEL_ANALYZERS, PageAnalyzer, PageContext
from site_audit.errors import AnalysisError, Result, describe_exception
from site_audit.fetcher import Fetcher
from site_audit.insights import analyze_site_seo, build_site_recommendations, estimate_site_roi
from site_audit.logger import get_logger
from site_audit.models import AnalysisLevel, AuditMode, AuditRun, PageAuditResult, RankedPage
from site_audit.pacing import FixedDelayPacer, Pacer

logger = get_logger("scheduler")

FULL_TOP_N = 3
FULL_MIN_PRIORITY = 10
STANDARD_TOP_N = 8
STANDARD_MIN_PRIORITY = 6


def determine_analysis_level(index: int, priority: int, mode: Union[AuditMode, str]) -> AnalysisLevel:
    """Analysis level for the page at position *index* of the ranked list."""
    mode = AuditMode(mode)
    if mode is AuditMode.FULL:
        return AnalysisLevel.FULL
    if mode is AuditMode.STANDARD:
        return AnalysisLevel.STANDARD
    if mode is AuditMode.LIGHT:
        return AnalysisLevel.LIGHT
    if index < FULL_TOP_N or priority >= FULL_MIN_PRIORITY:
        return AnalysisLevel.FULL
    if index < STANDARD_TOP_N or priority >= STANDARD_MIN_PRIORITY:
        return AnalysisLevel.STANDARD
    return AnalysisLevel.LIGHT


class TieredAuditScheduler:
    """Sequential, paced, failure-isolating runner for per-page analyzers."""

    def __init__(
        self,
        fetcher: Fetcher,
        analyzers: Mapping[str, PageAnalyzer],
        *,
        pacer: Optional[Pacer] = None,
        level_analyzers: Mapping[AnalysisLevel, Tuple[str, ...]] = LEVEL_ANALYZERS,
        critical_threshold: float = DEFAULT_CRITICAL_THRESHOLD,
    ) -> None:
        self.fetcher = fetcher
        self.analyzers = dict(analyzers)
        self.pacer: Pacer = pacer or FixedDelayPacer(1.0)
        self.level_analyzers = level_analyzers
        self.critical_threshold = critical_threshold

        missing = {n for names in level_analyzers.values() for n in names} - set(self.analyzers)
        if missing:
            raise ValueError(f"No analyzer registered for: {', '.join(sorted(missing))}")

    async def _analyze(self, page: RankedPage, level: AnalysisLevel) -> Result[Dict[str, Any]]:
        """Run the level's analyzers; anything raised becomes a failed Result."""
        try:
            fetched = (await self.fetcher.fetch(page.url)).unwrap()
            context = PageContext(url=page.url, page=fetched)
            for name in self.level_analyzers[level]:
                context.results[name] = await self.analyzers[name].analyze(context)
            return Result.success(context.results)
        except Exception as exc:  # any failure ends this page only
            return Result.failure(AnalysisError(page.url, describe_exception(exc)))

    async def audit_page(self, index: int, page: RankedPage, mode: Union[AuditMode, str]) -> PageAuditResult:
        started = time.monotonic()
        level = determine_analysis_level(index, page.priority, mode)
        outcome = await self._analyze(page, level)
        elapsed_ms = round((time.monotonic() - started) * 1000, 1)

        if outcome.ok:
            logger.info("%s - %s (%.1fs)", page.url, level.value.upper(), elapsed_ms / 1000)
            return PageAuditResult(
                url=page.url,
                analysis_level=level,
                success=True,
                analysis_time_ms=elapsed_ms,
                analyses=outcome.unwrap(),
                priority=page.priority,
                type=page.type,
            )

        error = describe_exception(outcome.error)  # type: ignore[arg-type]
        logger.error("Analysis of %s failed (%s): %s", page.url, level.value, error)
        return PageAuditResult(
            url=page.url,
            analysis_level=AnalysisLevel.FAILED,
            success=False,
            analysis_time_ms=elapsed_ms,
            error=error,
            priority=page.priority,
            type=page.type,
        )

    async def run(
        self,
        pages: Sequence[RankedPage],
        mode: Union[AuditMode, str] = AuditMode.GRADUAL,
        *,
        base_url: str = "",
        coverage: int = 0,
        max_pages: Optional[int] = None,
    ) -> AuditRun:
        """Audit *pages* in order (sliced to *max_pages*), then build the summary and site-level insights."""
        mode = AuditMode(mode)
        budget = len(pages) if max_pages is None else max_pages
        scheduled = list(pages[:budget])

        results = []
        self.pacer.reset()
        for index, page in enumerate(scheduled):
            await self.pacer.wait()
            logger.info("Analysing page %d/%d: %s", index + 1, len(scheduled), page.url)
            results.append(await self.audit_page(index, page, mode))

        summary = build_site_summary(results, coverage=coverage, critical_threshold=self.critical_threshold)
        logger.info(
            "Audit finished: %d/%d pages succeeded, %d failed",
            summary.successful_analyses, summary.total_pages, summary.failed_analyses,
        )
        return AuditRun(
            base_url=base_url,
            mode=mode,
            max_pages=budget,
            page_results=results,
            summary=summary,
            site_seo=analyze_site_seo(results),
            recommendations=tuple(build_site_recommendations(summary)),
            roi=estimate_site_roi(summary),
        )
