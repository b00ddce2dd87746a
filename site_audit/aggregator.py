# File: site_audit/aggregator.py
"""site_audit.aggregator: сводка по сайту из результатов постраничного аудита."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

from site_audit.models import (
    AnalysisLevel,
    CriticalPage,
    FailedPage,
    PageAuditResult,
    SiteAuditSummary,
)

DEFAULT_CRITICAL_THRESHOLD = 30.0
PERFORMANCE_ANALYZER = "pagespeed"


def _reported_scores(result: PageAuditResult) -> Dict[str, float]:
    """Оценки 0–100, которые сообщили анализаторы страницы."""
    scores: Dict[str, float] = {}
    for name, output in result.analyses.items():
        score = _score(output)
        if score is not None:
            scores[name] = score
    return scores


def _score(output: Any) -> Optional[float]:
    score = output.get("score") if isinstance(output, dict) else getattr(output, "score", None)
    if isinstance(score, (int, float)) and not isinstance(score, bool) and 0 <= score <= 100:
        return float(score)
    return None


def _performance(result: PageAuditResult) -> Optional[Dict[str, Any]]:
    """Результат PageSpeed страницы, если он есть и содержит оценку."""
    output = result.analyses.get(PERFORMANCE_ANALYZER)
    if isinstance(output, dict) and _score(output) is not None:
        return output
    return None


def _strategy_score(performance: Dict[str, Any], strategy: str) -> Optional[float]:
    section = performance.get(strategy)
    return _score(section) if isinstance(section, dict) else None


def _mean(values: Sequence[float]) -> Optional[float]:
    return round(sum(values) / len(values), 1) if values else None


def _critical_pages(results: Iterable[PageAuditResult], threshold: float) -> List[CriticalPage]:
    """Страницы с мобильной оценкой PageSpeed ниже порога или с критическими проблемами."""
    critical: List[CriticalPage] = []
    for result in results:
        performance = _performance(result)
        if performance is None:
            continue
        mobile = _strategy_score(performance, "mobile")
        issues = performance.get("critical_issues_count")
        issues = issues if isinstance(issues, int) else 0
        if (mobile is not None and mobile < threshold) or issues > 0:
            critical.append(CriticalPage(url=result.url, score=mobile, issues=issues))
    return critical


def build_site_summary(
    results: Sequence[PageAuditResult],
    coverage: int = 0,
    critical_threshold: float = DEFAULT_CRITICAL_THRESHOLD,
) -> SiteAuditSummary:
    """Собирает SiteAuditSummary; вызывается один раз после обработки всех страниц."""
    successful = [r for r in results if r.success]
    failed = [r for r in results if not r.success]

    level_counts = {level.value: 0 for level in AnalysisLevel}
    for result in results:
        level_counts[AnalysisLevel(result.analysis_level).value] += 1

    per_analyzer: Dict[str, List[float]] = {}
    for result in successful:
        for name, score in _reported_scores(result).items():
            per_analyzer.setdefault(name, []).append(score)
    average_scores = {name: _mean(values) for name, values in sorted(per_analyzer.items())}

    performance = [p for p in map(_performance, successful) if p is not None]
    overall = [s for s in map(_score, performance) if s is not None]
    mobile = [s for s in (_strategy_score(p, "mobile") for p in performance) if s is not None]
    desktop = [s for s in (_strategy_score(p, "desktop") for p in performance) if s is not None]

    page_types: Dict[str, int] = {}
    for result in successful:
        key = getattr(result.type, "value", result.type) or "general"
        page_types[key] = page_types.get(key, 0) + 1

    total_time = round(sum(r.analysis_time_ms for r in results), 1)
    return SiteAuditSummary(
        total_pages=len(results),
        successful_analyses=len(successful),
        failed_analyses=len(failed),
        level_counts=level_counts,
        average_scores=average_scores,  # type: ignore[arg-type]
        average_score=_mean(overall),
        average_mobile_score=_mean(mobile),
        average_desktop_score=_mean(desktop),
        critical_pages=tuple(_critical_pages(successful, critical_threshold)),
        failed_pages=tuple(FailedPage(url=r.url, error=r.error or "unknown error") for r in failed),
        page_types=page_types,
        coverage=coverage,
        total_analysis_time_ms=total_time,
        average_analysis_time_ms=round(total_time / len(results), 1) if results else 0.0,
    )


def summary_lines(summary: SiteAuditSummary) -> List[str]:
    """Короткое текстовое резюме для CLI."""
    lines = [
        f"Pages analysed: {summary.successful_analyses}/{summary.total_pages}"
        f" (failed: {summary.failed_analyses})",
        f"Estimated coverage: ~{summary.coverage}%",
        "Levels: " + ", ".join(f"{k}={v}" for k, v in summary.level_counts.items()),
    ]
    if summary.average_score is not None:
        lines.append(
            f"Average performance score: {summary.average_score}/100"
            f" (mobile {summary.average_mobile_score}, desktop {summary.average_desktop_score})"
        )
    for name, score in summary.average_scores.items():
        lines.append(f"  {name}: {score}/100")
    lines.append(f"Critical pages: {len(summary.critical_pages)}")
    for page in summary.failed_pages:
        lines.append(f"  failed {page.url}: {page.error}")
    return lines


def to_jsonable(value: Any) -> Any:
    """Перечисления → строки; остальное без изменений (для json.dumps)."""
    if hasattr(value, "value") and isinstance(value, str):
        return value.value
    if isinstance(value, dict):
        return {to_jsonable(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value
