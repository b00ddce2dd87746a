# File: site_audit/insights.py
"""site_audit.insights: выводы уровня сайта для отчёта.

* SEO-сводка по всем страницам: дубли и длина title/description, H1,
  структура URL, битые внутренние ссылки;
* рекомендации уровня сайта (CRITICAL/HIGH) по сводке производительности;
* грубая оценка ROI от улучшения средней оценки производительности.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence

from site_audit.models import (
    HeadingAnalysis,
    InternalLinkingAnalysis,
    PageAuditResult,
    Recommendation,
    RecommendationPriority,
    SiteAuditSummary,
    SiteROI,
    SiteSEOAnalysis,
    TextFieldAnalysis,
    URLStructureAnalysis,
)

TITLE_MIN, TITLE_MAX = 30, 60
META_MIN, META_MAX = 120, 160
MAX_URL_LENGTH = 100
URL_KEYWORDS = ("product", "service", "about", "contact", "blog", "news")

SEO_WEIGHTS: Dict[str, float] = {
    "titles": 0.25,
    "meta_descriptions": 0.25,
    "headings": 0.20,
    "url_structure": 0.15,
    "internal_linking": 0.15,
}

# business assumptions for the ROI estimate
MONTHLY_TRAFFIC = 10_000
CONVERSION_RATE = 0.02
AVERAGE_ORDER_VALUE = 100
COST_PER_PAGE = 500

# (upper bound of the average score, possible conversion improvement)
CONVERSION_TIERS = ((30, 0.25), (50, 0.15), (70, 0.08), (90, 0.03))

P = RecommendationPriority


# --------------------------------------------------------------------------- #
# Site SEO roll-up                                                            #
# --------------------------------------------------------------------------- #


def _analysis(result: PageAuditResult, name: str) -> Dict[str, Any]:
    output = result.analyses.get(name)
    return output if isinstance(output, dict) else {}


def _text_field(
    values: Sequence[str],
    *,
    label: str,
    bounds: tuple[int, int],
    duplicate_penalty: int,
    short_penalty: int,
    long_penalty: int,
    optimal_share: float,
    optimal_penalty: int,
) -> TextFieldAnalysis:
    """Common statistics for titles and meta descriptions."""
    if not values:
        return TextFieldAnalysis(0, 0, 0, 0, 0, 0, (f"no {label} found on any page",))

    low, high = bounds
    lengths = [len(v) for v in values]
    average = sum(lengths) / len(lengths)
    optimal = sum(1 for n in lengths if low <= n <= high)
    duplicates = len(values) - len(set(values))

    score = 100 - duplicates * duplicate_penalty
    issues: List[str] = []
    if duplicates:
        issues.append(f"{duplicates} duplicate {label}")
    if average < low:
        score -= short_penalty
        issues.append(f"{label} too short (average {average:.0f} characters)")
    if average > high:
        score -= long_penalty
        issues.append(f"{label} too long (average {average:.0f} characters)")
    if optimal / len(values) < optimal_share:
        score -= optimal_penalty

    return TextFieldAnalysis(
        count=len(values),
        unique_count=len(set(values)),
        average_length=round(average),
        optimal_length=optimal,
        duplicates=duplicates,
        score=max(0, score),
        issues=tuple(issues),
    )


def analyze_titles(results: Sequence[PageAuditResult]) -> TextFieldAnalysis:
    titles = [t for t in (_analysis(r, "seo").get("title") for r in results) if isinstance(t, str) and t]
    return _text_field(
        titles, label="titles", bounds=(TITLE_MIN, TITLE_MAX),
        duplicate_penalty=10, short_penalty=20, long_penalty=15, optimal_share=0.7, optimal_penalty=10,
    )


def analyze_meta_descriptions(results: Sequence[PageAuditResult]) -> TextFieldAnalysis:
    metas = [m for m in (_analysis(r, "seo").get("meta_description") for r in results) if isinstance(m, str) and m]
    analysis = _text_field(
        metas, label="meta descriptions", bounds=(META_MIN, META_MAX),
        duplicate_penalty=15, short_penalty=25, long_penalty=20, optimal_share=0.6, optimal_penalty=15,
    )
    if metas and len(metas) < len(results) * 0.8:
        analysis = replace(analysis, issues=analysis.issues + ("many pages without a meta description",))
    return analysis


def analyze_headings(results: Sequence[PageAuditResult]) -> HeadingAnalysis:
    counts = [
        h1 for h1 in (
            (_analysis(r, "seo").get("headings") or {}).get("h1") for r in results
        )
        if isinstance(h1, int)
    ]
    if not counts:
        return HeadingAnalysis(len(results), 0, 0, 0.0, 0, ("heading structure could not be analysed",))

    with_h1 = sum(1 for n in counts if n > 0)
    multiple = sum(1 for n in counts if n > 1)
    average = sum(counts) / len(counts)
    share = with_h1 / len(counts)

    score = 100 - multiple * 10
    issues: List[str] = []
    if share < 0.9:
        score -= 30
        issues.append(f"only {round(share * 100)}% of pages have an h1")
    if multiple:
        issues.append(f"{multiple} pages have multiple h1")
    if average > 1.5:
        score -= 15

    return HeadingAnalysis(
        total_pages=len(counts),
        pages_with_h1=with_h1,
        pages_with_multiple_h1=multiple,
        average_h1_count=round(average, 1),
        score=max(0, score),
        issues=tuple(issues),
    )


def is_seo_friendly_url(url: str) -> bool:
    """Hyphenated, no underscores, shorter than the length limit."""
    path = url.split("?")[0].split("#")[0]
    return len(path) < MAX_URL_LENGTH and "_" not in path and "-" in path


def analyze_url_structure(results: Sequence[PageAuditResult]) -> URLStructureAnalysis:
    urls = [r.url for r in results]
    if not urls:
        return URLStructureAnalysis(0, 0, 0, 0, 0, 0, ("no URLs to analyse",))

    friendly = sum(1 for u in urls if is_seo_friendly_url(u))
    with_keywords = sum(1 for u in urls if any(k in u.lower() for k in URL_KEYWORDS))
    too_long = sum(1 for u in urls if len(u) > MAX_URL_LENGTH)
    underscores = sum(1 for u in urls if "_" in u)
    share = friendly / len(urls)

    score = 100 - too_long * 5 - underscores * 3
    issues: List[str] = []
    if share < 0.8:
        score -= 20
        issues.append(f"only {round(share * 100)}% of URLs are SEO-friendly")
    if too_long:
        issues.append(f"{too_long} URLs are too long")
    if underscores:
        issues.append(f"{underscores} URLs use underscores instead of hyphens")

    return URLStructureAnalysis(
        total_urls=len(urls),
        seo_friendly=friendly,
        with_keywords=with_keywords,
        too_long=too_long,
        with_underscores=underscores,
        score=max(0, score),
        issues=tuple(issues),
    )


def analyze_internal_linking(results: Sequence[PageAuditResult]) -> InternalLinkingAnalysis:
    total = sum(int(_analysis(r, "links").get("total") or 0) for r in results)
    broken = sum(int(_analysis(r, "links").get("broken") or 0) for r in results)

    issues: List[str] = []
    if broken:
        issues.append(f"{broken} broken internal links found")
    if total == 0:
        issues.append("no internal links found to analyse")
    score = 0 if total == 0 else 100 - broken * 5

    return InternalLinkingAnalysis(
        total_links=total,
        broken_links=broken,
        healthy_links=total - broken,
        score=max(0, score),
        issues=tuple(issues),
    )


def seo_recommendations(seo: SiteSEOAnalysis) -> List[Recommendation]:
    recs: List[Recommendation] = []
    titles, metas = seo.titles, seo.meta_descriptions
    if titles.score < 80:
        if titles.duplicates:
            recs.append(Recommendation(
                P.HIGH, "SEO - Titles", f"{titles.duplicates} duplicate titles found",
                impact="Better ranking and click-through rate in search results",
                action=f"Write a unique, descriptive title for every page ({TITLE_MIN}-{TITLE_MAX} characters)",
            ))
        if titles.count and titles.average_length < TITLE_MIN:
            recs.append(Recommendation(
                P.MEDIUM, "SEO - Titles", f"Titles too short (average {titles.average_length} characters)",
                impact="Search engines understand the content better",
                action="Extend titles with relevant keywords",
            ))
    if metas.score < 70:
        if metas.duplicates:
            recs.append(Recommendation(
                P.HIGH, "SEO - Meta Descriptions", f"{metas.duplicates} duplicate meta descriptions",
                impact="Better click-through rate in search results",
                action=f"Write a unique meta description for every page ({META_MIN}-{META_MAX} characters)",
            ))
        if metas.count and metas.average_length < META_MIN:
            recs.append(Recommendation(
                P.MEDIUM, "SEO - Meta Descriptions",
                f"Meta descriptions too short (average {metas.average_length} characters)",
                impact="More engagement from search results",
                action="Add calls to action and benefits to meta descriptions",
            ))
    headings = seo.headings
    if headings.score < 80 and headings.total_pages and headings.pages_with_h1 / headings.total_pages < 0.9:
        recs.append(Recommendation(
            P.CRITICAL, "SEO - Headings", "Pages without an h1 or with several h1",
            impact="Correct semantic structure and better indexing",
            action="Give every page exactly one descriptive h1",
        ))
    urls = seo.url_structure
    if urls.score < 80:
        if urls.with_underscores:
            recs.append(Recommendation(
                P.MEDIUM, "SEO - URLs", f"{urls.with_underscores} URLs use underscores",
                impact="URLs are easier to read for search engines",
                action="Replace underscores with hyphens in URLs",
            ))
        if urls.too_long:
            recs.append(Recommendation(
                P.LOW, "SEO - URLs", f"{urls.too_long} URLs are too long",
                impact="Better usability and shareability",
                action="Shorten URLs while keeping the important keywords",
            ))
    linking = seo.internal_linking
    if linking.score < 80 and linking.broken_links:
        recs.append(Recommendation(
            P.HIGH, "SEO - Internal Linking", f"{linking.broken_links} broken internal links",
            impact="Better link equity distribution and site navigation",
            action="Fix or redirect the broken internal links",
        ))
    return recs


def analyze_site_seo(results: Sequence[PageAuditResult]) -> SiteSEOAnalysis:
    """SEO-сводка по всем страницам прогона (неуспешные страницы дают только URL)."""
    parts = {
        "titles": analyze_titles(results),
        "meta_descriptions": analyze_meta_descriptions(results),
        "headings": analyze_headings(results),
        "url_structure": analyze_url_structure(results),
        "internal_linking": analyze_internal_linking(results),
    }
    weighted = sum(parts[name].score * weight for name, weight in SEO_WEIGHTS.items())
    seo = SiteSEOAnalysis(**parts, overall_score=round(weighted / sum(SEO_WEIGHTS.values())))  # type: ignore[arg-type]
    return replace(seo, recommendations=tuple(seo_recommendations(seo)))


# --------------------------------------------------------------------------- #
# Site recommendations and ROI                                                #
# --------------------------------------------------------------------------- #


def build_site_recommendations(summary: SiteAuditSummary) -> List[Recommendation]:
    """Рекомендации по сводке производительности; без данных PageSpeed список пуст."""
    recs: List[Recommendation] = []
    if summary.average_score is not None and summary.average_score < 50:
        recs.append(Recommendation(
            P.CRITICAL, "Site Performance",
            f"Critical average site score: {summary.average_score:.0f}/100",
            impact="Hurts the whole user experience and SEO",
            scope=("whole site",),
            effort="4-6 weeks",
            business_impact="$5,000-$15,000 additional monthly revenue",
        ))
    mobile, desktop = summary.average_mobile_score, summary.average_desktop_score
    if mobile is not None and desktop is not None and mobile < desktop - 20:
        recs.append(Recommendation(
            P.HIGH, "Mobile Optimization",
            f"Mobile {mobile:.0f}pts vs Desktop {desktop:.0f}pts",
            impact="Most visitors get a poor mobile experience",
            scope=("main pages",),
            effort="3-4 weeks",
            business_impact="20-35% better mobile conversion",
        ))
    if summary.critical_pages:
        recs.append(Recommendation(
            P.CRITICAL, "Critical Pages",
            f"{len(summary.critical_pages)} pages with critical problems",
            impact="Important pages of the site do not work properly",
            scope=tuple(page.url for page in summary.critical_pages[:3]),
            effort="2-3 weeks",
            business_impact="Immediate return on high-traffic pages",
        ))
    return recs


def conversion_improvement(average_score: float) -> float:
    for bound, improvement in CONVERSION_TIERS:
        if average_score < bound:
            return improvement
    return 0.0


def estimate_site_roi(
    summary: SiteAuditSummary,
    *,
    monthly_traffic: int = MONTHLY_TRAFFIC,
    conversion_rate: float = CONVERSION_RATE,
    average_order_value: float = AVERAGE_ORDER_VALUE,
    cost_per_page: int = COST_PER_PAGE,
) -> Optional[SiteROI]:
    """Оценка выручки от оптимизации; None, если нет средней оценки производительности."""
    if summary.average_score is None:
        return None

    improvement = conversion_improvement(summary.average_score)
    monthly = monthly_traffic * conversion_rate * improvement * average_order_value
    cost = summary.successful_analyses * cost_per_page
    return SiteROI(
        monthly_revenue_increase=round(monthly),
        annual_revenue_increase=round(monthly * 12),
        conversion_improvement=round(improvement * 100),
        estimated_cost=cost,
        payback_months=round(cost / monthly, 1) if monthly > 0 else None,
        confidence=85 if summary.successful_analyses > 5 else 70,
    )


__all__ = [
    "analyze_site_seo",
    "build_site_recommendations",
    "estimate_site_roi",
    "is_seo_friendly_url",
]
