# site_audit/models.py
"""
Data models shared by discovery, ranking and the tiered audit scheduler.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class PageSource(str, Enum):
    """Where a candidate URL was found."""

    SITEMAP = "sitemap"
    HOMEPAGE = "homepage-link"
    CATALOG = "default-catalog"


class PageType(str, Enum):
    PRODUCT = "product"
    BLOG = "blog"
    CONTACT = "contact"
    ABOUT = "about"
    SERVICE = "service"
    GENERAL = "general"


class AnalysisLevel(str, Enum):
    FULL = "full"
    STANDARD = "standard"
    LIGHT = "light"
    FAILED = "failed"


class AuditMode(str, Enum):
    """How analysis levels are assigned: constant, or graded by rank."""

    GRADUAL = "gradual"
    FULL = "full"
    STANDARD = "standard"
    LIGHT = "light"


@dataclass(slots=True, frozen=True)
class CandidateURL:
    """A discovered URL that has not been ranked yet."""

    url: str
    source: PageSource


@dataclass(slots=True, frozen=True)
class RankedPage:
    """Candidate URL plus the fields computed by the ranker."""

    url: str
    priority: int
    type: PageType
    depth: int
    source: Optional[PageSource] = None


@dataclass(slots=True)
class PageData:
    """Body and response metadata of a fetched page (text or XML)."""

    url: str
    body: bytes
    status: int = 200
    headers: Dict[str, str] = field(default_factory=dict)
    encoding: str = "utf-8"
    elapsed_ms: float = 0.0

    @property
    def text(self) -> str:
        return self.body.decode(self.encoding or "utf-8", errors="replace")


@dataclass(slots=True)
class PageAuditResult:
    """Outcome of one scheduled page; only the scheduler mutates it."""

    url: str
    analysis_level: AnalysisLevel
    success: bool = False
    analysis_time_ms: float = 0.0
    analyses: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    priority: int = 0
    type: PageType = PageType.GENERAL


@dataclass(slots=True, frozen=True)
class CriticalPage:
    url: str
    score: Optional[float]
    issues: int


@dataclass(slots=True, frozen=True)
class FailedPage:
    url: str
    error: str


@dataclass(slots=True, frozen=True)
class SiteAuditSummary:
    """Aggregate over every PageAuditResult of a run."""

    total_pages: int
    successful_analyses: int
    failed_analyses: int
    level_counts: Dict[str, int]
    average_scores: Dict[str, float]
    average_score: Optional[float]
    average_mobile_score: Optional[float]
    average_desktop_score: Optional[float]
    critical_pages: Tuple[CriticalPage, ...]
    failed_pages: Tuple[FailedPage, ...]
    page_types: Dict[str, int]
    coverage: int
    total_analysis_time_ms: float
    average_analysis_time_ms: float


class RecommendationPriority(str, Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


@dataclass(slots=True, frozen=True)
class Recommendation:
    """One actionable site-level finding for the business-facing report."""

    priority: RecommendationPriority
    category: str
    issue: str
    impact: str
    action: Optional[str] = None
    scope: Tuple[str, ...] = ()
    effort: Optional[str] = None
    business_impact: Optional[str] = None


@dataclass(slots=True, frozen=True)
class TextFieldAnalysis:
    """Site-wide statistics for one text field (page titles or meta descriptions)."""

    count: int
    unique_count: int
    average_length: int
    optimal_length: int
    duplicates: int
    score: int
    issues: Tuple[str, ...]


@dataclass(slots=True, frozen=True)
class HeadingAnalysis:
    total_pages: int
    pages_with_h1: int
    pages_with_multiple_h1: int
    average_h1_count: float
    score: int
    issues: Tuple[str, ...]


@dataclass(slots=True, frozen=True)
class URLStructureAnalysis:
    total_urls: int
    seo_friendly: int
    with_keywords: int
    too_long: int
    with_underscores: int
    score: int
    issues: Tuple[str, ...]


@dataclass(slots=True, frozen=True)
class InternalLinkingAnalysis:
    total_links: int
    broken_links: int
    healthy_links: int
    score: int
    issues: Tuple[str, ...]


@dataclass(slots=True, frozen=True)
class SiteSEOAnalysis:
    """SEO roll-up over all audited pages; ``overall_score`` is a weighted mean."""

    titles: TextFieldAnalysis
    meta_descriptions: TextFieldAnalysis
    headings: HeadingAnalysis
    url_structure: URLStructureAnalysis
    internal_linking: InternalLinkingAnalysis
    overall_score: int
    recommendations: Tuple[Recommendation, ...] = ()


@dataclass(slots=True, frozen=True)
class SiteROI:
    """Revenue estimate from the average performance score and fixed business assumptions."""

    monthly_revenue_increase: int
    annual_revenue_increase: int
    conversion_improvement: int
    estimated_cost: int
    payback_months: Optional[float]
    confidence: int


@dataclass(slots=True, frozen=True)
class DiscoveryMetadata:
    """Purely descriptive counters produced alongside the ranked list."""

    source_counts: Dict[str, int]
    total_discovered: int
    coverage: int
    strategies_run: Tuple[str, ...] = ()
    strategies_skipped: Tuple[str, ...] = ()
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def coverage_label(self) -> str:
        return f"~{self.coverage}%"


@dataclass(slots=True, frozen=True)
class DiscoveryResult:
    all_pages: List[str]
    prioritized_pages: List[RankedPage]
    metadata: DiscoveryMetadata


@dataclass(slots=True, frozen=True)
class AuditRun:
    """Everything a tiered audit produced, ready for the report layer."""

    base_url: str
    mode: AuditMode
    max_pages: int
    page_results: List[PageAuditResult]
    summary: SiteAuditSummary
    discovery: Optional[DiscoveryResult] = None
    site_seo: Optional[SiteSEOAnalysis] = None
    recommendations: Tuple[Recommendation, ...] = ()
    roi: Optional[SiteROI] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = [
    "PageSource",
    "PageType",
    "AnalysisLevel",
    "AuditMode",
    "CandidateURL",
    "RankedPage",
    "PageData",
    "PageAuditResult",
    "CriticalPage",
    "FailedPage",
    "SiteAuditSummary",
    "RecommendationPriority",
    "Recommendation",
    "TextFieldAnalysis",
    "HeadingAnalysis",
    "URLStructureAnalysis",
    "InternalLinkingAnalysis",
    "SiteSEOAnalysis",
    "SiteROI",
    "DiscoveryMetadata",
    "DiscoveryResult",
    "AuditRun",
]
