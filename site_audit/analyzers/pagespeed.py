# site_audit/analyzers/pagespeed.py
"""
PageSpeed Insights v5 client: mobile and desktop performance audits.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from site_audit.analyzers.base import PageContext
from site_audit.config import AuditConfig
from site_audit.errors import AnalysisError
from site_audit.fetcher import Fetcher
from site_audit.logger import get_logger

logger = get_logger("analyzers.pagespeed")

STRATEGIES = ("mobile", "desktop")

# lighthouse audit id -> short metric name
METRIC_AUDITS: Dict[str, str] = {
    "server-response-time": "ttfb",
    "first-contentful-paint": "fcp",
    "largest-contentful-paint": "lcp",
    "cumulative-layout-shift": "cls",
    "total-blocking-time": "tbt",
    "speed-index": "si",
    "interactive": "tti",
}


def parse_lighthouse(data: Dict[str, Any], strategy: str) -> Dict[str, Any]:
    """Extract the performance score (0–100) and core metrics from a PSI payload."""
    try:
        lighthouse = data["lighthouseResult"]
        raw_score = lighthouse["categories"]["performance"]["score"]
    except (KeyError, TypeError) as exc:
        page_url = data.get("id", "") if isinstance(data, dict) else ""
        raise AnalysisError(page_url, f"unexpected PageSpeed payload ({strategy}): missing {exc}") from exc

    audits = lighthouse.get("audits", {})
    metrics: Dict[str, Optional[float]] = {}
    for audit_id, metric in METRIC_AUDITS.items():
        value = audits.get(audit_id, {}).get("numericValue")
        metrics[metric] = round(value, 3) if isinstance(value, (int, float)) else None

    return {
        "strategy": strategy,
        "score": round((raw_score or 0) * 100),
        "metrics": metrics,
    }


def identify_critical_issues(mobile: Dict[str, Any], desktop: Dict[str, Any]) -> List[str]:
    issues: List[str] = []
    if mobile["score"] < 30:
        issues.append(f"very low mobile performance score ({mobile['score']})")
    if desktop["score"] < 50:
        issues.append(f"low desktop performance score ({desktop['score']})")
    if mobile["score"] < desktop["score"] - 20:
        issues.append("mobile performance far behind desktop")
    lcp = mobile["metrics"].get("lcp")
    if lcp is not None and lcp > 4000:
        issues.append(f"slow largest contentful paint ({lcp / 1000:.1f}s)")
    cls = mobile["metrics"].get("cls")
    if cls is not None and cls > 0.25:
        issues.append(f"high cumulative layout shift ({cls})")
    return issues


class PageSpeedAnalyzer:
    """External speed audit; any failure propagates to the page boundary."""

    name = "pagespeed"

    def __init__(self, fetcher: Fetcher, config: AuditConfig) -> None:
        self.fetcher = fetcher
        self.endpoint = str(config.pagespeed_endpoint)
        self.api_key = config.pagespeed_api_key
        self.timeout = config.speed_audit_timeout

    def request_url(self, url: str, strategy: str) -> str:
        params = {"url": url, "strategy": strategy, "category": "performance"}
        if self.api_key:
            params["key"] = self.api_key
        return f"{self.endpoint}?{urlencode(params)}"

    async def run_strategy(self, url: str, strategy: str) -> Dict[str, Any]:
        logger.debug("PageSpeed %s audit for %s", strategy, url)
        page = (await self.fetcher.fetch_ok(self.request_url(url, strategy), timeout=self.timeout)).unwrap()
        try:
            data = json.loads(page.text)
        except json.JSONDecodeError as exc:
            raise AnalysisError(url, f"PageSpeed returned invalid JSON: {exc}") from exc
        return parse_lighthouse(data, strategy)

    async def analyze(self, context: PageContext) -> Dict[str, Any]:
        mobile = await self.run_strategy(context.url, "mobile")
        desktop = await self.run_strategy(context.url, "desktop")
        issues = identify_critical_issues(mobile, desktop)
        logger.info("PageSpeed %s: mobile %d, desktop %d", context.url, mobile["score"], desktop["score"])
        return {
            "score": round((mobile["score"] + desktop["score"]) / 2),
            "mobile": mobile,
            "desktop": desktop,
            "critical_issues": issues,
            "critical_issues_count": len(issues),
        }
