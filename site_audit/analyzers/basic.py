# File: site_audit/analyzers/basic.py
"""site_audit.analyzers.basic: базовые проверки страницы (доступность, HTTPS, SEO, ссылки)."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List
from urllib.parse import urljoin, urlparse

from bs4.element import Tag

from site_audit.analyzers.base import PageContext
from site_audit.config import AuditConfig
from site_audit.fetcher import Fetcher


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class UptimeAnalyzer:
    """Доступность страницы по коду ответа и время ответа."""

    name = "uptime"

    async def analyze(self, context: PageContext) -> Dict[str, Any]:
        page = context.page
        return {
            "status": "up" if page.status < 400 else "error",
            "status_code": page.status,
            "response_time_ms": round(page.elapsed_ms),
            "timestamp": _now(),
        }


class SSLAnalyzer:
    """HTTPS и заголовок HSTS."""

    name = "ssl"

    async def analyze(self, context: PageContext) -> Dict[str, Any]:
        is_https = urlparse(context.page.url).scheme == "https"
        hsts = context.page.headers.get("strict-transport-security")
        return {
            "status": "valid" if is_https else "warning",
            "protocol": "HTTPS" if is_https else "HTTP",
            "status_code": context.page.status,
            "hsts": bool(hsts),
            "timestamp": _now(),
        }


class SEOAnalyzer:
    """Эвристики on-page SEO; оценка 0–100."""

    name = "seo"

    TITLE_MIN, TITLE_MAX = 10, 70
    DESCRIPTION_MIN, DESCRIPTION_MAX = 50, 160

    async def analyze(self, context: PageContext) -> Dict[str, Any]:
        soup = context.soup
        title_tag = soup.find("title")
        title = title_tag.get_text(strip=True) if title_tag else ""

        description = ""
        meta = soup.find("meta", attrs={"name": "description"})
        if isinstance(meta, Tag) and isinstance(meta.get("content"), str):
            description = meta["content"].strip()  # type: ignore[union-attr]

        canonical = soup.find("link", rel="canonical")
        html_tag = soup.find("html")
        lang = html_tag.get("lang") if isinstance(html_tag, Tag) else None
        headings = {level: len(soup.find_all(level)) for level in ("h1", "h2", "h3")}

        issues: List[str] = []
        score = 100
        if not title:
            issues.append("missing title")
            score -= 30
        elif not self.TITLE_MIN <= len(title) <= self.TITLE_MAX:
            issues.append("title length out of range")
            score -= 10
        if not description:
            issues.append("missing meta description")
            score -= 25
        elif not self.DESCRIPTION_MIN <= len(description) <= self.DESCRIPTION_MAX:
            issues.append("meta description length out of range")
            score -= 5
        if headings["h1"] == 0:
            issues.append("missing h1")
            score -= 25
        elif headings["h1"] > 1:
            issues.append("multiple h1")
            score -= 10
        if canonical is None:
            issues.append("missing canonical link")
            score -= 5
        if not lang:
            issues.append("missing html lang")
            score -= 5

        return {
            "title": title or None,
            "meta_description": description or None,
            "headings": headings,
            "canonical": canonical.get("href") if isinstance(canonical, Tag) else None,
            "lang": lang,
            "issues": issues,
            "score": max(0, score),
            "status": "good" if headings["h1"] > 0 and description else "warning",
        }


class LinkHealthAnalyzer:
    """HEAD-проверка первых ссылок страницы."""

    name = "links"

    def __init__(self, fetcher: Fetcher, config: AuditConfig) -> None:
        self.fetcher = fetcher
        self.max_links = config.max_links_checked
        self.timeout = config.link_check_timeout

    def _links(self, context: PageContext) -> List[str]:
        links: List[str] = []
        for tag in context.soup.find_all("a", href=True):
            if not isinstance(tag, Tag):
                continue
            href = tag.get("href")
            if not isinstance(href, str):
                continue
            href = href.strip()
            if href and href not in links:
                links.append(href)
        return links

    async def analyze(self, context: PageContext) -> Dict[str, Any]:
        links = self._links(context)
        to_check = links[: self.max_links]
        broken: List[Dict[str, Any]] = []
        for href in to_check:
            target = urljoin(context.page.url, href)
            if urlparse(target).scheme not in ("http", "https"):
                continue
            outcome = await self.fetcher.head(target, timeout=self.timeout)
            if not outcome.ok:
                broken.append({"url": target, "error": str(outcome.error)})
            elif outcome.value is not None and outcome.value >= 400:
                broken.append({"url": target, "status": outcome.value})

        if not broken:
            status = "good"
        elif len(broken) < 2:
            status = "warning"
        else:
            status = "bad"
        return {
            "total": len(links),
            "checked": len(to_check),
            "broken": len(broken),
            "broken_links": broken,
            "status": status,
        }
