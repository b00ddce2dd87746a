# File: site_audit/analyzers/forensics.py
"""site_audit.analyzers.forensics: поиск узких мест рендеринга и ресурсов в HTML."""

from __future__ import annotations

from typing import Any, Dict, List

from bs4.element import Tag

from site_audit.analyzers.base import PageContext

SEVERITIES = ("critical", "high", "medium", "low")

MAX_BLOCKING_CSS = 3
MAX_BLOCKING_JS = 2
MAX_INLINE_SCRIPT_BYTES = 50_000
MAX_DOM_ELEMENTS = 1500
MAX_HTML_BYTES = 500_000


def _issue(kind: str, severity: str, title: str, evidence: str) -> Dict[str, str]:
    return {"type": kind, "severity": severity, "title": title, "evidence": evidence}


def analyze_bottlenecks(context: PageContext) -> Dict[str, Any]:
    """Разбирает HTML и результаты PageSpeed (если есть) в список проблем по важности."""
    soup = context.soup
    head = soup.find("head")
    head = head if isinstance(head, Tag) else soup
    issues: Dict[str, List[Dict[str, str]]] = {severity: [] for severity in SEVERITIES}

    blocking_css = [
        link for link in head.find_all("link", rel="stylesheet")
        if isinstance(link, Tag) and link.get("media") in (None, "all", "screen")
    ]
    if len(blocking_css) > MAX_BLOCKING_CSS:
        issues["high"].append(_issue(
            "render-blocking-css", "high", "Multiple render-blocking stylesheets",
            f"{len(blocking_css)} stylesheets in <head>",
        ))

    blocking_js = [
        script for script in head.find_all("script", src=True)
        if isinstance(script, Tag) and not script.has_attr("async") and not script.has_attr("defer")
        and script.get("type") != "module"
    ]
    if len(blocking_js) > MAX_BLOCKING_JS:
        severity = "critical" if len(blocking_js) > MAX_BLOCKING_JS * 3 else "high"
        issues[severity].append(_issue(
            "render-blocking-js", severity, "Synchronous scripts block rendering",
            f"{len(blocking_js)} scripts without async/defer in <head>",
        ))

    inline_bytes = sum(len(s.get_text().encode("utf-8")) for s in soup.find_all("script", src=False))
    if inline_bytes > MAX_INLINE_SCRIPT_BYTES:
        issues["medium"].append(_issue(
            "inline-javascript", "medium", "Large inline JavaScript",
            f"{inline_bytes // 1024} KiB of inline script",
        ))

    images = [img for img in soup.find_all("img") if isinstance(img, Tag)]
    not_lazy = [img for img in images if img.get("loading") != "lazy"]
    if len(not_lazy) > 5:
        issues["medium"].append(_issue(
            "images-not-lazy", "medium", "Images without lazy loading",
            f"{len(not_lazy)} of {len(images)} images",
        ))
    unsized = [img for img in images if not (img.has_attr("width") and img.has_attr("height"))]
    if unsized:
        issues["low"].append(_issue(
            "images-without-dimensions", "low", "Images without explicit dimensions",
            f"{len(unsized)} images may cause layout shift",
        ))

    dom_size = len(soup.find_all(True))
    if dom_size > MAX_DOM_ELEMENTS:
        issues["medium"].append(_issue(
            "dom-size", "medium", "Excessive DOM size", f"{dom_size} elements",
        ))
    if len(context.page.body) > MAX_HTML_BYTES:
        issues["medium"].append(_issue(
            "html-size", "medium", "Heavy HTML document", f"{len(context.page.body) // 1024} KiB",
        ))

    speed = context.results.get("pagespeed") or {}
    tbt = (speed.get("mobile") or {}).get("metrics", {}).get("tbt")
    if tbt is not None and tbt > 600:
        issues["high"].append(_issue(
            "main-thread-blocking", "high", "Long main-thread blocking", f"TBT {tbt:.0f} ms (mobile)",
        ))

    counts = {severity: len(items) for severity, items in issues.items()}
    return {
        "issues": issues,
        "summary": {**counts, "total": sum(counts.values()), "dom_elements": dom_size},
        "critical_issues_count": counts["critical"],
    }


class ForensicsAnalyzer:
    name = "forensics"

    async def analyze(self, context: PageContext) -> Dict[str, Any]:
        return analyze_bottlenecks(context)
