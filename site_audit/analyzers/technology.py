# site_audit/analyzers/technology.py
"""
Technology fingerprinting from HTML markers and response headers.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Pattern, Sequence, Tuple

from site_audit.analyzers.base import PageContext


@dataclass(frozen=True, slots=True)
class Fingerprint:
    name: str
    category: str
    html: Tuple[Pattern[str], ...] = ()
    headers: Tuple[Tuple[str, Pattern[str]], ...] = ()


def _re(*patterns: str) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


def _hdr(*pairs: Tuple[str, str]) -> Tuple[Tuple[str, Pattern[str]], ...]:
    return tuple((name.lower(), re.compile(value, re.IGNORECASE)) for name, value in pairs)


FINGERPRINTS: Sequence[Fingerprint] = (
    Fingerprint("WordPress", "cms",
                _re(r"wp-content", r"wp-includes", r"wp-json", r"generator[^>]*wordpress"),
                _hdr(("x-powered-by", r"wordpress"), ("link", r"wp-json"))),
    Fingerprint("Wix", "cms",
                _re(r"static\.wixstatic\.com", r"wix-code", r"wix-image"),
                _hdr(("x-wix-request-id", r"."))),
    Fingerprint("Squarespace", "cms",
                _re(r"static\.squarespace\.com", r"squarespace"),
                _hdr(("server", r"squarespace"))),
    Fingerprint("Webflow", "cms",
                _re(r"uploads\.webflow\.com", r"data-wf-page"),
                _hdr(("x-webflow-hostname", r"."))),
    Fingerprint("Drupal", "cms",
                _re(r"/sites/default/files", r"drupal-settings-json", r"generator[^>]*drupal"),
                _hdr(("x-generator", r"drupal"))),
    Fingerprint("Joomla", "cms", _re(r"generator[^>]*joomla", r"/media/jui/")),
    Fingerprint("Shopify", "ecommerce",
                _re(r"cdn\.shopify\.com", r"myshopify\.com", r"shopify-section"),
                _hdr(("x-shopid", r"."), ("x-shopify-stage", r"."))),
    Fingerprint("WooCommerce", "ecommerce", _re(r"woocommerce")),
    Fingerprint("PrestaShop", "ecommerce", _re(r"prestashop"), _hdr(("powered-by", r"prestashop"))),
    Fingerprint("Magento", "ecommerce", _re(r"mage/cookies", r"magento"), _hdr(("x-magento-cache-debug", r"."))),
    Fingerprint("React", "javascript", _re(r"data-reactroot", r"react(\.production)?(\.min)?\.js", r"__react")),
    Fingerprint("Next.js", "javascript", _re(r"__NEXT_DATA__", r"/_next/static"), _hdr(("x-powered-by", r"next\.js"))),
    Fingerprint("Vue.js", "javascript", _re(r"data-v-[0-9a-f]{6,}", r"vue(\.runtime)?(\.min)?\.js")),
    Fingerprint("Nuxt", "javascript", _re(r"__NUXT__", r"/_nuxt/")),
    Fingerprint("Angular", "javascript", _re(r"ng-version=", r"ng-app")),
    Fingerprint("jQuery", "javascript", _re(r"jquery(-\d[\d.]*)?(\.min)?\.js")),
    Fingerprint("Bootstrap", "ui", _re(r"bootstrap(\.min)?\.(css|js)")),
    Fingerprint("Google Analytics", "analytics",
                _re(r"google-analytics\.com/(analytics|ga)\.js", r"googletagmanager\.com/gtag/js")),
    Fingerprint("Google Tag Manager", "analytics", _re(r"googletagmanager\.com/gtm\.js")),
    Fingerprint("Meta Pixel", "analytics", _re(r"connect\.facebook\.net/[^\"']*/fbevents\.js")),
    Fingerprint("Hotjar", "analytics", _re(r"static\.hotjar\.com")),
    Fingerprint("Cloudflare", "cdn", (), _hdr(("server", r"cloudflare"), ("cf-ray", r"."))),
    Fingerprint("Fastly", "cdn", (), _hdr(("x-served-by", r"cache-"), ("via", r"varnish"))),
    Fingerprint("Nginx", "server", (), _hdr(("server", r"nginx"))),
    Fingerprint("Apache", "server", (), _hdr(("server", r"apache"))),
    Fingerprint("PHP", "language", (), _hdr(("x-powered-by", r"php"))),
    Fingerprint("ASP.NET", "language", _re(r"__VIEWSTATE"), _hdr(("x-powered-by", r"asp\.net"), ("x-aspnet-version", r"."))),
)


def detect(html: str, headers: Mapping[str, str], fingerprints: Sequence[Fingerprint] = FINGERPRINTS) -> Dict[str, Any]:
    """Match fingerprints; confidence is the share of matched markers (0–100)."""
    lowered = {k.lower(): v for k, v in headers.items()}
    found: List[Dict[str, Any]] = []
    for fp in fingerprints:
        markers = len(fp.html) + len(fp.headers)
        hits = sum(1 for p in fp.html if p.search(html))
        hits += sum(1 for name, p in fp.headers if name in lowered and p.search(lowered[name]))
        if hits:
            found.append({
                "name": fp.name,
                "category": fp.category,
                "confidence": min(100, round(100 * hits / markers) + 25),
            })

    by_category: Dict[str, List[str]] = {}
    for item in found:
        by_category.setdefault(item["category"], []).append(item["name"])
    return {"technologies": found, "by_category": by_category, "count": len(found)}


class TechnologyAnalyzer:
    name = "technology"

    async def analyze(self, context: PageContext) -> Dict[str, Any]:
        return detect(context.html, context.page.headers)
