# File: site_audit/analyzers/__init__.py
"""site_audit.analyzers: встроенные анализаторы страниц и их наборы по уровням."""

from __future__ import annotations

from typing import Dict

from site_audit.config import AuditConfig
from site_audit.fetcher import Fetcher

from .base import LEVEL_ANALYZERS, PageAnalyzer, PageContext
from .basic import LinkHealthAnalyzer, SEOAnalyzer, SSLAnalyzer, UptimeAnalyzer
from .forensics import ForensicsAnalyzer
from .pagespeed import PageSpeedAnalyzer
from .technology import TechnologyAnalyzer


def build_analyzers(fetcher: Fetcher, config: AuditConfig) -> Dict[str, PageAnalyzer]:
    """Создаёт все встроенные анализаторы, ключ словаря: имя анализатора."""
    analyzers = (
        UptimeAnalyzer(),
        SSLAnalyzer(),
        SEOAnalyzer(),
        TechnologyAnalyzer(),
        LinkHealthAnalyzer(fetcher, config),
        PageSpeedAnalyzer(fetcher, config),
        ForensicsAnalyzer(),
    )
    return {analyzer.name: analyzer for analyzer in analyzers}


__all__ = [
    "LEVEL_ANALYZERS",
    "PageAnalyzer",
    "PageContext",
    "build_analyzers",
    "UptimeAnalyzer",
    "SSLAnalyzer",
    "SEOAnalyzer",
    "TechnologyAnalyzer",
    "LinkHealthAnalyzer",
    "PageSpeedAnalyzer",
    "ForensicsAnalyzer",
]
