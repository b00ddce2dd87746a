# site_audit/analyzers/base.py
"""
Analyzer contract and the analyzer set implied by each analysis level.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Dict, Mapping, Protocol, Tuple

from bs4 import BeautifulSoup

from site_audit.models import AnalysisLevel, PageData


@dataclass
class PageContext:
    """What an analyzer gets: the fetched page plus earlier analyzers' output."""

    url: str
    page: PageData
    results: Dict[str, Any] = field(default_factory=dict)

    @property
    def html(self) -> str:
        return self.page.text

    @cached_property
    def soup(self) -> BeautifulSoup:
        return BeautifulSoup(self.page.body, "html.parser")


class PageAnalyzer(Protocol):
    """Returns an opaque result dict or raises; the scheduler handles both."""

    name: str

    async def analyze(self, context: PageContext) -> Dict[str, Any]:
        ...


LIGHT_ANALYZERS: Tuple[str, ...] = ("uptime", "ssl", "seo", "technology", "links")

LEVEL_ANALYZERS: Mapping[AnalysisLevel, Tuple[str, ...]] = {
    AnalysisLevel.LIGHT: LIGHT_ANALYZERS,
    AnalysisLevel.STANDARD: LIGHT_ANALYZERS + ("pagespeed",),
    AnalysisLevel.FULL: LIGHT_ANALYZERS + ("pagespeed", "forensics"),
}
