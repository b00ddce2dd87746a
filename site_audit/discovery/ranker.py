# site_audit/discovery/ranker.py
"""
Page ranking: additive keyword/depth heuristics and a deterministic total order.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Union
from urllib.parse import urlparse

from site_audit.config import RankingTable
from site_audit.models import CandidateURL, PageSource, PageType, RankedPage
from site_audit.urls import has_query_or_fragment, is_file_url, normalize, path_depth


class PageRanker:
    """Scores candidate URLs against an immutable :class:`RankingTable`."""

    def __init__(self, table: Optional[RankingTable] = None) -> None:
        self.table = table or RankingTable()
        self._type_rank = {page_type: i for i, page_type in enumerate(self.table.type_order)}

    def priority(self, url: str) -> int:
        table = self.table
        path = urlparse(url).path.lower()

        score = 0
        score += table.critical_weight * sum(1 for p in table.critical_patterns if p in path)
        score += table.main_weight * sum(1 for p in table.main_patterns if p in path)
        score += max(0, table.shallow_bonus_base - path_depth(url))
        if has_query_or_fragment(url):
            score -= table.query_penalty
        # candidates passed to rank() directly are not normalized
        if is_file_url(url):
            score -= table.file_penalty
        return max(0, score)

    def classify(self, url: str) -> PageType:
        path = urlparse(url).path.lower()
        for page_type, patterns in self.table.type_patterns:
            if any(p in path for p in patterns):
                return page_type
        return PageType.GENERAL

    def rank_page(self, url: str, source: Optional[PageSource] = None) -> RankedPage:
        return RankedPage(
            url=url,
            priority=self.priority(url),
            type=self.classify(url),
            depth=path_depth(url),
            source=source,
        )

    def _sort_key(self, page: RankedPage) -> tuple:
        return (
            -page.priority,
            page.depth,
            self._type_rank.get(page.type, len(self._type_rank)),
            page.url,
        )

    def rank(self, candidates: Iterable[Union[str, CandidateURL]]) -> List[RankedPage]:
        """
        Deduplicate and order candidates: priority desc, depth asc, then page
        type order and URL so that the result does not depend on input order.
        """
        unique: Dict[str, Optional[PageSource]] = {}
        for item in candidates:
            if isinstance(item, CandidateURL):
                raw, source = item.url, item.source
            else:
                raw, source = item, None
            url = normalize(raw, raw) or raw.strip()
            if url and url not in unique:
                unique[url] = source

        ranked = [self.rank_page(url, source) for url, source in unique.items()]
        ranked.sort(key=self._sort_key)
        return ranked


def rank(candidates: Iterable[Union[str, CandidateURL]], table: Optional[RankingTable] = None) -> List[RankedPage]:
    """Shortcut for ``PageRanker(table).rank(candidates)``."""
    return PageRanker(table).rank(candidates)
