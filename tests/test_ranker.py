# File: tests/test_ranker.py
import random

import pytest

from site_audit.config import RankingTable
from site_audit.discovery.catalog import DEFAULT_PATHS, default_pages
from site_audit.discovery.ranker import PageRanker, rank
from site_audit.models import CandidateURL, PageSource, PageType

BASE = "https://example.com"


@pytest.fixture()
def ranker() -> PageRanker:
    return PageRanker()


@pytest.mark.parametrize(
    "path,expected",
    [
        ("/", 5),                      # depth bonus only
        ("/about", 12),                # 8 + 4
        ("/contact", 12),
        ("/contact-us", 20),           # two critical keywords
        ("/home", 10),                 # 6 + 4
        ("/blog/post?ref=1", 17),      # 8 + 8 + 3 - 2
        ("/a/b/c/d/e/f", 0),           # no bonus left
        ("/gallery.jpg", 0),           # 4 - 5, clamped
    ],
)
def test_priority(ranker, path, expected):
    assert ranker.priority(f"{BASE}{path}") == expected


@pytest.mark.parametrize(
    "path,expected",
    [
        ("/products/shoes", PageType.PRODUCT),
        ("/noticias/hoy", PageType.BLOG),
        ("/contacto", PageType.CONTACT),
        ("/nosotros", PageType.ABOUT),
        ("/servicios", PageType.SERVICE),
        ("/pricing", PageType.GENERAL),
        ("/product-blog", PageType.PRODUCT),  # first matching label wins
    ],
)
def test_classify(ranker, path, expected):
    assert ranker.classify(f"{BASE}{path}") is expected


def test_priority_is_case_insensitive(ranker):
    assert ranker.priority(f"{BASE}/About") == ranker.priority(f"{BASE}/about")


def test_contact_and_product_above_about():
    sitemap = [f"{BASE}/page-{i}" for i in range(12)]
    ranked = rank(sitemap + default_pages(BASE))
    position = {page.url: i for i, page in enumerate(ranked)}

    about = position[f"{BASE}/about"]
    assert position[f"{BASE}/contact"] < about
    assert position[f"{BASE}/products"] < about


def test_rank_is_sorted_and_deduplicated(ranker):
    urls = [f"{BASE}/about", f"{BASE}/about", f"{BASE}/blog", "HTTPS://EXAMPLE.COM/blog", f"{BASE}/x/y/z"]
    ranked = ranker.rank(urls)
    assert [p.url for p in ranked].count(f"{BASE}/about") == 1
    assert len(ranked) == 3
    for higher, lower in zip(ranked, ranked[1:]):
        assert higher.priority >= lower.priority
        if higher.priority == lower.priority:
            assert higher.depth <= lower.depth


def test_rank_is_deterministic(ranker):
    urls = default_pages(BASE) + [f"{BASE}/blog/{i}" for i in range(10)]
    expected = [p.url for p in ranker.rank(urls)]
    rng = random.Random(1234)
    for _ in range(5):
        shuffled = urls[:]
        rng.shuffle(shuffled)
        assert [p.url for p in ranker.rank(shuffled)] == expected


def test_rank_keeps_first_source(ranker):
    ranked = ranker.rank([
        CandidateURL(f"{BASE}/about", PageSource.SITEMAP),
        CandidateURL(f"{BASE}/about", PageSource.CATALOG),
    ])
    assert len(ranked) == 1
    assert ranked[0].source is PageSource.SITEMAP


def test_rank_empty(ranker):
    assert ranker.rank([]) == []


def test_alternate_table():
    table = RankingTable(critical_patterns=("/pricing",), main_patterns=(), shallow_bonus_base=0)
    ranked = PageRanker(table).rank([f"{BASE}/about", f"{BASE}/pricing"])
    assert ranked[0].url == f"{BASE}/pricing"
    assert ranked[0].priority == 8
    assert ranked[1].priority == 0


def test_default_catalog():
    pages = default_pages(BASE + "/")
    assert len(pages) == len(set(pages))
    assert f"{BASE}/contacto" in pages
    assert f"{BASE}/about" in pages
    assert all(p.startswith(BASE) for p in pages)
    assert len(pages) <= len(DEFAULT_PATHS)
