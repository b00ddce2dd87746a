# File: tests/conftest.py
from collections.abc import AsyncIterator
from typing import Any, Dict, List

import pytest
from aiohttp import web

from site_audit.config import AuditConfig
from site_audit.errors import FetchError, Result
from site_audit.models import PageData


@pytest.fixture()
def basic_config() -> AuditConfig:
    """
    Return a valid AuditConfig for tests: no pauses, short timeouts.
    """
    return AuditConfig(
        base_url="http://example.com",
        timeout=2.0,
        link_check_timeout=1.0,
        speed_audit_timeout=2.0,
        user_agent="TestAgent/1.0",
        page_delay=0,
    )


@pytest.fixture()
def mock_page_data() -> PageData:
    """
    Provide a simple PageData instance with HTML content.
    """
    html = (
        '<html lang="en"><head><title>Example home page</title></head>'
        '<body><h1>Hi</h1><a href="/link1">L1</a><a href="http://external.com">X</a></body></html>'
    )
    return PageData(url="http://example.com/", body=html.encode("utf-8"))


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


class FakeFetcher:
    """
    In-memory stand-in for Fetcher: URL -> HTML string, or URL -> exception.
    Unknown URLs answer 404.
    """

    def __init__(self, pages: Dict[str, Any] | None = None) -> None:
        self.pages = pages or {}
        self.calls: List[str] = []

    async def fetch(self, url: str, *, timeout: float | None = None) -> Result[PageData]:
        self.calls.append(url)
        body = self.pages.get(url)
        if isinstance(body, BaseException):
            return Result.failure(FetchError(url, str(body) or type(body).__name__))
        if body is None:
            return Result.success(PageData(url=url, body=b"not found", status=404))
        return Result.success(PageData(url=url, body=body.encode("utf-8")))

    async def fetch_ok(self, url: str, *, timeout: float | None = None) -> Result[PageData]:
        result = await self.fetch(url, timeout=timeout)
        if result.ok and result.value.status >= 400:
            return Result.failure(FetchError(url, f"HTTP {result.value.status}", result.value.status))
        return result

    async def head(self, url: str, *, timeout: float | None = None) -> Result[int]:
        self.calls.append(url)
        return Result.success(200 if url in self.pages else 404)


class StubAnalyzer:
    """Analyzer returning a fixed payload and recording the pages it saw."""

    def __init__(self, name: str, payload: Dict[str, Any] | None = None) -> None:
        self.name = name
        self.payload = payload or {"status": "ok"}
        self.seen: List[str] = []

    async def analyze(self, context) -> Dict[str, Any]:
        self.seen.append(context.url)
        return dict(self.payload)


ANALYZER_NAMES = ("uptime", "ssl", "seo", "technology", "links", "pagespeed", "forensics")


@pytest.fixture()
def stub_analyzers() -> Dict[str, StubAnalyzer]:
    return {name: StubAnalyzer(name) for name in ANALYZER_NAMES}
