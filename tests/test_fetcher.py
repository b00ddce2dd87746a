# File: tests/test_fetcher.py
import asyncio
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import ClientSession, web

from site_audit.errors import AnalysisError, FetchError, Result, describe_exception
from site_audit.fetcher import Fetcher

from conftest import _serve_app


@pytest_asyncio.fixture()
async def server(unused_tcp_port) -> AsyncIterator[str]:
    app = web.Application()

    async def ok(request):
        return web.Response(text="<p>привет</p>", content_type="text/html", charset="utf-8",
                            headers={"X-Powered-By": "PHP/8"})

    async def agent(request):
        return web.Response(text=request.headers.get("User-Agent", ""))

    async def slow(request):
        await asyncio.sleep(2)
        return web.Response(text="late")

    app.router.add_get("/", ok)
    app.router.add_get("/agent", agent)
    app.router.add_get("/slow", slow)
    async for url in _serve_app(app, unused_tcp_port):
        yield url


@pytest.mark.asyncio()
async def test_fetch_success(server, basic_config):
    async with ClientSession() as session:
        result = await Fetcher(session, basic_config).fetch(f"{server}/")
    page = result.unwrap()
    assert page.status == 200
    assert page.text == "<p>привет</p>"
    assert page.headers["x-powered-by"] == "PHP/8"
    assert page.elapsed_ms >= 0


@pytest.mark.asyncio()
async def test_user_agent_sent(server, basic_config):
    async with ClientSession() as session:
        result = await Fetcher(session, basic_config).fetch(f"{server}/agent")
    assert result.unwrap().text == "TestAgent/1.0"


@pytest.mark.asyncio()
async def test_http_error_is_not_a_fetch_failure(server, basic_config):
    async with ClientSession() as session:
        fetcher = Fetcher(session, basic_config)
        plain = await fetcher.fetch(f"{server}/missing")
        strict = await fetcher.fetch_ok(f"{server}/missing")
        status = await fetcher.head(f"{server}/missing")
    assert plain.ok and plain.value.status == 404
    assert not strict.ok
    assert isinstance(strict.error, FetchError)
    assert strict.error.status == 404
    assert status.value == 404


@pytest.mark.asyncio()
async def test_timeout_is_a_failure(server, basic_config):
    async with ClientSession() as session:
        result = await Fetcher(session, basic_config).fetch(f"{server}/slow", timeout=0.2)
    assert not result.ok
    assert isinstance(result.error, FetchError)
    assert str(result.error)


@pytest.mark.asyncio()
async def test_connection_refused(unused_tcp_port, basic_config):
    async with ClientSession() as session:
        result = await Fetcher(session, basic_config).head(f"http://localhost:{unused_tcp_port}/")
    assert not result.ok


def test_result_container():
    good = Result.success(3)
    bad = Result.failure(AnalysisError("https://example.com", "boom"))
    assert good.ok and good.unwrap() == 3
    assert not bad.ok
    assert bad.value_or(0) == 0
    with pytest.raises(AnalysisError, match="boom"):
        bad.unwrap()


def test_describe_exception():
    assert describe_exception(TimeoutError()) == "TimeoutError"
    assert describe_exception(ValueError("bad value")) == "bad value"
