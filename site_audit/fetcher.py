# site_audit/fetcher.py
"""
Fetcher module: single-shot HTTP GET/HEAD with a per-call timeout.

Nothing here retries; every failure comes back as a failed ``Result``.
"""
from __future__ import annotations

import asyncio
import time
from typing import Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_audit.config import AuditConfig
from site_audit.errors import FetchError, Result, describe_exception
from site_audit.models import PageData


class Fetcher:
    """Wraps an aiohttp session with the configured User-Agent and timeouts."""

    def __init__(self, session: ClientSession, config: AuditConfig) -> None:
        self.session = session
        self.config = config

    def _timeout(self, seconds: Optional[float]) -> ClientTimeout:
        return ClientTimeout(total=seconds if seconds is not None else self.config.timeout)

    async def fetch(self, url: str, *, timeout: Optional[float] = None) -> Result[PageData]:
        """
        GET the URL and return its body with status and headers.

        HTTP error statuses are *not* failures here; callers decide what a
        404 means for them. Connection errors and timeouts are.
        """
        started = time.monotonic()
        try:
            async with self.session.get(
                url,
                timeout=self._timeout(timeout),
                headers={"User-Agent": self.config.user_agent},
                allow_redirects=True,
            ) as resp:
                body = await resp.read()
                try:
                    encoding = resp.get_encoding()
                except RuntimeError:
                    encoding = "utf-8"
                return Result.success(
                    PageData(
                        url=str(resp.url),
                        body=body,
                        status=resp.status,
                        headers={k.lower(): v for k, v in resp.headers.items()},
                        encoding=encoding,
                        elapsed_ms=(time.monotonic() - started) * 1000,
                    )
                )
        except asyncio.TimeoutError as exc:
            return Result.failure(FetchError(url, describe_exception(exc)))
        except (ClientError, ValueError) as exc:
            return Result.failure(FetchError(url, describe_exception(exc)))

    async def fetch_ok(self, url: str, *, timeout: Optional[float] = None) -> Result[PageData]:
        """Like :meth:`fetch`, but a status >= 400 becomes a failure."""
        result = await self.fetch(url, timeout=timeout)
        if result.ok and result.value is not None and result.value.status >= 400:
            return Result.failure(FetchError(url, f"HTTP {result.value.status}", result.value.status))
        return result

    async def head(self, url: str, *, timeout: Optional[float] = None) -> Result[int]:
        """HEAD the URL and return only its status code."""
        try:
            async with self.session.head(
                url,
                timeout=self._timeout(timeout),
                headers={"User-Agent": self.config.user_agent},
                allow_redirects=True,
            ) as resp:
                return Result.success(resp.status)
        except asyncio.TimeoutError as exc:
            return Result.failure(FetchError(url, describe_exception(exc)))
        except (ClientError, ValueError) as exc:
            return Result.failure(FetchError(url, describe_exception(exc)))
