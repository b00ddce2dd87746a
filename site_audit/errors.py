# site_audit/errors.py
"""
Error taxonomy and the ``Result`` container returned by fetch, discovery and
per-page analysis steps.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

__all__ = (
    "AuditError",
    "InvalidBaseURLError",
    "FetchError",
    "SitemapParseError",
    "DiscoveryError",
    "AnalysisError",
    "Result",
    "describe_exception",
)


class AuditError(Exception):
    """Base class for every error raised or carried by SiteAudit."""


class InvalidBaseURLError(AuditError, ValueError):
    """The base URL handed to discovery or audit is unusable."""


class FetchError(AuditError):
    """An HTTP request failed: connection problem, timeout or bad status."""

    def __init__(self, url: str, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class SitemapParseError(AuditError):
    """The body of a sitemap candidate is not parseable XML."""


class DiscoveryError(AuditError):
    """A discovery source produced no usable evidence."""


class AnalysisError(AuditError):
    """Wraps whatever went wrong while analysing a single page."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url


def describe_exception(exc: BaseException) -> str:
    """Message of *exc*, or its class name when the message is empty."""
    text = str(exc).strip()
    return text or type(exc).__name__


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """Either a value or an :class:`AuditError`, never both."""

    value: Optional[T] = None
    error: Optional[AuditError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: AuditError) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def value_or(self, default: T) -> T:
        return default if self.error is not None else self.value  # type: ignore[return-value]
