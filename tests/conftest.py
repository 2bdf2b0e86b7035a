"""Shared fixtures for the CourtListener MCP test suite."""

from __future__ import annotations

from typing import Any, Optional

import pytest

from courtlistener_mcp.core.fetcher import CourtListenerClient
from courtlistener_mcp.core.rate_limiter import RateLimiter
from courtlistener_mcp.models.results import FetchResult

BASE_URL = "https://api.test/api/rest/v4"
VALID_TOKEN = "f8b2c598d273b1c0f5012236dcc93ca045f8b81a"


@pytest.fixture
def rate_limiter() -> RateLimiter:
    return RateLimiter(max_requests=100, window_ms=60000)


@pytest.fixture
def client(rate_limiter: RateLimiter) -> CourtListenerClient:
    """Client pointed at a fake base URL; respx intercepts its requests."""
    return CourtListenerClient(
        rate_limiter=rate_limiter,
        base_url=BASE_URL,
        user_agent="CourtListener-MCP-Test/1.0",
        timeout_ms=5000,
    )


class StubClient:
    """Stands in for CourtListenerClient; records calls and returns a fixed result."""

    def __init__(self, result: FetchResult):
        self.result = result
        self.calls: list[tuple[str, dict[str, Any], Optional[str]]] = []

    async def fetch(self, path, params=None, auth_token=None) -> FetchResult:
        self.calls.append((path, dict(params or {}), auth_token))
        return self.result
