"""CourtListener API client

Every tool invocation goes through ``CourtListenerClient.fetch``: credential
format check, rate window, parameter sanitization, then one bounded-time GET.
Any failure collapses to ``UNAVAILABLE``; the cause is only logged locally.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Optional

import anyio
import httpx

from courtlistener_mcp.config.settings import Settings
from courtlistener_mcp.core.guard import (
    DEFAULT_MAX_STRING_LENGTH,
    client_identity,
    sanitize_params,
    validate_api_token,
)
from courtlistener_mcp.core.rate_limiter import RateLimiter
from courtlistener_mcp.models.results import UNAVAILABLE, FailureReason, Fetched, FetchResult
from courtlistener_mcp.utils.logger import get_logger

logger = get_logger(__name__)


def _normalize_count(count: Any, fallback: int) -> int | float:
    if isinstance(count, bool):
        return fallback

    if isinstance(count, str):
        text = count.strip()
        try:
            count = int(text)
        except ValueError:
            try:
                count = float(text)
            except ValueError:
                return fallback
        if isinstance(count, float) and math.isfinite(count) and count.is_integer():
            count = int(count)

    if isinstance(count, int):
        return count if count >= 0 else fallback
    if isinstance(count, float) and math.isfinite(count) and count >= 0:
        return count
    return fallback


def normalize_api_response(data: Any) -> Any:
    """
    페이지네이션 응답 정규화

    For ``{results: [...]}`` envelopes: ``count`` falls back to
    ``len(results)`` when missing or invalid, ``next``/``previous`` become a
    string or None. Other shapes are returned as-is. The input is not mutated.
    """
    if not isinstance(data, dict) or not isinstance(data.get("results"), list):
        return data

    normalized = dict(data)
    results = normalized["results"]

    normalized["count"] = _normalize_count(normalized.get("count"), len(results))
    for key in ("next", "previous"):
        value = normalized.get(key)
        normalized[key] = value if isinstance(value, str) else None

    return normalized


class CourtListenerClient:
    """Guarded, single-shot GET client for the CourtListener REST API"""

    def __init__(
        self,
        *,
        rate_limiter: RateLimiter,
        base_url: str = "https://www.courtlistener.com/api/rest/v4",
        user_agent: str = "CourtListener-MCP-Server/1.0",
        timeout_ms: int = 30000,
        max_string_length: int = DEFAULT_MAX_STRING_LENGTH,
        default_token: str = "",
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.rate_limiter = rate_limiter
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout_seconds = timeout_ms / 1000.0
        self.max_string_length = max_string_length
        self.default_token = default_token
        self._http_client = http_client

    @classmethod
    def from_settings(
        cls,
        config: Settings,
        *,
        rate_limiter: Optional[RateLimiter] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "CourtListenerClient":
        if rate_limiter is None:
            rate_limiter = RateLimiter(
                max_requests=config.rate_limit_requests,
                window_ms=config.rate_limit_window_ms,
            )
        return cls(
            rate_limiter=rate_limiter,
            base_url=config.courtlistener_api_base_url,
            user_agent=config.user_agent,
            timeout_ms=config.request_timeout_ms,
            max_string_length=config.max_string_length,
            default_token=config.courtlistener_api_token,
            http_client=http_client,
        )

    async def fetch(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        auth_token: Optional[str] = None,
    ) -> FetchResult:
        """
        CourtListener API GET 요청

        Args:
            path: Endpoint path relative to the API base, e.g. ``/dockets/``
            params: Untrusted query parameters
            auth_token: Optional API token; falls back to the configured one

        Returns:
            ``Fetched`` with normalized JSON, or ``UNAVAILABLE``
        """
        try:
            return await self._fetch(path, params or {}, auth_token or self.default_token)
        except Exception as e:
            return self._unavailable(
                FailureReason.unexpected,
                f"Unexpected error calling {path}: {type(e).__name__}",
            )

    async def _fetch(self, path: str, params: Mapping[str, Any], token: str) -> FetchResult:
        if token and not validate_api_token(token):
            return self._unavailable(FailureReason.input_rejected, "Invalid credential format")

        identity = client_identity(token)
        if not self.rate_limiter.is_allowed(identity):
            return self._unavailable(
                FailureReason.throttled, f"Rate limit exceeded for client {identity}"
            )

        sanitized = sanitize_params(params, max_length=self.max_string_length)
        query = [(key, value) for key, value in sanitized.items() if value]

        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }
        if token:
            headers["Authorization"] = f"Token {token}"

        url = f"{self.base_url}{path}"

        try:
            with anyio.fail_after(self.timeout_seconds):
                response = await self._get(url, query, headers)
        except (TimeoutError, httpx.TimeoutException):
            return self._unavailable(FailureReason.upstream_timeout, f"Request timeout for {path}")
        except httpx.HTTPError as e:
            return self._unavailable(
                FailureReason.upstream_unreachable,
                f"Network error for {path}: {type(e).__name__}",
            )

        logger.debug(f"Response status: {response.status_code} for {path}")

        if not response.is_success:
            status_code = response.status_code
            if status_code == 401:
                detail = "Authentication failed - invalid API token"
            elif status_code == 429:
                detail = "Rate limited by CourtListener API"
            elif status_code >= 500:
                detail = "CourtListener API server error"
            else:
                detail = f"CourtListener API request failed with status: {status_code}"
            return self._unavailable(FailureReason.upstream_rejected, f"{detail} ({path})")

        try:
            data = response.json()
        except ValueError:
            return self._unavailable(
                FailureReason.upstream_malformed, f"JSON parsing error for {path}"
            )

        # 에러 페이지 등 객체가 아닌 응답
        if not isinstance(data, dict):
            return self._unavailable(
                FailureReason.upstream_malformed,
                f"Unexpected response shape for {path}: {type(data).__name__}",
            )

        return Fetched(normalize_api_response(data))

    async def _get(
        self,
        url: str,
        query: list[tuple[str, str]],
        headers: dict[str, str],
    ) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.get(url, params=query, headers=headers)

        async with httpx.AsyncClient(timeout=self.timeout_seconds, follow_redirects=True) as client:
            return await client.get(url, params=query, headers=headers)

    @staticmethod
    def _unavailable(reason: FailureReason, message: str) -> FetchResult:
        logger.error(f"[{reason.value}] {message}")
        return UNAVAILABLE
