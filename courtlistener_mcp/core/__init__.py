"""Core Package for the CourtListener MCP server

요청 검증(Request Guard)과 CourtListener API 호출(Upstream Fetcher)을 포함합니다.
"""

from .fetcher import CourtListenerClient, normalize_api_response
from .guard import (
    client_identity,
    sanitize_params,
    sanitize_string,
    validate_api_token,
)
from .rate_limiter import RateLimiter

__all__ = [
    # Request Guard
    "client_identity",
    "sanitize_params",
    "sanitize_string",
    "validate_api_token",
    "RateLimiter",
    # Upstream Fetcher
    "CourtListenerClient",
    "normalize_api_response",
]
