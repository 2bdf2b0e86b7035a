"""Request Guard

Validation and sanitization applied to every caller-supplied value before it
is forwarded to CourtListener or written to a log sink.

Sanitization is a denylist: a fixed set of characters and protocol/event
handler patterns is stripped, then the result is truncated.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any, Optional

DEFAULT_MAX_STRING_LENGTH = 1000
ANONYMOUS_CLIENT = "anonymous"
REDACTION_MARKER = "[REDACTED]"

_API_TOKEN_RE = re.compile(r"[a-f0-9]{40}")
_DANGEROUS_CHARS_RE = re.compile(r"[<>\"'&]")
_DANGEROUS_PATTERN_RE = re.compile(
    r"javascript:|data:|vbscript:|on\w+\s*=",
    re.IGNORECASE,
)
_SENSITIVE_RE = re.compile(
    r"(?:password|secret|token|key)\d+|\b[a-fA-F0-9]{40}\b",
    re.IGNORECASE,
)


def validate_api_token(token: Optional[str] = None) -> bool:
    """
    CourtListener API token 형식 검증

    A missing or empty token is valid (anonymous access). Anything else must
    be exactly 40 lowercase hex characters.
    """
    if not token:
        return True
    if not isinstance(token, str):
        return False
    return _API_TOKEN_RE.fullmatch(token) is not None


def client_identity(token: Optional[str] = None) -> str:
    """Rate limiter key for a credential: ``token:<first 8 chars>`` or ``anonymous``"""
    if token:
        return f"token:{token[:8]}"
    return ANONYMOUS_CLIENT


def _truncate_utf16(value: str, limit: int) -> str:
    # Length is measured in UTF-16 code units; astral characters count twice
    # and are never split.
    if len(value) <= limit // 2:
        return value

    units = 0
    for index, char in enumerate(value):
        width = 2 if ord(char) > 0xFFFF else 1
        if units + width > limit:
            return value[:index]
        units += width
    return value


def sanitize_string(
    value: str,
    *,
    max_length: int = DEFAULT_MAX_STRING_LENGTH,
    redact: bool = False,
) -> str:
    """
    Strip dangerous characters and patterns, then truncate.

    Args:
        value: Untrusted input string
        max_length: Ceiling on the result length in UTF-16 code units
        redact: Also replace password/secret/token/key-with-digits strings and
            40-hex credential look-alikes with a redaction marker (log sink)

    Returns:
        Sanitized string
    """
    if not value:
        return ""

    cleaned = _DANGEROUS_CHARS_RE.sub("", value)

    # Removing one pattern can splice a new one together ("javajavascript:script:").
    while True:
        stripped = _DANGEROUS_PATTERN_RE.sub("", cleaned)
        if stripped == cleaned:
            break
        cleaned = stripped

    if redact:
        cleaned = _SENSITIVE_RE.sub(REDACTION_MARKER, cleaned)

    return _truncate_utf16(cleaned, max_length)


def _number_to_string(value: int | float) -> str:
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def sanitize_params(
    params: Mapping[str, Any],
    *,
    max_length: int = DEFAULT_MAX_STRING_LENGTH,
) -> dict[str, str]:
    """
    Reduce an untrusted parameter mapping to sanitized strings.

    None values and non-primitive values (lists, dicts, objects) are dropped,
    strings are sanitized, numbers and booleans are stringified.
    """
    sanitized: dict[str, str] = {}

    for key, value in params.items():
        if value is None:
            continue
        # bool first: it is a subclass of int
        if isinstance(value, bool):
            sanitized[key] = "true" if value else "false"
        elif isinstance(value, str):
            sanitized[key] = sanitize_string(value, max_length=max_length)
        elif isinstance(value, (int, float)):
            sanitized[key] = _number_to_string(value)

    return sanitized
