"""
Logging utilities
"""
import logging
import sys
from typing import Optional

from courtlistener_mcp.config.settings import settings


class RedactingFilter(logging.Filter):
    """Run every record's message through sanitization with redaction"""

    def filter(self, record: logging.LogRecord) -> bool:
        # core imports this module; resolve the guard lazily
        from courtlistener_mcp.core.guard import sanitize_string

        message = record.getMessage()
        record.msg = sanitize_string(message, max_length=settings.max_string_length, redact=True)
        record.args = None
        return True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a configured logger instance

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name or "courtlistener-mcp")

    # 이미 핸들러가 설정되어 있으면 스킵
    if logger.handlers:
        return logger

    # 로그 레벨 설정
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logger.setLevel(log_level)

    # stdout은 MCP stdio 전송 채널이므로 stderr로 출력
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.addFilter(RedactingFilter())

    # 포맷터
    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)
    logger.propagate = False

    return logger
