"""In-Memory Rate Limiter

클라이언트 식별자별 슬라이딩 윈도우 요청 제한입니다.
단일 프로세스 전용이며 재시작 시 초기화됩니다.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Optional


def _now_ms() -> float:
    return time.time() * 1000.0


class RateLimiter:
    """Sliding-window limiter keyed by client identity"""

    def __init__(self, max_requests: int = 100, window_ms: int = 60000):
        if max_requests < 1:
            raise ValueError("max_requests must be positive")
        if window_ms < 1:
            raise ValueError("window_ms must be positive")

        self.max_requests = max_requests
        self.window_ms = window_ms
        self._requests: dict[str, deque[float]] = {}
        self._lock = threading.Lock()

    def is_allowed(self, identifier: str, now: Optional[float] = None) -> bool:
        """
        요청 허용 여부 확인

        Timestamps at or before ``now - window_ms`` are evicted first. A
        rejected attempt is not recorded.

        Args:
            identifier: Client identity
            now: Current time in milliseconds since the epoch

        Returns:
            True if the request is admitted
        """
        if now is None:
            now = _now_ms()
        window_start = now - self.window_ms

        with self._lock:
            timestamps = self._requests.setdefault(identifier, deque())

            while timestamps and timestamps[0] <= window_start:
                timestamps.popleft()

            if len(timestamps) >= self.max_requests:
                return False

            timestamps.append(now)
            return True

    def remaining(self, identifier: str, now: Optional[float] = None) -> int:
        """Admissions left for ``identifier`` in the current window (read only)"""
        if now is None:
            now = _now_ms()
        window_start = now - self.window_ms

        with self._lock:
            timestamps = self._requests.get(identifier)
            if not timestamps:
                return self.max_requests
            live = sum(1 for ts in timestamps if ts > window_start)
            return max(0, self.max_requests - live)

    def prune(self, now: Optional[float] = None) -> int:
        """
        만료된 식별자 정리

        Drop identities whose timestamps have all left the window.

        Returns:
            Number of identities removed
        """
        if now is None:
            now = _now_ms()
        window_start = now - self.window_ms

        with self._lock:
            stale = [
                key
                for key, timestamps in self._requests.items()
                if not timestamps or timestamps[-1] <= window_start
            ]
            for key in stale:
                del self._requests[key]

        return len(stale)

    def tracked_identities(self) -> int:
        return len(self._requests)
