"""
Upstream fetch result types
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class FailureReason(str, Enum):
    """Internal failure taxonomy, only ever written to the local log"""

    input_rejected = "input_rejected"
    throttled = "throttled"
    upstream_unreachable = "upstream_unreachable"
    upstream_timeout = "upstream_timeout"
    upstream_rejected = "upstream_rejected"
    upstream_malformed = "upstream_malformed"
    unexpected = "unexpected"


@dataclass(frozen=True)
class Fetched:
    """Normalized upstream JSON: a list envelope or a single resource"""

    data: dict[str, Any]

    @property
    def is_list(self) -> bool:
        return isinstance(self.data.get("results"), list)

    @property
    def results(self) -> list[Any]:
        results = self.data.get("results")
        return results if isinstance(results, list) else []

    @property
    def count(self) -> int:
        count = self.data.get("count")
        if isinstance(count, (int, float)) and not isinstance(count, bool):
            return int(count)
        return len(self.results)


@dataclass(frozen=True)
class Unavailable:
    """The single failure outcome; carries no detail by construction"""


UNAVAILABLE = Unavailable()

FetchResult = Union[Fetched, Unavailable]
