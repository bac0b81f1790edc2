"""
Types shared by the external product sources.
"""
from dataclasses import dataclass
from typing import Any, Literal

SourceStatus = Literal["found", "not_found", "unavailable"]


@dataclass
class SourceResult:
    """Outcome of one call to an external source. Adapters never raise; they return one of these."""
    payload: Any
    status: SourceStatus
    source: str  # "open_food_facts" | "kassalapp" | "matvaretabellen"
    raw_response_summary: str = ""  # for logging

    @property
    def found(self) -> bool:
        return self.status == "found" and self.payload is not None


def not_found(source: str, summary: str = "not_found") -> SourceResult:
    return SourceResult(None, "not_found", source, summary)


def unavailable(source: str, summary: str) -> SourceResult:
    return SourceResult(None, "unavailable", source, summary[:120])
