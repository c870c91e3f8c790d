"""Core data models shared by the places export pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

UNKNOWN = "Unknown"
NOT_AVAILABLE = "not available"

Score = Union[int, str]


@dataclass(frozen=True)
class AuditScores:
    """PageSpeed category scores as 0-100 percentages or ``NOT_AVAILABLE``."""

    performance: Score = NOT_AVAILABLE
    best_practices: Score = NOT_AVAILABLE
    seo: Score = NOT_AVAILABLE

    @classmethod
    def unavailable(cls) -> "AuditScores":
        return cls()


@dataclass(frozen=True)
class BusinessRecord:
    """One row of the exported listing."""

    name: str = UNKNOWN
    address: str = UNKNOWN
    website: str = ""
    phone: str = ""
    performance: Optional[Score] = None
    best_practices: Optional[Score] = None
    seo: Optional[Score] = None


@dataclass(frozen=True)
class DiscoveredPlace:
    place_id: Optional[str]
    record: BusinessRecord


@dataclass(frozen=True)
class SearchPage:
    places: List[DiscoveredPlace] = field(default_factory=list)
    next_page_token: Optional[str] = None
