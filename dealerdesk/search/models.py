"""Shared search models."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Literal

EntityType = Literal["customer", "car", "deal", "bill"]

TYPE_PRIORITY: dict[str, int] = {
    "customer": 1,
    "car": 2,
    "deal": 3,
    "bill": 4,
}


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Normalized cross-entity search hit."""

    id: str
    type: EntityType
    title: str
    subtitle: str = ""
    metadata: str = ""
    link: str = ""

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(slots=True)
class SearchOutcome:
    """Ranked results plus the entity stores that failed to answer."""

    results: list[SearchResult] = field(default_factory=list)
    failed_sources: list[str] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.failed_sources)
