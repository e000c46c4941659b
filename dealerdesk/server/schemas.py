"""Request and response models for the HTTP endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from dealerdesk.search.models import SearchOutcome


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponseDTO(BaseModel):
    status: str
    timestamp: str
    version: str


class SearchResultDTO(BaseModel):
    id: str
    type: str
    title: str
    subtitle: str
    metadata: str
    link: str


class SearchResponseDTO(_CamelModel):
    query: str
    results: list[SearchResultDTO] = Field(default_factory=list)
    failed_sources: list[str] = Field(default_factory=list)

    @classmethod
    def from_outcome(cls, query: str, outcome: SearchOutcome) -> "SearchResponseDTO":
        return cls(
            query=query,
            results=[SearchResultDTO(**result.to_dict()) for result in outcome.results],
            failed_sources=list(outcome.failed_sources),
        )


class PdfRequestDTO(BaseModel):
    html: str = ""
    filename: str | None = None
    options: dict[str, Any] = Field(default_factory=dict)


class BrowserStatusDTO(_CamelModel):
    available: bool
    strategy: str | None = None
    executable_path: str | None = None
    serverless: bool = False
    running: bool = False
    attempted: list[str] = Field(default_factory=list)
