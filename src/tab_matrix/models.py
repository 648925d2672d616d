"""
Core data models.

Defines Pydantic models for tabs, URL entries, matrices and statistics.
All models serialize with camelCase aliases and accept either spelling.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

TabIdentifier = Union[int, str]

ORIGIN_TAB = "tab"
CRITERION_DOMAIN = "domain"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RawTab(CamelModel):
    """A tab as supplied by a tab source."""

    url: str = Field(..., description="Full URL of the tab")
    title: Optional[str] = Field(None, description="Page title")
    tab_id: Optional[TabIdentifier] = Field(None, description="Browser tab ID")
    window_id: Optional[TabIdentifier] = Field(None, description="Browser window ID")


class TabMetadata(CamelModel):
    """Title and source identifiers carried along with an entry."""

    model_config = ConfigDict(frozen=True)

    title: str = Field("", description="Page title")
    tab_id: Optional[TabIdentifier] = Field(None, description="Browser tab ID")
    window_id: Optional[TabIdentifier] = Field(None, description="Browser window ID")


class UrlEntry(CamelModel):
    """A normalized URL, the unit of deduplication and grouping."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Original URL")
    normalized_url: str = Field(..., description="Canonical form (dedup key)")
    domain: str = Field("", description="Lowercase host (grouping key)")
    origin: str = Field(ORIGIN_TAB, description="Provenance tag")
    metadata: TabMetadata = Field(default_factory=TabMetadata)
    matrix_id: Optional[str] = Field(None, description="Owning matrix, once grouped")


class UrlMatrix(CamelModel):
    """A named collection of entries sharing a grouping value."""

    id: str = Field(..., description="Deterministic slug of the grouping value")
    label: str = Field(..., description="Human-readable grouping value")
    criterion: str = Field(CRITERION_DOMAIN, description="Grouping criterion")
    criterion_value: str = Field(..., description="Grouping value")
    url_count: int = Field(..., ge=0, description="Number of URLs")
    urls: list[UrlEntry] = Field(default_factory=list)
    created_at: str = Field(..., description="ISO-8601 construction timestamp")

    @model_validator(mode="after")
    def _check_membership(self) -> "UrlMatrix":
        if self.url_count != len(self.urls):
            raise ValueError(
                f"url_count ({self.url_count}) does not match urls ({len(self.urls)})"
            )
        for entry in self.urls:
            if entry.matrix_id != self.id:
                raise ValueError(
                    f"Entry {entry.url!r} carries matrix_id {entry.matrix_id!r}, "
                    f"expected {self.id!r}"
                )
        return self


class Statistics(CamelModel):
    """Aggregates over a set of matrices."""

    total_matrices: int = 0
    total_urls: int = 0
    avg_urls_per_matrix: float = 0
    max_urls_in_matrix: int = 0
    min_urls_in_matrix: int = 0
    domains: list[str] = Field(default_factory=list)


class AnalysisReport(CamelModel):
    """Outcome of one pipeline run, owned by the caller."""

    matrices: list[UrlMatrix] = Field(default_factory=list)
    statistics: Statistics = Field(default_factory=Statistics)
    processing_time_ms: float = 0
    input_count: int = 0
    normalized_count: int = 0
    unique_count: int = 0
