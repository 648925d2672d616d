"""
API request and response models.
"""

from typing import Any, Optional

from pydantic import Field

from tab_matrix.models import CamelModel, Statistics, UrlMatrix


class AnalyzeRequest(CamelModel):
    """Body of POST /v1/analyze."""

    tabs: Any = Field(..., description="Sequence of raw tab objects")
    session_id: Optional[str] = Field(
        None, description="Existing session to store results in (new one if omitted)"
    )


class AnalyzeResponse(CamelModel):
    """Successful analysis."""

    status: str = "success"
    session_id: str
    matrices: list[UrlMatrix] = Field(default_factory=list)
    statistics: Statistics
    processing_time_ms: float = 0


class ExportRequest(CamelModel):
    """Body of POST /v1/export."""

    session_id: str
    matrix_ids: list[str] = Field(
        default_factory=list, description="Matrices to export ([] = all)"
    )
    format: str = Field(..., description="json, txt, txt-simple or csv")


class ErrorResponse(CamelModel):
    """Failure with a stable error code."""

    status: str = "error"
    error: str
    code: str
