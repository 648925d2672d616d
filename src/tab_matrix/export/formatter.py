"""
Export formatting.

Serializes a set of matrices into one of a closed set of formats:
- json: versioned ``ExportData`` document, one item per URL
- txt: human-readable report, one section per matrix
- txt-simple: one URL per line
- csv: one row per URL
"""

import logging
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Sequence

import polars as pl
from pydantic import Field, field_validator, model_validator

from tab_matrix.errors import InvalidFormatError
from tab_matrix.models import CamelModel, UrlMatrix
from tab_matrix.normalization import get_url_id

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0.0"
EXPORT_SOURCE = "tab-url-extractor"

_SEMVER = re.compile(r"^\d+\.\d+\.\d+$")


class ExportFormat(str, Enum):
    """Supported export formats."""

    JSON = "json"
    TXT = "txt"
    TXT_SIMPLE = "txt-simple"
    CSV = "csv"


class ExportType(str, Enum):
    """Whether an export covers every matrix or a selection."""

    FULL = "full"
    PARTIAL = "partial"


class ExportMetadata(CamelModel):
    total_urls: int = Field(..., ge=0)
    total_matrices: int = Field(..., ge=0)
    export_type: ExportType
    matrix_ids: Optional[list[str]] = None


class ExportDataItem(CamelModel):
    url: str
    normalized_url: str
    domain: str
    origin: str
    matrix_id: str
    matrix_label: str
    url_id: int


class ExportData(CamelModel):
    """Structured JSON export document."""

    version: str = EXPORT_VERSION
    generated_at: str
    source: str = EXPORT_SOURCE
    metadata: ExportMetadata
    data: list[ExportDataItem] = Field(default_factory=list)

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        if not _SEMVER.match(value):
            raise ValueError("Invalid version format")
        return value

    @field_validator("source")
    @classmethod
    def _check_source(cls, value: str) -> str:
        if value != EXPORT_SOURCE:
            raise ValueError("Invalid source value")
        return value

    @model_validator(mode="after")
    def _check_counts(self) -> "ExportData":
        if len(self.data) != self.metadata.total_urls:
            raise ValueError("Mismatch: data.length != metadata.totalUrls")
        return self


def parse_format(fmt: "ExportFormat | str") -> ExportFormat:
    """
    Resolve a format name.

    Raises:
        InvalidFormatError: If the name is not a supported format
    """
    try:
        return ExportFormat(fmt)
    except ValueError as e:
        raise InvalidFormatError(fmt) from e


def file_extension(fmt: "ExportFormat | str") -> str:
    """File extension for a format (txt-simple is written as .txt)."""
    fmt = parse_format(fmt)
    if fmt is ExportFormat.TXT_SIMPLE:
        return ExportFormat.TXT.value
    return fmt.value


def export_matrices(
    matrices: Sequence[UrlMatrix],
    fmt: "ExportFormat | str",
    export_type: Optional[ExportType] = None,
) -> str:
    """
    Serialize matrices.

    Args:
        matrices: Matrices to export (already filtered)
        fmt: Export format
        export_type: full or partial (only recorded by the JSON format)

    Returns:
        Serialized content

    Raises:
        InvalidFormatError: If fmt is not a supported format
    """
    fmt = parse_format(fmt)
    export_type = export_type or ExportType.FULL
    logger.info("Formatting data (format=%s, export_type=%s)", fmt.value, export_type.value)

    if fmt is ExportFormat.JSON:
        document = build_export_data(matrices, export_type)
        return document.model_dump_json(by_alias=True, indent=2, exclude_none=True)
    if fmt is ExportFormat.TXT:
        return _to_text(matrices)
    if fmt is ExportFormat.TXT_SIMPLE:
        return "".join(f"{entry.url}\n" for m in matrices for entry in m.urls)
    return matrices_to_frame(matrices).write_csv()


def build_export_data(matrices: Sequence[UrlMatrix], export_type: ExportType) -> ExportData:
    """Assemble the JSON export document."""
    items = [
        ExportDataItem(
            url=entry.url,
            normalized_url=entry.normalized_url,
            domain=entry.domain,
            origin=entry.origin,
            matrix_id=matrix.id,
            matrix_label=matrix.label,
            url_id=get_url_id(entry.normalized_url),
        )
        for matrix in matrices
        for entry in matrix.urls
    ]
    metadata = ExportMetadata(
        total_urls=len(items),
        total_matrices=len(matrices),
        export_type=export_type,
        matrix_ids=[m.id for m in matrices] if export_type is ExportType.PARTIAL else None,
    )
    return ExportData(
        generated_at=datetime.now(timezone.utc).isoformat(),
        metadata=metadata,
        data=items,
    )


def matrices_to_frame(matrices: Sequence[UrlMatrix]) -> pl.DataFrame:
    """
    Flatten matrices into one row per URL.

    Columns: matrix_id, matrix_label, domain, url, normalized_url, url_id, title
    """
    records = [
        {
            "matrix_id": matrix.id,
            "matrix_label": matrix.label,
            "domain": entry.domain,
            "url": entry.url,
            "normalized_url": entry.normalized_url,
            "url_id": get_url_id(entry.normalized_url),
            "title": entry.metadata.title,
        }
        for matrix in matrices
        for entry in matrix.urls
    ]

    schema = {
        "matrix_id": pl.Utf8,
        "matrix_label": pl.Utf8,
        "domain": pl.Utf8,
        "url": pl.Utf8,
        "normalized_url": pl.Utf8,
        "url_id": pl.Int64,
        "title": pl.Utf8,
    }
    if not records:
        return pl.DataFrame(schema=schema)
    return pl.DataFrame(records, schema=schema)


def summary_frame(matrices: Sequence[UrlMatrix]) -> pl.DataFrame:
    """One row per matrix: id, label, url_count, in matrix order."""
    return pl.DataFrame(
        {
            "id": [m.id for m in matrices],
            "label": [m.label for m in matrices],
            "url_count": [m.url_count for m in matrices],
        },
        schema={"id": pl.Utf8, "label": pl.Utf8, "url_count": pl.Int64},
    )


def _to_text(matrices: Sequence[UrlMatrix]) -> str:
    total_urls = sum(m.url_count for m in matrices)
    lines = [
        "Tab URL Export",
        f"Generated: {datetime.now(timezone.utc).isoformat()}",
        f"Matrices: {len(matrices)} | URLs: {total_urls}",
        "",
    ]
    for matrix in matrices:
        lines.append(f"== {matrix.label} ({matrix.url_count}) ==")
        for entry in matrix.urls:
            if entry.metadata.title:
                lines.append(f"- {entry.metadata.title}")
                lines.append(f"  {entry.url}")
            else:
                lines.append(f"- {entry.url}")
        lines.append("")
    return "\n".join(lines)
