"""
Analysis pipeline and session orchestration.

``analyze`` runs normalization, deduplication and matrix building over one
batch of tabs and returns a ``Result``. ``AnalysisSession`` holds the latest
report for a caller so a later export works from the same matrices.
"""

import logging
import time
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Optional

from tab_matrix.errors import (
    ErrorKind,
    ExportWriteError,
    Failure,
    InvalidFormatError,
    InvalidInputError,
    Result,
    TabCollectionError,
)
from tab_matrix.export import (
    ExportFormat,
    ExportType,
    FileWriter,
    WriteHandle,
    export_matrices,
    file_extension,
    generate_filename,
    get_mime_type,
    parse_format,
    validate_content_size,
)
from tab_matrix.grouping import build, filter_by_ids, get_statistics
from tab_matrix.ingestion import TabSource, deduplicate, normalize_tabs
from tab_matrix.models import AnalysisReport, UrlMatrix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportArtifact:
    """Serialized export, ready to be written."""

    content: str
    filename: str
    mime_type: str
    format: ExportFormat
    export_type: ExportType
    exported_matrices: int
    exported_urls: int


@dataclass(frozen=True)
class ExportReceipt:
    """Outcome of a written export."""

    artifact: ExportArtifact
    handle: WriteHandle
    processing_time_ms: float


def analyze(raw_tabs: Sequence[Any]) -> Result[AnalysisReport]:
    """
    Run the full pipeline over one batch of tabs.

    Returns:
        Success with an ``AnalysisReport``, or a failure tagged
        ``INVALID_INPUT`` (not a sequence) or ``EMPTY_RESULT`` (non-empty
        input with nothing usable). An empty input is a success with an
        empty report.
    """
    start = time.perf_counter()

    try:
        logger.info("Step 1/3: Normalizing URLs")
        normalized = normalize_tabs(raw_tabs)
    except InvalidInputError as e:
        logger.error("Tab analysis failed: %s", e.message)
        return Result(error=Failure.from_exception(e))

    logger.info("Step 2/3: Removing duplicates")
    unique = deduplicate(normalized)

    logger.info("Step 3/3: Building matrices")
    matrices = build(unique)

    if raw_tabs and not matrices:
        message = f"No usable URLs found among {len(raw_tabs)} tab(s)"
        logger.warning(message)
        return Result.failure(ErrorKind.EMPTY_RESULT, message)

    statistics = get_statistics(matrices)
    processing_time_ms = round((time.perf_counter() - start) * 1000, 3)

    logger.info(
        "Tab analysis completed (processing_time_ms=%s, total_urls=%d, total_matrices=%d)",
        processing_time_ms,
        statistics.total_urls,
        statistics.total_matrices,
    )

    return Result.success(
        AnalysisReport(
            matrices=matrices,
            statistics=statistics,
            processing_time_ms=processing_time_ms,
            input_count=len(raw_tabs),
            normalized_count=len(normalized),
            unique_count=len(unique),
        )
    )


class AnalysisSession:
    """
    Caller-owned analysis state.

    Usage:
        session = AnalysisSession()
        result = session.analyze_source(JsonFileTabSource("tabs.json"))
        if result.ok:
            receipt = await session.export([], "json", LocalFileWriter())
    """

    def __init__(self, session_id: Optional[str] = None):
        self.session_id = session_id or uuid.uuid4().hex
        self.report: Optional[AnalysisReport] = None

    @property
    def matrices(self) -> list[UrlMatrix]:
        return self.report.matrices if self.report is not None else []

    def analyze(self, raw_tabs: Sequence[Any]) -> Result[AnalysisReport]:
        """Analyze tabs, replacing the stored report (cleared on failure)."""
        result = analyze(raw_tabs)
        self.report = result.value if result.ok else None
        return result

    def analyze_source(self, source: TabSource) -> Result[AnalysisReport]:
        """Collect tabs from a source, then analyze them."""
        logger.info("Collecting tabs (session=%s)", self.session_id)
        try:
            raw_tabs = source.collect_tabs()
        except TabCollectionError as e:
            logger.error("Tab collection failed: %s", e.message)
            self.report = None
            return Result(error=Failure.from_exception(e))

        return self.analyze(raw_tabs)

    def prepare_export(
        self, matrix_ids: Optional[Iterable[str]], fmt: "ExportFormat | str"
    ) -> Result[ExportArtifact]:
        """
        Select matrices and serialize them.

        An empty ``matrix_ids`` exports everything.
        """
        try:
            fmt = parse_format(fmt)
        except InvalidFormatError as e:
            return Result(error=Failure.from_exception(e))

        if not self.matrices:
            return Result.failure(
                ErrorKind.NO_MATRICES_AVAILABLE,
                "No matrices available. Please analyze tabs first.",
            )

        matrix_ids = list(matrix_ids or [])
        if matrix_ids:
            selected = filter_by_ids(self.matrices, matrix_ids)
            export_type = ExportType.PARTIAL
            logger.info(
                "Partial export (requested_ids=%d, found_matrices=%d)",
                len(matrix_ids),
                len(selected),
            )
        else:
            selected = self.matrices
            export_type = ExportType.FULL
            logger.info("Full export: all matrices")

        if not selected:
            return Result.failure(
                ErrorKind.MATRIX_NOT_FOUND, "No matrices found for the specified IDs"
            )

        content = export_matrices(selected, fmt, export_type)
        validate_content_size(content)

        extension = file_extension(fmt)
        return Result.success(
            ExportArtifact(
                content=content,
                filename=generate_filename(extension),
                mime_type=get_mime_type(extension),
                format=fmt,
                export_type=export_type,
                exported_matrices=len(selected),
                exported_urls=sum(m.url_count for m in selected),
            )
        )

    async def export(
        self,
        matrix_ids: Optional[Iterable[str]],
        fmt: "ExportFormat | str",
        writer: FileWriter,
    ) -> Result[ExportReceipt]:
        """Prepare an export and hand it to a file writer."""
        start = time.perf_counter()

        prepared = self.prepare_export(matrix_ids, fmt)
        if not prepared.ok:
            logger.error("Export failed: %s", prepared.error.message)
            return Result(error=prepared.error)

        artifact = prepared.value
        try:
            handle = await writer.write_file(
                artifact.content, artifact.filename, artifact.mime_type
            )
        except ExportWriteError as e:
            logger.error("Export failed: %s", e.message)
            return Result(error=Failure.from_exception(e))

        processing_time_ms = round((time.perf_counter() - start) * 1000, 3)
        logger.info(
            "Export completed (filename=%s, exported_urls=%d, exported_matrices=%d)",
            handle.filename,
            artifact.exported_urls,
            artifact.exported_matrices,
        )
        return Result.success(
            ExportReceipt(
                artifact=artifact, handle=handle, processing_time_ms=processing_time_ms
            )
        )

    def clear(self) -> None:
        """Drop the stored report."""
        logger.info("Clearing session state (session=%s)", self.session_id)
        self.report = None
