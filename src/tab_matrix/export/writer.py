"""
File writing for exports.

Writers persist serialized content under a generated filename. They are
asynchronous so the calling layer can await them alongside other I/O.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol

import zstandard as zstd

from tab_matrix.config import get_config
from tab_matrix.errors import ExportWriteError

logger = logging.getLogger(__name__)

MIME_TYPES = {
    "json": "application/json",
    "txt": "text/plain",
    "csv": "text/csv",
    "xml": "application/xml",
}

DEFAULT_MIME_TYPE = "text/plain"


@dataclass(frozen=True)
class WriteHandle:
    """Where and how an export was written."""

    path: Path
    filename: str
    mime_type: str
    size_bytes: int
    compressed: bool = False


class FileWriter(Protocol):
    """Anything that can persist export content."""

    async def write_file(self, content: str, filename: str, mime_type: str) -> WriteHandle:
        """
        Persist content.

        Raises:
            ExportWriteError: If the content cannot be written
        """
        ...


class LocalFileWriter:
    """
    Write exports into a local directory.

    When compression is enabled the content is zstd-compressed and ``.zst``
    is appended to the filename.
    """

    def __init__(
        self,
        output_dir: Optional[Path] = None,
        compress: Optional[bool] = None,
        compression_level: Optional[int] = None,
    ):
        """
        Initialize the writer.

        Args:
            output_dir: Target directory (defaults to config)
            compress: zstd-compress written files (defaults to config)
            compression_level: zstd level (defaults to config)
        """
        self.config = get_config()

        self.output_dir = Path(output_dir or self.config.export.output_dir)
        self.compress = self.config.export.compress if compress is None else compress
        self.compression_level = (
            compression_level or self.config.export.compression_level
        )

    async def write_file(self, content: str, filename: str, mime_type: str) -> WriteHandle:
        return await asyncio.to_thread(self._write, content, filename, mime_type)

    def _write(self, content: str, filename: str, mime_type: str) -> WriteHandle:
        payload = content.encode("utf-8")
        if self.compress:
            compressor = zstd.ZstdCompressor(level=self.compression_level)
            payload = compressor.compress(payload)
            filename = f"{filename}.zst"

        path = self.output_dir / filename
        logger.info("Creating export file %s (mime_type=%s)", path, mime_type)

        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(payload)
            tmp_path.replace(path)
        except OSError as e:
            logger.error(f"Failed to write export {path}: {e}")
            tmp_path.unlink(missing_ok=True)
            raise ExportWriteError(f"Export write failed: {e}") from e

        logger.info("Export written (path=%s, bytes=%d)", path, len(payload))
        return WriteHandle(
            path=path,
            filename=filename,
            mime_type=mime_type,
            size_bytes=len(payload),
            compressed=self.compress,
        )


def read_export(path: Path) -> str:
    """Read back an export written by ``LocalFileWriter``, decompressing ``.zst``."""
    path = Path(path)
    payload = path.read_bytes()
    if path.suffix == ".zst":
        payload = zstd.ZstdDecompressor().decompress(payload)
    return payload.decode("utf-8")


def generate_filename(extension: str, prefix: Optional[str] = None) -> str:
    """
    Generate a timestamped filename.

    Example:
        >>> generate_filename("json")  # doctest: +SKIP
        'tab-urls-2024-05-01T12-30-00.json'
    """
    prefix = prefix or get_config().export.filename_prefix
    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
    return f"{prefix}-{timestamp}.{extension}"


def get_mime_type(fmt: str) -> str:
    """MIME type for a file extension, ``text/plain`` when unknown."""
    mime_type = MIME_TYPES.get(fmt)
    if mime_type is None:
        logger.warning("Unknown format %r, using %s", fmt, DEFAULT_MIME_TYPE)
        return DEFAULT_MIME_TYPE
    return mime_type


def validate_content_size(content: str, max_size_mb: Optional[float] = None) -> bool:
    """Return False (and warn) when content exceeds the configured size."""
    if max_size_mb is None:
        max_size_mb = get_config().export.max_content_size_mb

    size_mb = len(content.encode("utf-8")) / (1024 * 1024)
    if size_mb > max_size_mb:
        logger.warning(
            "Content exceeds maximum size (size_mb=%.2f, max_size_mb=%s)", size_mb, max_size_mb
        )
        return False
    return True
