"""
Export layer.

Handles serializing matrices and writing the result to files.
"""

from .formatter import (
    ExportData,
    ExportFormat,
    ExportType,
    export_matrices,
    file_extension,
    matrices_to_frame,
    parse_format,
    summary_frame,
)
from .writer import (
    FileWriter,
    LocalFileWriter,
    WriteHandle,
    generate_filename,
    get_mime_type,
    read_export,
    validate_content_size,
)

__all__ = [
    "ExportData",
    "ExportFormat",
    "ExportType",
    "export_matrices",
    "file_extension",
    "matrices_to_frame",
    "parse_format",
    "summary_frame",
    "FileWriter",
    "LocalFileWriter",
    "WriteHandle",
    "generate_filename",
    "get_mime_type",
    "read_export",
    "validate_content_size",
]
