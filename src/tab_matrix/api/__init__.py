"""
API serving layer.

Handles tab analysis and export requests.
"""

from tab_matrix.api.models import AnalyzeRequest, AnalyzeResponse, ErrorResponse, ExportRequest
from tab_matrix.api.server import app, create_app
from tab_matrix.api.sessions import SessionStore

__all__ = [
    "AnalyzeRequest",
    "AnalyzeResponse",
    "ErrorResponse",
    "ExportRequest",
    "SessionStore",
    "app",
    "create_app",
]
