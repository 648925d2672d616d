"""
tab-matrix: deduplicate browser tab URLs and group them into domain matrices.
"""

from tab_matrix.errors import ErrorKind, Failure, Result, TabMatrixError
from tab_matrix.models import AnalysisReport, RawTab, Statistics, UrlEntry, UrlMatrix
from tab_matrix.pipeline import AnalysisSession, analyze

__version__ = "0.1.0"

__all__ = [
    "AnalysisReport",
    "AnalysisSession",
    "ErrorKind",
    "Failure",
    "RawTab",
    "Result",
    "Statistics",
    "TabMatrixError",
    "UrlEntry",
    "UrlMatrix",
    "analyze",
]
