"""
URL and domain normalization utilities.

Handles canonicalization, domain extraction, and ID generation.
"""

from .ids import generate_matrix_id, get_url_id
from .url_normalizer import extract_domain, normalize_url, should_process_url

__all__ = [
    "normalize_url",
    "extract_domain",
    "should_process_url",
    "generate_matrix_id",
    "get_url_id",
]
