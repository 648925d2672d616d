"""
ID generation utilities.

- matrix_id: ``matrix-domain-<slug>`` derived from the grouping value
- url_id: xxh3_64(normalized_url_bytes), used as a stable export row key
"""

import re

import xxhash

MATRIX_ID_PREFIX = "matrix-domain-"

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]")
_HYPHEN_RUNS = re.compile(r"-+")


def generate_matrix_id(criterion_value: str) -> str:
    """
    Generate a deterministic matrix ID from a grouping value.

    Distinct values that differ only in non-alphanumeric characters map to
    the same ID; no tie-breaking is applied.

    Args:
        criterion_value: Grouping value (e.g., "youtube.com")

    Returns:
        Sanitized ID (e.g., "matrix-domain-youtube-com")
    """
    sanitized = _NON_SLUG_CHARS.sub("-", criterion_value.lower())
    sanitized = _HYPHEN_RUNS.sub("-", sanitized).strip("-")
    return f"{MATRIX_ID_PREFIX}{sanitized}"


def get_url_id(normalized_url: str) -> int:
    """
    Generate URL ID using xxh3_64 hash.

    Args:
        normalized_url: Canonical URL string

    Returns:
        64-bit hash as signed int64
    """
    hash_val = xxhash.xxh3_64(normalized_url.encode("utf-8")).intdigest()
    # Convert to signed int64 range
    if hash_val >= 2**63:
        hash_val -= 2**64
    return hash_val
