"""
Matrix building and statistics.
"""

from .matrix_builder import (
    build,
    create_matrices,
    filter_by_ids,
    get_statistics,
    group_by_domain,
    sort_by_url_count,
)

__all__ = [
    "build",
    "group_by_domain",
    "create_matrices",
    "sort_by_url_count",
    "filter_by_ids",
    "get_statistics",
]
