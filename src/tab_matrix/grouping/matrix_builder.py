"""
Matrix building.

Partitions unique URL entries by domain into labeled matrices, orders them
by size and computes aggregate statistics.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from tab_matrix.errors import ErrorKind, require_sequence
from tab_matrix.models import CRITERION_DOMAIN, Statistics, UrlEntry, UrlMatrix
from tab_matrix.normalization import generate_matrix_id

logger = logging.getLogger(__name__)


def build(entries: Sequence[UrlEntry]) -> list[UrlMatrix]:
    """
    Build domain matrices from unique entries.

    Args:
        entries: Deduplicated entries, in order of first appearance

    Returns:
        Matrices sorted by url_count, descending

    Raises:
        InvalidInputError: If entries is not a sequence
    """
    require_sequence(entries, "entries")

    if not entries:
        logger.warning("No URLs to build matrices from")
        return []

    logger.info("Building matrices (url_count=%d)", len(entries))

    grouped = group_by_domain(entries)
    matrices = create_matrices(grouped)
    ordered = sort_by_url_count(matrices)

    logger.info(
        "Matrices built (matrix_count=%d, total_urls=%d)",
        len(ordered),
        sum(m.url_count for m in ordered),
    )
    return ordered


def group_by_domain(entries: Iterable[UrlEntry]) -> dict[str, list[UrlEntry]]:
    """
    Group entries by domain, keeping encounter order within and across buckets.

    Entries without a domain are dropped with a warning.
    """
    grouped: dict[str, list[UrlEntry]] = {}

    for entry in entries:
        if not entry.domain:
            logger.warning("URL without domain (%s): %s", ErrorKind.MISSING_DOMAIN.value, entry.url)
            continue
        grouped.setdefault(entry.domain, []).append(entry)

    logger.info("URLs grouped by domain (unique_domains=%d)", len(grouped))
    return grouped


def create_matrices(
    grouped: dict[str, list[UrlEntry]], created_at: Optional[str] = None
) -> list[UrlMatrix]:
    """
    Materialize one matrix per domain bucket.

    All matrices of one call share the same timestamp.
    """
    timestamp = created_at or datetime.now(timezone.utc).isoformat()
    matrices = []

    for domain, urls in grouped.items():
        matrix_id = generate_matrix_id(domain)
        matrices.append(
            UrlMatrix(
                id=matrix_id,
                label=domain,
                criterion=CRITERION_DOMAIN,
                criterion_value=domain,
                url_count=len(urls),
                urls=[entry.model_copy(update={"matrix_id": matrix_id}) for entry in urls],
                created_at=timestamp,
            )
        )

    return matrices


def sort_by_url_count(matrices: Iterable[UrlMatrix]) -> list[UrlMatrix]:
    """Order by url_count descending; ties keep their relative order."""
    return sorted(matrices, key=lambda m: m.url_count, reverse=True)


def filter_by_ids(
    matrices: Sequence[UrlMatrix], matrix_ids: Optional[Iterable[str]]
) -> list[UrlMatrix]:
    """
    Select matrices by ID, preserving their order.

    An empty or missing ID list selects everything.
    """
    wanted = set(matrix_ids or ())
    if not wanted:
        return list(matrices)
    return [m for m in matrices if m.id in wanted]


def get_statistics(matrices: Sequence[UrlMatrix]) -> Statistics:
    """
    Compute aggregate statistics.

    Example:
        Counts [5, 3, 3] give total_urls=11, avg=3.67, max=5, min=3.
    """
    counts = [m.url_count for m in matrices]
    total_urls = sum(counts)

    return Statistics(
        total_matrices=len(matrices),
        total_urls=total_urls,
        avg_urls_per_matrix=_mean(total_urls, len(counts)),
        max_urls_in_matrix=max(counts, default=0),
        min_urls_in_matrix=min(counts, default=0),
        domains=[m.label for m in matrices],
    )


def _mean(total: int, count: int) -> float:
    """Mean rounded to two decimals, ties rounding up."""
    if not count:
        return 0
    mean = (Decimal(total) / count).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return float(mean)
