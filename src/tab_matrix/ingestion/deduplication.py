"""Order-preserving removal of entries that share a canonical URL."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from tab_matrix.errors import require_sequence
from tab_matrix.models import UrlEntry

logger = logging.getLogger(__name__)


def deduplicate(entries: Sequence[UrlEntry]) -> list[UrlEntry]:
    """Keep the first entry for each ``normalized_url``, in input order."""
    require_sequence(entries, "entries")

    seen: set[str] = set()
    unique: list[UrlEntry] = []

    for entry in entries:
        if entry.normalized_url in seen:
            continue
        seen.add(entry.normalized_url)
        unique.append(entry)

    duplicates = len(entries) - len(unique)
    if duplicates > 0:
        logger.info(f"Removed {duplicates} duplicate URL(s)")

    return unique
