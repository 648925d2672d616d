"""
Tab ingestion processor.

Turns raw tab descriptors into normalized, deduplicated URL entries.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Optional, Union

from pydantic import ValidationError

from tab_matrix.errors import InvalidUrlError, require_sequence
from tab_matrix.models import ORIGIN_TAB, RawTab, TabMetadata, UrlEntry
from tab_matrix.normalization import extract_domain, normalize_url

from .deduplication import deduplicate

logger = logging.getLogger(__name__)

RawTabLike = Union[RawTab, Mapping]


def process(raw_tabs: Sequence[RawTabLike]) -> list[UrlEntry]:
    """
    Normalize and deduplicate a batch of raw tabs.

    Args:
        raw_tabs: Tabs from a tab source (models or plain mappings)

    Returns:
        Unique entries in order of first appearance

    Raises:
        InvalidInputError: If raw_tabs is not a sequence
    """
    require_sequence(raw_tabs, "raw_tabs")
    logger.info("Processing URLs (count=%d)", len(raw_tabs))

    normalized = normalize_tabs(raw_tabs)
    unique = deduplicate(normalized)

    logger.info(
        "Processing complete (original=%d, normalized=%d, deduplicated=%d, removed=%d)",
        len(raw_tabs),
        len(normalized),
        len(unique),
        len(raw_tabs) - len(unique),
    )
    return unique


def normalize_tabs(raw_tabs: Sequence[RawTabLike]) -> list[UrlEntry]:
    """
    Convert raw tabs into URL entries.

    Tabs that fail validation or normalization are dropped with a warning;
    the rest of the batch is still processed.

    Raises:
        InvalidInputError: If raw_tabs is not a sequence
    """
    require_sequence(raw_tabs, "raw_tabs")

    entries = []
    for raw in raw_tabs:
        tab = _coerce_tab(raw)
        if tab is None:
            continue

        try:
            entries.append(to_entry(tab))
        except InvalidUrlError as e:
            logger.warning("Failed to normalize URL %r: %s", tab.url, e.detail or e)
            continue

    return entries


def to_entry(tab: RawTab) -> UrlEntry:
    """
    Build the entry for a single tab.

    Raises:
        InvalidUrlError: If the tab URL cannot be normalized
    """
    normalized_url = normalize_url(tab.url)
    return UrlEntry(
        url=tab.url,
        normalized_url=normalized_url,
        domain=extract_domain(normalized_url),
        origin=ORIGIN_TAB,
        metadata=TabMetadata(
            title=tab.title or "",
            tab_id=tab.tab_id,
            window_id=tab.window_id,
        ),
    )


def _coerce_tab(raw: object) -> Optional[RawTab]:
    if isinstance(raw, RawTab):
        return raw
    if not isinstance(raw, Mapping):
        logger.warning("Invalid RawTab structure: %r", raw)
        return None
    try:
        return RawTab.model_validate(raw)
    except ValidationError as e:
        logger.warning("Invalid RawTab structure %r: %s", raw, e.error_count())
        return None
