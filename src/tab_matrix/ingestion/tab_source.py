"""
Tab sources.

A tab source enumerates open browser tabs and hands them to the pipeline as
``RawTab`` models, filtering out tabs without a URL and browser-internal
pages. Sources are injected into the calling layer; the core never imports
a browser API.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Optional, Protocol, Sequence

from pydantic import ValidationError

from tab_matrix.errors import TabCollectionError
from tab_matrix.models import RawTab, TabIdentifier
from tab_matrix.normalization import extract_domain, should_process_url

logger = logging.getLogger(__name__)


class TabSource(Protocol):
    """Anything that can supply the current set of tabs."""

    def collect_tabs(self) -> list[RawTab]:
        """
        Collect tabs.

        Raises:
            TabCollectionError: If tabs cannot be collected
        """
        ...


class StaticTabSource:
    """Serve a fixed list of tabs (API requests, tests)."""

    def __init__(self, tabs: Iterable[Any]):
        self._tabs = list(tabs)

    def collect_tabs(self) -> list[RawTab]:
        valid = [tab for tab in (_to_raw_tab(t) for t in self._tabs) if tab is not None]
        logger.info(
            "Collected %d valid tab(s) out of %d total", len(valid), len(self._tabs)
        )
        return valid


class JsonFileTabSource:
    """
    Load tabs from a JSON export of the browser session.

    Accepted layouts:
    - a JSON array of tab objects
    - an object with a ``tabs`` array

    Tab objects use browser field names: ``url``, ``title``, ``id`` or
    ``tabId``, ``windowId``, ``active``.
    """

    def __init__(
        self,
        path: Path | str,
        current_window: Optional[TabIdentifier] = None,
        active_only: bool = False,
    ):
        """
        Initialize the source.

        Args:
            path: Path to the JSON file
            current_window: Only collect tabs from this window ID
            active_only: Only collect active tabs (one per window)
        """
        self.path = Path(path)
        self.current_window = current_window
        self.active_only = active_only

    def read_tabs(self) -> list[dict]:
        """
        Read raw tab objects from disk, before any filtering.

        Raises:
            TabCollectionError: If the file is missing or malformed
        """
        if not self.path.exists():
            raise TabCollectionError(f"Tab collection failed: file not found: {self.path}")

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise TabCollectionError(f"Tab collection failed: {e}") from e

        if isinstance(data, Mapping):
            data = data.get("tabs")
        if not isinstance(data, list):
            raise TabCollectionError(
                "Tab collection failed: expected a JSON array of tabs or an object with 'tabs'"
            )

        return [tab for tab in data if isinstance(tab, Mapping)]

    def collect_tabs(self) -> list[RawTab]:
        """
        Collect valid tabs from the file.

        Raises:
            TabCollectionError: If the file cannot be read or no valid tab remains
        """
        logger.info("Collecting tabs from %s", self.path)
        tabs = self.read_tabs()
        logger.info(f"Found {len(tabs)} total tab(s)")

        if self.current_window is not None:
            tabs = [t for t in tabs if _window_of(t) == self.current_window]
        if self.active_only:
            tabs = [t for t in tabs if t.get("active")]

        raw_tabs = [tab for tab in (_to_raw_tab(t) for t in tabs) if tab is not None]
        logger.info(
            "Collected %d valid tab(s) out of %d total", len(raw_tabs), len(tabs)
        )

        if not raw_tabs:
            raise TabCollectionError("No valid tabs found")

        return raw_tabs


def is_valid_tab(tab: Mapping) -> bool:
    """Check that a tab has a URL and is not a browser-internal page."""
    url = tab.get("url")
    if not url:
        logger.warning("Tab without URL (tab_id=%s)", _tab_id_of(tab))
        return False

    if not should_process_url(url):
        logger.info("Skipping system URL %s", url)
        return False

    return True


def tab_statistics(tabs: Sequence[Mapping]) -> dict:
    """
    Summarize a raw tab listing.

    Returns:
        Dictionary with total/valid/invalid tab counts, window count and the
        number of unique hosts among valid tabs
    """
    valid = [t for t in tabs if is_valid_tab(t)]
    windows = {_window_of(t) for t in valid}
    domains = {d for d in (extract_domain(t["url"]) for t in valid) if d}

    return {
        "total_tabs": len(tabs),
        "valid_tabs": len(valid),
        "invalid_tabs": len(tabs) - len(valid),
        "window_count": len(windows),
        "unique_domains": len(domains),
    }


def _to_raw_tab(tab: Any) -> Optional[RawTab]:
    if isinstance(tab, RawTab):
        return tab if should_process_url(tab.url) else None
    if not isinstance(tab, Mapping) or not is_valid_tab(tab):
        return None
    try:
        return RawTab(
            url=tab["url"],
            title=tab.get("title") or "",
            tab_id=_tab_id_of(tab),
            window_id=_window_of(tab),
        )
    except ValidationError as e:
        logger.warning("Invalid tab structure %r: %s", tab, e.error_count())
        return None


def _tab_id_of(tab: Mapping) -> Optional[TabIdentifier]:
    tab_id = tab.get("tabId", tab.get("tab_id"))
    return tab_id if tab_id is not None else tab.get("id")


def _window_of(tab: Mapping) -> Optional[TabIdentifier]:
    window_id = tab.get("windowId")
    return window_id if window_id is not None else tab.get("window_id")
