"""
Tab ingestion pipeline.

Handles collecting tabs and processing them into normalized, unique entries.
"""

from .deduplication import deduplicate
from .processor import normalize_tabs, process, to_entry
from .tab_source import JsonFileTabSource, StaticTabSource, TabSource, tab_statistics

__all__ = [
    "deduplicate",
    "normalize_tabs",
    "process",
    "to_entry",
    "TabSource",
    "StaticTabSource",
    "JsonFileTabSource",
    "tab_statistics",
]
