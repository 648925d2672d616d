"""Unit tests for tab sources."""

import json

import pytest

from tab_matrix.errors import ErrorKind, TabCollectionError
from tab_matrix.ingestion import JsonFileTabSource, StaticTabSource, tab_statistics
from tab_matrix.models import RawTab

BROWSER_TABS = [
    {"id": 1, "windowId": 10, "url": "https://github.com/a", "title": "A", "active": True},
    {"id": 2, "windowId": 10, "url": "chrome://settings", "title": "Settings"},
    {"id": 3, "windowId": 10, "url": "https://github.com/b", "title": "B"},
    {"id": 4, "windowId": 20, "url": "https://docs.python.org/3/", "active": True},
    {"id": 5, "windowId": 20, "title": "Loading"},
]


@pytest.fixture
def tabs_file(tmp_path):
    path = tmp_path / "tabs.json"
    path.write_text(json.dumps(BROWSER_TABS))
    return path


class TestJsonFileTabSource:
    """Test suite for JsonFileTabSource."""

    def test_collects_valid_tabs(self, tabs_file):
        """Test system pages and URL-less tabs are filtered out."""
        tabs = JsonFileTabSource(tabs_file).collect_tabs()

        assert [t.url for t in tabs] == [
            "https://github.com/a",
            "https://github.com/b",
            "https://docs.python.org/3/",
        ]
        assert tabs[0] == RawTab(url="https://github.com/a", title="A", tab_id=1, window_id=10)
        assert tabs[2].title == ""

    def test_tabs_object_layout(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text(json.dumps({"tabs": BROWSER_TABS}))

        assert len(JsonFileTabSource(path).collect_tabs()) == 3

    def test_current_window(self, tabs_file):
        tabs = JsonFileTabSource(tabs_file, current_window=20).collect_tabs()
        assert [t.tab_id for t in tabs] == [4]

    def test_active_only(self, tabs_file):
        tabs = JsonFileTabSource(tabs_file, active_only=True).collect_tabs()
        assert [t.tab_id for t in tabs] == [1, 4]

    def test_missing_file(self, tmp_path):
        with pytest.raises(TabCollectionError) as exc_info:
            JsonFileTabSource(tmp_path / "missing.json").collect_tabs()
        assert exc_info.value.kind is ErrorKind.TAB_COLLECTION_FAILED

    @pytest.mark.parametrize("content", ["{not json", '{"windows": []}', '"tabs"'])
    def test_malformed_file(self, tmp_path, content):
        path = tmp_path / "tabs.json"
        path.write_text(content)

        with pytest.raises(TabCollectionError):
            JsonFileTabSource(path).collect_tabs()

    def test_wrongly_typed_fields_dropped(self, tmp_path, caplog):
        """Test a tab with a non-string title is skipped instead of aborting."""
        path = tmp_path / "tabs.json"
        path.write_text(
            json.dumps(
                [
                    {"url": "https://a.com/x", "title": 123},
                    {"url": "https://b.com/y", "windowId": {"nested": True}},
                    {"url": "https://c.com/z", "title": "ok"},
                ]
            )
        )

        tabs = JsonFileTabSource(path).collect_tabs()

        assert [t.url for t in tabs] == ["https://c.com/z"]
        assert "Invalid tab structure" in caplog.text

    def test_only_wrongly_typed_tabs(self, tmp_path):
        path = tmp_path / "tabs.json"
        path.write_text(json.dumps([{"url": "https://a.com/x", "title": 123}]))

        with pytest.raises(TabCollectionError, match="No valid tabs found"):
            JsonFileTabSource(path).collect_tabs()

    def test_no_valid_tabs(self, tmp_path):
        """Test a file with only system pages is a collection failure."""
        path = tmp_path / "tabs.json"
        path.write_text(json.dumps([{"url": "about:blank"}, {"url": "chrome://newtab"}]))

        with pytest.raises(TabCollectionError, match="No valid tabs found"):
            JsonFileTabSource(path).collect_tabs()


class TestStaticTabSource:
    """Test suite for StaticTabSource."""

    def test_filters(self):
        tabs = StaticTabSource(BROWSER_TABS + [None, RawTab(url="edge://flags")]).collect_tabs()
        assert len(tabs) == 3

    def test_empty_is_allowed(self):
        assert StaticTabSource([]).collect_tabs() == []


class TestTabStatistics:
    """Test suite for tab_statistics."""

    def test_counts(self):
        stats = tab_statistics(BROWSER_TABS)

        assert stats == {
            "total_tabs": 5,
            "valid_tabs": 3,
            "invalid_tabs": 2,
            "window_count": 2,
            "unique_domains": 2,
        }

    def test_empty(self):
        assert tab_statistics([])["total_tabs"] == 0
