"""Unit tests for the command line interface."""

import json

import pytest

from tab_matrix.cli import main
from tab_matrix.export import read_export


@pytest.fixture
def tabs_file(tmp_path):
    path = tmp_path / "tabs.json"
    path.write_text(
        json.dumps(
            [
                {"id": 1, "windowId": 1, "url": "https://github.com/a"},
                {"id": 2, "windowId": 1, "url": "https://github.com/a/#top"},
                {"id": 3, "windowId": 2, "url": "https://example.org/"},
            ]
        )
    )
    return path


class TestAnalyzeCommand:
    """Tests for `tab-matrix analyze`."""

    def test_prints_summary(self, tabs_file, capsys):
        assert main(["analyze", str(tabs_file)]) == 0

        out = capsys.readouterr().out
        assert "matrix-domain-github-com" in out
        assert "Unique URLs: 2" in out
        assert "Matrices:    2" in out

    def test_writes_export(self, tabs_file, tmp_path):
        output_dir = tmp_path / "out"

        code = main(
            [
                "analyze",
                str(tabs_file),
                "--format",
                "txt-simple",
                "--output-dir",
                str(output_dir),
                "--no-compress",
            ]
        )

        assert code == 0
        [written] = list(output_dir.iterdir())
        assert written.suffix == ".txt"
        assert read_export(written).splitlines() == [
            "https://github.com/a",
            "https://example.org/",
        ]

    def test_writes_compressed_partial_export(self, tabs_file, tmp_path):
        output_dir = tmp_path / "out"

        code = main(
            [
                "analyze",
                str(tabs_file),
                "--format",
                "json",
                "--matrix-id",
                "matrix-domain-example-org",
                "--output-dir",
                str(output_dir),
                "--compress",
            ]
        )

        assert code == 0
        [written] = list(output_dir.iterdir())
        assert written.name.endswith(".json.zst")
        document = json.loads(read_export(written))
        assert document["metadata"]["exportType"] == "partial"

    def test_current_window(self, tabs_file, capsys):
        assert main(["analyze", str(tabs_file), "--current-window", "2"]) == 0
        assert "Matrices:    1" in capsys.readouterr().out

    def test_negative_window_id(self, tmp_path, capsys):
        path = tmp_path / "negative.json"
        path.write_text(
            json.dumps(
                [
                    {"id": 1, "windowId": -1, "url": "https://a.com/"},
                    {"id": 2, "windowId": 3, "url": "https://b.com/"},
                ]
            )
        )

        assert main(["analyze", str(path), "--current-window", "-1"]) == 0
        out = capsys.readouterr().out
        assert "matrix-domain-a-com" in out
        assert "matrix-domain-b-com" not in out

    def test_only_malformed_tabs(self, tmp_path, capsys):
        """Test a file whose only tab is malformed fails cleanly."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"url": "https://a.com/x", "title": 123}]))

        assert main(["analyze", str(path)]) == 1
        assert "TAB_COLLECTION_FAILED" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main(["analyze", str(tmp_path / "missing.json")]) == 1
        assert "TAB_COLLECTION_FAILED" in capsys.readouterr().err

    def test_unknown_matrix(self, tabs_file, tmp_path, capsys):
        code = main(
            [
                "analyze",
                str(tabs_file),
                "--format",
                "json",
                "--matrix-id",
                "nonexistent",
                "--output-dir",
                str(tmp_path),
            ]
        )

        assert code == 1
        assert "MATRIX_NOT_FOUND" in capsys.readouterr().err

    def test_rejects_unknown_format(self, tabs_file):
        with pytest.raises(SystemExit):
            main(["analyze", str(tabs_file), "--format", "xml"])
