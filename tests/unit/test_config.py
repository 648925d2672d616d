"""Unit tests for configuration."""

from pathlib import Path

from tab_matrix.config import DEFAULT_TRACKING_PARAMS, get_config, reset_config
from tab_matrix.normalization import normalize_url


class TestConfig:
    """Tests for settings loading."""

    def test_defaults(self):
        config = get_config()

        assert config.normalization.tracking_params == DEFAULT_TRACKING_PARAMS
        assert "chrome://" in config.tabs.invalid_url_prefixes
        assert config.export.output_dir == Path("./exports")
        assert config.export.filename_prefix == "tab-urls"
        assert config.export.compress is False
        assert config.log_level == "INFO"

    def test_singleton(self):
        assert get_config() is get_config()

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("EXPORT_COMPRESS", "true")
        monkeypatch.setenv("EXPORT_FILENAME_PREFIX", "tabs")
        reset_config()

        config = get_config()

        assert config.export.compress is True
        assert config.export.filename_prefix == "tabs"

    def test_tracking_params_from_env(self, monkeypatch):
        """Test configured tracking parameters drive canonicalization."""
        monkeypatch.setenv("NORMALIZE_TRACKING_PARAMS", '["ref"]')
        reset_config()

        assert normalize_url("https://a.com/?ref=x&utm_source=y") == "https://a.com/?utm_source=y"
