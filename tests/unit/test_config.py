#!/usr/bin/env python3
"""
Test suite for settings loading
"""

import pytest

from flagcleaner.utils.config import CONFIG_FILE_NAME, CleanerSettings, load_settings
from flagcleaner.utils.errors import ConfigError


class TestCleanerSettings:
    """Test defaults, validation and overrides."""

    def test_defaults(self):
        settings = CleanerSettings()
        assert settings.source_extensions == [".swift", ".m", ".mm", ".h"]
        assert "Pods" in settings.excluded_dirs
        assert settings.use_ripgrep is True
        assert settings.max_workers == 4
        assert settings.condition_precedence == "sequential"

    def test_extensions_get_a_dot(self):
        settings = CleanerSettings(swift_extensions=["swift"], objc_extensions=[".m", "h"])
        assert settings.source_extensions == [".swift", ".m", ".h"]

    def test_unknown_precedence(self):
        with pytest.raises(ValueError):
            CleanerSettings(condition_precedence="c")

    def test_overrides_skip_none(self):
        settings = CleanerSettings().with_overrides(max_workers=None, condition_precedence="swift")
        assert settings.max_workers == 4
        assert settings.condition_precedence == "swift"

    def test_invalid_override(self):
        with pytest.raises(ConfigError):
            CleanerSettings().with_overrides(max_workers=0)


class TestLoadSettings:
    """Test reading YAML files."""

    def test_no_file_gives_defaults(self, tmp_path):
        assert load_settings(search_root=tmp_path) == CleanerSettings()

    def test_file_in_search_root(self, tmp_path):
        (tmp_path / CONFIG_FILE_NAME).write_text(
            "use_ripgrep: false\nexcluded_dirs: [Vendor]\nreport_limit: 5\n"
        )
        settings = load_settings(search_root=tmp_path)
        assert settings.use_ripgrep is False
        assert settings.excluded_dirs == ["Vendor"]
        assert settings.report_limit == 5

    def test_explicit_file_wins(self, tmp_path):
        (tmp_path / CONFIG_FILE_NAME).write_text("max_workers: 2\n")
        explicit = tmp_path / "custom.yaml"
        explicit.write_text("max_workers: 8\n")
        assert load_settings(explicit, search_root=tmp_path).max_workers == 8

    def test_empty_file(self, tmp_path):
        config = tmp_path / "empty.yaml"
        config.write_text("")
        assert load_settings(config) == CleanerSettings()

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "missing.yaml")

    @pytest.mark.parametrize(
        "text",
        [
            "- just\n- a list\n",
            "unknown_key: 1\n",
            "condition_precedence: c\n",
            "max_workers: [1\n",
        ],
    )
    def test_invalid_files(self, tmp_path, text):
        config = tmp_path / "bad.yaml"
        config.write_text(text)
        with pytest.raises(ConfigError):
            load_settings(config)
