"""
Tests for ClinoteSettings: defaults, environment overrides and JSON config files.
"""

import json

import pytest

from clinote.core.config import ClinoteSettings
from clinote.core.enums import BundleMode, CsvLayout
from clinote.core.exceptions import ConfigurationError


def write_config(tmp_path, payload, name="clinote.json"):
    path = tmp_path / name
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return path


class TestDefaults:
    def test_default_values(self, settings):
        assert settings.default_bundle_mode == BundleMode.SINGLE
        assert settings.bundle_delimiter_pattern == r"-{3,}"
        assert settings.enable_fallback_heuristics is False
        assert settings.heuristic_min_score == 2
        assert settings.heuristic_proximity_chars == 80
        assert settings.glob_default == "*.txt"
        assert settings.csv_layout == CsvLayout.WIDE
        assert settings.report_filename == "batch_report.json"
        assert settings.log_level == "INFO"

    def test_load_without_file_uses_defaults(self):
        assert ClinoteSettings.load().to_dict() == ClinoteSettings(_env_file=None).to_dict()


class TestEnvironment:
    def test_env_overrides_default(self, monkeypatch):
        monkeypatch.setenv("CLINOTE_ENABLE_FALLBACK_HEURISTICS", "true")
        monkeypatch.setenv("CLINOTE_DEFAULT_BUNDLE_MODE", "Delimiter")
        settings = ClinoteSettings.load()
        assert settings.enable_fallback_heuristics is True
        assert settings.default_bundle_mode == BundleMode.DELIMITER

    def test_file_overrides_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CLINOTE_HEURISTIC_MIN_SCORE", "5")
        path = write_config(tmp_path, {"heuristic_min_score": 3})
        assert ClinoteSettings.load(path).heuristic_min_score == 3

    def test_invalid_env_value_is_a_configuration_error(self, monkeypatch):
        monkeypatch.setenv("CLINOTE_CSV_LAYOUT", "diagonal")
        with pytest.raises(ConfigurationError):
            ClinoteSettings.load()


class TestConfigFile:
    def test_loads_values(self, tmp_path):
        path = write_config(
            tmp_path,
            {"default_bundle_mode": "structural", "csv_layout": "long", "log_level": "debug"},
        )
        settings = ClinoteSettings.load(path)
        assert settings.default_bundle_mode == BundleMode.STRUCTURAL
        assert settings.csv_layout == CsvLayout.LONG
        assert settings.log_level == "DEBUG"

    def test_explicit_overrides_win(self, tmp_path):
        path = write_config(tmp_path, {"glob_default": "*.md"})
        assert ClinoteSettings.load(path, glob_default="**/*.txt").glob_default == "**/*.txt"

    def test_unknown_keys_are_ignored(self, tmp_path):
        path = write_config(tmp_path, {"not_a_setting": 1})
        assert ClinoteSettings.load(path).glob_default == "*.txt"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            ClinoteSettings.load(tmp_path / "missing.json")

    def test_malformed_json(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            ClinoteSettings.load(write_config(tmp_path, "{not json"))

    def test_non_object_json(self, tmp_path):
        with pytest.raises(ConfigurationError, match="JSON object"):
            ClinoteSettings.load(write_config(tmp_path, [1, 2]))

    @pytest.mark.parametrize(
        "payload",
        [
            {"bundle_delimiter_pattern": "(unclosed"},
            {"bundle_delimiter_pattern": "-*"},
            {"default_bundle_mode": "pages"},
            {"heuristic_min_score": 0},
            {"heuristic_proximity_chars": -1},
            {"glob_default": "  "},
            {"log_level": "loud"},
        ],
    )
    def test_invalid_values(self, tmp_path, payload):
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            ClinoteSettings.load(write_config(tmp_path, payload))

    def test_error_names_the_setting(self, tmp_path):
        with pytest.raises(ConfigurationError) as info:
            ClinoteSettings.load(write_config(tmp_path, {"heuristic_min_score": 0}))
        assert "heuristic_min_score" in str(info.value)


class TestSummary:
    def test_summary_lists_settings(self, settings):
        text = settings.summary()
        assert text.startswith("clinote configuration")
        assert "fallback heuristics:     disabled" in text
        assert "batch_report.json" in text

    def test_to_dict_uses_plain_values(self, settings):
        data = settings.to_dict()
        assert data["default_bundle_mode"] == "single"
        assert data["csv_layout"] == "wide"
