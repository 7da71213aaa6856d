"""Tests for settings loading and validation."""

from __future__ import annotations

import pytest

from cookieguard.schemas.settings import DetectorSettings, Settings, SettingsError, load_settings


def _write(tmp_path, text, name="cookieguard.yaml"):
    p = tmp_path / name
    p.write_text(text)
    return p


class TestDefaults:
    def test_no_path_gives_defaults(self):
        s = load_settings(None)
        assert s == Settings()
        assert s.detector.banner.min_width == 100
        assert s.detector.banner.min_height == 50
        assert s.detector.context_min_length == 10
        assert s.detector.information_min_keywords == 4
        assert s.detector.prominence_min_factors == 2
        assert s.browser.initial_delay_ms == 2000
        assert s.report.authority_name == "Datatilsynet"

    def test_empty_file_gives_defaults(self, tmp_path):
        assert load_settings(_write(tmp_path, "")) == Settings()


class TestLoading:
    def test_partial_override(self, tmp_path):
        p = _write(tmp_path, """
detector:
  banner:
    min_height: 30
  information_min_keywords: 3
browser:
  max_passes: 4
""")
        s = load_settings(p)
        assert s.detector.banner.min_height == 30
        assert s.detector.banner.min_width == 100
        assert s.detector.information_min_keywords == 3
        assert s.browser.max_passes == 4

    def test_extra_keywords(self, tmp_path):
        p = _write(tmp_path, """
detector:
  extra_keywords:
    reject: ["ablehnen", "refuser"]
""")
        s = load_settings(p)
        assert s.detector.extra_keywords == {"reject": ["ablehnen", "refuser"]}

    def test_unknown_keyword_set(self, tmp_path):
        p = _write(tmp_path, "detector:\n  extra_keywords:\n    rejections: [nope]\n")
        with pytest.raises(SettingsError, match="rejections"):
            load_settings(p)

    def test_out_of_range_value(self, tmp_path):
        p = _write(tmp_path, "detector:\n  prominence_min_factors: 5\n")
        with pytest.raises(SettingsError):
            load_settings(p)

    def test_invalid_yaml(self, tmp_path):
        p = _write(tmp_path, "detector: [unclosed\n")
        with pytest.raises(SettingsError, match="Invalid YAML"):
            load_settings(p)

    def test_top_level_must_be_mapping(self, tmp_path):
        p = _write(tmp_path, "- a\n- b\n")
        with pytest.raises(SettingsError, match="mapping"):
            load_settings(p)

    def test_missing_file(self, tmp_path):
        with pytest.raises(SettingsError, match="Cannot read"):
            load_settings(tmp_path / "nope.yaml")


def test_settings_error_is_value_error():
    assert issubclass(SettingsError, ValueError)


def test_detector_settings_validator():
    with pytest.raises(ValueError):
        DetectorSettings(extra_keywords={"bogus": ["x"]})
