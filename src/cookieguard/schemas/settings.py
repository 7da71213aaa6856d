"""Pydantic models for the cookieguard.yaml settings file."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from cookieguard.keywords import unknown_set_names

log = logging.getLogger(__name__)


class SettingsError(ValueError):
    """Raised for unreadable or invalid settings files."""


class BannerSettings(BaseModel):
    # Elements at or below these sizes are not treated as banners
    min_width: float = 100.0
    min_height: float = 50.0


class DetectorSettings(BaseModel):
    banner: BannerSettings = Field(default_factory=BannerSettings)
    # Unclassified pre-ticked boxes count only when their label context is longer than this
    context_min_length: int = Field(default=10, ge=0)
    # Distinct information keywords a region needs to count as informative
    information_min_keywords: int = Field(default=4, ge=1)
    # Background brightness gap (0-255 scale) that makes colors "different"
    brightness_threshold: float = Field(default=50.0, ge=0)
    # Prominence factors (color, size, weight) needed to flag the accept button
    prominence_min_factors: int = Field(default=2, ge=1, le=3)
    # Extra phrases appended to named keyword sets
    extra_keywords: dict[str, list[str]] = Field(default_factory=dict)

    @field_validator("extra_keywords")
    @classmethod
    def _known_sets(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        unknown = unknown_set_names(v)
        if unknown:
            raise ValueError(f"unknown keyword set(s): {', '.join(unknown)}")
        return v


class BrowserSettings(BaseModel):
    headless: bool = True
    timeout_ms: int = Field(default=15000, ge=1000)
    viewport_width: int = 1280
    viewport_height: int = 800
    # Settle time before the first capture
    initial_delay_ms: int = Field(default=2000, ge=0)
    # Re-capture cadence while no banner has been found
    recheck_interval_ms: int = Field(default=500, ge=50)
    # Stop watching for a late banner after this long
    watch_window_ms: int = Field(default=10000, ge=0)
    max_passes: int = Field(default=2, ge=1)


class ReportSettings(BaseModel):
    authority_name: str = "Datatilsynet"
    authority_email: str = "post@datatilsynet.no"
    authority_url: str = "https://www.datatilsynet.no/"


class Settings(BaseModel):
    detector: DetectorSettings = Field(default_factory=DetectorSettings)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    report: ReportSettings = Field(default_factory=ReportSettings)


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a YAML file; defaults when path is None."""
    if path is None:
        return Settings()
    try:
        raw = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise SettingsError(f"Cannot read settings file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in {path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise SettingsError(f"Settings file {path} must contain a mapping at the top level")
    try:
        settings = Settings.model_validate(raw)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings in {path}:\n{e}") from e
    log.info("Loaded settings from %s", path)
    return settings
