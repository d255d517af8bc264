"""
cadence.config - YAML config loading, profile merging, validation.

Handles loading cadence.yaml, applying profile defaults, and validating
all analysis parameters.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from cadence.exceptions import ConfigError

CONFIG_FILENAME = "cadence.yaml"


class AnalysisConfig(BaseModel):
    """Resolved analysis parameters.

    Field names are snake_case; camelCase keys (``sampleRateHz``) are
    accepted as well so JSON request bodies can be passed straight through.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    profile: str = "default"

    sample_rate_hz: int = Field(default=16000, gt=0)
    high_pass_hz: float = Field(default=70.0, gt=0.0)

    frame_win_sec: float = Field(default=0.025, gt=0.0)
    frame_hop_sec: float = Field(default=0.01, gt=0.0)

    percentile_norm: float = Field(default=0.95, gt=0.0, le=1.0)
    hotspot_multiplier: float = Field(default=1.2, gt=0.0)
    hotspot_min_dur_sec: float = Field(default=0.2, gt=0.0)
    hotspot_window_sec: float = Field(default=1.0, gt=0.0)

    pitch_min_hz: float = Field(default=75.0, gt=0.0)
    pitch_max_hz: float = Field(default=300.0, gt=0.0)
    voicing_threshold: float = Field(default=0.6, ge=0.0, le=1.0)
    pitch_stride: int = Field(default=2, ge=1)

    eos_window_sec: float = Field(default=0.4, gt=0.0)
    segment_gap_sec: float = Field(default=0.4, gt=0.0)

    pause_medium_min_sec: float = Field(default=0.6, gt=0.0)
    pause_long_min_sec: float = Field(default=1.5, gt=0.0)

    tempo_window_sec: float = Field(default=5.0, gt=0.0)
    wpm_window_sec: float = Field(default=5.0, gt=0.0)

    parallel: bool = False

    @field_validator("profile")
    @classmethod
    def validate_profile(cls, v: str) -> str:
        if not v:
            raise ValueError("profile must not be empty")
        return v

    @model_validator(mode="after")
    def validate_ranges(self) -> AnalysisConfig:
        if self.pitch_min_hz >= self.pitch_max_hz:
            raise ValueError("pitch_min_hz must be below pitch_max_hz")
        if self.pause_medium_min_sec >= self.pause_long_min_sec:
            raise ValueError("pause_medium_min_sec must be below pause_long_min_sec")
        if self.high_pass_hz >= self.sample_rate_hz / 2:
            raise ValueError("high_pass_hz must be below the Nyquist frequency")
        if self.frame_hop_sec > self.frame_win_sec:
            raise ValueError("frame_hop_sec must not exceed frame_win_sec")
        return self


BUILTIN_PROFILES: dict[str, dict[str, Any]] = {
    "default": {},
    "fast": {
        "pitch_stride": 4,
        "parallel": True,
    },
    "high-voice": {
        "pitch_min_hz": 120.0,
        "pitch_max_hz": 450.0,
    },
}


def load_profile(name: str, profiles_dir: Path | None = None) -> dict[str, Any]:
    """Load a profile by name, checking custom profiles first."""
    if profiles_dir and profiles_dir.exists():
        profile_file = profiles_dir / f"{name}.yaml"
        if profile_file.exists():
            with open(profile_file) as f:
                return yaml.safe_load(f) or {}
    if name in BUILTIN_PROFILES:
        return BUILTIN_PROFILES[name].copy()
    raise ConfigError(f"Unknown profile: {name}")


def merge_config(overrides: dict[str, Any], profile: dict[str, Any]) -> dict[str, Any]:
    """Merge overrides with profile defaults. Overrides take precedence."""
    merged = profile.copy()
    for key, value in overrides.items():
        if value is not None:
            merged[key] = value
    merged.pop("inherits", None)
    return merged


def build_config(
    overrides: dict[str, Any] | None = None,
    profile: str | None = None,
    profiles_dir: Path | None = None,
) -> AnalysisConfig:
    """Resolve a profile plus overrides into a validated AnalysisConfig.

    Raises:
        ConfigError: If the profile is unknown or a value fails validation
    """
    raw = dict(overrides or {})
    profile_name = profile or raw.get("profile", "default")
    profile_values = load_profile(profile_name, profiles_dir)

    if "inherits" in profile_values:
        parent = load_profile(profile_values["inherits"], profiles_dir)
        profile_values = merge_config(profile_values, parent)

    merged = merge_config(raw, profile_values)
    merged["profile"] = profile_name

    try:
        return AnalysisConfig(**merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_config(path: Path, profile: str | None = None) -> AnalysisConfig:
    """Load and validate configuration from a YAML file or a directory holding one."""
    config_file = path / CONFIG_FILENAME if path.is_dir() else path
    if not config_file.exists():
        raise FileNotFoundError(f"No config file found at {config_file}")

    try:
        with open(config_file) as f:
            raw_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse {config_file}: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError(f"{config_file} must contain a mapping")

    profiles_dir = config_file.parent / "profiles"
    return build_config(
        raw_config,
        profile=profile,
        profiles_dir=profiles_dir if profiles_dir.exists() else None,
    )


def create_default_config(profile: str = "default") -> dict[str, Any]:
    """Create a default config dict, with every tunable spelled out."""
    config = AnalysisConfig(**merge_config({}, load_profile(profile)), profile=profile)
    return config.model_dump()


def write_config(config: dict[str, Any], path: Path) -> None:
    """Write configuration to a YAML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)
