"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.display import generate_time_slots
from .domain.timezone_projector import (
    COMMON_TIMEZONES,
    TimezonePolicy,
    TimezoneProjector,
    is_valid_timezone,
)


class DisplayConfig(BaseModel):
    """Settings for rendering slots and time pickers."""
    use_12_hour: bool = False
    picker_start_hour: int = 7
    picker_end_hour: int = 19
    picker_interval_minutes: int = 30

    @field_validator("picker_start_hour", "picker_end_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 23."""
        if not 0 <= v <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {v}")
        return v

    @field_validator("picker_interval_minutes")
    @classmethod
    def validate_interval(cls, value: int) -> int:
        """Picker steps must tile an hour exactly."""
        if value <= 0 or 60 % value:
            raise ValueError(f"picker_interval_minutes must divide 60, got {value}")
        return value

    @model_validator(mode="after")
    def validate_hours_order(self) -> "DisplayConfig":
        """Ensure the picker opens before it closes."""
        if self.picker_end_hour <= self.picker_start_hour:
            raise ValueError("picker_end_hour must be later than picker_start_hour")
        return self

    def picker_times(self) -> List[str]:
        """Time picker entries for the configured window."""
        return generate_time_slots(
            start_hour=self.picker_start_hour,
            end_hour=self.picker_end_hour,
            interval_minutes=self.picker_interval_minutes,
        )


class AppConfig(BaseModel):
    """Application configuration."""
    business_timezone: str = "UTC"
    timezone_policy: TimezonePolicy = TimezonePolicy.UTC_FALLBACK
    timezone_cache_seconds: int = 300
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    common_timezones: List[str] = Field(default_factory=lambda: list(COMMON_TIMEZONES))

    @field_validator("business_timezone")
    @classmethod
    def validate_business_timezone(cls, value: str) -> str:
        """Reject names missing from the timezone database."""
        if not is_valid_timezone(value):
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @field_validator("timezone_cache_seconds")
    @classmethod
    def validate_cache_seconds(cls, value: int) -> int:
        if value < 0:
            raise ValueError("timezone_cache_seconds must not be negative")
        return value

    @field_validator("common_timezones")
    @classmethod
    def validate_common_timezones(cls, value: List[str]) -> List[str]:
        """Ensure every listed timezone exists and drop duplicates."""
        invalid = [name for name in value if not is_valid_timezone(name)]
        if invalid:
            raise ValueError(f"Unknown timezone(s) in common_timezones: {invalid}")
        # Preserve order while removing duplicates
        seen: set[str] = set()
        deduped: List[str] = []
        for name in value:
            if name not in seen:
                deduped.append(name)
                seen.add(name)
        return deduped

    def build_projector(self) -> TimezoneProjector:
        """Create a projector honouring the configured timezone policy."""
        return TimezoneProjector(policy=self.timezone_policy)

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
