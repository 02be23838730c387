"""
Configuration management using Pydantic Settings.
"""

from pathlib import Path
from typing import Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import TimelineConfig


class TimelineSettings(BaseModel):
    """Visible hours and grid resolution of the day view."""
    start_hour: int = 7
    end_hour: int = 19
    interval_minutes: int = 30
    min_width_pct: float = 2.0  # Floor for rendering very short bookings

    @field_validator("start_hour")
    @classmethod
    def validate_start_hour(cls, value: int) -> int:
        """Validate start hour is between 0 and 23."""
        if not 0 <= value <= 23:
            raise ValueError(f"start_hour must be between 0 and 23, got {value}")
        return value

    @field_validator("end_hour")
    @classmethod
    def validate_end_hour(cls, value: int) -> int:
        """Validate end hour is between 1 and 24."""
        if not 1 <= value <= 24:
            raise ValueError(f"end_hour must be between 1 and 24, got {value}")
        return value

    @field_validator("interval_minutes")
    @classmethod
    def validate_interval(cls, value: int) -> int:
        """Ensure the grid interval is positive."""
        if value <= 0:
            raise ValueError("interval_minutes must be greater than zero")
        return value

    @field_validator("min_width_pct")
    @classmethod
    def validate_min_width(cls, value: float) -> float:
        if not 0 <= value <= 100:
            raise ValueError(f"min_width_pct must be between 0 and 100, got {value}")
        return value

    @model_validator(mode="after")
    def validate_hours_order(self) -> "TimelineSettings":
        """Ensure the visible window opens before it closes."""
        if self.end_hour <= self.start_hour:
            raise ValueError("end_hour must be later than start_hour")
        return self

    def to_timeline_config(self) -> TimelineConfig:
        return TimelineConfig(
            start_hour=self.start_hour,
            end_hour=self.end_hour,
            interval_minutes=self.interval_minutes,
        )


class ApiSettings(BaseModel):
    """Connection details for the operations REST API."""
    base_url: str
    token: Optional[str] = None
    timeout_seconds: float = 30

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got {value!r}")
        return value.rstrip("/")


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: Optional[str] = None  # IANA name; None uses the machine's local zone
    timeline: TimelineSettings = Field(default_factory=TimelineSettings)
    api: Optional[ApiSettings] = None
    fixture_path: Optional[Path] = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: Optional[str]) -> Optional[str]:
        """Ensure the timezone is a known IANA identifier."""
        if value is None:
            return value
        try:
            pendulum.timezone(value)
        except (ValueError, KeyError) as exc:
            raise ValueError(f"Unknown timezone: {value!r}") from exc
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Relative ``fixture_path`` values are resolved against the config
        file's directory.

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

        config = cls(**data)
        if config.fixture_path is not None and not config.fixture_path.is_absolute():
            config = config.model_copy(
                update={"fixture_path": config_path.parent / config.fixture_path}
            )
        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    config_path = Path.cwd() / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
