"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import time
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.calendar import TimeOptions, parse_time


class ApiConfig(BaseModel):
    """Backend API settings."""
    base_url: str = "http://localhost:8000/api"
    timeout_seconds: float = 30
    schedule_path: str = "/profile/availability/"
    schedule_update_path: str = "/profile/availability/bulk_update/"
    schedule_update_method: str = "POST"
    assignments_path: str = "/work/assignments/"

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        """Ensure the request timeout is positive."""
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value

    @field_validator("schedule_update_method")
    @classmethod
    def validate_update_method(cls, value: str) -> str:
        method = value.upper()
        if method not in {"POST", "PUT"}:
            raise ValueError(f"schedule_update_method must be POST or PUT, got {value!r}")
        return method

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got {value!r}")
        return value.rstrip("/")


class DefaultsConfig(BaseModel):
    """Default interval for new slots and batch 'mark available'."""
    start_time: str = "09:00"
    end_time: str = "17:00"

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        """Validate the value is an HH:MM time of day."""
        parse_time(v)
        return v

    @model_validator(mode="after")
    def validate_order(self) -> "DefaultsConfig":
        """Ensure the default interval opens before it closes."""
        if parse_time(self.end_time) <= parse_time(self.start_time):
            raise ValueError("end_time must be later than start_time")
        return self

    def get_start_time(self) -> time:
        return parse_time(self.start_time)

    def get_end_time(self) -> time:
        return parse_time(self.end_time)


class TimeOptionsConfig(BaseModel):
    """Bounds and granularity of the selectable times of day."""
    first: str = "06:00"
    last: str = "22:00"
    step_minutes: int = 30

    @field_validator("first", "last")
    @classmethod
    def validate_time(cls, v: str) -> str:
        parse_time(v)
        return v

    @field_validator("step_minutes")
    @classmethod
    def validate_step(cls, value: int) -> int:
        if not 1 <= value <= 240:
            raise ValueError(f"step_minutes must be between 1 and 240, got {value}")
        return value

    @model_validator(mode="after")
    def validate_bounds(self) -> "TimeOptionsConfig":
        if parse_time(self.last) <= parse_time(self.first):
            raise ValueError("last must be later than first")
        return self

    def build(self) -> TimeOptions:
        return TimeOptions(
            first=parse_time(self.first),
            last=parse_time(self.last),
            step_minutes=self.step_minutes,
        )


class AppConfig(BaseModel):
    """Application configuration."""
    api: ApiConfig = Field(default_factory=ApiConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    time_options: TimeOptionsConfig = Field(default_factory=TimeOptionsConfig)
    upcoming_limit: int = 5
    timezone: Optional[str] = None  # Only used to decide which date is "today"
    log_level: str = "INFO"

    @field_validator("upcoming_limit")
    @classmethod
    def validate_upcoming_limit(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("upcoming_limit must be greater than zero")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log_level: {value}")
        return level

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
