"""
Configuration models validated with pydantic and loaded from YAML.
"""

import os
from datetime import time
from pathlib import Path

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import SlotDuration, parse_time

TOKEN_ENV_VAR = "DOCTORSCHEDULE_API_TOKEN"


class ApiConfig(BaseModel):
    """Connection settings for the availability API."""
    base_url: str = "http://localhost:5002/api"
    token: str = ""
    timeout_seconds: float = 30.0

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        """Ensure the request timeout is positive."""
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value

    def resolve_token(self) -> str:
        """Token from the config file, falling back to the environment."""
        return self.token or os.environ.get(TOKEN_ENV_VAR, "")


class ScheduleDefaults(BaseModel):
    """Hours used to seed a new override when the template day is inactive."""
    start_time: str = "09:00"
    end_time: str = "17:00"
    slot_duration: int = 30

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        """Validate HH:MM format."""
        parse_time(v)
        return v

    @field_validator("slot_duration")
    @classmethod
    def validate_slot_duration(cls, v: int) -> int:
        if v not in {member.value for member in SlotDuration}:
            raise ValueError(f"slot_duration must be one of 15, 30, 45, 60, got {v}")
        return v

    @model_validator(mode="after")
    def validate_hours_order(self) -> "ScheduleDefaults":
        """Ensure the default window opens before it closes."""
        if self.get_start_time() >= self.get_end_time():
            raise ValueError("end_time must be later than start_time")
        return self

    def get_start_time(self) -> time:
        return parse_time(self.start_time)

    def get_end_time(self) -> time:
        return parse_time(self.end_time)

    def get_slot_duration(self) -> SlotDuration:
        return SlotDuration(self.slot_duration)


class AppConfig(BaseModel):
    """Application configuration."""
    api: ApiConfig = Field(default_factory=ApiConfig)
    defaults: ScheduleDefaults = Field(default_factory=ScheduleDefaults)
    timezone: str = "Asia/Karachi"
    horizon_days: int = 30
    log_level: str = "WARNING"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("horizon_days")
    @classmethod
    def validate_horizon(cls, value: int) -> int:
        if not 1 <= value <= 90:
            raise ValueError(f"horizon_days must be between 1 and 90, got {value}")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
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

    @classmethod
    def load_or_default(cls, config_path: Path) -> "AppConfig":
        """Load the config file if present, otherwise use built-in defaults."""
        if config_path.exists():
            return cls.load_from_yaml(config_path)
        return cls()


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
