"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.exceptions import ConfigurationError
from .domain.models import ServiceSpec


class DefaultsConfig(BaseModel):
    """Default service parameters for slot generation."""
    service_duration: int = 15
    buffer_time: int = 0
    granularity: int = 15
    show_occupied: bool = False

    @field_validator("service_duration", "buffer_time")
    @classmethod
    def validate_non_negative(cls, value: int) -> int:
        """Durations cannot be negative."""
        if value < 0:
            raise ValueError(f"Duration must not be negative, got {value}")
        return value

    @field_validator("granularity")
    @classmethod
    def validate_granularity(cls, value: int) -> int:
        """Ensure the slot step is positive."""
        if value <= 0:
            raise ValueError("granularity must be greater than zero")
        return value

    @model_validator(mode="after")
    def validate_total_duration(self) -> "DefaultsConfig":
        """A booking has to occupy some time."""
        if self.service_duration + self.buffer_time <= 0:
            raise ValueError("service_duration + buffer_time must be greater than zero")
        return self

    def to_service_spec(
        self,
        service_duration: int | None = None,
        buffer_time: int | None = None,
        granularity: int | None = None,
    ) -> ServiceSpec:
        """Build a ServiceSpec, letting explicit values override the defaults."""
        return ServiceSpec(
            service_duration=self.service_duration if service_duration is None else service_duration,
            buffer_time=self.buffer_time if buffer_time is None else buffer_time,
            granularity=self.granularity if granularity is None else granularity,
        )


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Europe/Berlin"
    data_file: Path | None = None
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)

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
            ConfigurationError: If config is invalid
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
            raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        # Relative data files are resolved next to the config file
        if config.data_file is not None and not config.data_file.is_absolute():
            config.data_file = config_path.parent / config.data_file

        return config

    @classmethod
    def load_or_default(cls, config_path: Path) -> "AppConfig":
        """Load the config file if present, otherwise use built-in defaults."""
        if not config_path.exists():
            return cls()
        return cls.load_from_yaml(config_path)


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
