"""Configuration management for Pack Platform."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pack_platform.core.exceptions import ConfigurationError
from pack_platform.core.models import DeploymentSpec

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Platform configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="PACK_PLATFORM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # External tool
    tool_binary: str = Field("nomad-pack", description="Pack tool executable")
    command_timeout_seconds: Optional[float] = Field(
        None,
        description="Kill a tool invocation after this many seconds (unset waits forever)",
    )

    # Status table format
    status_row_index: int = Field(2, description="Line of status output holding the pack row")
    status_delimiter: str = Field("|", description="Field delimiter of the status table")

    # Storage
    state_dir: str = Field(".pack-platform", description="Directory for local deployment records")

    # Observability
    log_level: str = Field("INFO")
    log_format: str = Field("console")

    @field_validator("status_row_index")
    @classmethod
    def validate_row_index(cls, v: int) -> int:
        if v < 0:
            raise ValueError("status_row_index must be >= 0")
        return v

    @field_validator("status_delimiter")
    @classmethod
    def validate_delimiter(cls, v: str) -> str:
        if not v:
            raise ValueError("status_delimiter cannot be empty")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "console"):
            raise ValueError("log_format must be 'json' or 'console'")
        return v

    @property
    def state_path(self) -> Path:
        return Path(self.state_dir)


def load_deployment_spec(path: Path) -> DeploymentSpec:
    """Load and validate a deployment config file (YAML or JSON).

    JSON is a subset of YAML, so both go through the YAML loader.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw: Any = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Deployment config not found: {path}")
    except OSError as e:
        raise ConfigurationError(f"Deployment config {path} cannot be read: {e}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Deployment config is not valid YAML: {e}")

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Deployment config must be a mapping, got {type(raw).__name__}")

    return deployment_spec_from_mapping(raw)


def deployment_spec_from_mapping(data: Dict[str, Any]) -> DeploymentSpec:
    try:
        return DeploymentSpec.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(f"Invalid deployment config: {problems}")
