"""Configuration management using Pydantic.

This module provides type-safe configuration with validation.
Settings are automatically loaded from .env file without needing load_dotenv().
"""

from enum import Enum
from pathlib import Path
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

# Find .env file in project root (parent of src/)
_PACKAGE_DIR = Path(__file__).parent
_PROJECT_ROOT = _PACKAGE_DIR.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"
_CONFIG_FILE = _PROJECT_ROOT / "config.yaml"


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class TracingConfig(BaseModel):
    """OpenTelemetry tracing configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    endpoint: Annotated[str, Field(min_length=1)] = "http://localhost:4317"
    service_name: Annotated[str, Field(min_length=1)] = "tiered_vpc_cdk"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings are loaded from:
    1. Environment variables (highest priority)
    2. .env file in project root (if it exists)
    3. Default values (lowest priority)

    The .env file is located at: <project_root>/.env
    """

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Basic settings
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False
    log_level: LogLevel = LogLevel.INFO

    # Application metadata
    app_name: str = "Tiered VPC CDK"
    app_version: str = "0.1.0"

    # Deployment target: key of the environment block in config.yaml
    deploy_environment: Annotated[str, Field(min_length=1)] = "DEV"
    config_path: Path = _CONFIG_FILE

    # Tracing
    tracing: TracingConfig = Field(default_factory=TracingConfig)

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: Any) -> Environment:
        """Validate and convert environment string."""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator("deploy_environment", mode="before")
    @classmethod
    def validate_deploy_environment(cls, v: Any) -> Any:
        """Environment blocks in config.yaml are upper-case."""
        if isinstance(v, str):
            return v.upper()
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.environment == Environment.TESTING
