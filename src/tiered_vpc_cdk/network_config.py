"""Network configuration loaded from config.yaml.

config.yaml holds one block per deployment environment, keyed by an
upper-case name::

    DEV:
      account: "123456789012"
      region: us-east-1
      vpc:
        name: core
        cidr: 10.0.0.0/16
        newbits: 4
      tags:
        Environment: dev
"""
import ipaddress
from pathlib import Path
from typing import Annotated, Any

import pydantic
import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import ConfigurationError
from .logger import get_logger
from .partition import Tier
from .project_settings import DEFAULT_TIER_SUFFIXES

logger = get_logger(__name__)


class NetworkConfig(BaseModel):
    """Inputs of the tiered VPC."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: Annotated[str, Field(min_length=1)]
    cidr: str
    newbits: Annotated[int, Field(ge=1, le=28)] = 4
    ipv6_newbits: Annotated[int, Field(ge=1, le=8)] = 8
    max_azs: Annotated[int, Field(ge=1)] = 3
    availability_zones: list[str] | None = None

    public_suffix: Annotated[str, Field(min_length=1)] = DEFAULT_TIER_SUFFIXES[Tier.PUBLIC]
    protected_suffix: Annotated[str, Field(min_length=1)] = DEFAULT_TIER_SUFFIXES[Tier.PROTECTED]
    private_suffix: Annotated[str, Field(min_length=1)] = DEFAULT_TIER_SUFFIXES[Tier.PRIVATE]

    enable_dns_support: bool = True
    enable_dns_hostnames: bool = True
    protected_routing: bool = False

    tags: dict[str, str] = Field(default_factory=dict)

    @field_validator("cidr")
    @classmethod
    def validate_cidr(cls, v: str) -> str:
        """Require an IPv4 network; normalize it to its network address."""
        try:
            network = ipaddress.ip_network(v, strict=False)
        except ValueError as e:
            raise ValueError(f"invalid CIDR block: {v}") from e
        if network.version != 4:
            raise ValueError(f"VPC CIDR block must be IPv4: {v}")
        return str(network)

    @field_validator("availability_zones")
    @classmethod
    def validate_availability_zones(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        if not v:
            raise ValueError("availability_zones must not be empty")
        if len(set(v)) != len(v):
            raise ValueError(f"availability_zones must be unique: {v}")
        return v

    def suffix(self, tier: Tier) -> str:
        """Naming suffix configured for a tier."""
        return {
            Tier.PUBLIC: self.public_suffix,
            Tier.PROTECTED: self.protected_suffix,
            Tier.PRIVATE: self.private_suffix,
        }[tier]


class EnvironmentConfig(BaseModel):
    """One deployment environment block of config.yaml."""

    model_config = ConfigDict(frozen=True)

    account: Annotated[str, Field(min_length=1)]
    region: Annotated[str, Field(min_length=1)]
    vpc: NetworkConfig
    tags: dict[str, str] = Field(default_factory=dict)

    @field_validator("account", mode="before")
    @classmethod
    def validate_account(cls, v: Any) -> Any:
        """YAML reads unquoted account ids as integers."""
        if isinstance(v, int):
            return f"{v:012d}"
        return v


def load_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config.yaml

    Returns:
        Loaded configuration dictionary

    Raises:
        ConfigurationError: If the file is missing, empty or not valid YAML
    """
    if not config_path.exists():
        raise ConfigurationError(
            "Configuration file not found. Please create config.yaml in the project root.",
            path=config_path,
        )

    try:
        with open(config_path) as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file: {e}", path=config_path) from e

    if not config:
        raise ConfigurationError("Configuration file is empty", path=config_path)
    if not isinstance(config, dict):
        raise ConfigurationError("Configuration file must contain a mapping", path=config_path)

    logger.debug("config_loaded", path=str(config_path), environments=list(config))
    return config


def load_environment_config(config: dict[str, Any], environment: str) -> EnvironmentConfig:
    """Validate and return the configuration block of one environment.

    Args:
        config: Full configuration dictionary
        environment: Environment name (e.g., 'DEV')

    Returns:
        Validated environment configuration

    Raises:
        ConfigurationError: If environment config is missing or invalid
    """
    if environment not in config:
        available = [k for k in config.keys() if isinstance(k, str) and k.isupper()]
        raise ConfigurationError(
            f"Environment '{environment}' not found in config.yaml",
            available=", ".join(available),
        )

    try:
        return EnvironmentConfig.model_validate(config[environment])
    except pydantic.ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration for {environment}:\n{e}",
            environment=environment,
        ) from e
