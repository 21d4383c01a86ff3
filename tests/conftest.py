"""Shared pytest fixtures for Tiered VPC CDK."""

from pathlib import Path
from typing import Any, Callable

import aws_cdk as cdk
import pytest
import yaml

from tiered_vpc_cdk.network_config import EnvironmentConfig
from tiered_vpc_cdk.stacks.vpc_stack import TieredVpcStack

ZONES = ["us-east-1a", "us-east-1b", "us-east-1c"]


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch) -> None:
    """Reset environment variables and settings cache for each test."""
    # Clear settings cache to prevent test pollution
    from tiered_vpc_cdk.settings import get_settings
    get_settings.cache_clear()
    for name in ("ENVIRONMENT", "DEPLOY_ENVIRONMENT", "LOG_LEVEL", "DEBUG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def network_data() -> dict[str, Any]:
    """The vpc block of a config.yaml environment."""
    return {
        "name": "core",
        "cidr": "10.0.0.0/16",
        "newbits": 4,
        "availability_zones": list(ZONES),
        "tags": {"Team": "network"},
    }


@pytest.fixture
def environment_data(network_data) -> dict[str, Any]:
    """One environment block of config.yaml."""
    return {
        "account": "123456789012",
        "region": "us-east-1",
        "vpc": network_data,
        "tags": {"Environment": "test", "Project": "tiered-vpc"},
    }


@pytest.fixture
def config_file(tmp_path: Path, environment_data) -> Path:
    """config.yaml with a single TEST environment."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"TEST": environment_data}))
    return path


@pytest.fixture
def make_stack(environment_data) -> Callable[..., TieredVpcStack]:
    """Factory building a stack from environment_data with vpc overrides."""

    def _make(**vpc_overrides: Any) -> TieredVpcStack:
        data = {**environment_data, "vpc": {**environment_data["vpc"], **vpc_overrides}}
        config = EnvironmentConfig.model_validate(data)
        return TieredVpcStack(
            cdk.App(),
            "TestTieredVpcStack",
            config=config,
            env=cdk.Environment(account=config.account, region=config.region),
        )

    return _make
