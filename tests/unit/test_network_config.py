"""Unit tests for config.yaml loading and validation."""
from pathlib import Path

import pytest
import yaml

from tiered_vpc_cdk.exceptions import ConfigurationError
from tiered_vpc_cdk.network_config import (
    EnvironmentConfig,
    NetworkConfig,
    load_config,
    load_environment_config,
)
from tiered_vpc_cdk.partition import Tier

pytestmark = pytest.mark.unit


class TestNetworkConfig:
    """Test suite for NetworkConfig."""

    def test_defaults(self):
        network = NetworkConfig(name="core", cidr="10.0.0.0/16")

        assert network.newbits == 4
        assert network.ipv6_newbits == 8
        assert network.max_azs == 3
        assert network.availability_zones is None
        assert network.enable_dns_support is True
        assert network.enable_dns_hostnames is True
        assert network.protected_routing is False
        assert network.tags == {}

    def test_default_suffixes(self):
        network = NetworkConfig(name="core", cidr="10.0.0.0/16")

        assert [network.suffix(tier) for tier in Tier] == ["public", "protected", "private"]

    def test_custom_suffixes(self):
        network = NetworkConfig(
            name="core",
            cidr="10.0.0.0/16",
            public_suffix="dmz",
            protected_suffix="app",
            private_suffix="data",
        )

        assert network.suffix(Tier.PUBLIC) == "dmz"
        assert network.suffix(Tier.PROTECTED) == "app"
        assert network.suffix(Tier.PRIVATE) == "data"

    def test_cidr_normalized(self):
        network = NetworkConfig(name="core", cidr="10.0.7.1/16")

        assert network.cidr == "10.0.0.0/16"

    @pytest.mark.parametrize("cidr", ["not-a-cidr", "10.0.0.0/33", "2600:1f18::/56"])
    def test_invalid_cidr(self, cidr):
        with pytest.raises(ValueError):
            NetworkConfig(name="core", cidr=cidr)

    @pytest.mark.parametrize(
        "field, value",
        [
            ("newbits", 0),
            ("newbits", 29),
            ("ipv6_newbits", 9),
            ("max_azs", 0),
            ("name", ""),
            ("public_suffix", ""),
            ("availability_zones", []),
            ("availability_zones", ["us-east-1a", "us-east-1a"]),
        ],
    )
    def test_invalid_values(self, field, value):
        kwargs = {"name": "core", "cidr": "10.0.0.0/16", field: value}

        with pytest.raises(ValueError):
            NetworkConfig(**kwargs)

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValueError):
            NetworkConfig(name="core", cidr="10.0.0.0/16", nat_gateways=2)


class TestEnvironmentConfig:
    """Test suite for EnvironmentConfig."""

    def test_valid(self, environment_data):
        config = EnvironmentConfig.model_validate(environment_data)

        assert config.account == "123456789012"
        assert config.region == "us-east-1"
        assert config.vpc.name == "core"
        assert config.tags["Environment"] == "test"

    def test_integer_account_is_zero_padded(self, environment_data):
        environment_data["account"] = 12345678901

        config = EnvironmentConfig.model_validate(environment_data)

        assert config.account == "012345678901"

    def test_missing_vpc(self, environment_data):
        del environment_data["vpc"]

        with pytest.raises(ValueError):
            EnvironmentConfig.model_validate(environment_data)


class TestLoadConfig:
    """Test suite for load_config."""

    def test_load(self, config_file):
        config = load_config(config_file)

        assert list(config) == ["TEST"]

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(tmp_path / "config.yaml")

        assert "not found" in str(exc_info.value)

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        with pytest.raises(ConfigurationError, match="empty"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("DEV: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump(["DEV", "PROD"]))

        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(path)


class TestLoadEnvironmentConfig:
    """Test suite for load_environment_config."""

    def test_load(self, environment_data):
        config = load_environment_config({"TEST": environment_data}, "TEST")

        assert isinstance(config, EnvironmentConfig)
        assert config.vpc.cidr == "10.0.0.0/16"

    def test_unknown_environment(self, environment_data):
        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config({"TEST": environment_data, "PROD": {}}, "STAGING")

        assert exc_info.value.context["available"] == "TEST, PROD"

    def test_invalid_environment_wrapped(self, environment_data):
        environment_data["vpc"]["cidr"] = "bogus"

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config({"TEST": environment_data}, "TEST")

        assert exc_info.value.context == {"environment": "TEST"}
        assert "cidr" in str(exc_info.value)
