"""Tests for the exception hierarchy."""

import pytest

from tiered_vpc_cdk.exceptions import (
    AddressExhaustionError,
    ConfigurationError,
    PartitionError,
    TieredVpcCdkError,
    ValidationError,
)


class TestTieredVpcCdkError:
    """Test suite for the base exception."""

    def test_message_only(self) -> None:
        error = TieredVpcCdkError("Configuration file is empty")

        assert str(error) == "Configuration file is empty"
        assert error.context == {}

    def test_message_with_context(self) -> None:
        error = AddressExhaustionError("Network number does not fit", newbits=2, netnum=4)

        assert error.message == "Network number does not fit"
        assert error.context == {"newbits": 2, "netnum": 4}
        assert str(error) == "Network number does not fit (newbits=2, netnum=4)"

    @pytest.mark.parametrize(
        "error_class",
        [ValidationError, ConfigurationError, PartitionError, AddressExhaustionError],
    )
    def test_hierarchy(self, error_class: type) -> None:
        assert issubclass(error_class, TieredVpcCdkError)

        with pytest.raises(TieredVpcCdkError):
            raise error_class("failed")
