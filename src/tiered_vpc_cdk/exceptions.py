"""Custom exception hierarchy and error handling patterns.

This module defines application-specific exceptions with context support.
"""

from typing import Any


class TieredVpcCdkError(Exception):
    """Base exception for Tiered VPC CDK.

    All custom exceptions should inherit from this class.
    Supports additional context via keyword arguments.
    """

    def __init__(self, message: str, **context: Any) -> None:
        """Initialize exception with message and context.

        Args:
            message: Error message
            **context: Additional context as key-value pairs
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """String representation including context."""
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message


class ValidationError(TieredVpcCdkError):
    """Raised when validation fails."""

    pass


class ConfigurationError(TieredVpcCdkError):
    """Raised when configuration is invalid."""

    pass


class PartitionError(ValidationError):
    """Raised when a subnet position cannot be mapped onto the network."""

    pass


class AddressExhaustionError(PartitionError):
    """Raised when a sub-block does not fit in the parent address space."""

    pass
