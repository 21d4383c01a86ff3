"""Logger utilities and helpers.

Provides convenience functions for logging throughout the application.
"""

from functools import wraps
from time import perf_counter
from typing import Any, Callable, Iterable, TypeVar

import structlog

from .exceptions import TieredVpcCdkError

F = TypeVar("F", bound=Callable[..., Any])


def get_logger(name: str | None = None, **initial_context: Any) -> Any:
    """Get a structured logger instance.

    Args:
        name: Logger name (defaults to calling module)
        **initial_context: Key-value pairs bound to every event

    Returns:
        Configured structlog logger

    Example:
        >>> from tiered_vpc_cdk.logger import get_logger
        >>> logger = get_logger(__name__, vpc="core")
        >>> logger.info("subnet_planned", tier="public", cidr_block="10.0.0.0/20")
    """
    logger = structlog.get_logger(name)
    return logger.bind(**initial_context) if initial_context else logger


def log_function_call(logger: Any | None = None) -> Callable[[F], F]:
    """Decorator to log function calls with arguments and execution time.

    Errors from this package are logged with their context fields, so a
    failed partition shows the offending prefix and netnum next to the event.

    Args:
        logger: Optional logger instance (creates one if not provided)

    Returns:
        Decorated function

    Example:
        >>> @log_function_call()
        ... def build_app() -> None:
        ...     pass
    """

    def decorator(func: F) -> F:
        nonlocal logger
        if logger is None:
            logger = get_logger(func.__module__)

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start = perf_counter()
            logger.info(
                "function_call_start",
                function=func.__name__,
                args_count=len(args),
                kwargs_keys=list(kwargs.keys()),
            )

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                context = e.context if isinstance(e, TieredVpcCdkError) else {}
                logger.error(
                    "function_call_error",
                    function=func.__name__,
                    error=str(e),
                    error_type=type(e).__name__,
                    duration_ms=round((perf_counter() - start) * 1000, 2),
                    **{f"error_{key}": str(value) for key, value in context.items()},
                )
                raise

            logger.info(
                "function_call_success",
                function=func.__name__,
                duration_ms=round((perf_counter() - start) * 1000, 2),
            )
            return result

        return wrapper  # type: ignore

    return decorator


class LogContext:
    """Context manager for adding structured context to logs.

    Example:
        >>> from tiered_vpc_cdk.logger import get_logger, LogContext
        >>> logger = get_logger(__name__)
        >>> with LogContext(logger, vpc="core", zone="us-east-1a") as ctx_logger:
        ...     ctx_logger.info("subnet_planned")
    """

    def __init__(self, logger: Any, **context: Any) -> None:
        self.logger = logger
        self.context = context
        self.bound_logger: Any = None

    def __enter__(self) -> Any:
        self.bound_logger = self.logger.bind(**self.context)
        return self.bound_logger

    def __exit__(self, *args: Any) -> None:
        self.bound_logger = None


def log_subnet_plans(logger: Any, plans: Iterable[Any]) -> int:
    """Log one ``subnet_planned`` event per plan; return how many were logged."""
    count = 0
    for plan in plans:
        with LogContext(logger, zone=plan.zone, tier=plan.tier.value) as log:
            log.debug(
                "subnet_planned",
                index=plan.index,
                cidr_block=plan.cidr_block,
                map_public_ip_on_launch=plan.map_public_ip_on_launch,
            )
        count += 1
    return count


__all__ = ["get_logger", "log_function_call", "log_subnet_plans", "LogContext"]
