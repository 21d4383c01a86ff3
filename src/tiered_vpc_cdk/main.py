"""Main module for Tiered VPC CDK.

Builds the CDK app from config.yaml and the process settings.
"""

import sys
from pathlib import Path

import aws_cdk as cdk

from .exceptions import TieredVpcCdkError
from .logger import get_logger, log_function_call
from .logging_config import configure_logging
from .network_config import load_config, load_environment_config
from .project_settings import stack_name
from .settings import get_settings
from .stacks.vpc_stack import TieredVpcStack
from .tracing import setup_tracing

logger = get_logger(__name__)


@log_function_call(logger)
def build_app(
    config_path: Path | None = None,
    environment: str | None = None,
    app: cdk.App | None = None,
    outdir: str | None = None,
) -> cdk.App:
    """Create the CDK app with the tiered VPC stack of one environment.

    Args:
        config_path: Path to config.yaml (defaults to settings.config_path)
        environment: config.yaml block to deploy (defaults to settings.deploy_environment)
        app: Existing CDK app to add the stack to
        outdir: Cloud assembly directory of a new app (defaults to CDK_OUTDIR, set by the CDK CLI)

    Returns:
        CDK app, ready to synth

    Raises:
        ConfigurationError: If config.yaml is missing or invalid
        AddressExhaustionError: If the subnets do not fit in the VPC
    """
    settings = get_settings()
    configure_logging(
        log_level=settings.log_level.value,
        json_logs=settings.is_production,
        include_context=True,
    )
    if settings.tracing.enabled:
        setup_tracing(
            service_name=settings.tracing.service_name,
            otlp_endpoint=settings.tracing.endpoint,
            service_version=settings.app_version,
        )

    environment = (environment or settings.deploy_environment).upper()
    config = load_config(config_path or settings.config_path)
    env_config = load_environment_config(config, environment)

    app = app or cdk.App(outdir=outdir)

    # Stack naming convention: tiered-vpc-{environment}-vpc
    TieredVpcStack(
        app,
        stack_name(environment.lower(), "vpc"),
        config=env_config,
        env=cdk.Environment(account=env_config.account, region=env_config.region),
    )

    # Apply environment tags to all stacks
    for key, value in env_config.tags.items():
        cdk.Tags.of(app).add(key, value)

    return app


def main(outdir: str | None = None) -> int:
    """Synthesize the app; return a process exit code."""
    try:
        app = build_app(outdir=outdir)
    except TieredVpcCdkError as e:
        logger.error("synth_failed", error=str(e), error_type=type(e).__name__)
        print(f"\n❌ Configuration Error: {e}\n", file=sys.stderr)
        return 1

    app.synth()
    return 0


if __name__ == "__main__":
    sys.exit(main())
