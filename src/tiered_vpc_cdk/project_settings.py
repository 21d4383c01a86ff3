"""Project-wide settings and constants.

Constants in CAPS, naming helpers in one place so stacks, exports and tags
agree on how things are called.
"""
from .partition import Tier


# Project naming - single source of truth
PROJECT_NAME = "tiered-vpc"

# Default per-tier naming suffixes, overridable from config.yaml
DEFAULT_TIER_SUFFIXES = {
    Tier.PUBLIC: "public",
    Tier.PROTECTED: "protected",
    Tier.PRIVATE: "private",
}


def stack_name(environment: str, component: str) -> str:
    """Generate deterministic stack name.

    Args:
        environment: Environment name (e.g., 'dev')
        component: Component name (e.g., 'vpc')

    Returns:
        Formatted stack name
    """
    return f"{PROJECT_NAME}-{environment}-{component}"


def resource_name(name: str, resource_type: str = "", suffix: str = "") -> str:
    """Generate deterministic resource name from the module name.

    Args:
        name: Module name (the VPC ``name`` setting)
        resource_type: Type or tier of resource (e.g., 'public', 'vpc-id')
        suffix: Optional suffix for additional specificity (e.g., the zone)

    Returns:
        Formatted resource name
    """
    return "-".join(part for part in (name, resource_type, suffix) if part)
