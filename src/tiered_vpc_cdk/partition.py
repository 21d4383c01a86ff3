"""Subnet address partitioning.

Each tier of subnets is carved from the same parent block. A subnet's position
in the parent is ``tier_position * zone_count + zone_index``, so the public
tier takes indexes ``0..Z-1``, the protected tier ``Z..2Z-1`` and the private
tier ``2Z..3Z-1``. Every subnet is therefore disjoint from every other one.
The same index selects the subnet's IPv6 block inside the VPC's IPv6 range.

Everything here is a pure function of its arguments.

Example:
    >>> partition("10.0.0.0/16", Tier.PROTECTED, zone_index=1, zone_count=3, extra_bits=4)
    '10.0.64.0/20'
"""

import ipaddress
from enum import Enum
from typing import Sequence

from pydantic import BaseModel, ConfigDict

from .exceptions import AddressExhaustionError, PartitionError

# Amazon-provided VPC IPv6 blocks are always /56
AMAZON_IPV6_PREFIXLEN = 56


class Tier(str, Enum):
    """Subnet tier, ordered by position in the parent address space."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"

    @property
    def position(self) -> int:
        """Zero-based tier index used by the partitioning scheme."""
        return list(Tier).index(self)

    @property
    def map_public_ip_on_launch(self) -> bool:
        return self is Tier.PUBLIC


class SubnetPlan(BaseModel):
    """Address assignment for one subnet."""

    model_config = ConfigDict(frozen=True)

    tier: Tier
    zone: str
    zone_index: int
    index: int
    cidr_block: str
    ipv6_cidr_block: str | None = None

    @property
    def map_public_ip_on_launch(self) -> bool:
        return self.tier.map_public_ip_on_launch


def cidr_subnet(prefix: str, newbits: int, netnum: int) -> str:
    """Calculate a sub-block of an IPv4 or IPv6 network.

    Host bits set in ``prefix`` are ignored, as with Terraform ``cidrsubnet``.

    Args:
        prefix: Parent network in CIDR notation
        newbits: Number of bits to extend the prefix length by
        netnum: Which of the ``2**newbits`` sub-blocks to return

    Returns:
        Sub-block in CIDR notation

    Raises:
        PartitionError: If prefix is not a valid network
        AddressExhaustionError: If the sub-block does not fit in the parent
    """
    try:
        network = ipaddress.ip_network(prefix, strict=False)
    except ValueError as e:
        raise PartitionError(f"Invalid network prefix: {e}", prefix=prefix) from e

    if newbits < 0:
        raise PartitionError("newbits must not be negative", newbits=newbits)

    new_prefixlen = network.prefixlen + newbits
    if new_prefixlen > network.max_prefixlen:
        raise AddressExhaustionError(
            "Insufficient address space to extend prefix",
            prefix=prefix,
            newbits=newbits,
        )
    if not 0 <= netnum < 2**newbits:
        raise AddressExhaustionError(
            "Network number does not fit in the extended prefix",
            prefix=prefix,
            newbits=newbits,
            netnum=netnum,
        )

    base = int(network.network_address) + (netnum << (network.max_prefixlen - new_prefixlen))
    return str(type(network)((base, new_prefixlen)))


def partition_index(tier: Tier, zone_index: int, zone_count: int) -> int:
    """Position of a subnet among all 3 x zone_count subnets of the network.

    Raises:
        PartitionError: If zone_count or zone_index is out of range
    """
    if zone_count < 1:
        raise PartitionError("At least one availability zone is required", zone_count=zone_count)
    if not 0 <= zone_index < zone_count:
        raise PartitionError(
            "Zone index out of range",
            zone_index=zone_index,
            zone_count=zone_count,
        )
    return tier.position * zone_count + zone_index


def partition(
    parent_cidr: str,
    tier: Tier,
    zone_index: int,
    zone_count: int,
    extra_bits: int,
) -> str:
    """Sub-block of ``parent_cidr`` for one subnet of one tier."""
    return cidr_subnet(parent_cidr, extra_bits, partition_index(tier, zone_index, zone_count))


def ipv6_cidr_bits(ipv6_newbits: int, parent_prefixlen: int = AMAZON_IPV6_PREFIXLEN) -> int:
    """Host bits of an IPv6 subnet, as CloudFormation ``Fn::Cidr`` expects them.

    A /56 VPC block split with 8 new bits yields /64 subnets, i.e. 64 host bits.
    """
    new_prefixlen = parent_prefixlen + ipv6_newbits
    if ipv6_newbits < 1 or new_prefixlen > 128:
        raise AddressExhaustionError(
            "Insufficient IPv6 address space to extend prefix",
            parent_prefixlen=parent_prefixlen,
            ipv6_newbits=ipv6_newbits,
        )
    return 128 - new_prefixlen


def plan_subnets(
    cidr: str,
    zones: Sequence[str],
    newbits: int,
    ipv6_cidr: str | None = None,
    ipv6_newbits: int = 8,
) -> list[SubnetPlan]:
    """Plan every subnet of the network, ordered by tier then zone.

    Args:
        cidr: IPv4 block of the network
        zones: Availability zone names, one subnet per tier in each
        newbits: Bits added to the IPv4 prefix for each subnet
        ipv6_cidr: IPv6 block of the network if already known
        ipv6_newbits: Bits added to the IPv6 prefix for each subnet

    Returns:
        3 x len(zones) subnet plans

    Raises:
        PartitionError: If no zones are given
        AddressExhaustionError: If the subnets do not fit in either block
    """
    zone_count = len(zones)
    if zone_count and len(Tier) * zone_count > 2**ipv6_newbits:
        raise AddressExhaustionError(
            "Too many subnets for the IPv6 block",
            subnet_count=len(Tier) * zone_count,
            ipv6_newbits=ipv6_newbits,
        )

    plans = []
    for tier in Tier:
        for zone_index, zone in enumerate(zones):
            index = partition_index(tier, zone_index, zone_count)
            plans.append(
                SubnetPlan(
                    tier=tier,
                    zone=zone,
                    zone_index=zone_index,
                    index=index,
                    cidr_block=cidr_subnet(cidr, newbits, index),
                    ipv6_cidr_block=(
                        cidr_subnet(ipv6_cidr, ipv6_newbits, index) if ipv6_cidr else None
                    ),
                )
            )

    if not plans:
        raise PartitionError("At least one availability zone is required", zone_count=zone_count)
    return plans


def plans_for_tier(plans: Sequence[SubnetPlan], tier: Tier) -> list[SubnetPlan]:
    """Plans of one tier, in zone order."""
    return [plan for plan in plans if plan.tier is tier]
