"""Tiered VPC Stack.

Creates a dual-stack VPC with public, protected and private subnets in every
availability zone, an Internet Gateway, an Egress-Only Internet Gateway and a
public route table. Subnet IPv4 blocks are computed at synth time; IPv6 blocks
are selected from the Amazon-provided /56 with Fn::Cidr, since that block is
only known once the VPC exists.
"""
from aws_cdk import CfnOutput, CfnTag, Fn, Stack
from aws_cdk import aws_ec2 as ec2
from constructs import Construct

from ..logger import get_logger, log_subnet_plans
from ..network_config import EnvironmentConfig
from ..partition import SubnetPlan, Tier, ipv6_cidr_bits, plan_subnets, plans_for_tier
from ..project_settings import resource_name
from ..tracing import get_tracer

logger = get_logger(__name__)
tracer = get_tracer(__name__)

IPV4_DEFAULT_ROUTE = "0.0.0.0/0"
IPV6_DEFAULT_ROUTE = "::/0"


class TieredVpcStack(Stack):
    """VPC Stack with public/protected/private subnets and internet gateways."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        config: EnvironmentConfig,
        **kwargs,
    ) -> None:
        """Initialize Tiered VPC Stack.

        Args:
            scope: CDK app or parent stack
            construct_id: Unique identifier for this stack
            config: Validated environment configuration from config.yaml
            **kwargs: Additional stack properties
        """
        super().__init__(scope, construct_id, **kwargs)

        self.network = config.vpc
        self.nat_gateway: ec2.CfnNatGateway | None = None
        self.protected_route_table: ec2.CfnRouteTable | None = None

        with tracer.start_as_current_span("build_tiered_vpc") as span:
            zones = self._resolve_zones()
            self.subnet_plans = plan_subnets(
                self.network.cidr,
                zones,
                self.network.newbits,
                ipv6_newbits=self.network.ipv6_newbits,
            )
            span.set_attribute("vpc.name", self.network.name)
            span.set_attribute("vpc.zone_count", len(zones))
            log_subnet_plans(logger.bind(vpc=self.network.name), self.subnet_plans)

            self._build_network()
            self._build_subnets()
            self._build_gateways()
            self._build_public_routing()
            if self.network.protected_routing:
                self._build_protected_routing()
            self._build_outputs()

        logger.info(
            "vpc_stack_built",
            stack=construct_id,
            vpc=self.network.name,
            cidr=self.network.cidr,
            zones=len(zones),
            subnets=len(self.subnet_plans),
            protected_routing=self.network.protected_routing,
        )

    @property
    def public_subnets(self) -> list[ec2.CfnSubnet]:
        return self.subnets[Tier.PUBLIC]

    @property
    def protected_subnets(self) -> list[ec2.CfnSubnet]:
        return self.subnets[Tier.PROTECTED]

    @property
    def private_subnets(self) -> list[ec2.CfnSubnet]:
        return self.subnets[Tier.PRIVATE]

    def _resolve_zones(self) -> list[str]:
        """Configured zones, or the first max_azs zones the region reports."""
        if self.network.availability_zones:
            return list(self.network.availability_zones)
        zones = list(self.availability_zones[: self.network.max_azs])
        if len(zones) < self.network.max_azs:
            # Environment-agnostic stacks only see two zone tokens
            logger.warning(
                "fewer_zones_than_max_azs",
                vpc=self.network.name,
                zones=len(zones),
                max_azs=self.network.max_azs,
            )
        return zones

    def _tags(self, name: str) -> list[CfnTag]:
        """Module tags merged with the resource's Name and the Unit tag."""
        tags = {**self.network.tags, "Name": name, "Unit": self.network.name}
        return [CfnTag(key=key, value=value) for key, value in tags.items()]

    def _build_network(self) -> None:
        self.vpc = ec2.CfnVPC(
            self,
            "VPC",
            cidr_block=self.network.cidr,
            enable_dns_support=self.network.enable_dns_support,
            enable_dns_hostnames=self.network.enable_dns_hostnames,
            tags=self._tags(self.network.name),
        )

        self.ipv6_cidr_block = ec2.CfnVPCCidrBlock(
            self,
            "Ipv6CidrBlock",
            vpc_id=self.vpc.ref,
            amazon_provided_ipv6_cidr_block=True,
        )

    def _build_subnets(self) -> None:
        # Fn::Cidr splits the VPC /56 into exactly as many blocks as there are subnets
        ipv6_blocks = Fn.cidr(
            Fn.select(0, self.vpc.attr_ipv6_cidr_blocks),
            len(self.subnet_plans),
            str(ipv6_cidr_bits(self.network.ipv6_newbits)),
        )

        self.subnets: dict[Tier, list[ec2.CfnSubnet]] = {tier: [] for tier in Tier}
        for plan in self.subnet_plans:
            self.subnets[plan.tier].append(self._build_subnet(plan, ipv6_blocks))

    def _build_subnet(self, plan: SubnetPlan, ipv6_blocks: list[str]) -> ec2.CfnSubnet:
        subnet = ec2.CfnSubnet(
            self,
            f"{plan.tier.value.title()}Subnet{plan.zone_index + 1}",
            vpc_id=self.vpc.ref,
            availability_zone=plan.zone,
            cidr_block=plan.cidr_block,
            ipv6_cidr_block=Fn.select(plan.index, ipv6_blocks),
            map_public_ip_on_launch=plan.map_public_ip_on_launch,
            assign_ipv6_address_on_creation=True,
            tags=self._tags(
                resource_name(self.network.name, self.network.suffix(plan.tier), plan.zone)
            ),
        )
        subnet.add_resource_dependency(self.ipv6_cidr_block)
        return subnet

    def _build_gateways(self) -> None:
        self.internet_gateway = ec2.CfnInternetGateway(
            self,
            "InternetGateway",
            tags=self._tags(self.network.name),
        )

        self.internet_gateway_attachment = ec2.CfnVPCGatewayAttachment(
            self,
            "InternetGatewayAttachment",
            vpc_id=self.vpc.ref,
            internet_gateway_id=self.internet_gateway.ref,
        )

        self.egress_only_internet_gateway = ec2.CfnEgressOnlyInternetGateway(
            self,
            "EgressOnlyInternetGateway",
            vpc_id=self.vpc.ref,
            tags=self._tags(self.network.name),
        )

    def _build_public_routing(self) -> None:
        self.public_route_table = self._route_table(Tier.PUBLIC)

        self.public_routes = [
            ec2.CfnRoute(
                self,
                "PublicDefaultRoute",
                route_table_id=self.public_route_table.ref,
                destination_cidr_block=IPV4_DEFAULT_ROUTE,
                gateway_id=self.internet_gateway.ref,
            ),
            ec2.CfnRoute(
                self,
                "PublicDefaultIpv6Route",
                route_table_id=self.public_route_table.ref,
                destination_ipv6_cidr_block=IPV6_DEFAULT_ROUTE,
                gateway_id=self.internet_gateway.ref,
            ),
        ]
        # A route to an unattached gateway fails to create
        for route in self.public_routes:
            route.add_resource_dependency(self.internet_gateway_attachment)

        self.public_route_table_associations = self._associate(
            Tier.PUBLIC, self.public_route_table
        )

    def _build_protected_routing(self) -> None:
        """NAT egress for the protected tier, IPv6 egress through the EIGW."""
        nat_eip = ec2.CfnEIP(
            self,
            "NatEip",
            domain="vpc",
            tags=self._tags(resource_name(self.network.name, "nat")),
        )
        nat_eip.add_resource_dependency(self.internet_gateway_attachment)

        self.nat_gateway = ec2.CfnNatGateway(
            self,
            "NatGateway",
            subnet_id=self.public_subnets[0].ref,
            allocation_id=nat_eip.attr_allocation_id,
            tags=self._tags(resource_name(self.network.name, "nat")),
        )

        self.protected_route_table = self._route_table(Tier.PROTECTED)
        self.protected_routes = [
            ec2.CfnRoute(
                self,
                "ProtectedDefaultRoute",
                route_table_id=self.protected_route_table.ref,
                destination_cidr_block=IPV4_DEFAULT_ROUTE,
                nat_gateway_id=self.nat_gateway.ref,
            ),
            ec2.CfnRoute(
                self,
                "ProtectedDefaultIpv6Route",
                route_table_id=self.protected_route_table.ref,
                destination_ipv6_cidr_block=IPV6_DEFAULT_ROUTE,
                egress_only_internet_gateway_id=self.egress_only_internet_gateway.ref,
            ),
        ]

        self.protected_route_table_associations = self._associate(
            Tier.PROTECTED, self.protected_route_table
        )

    def _route_table(self, tier: Tier) -> ec2.CfnRouteTable:
        return ec2.CfnRouteTable(
            self,
            f"{tier.value.title()}RouteTable",
            vpc_id=self.vpc.ref,
            tags=self._tags(resource_name(self.network.name, self.network.suffix(tier))),
        )

    def _associate(
        self, tier: Tier, route_table: ec2.CfnRouteTable
    ) -> list[ec2.CfnSubnetRouteTableAssociation]:
        """One association per subnet of the tier."""
        return [
            ec2.CfnSubnetRouteTableAssociation(
                self,
                f"{tier.value.title()}SubnetRouteTableAssociation{plan.zone_index + 1}",
                route_table_id=route_table.ref,
                subnet_id=subnet.ref,
            )
            for plan, subnet in zip(plans_for_tier(self.subnet_plans, tier), self.subnets[tier])
        ]

    def _build_outputs(self) -> None:
        """Identifiers for sibling stacks that attach to this network."""
        name = self.network.name

        CfnOutput(
            self,
            "VpcId",
            value=self.vpc.ref,
            description="Tiered VPC ID",
            export_name=resource_name(name, "vpc-id"),
        )

        for tier in Tier:
            CfnOutput(
                self,
                f"{tier.value.title()}SubnetIds",
                value=",".join([subnet.ref for subnet in self.subnets[tier]]),
                description=f"Comma-separated list of {tier.value} subnet IDs",
                export_name=resource_name(name, f"{tier.value}-subnet-ids"),
            )

        CfnOutput(
            self,
            "InternetGatewayId",
            value=self.internet_gateway.ref,
            description="Internet Gateway ID",
            export_name=resource_name(name, "igw-id"),
        )

        CfnOutput(
            self,
            "EgressOnlyInternetGatewayId",
            value=self.egress_only_internet_gateway.ref,
            description="Egress-Only Internet Gateway ID",
            export_name=resource_name(name, "eigw-id"),
        )

        CfnOutput(
            self,
            "PublicRouteTableId",
            value=self.public_route_table.ref,
            description="Public route table ID",
            export_name=resource_name(name, "public-route-table-id"),
        )

        if self.protected_route_table is not None:
            CfnOutput(
                self,
                "ProtectedRouteTableId",
                value=self.protected_route_table.ref,
                description="Protected route table ID",
                export_name=resource_name(name, "protected-route-table-id"),
            )
