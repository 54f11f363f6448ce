"""An AWS Python Pulumi program - VPC, subnets and routing for the NAT instance"""

import pulumi
import pulumi_aws as aws

from utils import ConfigurationError, resource_tags, validate_subnet_layout

DEFAULT_ROUTE = "0.0.0.0/0"


class Networking:
    def __init__(self):
        self.network_config = pulumi.Config("network")
        self.vpc_cidr = self.network_config.get("vpc_cidr") or "10.0.0.0/16"
        self.public_subnet_cidr = self.network_config.get("public_subnet_cidr") or "10.0.1.0/24"
        self.private_subnet_cidr = self.network_config.get("private_subnet_cidr") or "10.0.2.0/24"
        self.public_zone = self.network_config.require("public_zone")
        self.private_zone = self.network_config.require("private_zone")
        self.vpc = None
        self.internet_gateway = None
        self.public_subnet = None
        self.private_subnet = None
        self.public_route_table = None
        self.public_route_table_association = None
        self.private_route_table = None
        self.private_route_table_association = None
        self.private_route = None

    def validate_zones(self):
        if self.network_config.get_bool("validate_zones") is False:
            return
        available = aws.get_availability_zones(state="available").names or []
        for zone in (self.public_zone, self.private_zone):
            if zone not in available:
                raise ConfigurationError(
                    f"Availability zone {zone!r} is not available in this region (available: {', '.join(available)})"
                )

    def create_vpc(self):
        validate_subnet_layout(
            self.vpc_cidr,
            {
                "Public subnet": self.public_subnet_cidr,
                "Private subnet": self.private_subnet_cidr,
            },
        )
        vpc = aws.ec2.Vpc(
            "my-vpc",
            cidr_block=self.vpc_cidr,
            enable_dns_support=True,
            enable_dns_hostnames=True,
            tags=resource_tags("my-vpc"),
        )
        self.vpc = vpc
        return vpc

    def create_internet_gateway(self):
        self.internet_gateway = aws.ec2.InternetGateway(
            "internet-gateway",
            vpc_id=self.vpc.id,
            tags=resource_tags("internet-gateway"),
        )
        return self.internet_gateway

    def create_public_subnet(self):
        self.public_subnet = aws.ec2.Subnet(
            "public-subnet",
            vpc_id=self.vpc.id,
            cidr_block=self.public_subnet_cidr,
            availability_zone=self.public_zone,
            map_public_ip_on_launch=True,
            tags=resource_tags("public-subnet"),
        )
        return self.public_subnet

    def create_private_subnet(self):
        self.private_subnet = aws.ec2.Subnet(
            "private-subnet",
            vpc_id=self.vpc.id,
            cidr_block=self.private_subnet_cidr,
            availability_zone=self.private_zone,
            map_public_ip_on_launch=False,
            tags=resource_tags("private-subnet"),
        )
        return self.private_subnet

    def create_public_route_table(self):
        self.public_route_table = aws.ec2.RouteTable(
            "public-route-table",
            vpc_id=self.vpc.id,
            routes=[
                aws.ec2.RouteTableRouteArgs(
                    cidr_block=DEFAULT_ROUTE,
                    gateway_id=self.internet_gateway.id,
                )
            ],
            tags=resource_tags("public-route-table"),
        )
        self.public_route_table_association = aws.ec2.RouteTableAssociation(
            "public-route-table-association",
            subnet_id=self.public_subnet.id,
            route_table_id=self.public_route_table.id,
        )
        return self.public_route_table

    def create_private_route_table(self):
        # The default route is added by create_private_default_route once the NAT interface exists
        self.private_route_table = aws.ec2.RouteTable(
            "private-route-table",
            vpc_id=self.vpc.id,
            tags=resource_tags("private-route-table"),
        )
        self.private_route_table_association = aws.ec2.RouteTableAssociation(
            "private-route-table-association",
            subnet_id=self.private_subnet.id,
            route_table_id=self.private_route_table.id,
        )
        return self.private_route_table

    def create_private_default_route(self, network_interface):
        self.private_route = aws.ec2.Route(
            "private-route",
            route_table_id=self.private_route_table.id,
            destination_cidr_block=DEFAULT_ROUTE,
            network_interface_id=network_interface.id,
        )
        return self.private_route
