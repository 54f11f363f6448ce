"""An AWS Python Pulumi program - NAT instance forwarding traffic for the private subnet"""

import pulumi
import pulumi_aws as aws

from user_data import render_nat_user_data, render_readiness_check
from utils import parse_network, resource_tags, validate_static_ip

ALL_TCP_PORTS = (0, 65535)
ANYWHERE = "0.0.0.0/0"
UBUNTU_JAMMY_PATTERN = "ubuntu/images/hvm-ssd/ubuntu-jammy-22.04-amd64-server-*"
CANONICAL_OWNER_ID = "099720109477"


class NatInstance:
    def __init__(self, public_subnet_cidr, private_subnet_cidr):
        self.nat_config = pulumi.Config("nat")
        self.public_subnet_cidr = public_subnet_cidr
        self.private_subnet_cidr = private_subnet_cidr
        self.private_ip = self.nat_config.get("private_ip") or "10.0.1.100"
        self.egress_interface = self.nat_config.get("egress_interface") or "eth0"
        self.instance_type = self.nat_config.require("instance_type")
        self.key_name = self.nat_config.require("key_name")
        self.security_group = None
        self.network_interface = None
        self.instance = None
        self.ami_id = None

    def _ingress_cidrs(self):
        configured = self.nat_config.get_object("ingress_cidrs")
        if not configured:
            # Only the private subnet needs to reach the forwarder
            return [self.private_subnet_cidr]
        for cidr in configured:
            parse_network(cidr, "NAT ingress CIDR")
        if ANYWHERE in configured:
            pulumi.log.warn("NAT security group accepts TCP on every port from 0.0.0.0/0")
        return configured

    def create_security_group(self, vpc_id):
        from_port, to_port = ALL_TCP_PORTS
        ingress = [
            aws.ec2.SecurityGroupIngressArgs(
                protocol="tcp",
                from_port=from_port,
                to_port=to_port,
                cidr_blocks=self._ingress_cidrs(),
            )
        ]
        ssh_cidrs = self.nat_config.get_object("ssh_cidrs") or []
        if ssh_cidrs:
            for cidr in ssh_cidrs:
                parse_network(cidr, "SSH ingress CIDR")
            ingress.append(
                aws.ec2.SecurityGroupIngressArgs(
                    description="SSH",
                    protocol="tcp",
                    from_port=22,
                    to_port=22,
                    cidr_blocks=ssh_cidrs,
                )
            )

        self.security_group = aws.ec2.SecurityGroup(
            "nat-security-group",
            vpc_id=vpc_id,
            ingress=ingress,
            egress=[
                aws.ec2.SecurityGroupEgressArgs(
                    protocol="tcp",
                    from_port=from_port,
                    to_port=to_port,
                    cidr_blocks=[ANYWHERE],
                )
            ],
            tags=resource_tags("nat-security-group"),
        )
        return self.security_group

    def validate(self):
        validate_static_ip(self.private_ip, self.public_subnet_cidr)

    def create_network_interface(self, public_subnet_id, security_group_id):
        self.validate()
        self.network_interface = aws.ec2.NetworkInterface(
            "nat-network-interface",
            subnet_id=public_subnet_id,
            private_ip=self.private_ip,
            # Forwarded packets are neither from nor to the interface itself
            source_dest_check=False,
            security_groups=[security_group_id],
            tags=resource_tags("nat-network-interface"),
        )
        return self.network_interface

    def lookup_ami(self):
        pinned = self.nat_config.get("ami_id")
        if pinned:
            pulumi.log.info(f"Using pinned NAT instance image {pinned}")
            self.ami_id = pinned
            return pinned

        name_pattern = self.nat_config.get("ami_name_pattern") or UBUNTU_JAMMY_PATTERN
        owner = self.nat_config.get("ami_owner") or CANONICAL_OWNER_ID
        try:
            ami = aws.ec2.get_ami(
                most_recent=True,
                filters=[
                    aws.ec2.GetAmiFilterArgs(name="name", values=[name_pattern]),
                    aws.ec2.GetAmiFilterArgs(name="virtualization-type", values=["hvm"]),
                ],
                owners=[owner],
            )
        except Exception as err:
            raise pulumi.RunError(f"Image lookup for {name_pattern!r} owned by {owner} failed: {err}") from err
        if not ami.id:
            raise pulumi.RunError(f"No image matches {name_pattern!r} owned by {owner}")

        pulumi.log.warn(
            f"NAT instance image {ami.id} resolved as the most recent match; set nat:ami_id to pin it"
        )
        self.ami_id = ami.id
        return ami.id

    def user_data(self, private_subnet_cidr):
        return pulumi.Output.from_input(private_subnet_cidr).apply(
            lambda cidr: render_nat_user_data(cidr, self.egress_interface)
        )

    def readiness_command(self, private_subnet_cidr):
        return pulumi.Output.from_input(private_subnet_cidr).apply(
            lambda cidr: render_readiness_check(cidr, self.egress_interface)
        )

    def create_instance(self, network_interface_id, private_subnet_cidr):
        ami_id = self.ami_id or self.lookup_ami()
        self.instance = aws.ec2.Instance(
            "nat-instance",
            network_interfaces=[
                aws.ec2.InstanceNetworkInterfaceArgs(
                    device_index=0,
                    network_interface_id=network_interface_id,
                )
            ],
            instance_type=self.instance_type,
            ami=ami_id,
            key_name=self.key_name,
            user_data=self.user_data(private_subnet_cidr),
            tags=resource_tags("nat-instance"),
        )
        return self.instance
