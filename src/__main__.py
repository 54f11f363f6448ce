"""An AWS Python Pulumi program - VPC with a self-managed NAT instance"""


import pulumi

# Import custom modules
from autotag import register_auto_tags
from nat_instance import NatInstance
from networking import Networking

# Inject tags to all AWS resources
common_config = pulumi.Config("NatGateway")
register_auto_tags({"PROJECT": common_config.get("project") or "NatGateway"})

# Configuration and image lookup fail before any resource is declared
networking = Networking()
networking.validate_zones()
nat = NatInstance(
    public_subnet_cidr=networking.public_subnet_cidr,
    private_subnet_cidr=networking.private_subnet_cidr,
)
nat.validate()
nat.lookup_ami()

# Network, gateway, subnets and route tables
vpc = networking.create_vpc()
networking.create_internet_gateway()
public_subnet = networking.create_public_subnet()
private_subnet = networking.create_private_subnet()
networking.create_public_route_table()
networking.create_private_route_table()

# NAT instance
nat_security_group = nat.create_security_group(vpc.id)
nat_network_interface = nat.create_network_interface(public_subnet.id, nat_security_group.id)
# Boot script renders from the private subnet's cidr_block output
nat_instance = nat.create_instance(nat_network_interface.id, private_subnet.cidr_block)

# Private subnet egresses through the NAT interface
private_route = networking.create_private_default_route(nat_network_interface)

pulumi.export("vpc_id", vpc.id)
pulumi.export("public_subnet_id", public_subnet.id)
pulumi.export("private_subnet_id", private_subnet.id)
pulumi.export("private_route_id", private_route.id)
pulumi.export("public_route_table_association_id", networking.public_route_table_association.id)
pulumi.export("nat_security_group_id", nat_security_group.id)
pulumi.export("nat_instance_id", nat_instance.id)
pulumi.export("public_dns", nat_instance.public_dns)
pulumi.export("public_ip", nat_instance.public_ip)
pulumi.export("nat_ami_id", nat.ami_id)
pulumi.export("nat_readiness_command", nat.readiness_command(private_subnet.cidr_block))
