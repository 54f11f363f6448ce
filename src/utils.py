import ipaddress

import pulumi

# AWS reserves the network address, the next three and the broadcast address
# in every subnet.
AWS_RESERVED_HEAD = 4


class ConfigurationError(pulumi.RunError):
    """Raised when stack configuration describes an impossible topology."""


def resource_tags(name):
    return {"Name": name}


def parse_network(cidr, label):
    try:
        return ipaddress.ip_network(cidr)
    except ValueError as err:
        raise ConfigurationError(f"{label} is not a valid CIDR block: {cidr!r}") from err


def validate_subnet_layout(vpc_cidr, subnet_cidrs):
    """Check that every subnet lies inside the VPC and that no two subnets overlap.

    ``subnet_cidrs`` maps a label (used in error messages) to a CIDR block.
    """
    vpc = parse_network(vpc_cidr, "VPC CIDR")
    subnets = {label: parse_network(cidr, label) for label, cidr in subnet_cidrs.items()}

    for label, subnet in subnets.items():
        if subnet.version != vpc.version or not subnet.subnet_of(vpc):
            raise ConfigurationError(f"{label} {subnet} is not inside VPC CIDR {vpc}")

    labels = list(subnets)
    for index, label in enumerate(labels):
        for other in labels[index + 1 :]:
            if subnets[label].overlaps(subnets[other]):
                raise ConfigurationError(f"{label} {subnets[label]} overlaps {other} {subnets[other]}")


def validate_static_ip(address, subnet_cidr):
    subnet = parse_network(subnet_cidr, "Subnet CIDR")
    try:
        ip = ipaddress.ip_address(address)
    except ValueError as err:
        raise ConfigurationError(f"Static private IP is not a valid address: {address!r}") from err

    if ip not in subnet:
        raise ConfigurationError(f"Static private IP {ip} is outside subnet {subnet}")

    offset = int(ip) - int(subnet.network_address)
    if offset < AWS_RESERVED_HEAD or ip == subnet.broadcast_address:
        raise ConfigurationError(f"Static private IP {ip} is reserved by AWS in subnet {subnet}")
