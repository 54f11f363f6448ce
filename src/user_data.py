"""Boot script for the NAT instance"""

import ipaddress
import re

STATUS_FILE = "/var/lib/nat-gateway/status"
SYSCTL_FILE = "/etc/sysctl.conf"

_INTERFACE_NAME = re.compile(r"^[A-Za-z0-9_.-]{1,15}$")


def _checked(private_cidr, interface):
    try:
        cidr = str(ipaddress.ip_network(private_cidr))
    except ValueError as err:
        raise ValueError(f"Invalid private subnet CIDR: {private_cidr!r}") from err
    if not _INTERFACE_NAME.match(interface):
        raise ValueError(f"Invalid network interface name: {interface!r}")
    return cidr, interface


def render_readiness_check(private_cidr, interface="eth0"):
    """Shell command that exits 0 only when forwarding is on and the masquerade rule is installed."""
    cidr, interface = _checked(private_cidr, interface)
    return (
        'test "$(sysctl -n net.ipv4.ip_forward)" = "1" && '
        f"iptables -t nat -C POSTROUTING -o {interface} -s {cidr} -j MASQUERADE"
    )


def render_nat_user_data(private_cidr, interface="eth0"):
    cidr, interface = _checked(private_cidr, interface)
    check = render_readiness_check(cidr, interface)
    lines = [
        "#!/bin/bash",
        "echo 1 > /proc/sys/net/ipv4/ip_forward",
        f'echo "net.ipv4.ip_forward = 1" >> {SYSCTL_FILE}',
        f"iptables -t nat -A POSTROUTING -o {interface} -s {cidr} -j MASQUERADE",
        f"sysctl -p {SYSCTL_FILE}",
        # Readiness is recorded, never retried.
        f"mkdir -p {STATUS_FILE.rsplit('/', 1)[0]}",
        f"if {check}; then",
        "  status=ready",
        "else",
        "  status=not-ready",
        "fi",
        f'echo "$status" > {STATUS_FILE}',
        'echo "nat-gateway: $status" > /dev/console',
    ]
    return "\n".join(lines) + "\n"
