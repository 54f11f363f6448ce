import pulumi
import pytest

from utils import ConfigurationError, resource_tags, validate_static_ip, validate_subnet_layout


def test_configuration_error_is_a_run_error():
    assert issubclass(ConfigurationError, pulumi.RunError)


def test_resource_tags():
    assert resource_tags("nat-instance") == {"Name": "nat-instance"}


class TestSubnetLayout:
    def test_default_layout_is_valid(self):
        validate_subnet_layout("10.0.0.0/16", {"public": "10.0.1.0/24", "private": "10.0.2.0/24"})

    def test_subnet_outside_vpc(self):
        with pytest.raises(ConfigurationError, match="public 10.1.1.0/24 is not inside VPC CIDR 10.0.0.0/16"):
            validate_subnet_layout("10.0.0.0/16", {"public": "10.1.1.0/24", "private": "10.0.2.0/24"})

    def test_overlapping_subnets(self):
        with pytest.raises(ConfigurationError, match="overlaps"):
            validate_subnet_layout("10.0.0.0/16", {"public": "10.0.0.0/23", "private": "10.0.1.0/24"})

    def test_invalid_cidr(self):
        with pytest.raises(ConfigurationError, match="not a valid CIDR"):
            validate_subnet_layout("10.0.0.0/16", {"public": "10.0.1.0/99"})


class TestStaticIp:
    def test_address_inside_subnet(self):
        validate_static_ip("10.0.1.100", "10.0.1.0/24")

    @pytest.mark.parametrize("address", ["10.0.1.0", "10.0.1.1", "10.0.1.2", "10.0.1.3", "10.0.1.255"])
    def test_reserved_addresses(self, address):
        with pytest.raises(ConfigurationError, match="reserved"):
            validate_static_ip(address, "10.0.1.0/24")

    def test_address_outside_subnet(self):
        with pytest.raises(ConfigurationError, match="outside subnet"):
            validate_static_ip("10.0.2.100", "10.0.1.0/24")

    def test_invalid_address(self):
        with pytest.raises(ConfigurationError, match="not a valid address"):
            validate_static_ip("10.0.1.300", "10.0.1.0/24")
