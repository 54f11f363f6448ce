"""Pulumi mocks standing in for the engine and the AWS provider."""

import pulumi
import pytest

AMI_ID = "ami-0a1b2c3d4e5f67890"

BASE_CONFIG = {
    "network:public_zone": "us-east-1a",
    "network:private_zone": "us-east-1b",
    "network:validate_zones": "true",
    "nat:instance_type": "t2.micro",
    "nat:key_name": "my-test",
    "nat:ami_id": "",
    "nat:ingress_cidrs": "[]",
    "nat:ssh_cidrs": "[]",
}


class NatGatewayMocks(pulumi.runtime.Mocks):
    def __init__(self):
        self.reset()

    def reset(self):
        self.resources = []
        self.calls = []
        self.ami = {"id": AMI_ID, "name": "ubuntu/images/hvm-ssd/ubuntu-jammy-22.04-amd64-server-20240501"}
        self.zones = ["us-east-1a", "us-east-1b", "us-east-1c"]

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        self.resources.append(args)
        outputs = dict(args.inputs)
        if args.typ == "aws:ec2/instance:Instance":
            outputs.update(
                publicIp="203.0.113.10",
                publicDns="ec2-203-0-113-10.compute-1.amazonaws.com",
            )
        return [f"{args.name}-id", outputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        self.calls.append(args)
        if args.token == "aws:ec2/getAmi:getAmi":
            return dict(self.ami)
        if args.token == "aws:index/getAvailabilityZones:getAvailabilityZones":
            return {"names": list(self.zones)}
        return {}

    def inputs_of(self, name):
        """Inputs of the most recent registration of the resource called ``name``."""
        for resource in reversed(self.resources):
            if resource.name == name:
                return resource.inputs
        raise KeyError(name)

    def types(self):
        return {resource.typ for resource in self.resources}


MOCKS = NatGatewayMocks()
pulumi.runtime.set_mocks(MOCKS, project="nat-gateway", stack="test", preview=False)
pulumi.runtime.set_all_config(BASE_CONFIG)


@pytest.fixture
def mocks():
    MOCKS.reset()
    yield MOCKS
    MOCKS.reset()


@pytest.fixture
def stack_config():
    """Override stack configuration values for a single test."""
    changed = []

    def set_value(key, value):
        changed.append(key)
        pulumi.runtime.set_config(key, value)

    yield set_value
    for key in changed:
        pulumi.runtime.set_config(key, BASE_CONFIG.get(key, ""))
