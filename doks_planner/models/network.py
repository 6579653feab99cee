"""Data models for networking: VPC selection and firewall rules."""

import ipaddress
import re
from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator

FIREWALL_PROTOCOLS = ("tcp", "udp", "icmp")

PORT_RANGE_PATTERN = re.compile(r"^([0-9]{1,5})(-([0-9]{1,5}))?$")


def validate_ipv4_cidr(value: str) -> str:
    """Validate that a string is an IPv4 network in CIDR notation.

    Raises:
        ValueError: If the value is not a valid IPv4 CIDR block
    """
    if not value or "/" not in value:
        raise ValueError(f"'{value}' must be a valid IPv4 CIDR (e.g., 10.10.0.0/16)")
    try:
        ipaddress.IPv4Network(value)
    except ValueError as e:
        raise ValueError(f"'{value}' must be a valid IPv4 CIDR (e.g., 10.10.0.0/16): {e}")
    return value


class NewNetwork(BaseModel):
    """A VPC created alongside the cluster."""

    kind: Literal["create"] = "create"
    name: str
    cidr: str

    @field_validator("cidr")
    @classmethod
    def validate_cidr(cls, v: str) -> str:
        return validate_ipv4_cidr(v)


class ExistingNetwork(BaseModel):
    """A VPC managed outside this configuration, referenced by UUID."""

    kind: Literal["existing"] = "existing"
    vpc_uuid: str = Field(min_length=1)


NetworkSpec = Annotated[NewNetwork | ExistingNetwork, Field(discriminator="kind")]


class FirewallRuleSpec(BaseModel):
    """An inbound firewall rule applied to the cluster's droplets."""

    protocol: str
    port_range: str = "all"
    source_addresses: list[str] = Field(default_factory=list)
    source_load_balancer_uids: list[str] = Field(default_factory=list)
    source_tags: list[str] = Field(default_factory=list)
    source_droplet_ids: list[int] = Field(default_factory=list)

    @field_validator("protocol")
    @classmethod
    def validate_protocol(cls, v: str) -> str:
        """Validate protocol is tcp, udp or icmp."""
        protocol = v.lower()
        if protocol not in FIREWALL_PROTOCOLS:
            raise ValueError(f"protocol must be one of {list(FIREWALL_PROTOCOLS)}, got '{v}'")
        return protocol

    @field_validator("port_range")
    @classmethod
    def validate_port_range(cls, v: str) -> str:
        """Validate port_range is 'all', a single port or 'low-high'."""
        if v == "all":
            return v
        match = PORT_RANGE_PATTERN.fullmatch(v)
        if not match:
            raise ValueError(f"port_range '{v}' must be 'all', a port, or a 'low-high' range")
        low = int(match.group(1))
        high = int(match.group(3)) if match.group(3) else low
        if not 1 <= low <= high <= 65535:
            raise ValueError(f"port_range '{v}' must satisfy 1 <= low <= high <= 65535")
        return v

    @field_validator("source_addresses")
    @classmethod
    def validate_source_addresses(cls, v: list[str]) -> list[str]:
        """Validate every source address is an IP address or network."""
        for address in v:
            try:
                ipaddress.ip_network(address, strict=False)
            except ValueError:
                raise ValueError(f"source address '{address}' is not a valid IP or CIDR")
        return v

    def has_selectors(self) -> bool:
        """Whether at least one source selector kind is non-empty."""
        return bool(
            self.source_addresses
            or self.source_load_balancer_uids
            or self.source_tags
            or self.source_droplet_ids
        )

    def describe(self) -> str:
        """Short human-readable form, e.g. 'tcp/443'."""
        if self.protocol == "icmp":
            return "icmp"
        return f"{self.protocol}/{self.port_range}"

    def to_inbound_rule(self) -> dict:
        """Convert to the provider's inbound rule shape."""
        rule = {"protocol": self.protocol}
        if self.protocol != "icmp":
            rule["port_range"] = self.port_range
        if self.source_addresses:
            rule["source_addresses"] = list(self.source_addresses)
        if self.source_load_balancer_uids:
            rule["source_load_balancer_uids"] = list(self.source_load_balancer_uids)
        if self.source_tags:
            rule["source_tags"] = list(self.source_tags)
        if self.source_droplet_ids:
            rule["source_droplet_ids"] = list(self.source_droplet_ids)
        return rule
