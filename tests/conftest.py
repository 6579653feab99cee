"""Pytest configuration and shared fixtures."""

import pytest
from hypothesis import Verbosity, settings

from doks_planner.catalog import latest_matching
from doks_planner.exceptions import ExternalLookupError
from doks_planner.resolver import ConfigurationResolver

# Configure Hypothesis for property-based testing
settings.register_profile("default", max_examples=100, verbosity=Verbosity.normal)
settings.register_profile("ci", max_examples=1000, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=10, verbosity=Verbosity.verbose)

settings.load_profile("default")


class FakeVersionCatalog:
    """In-memory version catalog that records every lookup."""

    def __init__(self, versions=None, error=None):
        self.versions = versions or ["1.29.9-do.0", "1.30.5-do.0", "1.31.1-do.3", "1.31.1-do.4"]
        self.error = error
        self.calls = []

    def resolve_latest_version(self, prefix):
        self.calls.append(prefix)
        if self.error is not None:
            raise self.error
        version = latest_matching(self.versions, prefix)
        if version is None:
            raise ExternalLookupError(f"No Kubernetes version matches prefix '{prefix}'")
        return version


@pytest.fixture
def catalog():
    """Version catalog with a fixed set of versions."""
    return FakeVersionCatalog()


@pytest.fixture
def resolver(catalog):
    """Resolver backed by the fake catalog and built-in defaults."""
    return ConfigurationResolver(version_lookup=catalog)


@pytest.fixture
def minimal_config():
    """The smallest valid configuration."""
    return {"cluster_name": "prod-k8s", "region": "nyc3"}


@pytest.fixture
def scenario_config():
    """New VPC plus one fixed-size compute pool."""
    return {
        "cluster_name": "prod-k8s",
        "region": "nyc3",
        "create_vpc": True,
        "vpc_cidr": "10.10.0.0/16",
        "node_pools": [{"name": "compute", "size": "c-4", "node_count": 3, "auto_scale": False}],
    }


@pytest.fixture
def full_config():
    """Configuration exercising every optional resource."""
    return {
        "cluster_name": "prod-k8s",
        "region": "fra1",
        "kubernetes_version": "1.31.1-do.3",
        "ha": True,
        "maintenance_policy": {"start_time": "04:00", "day": "Sunday"},
        "create_vpc": True,
        "vpc_cidr": "10.20.0.0/16",
        "default_node_pool": {
            "name": "system",
            "size": "s-4vcpu-8gb",
            "node_count": 3,
            "auto_scale": True,
            "min_nodes": 2,
            "max_nodes": 5,
            "labels": {"role": "system"},
        },
        "node_pools": [
            {
                "name": "gpu",
                "size": "g-2vcpu-8gb",
                "node_count": 1,
                "labels": {"accelerator": "nvidia"},
                "taints": [{"key": "nvidia.com/gpu", "value": "true", "effect": "NoSchedule"}],
                "tags": ["gpu"],
            },
            {"name": "batch", "size": "c-8", "node_count": 0, "auto_scale": True,
             "min_nodes": 0, "max_nodes": 10},
        ],
        "tags": ["team-platform"],
        "environment": "production",
        "create_project": True,
        "project_name": "Platform",
        "create_registry": True,
        "registry_subscription_tier": "professional",
        "create_firewall": True,
        "firewall_rules": [
            {"protocol": "tcp", "port_range": "443", "source_addresses": ["0.0.0.0/0"]},
            {"protocol": "tcp", "port_range": "30000-32767", "source_tags": ["bastion"]},
        ],
        "addons": {
            "ingress_controller": {"enabled": True, "config": {"replica_count": 2}},
            "cert_manager": {"enabled": True, "config": {"install_crds": True}},
        },
    }
