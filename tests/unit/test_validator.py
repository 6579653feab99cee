"""Unit tests for input validation."""

import pytest

from doks_planner.exceptions import ValidationError
from doks_planner.validator import validate


def _failures(raw):
    with pytest.raises(ValidationError) as exc_info:
        validate(raw)
    return exc_info.value


def test_minimal_config_is_accepted(minimal_config):
    cluster_input = validate(minimal_config)

    assert cluster_input.cluster_name == "prod-k8s"
    assert cluster_input.create_vpc is True
    assert cluster_input.default_node_pool is None
    assert cluster_input.addons.cert_manager is None


def test_uppercase_cluster_name_cites_pattern():
    error = _failures({"cluster_name": "UPPER", "region": "nyc3"})

    assert error.locations == ["cluster_name"]
    assert "^[a-z0-9-]+$" in error.failures[0].message


@pytest.mark.parametrize(
    "name, fragment",
    [
        ("", "cannot be empty"),
        ("a" * 64, "cannot exceed 63"),
        ("under_score", "^[a-z0-9-]+$"),
        ("dots.not.allowed", "^[a-z0-9-]+$"),
        ("prod-k8s\n", "^[a-z0-9-]+$"),
        ("\nprod-k8s", "^[a-z0-9-]+$"),
    ],
)
def test_invalid_cluster_names(name, fragment):
    error = _failures({"cluster_name": name, "region": "nyc3"})

    assert fragment in error.failures[0].message


def test_pool_name_with_trailing_newline_rejected():
    error = _failures(
        {
            "cluster_name": "prod-k8s",
            "region": "nyc3",
            "default_node_pool": {"name": "system\n", "size": "s-2vcpu-4gb", "node_count": 2},
            "node_pools": [{"name": "workers\n", "size": "s-4vcpu-8gb", "node_count": 3}],
        }
    )

    assert error.locations == ["default_node_pool.name", "node_pools.0.name"]


def test_name_of_exactly_63_characters_is_accepted():
    assert validate({"cluster_name": "a" * 63, "region": "nyc3"}).cluster_name == "a" * 63


def test_unsupported_region():
    error = _failures({"cluster_name": "prod-k8s", "region": "mars1"})

    assert error.locations == ["region"]
    assert "mars1" in error.failures[0].message


@pytest.mark.parametrize("cidr", ["10.10.0.0/33", "not-a-cidr", "10.10.0.0", "10.10.0.1/16", "::/0"])
def test_invalid_vpc_cidr_rejected_when_creating(cidr):
    error = _failures({"cluster_name": "prod-k8s", "region": "nyc3", "vpc_cidr": cidr})

    assert error.locations == ["vpc_cidr"]


def test_vpc_cidr_ignored_for_existing_network():
    cluster_input = validate(
        {
            "cluster_name": "prod-k8s",
            "region": "nyc3",
            "create_vpc": False,
            "vpc_cidr": "garbage",
            "existing_vpc_uuid": "4d3c2b1a",
        }
    )

    assert cluster_input.existing_vpc_uuid == "4d3c2b1a"


def test_maintenance_start_time_out_of_range():
    error = _failures(
        {
            "cluster_name": "prod-k8s",
            "region": "nyc3",
            "maintenance_policy": {"start_time": "25:00", "day": "monday"},
        }
    )

    assert error.locations == ["maintenance_policy.start_time"]
    assert "HH:MM" in error.failures[0].message


@pytest.mark.parametrize(
    "start_time",
    ["7:00", "12:60", "1200", "24:00", "04:00\n", "０４:00", "٠٤:٠٠"],
)
def test_malformed_start_times(start_time):
    error = _failures(
        {
            "cluster_name": "prod-k8s",
            "region": "nyc3",
            "maintenance_policy": {"start_time": start_time, "day": "monday"},
        }
    )

    assert error.locations == ["maintenance_policy.start_time"]


def test_maintenance_day_is_case_insensitive():
    cluster_input = validate(
        {
            "cluster_name": "prod-k8s",
            "region": "nyc3",
            "maintenance_policy": {"start_time": "23:59", "day": "SaTuRdAy"},
        }
    )

    assert cluster_input.maintenance_policy.day == "saturday"


def test_maintenance_day_must_be_full_name():
    error = _failures(
        {
            "cluster_name": "prod-k8s",
            "region": "nyc3",
            "maintenance_policy": {"start_time": "00:00", "day": "mon"},
        }
    )

    assert error.locations == ["maintenance_policy.day"]


def test_registry_tier_and_environment_enums():
    error = _failures(
        {
            "cluster_name": "prod-k8s",
            "region": "nyc3",
            "registry_subscription_tier": "gold",
            "environment": "qa",
        }
    )

    assert sorted(error.locations) == ["environment", "registry_subscription_tier"]


def test_autoscale_bounds_violation():
    error = _failures(
        {
            "cluster_name": "prod-k8s",
            "region": "nyc3",
            "node_pools": [
                {"name": "web", "size": "s-2vcpu-4gb", "node_count": 5, "auto_scale": True,
                 "min_nodes": 1, "max_nodes": 3}
            ],
        }
    )

    assert error.locations == ["node_pools.0.max_nodes"]
    assert "min_nodes <= node_count <= max_nodes" in error.failures[0].message


def test_autoscale_requires_bounds():
    error = _failures(
        {
            "cluster_name": "prod-k8s",
            "region": "nyc3",
            "default_node_pool": {"name": "main", "size": "s-2vcpu-4gb", "node_count": 2,
                                  "auto_scale": True},
        }
    )

    assert error.locations == ["default_node_pool.max_nodes"]


def test_bounds_ignored_when_autoscale_disabled():
    cluster_input = validate(
        {
            "cluster_name": "prod-k8s",
            "region": "nyc3",
            "node_pools": [
                {"name": "web", "size": "s-2vcpu-4gb", "node_count": 3, "min_nodes": 10,
                 "max_nodes": 1}
            ],
        }
    )

    assert cluster_input.node_pools[0].node_count == 3


def test_duplicate_pool_names():
    error = _failures(
        {
            "cluster_name": "prod-k8s",
            "region": "nyc3",
            "default_node_pool": {"name": "web", "size": "s-1vcpu-2gb", "node_count": 1},
            "node_pools": [{"name": "web", "size": "s-2vcpu-4gb", "node_count": 1}],
        }
    )

    assert error.locations == ["node_pools"]
    assert "web" in error.failures[0].message


def test_invalid_taint_effect_and_firewall_protocol():
    error = _failures(
        {
            "cluster_name": "prod-k8s",
            "region": "nyc3",
            "node_pools": [
                {"name": "gpu", "size": "g-2vcpu-8gb", "node_count": 1,
                 "taints": [{"key": "gpu", "value": "true", "effect": "Evict"}]}
            ],
            "firewall_rules": [{"protocol": "sctp", "port_range": "443"}],
        }
    )

    assert error.locations == ["node_pools.0.taints.0.effect", "firewall_rules.0.protocol"]


@pytest.mark.parametrize(
    "port_range", ["0", "80-22", "70000", "http", "443\n", "٤٤٣", "80-８０"]
)
def test_invalid_port_ranges(port_range):
    error = _failures(
        {
            "cluster_name": "prod-k8s",
            "region": "nyc3",
            "firewall_rules": [{"protocol": "tcp", "port_range": port_range}],
        }
    )

    assert error.locations == ["firewall_rules.0.port_range"]


def test_unknown_addon_and_top_level_key():
    error = _failures(
        {
            "cluster_name": "prod-k8s",
            "region": "nyc3",
            "addons": {"kafka": {"enabled": True}},
            "node_count": 3,
        }
    )

    assert sorted(error.locations) == ["addons.kafka", "node_count"]


def test_all_failures_collected_in_one_pass():
    """Every violated rule is reported, not just the first."""
    error = _failures(
        {
            "cluster_name": "Bad_Name",
            "region": "mars1",
            "vpc_cidr": "10.0.0.0/33",
            "maintenance_policy": {"start_time": "25:00", "day": "funday"},
            "registry_subscription_tier": "gold",
            "environment": "qa",
            "node_pools": [
                {"name": "Pool", "size": "s-1vcpu-2gb", "node_count": 5, "auto_scale": True,
                 "min_nodes": 1, "max_nodes": 3}
            ],
        }
    )

    assert set(error.locations) == {
        "cluster_name",
        "region",
        "vpc_cidr",
        "maintenance_policy.start_time",
        "maintenance_policy.day",
        "registry_subscription_tier",
        "environment",
        "node_pools.0.name",
        "node_pools.0.max_nodes",
    }
    assert len(error.failures) == 9


def test_non_mapping_input_rejected():
    error = _failures(["cluster_name", "prod-k8s"])

    assert error.locations == ["<root>"]
