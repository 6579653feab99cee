"""Tests for default pool protection and pool removal reporting."""

import pytest

from doks_planner.changes import check_default_pool_removal, compare_pools
from doks_planner.exceptions import CannotRemoveDefaultPoolError


def _with_default_pool(config, **pool):
    return {
        **config,
        "default_node_pool": {"name": "main", "size": "s-2vcpu-4gb", "node_count": 2, **pool},
    }


def test_unchanged_default_pool_is_allowed(resolver, minimal_config):
    previous = resolver.resolve(_with_default_pool(minimal_config))
    current = resolver.resolve(_with_default_pool(minimal_config, node_count=4))

    check_default_pool_removal(previous, current)


def test_replacing_fixed_default_pool_is_rejected(resolver, minimal_config):
    previous = resolver.resolve(_with_default_pool(minimal_config))

    with pytest.raises(CannotRemoveDefaultPoolError) as exc_info:
        resolver.resolve(minimal_config, previous=previous)

    assert "'main'" in exc_info.value.message
    assert "min_nodes: 0" in exc_info.value.details


def test_replacing_autoscaled_pool_above_zero_is_rejected(resolver, minimal_config):
    previous = resolver.resolve(
        _with_default_pool(minimal_config, auto_scale=True, min_nodes=1, max_nodes=3)
    )

    with pytest.raises(CannotRemoveDefaultPoolError):
        resolver.resolve(minimal_config, previous=previous)


def test_replacing_pool_that_can_reach_zero_is_allowed(resolver, minimal_config):
    previous = resolver.resolve(
        _with_default_pool(minimal_config, auto_scale=True, min_nodes=0, max_nodes=3)
    )

    plan = resolver.resolve(minimal_config, previous=previous)

    assert plan.default_pool()["name"] == "default"


def test_removed_additional_pools_are_reported(resolver, scenario_config):
    previous = resolver.resolve(scenario_config)
    current_config = {
        **scenario_config,
        "node_pools": [{"name": "memory", "size": "m-2vcpu-16gb", "node_count": 1}],
    }

    plan = resolver.resolve(current_config, previous=previous)
    changes = compare_pools(previous, plan)

    assert plan.removed_pools == ["compute"]
    assert changes.added == ["memory"]
    assert changes.removed == ["compute"]


def test_no_previous_plan_means_no_removals(resolver, scenario_config):
    assert resolver.resolve(scenario_config).removed_pools == []
