"""Node pool changes between a previously applied plan and a new one."""

from dataclasses import dataclass, field

from doks_planner.exceptions import CannotRemoveDefaultPoolError
from doks_planner.logging_config import get_logger
from doks_planner.models.intent import ResolvedPlan, ResourceKind

logger = get_logger(__name__)


@dataclass
class PoolChanges:
    """Additional node pools added or removed by an update.

    Attributes:
        added: Pools present only in the new plan
        removed: Pools present only in the previous plan; whether they are
            drained first is the apply engine's decision
    """

    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)


def _pool_names(plan: ResolvedPlan) -> list[str]:
    return [intent.params["name"] for intent in plan.of_kind(ResourceKind.NODE_POOL)]


def _can_scale_to_zero(pool: dict) -> bool:
    return bool(pool.get("auto_scale")) and (pool.get("min_nodes") or 0) == 0


def check_default_pool_removal(previous: ResolvedPlan, current: ResolvedPlan) -> None:
    """Reject updates that drop the previous default node pool.

    A cluster cannot exist without its default pool, so replacing it is only
    allowed when the old pool autoscales with a minimum of zero nodes.

    Raises:
        CannotRemoveDefaultPoolError: If the default pool would be deleted
    """
    old_pool = previous.default_pool()
    new_pool = current.default_pool()
    if not old_pool or old_pool.get("name") == new_pool.get("name"):
        return

    if _can_scale_to_zero(old_pool):
        logger.info(
            f"Default pool '{old_pool['name']}' replaced by '{new_pool.get('name')}'; "
            "old pool can scale to zero"
        )
        return

    raise CannotRemoveDefaultPoolError(
        f"Cannot remove default node pool '{old_pool['name']}' of cluster '{previous.cluster_name}'",
        "The default pool's autoscale settings do not allow it to reach zero nodes. "
        f"Keep default_node_pool.name as '{old_pool['name']}', or first enable auto_scale "
        "with min_nodes: 0 and apply.",
    )


def compare_pools(previous: ResolvedPlan, current: ResolvedPlan) -> PoolChanges:
    """Check the default pool and list added and removed additional pools.

    Raises:
        CannotRemoveDefaultPoolError: If the default pool would be deleted
    """
    check_default_pool_removal(previous, current)

    old_names = _pool_names(previous)
    new_names = _pool_names(current)
    changes = PoolChanges(
        added=[name for name in new_names if name not in old_names],
        removed=[name for name in old_names if name not in new_names],
    )
    for name in changes.removed:
        logger.info(f"Node pool '{name}' is no longer configured and will be removed")
    return changes
