"""Defaulting and normalization: the second stage of configuration resolution.

Fills every optional field and merges cross-cutting tags and labels into each
resource. Merge precedence, lowest to highest:

- tags: set union of user tags, per-resource markers and identity tags;
  order-free, emitted sorted
- labels: user labels, then the reserved ``node-pool`` label, which always
  wins on collision
"""

from collections.abc import Iterable, Mapping

from doks_planner.catalog import VersionLookup
from doks_planner.config import ResolverDefaults
from doks_planner.exceptions import ExternalLookupError
from doks_planner.logging_config import get_logger
from doks_planner.models.addons import ADDON_NAMES, AddonSpec
from doks_planner.models.cluster import ClusterSpec
from doks_planner.models.config import ClusterInput, NormalizedSpec
from doks_planner.models.network import ExistingNetwork, NewNetwork
from doks_planner.models.node_pool import NodePoolSpec
from doks_planner.models.registry import REGISTRY_REGIONS, ProjectSpec, RegistrySpec

logger = get_logger(__name__)

NODE_TAG = "k8s-node"
RESERVED_POOL_LABEL = "node-pool"
DEFAULT_REGISTRY_REGION = "nyc3"


def identity_tags(tool_name: str, cluster_name: str) -> dict[str, str]:
    """Tags that identify resources as managed by this tool for this cluster."""
    return {"managed-by": tool_name, "cluster-name": cluster_name}


def merge_tags(*layers: Iterable[str]) -> list[str]:
    """Union tag layers, dropping duplicates and blanks, sorted for stable output."""
    merged = set()
    for layer in layers:
        merged.update(tag for tag in layer if tag)
    return sorted(merged)


def merge_labels(user_labels: Mapping[str, str], pool_name: str) -> dict[str, str]:
    """Overlay the reserved node-pool label on top of user labels."""
    merged = dict(user_labels)
    if merged.get(RESERVED_POOL_LABEL, pool_name) != pool_name:
        logger.debug(
            f"Label '{RESERVED_POOL_LABEL}={merged[RESERVED_POOL_LABEL]}' on pool "
            f"'{pool_name}' is reserved and will be replaced"
        )
    merged[RESERVED_POOL_LABEL] = pool_name
    return dict(sorted(merged.items()))


def normalize_node_pool(
    pool: NodePoolSpec, cluster_name: str, shared_tags: Iterable[str]
) -> NodePoolSpec:
    """Apply scaling, tag and label defaults to one node pool.

    Args:
        pool: Validated pool
        cluster_name: Owning cluster, always added as a tag
        shared_tags: User-wide and identity tags merged into every pool

    Returns:
        A new pool with collapsed bounds and merged tags and labels
    """
    if pool.auto_scale:
        min_nodes, max_nodes = pool.min_nodes, pool.max_nodes
    else:
        min_nodes = max_nodes = pool.node_count

    return pool.model_copy(
        update={
            "min_nodes": min_nodes,
            "max_nodes": max_nodes,
            "labels": merge_labels(pool.labels, pool.name),
            "taints": list(pool.taints),
            "tags": merge_tags(pool.tags, shared_tags, [cluster_name, NODE_TAG]),
        }
    )


class Normalizer:
    """Turns a validated ClusterInput into a fully populated NormalizedSpec."""

    def __init__(self, defaults: ResolverDefaults, version_lookup: VersionLookup):
        self.defaults = defaults
        self.version_lookup = version_lookup

    def normalize(self, cluster_input: ClusterInput) -> NormalizedSpec:
        """Fill defaults, merge tags and labels, then pin the Kubernetes version.

        Raises:
            ExternalLookupError: If the Kubernetes version has to be looked up and
                the lookup fails
        """
        return self.pin_version(self.apply_defaults(cluster_input), cluster_input)

    def apply_defaults(self, cluster_input: ClusterInput) -> NormalizedSpec:
        """Fill defaults and merge tags and labels without any external lookup.

        The cluster's ``kubernetes_version`` is left empty until ``pin_version``.
        """
        name = cluster_input.cluster_name
        common_tags = identity_tags(self.defaults.tool_name, name)
        identity = [f"{key}={value}" for key, value in common_tags.items()]
        shared_tags = merge_tags(cluster_input.tags, identity)

        cluster = ClusterSpec(
            name=name,
            region=cluster_input.region,
            kubernetes_version="",
            auto_upgrade=cluster_input.auto_upgrade,
            surge_upgrade=cluster_input.surge_upgrade,
            high_availability=cluster_input.ha,
            registry_integration=cluster_input.registry_integration,
            maintenance_policy=cluster_input.maintenance_policy,
            tags=merge_tags(shared_tags, [name]),
        )

        default_pool = cluster_input.default_node_pool or self.defaults.default_pool
        if cluster_input.default_node_pool is None:
            logger.debug(f"No default node pool configured, using built-in '{default_pool.name}'")

        return NormalizedSpec(
            cluster=cluster,
            network=self._network(cluster_input),
            default_pool=normalize_node_pool(default_pool, name, shared_tags),
            node_pools=[
                normalize_node_pool(pool, name, shared_tags) for pool in cluster_input.node_pools
            ],
            create_firewall=cluster_input.create_firewall,
            firewall_rules=list(cluster_input.firewall_rules),
            registry=self._registry(cluster_input),
            project=self._project(cluster_input),
            addons=self._addons(cluster_input),
            common_tags=common_tags,
            resource_tags=cluster.tags,
        )

    def pin_version(self, spec: NormalizedSpec, cluster_input: ClusterInput) -> NormalizedSpec:
        """Return a copy of ``spec`` with the cluster's Kubernetes version resolved."""
        cluster = spec.cluster.model_copy(
            update={"kubernetes_version": self.resolve_version(cluster_input)}
        )
        return spec.model_copy(update={"cluster": cluster})

    def resolve_version(self, cluster_input: ClusterInput) -> str:
        """Use the pinned version verbatim, or look up the latest for the prefix."""
        if cluster_input.kubernetes_version:
            return cluster_input.kubernetes_version

        prefix = cluster_input.version_prefix or self.defaults.version_prefix
        try:
            return self.version_lookup.resolve_latest_version(prefix)
        except ExternalLookupError:
            raise
        except Exception as e:
            raise ExternalLookupError(
                f"Version lookup for prefix '{prefix}' failed", f"{type(e).__name__}: {e}"
            ) from e

    def _network(self, cluster_input: ClusterInput) -> NewNetwork | ExistingNetwork | None:
        if cluster_input.create_vpc:
            return NewNetwork(name=f"{cluster_input.cluster_name}-vpc", cidr=cluster_input.vpc_cidr)
        vpc_uuid = cluster_input.existing_vpc_uuid.strip()
        if vpc_uuid:
            return ExistingNetwork(vpc_uuid=vpc_uuid)
        return None

    def _registry(self, cluster_input: ClusterInput) -> RegistrySpec | None:
        if not cluster_input.create_registry:
            return None
        region = cluster_input.registry_region
        if not region:
            region = (
                cluster_input.region
                if cluster_input.region in REGISTRY_REGIONS
                else DEFAULT_REGISTRY_REGION
            )
        return RegistrySpec(
            name=cluster_input.registry_name or cluster_input.cluster_name,
            subscription_tier=cluster_input.registry_subscription_tier,
            region=region,
        )

    def _project(self, cluster_input: ClusterInput) -> ProjectSpec | None:
        if not cluster_input.create_project:
            return None
        return ProjectSpec(
            name=cluster_input.project_name or cluster_input.cluster_name,
            description=cluster_input.project_description,
            purpose=cluster_input.project_purpose,
            environment=cluster_input.environment,
        )

    def _addons(self, cluster_input: ClusterInput) -> dict[str, AddonSpec]:
        addons = {}
        for name in ADDON_NAMES:
            default_version = self.defaults.addon_versions.get(name, "")
            spec = getattr(cluster_input.addons, name)
            if spec is None:
                addons[name] = AddonSpec(enabled=False, version=default_version)
            else:
                addons[name] = spec.model_copy(
                    update={
                        "version": spec.version or default_version,
                        "config": dict(sorted(spec.config.items())),
                    }
                )
        return addons
