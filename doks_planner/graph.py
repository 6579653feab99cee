"""Resource graph assembly: the final stage of configuration resolution.

Turns a NormalizedSpec into resource intents with explicit dependency edges
and orders them topologically. Ties between independent intents keep their
declaration order, so identical input always yields identical output.
"""

import heapq
from typing import Any

from doks_planner.exceptions import GraphConstraintError
from doks_planner.logging_config import get_logger
from doks_planner.models.addons import ADDON_CHARTS, ADDON_NAMES, KNOWN_CONFIG_KEYS
from doks_planner.models.config import NormalizedSpec
from doks_planner.models.intent import ResolvedPlan, ResourceIntent, ResourceKind
from doks_planner.models.network import NewNetwork
from doks_planner.models.node_pool import NodePoolSpec

logger = get_logger(__name__)

VPC = "vpc"
CLUSTER = "cluster"
FIREWALL = "firewall"
REGISTRY = "registry"
REGISTRY_CREDENTIALS = "registry_credentials"
PROJECT = "project"

OUTBOUND_RULES = [
    {"protocol": "tcp", "port_range": "1-65535", "destination_addresses": ["0.0.0.0/0", "::/0"]},
    {"protocol": "udp", "port_range": "1-65535", "destination_addresses": ["0.0.0.0/0", "::/0"]},
    {"protocol": "icmp", "destination_addresses": ["0.0.0.0/0", "::/0"]},
]


def node_pool_name(pool_name: str) -> str:
    return f"node_pool.{pool_name}"


def addon_name(addon: str) -> str:
    return f"addon.{addon}"


def ref(name: str, attribute: str = "id") -> str:
    """Reference to an attribute of another intent, resolved by the apply engine."""
    return f"${{{name}.{attribute}}}"


def topological_sort(intents: list[ResourceIntent]) -> list[ResourceIntent]:
    """Order intents so every dependency precedes its dependents.

    Among intents that are ready at the same time, the one declared first is
    emitted first.

    Raises:
        GraphConstraintError: On duplicate names, unknown dependencies or cycles
    """
    position = {}
    for i, intent in enumerate(intents):
        if intent.name in position:
            raise GraphConstraintError(f"Duplicate resource name '{intent.name}' in graph")
        position[intent.name] = i

    indegree = [0] * len(intents)
    dependents: list[list[int]] = [[] for _ in intents]
    for i, intent in enumerate(intents):
        for dependency in intent.depends_on:
            if dependency not in position:
                raise GraphConstraintError(
                    f"'{intent.name}' depends on '{dependency}', which is not in the graph"
                )
            indegree[i] += 1
            dependents[position[dependency]].append(i)

    ready = [i for i, degree in enumerate(indegree) if degree == 0]
    heapq.heapify(ready)
    ordered = []
    while ready:
        i = heapq.heappop(ready)
        ordered.append(intents[i])
        for j in dependents[i]:
            indegree[j] -= 1
            if indegree[j] == 0:
                heapq.heappush(ready, j)

    if len(ordered) != len(intents):
        stuck = sorted(intent.name for i, intent in enumerate(intents) if indegree[i] > 0)
        raise GraphConstraintError("Dependency cycle in resource graph", f"Involved: {stuck}")
    return ordered


def node_pool_params(pool: NodePoolSpec) -> dict[str, Any]:
    """Provider parameters for a normalized node pool."""
    return {
        "name": pool.name,
        "size": pool.size,
        "node_count": pool.node_count,
        "auto_scale": pool.auto_scale,
        "min_nodes": pool.min_nodes,
        "max_nodes": pool.max_nodes,
        "labels": dict(pool.labels),
        "taints": [
            {"key": t.key, "value": t.value, "effect": t.effect} for t in pool.taints
        ],
        "tags": list(pool.tags),
    }


class GraphBuilder:
    """Builds the ordered resource graph for a normalized spec."""

    def build(self, spec: NormalizedSpec) -> ResolvedPlan:
        """Assemble and order resource intents.

        Raises:
            GraphConstraintError: If cross-field state makes the graph unbuildable
        """
        self.check_constraints(spec)
        warnings = self._firewall_warnings(spec)

        intents = []
        cluster_deps = []
        project_members = [CLUSTER]

        if isinstance(spec.network, NewNetwork):
            intents.append(self._vpc_intent(spec))
            cluster_deps.append(VPC)
            project_members.append(VPC)

        intents.append(self._cluster_intent(spec, cluster_deps))

        for pool in spec.node_pools:
            params = {"cluster_id": ref(CLUSTER), **node_pool_params(pool)}
            intents.append(
                ResourceIntent(
                    kind=ResourceKind.NODE_POOL,
                    name=node_pool_name(pool.name),
                    params=params,
                    depends_on=[CLUSTER],
                )
            )

        if spec.create_firewall:
            intents.append(self._firewall_intent(spec))
            project_members.append(FIREWALL)

        if spec.registry is not None:
            intents.extend(self._registry_intents(spec))
            project_members.append(REGISTRY)

        for name in ADDON_NAMES:
            addon = spec.addons.get(name)
            if addon is not None and addon.enabled:
                chart = ADDON_CHARTS[name]
                intents.append(
                    ResourceIntent(
                        kind=ResourceKind.ADDON,
                        name=addon_name(name),
                        params={
                            "name": chart["chart"],
                            "chart": chart["chart"],
                            "repository": chart["repository"],
                            "namespace": chart["namespace"],
                            "create_namespace": True,
                            "version": addon.version,
                            "values": dict(addon.config),
                        },
                        depends_on=[CLUSTER],
                    )
                )

        if spec.project is not None:
            intents.append(
                ResourceIntent(
                    kind=ResourceKind.PROJECT,
                    name=PROJECT,
                    params={
                        "name": spec.project.name,
                        "description": spec.project.description,
                        "purpose": spec.project.purpose,
                        "environment": spec.project.environment.capitalize(),
                        "resources": [ref(member, "urn") for member in project_members],
                    },
                    depends_on=list(project_members),
                )
            )

        ordered = topological_sort(intents)
        logger.info(f"Built resource graph for '{spec.cluster.name}' with {len(ordered)} intents")

        return ResolvedPlan(
            cluster_name=spec.cluster.name,
            kubernetes_version=spec.cluster.kubernetes_version,
            intents=ordered,
            common_tags=dict(spec.common_tags),
            warnings=warnings,
        )

    def check_constraints(self, spec: NormalizedSpec) -> None:
        """Reject cross-field state that makes the graph unbuildable.

        Needs no Kubernetes version, so it can run before the version lookup.

        Raises:
            GraphConstraintError: On the first constraint that does not hold
        """
        if spec.network is None:
            raise GraphConstraintError(
                "No network reference can be resolved for the cluster",
                "Set create_vpc: true with a vpc_cidr, or set existing_vpc_uuid "
                "to the UUID of an existing VPC",
            )

        for pool in spec.node_pools:
            if pool.name == spec.default_pool.name:
                raise GraphConstraintError(
                    f"Node pool '{pool.name}' has the same name as the default node pool",
                    "Rename the additional pool or configure default_node_pool explicitly",
                )

        for name, addon in spec.addons.items():
            unknown = sorted(set(addon.config) - KNOWN_CONFIG_KEYS.get(name, frozenset()))
            if unknown:
                raise GraphConstraintError(
                    f"Add-on '{name}' config references unknown keys: {unknown}",
                    f"Known keys: {sorted(KNOWN_CONFIG_KEYS.get(name, frozenset()))}",
                )

    def _firewall_warnings(self, spec: NormalizedSpec) -> list[str]:
        warnings = []
        if spec.firewall_rules and not spec.create_firewall:
            warnings.append(
                f"{len(spec.firewall_rules)} firewall rule(s) ignored because create_firewall is false"
            )
        for i, rule in enumerate(spec.firewall_rules):
            if not rule.has_selectors():
                warnings.append(
                    f"firewall_rules.{i} ({rule.describe()}) has no source selectors "
                    "and will not match any traffic"
                )
        for warning in warnings:
            logger.warning(warning)
        return warnings

    def _vpc_intent(self, spec: NormalizedSpec) -> ResourceIntent:
        return ResourceIntent(
            kind=ResourceKind.VPC,
            name=VPC,
            params={
                "name": spec.network.name,
                "region": spec.cluster.region,
                "ip_range": spec.network.cidr,
            },
        )

    def _cluster_intent(self, spec: NormalizedSpec, depends_on: list[str]) -> ResourceIntent:
        cluster = spec.cluster
        if isinstance(spec.network, NewNetwork):
            vpc_uuid = ref(VPC)
        else:
            vpc_uuid = spec.network.vpc_uuid

        maintenance = None
        if cluster.maintenance_policy is not None:
            maintenance = {
                "start_time": cluster.maintenance_policy.start_time,
                "day": cluster.maintenance_policy.day,
            }

        return ResourceIntent(
            kind=ResourceKind.CLUSTER,
            name=CLUSTER,
            params={
                "name": cluster.name,
                "region": cluster.region,
                "version": cluster.kubernetes_version,
                "vpc_uuid": vpc_uuid,
                "auto_upgrade": cluster.auto_upgrade,
                "surge_upgrade": cluster.surge_upgrade,
                "ha": cluster.high_availability,
                "registry_integration": cluster.registry_integration,
                "maintenance_policy": maintenance,
                "tags": list(cluster.tags),
                # The default pool lives inside the cluster and cannot be removed separately
                "node_pool": node_pool_params(spec.default_pool),
            },
            depends_on=list(depends_on),
        )

    def _firewall_intent(self, spec: NormalizedSpec) -> ResourceIntent:
        return ResourceIntent(
            kind=ResourceKind.FIREWALL,
            name=FIREWALL,
            params={
                "name": f"{spec.cluster.name}-firewall",
                "tags": list(spec.resource_tags),
                "target_tags": [spec.cluster.name],
                "inbound_rules": [rule.to_inbound_rule() for rule in spec.firewall_rules],
                "outbound_rules": [dict(rule) for rule in OUTBOUND_RULES],
            },
            depends_on=[CLUSTER],
        )

    def _registry_intents(self, spec: NormalizedSpec) -> list[ResourceIntent]:
        registry = spec.registry
        return [
            ResourceIntent(
                kind=ResourceKind.REGISTRY,
                name=REGISTRY,
                params={
                    "name": registry.name,
                    "subscription_tier_slug": registry.subscription_tier,
                    "region": registry.region,
                },
            ),
            ResourceIntent(
                kind=ResourceKind.REGISTRY_CREDENTIALS,
                name=REGISTRY_CREDENTIALS,
                params={"registry_name": ref(REGISTRY, "name"), "write": False},
                depends_on=[REGISTRY],
            ),
        ]
