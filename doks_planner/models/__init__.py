"""Data models for cluster configuration and resolved plans."""

from doks_planner.models.addons import ADDON_NAMES, AddonSpec, AddonsInput
from doks_planner.models.cluster import ClusterSpec, MaintenanceWindow
from doks_planner.models.config import ClusterInput, NormalizedSpec
from doks_planner.models.intent import ResolvedPlan, ResourceIntent, ResourceKind
from doks_planner.models.network import (
    ExistingNetwork,
    FirewallRuleSpec,
    NetworkSpec,
    NewNetwork,
)
from doks_planner.models.node_pool import NodePoolSpec, NodeTaint
from doks_planner.models.registry import ProjectSpec, RegistrySpec

__all__ = [
    "ADDON_NAMES",
    "AddonSpec",
    "AddonsInput",
    "ClusterInput",
    "ClusterSpec",
    "ExistingNetwork",
    "FirewallRuleSpec",
    "MaintenanceWindow",
    "NetworkSpec",
    "NewNetwork",
    "NodePoolSpec",
    "NodeTaint",
    "NormalizedSpec",
    "ProjectSpec",
    "RegistrySpec",
    "ResolvedPlan",
    "ResourceIntent",
    "ResourceKind",
]
