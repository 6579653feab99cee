"""Resource intents: the resolver's output."""

import json
from collections import Counter
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ResourceKind(str, Enum):
    """Kinds of infrastructure object the apply engine knows how to create."""

    VPC = "vpc"
    CLUSTER = "kubernetes_cluster"
    NODE_POOL = "kubernetes_node_pool"
    FIREWALL = "firewall"
    REGISTRY = "container_registry"
    REGISTRY_CREDENTIALS = "container_registry_docker_credentials"
    ADDON = "helm_release"
    PROJECT = "project"


class ResourceIntent(BaseModel):
    """One infrastructure object to create or update, with its dependencies."""

    kind: ResourceKind
    name: str
    params: dict[str, Any] = Field(default_factory=dict)
    depends_on: list[str] = Field(default_factory=list)


class ResolvedPlan(BaseModel):
    """Ordered resource intents produced by one resolution pass."""

    cluster_name: str
    kubernetes_version: str
    intents: list[ResourceIntent] = Field(default_factory=list)
    common_tags: dict[str, str] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    removed_pools: list[str] = Field(default_factory=list)

    def names(self) -> list[str]:
        """Logical names of all intents, in output order."""
        return [intent.name for intent in self.intents]

    def get(self, name: str) -> ResourceIntent | None:
        """Return the intent with the given logical name, if any."""
        return next((intent for intent in self.intents if intent.name == name), None)

    def of_kind(self, kind: ResourceKind) -> list[ResourceIntent]:
        """Return all intents of one kind, in output order."""
        return [intent for intent in self.intents if intent.kind == kind]

    def default_pool(self) -> dict[str, Any]:
        """The default node pool block carried inline by the cluster intent."""
        cluster = self.of_kind(ResourceKind.CLUSTER)
        if not cluster:
            return {}
        return cluster[0].params.get("node_pool", {})

    def summary(self) -> dict[str, int]:
        """Number of intents per resource kind."""
        return dict(Counter(intent.kind.value for intent in self.intents))

    def to_dict(self) -> dict:
        """Convert to plain JSON-compatible data."""
        return self.model_dump(mode="json")

    def to_json(self) -> str:
        """Serialize to JSON; identical plans give identical output."""
        return json.dumps(self.to_dict(), indent=2)
