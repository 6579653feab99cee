"""Input and normalized configuration models."""

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from doks_planner.models.addons import AddonSpec, AddonsInput
from doks_planner.models.cluster import (
    ClusterSpec,
    MaintenanceWindow,
    validate_region,
    validate_resource_name,
)
from doks_planner.models.network import FirewallRuleSpec, NetworkSpec, validate_ipv4_cidr
from doks_planner.models.node_pool import NodePoolSpec
from doks_planner.models.registry import (
    REGISTRY_REGIONS,
    ProjectSpec,
    RegistrySpec,
    validate_environment,
    validate_subscription_tier,
)


class ClusterInput(BaseModel):
    """User-supplied cluster configuration, as loaded from a config file.

    Optional fields carry the same defaults as the infrastructure module
    variables they mirror. Unknown keys are rejected.
    """

    model_config = ConfigDict(extra="forbid")

    cluster_name: str
    region: str
    kubernetes_version: str = ""
    version_prefix: str | None = None
    auto_upgrade: bool = True
    surge_upgrade: bool = True
    ha: bool = False
    registry_integration: bool = False
    maintenance_policy: MaintenanceWindow | None = None

    create_vpc: bool = True
    vpc_cidr: str = "10.10.0.0/16"
    existing_vpc_uuid: str = ""

    default_node_pool: NodePoolSpec | None = None
    node_pools: list[NodePoolSpec] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    environment: str = "development"

    create_project: bool = False
    project_name: str = ""
    project_description: str = ""
    project_purpose: str = "Kubernetes cluster"

    create_registry: bool = False
    registry_name: str = ""
    registry_subscription_tier: str = "basic"
    registry_region: str = ""

    create_firewall: bool = False
    firewall_rules: list[FirewallRuleSpec] = Field(default_factory=list)

    addons: AddonsInput = Field(default_factory=AddonsInput)

    @field_validator("cluster_name")
    @classmethod
    def validate_cluster_name(cls, v: str) -> str:
        return validate_resource_name(v, "cluster_name")

    @field_validator("region")
    @classmethod
    def validate_region(cls, v: str) -> str:
        return validate_region(v)

    @field_validator("vpc_cidr")
    @classmethod
    def validate_vpc_cidr(cls, v: str, info: ValidationInfo) -> str:
        """Validate vpc_cidr only when a new VPC is being created."""
        if info.data.get("create_vpc") is True:
            return validate_ipv4_cidr(v)
        return v

    @field_validator("node_pools")
    @classmethod
    def validate_unique_pool_names(
        cls, v: list[NodePoolSpec], info: ValidationInfo
    ) -> list[NodePoolSpec]:
        """Validate node pool names are unique, including the default pool."""
        seen = set()
        default_pool = info.data.get("default_node_pool")
        if default_pool is not None:
            seen.add(default_pool.name)
        duplicates = []
        for pool in v:
            if pool.name in seen and pool.name not in duplicates:
                duplicates.append(pool.name)
            seen.add(pool.name)
        if duplicates:
            raise ValueError(f"node pool names must be unique, duplicated: {duplicates}")
        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        return validate_environment(v)

    @field_validator("registry_name")
    @classmethod
    def validate_registry_name(cls, v: str) -> str:
        """Validate an explicit registry name; empty means the cluster name."""
        if v:
            return validate_resource_name(v, "registry_name")
        return v

    @field_validator("registry_subscription_tier")
    @classmethod
    def validate_registry_subscription_tier(cls, v: str) -> str:
        return validate_subscription_tier(v)

    @field_validator("registry_region")
    @classmethod
    def validate_registry_region(cls, v: str) -> str:
        """Validate an explicit registry region; empty means derived."""
        if v and v not in REGISTRY_REGIONS:
            raise ValueError(f"registry_region must be one of {list(REGISTRY_REGIONS)}, got '{v}'")
        return v


class NormalizedSpec(BaseModel):
    """A fully populated configuration with no unset optional fields.

    ``network`` is None when neither a new VPC nor an existing one is
    configured; the graph builder reports that case.
    """

    cluster: ClusterSpec
    network: NetworkSpec | None = None
    default_pool: NodePoolSpec
    node_pools: list[NodePoolSpec] = Field(default_factory=list)
    create_firewall: bool = False
    firewall_rules: list[FirewallRuleSpec] = Field(default_factory=list)
    registry: RegistrySpec | None = None
    project: ProjectSpec | None = None
    addons: dict[str, AddonSpec] = Field(default_factory=dict)
    common_tags: dict[str, str] = Field(default_factory=dict)
    resource_tags: list[str] = Field(default_factory=list)
