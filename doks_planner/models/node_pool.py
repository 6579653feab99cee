"""Data models for node pool configuration."""

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from doks_planner.models.cluster import validate_resource_name

TAINT_EFFECTS = ("NoSchedule", "PreferNoSchedule", "NoExecute")


class NodeTaint(BaseModel):
    """Kubernetes node taint configuration."""

    key: str
    value: str = ""
    effect: str  # NoSchedule, PreferNoSchedule, NoExecute

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Validate taint key is not empty."""
        if not v:
            raise ValueError("taint key cannot be empty")
        return v

    @field_validator("effect")
    @classmethod
    def validate_effect(cls, v: str) -> str:
        """Validate taint effect is one of the allowed values."""
        if v not in TAINT_EFFECTS:
            raise ValueError(f"effect must be one of {list(TAINT_EFFECTS)}, got {v}")
        return v


class NodePoolSpec(BaseModel):
    """Node pool configuration model.

    Field order matters: the autoscale bounds check reads the already
    validated ``node_count``, ``auto_scale`` and ``min_nodes`` values.
    """

    name: str
    size: str
    node_count: int = Field(ge=0)
    auto_scale: bool = False
    min_nodes: int | None = None
    max_nodes: int | None = Field(default=None, validate_default=True)
    labels: dict[str, str] = Field(default_factory=dict)
    taints: list[NodeTaint] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_resource_name(v, "node pool name")

    @field_validator("size")
    @classmethod
    def validate_size(cls, v: str) -> str:
        """Validate size slug is not empty."""
        if not v:
            raise ValueError("size cannot be empty")
        return v

    @field_validator("max_nodes")
    @classmethod
    def validate_autoscale_bounds(cls, v: int | None, info: ValidationInfo) -> int | None:
        """Require min_nodes <= node_count <= max_nodes when autoscaling.

        Bounds are ignored when autoscale is disabled. If one of the fields
        the check depends on already failed, it is skipped so that only the
        original failure is reported.
        """
        data = info.data
        if not data.get("auto_scale"):
            return v
        if "node_count" not in data or "min_nodes" not in data:
            return v

        min_nodes = data["min_nodes"]
        node_count = data["node_count"]
        if min_nodes is None or v is None:
            raise ValueError("min_nodes and max_nodes are required when auto_scale is enabled")
        if min_nodes < 0:
            raise ValueError(f"min_nodes must be non-negative, got {min_nodes}")
        if not min_nodes <= node_count <= v:
            raise ValueError(
                "autoscale bounds require min_nodes <= node_count <= max_nodes, "
                f"got {min_nodes} <= {node_count} <= {v}"
            )
        return v
