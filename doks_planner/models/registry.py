"""Data models for the container registry and project grouping."""

from pydantic import BaseModel, field_validator

from doks_planner.models.cluster import validate_resource_name

REGISTRY_TIERS = ("starter", "basic", "professional")

REGISTRY_REGIONS = ("nyc3", "sfo2", "sfo3", "ams3", "sgp1", "fra1", "blr1", "syd1")

ENVIRONMENTS = ("development", "staging", "production")


def validate_subscription_tier(value: str) -> str:
    """Validate a registry subscription tier slug."""
    if value not in REGISTRY_TIERS:
        raise ValueError(f"subscription tier must be one of {list(REGISTRY_TIERS)}, got '{value}'")
    return value


def validate_environment(value: str) -> str:
    """Validate a project environment, case-insensitively."""
    environment = value.lower()
    if environment not in ENVIRONMENTS:
        raise ValueError(f"environment must be one of {list(ENVIRONMENTS)}, got '{value}'")
    return environment


class RegistrySpec(BaseModel):
    """Container registry configuration."""

    name: str
    subscription_tier: str
    region: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_resource_name(v, "registry name")

    @field_validator("subscription_tier")
    @classmethod
    def validate_tier(cls, v: str) -> str:
        return validate_subscription_tier(v)

    @field_validator("region")
    @classmethod
    def validate_region(cls, v: str) -> str:
        """Validate the registry region is one the registry service runs in."""
        if v not in REGISTRY_REGIONS:
            raise ValueError(f"registry region must be one of {list(REGISTRY_REGIONS)}, got '{v}'")
        return v


class ProjectSpec(BaseModel):
    """Project that groups the created resources."""

    name: str
    description: str = ""
    purpose: str = "Kubernetes cluster"
    environment: str

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        return validate_environment(v)
