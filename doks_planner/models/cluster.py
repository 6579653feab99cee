"""Data models for the cluster control plane."""

import re

from pydantic import BaseModel, Field, field_validator

NAME_PATTERN = re.compile(r"^[a-z0-9-]+$")
MAX_NAME_LENGTH = 63

SUPPORTED_REGIONS = (
    "nyc1",
    "nyc3",
    "sfo2",
    "sfo3",
    "ams3",
    "sgp1",
    "lon1",
    "fra1",
    "tor1",
    "blr1",
    "syd1",
)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

START_TIME_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")


def validate_resource_name(value: str, field: str = "name") -> str:
    """Validate a cluster or node pool name.

    Args:
        value: The candidate name
        field: Field name used in the error message

    Returns:
        The unchanged name

    Raises:
        ValueError: If the name is empty, too long or has invalid characters
    """
    if not value:
        raise ValueError(f"{field} cannot be empty")
    if len(value) > MAX_NAME_LENGTH:
        raise ValueError(f"{field} cannot exceed {MAX_NAME_LENGTH} characters, got {len(value)}")
    if not NAME_PATTERN.fullmatch(value):
        raise ValueError(
            f"{field} '{value}' must match {NAME_PATTERN.pattern} "
            "(lowercase letters, digits and hyphens only)"
        )
    return value


def validate_region(value: str) -> str:
    """Validate that a region slug is supported."""
    if value not in SUPPORTED_REGIONS:
        raise ValueError(f"region must be one of {list(SUPPORTED_REGIONS)}, got '{value}'")
    return value


class MaintenanceWindow(BaseModel):
    """Weekly maintenance window for the control plane."""

    start_time: str
    day: str

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v: str) -> str:
        """Validate start_time is HH:MM on a 24 hour clock."""
        if not START_TIME_PATTERN.fullmatch(v):
            raise ValueError(
                f"start_time '{v}' must be a valid HH:MM time (HH 00-23, MM 00-59)"
            )
        return v

    @field_validator("day")
    @classmethod
    def validate_day(cls, v: str) -> str:
        """Validate day is a full weekday name, case-insensitively."""
        day = v.lower()
        if day not in WEEKDAYS:
            raise ValueError(f"day must be a full weekday name {list(WEEKDAYS)}, got '{v}'")
        return day


class ClusterSpec(BaseModel):
    """Fully resolved control plane configuration."""

    name: str
    region: str
    kubernetes_version: str
    auto_upgrade: bool = True
    surge_upgrade: bool = True
    high_availability: bool = False
    registry_integration: bool = False
    maintenance_policy: MaintenanceWindow | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_resource_name(v, "cluster name")

    @field_validator("region")
    @classmethod
    def validate_region(cls, v: str) -> str:
        return validate_region(v)
