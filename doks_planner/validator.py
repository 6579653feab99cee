"""Input validation: the first stage of configuration resolution.

Every violated rule is reported; validation never stops at the first error.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from doks_planner.exceptions import ValidationError, ValidationFailure
from doks_planner.logging_config import get_logger
from doks_planner.models.config import ClusterInput

logger = get_logger(__name__)

_VALUE_ERROR_PREFIX = "Value error, "


def format_location(loc: tuple[Any, ...]) -> str:
    """Render a pydantic error location as a dotted path, e.g. 'node_pools.0.name'."""
    return ".".join(str(part) for part in loc) or "<root>"


def failures_from_pydantic(error: PydanticValidationError) -> list[ValidationFailure]:
    """Convert pydantic errors to validation failures, preserving order."""
    failures = []
    for item in error.errors():
        message = item["msg"]
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX) :]
        failures.append(ValidationFailure(location=format_location(item["loc"]), message=message))
    return failures


def validate(raw: Mapping[str, Any]) -> ClusterInput:
    """Validate raw configuration and return the typed input.

    Args:
        raw: Configuration mapping, e.g. parsed from YAML

    Returns:
        The accepted ClusterInput

    Raises:
        ValidationError: With one failure per violated rule
    """
    if not isinstance(raw, Mapping):
        raise ValidationError(
            [ValidationFailure("<root>", f"configuration must be a mapping, got {type(raw).__name__}")]
        )

    try:
        cluster_input = ClusterInput.model_validate(dict(raw))
    except PydanticValidationError as e:
        failures = failures_from_pydantic(e)
        logger.debug(f"Validation found {len(failures)} failures")
        raise ValidationError(failures)

    logger.debug(f"Configuration for cluster '{cluster_input.cluster_name}' is valid")
    return cluster_input
