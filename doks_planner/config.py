"""Runtime settings, resolver defaults and config file loading."""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from doks_planner.exceptions import ConfigurationError
from doks_planner.logging_config import get_logger
from doks_planner.models.addons import DEFAULT_ADDON_VERSIONS
from doks_planner.models.node_pool import NodePoolSpec

logger = get_logger(__name__)

TOOL_NAME = "doks-planner"


class PlannerSettings(BaseModel):
    """Settings for talking to the DigitalOcean API."""

    api_url: str = "https://api.digitalocean.com"
    token: str | None = Field(default=None, repr=False)
    lookup_timeout: float = Field(default=10.0, gt=0)

    @classmethod
    def from_env(cls) -> "PlannerSettings":
        """Build settings from DIGITALOCEAN_* environment variables."""
        values = {}
        token = os.environ.get("DIGITALOCEAN_TOKEN") or os.environ.get("DIGITALOCEAN_ACCESS_TOKEN")
        if token:
            values["token"] = token
        if os.environ.get("DIGITALOCEAN_API_URL"):
            values["api_url"] = os.environ["DIGITALOCEAN_API_URL"]
        if os.environ.get("DOKS_PLANNER_LOOKUP_TIMEOUT"):
            values["lookup_timeout"] = os.environ["DOKS_PLANNER_LOOKUP_TIMEOUT"]
        return cls(**values)


def _builtin_default_pool() -> NodePoolSpec:
    return NodePoolSpec(name="default", size="s-2vcpu-4gb", node_count=2)


class ResolverDefaults(BaseModel):
    """Module-level defaults applied by the normalizer."""

    tool_name: str = TOOL_NAME
    version_prefix: str = "1.31."
    default_pool: NodePoolSpec = Field(default_factory=_builtin_default_pool)
    addon_versions: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_ADDON_VERSIONS))

    @classmethod
    def load(cls, path: str | Path) -> "ResolverDefaults":
        """Load defaults from a YAML file, falling back per field.

        Raises:
            ConfigurationError: If the file cannot be read or a value is invalid
        """
        data = load_config_file(path)
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            problems = [
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            ]
            raise ConfigurationError(f"Invalid defaults file: {path}", "\n".join(problems))


def load_config_file(path: str | Path) -> dict:
    """Load a YAML configuration file into a mapping.

    Args:
        path: Path to the YAML file

    Returns:
        The parsed mapping

    Raises:
        ConfigurationError: If the file is missing, unreadable or not a mapping
    """
    config_path = Path(path)
    logger.debug(f"Reading configuration file: {config_path}")

    if not config_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path}",
            f"Expected location: {config_path.absolute()}",
        )

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse configuration file: {config_path}",
            f"The file has invalid YAML syntax: {e}",
        )
    except OSError as e:
        raise ConfigurationError(f"Failed to read configuration file: {config_path}", str(e))

    if data is None:
        raise ConfigurationError(f"Configuration file is empty: {config_path}")
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration file must contain a mapping: {config_path}",
            f"Found top-level {type(data).__name__} instead",
        )

    logger.debug(f"Loaded configuration with {len(data)} top-level keys")
    return data
