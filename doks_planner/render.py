"""Plan rendering and loading.

YAML output uses ruamel.yaml so keys keep the order the resolver emits them in.
"""

import io
import json
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError
from ruamel.yaml import YAML

from doks_planner.exceptions import ConfigurationError
from doks_planner.logging_config import get_logger
from doks_planner.models.intent import ResolvedPlan

logger = get_logger(__name__)


def _yaml() -> YAML:
    yaml = YAML()
    yaml.default_flow_style = False
    yaml.indent(mapping=2, sequence=2, offset=0)
    return yaml


def render_yaml(plan: ResolvedPlan) -> str:
    """Render a plan as YAML."""
    stream = io.StringIO()
    _yaml().dump(plan.to_dict(), stream)
    return stream.getvalue()


def render_json(plan: ResolvedPlan) -> str:
    """Render a plan as JSON."""
    return plan.to_json() + "\n"


def render(plan: ResolvedPlan, output_format: str = "yaml") -> str:
    """Render a plan in the given format ('yaml' or 'json')."""
    if output_format == "json":
        return render_json(plan)
    if output_format == "yaml":
        return render_yaml(plan)
    raise ValueError(f"output format must be 'yaml' or 'json', got '{output_format}'")


def load_plan(path: str | Path) -> ResolvedPlan:
    """Load a previously written plan (YAML or JSON).

    Raises:
        ConfigurationError: If the file is missing or is not a valid plan
    """
    plan_path = Path(path)
    logger.debug(f"Loading previous plan: {plan_path}")

    if not plan_path.exists():
        raise ConfigurationError(f"Plan file not found: {plan_path}")

    try:
        with open(plan_path) as f:
            if plan_path.suffix == ".json":
                data = json.load(f)
            else:
                data = YAML(typ="safe").load(f)
        return ResolvedPlan.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Plan file is not a valid plan: {plan_path}", str(e))
    except Exception as e:
        raise ConfigurationError(f"Failed to read plan file: {plan_path}", str(e))
