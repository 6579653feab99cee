"""Configuration resolution pipeline: validate, normalize, build the graph."""

from collections.abc import Mapping
from typing import Any

from doks_planner.catalog import CachedVersionLookup, DigitalOceanVersionCatalog, VersionLookup
from doks_planner.changes import compare_pools
from doks_planner.config import ResolverDefaults
from doks_planner.graph import GraphBuilder
from doks_planner.logging_config import get_logger
from doks_planner.models.intent import ResolvedPlan
from doks_planner.normalizer import Normalizer
from doks_planner.validator import validate

logger = get_logger(__name__)


class ConfigurationResolver:
    """Runs the three resolution stages in order over one configuration.

    The resolver keeps no state between calls, so one instance can resolve
    independent configurations. Each call makes at most one version lookup.
    """

    def __init__(
        self,
        version_lookup: VersionLookup | None = None,
        defaults: ResolverDefaults | None = None,
    ):
        """Initialize the resolver.

        Args:
            version_lookup: Version catalog; the DigitalOcean API when omitted
            defaults: Module defaults; built-in defaults when omitted
        """
        self.version_lookup = version_lookup or DigitalOceanVersionCatalog()
        self.defaults = defaults or ResolverDefaults()
        self.builder = GraphBuilder()

    def resolve(
        self, raw: Mapping[str, Any], previous: ResolvedPlan | None = None
    ) -> ResolvedPlan:
        """Resolve raw configuration into an ordered plan.

        Args:
            raw: Configuration mapping
            previous: Plan from the last apply, used to check pool removals

        Returns:
            The resolved plan

        Raises:
            ValidationError: If the input breaks any rule (all failures reported)
            ExternalLookupError: If the version lookup fails
            GraphConstraintError: If cross-field state prevents building the graph
            CannotRemoveDefaultPoolError: If the update would drop the default pool
        """
        cluster_input = validate(raw)
        logger.info(f"Resolving configuration for cluster '{cluster_input.cluster_name}'")

        normalizer = Normalizer(self.defaults, CachedVersionLookup(self.version_lookup))
        spec = normalizer.apply_defaults(cluster_input)
        # constraint failures must not cost a catalog call
        self.builder.check_constraints(spec)
        spec = normalizer.pin_version(spec, cluster_input)
        plan = self.builder.build(spec)

        if previous is not None:
            changes = compare_pools(previous, plan)
            plan = plan.model_copy(update={"removed_pools": changes.removed})

        return plan


def resolve(
    raw: Mapping[str, Any],
    version_lookup: VersionLookup | None = None,
    defaults: ResolverDefaults | None = None,
    previous: ResolvedPlan | None = None,
) -> ResolvedPlan:
    """Resolve raw configuration with a one-off resolver."""
    return ConfigurationResolver(version_lookup, defaults).resolve(raw, previous=previous)
