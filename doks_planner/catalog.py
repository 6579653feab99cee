"""Kubernetes version catalog lookup.

The only external call the resolver makes: finding the newest DOKS version
slug that matches a version prefix. Lookups are single blocking requests with
a bounded timeout and no retries; retrying is the caller's decision.
"""

import re
from typing import Protocol

import requests

from doks_planner.config import PlannerSettings
from doks_planner.exceptions import ExternalLookupError
from doks_planner.logging_config import get_logger

logger = get_logger(__name__)

_VERSION_PARTS = re.compile(r"[0-9]+")


class VersionLookup(Protocol):
    """Anything that can resolve a version prefix to a concrete version."""

    def resolve_latest_version(self, prefix: str) -> str: ...


def version_sort_key(slug: str) -> tuple[int, ...]:
    """Sort key for slugs like '1.31.1-do.3'."""
    return tuple(int(part) for part in _VERSION_PARTS.findall(slug))


def latest_matching(slugs: list[str], prefix: str) -> str | None:
    """Return the newest slug that starts with prefix, or None."""
    matching = [slug for slug in slugs if slug.startswith(prefix)]
    if not matching:
        return None
    return max(matching, key=version_sort_key)


class DigitalOceanVersionCatalog:
    """Resolves versions against the DigitalOcean Kubernetes options endpoint."""

    def __init__(self, settings: PlannerSettings | None = None):
        """Initialize the catalog.

        Args:
            settings: API settings; read from the environment when omitted
        """
        self.settings = settings or PlannerSettings.from_env()

    def available_versions(self) -> list[str]:
        """Fetch all version slugs currently offered for new clusters.

        Raises:
            ExternalLookupError: If the API cannot be reached or answers badly
        """
        if not self.settings.token:
            raise ExternalLookupError(
                "No DigitalOcean API token configured",
                "Set DIGITALOCEAN_TOKEN, or pin kubernetes_version in the configuration",
            )

        url = f"{self.settings.api_url.rstrip('/')}/v2/kubernetes/options"
        headers = {
            "Authorization": f"Bearer {self.settings.token}",
            "Content-Type": "application/json",
        }
        logger.debug(f"Fetching Kubernetes options from {url}")

        try:
            response = requests.get(url, headers=headers, timeout=self.settings.lookup_timeout)
        except requests.Timeout:
            raise ExternalLookupError(
                "Timed out querying the Kubernetes version catalog",
                f"No answer from {url} within {self.settings.lookup_timeout}s",
            )
        except requests.RequestException as e:
            raise ExternalLookupError("Failed to query the Kubernetes version catalog", str(e))

        if response.status_code != 200:
            raise ExternalLookupError(
                f"Kubernetes version catalog returned HTTP {response.status_code}",
                response.text[:500],
            )

        try:
            versions = response.json()["options"]["versions"]
            slugs = [version["slug"] for version in versions]
        except (ValueError, KeyError, TypeError) as e:
            raise ExternalLookupError(
                "Unexpected response from the Kubernetes version catalog", f"Missing field: {e}"
            )

        logger.debug(f"Catalog offers {len(slugs)} versions")
        return slugs

    def resolve_latest_version(self, prefix: str) -> str:
        """Return the newest version slug matching prefix.

        Raises:
            ExternalLookupError: If the lookup fails or nothing matches
        """
        slugs = self.available_versions()
        version = latest_matching(slugs, prefix)
        if version is None:
            raise ExternalLookupError(
                f"No Kubernetes version matches prefix '{prefix}'",
                f"Available versions: {', '.join(sorted(slugs, key=version_sort_key))}",
            )
        logger.info(f"Resolved Kubernetes version prefix '{prefix}' to {version}")
        return version


class CachedVersionLookup:
    """Memoizes lookups for the duration of one resolution pass."""

    def __init__(self, lookup: VersionLookup):
        self._lookup = lookup
        self._cache: dict[str, str] = {}

    def resolve_latest_version(self, prefix: str) -> str:
        if prefix not in self._cache:
            self._cache[prefix] = self._lookup.resolve_latest_version(prefix)
        return self._cache[prefix]
