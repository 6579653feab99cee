"""Data models for optional cluster add-ons."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Emission order of add-on intents
ADDON_NAMES = (
    "ingress_controller",
    "cert_manager",
    "gitops_controller",
    "service_mesh",
    "external_dns",
)

DEFAULT_ADDON_VERSIONS = {
    "ingress_controller": "4.11.3",
    "cert_manager": "v1.16.1",
    "gitops_controller": "7.6.12",
    "service_mesh": "1.23.2",
    "external_dns": "1.15.0",
}

# Helm chart coordinates for each add-on
ADDON_CHARTS = {
    "ingress_controller": {
        "chart": "ingress-nginx",
        "repository": "https://kubernetes.github.io/ingress-nginx",
        "namespace": "ingress-nginx",
    },
    "cert_manager": {
        "chart": "cert-manager",
        "repository": "https://charts.jetstack.io",
        "namespace": "cert-manager",
    },
    "gitops_controller": {
        "chart": "argo-cd",
        "repository": "https://argoproj.github.io/argo-helm",
        "namespace": "argocd",
    },
    "service_mesh": {
        "chart": "istiod",
        "repository": "https://istio-release.storage.googleapis.com/charts",
        "namespace": "istio-system",
    },
    "external_dns": {
        "chart": "external-dns",
        "repository": "https://kubernetes-sigs.github.io/external-dns",
        "namespace": "external-dns",
    },
}

KNOWN_CONFIG_KEYS = {
    "ingress_controller": frozenset(
        {"replica_count", "service_type", "load_balancer_size", "proxy_protocol"}
    ),
    "cert_manager": frozenset({"install_crds", "cluster_issuer", "acme_email"}),
    "gitops_controller": frozenset({"ha_enabled", "server_replicas", "repositories"}),
    "service_mesh": frozenset({"mtls_mode", "revision", "tracing_sampling"}),
    "external_dns": frozenset({"domain_filters", "policy", "txt_owner_id", "interval"}),
}


class AddonSpec(BaseModel):
    """An add-on toggle with its chart version and values."""

    enabled: bool = False
    version: str = ""
    config: dict[str, Any] = Field(default_factory=dict)


class AddonsInput(BaseModel):
    """User-supplied add-on settings; unknown add-on names are rejected."""

    model_config = ConfigDict(extra="forbid")

    ingress_controller: AddonSpec | None = None
    cert_manager: AddonSpec | None = None
    gitops_controller: AddonSpec | None = None
    service_mesh: AddonSpec | None = None
    external_dns: AddonSpec | None = None
