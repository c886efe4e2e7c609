"""Configuration objects for capi2argo."""

from dataclasses import dataclass

DEFAULT_ARGO_NAMESPACE = "argocd"


@dataclass(frozen=True)
class ConverterConfig:
    """Configuration for converting CAPI secrets into Argo cluster secrets."""

    argo_namespace: str = DEFAULT_ARGO_NAMESPACE
    """The namespace that holds the generated Argo cluster secrets."""

    enable_namespaced_names: bool = False
    """Prefix cluster names with the namespace of the CAPI secret."""

    validate_tls: bool = False
    """Check that TLS client config fields are present and base64 encoded."""
