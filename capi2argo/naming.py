"""Naming of the generated Argo CD cluster secrets."""

from .config import ConverterConfig
from .manifest import NamespacedName

__all__ = [
    "build_cluster_name",
    "build_namespaced_name",
]

KUBECONFIG_SUFFIX = "-kubeconfig"
SECRET_NAME_PREFIX = "cluster-"


def build_cluster_name(name: str, namespace: str, config: ConverterConfig) -> str:
    """Return the cluster name, prefixed with its namespace when enabled."""
    if config.enable_namespaced_names:
        return f"{namespace}-{name}"
    return name


def build_namespaced_name(
    secret_name: str, namespace: str, config: ConverterConfig
) -> NamespacedName:
    """Return the identifier of the Argo CD secret for a CAPI kubeconfig secret.

    The generated secret always lives in the configured Argo CD namespace, not the
    namespace of the CAPI secret.
    """
    cluster_name = build_cluster_name(
        secret_name.removesuffix(KUBECONFIG_SUFFIX), namespace, config
    )
    return NamespacedName(
        namespace=config.argo_namespace,
        name=f"{SECRET_NAME_PREFIX}{cluster_name}",
    )
