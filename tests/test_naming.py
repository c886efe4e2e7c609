"""Tests for naming the generated secrets."""

from capi2argo.config import ConverterConfig
from capi2argo.manifest import NamespacedName
from capi2argo.naming import build_cluster_name, build_namespaced_name

NAMESPACED = ConverterConfig(argo_namespace="argo", enable_namespaced_names=True)
NOT_NAMESPACED = ConverterConfig(argo_namespace="argo")


def test_build_cluster_name() -> None:
    """Test the cluster name with and without the namespace prefix."""
    assert build_cluster_name("prod", "team-a", NOT_NAMESPACED) == "prod"
    assert build_cluster_name("prod", "team-a", NAMESPACED) == "team-a-prod"


def test_build_namespaced_name() -> None:
    """Test the generated secret lives in the configured namespace."""
    assert build_namespaced_name(
        "prod-kubeconfig", "team-a", NOT_NAMESPACED
    ) == NamespacedName(namespace="argo", name="cluster-prod")


def test_build_namespaced_name_with_namespace_prefix() -> None:
    """Test the generated secret name includes the source namespace."""
    assert build_namespaced_name(
        "prod-kubeconfig", "team-a", NAMESPACED
    ) == NamespacedName(namespace="argo", name="cluster-team-a-prod")


def test_build_namespaced_name_without_suffix() -> None:
    """Test a name without the kubeconfig suffix is used as is."""
    name = build_namespaced_name("prod", "team-a", NOT_NAMESPACED)
    assert name.name == "cluster-prod"
    name = build_namespaced_name("prod-kubeconfig-kubeconfig", "team-a", NOT_NAMESPACED)
    assert name.name == "cluster-prod-kubeconfig"


def test_default_argo_namespace() -> None:
    """Test the default namespace of the generated secrets."""
    name = build_namespaced_name("prod-kubeconfig", "team-a", ConverterConfig())
    assert name.namespace == "argocd"
    assert str(name) == "argocd/cluster-prod"
