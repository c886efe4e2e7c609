"""Library for converting CAPI kubeconfig secrets into Argo CD cluster secrets.

An ArgoCluster holds everything needed to render the Argo CD cluster secret for
a CAPI workload cluster: the identity of the generated secret, the cluster
server and credentials, and the labels and annotations taken along from the
CAPI Cluster resource.
"""

import base64
import binascii
from dataclasses import dataclass, field
import json
import logging
from typing import Any, Optional

from mashumaro import DataClassDictMixin, field_options
from mashumaro.config import BaseConfig

from .config import ConverterConfig
from .exceptions import InputException, SerializationError, TakeAlongException
from .kubeconfig import CapiCluster
from .manifest import ClusterResource, GeneratedSecret, NamespacedName, Secret
from .naming import KUBECONFIG_SUFFIX, build_cluster_name, build_namespaced_name
from .take_along import MetaKind, build_take_along_map

__all__ = [
    "ArgoTLS",
    "ArgoConfig",
    "ArgoCluster",
    "get_argo_common_labels",
    "new_argo_cluster",
    "validate_tls_config",
]

_LOGGER = logging.getLogger(__name__)

OWNED_LABEL = "capi-to-argocd/owned"
SECRET_TYPE_LABEL = "argocd.argoproj.io/secret-type"
CLUSTER_SECRET_NAME_LABEL = "capi-to-argocd/cluster-secret-name"
CLUSTER_NAMESPACE_LABEL = "capi-to-argocd/cluster-namespace"


def get_argo_common_labels() -> dict[str, str]:
    """Return the labels every generated Argo CD cluster secret must have."""
    return {
        OWNED_LABEL: "true",
        SECRET_TYPE_LABEL: "cluster",
    }


@dataclass
class ArgoTLS(DataClassDictMixin):
    """The Argo CD cluster config tlsClientConfig."""

    ca_data: Optional[str] = field(
        metadata=field_options(alias="caData"), default=None
    )
    cert_data: Optional[str] = field(
        metadata=field_options(alias="certData"), default=None
    )
    key_data: Optional[str] = field(
        metadata=field_options(alias="keyData"), default=None
    )

    class Config(BaseConfig):
        omit_none = True
        serialize_by_alias = True


@dataclass
class ArgoConfig(DataClassDictMixin):
    """The Argo CD cluster config stored as json in the secret."""

    tls_client_config: Optional[ArgoTLS] = field(
        metadata=field_options(alias="tlsClientConfig"), default=None
    )
    bearer_token: Optional[str] = field(
        metadata=field_options(alias="bearerToken"), default=None
    )

    class Config(BaseConfig):
        omit_none = True
        serialize_by_alias = True

    def encode(self) -> bytes:
        """Return the compact json encoding, omitting any unset fields."""
        try:
            return json.dumps(self.to_dict(), separators=(",", ":")).encode()
        except (TypeError, ValueError) as err:
            raise SerializationError(
                f"Unable to encode Argo cluster config: {err}"
            ) from err


@dataclass(frozen=True)
class ArgoCluster:
    """All information needed to render an Argo CD cluster secret."""

    namespaced_name: NamespacedName
    """The identity of the generated secret."""

    cluster_name: str
    """The cluster name displayed by Argo CD."""

    cluster_server: str
    """The URL of the cluster API server."""

    cluster_labels: dict[str, str] = field(default_factory=dict)
    """Labels identifying the source CAPI secret."""

    take_along_labels: dict[str, str] = field(default_factory=dict)
    """Labels taken along from the CAPI Cluster."""

    take_along_annotations: dict[str, str] = field(default_factory=dict)
    """Annotations taken along from the CAPI Cluster."""

    cluster_config: ArgoConfig = field(default_factory=ArgoConfig)
    """Credentials used by Argo CD to connect to the cluster."""

    def merged_labels(self) -> dict[str, str]:
        """Return the labels of the secret, later layers taking precedence."""
        labels = get_argo_common_labels()
        labels.update(self.cluster_labels)
        labels.update(self.take_along_labels)
        return labels

    def convert_to_secret(self, validate_tls: bool = False) -> GeneratedSecret:
        """Return the Argo CD cluster secret for this cluster."""
        if validate_tls:
            validate_tls_config(self.cluster_config.tls_client_config)
        config = self.cluster_config.encode()
        return GeneratedSecret(
            name=self.namespaced_name.name,
            namespace=self.namespaced_name.namespace,
            labels=self.merged_labels(),
            data={
                "name": self.cluster_name.encode(),
                "server": self.cluster_server.encode(),
                "config": config,
            },
        )


def _collect_take_along(
    cluster: ClusterResource | None,
) -> tuple[dict[str, str], dict[str, str], list[TakeAlongException]]:
    """Return the take-along labels and annotations of the CAPI Cluster."""
    if cluster is None:
        return {}, {}, []
    resource = f"{cluster.name}, namespace: {cluster.namespace}"
    labels, label_errors = build_take_along_map(
        cluster.labels, MetaKind.LABEL, resource
    )
    annotations, annotation_errors = build_take_along_map(
        cluster.annotations, MetaKind.ANNOTATION, resource
    )
    return labels, annotations, label_errors + annotation_errors


def new_argo_cluster(
    capi_cluster: CapiCluster,
    secret: Secret,
    cluster: ClusterResource | None,
    config: ConverterConfig,
) -> tuple[ArgoCluster, list[TakeAlongException]]:
    """Return a new ArgoCluster and any take-along problems found on the Cluster.

    Take-along problems never fail the conversion, they are returned so the
    caller can report them.
    """
    labels, annotations, errors = _collect_take_along(cluster)
    for err in errors:
        _LOGGER.debug("Take-along problem for %s: %s", secret.namespaced_name, err)

    kube_cluster = capi_cluster.kube_config.cluster
    kube_user = capi_cluster.kube_config.user.user
    tls: ArgoTLS | None = None
    if any(
        value is not None
        for value in (
            kube_cluster.cluster.ca_data,
            kube_user.cert_data,
            kube_user.key_data,
        )
    ):
        tls = ArgoTLS(
            ca_data=kube_cluster.cluster.ca_data,
            cert_data=kube_user.cert_data,
            key_data=kube_user.key_data,
        )

    argo_cluster = ArgoCluster(
        namespaced_name=build_namespaced_name(secret.name, secret.namespace, config),
        cluster_name=build_cluster_name(kube_cluster.name, secret.namespace, config),
        cluster_server=kube_cluster.cluster.server,
        cluster_labels={
            CLUSTER_SECRET_NAME_LABEL: f"{capi_cluster.name}{KUBECONFIG_SUFFIX}",
            CLUSTER_NAMESPACE_LABEL: capi_cluster.namespace,
        },
        take_along_labels=labels,
        take_along_annotations=annotations,
        cluster_config=ArgoConfig(bearer_token=kube_user.token, tls_client_config=tls),
    )
    return argo_cluster, errors


def validate_tls_config(tls: ArgoTLS | None) -> None:
    """Check that every TLS client config field is set and base64 encoded."""
    if tls is None:
        raise InputException("Missing tlsClientConfig on Argo cluster config")
    values: dict[str, Any] = {
        "caData": tls.ca_data,
        "certData": tls.cert_data,
        "keyData": tls.key_data,
    }
    for key, value in values.items():
        if not value:
            raise InputException(f"Missing {key} on Argo cluster tlsClientConfig")
        try:
            base64.b64decode(value, validate=True)
        except binascii.Error as err:
            raise InputException(
                f"Invalid {key} on Argo cluster tlsClientConfig: {err}"
            ) from err
