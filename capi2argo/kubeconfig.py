"""Library for reading the kubeconfig stored in a CAPI generated secret.

CAPI writes a kubeconfig for every workload cluster into a Secret named
`<cluster>-kubeconfig` under the `value` key. Only the first cluster and the
first user of that kubeconfig are used when registering the cluster with Argo CD.
"""

import base64
import binascii
from dataclasses import dataclass, field
import logging
from typing import Any, Optional

from mashumaro import DataClassDictMixin, field_options
from mashumaro.exceptions import MissingField, InvalidFieldValue
import yaml

from .exceptions import InputException
from .manifest import Secret, CAPI_SECRET_TYPE
from .naming import KUBECONFIG_SUFFIX

__all__ = [
    "KubeConfig",
    "CapiCluster",
]

_LOGGER = logging.getLogger(__name__)

KUBECONFIG_DATA_KEY = "value"


@dataclass
class ClusterData(DataClassDictMixin):
    """Connection details for a cluster in a kubeconfig."""

    server: str
    """The URL of the cluster API server."""

    ca_data: Optional[str] = field(
        metadata=field_options(alias="certificate-authority-data"), default=None
    )
    """Base64 encoded certificate authority bundle."""


@dataclass
class NamedCluster(DataClassDictMixin):
    """An entry in the kubeconfig clusters list."""

    name: str
    cluster: ClusterData


@dataclass
class UserData(DataClassDictMixin):
    """Credentials for a user in a kubeconfig."""

    token: Optional[str] = None
    """Bearer token for authenticating to the API server."""

    cert_data: Optional[str] = field(
        metadata=field_options(alias="client-certificate-data"), default=None
    )
    """Base64 encoded client certificate."""

    key_data: Optional[str] = field(
        metadata=field_options(alias="client-key-data"), default=None
    )
    """Base64 encoded client key."""


@dataclass
class NamedUser(DataClassDictMixin):
    """An entry in the kubeconfig users list."""

    name: str
    user: UserData = field(default_factory=UserData)


@dataclass
class KubeConfig(DataClassDictMixin):
    """The subset of a kubeconfig needed to register a cluster."""

    clusters: list[NamedCluster] = field(default_factory=list)
    users: list[NamedUser] = field(default_factory=list)

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "KubeConfig":
        """Parse a kubeconfig document, requiring at least one cluster and user."""
        try:
            kube_config = cls.from_dict(doc)
        except (MissingField, InvalidFieldValue) as err:
            raise InputException(f"Invalid kubeconfig: {err}") from err
        if not kube_config.clusters:
            raise InputException("Invalid kubeconfig missing clusters")
        if not kube_config.users:
            raise InputException("Invalid kubeconfig missing users")
        if len(kube_config.clusters) > 1 or len(kube_config.users) > 1:
            _LOGGER.debug(
                "Kubeconfig has multiple clusters or users, using the first of each"
            )
        return kube_config

    @property
    def cluster(self) -> NamedCluster:
        """Return the first cluster in the kubeconfig."""
        return self.clusters[0]

    @property
    def user(self) -> NamedUser:
        """Return the first user in the kubeconfig."""
        return self.users[0]


@dataclass
class CapiCluster:
    """A workload cluster described by a CAPI kubeconfig secret."""

    name: str
    """The name of the cluster, the secret name without the kubeconfig suffix."""

    namespace: str
    """The namespace of the CAPI secret."""

    kube_config: KubeConfig

    @classmethod
    def from_secret(cls, secret: Secret) -> "CapiCluster":
        """Decode the kubeconfig held in a CAPI secret."""
        if not secret.is_capi_secret:
            raise InputException(
                f"Secret {secret.namespaced_name} is not of type {CAPI_SECRET_TYPE}"
            )
        if not secret.name.endswith(KUBECONFIG_SUFFIX):
            raise InputException(
                f"Secret {secret.namespaced_name} name does not end with {KUBECONFIG_SUFFIX}"
            )
        if not (value := secret.data.get(KUBECONFIG_DATA_KEY)):
            raise InputException(
                f"Secret {secret.namespaced_name} missing data.{KUBECONFIG_DATA_KEY}"
            )
        try:
            content = base64.b64decode(value, validate=True)
        except binascii.Error as err:
            raise InputException(
                f"Secret {secret.namespaced_name} data.{KUBECONFIG_DATA_KEY} is not base64 encoded"
            ) from err
        try:
            doc = yaml.safe_load(content)
        except yaml.YAMLError as err:
            raise InputException(
                f"Secret {secret.namespaced_name} contains invalid kubeconfig: {err}"
            ) from err
        if not isinstance(doc, dict):
            raise InputException(
                f"Secret {secret.namespaced_name} kubeconfig was not a dictionary"
            )
        return cls(
            name=secret.name.removesuffix(KUBECONFIG_SUFFIX),
            namespace=secret.namespace,
            kube_config=KubeConfig.parse_doc(doc),
        )
