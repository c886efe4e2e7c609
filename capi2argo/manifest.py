"""Representation of the kubernetes objects read and written by capi2argo.

Source objects (the CAPI kubeconfig Secret and the CAPI Cluster) are parsed from
raw kubernetes documents as already fetched from the API server. The generated
Argo CD cluster secret is rendered back into a raw kubernetes document.
"""

import base64
from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any, ClassVar

import aiofiles
import yaml

from .exceptions import InputException

__all__ = [
    "NamespacedName",
    "Secret",
    "ClusterResource",
    "GeneratedSecret",
    "parse_raw_obj",
    "read_objects",
]

_LOGGER = logging.getLogger(__name__)


# Match a prefix of apiVersion to ensure we have the right type of object.
# We don't check specific versions for forward compatibility on upgrade.
CAPI_DOMAIN = "cluster.x-k8s.io"
SECRET_KIND = "Secret"
SECRET_API_VERSION = "v1"
CLUSTER_KIND = "Cluster"
DEFAULT_NAMESPACE = "default"

# Secret type set by CAPI on generated kubeconfig secrets
CAPI_SECRET_TYPE = "cluster.x-k8s.io/secret"
# Label set by CAPI naming the Cluster that owns a secret
CAPI_CLUSTER_NAME_LABEL = "cluster.x-k8s.io/cluster-name"


def _check_version(doc: dict[str, Any], version: str) -> None:
    """Assert that the resource has the specified version."""
    if not (api_version := doc.get("apiVersion")):
        raise InputException(f"Invalid object missing apiVersion: {doc}")
    if not api_version.startswith(version):
        raise InputException(f"Invalid object expected '{version}': {doc}")


@dataclass
class BaseManifest:
    """Base class for all source objects read from the cluster."""


@dataclass(frozen=True, order=True)
class NamespacedName:
    """Identifier for a namespaced kubernetes resource."""

    namespace: str
    name: str

    def __str__(self) -> str:
        """Return the namespace and name concatenated as an id."""
        return f"{self.namespace}/{self.name}"


@dataclass
class Secret(BaseManifest):
    """A Secret as read from the cluster, with its data still base64 encoded."""

    kind: ClassVar[str] = SECRET_KIND
    """The kind of the Secret."""

    name: str
    """The name of the Secret."""

    namespace: str
    """The namespace of the Secret."""

    type: str | None = None
    """The type of the Secret e.g. cluster.x-k8s.io/secret."""

    labels: dict[str, str] = field(default_factory=dict)
    """The labels on the Secret."""

    data: dict[str, str] = field(default_factory=dict)
    """The base64 encoded data in the Secret."""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "Secret":
        """Parse a secret object from a kubernetes resource."""
        _check_version(doc, SECRET_API_VERSION)
        if not (metadata := doc.get("metadata")):
            raise InputException(f"Invalid {cls} missing metadata: {doc}")
        if not (name := metadata.get("name")):
            raise InputException(f"Invalid {cls} missing metadata.name: {doc}")
        return Secret(
            name=name,
            namespace=metadata.get("namespace", DEFAULT_NAMESPACE),
            type=doc.get("type"),
            labels=metadata.get("labels") or {},
            data=doc.get("data") or {},
        )

    @property
    def namespaced_name(self) -> NamespacedName:
        """Return the identifier of the Secret."""
        return NamespacedName(namespace=self.namespace, name=self.name)

    @property
    def is_capi_secret(self) -> bool:
        """Return true if CAPI generated this Secret."""
        return self.type == CAPI_SECRET_TYPE


@dataclass
class ClusterResource(BaseManifest):
    """The metadata of a CAPI Cluster used for take-along labels and annotations."""

    kind: ClassVar[str] = CLUSTER_KIND
    """The kind of the object."""

    name: str
    """The name of the Cluster."""

    namespace: str
    """The namespace of the Cluster."""

    labels: dict[str, str] = field(default_factory=dict)
    """The labels on the Cluster."""

    annotations: dict[str, str] = field(default_factory=dict)
    """The annotations on the Cluster."""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "ClusterResource":
        """Parse a CAPI Cluster from a kubernetes resource."""
        _check_version(doc, CAPI_DOMAIN)
        if not (metadata := doc.get("metadata")):
            raise InputException(f"Invalid {cls} missing metadata: {doc}")
        if not (name := metadata.get("name")):
            raise InputException(f"Invalid {cls} missing metadata.name: {doc}")
        return ClusterResource(
            name=name,
            namespace=metadata.get("namespace", DEFAULT_NAMESPACE),
            labels=metadata.get("labels") or {},
            annotations=metadata.get("annotations") or {},
        )

    @property
    def namespaced_name(self) -> NamespacedName:
        """Return the identifier of the Cluster."""
        return NamespacedName(namespace=self.namespace, name=self.name)


@dataclass(frozen=True)
class GeneratedSecret:
    """An Argo CD cluster secret generated from a CAPI kubeconfig secret."""

    kind: ClassVar[str] = SECRET_KIND
    api_version: ClassVar[str] = SECRET_API_VERSION

    name: str
    namespace: str
    labels: dict[str, str]
    data: dict[str, bytes]

    @property
    def namespaced_name(self) -> NamespacedName:
        """Return the identifier of the generated Secret."""
        return NamespacedName(namespace=self.namespace, name=self.name)

    def to_doc(self) -> dict[str, Any]:
        """Return the kubernetes resource for this secret with encoded data."""
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": {
                "name": self.name,
                "namespace": self.namespace,
                "labels": dict(self.labels),
            },
            "data": {
                key: base64.b64encode(value).decode()
                for key, value in self.data.items()
            },
        }


def parse_raw_obj(obj: dict[str, Any]) -> BaseManifest | None:
    """Parse a raw kubernetes object, returning None for unrelated kinds."""
    if not (kind := obj.get("kind")):
        raise InputException(f"Invalid object missing kind: {obj}")
    if not (api_version := obj.get("apiVersion")):
        raise InputException(f"Invalid object missing apiVersion: {obj}")
    if kind == SECRET_KIND and api_version == SECRET_API_VERSION:
        return Secret.parse_doc(obj)
    if kind == CLUSTER_KIND and api_version.startswith(CAPI_DOMAIN):
        return ClusterResource.parse_doc(obj)
    _LOGGER.debug("Ignoring object %s/%s", api_version, kind)
    return None


async def read_objects(path: Path) -> list[BaseManifest]:
    """Return the CAPI secrets and clusters found in a yaml file.

    The file may contain multiple documents or a List, e.g. the output of
    `kubectl get secrets,clusters -A -o yaml`. Objects of other kinds are ignored.
    """
    async with aiofiles.open(str(path)) as input_file:
        content = await input_file.read()
    try:
        docs = list(yaml.safe_load_all(content))
    except yaml.YAMLError as err:
        raise InputException(f"File {path} failed to parse as yaml: {err}") from err
    objects: list[BaseManifest] = []
    for doc in docs:
        if doc is None:
            continue
        if not isinstance(doc, dict):
            raise InputException(f"File {path} document was not a dictionary: {doc}")
        if doc.get("kind") == "List":
            items = doc.get("items") or []
        else:
            items = [doc]
        for item in items:
            if (obj := parse_raw_obj(item)) is not None:
                objects.append(obj)
    return objects
