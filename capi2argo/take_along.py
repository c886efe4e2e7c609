"""Library for selecting take-along labels and annotations from a CAPI Cluster.

The owner of a CAPI Cluster opts a label or annotation into the generated Argo CD
cluster secret by adding a key naming it, for example:

    metadata:
      labels:
        env: prod
        take-along-label.capi-to-argocd.env: ""

copies `env: prod` onto the generated secret along with an empty provenance
marker `taken-from-cluster-label.capi-to-argocd.env`.
"""

from dataclasses import dataclass
from enum import Enum
import logging

from .exceptions import MalformedKeyError, MissingTargetWarning, TakeAlongException

__all__ = [
    "MetaKind",
    "MetaType",
    "get_meta_type",
    "extract_take_along_key",
    "build_take_along_map",
]

_LOGGER = logging.getLogger(__name__)

TAKE_ALONG_KEY_FORMAT = "take-along-{name}.capi-to-argocd."
TAKEN_FROM_KEY_FORMAT = "taken-from-cluster-{name}.capi-to-argocd."


class MetaKind(Enum):
    """The kind of object metadata a take-along request applies to."""

    LABEL = "label"
    ANNOTATION = "annotation"


@dataclass(frozen=True)
class MetaType:
    """Key prefixes used to work with labels or annotations."""

    name: str
    """The name of the metadata kind e.g. label."""

    take_along: str
    """Prefix of keys that request a label or annotation be taken along."""

    taken_from: str
    """Prefix of the provenance marker added for each copied key."""


def get_meta_type(kind: MetaKind) -> MetaType:
    """Return the key prefixes for the metadata kind."""
    name = kind.value if isinstance(kind, MetaKind) else ""
    return MetaType(
        name=name,
        take_along=TAKE_ALONG_KEY_FORMAT.format(name=name),
        taken_from=TAKEN_FROM_KEY_FORMAT.format(name=name),
    )


def extract_take_along_key(meta_name: str, key: str) -> str:
    """Return the target key of a take-along key, or empty if not a take-along key.

    A key that has the take-along prefix but nothing after it raises
    MalformedKeyError.
    """
    prefix = TAKE_ALONG_KEY_FORMAT.format(name=meta_name)
    if not key.startswith(prefix):
        return ""
    if not (target := key[len(prefix) :]):
        raise MalformedKeyError(meta_name, key)
    return target


def build_take_along_map(
    meta: dict[str, str],
    kind: MetaKind,
    resource: str | None = None,
) -> tuple[dict[str, str], list[TakeAlongException]]:
    """Return the take-along entries requested in the metadata and any problems found.

    The first malformed take-along key stops the scan and no entries are returned
    for this metadata kind. A take-along key naming a target that is not present
    only skips that entry.
    """
    meta_type = get_meta_type(kind)

    targets: list[str] = []
    for key in meta:
        try:
            target = extract_take_along_key(meta_type.name, key)
        except MalformedKeyError as err:
            _LOGGER.debug("Discarding take-along %ss: %s", meta_type.name, err)
            return {}, [err]
        if target:
            targets.append(target)

    take_along: dict[str, str] = {}
    errors: list[TakeAlongException] = []
    for target in targets:
        if target not in meta:
            errors.append(MissingTargetWarning(meta_type.name, target, resource))
            continue
        take_along[target] = meta[target]
        take_along[f"{meta_type.taken_from}{target}"] = ""
    return take_along, errors
