"""Exceptions related to capi2argo."""

__all__ = [
    "Capi2ArgoException",
    "InputException",
    "TakeAlongException",
    "MalformedKeyError",
    "MissingTargetWarning",
    "SerializationError",
]


class Capi2ArgoException(Exception):
    """Generic base exception used for this library."""


class InputException(Capi2ArgoException):
    """Raised when the input objects or values are not formatted as expected."""


class TakeAlongException(Capi2ArgoException):
    """Base class for problems found while collecting take-along metadata."""

    def __init__(self, kind: str, key: str, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.key = key


class MalformedKeyError(TakeAlongException):
    """Raised when a take-along key has no target key after the prefix."""

    def __init__(self, kind: str, key: str) -> None:
        super().__init__(
            kind, key, f"invalid take-along {kind}. missing key after prefix: {key}"
        )


class MissingTargetWarning(TakeAlongException):
    """A take-along key names a target that is not on the source resource."""

    def __init__(self, kind: str, key: str, resource: str | None = None) -> None:
        message = f"take-along {kind} '{key}' not found on cluster resource"
        if resource:
            message += f": {resource}"
        super().__init__(kind, key, f"{message}. Ignoring")
        self.resource = resource


class SerializationError(Capi2ArgoException):
    """Raised when the Argo cluster config cannot be encoded."""
