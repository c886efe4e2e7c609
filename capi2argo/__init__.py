"""
capi2argo converts Cluster API kubeconfig secrets into Argo CD cluster secrets.
"""

__all__ = [
    "argo_cluster",
    "config",
    "exceptions",
    "kubeconfig",
    "manifest",
    "naming",
    "take_along",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]
