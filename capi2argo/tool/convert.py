"""capi2argo convert action."""

from argparse import (
    ArgumentParser,
    BooleanOptionalAction,
    _SubParsersAction as SubParsersAction,
)
import logging
import pathlib
from typing import cast

from capi2argo.argo_cluster import new_argo_cluster
from capi2argo.config import ConverterConfig, DEFAULT_ARGO_NAMESPACE
from capi2argo.exceptions import InputException
from capi2argo.kubeconfig import CapiCluster
from capi2argo.manifest import (
    CAPI_CLUSTER_NAME_LABEL,
    ClusterResource,
    GeneratedSecret,
    NamespacedName,
    Secret,
    read_objects,
)
from capi2argo.naming import KUBECONFIG_SUFFIX

from .format import FORMATTERS

_LOGGER = logging.getLogger(__name__)


def find_cluster(
    secret: Secret, clusters: dict[NamespacedName, ClusterResource]
) -> ClusterResource | None:
    """Return the CAPI Cluster that owns the kubeconfig secret, if present."""
    name = secret.labels.get(CAPI_CLUSTER_NAME_LABEL) or secret.name.removesuffix(
        KUBECONFIG_SUFFIX
    )
    return clusters.get(NamespacedName(namespace=secret.namespace, name=name))


def convert_secrets(
    secrets: list[Secret],
    clusters: list[ClusterResource],
    config: ConverterConfig,
) -> list[GeneratedSecret]:
    """Convert each CAPI kubeconfig secret into an Argo CD cluster secret.

    Other CAPI secrets (e.g. `-ca`, `-etcd`) are ignored and a kubeconfig secret
    that cannot be decoded is logged and skipped.
    """
    clusters_by_name = {cluster.namespaced_name: cluster for cluster in clusters}
    results = []
    for secret in secrets:
        if not secret.is_capi_secret:
            _LOGGER.debug("Skipping non-CAPI secret %s", secret.namespaced_name)
            continue
        if not secret.name.endswith(KUBECONFIG_SUFFIX):
            _LOGGER.debug("Skipping non-kubeconfig secret %s", secret.namespaced_name)
            continue
        try:
            capi_cluster = CapiCluster.from_secret(secret)
        except InputException as err:
            _LOGGER.warning("Skipping secret %s: %s", secret.namespaced_name, err)
            continue
        if (cluster := find_cluster(secret, clusters_by_name)) is None:
            _LOGGER.info(
                "No Cluster found for secret %s, skipping take-along metadata",
                secret.namespaced_name,
            )
        argo_cluster, errors = new_argo_cluster(capi_cluster, secret, cluster, config)
        for err in errors:
            _LOGGER.info("%s", err)
        results.append(argo_cluster.convert_to_secret(validate_tls=config.validate_tls))
    return results


class ConvertAction:
    """capi2argo convert action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "convert",
                help="Convert CAPI kubeconfig secrets into Argo CD cluster secrets",
                description="""Reads CAPI kubeconfig Secrets and CAPI Clusters from
                    a yaml file and prints the Argo CD cluster Secrets that register
                    each cluster, including any take-along labels.""",
            ),
        )
        args.add_argument(
            "path",
            type=pathlib.Path,
            help="Path to a yaml file with CAPI Secrets and Clusters",
        )
        args.add_argument(
            "--argo-namespace",
            type=str,
            default=DEFAULT_ARGO_NAMESPACE,
            help="Namespace of the generated Argo CD cluster secrets",
        )
        args.add_argument(
            "--enable-namespaced-names",
            type=bool,
            action=BooleanOptionalAction,
            default=False,
            help="Prefix cluster names with the namespace of the CAPI secret",
        )
        args.add_argument(
            "--validate-tls",
            type=bool,
            action=BooleanOptionalAction,
            default=False,
            help="Fail when the TLS client config is missing or not base64 encoded",
        )
        args.add_argument(
            "--output",
            "-o",
            choices=list(FORMATTERS),
            default="yaml",
            help="Output format of the command",
        )
        args.add_argument(
            "--output-file",
            type=str,
            default="/dev/stdout",
            help="Output file for the results of the command",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        path: pathlib.Path,
        argo_namespace: str,
        enable_namespaced_names: bool,
        validate_tls: bool,
        output: str,
        output_file: str,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        config = ConverterConfig(
            argo_namespace=argo_namespace,
            enable_namespaced_names=enable_namespaced_names,
            validate_tls=validate_tls,
        )
        objects = await read_objects(path)
        secrets = [obj for obj in objects if isinstance(obj, Secret)]
        clusters = [obj for obj in objects if isinstance(obj, ClusterResource)]
        _LOGGER.debug("Found %d secrets and %d clusters", len(secrets), len(clusters))

        results = convert_secrets(secrets, clusters, config)

        formatter = FORMATTERS[output]()
        with open(output_file, "w") as file:
            formatter.print(results, file=file)
