"""Tests for the format library."""

import io
import json

import yaml

from capi2argo.manifest import GeneratedSecret
from capi2argo.tool.format import (
    JsonFormatter,
    TableFormatter,
    YamlFormatter,
    format_columns,
)

SECRETS = [
    GeneratedSecret(
        name="cluster-prod",
        namespace="argocd",
        labels={"argocd.argoproj.io/secret-type": "cluster"},
        data={"name": b"prod", "server": b"https://prod:6443", "config": b"{}"},
    ),
    GeneratedSecret(
        name="cluster-staging",
        namespace="argocd",
        labels={},
        data={"name": b"staging", "server": b"https://staging:6443", "config": b"{}"},
    ),
]


def test_format_columns_empty_rows() -> None:
    """Tests with no rows."""
    assert list(format_columns(["a", "b", "c"], [])) == ["a    b    c    "]


def test_format_columns_rows() -> None:
    """Tests format with normal rows"""
    assert list(
        format_columns(
            ["name", "namespace"], [["cluster-prod", "argocd"], ["cluster-a", "gitops"]]
        )
    ) == [
        "name            namespace    ",
        "cluster-prod    argocd       ",
        "cluster-a       gitops       ",
    ]


def test_table_formatter() -> None:
    """Table formatting of generated secrets."""
    assert list(TableFormatter().format(SECRETS)) == [
        "NAME               NAMESPACE    CLUSTER    SERVER                  ",
        "cluster-prod       argocd       prod       https://prod:6443       ",
        "cluster-staging    argocd       staging    https://staging:6443    ",
    ]


def test_table_formatter_empty() -> None:
    """Table formatting with no secrets."""
    assert list(TableFormatter().format([])) == []


def test_yaml_formatter() -> None:
    """Yaml formatting prints one document per secret."""
    output = io.StringIO()
    YamlFormatter().print(SECRETS, file=output)
    docs = list(yaml.safe_load_all(output.getvalue()))
    assert docs == [secret.to_doc() for secret in SECRETS]
    assert output.getvalue().startswith("---\napiVersion: v1\nkind: Secret\n")


def test_yaml_formatter_empty() -> None:
    """Yaml formatting with no secrets prints nothing."""
    assert list(YamlFormatter().format([])) == []


def test_json_formatter() -> None:
    """Json formatting prints a list of secrets."""
    output = io.StringIO()
    JsonFormatter().print(SECRETS, file=output)
    assert json.loads(output.getvalue()) == [secret.to_doc() for secret in SECRETS]
    assert list(JsonFormatter().format([])) == ["[]"]
