"""Library for formatting generated Argo CD cluster secrets."""

from abc import ABC, abstractmethod
import json
import sys
from typing import Any, Generator, TextIO

import yaml

from capi2argo.manifest import GeneratedSecret

PADDING = 4
TABLE_KEYS = ["name", "namespace", "cluster", "server"]


def column_format_string(rows: list[list[str]]) -> str:
    """Produce a format string based on max width of columns."""
    widths = [0] * len(rows[0])
    for row in rows:
        for i, value in enumerate(row):
            widths[i] = max(widths[i], len(value))
    return "".join([f"{{:{w+PADDING}}}" for w in widths])


def format_columns(
    headers: list[str], rows: list[list[str]]
) -> Generator[str, None, None]:
    """Yield the header and rows aligned in columns."""
    data = [headers] + rows
    if format_string := column_format_string(data):
        for row in data:
            yield format_string.format(*row)


class SecretFormatter(ABC):
    """A formatter that prints generated secrets."""

    @abstractmethod
    def format(self, secrets: list[GeneratedSecret]) -> Generator[str, None, None]:
        """Format the secrets as lines of output."""

    def print(self, secrets: list[GeneratedSecret], file: TextIO = sys.stdout) -> None:
        """Print the secrets."""
        for line in self.format(secrets):
            print(line, file=file)


class TableFormatter(SecretFormatter):
    """A formatter that prints a human readable summary of each secret."""

    def format(self, secrets: list[GeneratedSecret]) -> Generator[str, None, None]:
        """Format one row per secret."""
        if not secrets:
            return
        rows = [
            [
                secret.name,
                secret.namespace,
                secret.data["name"].decode(),
                secret.data["server"].decode(),
            ]
            for secret in secrets
        ]
        yield from format_columns([key.upper() for key in TABLE_KEYS], rows)


class YamlFormatter(SecretFormatter):
    """A formatter that prints a yaml document for each secret."""

    def format(self, secrets: list[GeneratedSecret]) -> Generator[str, None, None]:
        """Format the secrets as a yaml multi-document stream."""
        if not secrets:
            return
        content = yaml.dump_all(
            [secret.to_doc() for secret in secrets],
            sort_keys=False,
            explicit_start=True,
        )
        yield from content.rstrip("\n").split("\n")


class JsonFormatter(SecretFormatter):
    """A formatter that prints a json list of secrets."""

    def format(self, secrets: list[GeneratedSecret]) -> Generator[str, None, None]:
        """Format the secrets as a json list."""
        docs: list[dict[str, Any]] = [secret.to_doc() for secret in secrets]
        yield from json.dumps(docs, indent=4, sort_keys=False).split("\n")


FORMATTERS: dict[str, type[SecretFormatter]] = {
    "yaml": YamlFormatter,
    "json": JsonFormatter,
    "table": TableFormatter,
}
