# SPDX-License-Identifier: MIT
"""Alias table mapping internal package names to umbrella export names.

The alias table is a JSON object stored in the output skeleton::

    {
        "@scope/core": "acme/core",
        "@scope/filter-bloom": "acme/filter/bloom",
        "pixi.js": "acme/browser"
    }

Each identifier has the form ``<root>/<category>[/<subname>]``. The root
segment is dropped to get the relative export name ("filter/bloom"), and the
remaining separators become dashes to get the folder name ("filter-bloom").
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from pathlib import Path

from .errors import AliasTableError, AliasTableNotFoundError


def split_identifier(identifier: str) -> tuple[str, str]:
    """Split a full export identifier into (relative export name, folder name).

    Args:
        identifier: Identifier such as "acme/filter/bloom"

    Returns:
        Tuple such as ("filter/bloom", "filter-bloom")

    Raises:
        AliasTableError: If the identifier has no segment after the root
    """
    root, sep, relative = identifier.partition("/")
    if not root or not sep or not relative or "" in relative.split("/"):
        raise AliasTableError(
            f"Alias '{identifier}' must have the form '<root>/<category>[/<subname>]'"
        )
    return relative, relative.replace("/", "-")


class AliasTable(Mapping[str, str]):
    """Read-only mapping of internal package name to export identifier."""

    def __init__(self, aliases: Mapping[str, str]):
        checked: dict[str, str] = {}
        for name, identifier in aliases.items():
            if not isinstance(identifier, str):
                raise AliasTableError(f"Alias for '{name}' must be a string")
            split_identifier(identifier)
            checked[name] = identifier
        self._aliases = checked

    def __getitem__(self, name: str) -> str:
        return self._aliases[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._aliases)

    def __len__(self) -> int:
        return len(self._aliases)

    def __repr__(self) -> str:
        return f"AliasTable({self._aliases!r})"

    def target_names(self, name: str, scope: str) -> tuple[str, str]:
        """Derive (relative export name, folder name) for an internal package.

        Names missing from the table fall back to the name without its scope
        prefix, so "@scope/ticker" exports as "ticker".
        """
        identifier = self._aliases.get(name)
        if identifier is not None:
            return split_identifier(identifier)

        relative = name[len(scope) :] if name.startswith(scope) else name
        return relative, relative.replace("/", "-")

    @classmethod
    def from_file(cls, path: str | Path) -> "AliasTable":
        """Load an alias table document.

        Raises:
            AliasTableNotFoundError: If the file does not exist
            AliasTableError: If it is not a JSON object of strings
        """
        alias_path = Path(path)
        if not alias_path.is_file():
            raise AliasTableNotFoundError(alias_path)

        try:
            data = json.loads(alias_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            raise AliasTableError(f"Failed to load alias table {alias_path}: {e}") from e

        if not isinstance(data, dict):
            raise AliasTableError(f"Alias table {alias_path} must contain a JSON object")

        return cls(data)
