# SPDX-License-Identifier: MIT
"""Compose the umbrella package.json from the package registry.

The composed fields are laid over the skeleton's base manifest:

- ``dependencies``: external packages that internal packages declare,
  sorted by name
- ``version``: the default package's version
- ``exports``: every internal package's root export under its alias, plus
  "." pointing at the default package's entry, sorted by key
- ``files``: the base manifest's files plus every internal folder, sorted
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, Optional

from .errors import ExportCollisionError, ManifestError
from .manifest import declared_dependencies

if TYPE_CHECKING:
    from .config import AssembleConfig
    from .node import PackageNode
    from .walker import PackageRegistry


def collect_dependencies(registry: PackageRegistry) -> dict[str, str]:
    """Map each external package declared by an internal package to its range.

    Internal packages are visited in name order; when several declare the
    same external package, the first by name supplies the range. Keys are
    sorted.
    """
    dependencies: dict[str, str] = {}
    for pkg in sorted(registry.internal(), key=lambda p: p.name):
        declared = declared_dependencies(pkg.manifest or {})
        for child in pkg.dependencies or ():
            if child.is_external:
                dependencies.setdefault(child.name, declared.get(child.name, child.version_range))
    return {name: dependencies[name] for name in sorted(dependencies)}


def merge_exports(libraries: list[PackageNode], strict: bool = True) -> dict[str, Any]:
    """Merge the exports of every library, sorted by key.

    Args:
        libraries: Internal package nodes
        strict: Raise on duplicate keys; otherwise the later entry wins

    Raises:
        ExportCollisionError: If strict and two libraries share an export key
    """
    merged: dict[str, Any] = {}
    owners: dict[str, str] = {}

    for pkg in libraries:
        for key, descriptor in pkg.get_exports().items():
            if strict and key in merged:
                raise ExportCollisionError(key, [owners[key], pkg.name])
            merged[key] = descriptor
            owners[key] = pkg.name

    return {key: merged[key] for key in sorted(merged)}


def collect_files(libraries: list[PackageNode], base_files: Optional[list[str]] = None) -> list[str]:
    """Sorted, de-duplicated union of base files and library folders."""
    files = set(base_files or [])
    files.update(pkg.target_folder_name for pkg in libraries if pkg.target_folder_name)
    return sorted(files)


def find_default_package(registry: PackageRegistry, config: AssembleConfig) -> Optional[PackageNode]:
    """Return the configured default package, or None when none is configured.

    Raises:
        ManifestError: If the default package was not reached by the walk or
            is not part of the monorepo
    """
    if not config.default_package:
        return None

    node = registry.get(config.default_package)
    if node is None:
        raise ManifestError(
            f"Default package '{config.default_package}' is not a dependency of the workspace"
        )
    if node.is_external:
        raise ManifestError(
            f"Default package '{config.default_package}' is not part of the monorepo "
            "(check 'scope' and 'family')"
        )
    return node


def compose_manifest(
    registry: PackageRegistry,
    base_manifest: dict[str, Any],
    config: AssembleConfig,
) -> dict[str, Any]:
    """Compose the umbrella manifest.

    Args:
        registry: Walked package registry (without the root seed)
        base_manifest: Manifest from the output skeleton; not modified
        config: Assemble configuration

    Returns:
        A new manifest with every base field preserved and the composed
        fields replaced

    Raises:
        ManifestError: If base ``files`` is not a list, an export is missing,
            or the configured default package is unusable
        ExportCollisionError: If exports collide under strict_exports
    """
    libraries = registry.internal()

    base_files = base_manifest.get("files") or []
    if not isinstance(base_files, list):
        raise ManifestError("'files' in the base manifest must be a list")

    exports = merge_exports(libraries, strict=config.strict_exports)

    default_package = find_default_package(registry, config)

    version = base_manifest.get("version")
    if default_package is not None:
        version = default_package.version or version
        default_key = f"./{default_package.target_export_name}"
        exports["."] = copy.deepcopy(exports[default_key])
        exports = {key: exports[key] for key in sorted(exports)}

    composed = copy.deepcopy(base_manifest)
    composed.update(
        {
            "dependencies": collect_dependencies(registry),
            "exports": exports,
            "files": collect_files(libraries, base_files),
        }
    )
    if version is not None:
        composed["version"] = version
    return composed
