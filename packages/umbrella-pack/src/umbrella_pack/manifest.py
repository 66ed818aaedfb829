# SPDX-License-Identifier: MIT
"""Reading and writing package.json manifests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from .errors import ManifestError, ManifestNotFoundError

MANIFEST_FILENAME = "package.json"


def manifest_path(base_path: Path) -> Path:
    """Path of the manifest inside a package directory."""
    return Path(base_path) / MANIFEST_FILENAME


def read_manifest(base_path: str | Path, package: Optional[str] = None) -> dict[str, Any]:
    """Load the manifest of the package at base_path.

    Args:
        base_path: Package directory
        package: Package name, used in error messages

    Returns:
        The parsed manifest

    Raises:
        ManifestNotFoundError: If there is no package.json
        ManifestError: If the file is unreadable or not a JSON object
    """
    path = manifest_path(Path(base_path))
    if not path.is_file():
        raise ManifestNotFoundError(path, package)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ManifestError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise ManifestError(f"Failed to read {path}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(f"Manifest {path} must contain a JSON object")

    return data


def write_manifest(base_path: str | Path, data: dict[str, Any]) -> Path:
    """Write a manifest with two-space indentation.

    Returns:
        Path of the written file

    Raises:
        ManifestError: If the file cannot be written
    """
    path = manifest_path(Path(base_path))
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Failed to write {path}: {e}") from e
    return path


def declared_dependencies(manifest: dict[str, Any]) -> dict[str, str]:
    """Return the manifest's dependencies map, or an empty one."""
    dependencies = manifest.get("dependencies") or {}
    if not isinstance(dependencies, dict):
        raise ManifestError(
            f"'dependencies' of {manifest.get('name', '<unnamed>')} must be an object"
        )
    return dependencies
