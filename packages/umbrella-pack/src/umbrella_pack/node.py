# SPDX-License-Identifier: MIT
"""Package nodes of the workspace dependency graph."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from .copier import copy_package
from .errors import AliasTableNotLoadedError, ManifestError
from .manifest import declared_dependencies, read_manifest

if TYPE_CHECKING:
    from .aliases import AliasTable
    from .config import AssembleConfig
    from .walker import DependencyWalker


class PackageNode:
    """A single package reachable from the workspace root.

    Internal packages carry the export and folder names they take inside the
    umbrella package; external packages only carry their version range.

    Attributes:
        parent: Node that introduced this dependency (None for the root seed)
        name: Declared dependency name
        version_range: Version range declared by the parent
        base_path: Directory holding the package.json
        is_external: True unless the name is part of the monorepo
        target_export_name: Relative export name, e.g. "filter/bloom"
        target_folder_name: Folder in the output tree, e.g. "filter-bloom"
        manifest: Loaded package.json, None until load() runs
        dependencies: Child nodes, None until load() runs
    """

    def __init__(
        self,
        parent: Optional[PackageNode],
        name: str,
        version_range: str,
        base_path: str | Path | None = None,
        *,
        aliases: Optional[AliasTable],
        config: AssembleConfig,
    ) -> None:
        if aliases is None:
            raise AliasTableNotLoadedError(name)

        self.parent = parent
        self.name = name
        self.version_range = version_range
        self.base_path = Path(base_path) if base_path is not None else config.package_path(name)
        self.config = config
        self.aliases = aliases
        self.manifest: Optional[dict[str, Any]] = None
        self.dependencies: Optional[tuple[PackageNode, ...]] = None

        self.is_external = self.classify()
        self.target_export_name, self.target_folder_name = self.derive_target_names()

    def __repr__(self) -> str:
        kind = "external" if self.is_external else "internal"
        return f"PackageNode({self.name!r}, {self.version_range!r}, {kind})"

    def classify(self) -> bool:
        """Return True if this package is external to the monorepo."""
        return not self.config.is_internal(self.name)

    def derive_target_names(self) -> tuple[Optional[str], Optional[str]]:
        """Derive (relative export name, folder name); external nodes get (None, None)."""
        if self.is_external:
            return None, None
        return self.aliases.target_names(self.name, self.config.scope)

    @property
    def build_path(self) -> Path:
        """Build output folder of the package."""
        return self.base_path / self.config.build_folder

    @property
    def version(self) -> Optional[str]:
        """Version from the loaded manifest."""
        if self.manifest is None:
            return None
        return self.manifest.get("version")

    async def load(self, walker: DependencyWalker) -> None:
        """Read the manifest and resolve every declared dependency.

        Children are requested concurrently through the walker's memoized
        factory and stored in manifest order.
        """
        self.manifest = await asyncio.to_thread(read_manifest, self.base_path, self.name)
        declared = declared_dependencies(self.manifest)
        children = await asyncio.gather(
            *(walker.create(self, name, version_range) for name, version_range in declared.items())
        )
        self.dependencies = tuple(children)

    def get_exports(self) -> dict[str, Any]:
        """Return this package's root export, relocated to its target folder.

        The descriptor is serialized, every build folder segment ("/lib/") is
        pointed at the target folder, and the result is parsed back, so the
        loaded manifest is never shared with the caller.

        Raises:
            ManifestError: If the package is external, not loaded, or has no
                root export
        """
        if self.is_external:
            raise ManifestError(f"External package '{self.name}' has no umbrella exports")
        if self.manifest is None:
            raise ManifestError(f"Package '{self.name}' has not been loaded")

        exports = self.manifest.get("exports")
        if not isinstance(exports, dict) or "." not in exports:
            raise ManifestError(f"Package '{self.name}' has no root export (exports['.'])")

        marker = f"/{self.config.build_folder}/"
        serialized = json.dumps(exports["."]).replace(marker, f"/{self.target_folder_name}/")
        return {f"./{self.target_export_name}": json.loads(serialized)}

    async def copy(self, destination_root: str | Path) -> Path:
        """Copy the build output into ``<destination_root>/<target folder>``."""
        return await copy_package(self, Path(destination_root))
