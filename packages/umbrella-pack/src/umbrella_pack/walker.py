# SPDX-License-Identifier: MIT
"""Workspace dependency walking with memoized node creation.

The walker starts from the workspace root and follows every declared
dependency, creating exactly one PackageNode per package name. A node is
registered before its manifest loads, so concurrent requests for the same
name and dependency cycles both resolve to the node already registered.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .errors import AliasTableNotLoadedError
from .node import PackageNode

if TYPE_CHECKING:
    from .aliases import AliasTable
    from .config import AssembleConfig

ROOT_NAME = "."
ROOT_VERSION = "*"


@dataclass
class PackageRegistry:
    """Registry of package nodes keyed by name, in discovery order."""

    packages: dict[str, PackageNode] = field(default_factory=dict)

    def __contains__(self, name: object) -> bool:
        return name in self.packages

    def __iter__(self) -> Iterator[PackageNode]:
        return iter(list(self.packages.values()))

    def __len__(self) -> int:
        return len(self.packages)

    def get(self, name: str) -> Optional[PackageNode]:
        """Get a node by name."""
        return self.packages.get(name)

    def add(self, node: PackageNode) -> PackageNode:
        """Register a node unless its name is taken; return the registered node."""
        return self.packages.setdefault(node.name, node)

    def remove(self, name: str) -> Optional[PackageNode]:
        """Remove a node by name."""
        return self.packages.pop(name, None)

    def internal(self) -> list[PackageNode]:
        """Internal packages (the libraries folded into the umbrella)."""
        return [pkg for pkg in self if not pkg.is_external]

    def external(self) -> list[PackageNode]:
        """External packages that internal packages declare directly, sorted by name.

        An external package reached only through another external package (or
        through the external root seed) is left to that package's own
        dependency list.
        """
        declared = {
            child.name
            for pkg in self.internal()
            for child in pkg.dependencies or ()
            if child.is_external
        }
        return sorted((pkg for pkg in self if pkg.name in declared), key=lambda p: p.name)



class DependencyWalker:
    """Builds the package registry by walking declared dependencies."""

    def __init__(
        self,
        aliases: Optional[AliasTable],
        config: AssembleConfig,
        registry: Optional[PackageRegistry] = None,
    ) -> None:
        if aliases is None:
            raise AliasTableNotLoadedError()
        self.aliases = aliases
        self.config = config
        self.registry = registry if registry is not None else PackageRegistry()

    async def create(
        self,
        parent: Optional[PackageNode],
        name: str,
        version_range: str,
        base_path: str | Path | None = None,
    ) -> PackageNode:
        """Return the node for name, creating and loading it on first request.

        Args:
            parent: Node declaring the dependency
            name: Package name
            version_range: Declared version range
            base_path: Package directory (defaults to the install location)

        Returns:
            The canonical node for name
        """
        existing = self.registry.get(name)
        if existing is not None:
            return existing

        node = PackageNode(
            parent,
            name,
            version_range,
            base_path,
            aliases=self.aliases,
            config=self.config,
        )
        self.registry.add(node)
        await node.load(self)
        return node

    async def walk(self, root_dir: str | Path | None = None) -> PackageRegistry:
        """Walk every package reachable from the workspace root.

        The root is seeded as a synthetic package named "." and removed from
        the registry once the walk completes.
        """
        root = Path(root_dir) if root_dir is not None else self.config.project_dir
        await self.create(None, ROOT_NAME, ROOT_VERSION, root)
        self.registry.remove(ROOT_NAME)
        return self.registry


async def walk_workspace(aliases: Optional[AliasTable], config: AssembleConfig) -> PackageRegistry:
    """Walk the workspace described by config and return its registry."""
    return await DependencyWalker(aliases, config).walk(config.project_dir)
