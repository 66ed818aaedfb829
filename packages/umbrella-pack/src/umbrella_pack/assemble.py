# SPDX-License-Identifier: MIT
"""Assemble a monorepo's built packages into one umbrella package.

The pipeline runs these steps in order, stopping at the first error:

1. Copy the skeleton folder to a fresh output directory
2. Load the alias table from the output skeleton
3. Walk the workspace dependency graph
4. Compose and write the umbrella package.json
5. Copy every internal package's build output
6. Rewrite internal package references
7. Run the archiving command
"""

from __future__ import annotations

import asyncio
import shutil
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .aliases import AliasTable
from .composer import compose_manifest
from .config import AssembleConfig
from .copier import copy_libraries
from .errors import CopyError, ManifestError, SkeletonNotFoundError
from .manifest import read_manifest, write_manifest
from .packager import PackResult, pack
from .rewriter import RewriteResult, build_rules, rewrite_tree
from .walker import DependencyWalker, PackageRegistry

StepCallback = Callable[[str], None]


@dataclass
class AssembleResult:
    """Result of assembling an umbrella package.

    Attributes:
        output_dir: The populated output directory
        registry: Every package reachable from the workspace root
        manifest: The written umbrella manifest
        rewrites: Per-file rewrite results
        pack_result: Archiving result, None when packing was skipped
    """

    output_dir: Path
    registry: PackageRegistry
    manifest: dict[str, Any]
    rewrites: list[RewriteResult] = field(default_factory=list)
    pack_result: Optional[PackResult] = None

    @property
    def libraries(self) -> list[str]:
        """Names of the internal packages folded into the umbrella."""
        return [pkg.name for pkg in self.registry.internal()]

    @property
    def files_rewritten(self) -> int:
        """Number of files whose content changed during rewriting."""
        return sum(1 for r in self.rewrites if r.modified)


def prepare_output(source_dir: Path, output_dir: Path) -> None:
    """Replace the output directory with a copy of the skeleton.

    Raises:
        SkeletonNotFoundError: If the skeleton folder does not exist
        CopyError: If the output directory cannot be recreated
    """
    if not source_dir.is_dir():
        raise SkeletonNotFoundError(source_dir)

    try:
        if output_dir.exists():
            shutil.rmtree(output_dir)
        shutil.copytree(source_dir, output_dir)
    except OSError as e:
        raise CopyError(f"Failed to prepare output directory {output_dir}: {e}") from e


def load_aliases(config: AssembleConfig, root: Optional[Path] = None) -> AliasTable:
    """Load the alias table from the output tree (or another skeleton root)."""
    base = root if root is not None else config.output_path
    return AliasTable.from_file(base / config.alias_file)


async def assemble(config: AssembleConfig, on_step: Optional[StepCallback] = None) -> AssembleResult:
    """Assemble the umbrella package described by config.

    Args:
        config: Assemble configuration
        on_step: Called with a label as each step starts

    Returns:
        AssembleResult describing the output

    Raises:
        UmbrellaPackError: On the first failure of any step
    """

    def step(label: str) -> None:
        if on_step is not None:
            on_step(label)

    output_dir = config.output_path

    step("Create output directory")
    await asyncio.to_thread(prepare_output, config.source_path, output_dir)
    aliases = load_aliases(config)

    step("Source all packages")
    registry = await DependencyWalker(aliases, config).walk(config.project_dir)

    step("Generate package.json")
    base_manifest = read_manifest(output_dir)
    umbrella = base_manifest.get("name")
    if not isinstance(umbrella, str) or not umbrella:
        raise ManifestError(f"The base manifest in {output_dir} has no 'name'")
    manifest = compose_manifest(registry, base_manifest, config)
    write_manifest(output_dir, manifest)

    step("Copy all library files")
    await copy_libraries(registry.internal(), output_dir)

    step("Patch internal package names")
    rules = build_rules(
        umbrella,
        config.scope,
        aliases,
        default_package=config.default_package,
        legacy_package=config.legacy_package,
    )
    rewrites = await asyncio.to_thread(
        rewrite_tree,
        output_dir,
        rules,
        config.rewrite_extensions,
        config.rewrite_ignore,
    )

    result = AssembleResult(
        output_dir=output_dir,
        registry=registry,
        manifest=manifest,
        rewrites=rewrites,
    )

    if config.pack:
        step("Package output")
        result.pack_result = await asyncio.to_thread(pack, output_dir, config.pack_command)

    return result


def assemble_sync(config: AssembleConfig, on_step: Optional[StepCallback] = None) -> AssembleResult:
    """Run assemble() in a new event loop."""
    return asyncio.run(assemble(config, on_step))


async def inspect_workspace(config: AssembleConfig) -> PackageRegistry:
    """Walk the workspace using the skeleton's alias table, writing nothing."""
    aliases = load_aliases(config, root=config.source_path)
    return await DependencyWalker(aliases, config).walk(config.project_dir)
