# SPDX-License-Identifier: MIT
"""Copy internal build output into the umbrella output tree.

Each internal package's build folder is copied to a folder named after its
alias. When the package ships a global declaration file, the file is copied
next to the build output and the entry declaration file is pointed at the
local copy::

    /// <reference path="../global.d.ts" />   ->   /// <reference path="./global.d.ts" />
"""

from __future__ import annotations

import asyncio
import shutil
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import BuildOutputNotFoundError, CopyError

if TYPE_CHECKING:
    from .node import PackageNode


def _copy_tree(source: Path, target: Path) -> None:
    shutil.copytree(source, target, dirs_exist_ok=True)


def fix_global_reference(entry_file: Path, global_name: str) -> bool:
    """Point the entry declaration file at a sibling global declaration file.

    Returns:
        True if the file was modified
    """
    if not entry_file.is_file():
        return False

    content = entry_file.read_text(encoding="utf-8")
    patched = content.replace(f"../{global_name}", f"./{global_name}")
    if patched == content:
        return False

    entry_file.write_text(patched, encoding="utf-8")
    return True


def copy_build_output(node: PackageNode, destination_root: Path) -> Path:
    """Copy one internal package into the output tree (blocking).

    Args:
        node: Loaded internal package node
        destination_root: Root of the output tree

    Returns:
        The package's folder in the output tree

    Raises:
        CopyError: If the node is external or copying fails
        BuildOutputNotFoundError: If the build folder does not exist
    """
    if node.is_external or node.target_folder_name is None:
        raise CopyError(f"External package '{node.name}' cannot be copied into the output")

    source = node.build_path
    if not source.is_dir():
        raise BuildOutputNotFoundError(node.name, source)

    target = destination_root / node.target_folder_name
    config = node.config

    try:
        _copy_tree(source, target)

        global_file = node.base_path / config.global_types
        if global_file.is_file():
            shutil.copy2(global_file, target / config.global_types)
            fix_global_reference(target / config.entry_types, config.global_types)
    except OSError as e:
        raise CopyError(f"Failed to copy '{node.name}' to {target}: {e}") from e

    return target


async def copy_package(node: PackageNode, destination_root: Path) -> Path:
    """Copy one internal package without blocking the event loop."""
    return await asyncio.to_thread(copy_build_output, node, destination_root)


async def copy_libraries(nodes: Iterable[PackageNode], destination_root: str | Path) -> list[Path]:
    """Copy every internal package concurrently.

    Packages are copied to disjoint folders, so completion order does not
    matter. The returned paths follow the order of ``nodes``.
    """
    root = Path(destination_root)
    return list(await asyncio.gather(*(node.copy(root) for node in nodes)))
