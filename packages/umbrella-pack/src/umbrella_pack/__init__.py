# SPDX-License-Identifier: MIT
"""Assemble a monorepo's built packages into a single umbrella package.

Internal packages (those under the monorepo scope) are copied into folders
named by the alias table, their exports are merged into one package.json,
and references between them are rewritten to the umbrella's subpaths.

Example:
    >>> from umbrella_pack import assemble_sync, load_config
    >>>
    >>> config = load_config(".")
    >>> result = assemble_sync(config, on_step=print)
    >>> sorted(result.manifest["exports"])
    ['.', './browser', './core']
"""

__version__ = "0.1.0"

from .aliases import AliasTable, split_identifier
from .assemble import AssembleResult, assemble, assemble_sync, inspect_workspace
from .composer import collect_dependencies, collect_files, compose_manifest, merge_exports
from .config import AssembleConfig, load_config
from .copier import copy_build_output, copy_libraries, copy_package
from .errors import (
    AliasTableError,
    AliasTableNotFoundError,
    AliasTableNotLoadedError,
    ArchivingError,
    BuildOutputNotFoundError,
    ConfigError,
    CopyError,
    ExportCollisionError,
    ManifestError,
    ManifestNotFoundError,
    NotFoundError,
    RewriteError,
    SkeletonNotFoundError,
    UmbrellaPackError,
)
from .manifest import read_manifest, write_manifest
from .node import PackageNode
from .packager import PackResult, pack
from .rewriter import RewriteResult, RewriteRule, build_rules, rewrite_text, rewrite_tree
from .walker import DependencyWalker, PackageRegistry, walk_workspace

__all__ = [
    # Config
    "AssembleConfig",
    "load_config",
    # Aliases
    "AliasTable",
    "split_identifier",
    # Graph
    "PackageNode",
    "PackageRegistry",
    "DependencyWalker",
    "walk_workspace",
    # Manifest
    "read_manifest",
    "write_manifest",
    "compose_manifest",
    "collect_dependencies",
    "collect_files",
    "merge_exports",
    # Copier
    "copy_build_output",
    "copy_package",
    "copy_libraries",
    # Rewriter
    "RewriteRule",
    "RewriteResult",
    "build_rules",
    "rewrite_text",
    "rewrite_tree",
    # Packager
    "pack",
    "PackResult",
    # Pipeline
    "assemble",
    "assemble_sync",
    "inspect_workspace",
    "AssembleResult",
    # Errors
    "UmbrellaPackError",
    "ConfigError",
    "AliasTableError",
    "AliasTableNotLoadedError",
    "AliasTableNotFoundError",
    "NotFoundError",
    "ManifestNotFoundError",
    "BuildOutputNotFoundError",
    "SkeletonNotFoundError",
    "ManifestError",
    "ExportCollisionError",
    "CopyError",
    "RewriteError",
    "ArchivingError",
]
