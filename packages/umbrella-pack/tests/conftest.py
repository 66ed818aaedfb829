# SPDX-License-Identifier: MIT
"""Pytest configuration and fixtures for umbrella-pack tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import pytest

from umbrella_pack.aliases import AliasTable
from umbrella_pack.config import AssembleConfig


ALIASES = {
    "@scope/core": "acme/core",
    "@scope/browser": "acme/browser",
    "@scope/filter-bloom": "acme/filter/bloom",
}


def write_json(path: Path, data: Any) -> Path:
    """Write a JSON document, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def root_export() -> dict[str, Any]:
    """Export descriptor laid out the way built packages ship it."""
    return {
        "import": {"types": "./lib/index.d.ts", "default": "./lib/index.mjs"},
        "require": {"types": "./lib/index.d.ts", "default": "./lib/index.js"},
    }


def write_package(
    workspace: Path,
    name: str,
    version: str = "1.0.0",
    dependencies: Optional[dict[str, str]] = None,
    *,
    exports: bool = True,
    lib: Optional[dict[str, str]] = None,
) -> Path:
    """Create an installed package under node_modules."""
    base = workspace / "node_modules" / name
    manifest: dict[str, Any] = {"name": name, "version": version}
    if dependencies:
        manifest["dependencies"] = dependencies
    if exports:
        manifest["exports"] = {".": root_export()}
    write_json(base / "package.json", manifest)

    for rel_path, content in (lib or {}).items():
        target = base / "lib" / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")

    return base


@pytest.fixture
def aliases() -> AliasTable:
    """Alias table for the sample workspace."""
    return AliasTable(ALIASES)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a workspace where browser depends on core and left-pad.

    left-pad depends on is-number, which must not reach the umbrella's
    dependencies.
    """
    root = tmp_path / "workspace"
    write_json(
        root / "package.json",
        {"name": "workspace", "private": True, "dependencies": {"@scope/browser": "^1.2.3"}},
    )

    write_package(
        root,
        "@scope/browser",
        "1.2.3",
        {"@scope/core": "^1.2.3", "left-pad": "^1.0.0"},
        lib={
            "index.js": "const core = require('@scope/core');\nmodule.exports = core;\n",
            "index.mjs": "export * from '@scope/core';\n",
            "index.d.ts": "export * from '@scope/core';\n",
        },
    )
    write_package(
        root,
        "@scope/core",
        "1.2.3",
        lib={
            "index.js": "module.exports = { VERSION: '1.2.3' };\n",
            "index.mjs": "export const VERSION = '1.2.3';\n",
            "index.d.ts": '/// <reference path="../global.d.ts" />\nexport declare const VERSION: string;\n',
        },
    )
    (root / "node_modules" / "@scope" / "core" / "global.d.ts").write_text(
        "declare namespace GlobalMixins {}\n", encoding="utf-8"
    )
    write_package(root, "left-pad", "1.3.0", {"is-number": "^7.0.0"}, exports=False)
    write_package(root, "is-number", "7.0.0", exports=False)

    write_json(root / "src" / "package.json", {"name": "acme", "license": "MIT"})
    write_json(root / "src" / "aliases.json", ALIASES)
    (root / "src" / "README.md").write_text("# acme\n\nBuilt from @scope/core.\n", encoding="utf-8")

    return root


@pytest.fixture
def config(workspace: Path) -> AssembleConfig:
    """Configuration for the sample workspace, without packing."""
    return AssembleConfig(
        project_dir=workspace,
        scope="@scope/",
        default_package="@scope/browser",
        pack=False,
    )
