# SPDX-License-Identifier: MIT
"""Assemble configuration for umbrella packages.

Configuration is read from ``umbrella-pack.toml`` in the workspace root, or
from the ``[tool.umbrella-pack]`` table of a ``pyproject.toml``. Keys use
kebab-case, for example::

    scope = "@scope/"
    family = "pixi.js"
    default-package = "pixi.js"
    legacy-package = "pixi.js-legacy"
    output-dir = "dist"
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .errors import ConfigError

CONFIG_FILENAME = "umbrella-pack.toml"
PYPROJECT_TABLE = "umbrella-pack"

DEFAULT_REWRITE_EXTENSIONS = [".mjs", ".js", ".ts", ".map"]
DEFAULT_REWRITE_IGNORE = ["package.json", "README.md"]
DEFAULT_PACK_COMMAND = ["npm", "pack"]


@dataclass
class AssembleConfig:
    """Configuration for assembling an umbrella package.

    Attributes:
        project_dir: Workspace root containing the root package.json
        scope: Internal scope prefix, always ending with "/"
        family: Umbrella package name family (e.g. "pixi.js")
        default_package: Package providing the version and the "." export
        legacy_package: Legacy distribution entry point rewritten last but one
        source_dir: Skeleton folder copied into the output directory
        output_dir: Output directory
        modules_dir: Folder containing installed packages
        alias_file: Alias table document inside the skeleton
        build_folder: Build output folder of each internal package
        global_types: Optional global declaration file of a package
        entry_types: Entry declaration file referencing the global file
        rewrite_extensions: File suffixes the path rewriter touches
        rewrite_ignore: File names the path rewriter never touches
        pack_command: Archiving command run inside the output directory
        pack: Whether to run the archiving command
        strict_exports: Raise on duplicate export keys instead of overwriting
    """

    project_dir: Path
    scope: str
    family: str = ""
    default_package: str = ""
    legacy_package: str = ""
    source_dir: Path = Path("src")
    output_dir: Path = Path("dist")
    modules_dir: Path = Path("node_modules")
    alias_file: str = "aliases.json"
    build_folder: str = "lib"
    global_types: str = "global.d.ts"
    entry_types: str = "index.d.ts"
    rewrite_extensions: list[str] = field(
        default_factory=lambda: list(DEFAULT_REWRITE_EXTENSIONS)
    )
    rewrite_ignore: list[str] = field(default_factory=lambda: list(DEFAULT_REWRITE_IGNORE))
    pack_command: list[str] = field(default_factory=lambda: list(DEFAULT_PACK_COMMAND))
    pack: bool = True
    strict_exports: bool = True

    def __post_init__(self) -> None:
        self.project_dir = Path(self.project_dir)
        if not self.scope:
            raise ConfigError("'scope' must be set to the internal package scope (e.g. '@scope/')")
        if not self.scope.endswith("/"):
            self.scope = f"{self.scope}/"
        self.source_dir = Path(self.source_dir)
        self.output_dir = Path(self.output_dir)
        self.modules_dir = Path(self.modules_dir)

    def _resolve(self, path: Path) -> Path:
        return path if path.is_absolute() else self.project_dir / path

    @property
    def source_path(self) -> Path:
        """Absolute path of the skeleton folder."""
        return self._resolve(self.source_dir)

    @property
    def output_path(self) -> Path:
        """Absolute path of the output directory."""
        return self._resolve(self.output_dir)

    @property
    def modules_path(self) -> Path:
        """Absolute path of the installed packages folder."""
        return self._resolve(self.modules_dir)

    def package_path(self, name: str) -> Path:
        """Conventional install location of a package."""
        return self.modules_path / name

    def is_internal(self, name: str) -> bool:
        """Check if a package name belongs to the monorepo."""
        if name.startswith(self.scope):
            return True
        if self.family:
            return name == self.family or name.startswith(f"{self.family}-")
        return False

    @classmethod
    def from_dict(cls, data: dict[str, Any], project_dir: str | Path) -> "AssembleConfig":
        """Create a configuration from a parsed TOML table.

        Args:
            data: Table with kebab-case keys
            project_dir: Workspace root

        Returns:
            AssembleConfig instance

        Raises:
            ConfigError: If a key is unknown, mistyped or missing
        """
        known = {f.name: f for f in fields(cls) if f.name != "project_dir"}
        kwargs: dict[str, Any] = {}

        for key, value in data.items():
            attr = key.replace("-", "_")
            if attr not in known:
                raise ConfigError(f"Unknown configuration key: '{key}'")
            kwargs[attr] = _check_type(key, attr, value)

        if "scope" not in kwargs:
            raise ConfigError("Missing required configuration key: 'scope'")

        return cls(project_dir=Path(project_dir), **kwargs)

    @classmethod
    def from_toml(cls, path: str | Path, project_dir: str | Path | None = None) -> "AssembleConfig":
        """Load configuration from a TOML file.

        ``pyproject.toml`` files are read from their ``[tool.umbrella-pack]``
        table; any other file is read from its top level.

        Raises:
            ConfigError: If the file is missing, is not valid TOML, or the
                table is invalid
        """
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "rb") as f:
                document = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML syntax in {config_path}: {e}") from e

        if config_path.name == "pyproject.toml":
            document = document.get("tool", {}).get(PYPROJECT_TABLE)
            if document is None:
                raise ConfigError(f"No [tool.{PYPROJECT_TABLE}] table in {config_path}")

        return cls.from_dict(document, project_dir or config_path.parent)


_LIST_KEYS = {"rewrite_extensions", "rewrite_ignore", "pack_command"}
_BOOL_KEYS = {"pack", "strict_exports"}


def _check_type(key: str, attr: str, value: Any) -> Any:
    if attr in _LIST_KEYS:
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"'{key}' must be a list of strings")
        return list(value)
    if attr in _BOOL_KEYS:
        if not isinstance(value, bool):
            raise ConfigError(f"'{key}' must be a boolean")
        return value
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a string")
    return value


def find_config(project_dir: Path) -> Optional[Path]:
    """Find the configuration file for a workspace, if any."""
    candidate = project_dir / CONFIG_FILENAME
    if candidate.exists():
        return candidate

    pyproject = project_dir / "pyproject.toml"
    if pyproject.exists():
        try:
            with open(pyproject, "rb") as f:
                document = tomllib.load(f)
        except tomllib.TOMLDecodeError:
            return None
        if PYPROJECT_TABLE in document.get("tool", {}):
            return pyproject

    return None


def load_config(project_dir: str | Path | None = None, **overrides: Any) -> AssembleConfig:
    """Load the configuration for a workspace.

    Args:
        project_dir: Workspace root (defaults to the current directory)
        **overrides: Attribute values that replace file values; None is ignored

    Returns:
        AssembleConfig instance

    Raises:
        ConfigError: If no configuration is found or it is invalid
    """
    root = Path(project_dir) if project_dir else Path.cwd()
    root = root.resolve()

    config_path = find_config(root)
    if config_path is None:
        raise ConfigError(
            f"No {CONFIG_FILENAME} or [tool.{PYPROJECT_TABLE}] table found in {root}"
        )

    config = AssembleConfig.from_toml(config_path, project_dir=root)
    for attr, value in overrides.items():
        if value is None:
            continue
        if not hasattr(config, attr):
            raise ConfigError(f"Unknown configuration override: '{attr}'")
        setattr(config, attr, value)

    return config
