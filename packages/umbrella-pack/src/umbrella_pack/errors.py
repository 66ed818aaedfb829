# SPDX-License-Identifier: MIT
"""Exceptions raised while assembling an umbrella package.

Every stage raises a subclass of UmbrellaPackError. None of them are
recovered from: the first error aborts the run and leaves the output
directory as it was at that point.
"""

from __future__ import annotations

from pathlib import Path


class UmbrellaPackError(Exception):
    """Base class for all umbrella-pack failures."""

    pass


class ConfigError(UmbrellaPackError):
    """Raised when the assemble configuration is invalid."""

    pass


class AliasTableError(UmbrellaPackError):
    """Raised when the alias table document is malformed."""

    pass


class AliasTableNotLoadedError(AliasTableError):
    """Raised when a package node or walker is created without an alias table."""

    def __init__(self, name: str | None = None):
        self.name = name
        if name:
            message = f"Alias table must be loaded before creating package '{name}'"
        else:
            message = "Alias table must be loaded before walking dependencies"
        super().__init__(message)


class NotFoundError(UmbrellaPackError):
    """Base class for missing inputs."""

    pass


class AliasTableNotFoundError(NotFoundError):
    """Raised when the alias table document does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Alias table not found: {path}")


class ManifestNotFoundError(NotFoundError):
    """Raised when a package has no package.json."""

    def __init__(self, path: Path, package: str | None = None):
        self.path = path
        self.package = package
        if package:
            super().__init__(f"Manifest for '{package}' not found: {path}")
        else:
            super().__init__(f"Manifest not found: {path}")


class BuildOutputNotFoundError(NotFoundError):
    """Raised when an internal package has no build output folder."""

    def __init__(self, package: str, path: Path):
        self.package = package
        self.path = path
        super().__init__(f"Build output for '{package}' not found: {path}")


class SkeletonNotFoundError(NotFoundError):
    """Raised when the output skeleton folder does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Output skeleton not found: {path}")


class ManifestError(UmbrellaPackError):
    """Raised when a manifest cannot be read, parsed or written."""

    pass


class ExportCollisionError(UmbrellaPackError):
    """Raised when two internal packages produce the same export key.

    Attributes:
        key: The colliding export key (e.g. "./core")
        packages: Names of the packages that produced the key
    """

    def __init__(self, key: str, packages: list[str]):
        self.key = key
        self.packages = packages
        super().__init__(
            f"Export '{key}' is produced by more than one package: {', '.join(packages)}"
        )


class CopyError(UmbrellaPackError):
    """Raised when copying build output into the output tree fails."""

    pass


class RewriteError(UmbrellaPackError):
    """Raised when an output file cannot be read or written during rewriting."""

    pass


class ArchivingError(UmbrellaPackError):
    """Raised when the archiving command fails.

    Attributes:
        command: The command that was run
        returncode: Exit status, or None if the command could not start
        output: Captured stdout and stderr
    """

    def __init__(self, command: list[str], returncode: int | None, output: str = ""):
        self.command = command
        self.returncode = returncode
        self.output = output
        cmd = " ".join(command)
        if returncode is None:
            message = f"Archiving command not found: {cmd}"
        else:
            message = f"Archiving command '{cmd}' failed with exit code {returncode}"
        if output:
            message = f"{message}:\n{output}"
        super().__init__(message)
