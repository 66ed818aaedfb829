# SPDX-License-Identifier: MIT
"""CLI entry point for the umbrella-pack command."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Optional

import click

from .config import AssembleConfig, load_config
from .errors import UmbrellaPackError


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.config: Optional[AssembleConfig] = None
        self.verbose: bool = False
        self.project_dir: Optional[Path] = None

    def load_config(self, **overrides: Any) -> AssembleConfig:
        """Load configuration, caching the result."""
        if self.config is None:
            self.config = load_config(self.project_dir, **overrides)
        return self.config


pass_context = click.make_pass_decorator(Context, ensure=True)


def echo_error(message: str) -> None:
    """Print an error message to stderr."""
    click.secho(f"Error: {message}", fg="red", err=True)


def echo_success(message: str) -> None:
    """Print a success message."""
    click.secho(message, fg="green")


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.secho(f"Warning: {message}", fg="yellow", err=True)


@click.group()
@click.version_option(package_name="umbrella-pack")
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose output.",
)
@click.option(
    "-C",
    "--directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Workspace root (defaults to the current directory).",
)
@pass_context
def cli(ctx: Context, verbose: bool, directory: Optional[Path]) -> None:
    """Assemble monorepo packages into one umbrella package.

    \b
    Examples:
        umbrella-pack build
        umbrella-pack build --no-pack -o out
        umbrella-pack graph --internal-only
    """
    ctx.verbose = verbose
    ctx.project_dir = directory


# Import and register commands
from .commands import build, graph

cli.add_command(build.build)
cli.add_command(graph.graph)


def main() -> None:
    """Main entry point for the CLI."""
    try:
        cli()
    except UmbrellaPackError as e:
        echo_error(str(e))
        sys.exit(1)
    except Exception as e:
        echo_error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
