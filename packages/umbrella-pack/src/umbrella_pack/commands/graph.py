# SPDX-License-Identifier: MIT
"""Show the workspace dependency graph."""

from __future__ import annotations

import asyncio

import click

from ..assemble import inspect_workspace
from ..errors import ConfigError, UmbrellaPackError
from ..main import Context, echo_error, echo_info, pass_context


@click.command()
@click.option(
    "--internal-only",
    is_flag=True,
    help="Only list packages folded into the umbrella.",
)
@pass_context
def graph(ctx: Context, internal_only: bool) -> None:
    """List every package reachable from the workspace root.

    Nothing is written: the alias table is read from the skeleton folder.
    """
    try:
        config = ctx.load_config()
    except ConfigError as e:
        echo_error(str(e))
        raise SystemExit(1)

    try:
        registry = asyncio.run(inspect_workspace(config))
    except UmbrellaPackError as e:
        echo_error(str(e))
        raise SystemExit(1)

    for pkg in registry:
        if pkg.is_external:
            if internal_only:
                continue
            parent = pkg.parent.name if pkg.parent is not None else "-"
            echo_info(f"external  {pkg.name}@{pkg.version_range} (from {parent})")
        else:
            echo_info(
                f"internal  {pkg.name}@{pkg.version or pkg.version_range}"
                f" -> ./{pkg.target_export_name} ({pkg.target_folder_name}/)"
            )

    if ctx.verbose:
        echo_info(
            f"\n{len(registry.internal())} internal, "
            f"{len(registry) - len(registry.internal())} external"
        )
