# SPDX-License-Identifier: MIT
"""Build the umbrella package."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from ..assemble import assemble_sync
from ..errors import ConfigError, UmbrellaPackError
from ..main import Context, echo_error, echo_info, echo_success, echo_warning, pass_context


@click.command()
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(path_type=Path),
    help="Output directory (overrides output-dir).",
)
@click.option(
    "--source-dir",
    "-s",
    type=click.Path(path_type=Path),
    help="Skeleton folder copied into the output (overrides source-dir).",
)
@click.option(
    "--pack/--no-pack",
    default=None,
    help="Run the archiving command on the output.",
)
@click.option(
    "--strict-exports/--allow-export-overrides",
    default=None,
    help="Fail when two packages produce the same export.",
)
@pass_context
def build(
    ctx: Context,
    output_dir: Optional[Path],
    source_dir: Optional[Path],
    pack: Optional[bool],
    strict_exports: Optional[bool],
) -> None:
    """Assemble the workspace into the umbrella package.

    \b
    Examples:
        umbrella-pack build                 # Assemble into dist/ and pack
        umbrella-pack build --no-pack       # Leave the output unpacked
        umbrella-pack build -o ./release    # Output to a custom directory
    """
    try:
        config = ctx.load_config(
            output_dir=output_dir,
            source_dir=source_dir,
            pack=pack,
            strict_exports=strict_exports,
        )
    except ConfigError as e:
        echo_error(str(e))
        raise SystemExit(1)

    if ctx.verbose:
        echo_info(f"Workspace: {config.project_dir}")
        echo_info(f"Skeleton: {config.source_path}")
        echo_info(f"Output directory: {config.output_path}")

    try:
        result = assemble_sync(config, on_step=echo_info)
    except UmbrellaPackError as e:
        echo_error(str(e))
        raise SystemExit(1)

    libraries = result.registry.internal()
    echo_info(f"  Libraries: {len(libraries)}")
    if ctx.verbose:
        for pkg in libraries:
            echo_info(f"    {pkg.name} -> ./{pkg.target_export_name} ({pkg.target_folder_name}/)")

    dependencies = result.manifest.get("dependencies", {})
    echo_info(f"  External dependencies: {len(dependencies)}")
    if ctx.verbose:
        for name, version_range in dependencies.items():
            echo_info(f"    {name}@{version_range}")

    echo_info(f"  Files rewritten: {result.files_rewritten}")

    if result.pack_result is not None:
        if result.pack_result.archive is not None:
            echo_success(f"  Created: {result.pack_result.archive}")
        else:
            echo_warning("  Archiving command did not report an archive")

    echo_success(f"\nDone! {result.manifest.get('name')}@{result.manifest.get('version')}")
