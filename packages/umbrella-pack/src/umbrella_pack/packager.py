# SPDX-License-Identifier: MIT
"""Run the archiving command over the finished output tree."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import DEFAULT_PACK_COMMAND
from .errors import ArchivingError


@dataclass
class PackResult:
    """Result of packing the output directory.

    Attributes:
        archive: Archive named on the last line of the command's output, if any
        stdout: Captured standard output
    """

    archive: Optional[Path]
    stdout: str


def pack(output_dir: str | Path, command: Optional[list[str]] = None) -> PackResult:
    """Pack the output directory (``npm pack`` by default).

    Args:
        output_dir: Directory to run the command in
        command: Archiving command

    Returns:
        PackResult with the archive path when the command reports one

    Raises:
        ArchivingError: If the command is missing or exits non-zero
    """
    cwd = Path(output_dir)
    cmd = list(command or DEFAULT_PACK_COMMAND)

    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError:
        raise ArchivingError(cmd, None) from None
    except OSError as e:
        raise ArchivingError(cmd, None, str(e)) from e

    if result.returncode != 0:
        raise ArchivingError(cmd, result.returncode, f"{result.stderr}{result.stdout}".strip())

    lines = [line.strip() for line in result.stdout.splitlines() if line.strip()]
    archive = cwd / lines[-1] if lines else None
    if archive is not None and not archive.exists():
        archive = None

    return PackResult(archive=archive, stdout=result.stdout)
