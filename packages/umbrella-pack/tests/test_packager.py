# SPDX-License-Identifier: MIT
"""Tests for running the archiving command."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from umbrella_pack.errors import ArchivingError
from umbrella_pack.packager import pack


FAKE_PACK = (
    "import pathlib; "
    "pathlib.Path('acme-1.2.3.tgz').write_bytes(b'archive'); "
    "print('acme-1.2.3.tgz')"
)


def test_pack_reports_archive(tmp_path: Path):
    result = pack(tmp_path, [sys.executable, "-c", FAKE_PACK])

    assert result.archive == tmp_path / "acme-1.2.3.tgz"
    assert result.archive.read_bytes() == b"archive"
    assert "acme-1.2.3.tgz" in result.stdout


def test_pack_without_archive_name(tmp_path: Path):
    result = pack(tmp_path, [sys.executable, "-c", "print('done')"])

    assert result.archive is None
    assert result.stdout.strip() == "done"


def test_pack_failure(tmp_path: Path):
    command = [sys.executable, "-c", "import sys; sys.stderr.write('npm ERR! boom'); sys.exit(3)"]

    with pytest.raises(ArchivingError) as exc_info:
        pack(tmp_path, command)

    assert exc_info.value.returncode == 3
    assert "npm ERR! boom" in str(exc_info.value)
    assert exc_info.value.command == command


def test_pack_missing_command(tmp_path: Path):
    with pytest.raises(ArchivingError, match="not found") as exc_info:
        pack(tmp_path, ["umbrella-pack-no-such-archiver"])

    assert exc_info.value.returncode is None
