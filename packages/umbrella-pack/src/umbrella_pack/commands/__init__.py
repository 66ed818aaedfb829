# SPDX-License-Identifier: MIT
"""CLI command implementations."""

from . import build, graph

__all__ = ["build", "graph"]
