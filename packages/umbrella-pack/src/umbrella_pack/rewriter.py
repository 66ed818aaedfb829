# SPDX-License-Identifier: MIT
"""Textual rewriting of internal package references.

Built files refer to sibling packages by their monorepo names. Once the
packages live inside the umbrella package those references have to point at
the namespaced subpaths instead. Rewriting is plain pattern substitution: no
source is parsed, so the rules are ordered from most to least specific and
the catch-all scope rule comes after every naming convention.

Example (scope "@scope/", umbrella "acme"):
    @scope/filter-bloom           -> acme/filter/bloom
    @scope/mixin-cache-as-bitmap  -> acme/display/cache-as-bitmap
    @scope/canvas-renderer        -> acme/renderer/canvas
    @scope/mesh-extras            -> acme/mesh/extras
    @scope/core                   -> acme/core
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .errors import RewriteError

if TYPE_CHECKING:
    from .aliases import AliasTable

EXTRAS_CATEGORIES = ("mesh", "graphics", "math")

_NAME = r"[\w-]+"


@dataclass(frozen=True)
class RewriteRule:
    """A single substitution applied to every rewritten file.

    Attributes:
        name: Short label used in reports
        pattern: Compiled pattern to search for
        replacement: re.sub replacement template
    """

    name: str
    pattern: re.Pattern[str]
    replacement: str

    def apply(self, text: str) -> tuple[str, int]:
        """Apply the rule, returning the new text and the number of matches."""
        return self.pattern.subn(self.replacement, text)


@dataclass
class RewriteResult:
    """Result of rewriting a single file.

    Attributes:
        path: File that was processed
        replacements: Total substitutions across all rules
        modified: Whether the file content changed
    """

    path: Path
    replacements: int = 0
    modified: bool = False


def _template(text: str) -> str:
    return text.replace("\\", "\\\\")


def identifier_rule(name: str, identifier: str, target: str) -> RewriteRule:
    """Rule replacing a whole package name, e.g. "pixi.js" but not "pixi.js/core"."""
    pattern = re.compile(rf"(?<![\w@./-]){re.escape(identifier)}(?![\w./-])")
    return RewriteRule(name, pattern, _template(target))


def build_rules(
    umbrella: str,
    scope: str,
    aliases: Optional[AliasTable] = None,
    default_package: str = "",
    legacy_package: str = "",
) -> list[RewriteRule]:
    """Build the ordered rule list for an umbrella package.

    Args:
        umbrella: Published name of the umbrella package
        scope: Internal scope prefix, e.g. "@scope/"
        aliases: Alias table used to name the legacy and default entry points
        default_package: Default distribution name, rewritten last
        legacy_package: Legacy distribution name, rewritten before the default

    Returns:
        Rules in the order they must be applied
    """
    prefix = re.escape(scope)
    root = _template(umbrella)

    rules = [
        RewriteRule(
            "filter",
            re.compile(rf"{prefix}filter-(?P<name>{_NAME})"),
            rf"{root}/filter/\g<name>",
        ),
        RewriteRule(
            "mixin",
            re.compile(rf"{prefix}mixin-(?P<name>{_NAME})"),
            rf"{root}/display/\g<name>",
        ),
        RewriteRule(
            "canvas",
            re.compile(rf"{prefix}canvas-(?P<name>{_NAME})"),
            rf"{root}/\g<name>/canvas",
        ),
        RewriteRule(
            "extras",
            re.compile(rf"{prefix}(?P<category>{'|'.join(EXTRAS_CATEGORIES)})-extras(?![\w-])"),
            rf"{root}/\g<category>/extras",
        ),
        RewriteRule("scope", re.compile(prefix), f"{root}/"),
    ]

    for label, package in (("legacy", legacy_package), ("default", default_package)):
        if not package:
            continue
        if aliases is not None:
            relative, _ = aliases.target_names(package, scope)
        else:
            relative = package
        rules.append(identifier_rule(label, package, f"{umbrella}/{relative}"))

    return rules


def rewrite_text(text: str, rules: Sequence[RewriteRule]) -> tuple[str, int]:
    """Apply every rule in order.

    Returns:
        Tuple of (rewritten text, total substitutions)
    """
    total = 0
    for rule in rules:
        text, count = rule.apply(text)
        total += count
    return text, total


def rewrite_file(path: Path, rules: Sequence[RewriteRule]) -> RewriteResult:
    """Rewrite a file in place; unchanged files are not written.

    Raises:
        RewriteError: If the file cannot be read or written
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise RewriteError(f"Failed to read {path}: {e}") from e

    rewritten, count = rewrite_text(content, rules)
    result = RewriteResult(path=path, replacements=count, modified=rewritten != content)

    if result.modified:
        try:
            path.write_text(rewritten, encoding="utf-8")
        except OSError as e:
            raise RewriteError(f"Failed to write {path}: {e}") from e

    return result


def collect_rewrite_targets(
    output_dir: Path,
    extensions: Iterable[str],
    ignore: Iterable[str] = (),
) -> list[Path]:
    """Find files inside the output tree's subfolders that should be rewritten.

    Files at the top level of the output tree (the umbrella manifest and its
    documentation) are never touched.
    """
    suffixes = set(extensions)
    ignored = set(ignore)
    targets: list[Path] = []

    for folder in sorted(p for p in output_dir.iterdir() if p.is_dir()):
        for path in folder.rglob("*"):
            if path.is_file() and path.suffix in suffixes and path.name not in ignored:
                targets.append(path)

    return sorted(targets)


def rewrite_tree(
    output_dir: str | Path,
    rules: Sequence[RewriteRule],
    extensions: Iterable[str],
    ignore: Iterable[str] = (),
) -> list[RewriteResult]:
    """Rewrite every matching file in the output tree.

    Raises:
        RewriteError: If the output directory is missing or a file fails
    """
    root = Path(output_dir)
    if not root.is_dir():
        raise RewriteError(f"Output directory does not exist: {root}")

    return [rewrite_file(path, rules) for path in collect_rewrite_targets(root, extensions, ignore)]
