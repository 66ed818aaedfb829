# SPDX-License-Identifier: MIT
"""Tests for rewriting internal package references."""

from __future__ import annotations

from pathlib import Path

import pytest
from hypothesis import given, strategies as st

from umbrella_pack.aliases import AliasTable
from umbrella_pack.errors import RewriteError
from umbrella_pack.rewriter import (
    build_rules,
    collect_rewrite_targets,
    identifier_rule,
    rewrite_file,
    rewrite_text,
    rewrite_tree,
)


RULES = build_rules("acme", "@scope/")

PIXI_ALIASES = AliasTable(
    {
        "pixi.js": "acme/browser",
        "pixi.js-legacy": "acme/browser-legacy",
    }
)


def rewrite(text: str, rules=RULES) -> str:
    return rewrite_text(text, rules)[0]


class TestRuleOrder:
    """Tests for the naming conventions and their priority."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("@scope/filter-bloom", "acme/filter/bloom"),
            ("@scope/mixin-cache-as-bitmap", "acme/display/cache-as-bitmap"),
            ("@scope/canvas-renderer", "acme/renderer/canvas"),
            ("@scope/mesh-extras", "acme/mesh/extras"),
            ("@scope/graphics-extras", "acme/graphics/extras"),
            ("@scope/math-extras", "acme/math/extras"),
            ("@scope/foo", "acme/foo"),
        ],
    )
    def test_conventions(self, source, expected):
        assert rewrite(source) == expected

    def test_quoted_specifiers(self):
        source = (
            "import { BloomFilter } from '@scope/filter-bloom';\n"
            'const core = require("@scope/core");\n'
        )

        assert rewrite(source) == (
            "import { BloomFilter } from 'acme/filter/bloom';\n"
            'const core = require("acme/core");\n'
        )

    def test_subpath_kept(self):
        assert rewrite("'@scope/canvas-renderer/lib/index.js'") == (
            "'acme/renderer/canvas/lib/index.js'"
        )

    def test_extras_requires_whole_name(self):
        assert rewrite("@scope/math-extras-legacy") == "acme/math-extras-legacy"

    def test_unrelated_content_untouched(self):
        source = "const scope = '@other/filter-bloom'; // scope/filter-x\n"

        assert rewrite(source) == source

    def test_count(self):
        text, count = rewrite_text("'@scope/core' '@scope/filter-bloom'", RULES)

        assert text == "'acme/core' 'acme/filter/bloom'"
        assert count == 2

    def test_source_map(self):
        source = '{"version":3,"sources":["../../node_modules/@scope/core/src/index.ts"]}'

        assert rewrite(source) == (
            '{"version":3,"sources":["../../node_modules/acme/core/src/index.ts"]}'
        )


class TestDistributionNames:
    """Tests for the legacy and default entry point renames."""

    @pytest.fixture
    def rules(self):
        return build_rules(
            "acme",
            "@scope/",
            PIXI_ALIASES,
            default_package="pixi.js",
            legacy_package="pixi.js-legacy",
        )

    def test_rule_order(self, rules):
        assert [rule.name for rule in rules] == [
            "filter",
            "mixin",
            "canvas",
            "extras",
            "scope",
            "legacy",
            "default",
        ]

    def test_legacy_before_default(self, rules):
        assert rewrite("from 'pixi.js-legacy'", rules) == "from 'acme/browser-legacy'"

    def test_default(self, rules):
        assert rewrite("import * as PIXI from 'pixi.js';", rules) == (
            "import * as PIXI from 'acme/browser';"
        )

    def test_whole_identifier_only(self, rules):
        source = "'pixi.js/lib/x' 'my-pixi.js' 'pixi.json' '@pixi.js'"

        assert rewrite(source, rules) == source

    def test_umbrella_named_like_family(self):
        rules = build_rules(
            "pixi.js",
            "@pixi/",
            PIXI_ALIASES,
            default_package="pixi.js",
            legacy_package="pixi.js-legacy",
        )

        text = "'@pixi/core' 'pixi.js' 'pixi.js-legacy'"

        assert rewrite(text, rules) == (
            "'pixi.js/core' 'pixi.js/browser' 'pixi.js/browser-legacy'"
        )

    def test_without_alias_table(self):
        rules = build_rules("acme", "@scope/", default_package="pixi.js")

        assert rewrite("'pixi.js'", rules) == "'acme/pixi.js'"

    def test_identifier_rule_escapes(self):
        rule = identifier_rule("default", "a.b", "acme/x")

        assert rule.apply("'a.b' 'axb'") == ("'acme/x' 'axb'", 1)


specifiers = st.lists(
    st.tuples(
        st.sampled_from(["filter-", "mixin-", "canvas-", "", "mesh-extras", "core-"]),
        st.from_regex(r"[a-z][a-z0-9-]{0,8}", fullmatch=True),
    ),
    max_size=6,
)


@given(parts=specifiers)
def test_rewrite_is_idempotent(parts):
    """Applying the rules a second time changes nothing."""
    rules = build_rules(
        "acme", "@scope/", PIXI_ALIASES, default_package="pixi.js", legacy_package="pixi.js-legacy"
    )
    text = " ".join(f"'@scope/{prefix}{name}'" for prefix, name in parts) + " 'pixi.js'"

    once, _ = rewrite_text(text, rules)
    twice, count = rewrite_text(once, rules)

    assert twice == once
    assert count == 0
    assert "@scope/" not in once


class TestRewriteFiles:
    """Tests for rewriting files in the output tree."""

    @pytest.fixture
    def output(self, tmp_path: Path) -> Path:
        root = tmp_path / "dist"
        (root / "core").mkdir(parents=True)
        (root / "filter-bloom" / "nested").mkdir(parents=True)
        (root / "package.json").write_text('{"name": "@scope/core"}', encoding="utf-8")
        (root / "README.md").write_text("@scope/core\n", encoding="utf-8")
        (root / "index.js").write_text("require('@scope/core');\n", encoding="utf-8")
        (root / "core" / "index.js").write_text("require('@scope/math');\n", encoding="utf-8")
        (root / "core" / "index.d.ts").write_text("export * from '@scope/math';\n", encoding="utf-8")
        (root / "core" / "index.js.map").write_text('{"sources":["@scope/math"]}', encoding="utf-8")
        (root / "core" / "README.md").write_text("@scope/core\n", encoding="utf-8")
        (root / "core" / "data.json").write_text('"@scope/core"', encoding="utf-8")
        (root / "filter-bloom" / "nested" / "index.mjs").write_text(
            "export * from '@scope/core';\n", encoding="utf-8"
        )
        (root / "filter-bloom" / "nested" / "package.json").write_text(
            '{"main": "@scope/core"}', encoding="utf-8"
        )
        return root

    def test_collect_targets(self, output: Path):
        targets = collect_rewrite_targets(output, [".mjs", ".js", ".ts", ".map"], ["package.json"])

        assert [p.relative_to(output).as_posix() for p in targets] == [
            "core/index.d.ts",
            "core/index.js",
            "core/index.js.map",
            "filter-bloom/nested/index.mjs",
        ]

    def test_rewrite_tree(self, output: Path):
        results = rewrite_tree(output, RULES, [".mjs", ".js", ".ts", ".map"], ["package.json"])

        assert all(r.modified for r in results)
        assert (output / "core" / "index.js").read_text() == "require('acme/math');\n"
        assert (output / "core" / "index.d.ts").read_text() == "export * from 'acme/math';\n"
        assert (output / "core" / "index.js.map").read_text() == '{"sources":["acme/math"]}'
        # Top-level files, ignored names and other suffixes are untouched
        assert (output / "index.js").read_text() == "require('@scope/core');\n"
        assert (output / "package.json").read_text() == '{"name": "@scope/core"}'
        assert (output / "core" / "README.md").read_text() == "@scope/core\n"
        assert (output / "core" / "data.json").read_text() == '"@scope/core"'

    def test_unmodified_file_not_written(self, tmp_path: Path):
        path = tmp_path / "index.js"
        path.write_text("export {};\n", encoding="utf-8")
        mtime = path.stat().st_mtime_ns

        result = rewrite_file(path, RULES)

        assert result.modified is False
        assert result.replacements == 0
        assert path.stat().st_mtime_ns == mtime

    def test_missing_output_dir(self, tmp_path: Path):
        with pytest.raises(RewriteError, match="does not exist"):
            rewrite_tree(tmp_path / "missing", RULES, [".js"])

    def test_binary_file(self, tmp_path: Path):
        path = tmp_path / "blob.js"
        path.write_bytes(b"\xff\xfe\x00")

        with pytest.raises(RewriteError, match="Failed to read"):
            rewrite_file(path, RULES)
