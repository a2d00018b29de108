"""Tests for project assembly."""

import unittest

import pytest

from docgen.policy import Policy
from docgen.project import assemble, is_excluded
from docgen.validation import DocgenError
from extraction.models import ExportSpecifier, SourceModule, VariableDeclaration, WildcardExport

SINCE = "/** @since 1.0.0 */"


def _module(*path, comment=SINCE, variables=()):
    return SourceModule(path=tuple(path), comment=comment, variables=tuple(variables))


class TestAssemble(unittest.TestCase):
    def test_modules_sorted_by_path(self) -> None:
        result = assemble([_module("src", "b.ts"), _module("src", "a.ts")], Policy())
        self.assertTrue(result.ok)
        self.assertEqual([m.joined_path for m in result.modules], ["src/a.ts", "src/b.ts"])

    def test_deprecated_modules_dropped(self) -> None:
        deprecated = _module("src", "old.ts", comment="/**\n * @since 1.0.0\n * @deprecated\n */")
        result = assemble([deprecated, _module("src", "new.ts")], Policy())
        self.assertEqual([m.joined_path for m in result.modules], ["src/new.ts"])
        self.assertEqual(result.deprecated, ["src/old.ts"])

    def test_excluded_modules_skipped(self) -> None:
        policy = Policy(exclude=("src/internal/*",))
        modules = [_module("src", "internal", "x.ts", comment=None), _module("src", "index.ts")]
        result = assemble(modules, policy)
        self.assertTrue(result.ok)
        self.assertEqual(result.excluded, ["src/internal/x.ts"])
        self.assertEqual([m.joined_path for m in result.modules], ["src/index.ts"])

    def test_failures_do_not_block_other_modules(self) -> None:
        bad = _module(
            "src",
            "bad.ts",
            comment=None,
            variables=[VariableDeclaration("a", True, "1")],
        )
        result = assemble([bad, _module("src", "good.ts")], Policy())
        self.assertFalse(result.ok)
        self.assertEqual([m.joined_path for m in result.modules], ["src/good.ts"])
        self.assertEqual(len(result.failures), 1)
        self.assertEqual(result.failures[0].joined_path, "src/bad.ts")
        self.assertEqual(
            result.messages,
            [
                "Missing documentation in src/bad.ts module",
                "Missing @since tag in src/bad.ts#a documentation",
            ],
        )

        with self.assertRaises(DocgenError) as ctx:
            result.raise_for_errors()
        self.assertIn("Missing @since tag in src/bad.ts#a documentation", str(ctx.exception))

    def test_hidden_reexports_never_fail(self) -> None:
        module = SourceModule(
            path=("src", "a.ts"),
            comment=SINCE,
            exports=(
                ExportSpecifier("a", comment="/** @internal */"),
                WildcardExport("'./b'", comment="/** @ignore */"),
            ),
        )
        result = assemble([module], Policy())
        self.assertTrue(result.ok)
        self.assertEqual(result.modules[0].exports, ())

    def test_to_dict(self) -> None:
        result = assemble([_module("src", "bad.ts", comment=None)], Policy())
        payload = result.to_dict()
        self.assertEqual(payload["modules"], 0)
        self.assertEqual(payload["failed_modules"], 1)
        self.assertEqual(payload["errors"][0]["path"], "src/bad.ts")

    def test_raise_for_errors_noop_when_ok(self) -> None:
        assemble([_module("src", "a.ts")], Policy()).raise_for_errors()


def test_thread_pool_matches_sequential():
    modules = [
        _module("src", f"m{i}.ts", comment=None if i % 3 == 0 else SINCE)
        for i in range(10)
    ]
    sequential = assemble(modules, Policy())
    parallel = assemble(modules, Policy(), max_workers=4)
    assert parallel == sequential
    assert assemble(modules, Policy()) == sequential


@pytest.mark.parametrize(
    "path, patterns, expected",
    [
        (("src", "internal", "x.ts"), ("src/internal/*",), True),
        (("src", "index.ts"), ("src/internal/*",), False),
        (("src", "index.ts"), (), False),
        (("src", "internal", "a.ts"), ("src/internal/**/*.ts",), True),
        (("src", "internal", "deep", "a.ts"), ("src/internal/**/*.ts",), True),
        (("src", "internal", "x.ts"), ("src/*.ts",), False),
        (("src", "index.ts"), ("src/*.ts",), True),
    ],
)
def test_is_excluded(path, patterns, expected):
    assert is_excluded(path, patterns) is expected
