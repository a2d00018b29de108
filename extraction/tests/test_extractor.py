"""
Integration tests for extractor.py

Tests the high-level orchestration functions and the hand-off to the
documentation engine.
"""

import os
import tempfile
import unittest
from pathlib import Path

from docgen.entities import parse_module
from docgen.policy import Policy, Source
from extraction.extractor import (
    ExtractionStats,
    discover_ts_files,
    extract_directory,
    extract_file,
    is_typescript_source,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _write(root: str, relative: str, content: str = "export const a = 1;\n") -> str:
    path = os.path.join(root, relative)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return path


class TestExtractionStats(unittest.TestCase):
    """Test ExtractionStats class."""

    def test_creation(self):
        stats = ExtractionStats()
        self.assertEqual(stats.to_dict(), {
            "files_processed": 0,
            "files_failed": 0,
            "declarations_extracted": 0,
            "parse_errors": 0,
            "failed_paths": [],
        })

    def test_str_representation(self):
        stats = ExtractionStats()
        stats.files_processed = 3
        self.assertIn("processed=3", str(stats))


class TestDiscovery(unittest.TestCase):
    """Test source file discovery."""

    def test_is_typescript_source(self):
        self.assertTrue(is_typescript_source("index.ts"))
        self.assertFalse(is_typescript_source("index.d.ts"))
        self.assertFalse(is_typescript_source("index.js"))
        self.assertFalse(is_typescript_source("index.tsx"))

    def test_discover_skips_declarations_and_vendor_dirs(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            _write(tmpdir, "b.ts")
            _write(tmpdir, "a.ts")
            _write(tmpdir, "sub/c.ts")
            _write(tmpdir, "types.d.ts")
            _write(tmpdir, "node_modules/dep/index.ts")
            _write(tmpdir, ".cache/x.ts")

            files = discover_ts_files(tmpdir)
            relative = [os.path.relpath(f, tmpdir).replace(os.sep, "/") for f in files]
            self.assertEqual(relative, ["a.ts", "b.ts", "sub/c.ts"])


class TestExtractFile(unittest.TestCase):
    """Test extracting from a single file."""

    def test_module_path_relative_to_root(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(tmpdir, "src/index.ts")
            module = extract_file(path, root=tmpdir)
            self.assertEqual(module.path, ("src", "index.ts"))
            self.assertEqual([v.name for v in module.variables], ["a"])

    def test_default_root_is_parent(self):
        module = extract_file(str(FIXTURES_DIR / "sample.ts"))
        self.assertEqual(module.path, ("sample.ts",))

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            extract_file(str(FIXTURES_DIR / "missing.ts"))

    def test_not_typescript(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(tmpdir, "index.js")
            with self.assertRaises(ValueError):
                extract_file(path)


class TestExtractDirectory(unittest.TestCase):
    """Test directory extraction."""

    def test_extract_directory(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            _write(tmpdir, "src/a.ts")
            _write(tmpdir, "src/sub/b.ts", "export function f(): void {}\nexport const b = 2;\n")
            modules, stats = extract_directory(os.path.join(tmpdir, "src"), root=tmpdir)

            self.assertEqual(
                [m.path for m in modules], [("src", "a.ts"), ("src", "sub", "b.ts")]
            )
            self.assertEqual(stats.files_processed, 2)
            self.assertEqual(stats.files_failed, 0)
            self.assertEqual(stats.declarations_extracted, 3)

    def test_undecodable_file_recorded_as_failure(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            _write(tmpdir, "good.ts")
            bad = os.path.join(tmpdir, "bad.ts")
            with open(bad, "wb") as f:
                f.write(b"/** \xff\xfe @since 1.0.0 */\nexport const a = 1;\n")

            modules, stats = extract_directory(tmpdir)
            self.assertEqual([m.path for m in modules], [("good.ts",)])
            self.assertEqual(stats.files_failed, 1)
            self.assertEqual(stats.failed_paths, [bad])
            self.assertEqual(stats.to_dict()["failed_paths"], [bad])

    def test_uses_given_file_list(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            a = _write(tmpdir, "a.ts")
            _write(tmpdir, "b.ts")
            modules, stats = extract_directory(tmpdir, ts_files=[a])
            self.assertEqual([m.path for m in modules], [("a.ts",)])
            self.assertEqual(stats.files_processed, 1)

    def test_empty_directory(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            modules, stats = extract_directory(tmpdir)
            self.assertEqual(modules, [])
            self.assertEqual(stats.files_processed, 0)

    def test_missing_directory(self):
        with self.assertRaises(FileNotFoundError):
            extract_directory("/definitely/missing/src")


class TestSampleDocumentation(unittest.TestCase):
    """Extract the sample fixture and build its documentation model."""

    @classmethod
    def setUpClass(cls):
        source_module = extract_file(str(FIXTURES_DIR / "sample.ts"))
        cls.module = parse_module(source_module, Source(path=source_module.path, policy=Policy()))

    def test_module_doc(self):
        self.assertEqual(self.module.name, "sample")
        self.assertEqual(self.module.description, "Sample module used by the extraction tests.")
        self.assertEqual(self.module.since, "1.0.0")

    def test_functions(self):
        functions = {f.name: f for f in self.module.functions}
        self.assertEqual([f.name for f in self.module.functions], ["add", "double"])
        self.assertEqual(
            functions["add"].signatures,
            ("export declare function add(a: number, b: number): number",),
        )
        self.assertEqual(functions["add"].category, "math")
        self.assertEqual(len(functions["add"].examples), 1)
        self.assertEqual(
            functions["double"].signatures,
            ("export declare const double: (n: number) => number",),
        )

    def test_constants(self):
        self.assertEqual(
            [c.signature for c in self.module.constants],
            ["export declare const zero: 0"],
        )

    def test_types(self):
        self.assertEqual([i.name for i in self.module.interfaces], ["Point"])
        (pair,) = self.module.type_aliases
        self.assertTrue(pair.signature.startswith("export type Pair = [number, number]"))

    def test_class(self):
        (box,) = self.module.classes
        self.assertEqual(box.signature, "export declare class Box<A> { constructor(readonly value: A) }")
        self.assertEqual([m.name for m in box.methods], ["map"])
        self.assertEqual(box.methods[0].signatures, ("map<B>(f: (a: A) => B): Box<B>",))

    def test_exports(self):
        self.assertEqual(
            [(e.name, e.signature) for e in self.module.exports],
            [
                ("one", "export declare const one: 1"),
                ("From './other'", "export * from './other'"),
            ],
        )


if __name__ == "__main__":
    unittest.main()
