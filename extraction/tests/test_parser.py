"""
Unit tests for parser.py

Tests tree-sitter parser initialization, byte parsing, and file parsing.
"""

import unittest
from pathlib import Path
from extraction.parser import count_error_nodes, create_parser, parse_bytes, parse_file


class TestParserInitialization(unittest.TestCase):
    """Test parser creation and initialization."""

    def test_create_parser(self):
        """Test that create_parser returns a parser with a language set."""
        parser = create_parser()
        self.assertIsNotNone(parser)
        self.assertIsNotNone(parser.language)


class TestParseBytes(unittest.TestCase):
    """Test parsing raw bytes of TypeScript code."""

    def test_parse_simple_function(self):
        tree = parse_bytes(b"export function foo(): void {}")
        self.assertEqual(tree.root_node.type, "program")
        self.assertFalse(tree.root_node.has_error)

    def test_parse_type_syntax(self):
        source = b"export type Pair<A> = readonly [A, A]\nexport interface I { a?: string }\n"
        tree = parse_bytes(source)
        self.assertFalse(tree.root_node.has_error)

    def test_parse_empty(self):
        tree = parse_bytes(b"")
        self.assertEqual(tree.root_node.type, "program")
        self.assertEqual(tree.root_node.named_child_count, 0)

    def test_rejects_str(self):
        with self.assertRaises(TypeError):
            parse_bytes("export const a = 1")

    def test_syntax_errors_counted(self):
        tree = parse_bytes(b"export const = ;")
        self.assertTrue(tree.root_node.has_error)
        self.assertGreaterEqual(count_error_nodes(tree.root_node), 1)

    def test_clean_tree_has_no_error_nodes(self):
        tree = parse_bytes(b"export const a = 1")
        self.assertEqual(count_error_nodes(tree.root_node), 0)


class TestParseFile(unittest.TestCase):
    """Test parsing files from disk."""

    def setUp(self):
        self.fixtures_dir = Path(__file__).parent / "fixtures"

    def test_parse_fixture(self):
        tree, source = parse_file(str(self.fixtures_dir / "sample.ts"))
        self.assertEqual(tree.root_node.type, "program")
        self.assertFalse(tree.root_node.has_error)
        self.assertIn(b"export class Box", source)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            parse_file(str(self.fixtures_dir / "missing.ts"))


if __name__ == "__main__":
    unittest.main()
