"""
Tree-sitter parser initialization and file parsing utilities.

This module provides functions to initialize the TypeScript parser and parse source files.
"""

import logging
from typing import Tuple
import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser, Tree

# Configure logging
logger = logging.getLogger(__name__)

# Module-level language constant
TS_LANGUAGE = Language(tsts.language_typescript())


def create_parser() -> Parser:
    """Create and configure a tree-sitter parser for TypeScript.

    Returns:
        A Parser instance configured with the TypeScript language.

    Example:
        >>> parser = create_parser()
        >>> tree = parser.parse(b"export const a = 1")
    """
    parser = Parser(TS_LANGUAGE)
    logger.debug("Created tree-sitter TypeScript parser")
    return parser


def count_error_nodes(node: Node) -> int:
    """Count ERROR and missing nodes below ``node`` (inclusive)."""
    count = 1 if (node.type == "ERROR" or node.is_missing) else 0
    if not node.has_error and count == 0:
        return 0
    for child in node.children:
        count += count_error_nodes(child)
    return count


def parse_bytes(source: bytes) -> Tree:
    """Parse raw bytes of TypeScript source code.

    Args:
        source: UTF-8 encoded bytes of TypeScript source code.

    Returns:
        A Tree object representing the parsed AST.

    Raises:
        TypeError: If source is not bytes.

    Example:
        >>> tree = parse_bytes(b"export function foo(): void {}")
        >>> tree.root_node.type
        'program'
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")

    parser = create_parser()
    tree = parser.parse(source)

    if tree.root_node.has_error:
        logger.warning(
            "Parsed tree contains %d syntax error node(s)",
            count_error_nodes(tree.root_node),
        )

    logger.debug(f"Parsed {len(source)} bytes of TypeScript code")
    return tree


def parse_file(file_path: str) -> Tuple[Tree, bytes]:
    """Parse a TypeScript source file from disk.

    Args:
        file_path: Path to the .ts file.

    Returns:
        A tuple of (Tree, source_bytes) where:
        - Tree is the parsed AST
        - source_bytes is the raw file content as bytes

    Raises:
        FileNotFoundError: If the file does not exist.
        IOError: If the file cannot be read.

    Example:
        >>> tree, source = parse_file("src/index.ts")
        >>> tree.root_node.type
        'program'
    """
    try:
        with open(file_path, "rb") as f:
            source_bytes = f.read()
    except FileNotFoundError:
        logger.error(f"File not found: {file_path}")
        raise
    except IOError as e:
        logger.error(f"Error reading file {file_path}: {e}")
        raise

    tree = parse_bytes(source_bytes)

    if tree.root_node.has_error:
        logger.warning(f"File {file_path} contains syntax errors")

    logger.info(f"Successfully parsed file: {file_path}")
    return tree, source_bytes
