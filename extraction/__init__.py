"""
Declaration provider.

Tree-sitter-based TypeScript parser and declaration extractor.
Extracts exported declarations, their overloads and their JSDoc comments.
"""

from extraction.models import (
    ClassDeclaration,
    ExportSpecifier,
    FunctionDeclaration,
    InterfaceDeclaration,
    MethodDeclaration,
    NamespaceDeclaration,
    PropertyDeclaration,
    Signature,
    SourceModule,
    TypeAliasDeclaration,
    VariableDeclaration,
    WildcardExport,
)
from extraction.parser import create_parser, parse_file, parse_bytes, count_error_nodes
from extraction.traversal import extract_module_from_tree
from extraction.extractor import (
    extract_file,
    extract_directory,
    discover_ts_files,
    ExtractionStats,
)

__all__ = [
    # Data models
    "ClassDeclaration",
    "ExportSpecifier",
    "FunctionDeclaration",
    "InterfaceDeclaration",
    "MethodDeclaration",
    "NamespaceDeclaration",
    "PropertyDeclaration",
    "Signature",
    "SourceModule",
    "TypeAliasDeclaration",
    "VariableDeclaration",
    "WildcardExport",
    "ExtractionStats",
    # Low-level parsing
    "create_parser",
    "parse_file",
    "parse_bytes",
    "count_error_nodes",
    # Mid-level extraction
    "extract_module_from_tree",
    # High-level orchestration
    "extract_file",
    "extract_directory",
    "discover_ts_files",
]
