"""
Configuration constants for TypeScript declaration extraction.

Defines the tree-sitter node type strings used to locate declarations.
"""

from typing import Set

# Comment node type (includes //, /* */, /** */)
COMMENT_NODE: str = "comment"

# `export ...` wrapper around a declaration, a clause or a wildcard
EXPORT_STATEMENT: str = "export_statement"

# `declare ...` wrapper, treated as transparent
AMBIENT_DECLARATION: str = "ambient_declaration"

# Non-exported `namespace X {}` is parsed as an expression statement
EXPRESSION_STATEMENT: str = "expression_statement"

FUNCTION_DECLARATION_TYPES: Set[str] = {
    "function_declaration",
    "generator_function_declaration",
}

# Bodiless function declaration (overload)
FUNCTION_SIGNATURE: str = "function_signature"

CLASS_DECLARATION_TYPES: Set[str] = {
    "class_declaration",
    "abstract_class_declaration",
    "class",
}

INTERFACE_DECLARATION: str = "interface_declaration"
TYPE_ALIAS_DECLARATION: str = "type_alias_declaration"

VARIABLE_STATEMENT_TYPES: Set[str] = {
    "lexical_declaration",
    "variable_declaration",
}
VARIABLE_DECLARATOR: str = "variable_declarator"

NAMESPACE_TYPES: Set[str] = {
    "internal_module",
    "module",
}

# Initializers that make a variable a function
FUNCTION_EXPRESSION_TYPES: Set[str] = {
    "arrow_function",
    "function_expression",
    "function",
    "generator_function",
}

# Class body members
METHOD_DEFINITION: str = "method_definition"
METHOD_SIGNATURE_TYPES: Set[str] = {
    "method_signature",
    "abstract_method_signature",
}
FIELD_DEFINITION_TYPES: Set[str] = {
    "public_field_definition",
    "field_definition",
}
ACCESSOR_KEYWORDS: Set[str] = {"get", "set"}
CONSTRUCTOR_NAME: str = "constructor"

# Export clause
EXPORT_CLAUSE: str = "export_clause"
EXPORT_SPECIFIER: str = "export_specifier"
NAMESPACE_EXPORT: str = "namespace_export"

# JSDoc comment prefix
JSDOC_PREFIX: str = "/**"

# TypeScript file extensions
TS_EXTENSIONS: Set[str] = {
    ".ts",
}

# Declaration files are not documented
EXCLUDED_SUFFIXES: tuple = (
    ".d.ts",
)

# Directories never walked during discovery
SKIPPED_DIRECTORIES: Set[str] = {
    "node_modules",
    "build",
    "dist",
    "lib",
    "coverage",
}
