"""
Documentation engine.

Parses JSDoc comments, enforces the documentation policy, consolidates
overloads, walks namespaces and assembles the sorted module model.
"""

from docgen.comments import Comment, parse_comment
from docgen.domain import (
    Class,
    Constant,
    Doc,
    Export,
    Function,
    Interface,
    Method,
    Module,
    Namespace,
    Property,
    TypeAlias,
)
from docgen.entities import parse_module
from docgen.namespaces import parse_namespaces
from docgen.policy import Policy, Source, resolve_doc
from docgen.project import ModuleFailure, ProjectExtraction, assemble
from docgen.validation import DocgenError, ValidationError

__all__ = [
    # Comments and policy
    "Comment",
    "parse_comment",
    "Policy",
    "Source",
    "resolve_doc",
    # Entity model
    "Doc",
    "Class",
    "Constant",
    "Export",
    "Function",
    "Interface",
    "Method",
    "Module",
    "Namespace",
    "Property",
    "TypeAlias",
    # Parsing
    "parse_module",
    "parse_namespaces",
    "assemble",
    "ModuleFailure",
    "ProjectExtraction",
    # Errors
    "DocgenError",
    "ValidationError",
]
