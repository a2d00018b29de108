"""Recursive namespace walking."""

from __future__ import annotations

from typing import List, Sequence

from docgen.comments import parse_comment
from docgen.domain import Namespace, create_namespace
from docgen.entities import visible, parse_interfaces, parse_type_aliases
from docgen.policy import Source, resolve_doc
from docgen.validation import collect, validate_all
from extraction.models import NamespaceDeclaration


def parse_namespace(declaration: NamespaceDeclaration, source: Source) -> Namespace:
    """Parse one namespace and its whole subtree.

    The namespace's own documentation, its interfaces, its type aliases and
    its nested namespaces are all validated; their failures are raised
    together in that order.
    """
    doc, interfaces, type_aliases, namespaces = collect(
        lambda: resolve_doc(declaration.name, parse_comment(declaration.comment), source),
        lambda: parse_interfaces(declaration.interfaces, source),
        lambda: parse_type_aliases(declaration.type_aliases, source),
        lambda: parse_namespaces(declaration.namespaces, source),
    )
    return create_namespace(
        doc.named(declaration.name), interfaces, type_aliases, namespaces
    )


def parse_namespaces(
    declarations: Sequence[NamespaceDeclaration], source: Source
) -> List[Namespace]:
    return validate_all(visible(declarations), lambda d: parse_namespace(d, source))
