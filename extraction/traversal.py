"""
AST traversal and declaration extraction logic.

This module walks a tree-sitter TypeScript AST and builds the declaration
model of ``extraction.models``: every top-level declaration with its export
flag, its leading JSDoc text and the source text needed to render its
signature.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union
from tree_sitter import Node, Tree

from extraction.config import (
    ACCESSOR_KEYWORDS,
    AMBIENT_DECLARATION,
    CLASS_DECLARATION_TYPES,
    COMMENT_NODE,
    CONSTRUCTOR_NAME,
    EXPORT_CLAUSE,
    EXPORT_SPECIFIER,
    EXPORT_STATEMENT,
    EXPRESSION_STATEMENT,
    FIELD_DEFINITION_TYPES,
    FUNCTION_DECLARATION_TYPES,
    FUNCTION_EXPRESSION_TYPES,
    FUNCTION_SIGNATURE,
    INTERFACE_DECLARATION,
    JSDOC_PREFIX,
    METHOD_DEFINITION,
    METHOD_SIGNATURE_TYPES,
    NAMESPACE_EXPORT,
    NAMESPACE_TYPES,
    TYPE_ALIAS_DECLARATION,
    VARIABLE_DECLARATOR,
    VARIABLE_STATEMENT_TYPES,
)
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

logger = logging.getLogger(__name__)
_SPACE_RE = re.compile(r"\s+")


def node_text(node: Node, source_bytes: bytes) -> str:
    return source_bytes[node.start_byte:node.end_byte].decode("utf-8")


def span_text(start: Node, end: Node, source_bytes: bytes) -> str:
    """Source text from the start of ``start`` to the end of ``end``."""
    return source_bytes[start.start_byte:end.end_byte].decode("utf-8")


def is_jsdoc_comment(comment_text: str) -> bool:
    """Check if a comment is a JSDoc block (``/** ... */``)."""
    stripped = comment_text.strip()
    return stripped.startswith(JSDOC_PREFIX) and not stripped.startswith("/**/")


def _preceding_comments(node: Node, source_bytes: bytes) -> List[str]:
    """Contiguous comment siblings before ``node``, closest first.

    Decorators between the comment and the declaration are skipped.
    """
    comments = []
    sibling = node.prev_named_sibling
    while sibling is not None and sibling.type in (COMMENT_NODE, "decorator"):
        if sibling.type == COMMENT_NODE:
            comments.append(node_text(sibling, source_bytes))
        sibling = sibling.prev_named_sibling
    return comments


def get_leading_jsdoc(node: Node, source_bytes: bytes) -> Optional[str]:
    """Return the JSDoc block closest to ``node``, or None.

    Several JSDoc blocks may precede a declaration (for instance the file
    header and the declaration's own comment); the last one wins.

    Args:
        node: The outermost node of the declaration (its export statement
            when exported).
        source_bytes: The raw source file bytes.

    Returns:
        Raw comment text including delimiters, or None if no JSDoc found.
    """
    for comment in _preceding_comments(node, source_bytes):
        if is_jsdoc_comment(comment):
            return comment
    return None


def get_module_comment(root: Node, source_bytes: bytes) -> Optional[str]:
    """Return the first comment of the file when it precedes a statement.

    A file made only of comments has no module documentation.
    """
    children = root.named_children
    if not children or children[0].type != COMMENT_NODE:
        return None
    if all(child.type == COMMENT_NODE for child in children):
        return None
    return node_text(children[0], source_bytes)


def _has_keyword(node: Node, keyword: str) -> bool:
    return any(not child.is_named and child.type == keyword for child in node.children)


def _annotation_text(annotation: Optional[Node], source_bytes: bytes) -> Optional[str]:
    """Type text of a ``type_annotation`` without its leading colon."""
    if annotation is None:
        return None
    text = node_text(annotation, source_bytes).strip()
    if text.startswith(":"):
        text = text[1:]
    return _SPACE_RE.sub(" ", text).strip()


def _body_offset(start: Node, body: Optional[Node], source_bytes: bytes) -> Optional[int]:
    if body is None:
        return None
    return len(source_bytes[start.start_byte:body.start_byte].decode("utf-8"))


# ---------------------------------------------------------------------------
# type inference
# ---------------------------------------------------------------------------


def _function_type_text(node: Node, source_bytes: bytes) -> str:
    """Render an arrow or function expression as a function type."""
    type_params = node.child_by_field_name("type_parameters")
    params = node.child_by_field_name("parameters")
    if params is not None:
        params_text = node_text(params, source_bytes)
    else:
        single = node.child_by_field_name("parameter")
        params_text = f"({node_text(single, source_bytes)}: any)" if single else "()"
    prefix = node_text(type_params, source_bytes) if type_params else ""
    returns = _annotation_text(node.child_by_field_name("return_type"), source_bytes)
    text = f"{prefix}{params_text} => {returns or 'any'}"
    return _SPACE_RE.sub(" ", text)


def infer_type_text(value: Node, source_bytes: bytes, literal: bool) -> str:
    """Approximate the type of an initializer expression.

    Args:
        value: The initializer node.
        source_bytes: The raw source file bytes.
        literal: Keep literal types (``const`` and ``readonly`` bindings)
            instead of widening them.

    Returns:
        Type text, ``any`` when nothing better can be said.
    """
    kind = value.type
    named = value.named_children

    if kind == "parenthesized_expression" and named:
        return infer_type_text(named[0], source_bytes, literal)
    if kind == "number":
        return node_text(value, source_bytes) if literal else "number"
    if kind == "string":
        raw = node_text(value, source_bytes)[1:-1]
        return f'"{raw}"' if literal else "string"
    if kind == "template_string":
        return "string"
    if kind in ("true", "false"):
        return kind if literal else "boolean"
    if kind in ("null", "undefined"):
        return kind
    if kind == "unary_expression" and named and named[0].type == "number":
        return _SPACE_RE.sub("", node_text(value, source_bytes)) if literal else "number"
    if kind == "new_expression":
        constructor = value.child_by_field_name("constructor")
        type_args = value.child_by_field_name("type_arguments")
        if constructor is not None:
            text = node_text(constructor, source_bytes)
            if type_args is not None:
                text += node_text(type_args, source_bytes)
            return text
    if kind == "as_expression" and named:
        # `x as const` keeps only the expression as a named child
        if len(named) == 1:
            return infer_type_text(named[0], source_bytes, True)
        return _SPACE_RE.sub(" ", node_text(named[-1], source_bytes))
    if kind == "satisfies_expression" and named:
        return infer_type_text(named[0], source_bytes, literal)
    if kind in FUNCTION_EXPRESSION_TYPES:
        return _function_type_text(value, source_bytes)
    if kind == "array":
        element_types = {infer_type_text(e, source_bytes, False) for e in named}
        if len(element_types) == 1:
            return f"{element_types.pop()}[]"
        return "any[]"
    if kind == "object":
        members = []
        for pair in named:
            if pair.type != "pair":
                return "any"
            key = pair.child_by_field_name("key")
            pair_value = pair.child_by_field_name("value")
            members.append(
                f"{node_text(key, source_bytes)}: "
                f"{infer_type_text(pair_value, source_bytes, False)};"
            )
        return "{ " + " ".join(members) + " }" if members else "{}"
    return "any"


# ---------------------------------------------------------------------------
# overload grouping
# ---------------------------------------------------------------------------


@dataclass
class _CallableGroup:
    """Overloads and implementation of one callable, in source order."""

    name: Optional[str]
    exported: bool
    static: bool = False
    overloads: List[Signature] = field(default_factory=list)
    implementation: Optional[Signature] = None

    def parts(self) -> Tuple[Signature, Tuple[Signature, ...]]:
        """Return (implementation, overloads).

        Bodiless groups (ambient or abstract declarations) use their last
        signature as the implementation; when there are several they all
        stay visible as overloads.
        """
        if self.implementation is not None:
            return self.implementation, tuple(self.overloads)
        if len(self.overloads) == 1:
            return self.overloads[0], ()
        return self.overloads[-1], tuple(self.overloads)


class _CallableGrouper:
    """Collects overload signatures into groups keyed by callable identity."""

    def __init__(self) -> None:
        self.groups: List[_CallableGroup] = []
        self._open: Dict[tuple, _CallableGroup] = {}

    def _group(self, key: tuple, name: Optional[str], exported: bool, static: bool) -> _CallableGroup:
        group = self._open.get(key) if name else None
        if group is None:
            group = _CallableGroup(name=name, exported=exported, static=static)
            self.groups.append(group)
            if name:
                self._open[key] = group
        return group

    def add_overload(self, key: tuple, name: Optional[str], exported: bool, signature: Signature, static: bool = False) -> None:
        self._group(key, name, exported, static).overloads.append(signature)

    def add_implementation(self, key: tuple, name: Optional[str], exported: bool, signature: Signature, static: bool = False) -> None:
        group = self._group(key, name, exported, static)
        group.implementation = signature
        group.exported = exported
        self._open.pop(key, None)


# ---------------------------------------------------------------------------
# declarations
# ---------------------------------------------------------------------------


def extract_name(node: Node, source_bytes: bytes) -> Optional[str]:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None
    name = node_text(name_node, source_bytes).strip()
    return name or None


def _type_parameter_names(node: Node, source_bytes: bytes) -> Tuple[str, ...]:
    params = node.child_by_field_name("type_parameters")
    if params is None:
        return ()
    names = []
    for param in params.named_children:
        if param.type != "type_parameter":
            continue
        name = extract_name(param, source_bytes)
        if name is None and param.named_children:
            name = node_text(param.named_children[0], source_bytes)
        if name:
            names.append(name)
    return tuple(names)


def _member_signature(member: Node, source_bytes: bytes, comment: Optional[str]) -> Signature:
    return Signature(
        text=node_text(member, source_bytes),
        body_start=_body_offset(member, member.child_by_field_name("body"), source_bytes),
        comment=comment,
    )


def _is_private(member: Node, source_bytes: bytes) -> bool:
    name_node = member.child_by_field_name("name")
    if name_node is not None and name_node.type == "private_property_identifier":
        return True
    return any(
        child.type == "accessibility_modifier"
        and node_text(child, source_bytes).strip() == "private"
        for child in member.named_children
    )


def extract_property(member: Node, source_bytes: bytes) -> Optional[PropertyDeclaration]:
    name = extract_name(member, source_bytes)
    if name is None:
        return None
    readonly = _has_keyword(member, "readonly")
    type_text = _annotation_text(member.child_by_field_name("type"), source_bytes)
    if type_text is None:
        value = member.child_by_field_name("value")
        type_text = infer_type_text(value, source_bytes, readonly) if value else "any"
    return PropertyDeclaration(
        name=name,
        type_text=type_text,
        comment=get_leading_jsdoc(member, source_bytes),
        readonly=readonly,
        static=_has_keyword(member, "static"),
        private=_is_private(member, source_bytes),
    )


def extract_class(
    declaration: Node,
    exported: bool,
    comment: Optional[str],
    source_bytes: bytes,
) -> ClassDeclaration:
    """Extract a class with its constructors, methods and properties.

    Accessors are skipped. Methods are grouped with their overload
    signatures; static and instance members with the same name are kept
    apart.
    """
    name = extract_name(declaration, source_bytes)
    constructors: List[Signature] = []
    constructor_signatures: List[Signature] = []
    properties: List[PropertyDeclaration] = []
    grouper = _CallableGrouper()

    body = declaration.child_by_field_name("body")
    members = body.named_children if body is not None else []
    for member in members:
        if member.type == METHOD_DEFINITION or member.type in METHOD_SIGNATURE_TYPES:
            if any(_has_keyword(member, kw) for kw in ACCESSOR_KEYWORDS):
                continue
            member_name = extract_name(member, source_bytes)
            if member_name is None:
                continue
            signature = _member_signature(
                member, source_bytes, get_leading_jsdoc(member, source_bytes)
            )
            if member_name == CONSTRUCTOR_NAME:
                if member.type == METHOD_DEFINITION:
                    constructors.append(signature)
                else:
                    constructor_signatures.append(signature)
                continue
            static = _has_keyword(member, "static")
            key = (member_name, static)
            if member.type == METHOD_DEFINITION:
                grouper.add_implementation(key, member_name, True, signature, static=static)
            else:
                grouper.add_overload(key, member_name, True, signature, static=static)
        elif member.type in FIELD_DEFINITION_TYPES:
            prop = extract_property(member, source_bytes)
            if prop is not None:
                properties.append(prop)

    methods = []
    for group in grouper.groups:
        implementation, overloads = group.parts()
        methods.append(
            MethodDeclaration(
                name=group.name,
                implementation=implementation,
                overloads=overloads,
                static=group.static,
            )
        )

    if name is None:
        logger.debug(f"Class at line {declaration.start_point.row + 1} has no name (anonymous)")

    return ClassDeclaration(
        name=name,
        exported=exported,
        comment=comment,
        type_parameters=_type_parameter_names(declaration, source_bytes),
        constructors=tuple(constructors + constructor_signatures),
        methods=tuple(methods),
        properties=tuple(properties),
    )


def extract_variables(
    declaration: Node,
    exported: bool,
    comment: Optional[str],
    source_bytes: bytes,
) -> List[VariableDeclaration]:
    """Extract the initialized identifier declarators of a variable statement."""
    is_const = _has_keyword(declaration, "const")
    variables = []
    for declarator in declaration.named_children:
        if declarator.type != VARIABLE_DECLARATOR:
            continue
        name_node = declarator.child_by_field_name("name")
        value = declarator.child_by_field_name("value")
        if name_node is None or name_node.type != "identifier" or value is None:
            continue
        type_text = _annotation_text(declarator.child_by_field_name("type"), source_bytes)
        if type_text is None:
            type_text = infer_type_text(value, source_bytes, is_const)
        variables.append(
            VariableDeclaration(
                name=node_text(name_node, source_bytes),
                exported=exported,
                type_text=type_text,
                comment=comment,
                is_function=value.type in FUNCTION_EXPRESSION_TYPES,
            )
        )
    return variables


@dataclass(frozen=True)
class _PendingSpecifier:
    """An export specifier whose type is resolved once the scope is complete."""

    local_name: str
    exported_name: str
    comment: Optional[str]
    has_source: bool


@dataclass
class _Scope:
    """Mutable accumulator for the declarations of one module or namespace."""

    interfaces: List[InterfaceDeclaration] = field(default_factory=list)
    type_aliases: List[TypeAliasDeclaration] = field(default_factory=list)
    classes: List[ClassDeclaration] = field(default_factory=list)
    variables: List[VariableDeclaration] = field(default_factory=list)
    namespaces: List[NamespaceDeclaration] = field(default_factory=list)
    exports: List[Union[_PendingSpecifier, WildcardExport]] = field(default_factory=list)
    functions: _CallableGrouper = field(default_factory=_CallableGrouper)

    def function_declarations(self) -> Tuple[FunctionDeclaration, ...]:
        result = []
        for group in self.functions.groups:
            implementation, overloads = group.parts()
            result.append(
                FunctionDeclaration(
                    name=group.name,
                    exported=group.exported,
                    implementation=implementation,
                    overloads=overloads,
                )
            )
        return tuple(result)

    def resolved_exports(self) -> Tuple[Union[ExportSpecifier, WildcardExport], ...]:
        """Export specifiers typed from the scope's own variables."""
        variable_types = {v.name: v.type_text for v in self.variables}
        resolved = []
        for export in self.exports:
            if isinstance(export, WildcardExport):
                resolved.append(export)
                continue
            type_text = "any"
            if not export.has_source:
                type_text = variable_types.get(export.local_name, "any")
            resolved.append(
                ExportSpecifier(
                    name=export.exported_name,
                    type_text=type_text,
                    comment=export.comment,
                )
            )
        return tuple(resolved)


def _export_clause_specifiers(
    clause: Node, has_source: bool, source_bytes: bytes
) -> List[_PendingSpecifier]:
    specifiers = []
    leading: List[str] = []
    for child in clause.named_children:
        if child.type == COMMENT_NODE:
            leading.append(node_text(child, source_bytes))
            continue
        if child.type != EXPORT_SPECIFIER:
            continue
        local_name = extract_name(child, source_bytes) or node_text(child, source_bytes)
        alias_node = child.child_by_field_name("alias")
        exported_name = node_text(alias_node, source_bytes) if alias_node else local_name
        comment = leading[0] if leading else None
        specifiers.append(
            _PendingSpecifier(local_name, exported_name, comment, has_source)
        )
        leading = []
    return specifiers


def _wildcard_export(statement: Node, source_bytes: bytes) -> Optional[WildcardExport]:
    source = statement.child_by_field_name("source")
    if source is None:
        return None
    alias = None
    for child in statement.named_children:
        if child.type == NAMESPACE_EXPORT and child.named_children:
            alias = node_text(child.named_children[-1], source_bytes)
            break
    else:
        if not _has_keyword(statement, "*"):
            return None
    return WildcardExport(
        module_specifier=node_text(source, source_bytes),
        alias=alias,
        comment=get_leading_jsdoc(statement, source_bytes),
    )


def _unwrap_ambient(node: Node) -> Node:
    if node.type == AMBIENT_DECLARATION:
        for child in node.named_children:
            if child.type != COMMENT_NODE:
                return child
    return node


def _add_declaration(
    scope: _Scope,
    statement: Node,
    declaration: Node,
    exported: bool,
    source_bytes: bytes,
) -> None:
    """Record one declaration; ``statement`` is its outermost node."""
    declaration = _unwrap_ambient(declaration)
    kind = declaration.type
    comment = get_leading_jsdoc(statement, source_bytes)

    if (
        kind in FUNCTION_DECLARATION_TYPES
        or kind == FUNCTION_SIGNATURE
        or kind in FUNCTION_EXPRESSION_TYPES
    ):
        name = extract_name(declaration, source_bytes)
        body = declaration.child_by_field_name("body")
        signature = Signature(
            text=span_text(statement, declaration, source_bytes),
            body_start=_body_offset(statement, body, source_bytes),
            comment=comment,
        )
        if body is None:
            scope.functions.add_overload((name,), name, exported, signature)
        else:
            scope.functions.add_implementation((name,), name, exported, signature)
    elif kind in CLASS_DECLARATION_TYPES:
        scope.classes.append(extract_class(declaration, exported, comment, source_bytes))
    elif kind == INTERFACE_DECLARATION:
        scope.interfaces.append(
            InterfaceDeclaration(
                name=extract_name(declaration, source_bytes) or "",
                exported=exported,
                text=span_text(statement, declaration, source_bytes),
                comment=comment,
            )
        )
    elif kind == TYPE_ALIAS_DECLARATION:
        scope.type_aliases.append(
            TypeAliasDeclaration(
                name=extract_name(declaration, source_bytes) or "",
                exported=exported,
                text=span_text(statement, declaration, source_bytes),
                comment=comment,
            )
        )
    elif kind in VARIABLE_STATEMENT_TYPES:
        scope.variables.extend(extract_variables(declaration, exported, comment, source_bytes))
    elif kind in NAMESPACE_TYPES:
        namespace = extract_namespace(declaration, exported, comment, source_bytes)
        if namespace is not None:
            scope.namespaces.append(namespace)


def _collect_scope(container: Node, source_bytes: bytes) -> _Scope:
    """Collect the declarations directly inside ``container``."""
    scope = _Scope()
    for child in container.named_children:
        if child.type == COMMENT_NODE:
            continue

        if child.type == EXPORT_STATEMENT:
            declaration = child.child_by_field_name("declaration")
            if declaration is None:
                declaration = child.child_by_field_name("value")
                if declaration is not None and not (
                    declaration.type in CLASS_DECLARATION_TYPES
                    or declaration.type in FUNCTION_EXPRESSION_TYPES
                ):
                    declaration = None
            if declaration is not None:
                _add_declaration(scope, child, declaration, True, source_bytes)
                continue
            clause = next((c for c in child.named_children if c.type == EXPORT_CLAUSE), None)
            if clause is not None:
                has_source = child.child_by_field_name("source") is not None
                scope.exports.extend(_export_clause_specifiers(clause, has_source, source_bytes))
                continue
            wildcard = _wildcard_export(child, source_bytes)
            if wildcard is not None:
                scope.exports.append(wildcard)
            continue

        if child.type == EXPRESSION_STATEMENT:
            inner = next((c for c in child.named_children if c.type in NAMESPACE_TYPES), None)
            if inner is not None:
                _add_declaration(scope, child, inner, False, source_bytes)
            continue

        _add_declaration(scope, child, child, False, source_bytes)
    return scope


def extract_namespace(
    declaration: Node,
    exported: bool,
    comment: Optional[str],
    source_bytes: bytes,
) -> Optional[NamespaceDeclaration]:
    """Extract a namespace and, recursively, the namespaces it contains."""
    name = extract_name(declaration, source_bytes)
    if name is None:
        return None
    body = declaration.child_by_field_name("body")
    scope = _collect_scope(body, source_bytes) if body is not None else _Scope()
    return NamespaceDeclaration(
        name=name,
        exported=exported,
        comment=comment,
        interfaces=tuple(scope.interfaces),
        type_aliases=tuple(scope.type_aliases),
        namespaces=tuple(scope.namespaces),
    )


def extract_module_from_tree(
    tree: Tree,
    source_bytes: bytes,
    path: Sequence[str],
) -> SourceModule:
    """Extract every top-level declaration from a parsed TypeScript AST.

    This is the main entry point for declaration extraction.

    Args:
        tree: The parsed AST tree.
        source_bytes: The raw source file bytes.
        path: File path segments relative to the project root.

    Returns:
        The file's ``SourceModule``.
    """
    joined = "/".join(path)
    logger.info(f"Extracting declarations from {joined}")
    root = tree.root_node
    scope = _collect_scope(root, source_bytes)
    module = SourceModule(
        path=tuple(path),
        comment=get_module_comment(root, source_bytes),
        interfaces=tuple(scope.interfaces),
        functions=scope.function_declarations(),
        type_aliases=tuple(scope.type_aliases),
        classes=tuple(scope.classes),
        variables=tuple(scope.variables),
        exports=scope.resolved_exports(),
        namespaces=tuple(scope.namespaces),
    )
    logger.info(
        f"Extracted {len(module.functions)} functions, {len(module.classes)} classes, "
        f"{len(module.variables)} variables from {joined}"
    )
    return module
