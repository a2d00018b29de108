"""
Entity extraction for one module scope.

Each ``parse_*`` function takes the module's declarations plus the ``Source``
context, filters out unexported and ignored declarations, resolves
documentation under the active policy and returns the entities of one kind.
All of them validate every declaration before raising, so a single call
reports every violation of its kind.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import replace
from typing import List, Optional, Sequence, Union

from docgen import signatures as sig
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
    Property,
    TypeAlias,
    create_class,
    create_constant,
    create_export,
    create_function,
    create_interface,
    create_method,
    create_module,
    create_property,
    create_type_alias,
)
from docgen.policy import Source, resolve_doc
from docgen.validation import ValidationError, collect, validate_all, validate_optional
from extraction.models import (
    ClassDeclaration,
    ExportSpecifier,
    FunctionDeclaration,
    InterfaceDeclaration,
    MethodDeclaration,
    PropertyDeclaration,
    SourceModule,
    TypeAliasDeclaration,
    VariableDeclaration,
    WildcardExport,
)

logger = logging.getLogger(__name__)

WILDCARD_CATEGORY = "exports"


def is_ignored(comment_text: Optional[str]) -> bool:
    return parse_comment(comment_text).should_ignore


def visible(declarations, comment_of=lambda d: d.comment):
    """Exported declarations whose own comment does not hide them."""
    return [d for d in declarations if d.exported and not is_ignored(comment_of(d))]


def _function_comment(fd: FunctionDeclaration) -> Optional[str]:
    return sig.callable_comment(fd.implementation, fd.overloads)


# ---------------------------------------------------------------------------
# interfaces and type aliases
# ---------------------------------------------------------------------------


def parse_interface(declaration: InterfaceDeclaration, source: Source) -> Interface:
    doc = resolve_doc(declaration.name, parse_comment(declaration.comment), source)
    return create_interface(doc.named(declaration.name), declaration.text)


def parse_interfaces(
    declarations: Sequence[InterfaceDeclaration], source: Source
) -> List[Interface]:
    return validate_all(visible(declarations), lambda d: parse_interface(d, source))


def parse_type_alias(declaration: TypeAliasDeclaration, source: Source) -> TypeAlias:
    doc = resolve_doc(declaration.name, parse_comment(declaration.comment), source)
    return create_type_alias(doc.named(declaration.name), declaration.text)


def parse_type_aliases(
    declarations: Sequence[TypeAliasDeclaration], source: Source
) -> List[TypeAlias]:
    return validate_all(visible(declarations), lambda d: parse_type_alias(d, source))


# ---------------------------------------------------------------------------
# functions
# ---------------------------------------------------------------------------


def parse_function_declaration(fd: FunctionDeclaration, source: Source) -> Function:
    if not fd.name:
        raise ValidationError.single(
            f"Missing function name in module {source.joined_path}"
        )
    doc = resolve_doc(fd.name, parse_comment(_function_comment(fd)), source)
    signatures = [
        sig.declare_function(text)
        for text in sig.callable_signatures(fd.implementation, fd.overloads)
    ]
    return create_function(doc.named(fd.name), signatures)


def parse_function_variable(vd: VariableDeclaration, source: Source) -> Function:
    doc = resolve_doc(vd.name, parse_comment(vd.comment), source)
    return create_function(
        doc.named(vd.name), [sig.constant_signature(vd.name, vd.type_text)]
    )


def parse_functions(
    functions: Sequence[FunctionDeclaration],
    variables: Sequence[VariableDeclaration],
    source: Source,
) -> List[Function]:
    """Parse function declarations followed by function-valued variables."""
    declared, arrows = collect(
        lambda: validate_all(
            visible(functions, _function_comment),
            lambda fd: parse_function_declaration(fd, source),
        ),
        lambda: validate_all(
            [vd for vd in visible(variables) if vd.is_function],
            lambda vd: parse_function_variable(vd, source),
        ),
    )
    return declared + arrows


# ---------------------------------------------------------------------------
# constants
# ---------------------------------------------------------------------------


def parse_constant(vd: VariableDeclaration, source: Source) -> Constant:
    doc = resolve_doc(vd.name, parse_comment(vd.comment), source)
    return create_constant(
        doc.named(vd.name), sig.constant_signature(vd.name, vd.type_text)
    )


def parse_constants(
    variables: Sequence[VariableDeclaration], source: Source
) -> List[Constant]:
    return validate_all(
        [vd for vd in visible(variables) if not vd.is_function],
        lambda vd: parse_constant(vd, source),
    )


# ---------------------------------------------------------------------------
# exports
# ---------------------------------------------------------------------------


def parse_export_specifier(es: ExportSpecifier, source: Source) -> Export:
    if es.comment is None:
        raise ValidationError.single(
            f"Missing {es.name} documentation in {source.joined_path}"
        )
    doc = resolve_doc(es.name, parse_comment(es.comment), source)
    return create_export(doc.named(es.name), sig.constant_signature(es.name, es.type_text))


def _wildcard_defaults(we: WildcardExport, comment: Comment) -> Comment:
    tags = dict(comment.tags)
    if not comment.has_tag("category"):
        tags["category"] = [WILDCARD_CATEGORY]
    description = comment.description
    if description is None:
        description = (
            f"Re-exports all named exports from the {we.module_specifier} module"
        )
        description += f" as `{we.alias}`." if we.alias else "."
    return replace(comment, description=description, tags=tags)


def parse_wildcard_export(we: WildcardExport, source: Source) -> Export:
    signature = we.signature
    if we.comment is None:
        raise ValidationError.single(
            f"Missing {signature} documentation in {source.joined_path}"
        )
    name = f"From {we.module_specifier}"
    comment = _wildcard_defaults(we, parse_comment(we.comment))
    doc = resolve_doc(name, comment, source)
    return create_export(doc.named(name), signature)


def parse_exports(
    exports: Sequence[Union[ExportSpecifier, WildcardExport]], source: Source
) -> List[Export]:
    def parse(export):
        if isinstance(export, WildcardExport):
            return parse_wildcard_export(export, source)
        return parse_export_specifier(export, source)

    return validate_all([e for e in exports if not is_ignored(e.comment)], parse)


# ---------------------------------------------------------------------------
# classes
# ---------------------------------------------------------------------------


def parse_method(md: MethodDeclaration, source: Source) -> Optional[Method]:
    """Parse one method, or return None when its comment hides it."""
    comment = parse_comment(sig.callable_comment(md.implementation, md.overloads))
    if comment.should_ignore:
        return None
    doc = resolve_doc(md.name, comment, source)
    return create_method(
        doc.named(md.name), sig.callable_signatures(md.implementation, md.overloads)
    )


def parse_property(
    pd: PropertyDeclaration, class_name: str, source: Source
) -> Property:
    doc = resolve_doc(f"{class_name}#{pd.name}", parse_comment(pd.comment), source)
    return create_property(
        doc.named(pd.name), sig.property_signature(pd.name, pd.type_text, pd.readonly)
    )


def parse_properties(
    cd: ClassDeclaration, class_name: str, source: Source
) -> List[Property]:
    properties = [
        pd
        for pd in cd.properties
        if not pd.static and not pd.private and not is_ignored(pd.comment)
    ]
    return validate_all(properties, lambda pd: parse_property(pd, class_name, source))


def parse_class(cd: ClassDeclaration, source: Source) -> Class:
    if not cd.name:
        raise ValidationError.single(
            f"Missing class name in module {source.joined_path}"
        )
    name = cd.name

    def class_doc() -> Doc:
        return resolve_doc(name, parse_comment(cd.comment), source)

    doc, methods, static_methods, properties = collect(
        class_doc,
        lambda: validate_optional(
            [md for md in cd.methods if not md.static],
            lambda md: parse_method(md, source),
        ),
        lambda: validate_optional(
            [md for md in cd.methods if md.static],
            lambda md: parse_method(md, source),
        ),
        lambda: parse_properties(cd, name, source),
    )
    signature = sig.class_signature(name, cd.type_parameters, cd.constructors)
    return create_class(doc.named(name), signature, methods, static_methods, properties)


def parse_classes(classes: Sequence[ClassDeclaration], source: Source) -> List[Class]:
    return validate_all(visible(classes), lambda cd: parse_class(cd, source))


# ---------------------------------------------------------------------------
# modules
# ---------------------------------------------------------------------------


def module_name(path: Sequence[str]) -> str:
    """Base file name without its extension."""
    base = path[-1] if path else ""
    return posixpath.splitext(base)[0]


def parse_module_documentation(module: SourceModule, source: Source) -> Doc:
    """Resolve the file-level documentation of ``module``.

    A module without a leading comment fails when the policy requires
    versions or descriptions; otherwise it gets an empty ``Doc``.
    """
    name = module_name(module.path)
    if module.comment is None:
        if source.policy.requires_documentation:
            raise ValidationError.single(
                f"Missing documentation in {source.joined_path} module"
            )
        return Doc()
    return resolve_doc(name, parse_comment(module.comment), source, is_module=True)


def parse_module(module: SourceModule, source: Source) -> Module:
    """Build the ``Module`` entity of one source file.

    Args:
        module: Declarations extracted from the file.
        source: Context whose path matches ``module.path``.

    Returns:
        The validated module entity.

    Raises:
        ValidationError: With every violation found in the file, in the
            order documentation, interfaces, functions, type aliases,
            classes, constants, exports, namespaces.
    """
    # docgen.namespaces imports this module.
    from docgen.namespaces import parse_namespaces

    (
        doc,
        interfaces,
        functions,
        type_aliases,
        classes,
        constants,
        exports,
        namespaces,
    ) = collect(
        lambda: parse_module_documentation(module, source),
        lambda: parse_interfaces(module.interfaces, source),
        lambda: parse_functions(module.functions, module.variables, source),
        lambda: parse_type_aliases(module.type_aliases, source),
        lambda: parse_classes(module.classes, source),
        lambda: parse_constants(module.variables, source),
        lambda: parse_exports(module.exports, source),
        lambda: parse_namespaces(module.namespaces, source),
    )
    logger.debug(
        "Parsed module %s: %d classes, %d functions, %d constants",
        source.joined_path,
        len(classes),
        len(functions),
        len(constants),
    )
    return create_module(
        doc.named(module_name(module.path)),
        module.path,
        classes=classes,
        interfaces=interfaces,
        functions=functions,
        type_aliases=type_aliases,
        constants=constants,
        exports=exports,
        namespaces=namespaces,
    )
