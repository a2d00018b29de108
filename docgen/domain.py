"""
Documentation model produced by the extraction engine.

Every documented entity is a frozen dataclass sharing the ``NamedDoc``
fields; the ``tag`` class attribute discriminates the variants for renderers
and for JSON output.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, ClassVar, Iterable, Optional, Sequence, Tuple, TypeVar


@dataclass(frozen=True)
class Doc:
    """Documentation fields resolved from a comment and the active policy."""

    description: Optional[str] = None
    since: Optional[str] = None
    deprecated: bool = False
    examples: Tuple[str, ...] = ()
    category: Optional[str] = None

    def named(self, name: str) -> "NamedDoc":
        return NamedDoc(name=name, **_doc_fields(self))


def _doc_fields(doc: Doc) -> dict[str, Any]:
    return {f.name: getattr(doc, f.name) for f in fields(Doc)}


@dataclass(frozen=True)
class NamedDoc(Doc):
    name: str = ""

    tag: ClassVar[Optional[str]] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dictionary with a ``_tag`` discriminant."""
        payload: dict[str, Any] = {}
        if self.tag is not None:
            payload["_tag"] = self.tag
        for f in fields(self):
            payload[f.name] = _to_json(getattr(self, f.name))
        return payload


def _to_json(value: Any) -> Any:
    if isinstance(value, NamedDoc):
        return value.to_dict()
    if isinstance(value, (tuple, list)):
        return [_to_json(item) for item in value]
    return value


@dataclass(frozen=True)
class Property(NamedDoc):
    signature: str = ""


@dataclass(frozen=True)
class Method(NamedDoc):
    signatures: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Class(NamedDoc):
    signature: str = ""
    methods: Tuple[Method, ...] = ()
    static_methods: Tuple[Method, ...] = ()
    properties: Tuple[Property, ...] = ()

    tag: ClassVar[str] = "Class"


@dataclass(frozen=True)
class Interface(NamedDoc):
    signature: str = ""

    tag: ClassVar[str] = "Interface"


@dataclass(frozen=True)
class Function(NamedDoc):
    signatures: Tuple[str, ...] = ()

    tag: ClassVar[str] = "Function"


@dataclass(frozen=True)
class TypeAlias(NamedDoc):
    signature: str = ""

    tag: ClassVar[str] = "TypeAlias"


@dataclass(frozen=True)
class Constant(NamedDoc):
    signature: str = ""

    tag: ClassVar[str] = "Constant"


@dataclass(frozen=True)
class Export(NamedDoc):
    """A manual export such as ``export { _null as null }`` or ``export * from``."""

    signature: str = ""

    tag: ClassVar[str] = "Export"


@dataclass(frozen=True)
class Namespace(NamedDoc):
    interfaces: Tuple[Interface, ...] = ()
    type_aliases: Tuple[TypeAlias, ...] = ()
    namespaces: Tuple["Namespace", ...] = ()

    tag: ClassVar[str] = "Namespace"


@dataclass(frozen=True)
class Module(NamedDoc):
    path: Tuple[str, ...] = ()
    classes: Tuple[Class, ...] = ()
    interfaces: Tuple[Interface, ...] = ()
    functions: Tuple[Function, ...] = ()
    type_aliases: Tuple[TypeAlias, ...] = ()
    constants: Tuple[Constant, ...] = ()
    exports: Tuple[Export, ...] = ()
    namespaces: Tuple[Namespace, ...] = ()

    tag: ClassVar[str] = "Module"

    @property
    def joined_path(self) -> str:
        return "/".join(self.path)


# ---------------------------------------------------------------------------
# constructors
# ---------------------------------------------------------------------------


def create_property(doc: NamedDoc, signature: str) -> Property:
    return Property(signature=signature, name=doc.name, **_doc_fields(doc))


def create_method(doc: NamedDoc, signatures: Sequence[str]) -> Method:
    if not signatures:
        raise ValueError(f"Method {doc.name} needs at least one signature")
    return Method(signatures=tuple(signatures), name=doc.name, **_doc_fields(doc))


def create_class(
    doc: NamedDoc,
    signature: str,
    methods: Sequence[Method],
    static_methods: Sequence[Method],
    properties: Sequence[Property],
) -> Class:
    return Class(
        signature=signature,
        methods=tuple(methods),
        static_methods=tuple(static_methods),
        properties=tuple(properties),
        name=doc.name,
        **_doc_fields(doc),
    )


def create_interface(doc: NamedDoc, signature: str) -> Interface:
    return Interface(signature=signature, name=doc.name, **_doc_fields(doc))


def create_function(doc: NamedDoc, signatures: Sequence[str]) -> Function:
    if not signatures:
        raise ValueError(f"Function {doc.name} needs at least one signature")
    return Function(signatures=tuple(signatures), name=doc.name, **_doc_fields(doc))


def create_type_alias(doc: NamedDoc, signature: str) -> TypeAlias:
    return TypeAlias(signature=signature, name=doc.name, **_doc_fields(doc))


def create_constant(doc: NamedDoc, signature: str) -> Constant:
    return Constant(signature=signature, name=doc.name, **_doc_fields(doc))


def create_export(doc: NamedDoc, signature: str) -> Export:
    return Export(signature=signature, name=doc.name, **_doc_fields(doc))


def create_namespace(
    doc: NamedDoc,
    interfaces: Sequence[Interface],
    type_aliases: Sequence[TypeAlias],
    namespaces: Sequence[Namespace],
) -> Namespace:
    return Namespace(
        interfaces=tuple(sort_by_name(interfaces)),
        type_aliases=tuple(sort_by_name(type_aliases)),
        namespaces=tuple(sort_by_name(namespaces)),
        name=doc.name,
        **_doc_fields(doc),
    )


def create_module(
    doc: NamedDoc,
    path: Sequence[str],
    classes: Sequence[Class] = (),
    interfaces: Sequence[Interface] = (),
    functions: Sequence[Function] = (),
    type_aliases: Sequence[TypeAlias] = (),
    constants: Sequence[Constant] = (),
    exports: Sequence[Export] = (),
    namespaces: Sequence[Namespace] = (),
) -> Module:
    return Module(
        path=tuple(path),
        classes=tuple(sort_by_name(classes)),
        interfaces=tuple(sort_by_name(interfaces)),
        functions=tuple(functions),
        type_aliases=tuple(sort_by_name(type_aliases)),
        constants=tuple(constants),
        exports=tuple(exports),
        namespaces=tuple(sort_by_name(namespaces)),
        name=doc.name,
        **_doc_fields(doc),
    )


# ---------------------------------------------------------------------------
# ordering
# ---------------------------------------------------------------------------

N = TypeVar("N", bound=NamedDoc)


def sort_by_name(entities: Iterable[N]) -> list[N]:
    """Sort entities by name (case-sensitive, stable)."""
    return sorted(entities, key=lambda entity: entity.name)


def module_order_key(module: Module) -> str:
    return module.joined_path.lower()


def sort_modules(modules: Iterable[Module]) -> list[Module]:
    return sorted(modules, key=module_order_key)
