"""
Data models for declarations extracted from TypeScript sources.

These are the raw inputs of the documentation engine: names, export flags,
leading JSDoc text and source text of each declaration, before any
documentation policy is applied.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple, Union


@dataclass(frozen=True)
class Signature:
    """Source text of one callable declaration.

    Attributes:
        text: Declaration text, starting at ``export`` or the member modifiers.
        body_start: Character offset of the body within ``text``, or None for
            bodiless declarations (overloads, ambient declarations).
        comment: Raw leading JSDoc text, or None.
    """

    text: str
    body_start: Optional[int] = None
    comment: Optional[str] = None


@dataclass(frozen=True)
class FunctionDeclaration:
    """A free function: zero or more overloads plus one implementation."""

    name: Optional[str]
    exported: bool
    implementation: Signature
    overloads: Tuple[Signature, ...] = ()

    kind: ClassVar[str] = "function"


@dataclass(frozen=True)
class MethodDeclaration:
    name: str
    implementation: Signature
    overloads: Tuple[Signature, ...] = ()
    static: bool = False

    kind: ClassVar[str] = "method"


@dataclass(frozen=True)
class PropertyDeclaration:
    name: str
    type_text: str
    comment: Optional[str] = None
    readonly: bool = False
    static: bool = False
    private: bool = False

    kind: ClassVar[str] = "property"


@dataclass(frozen=True)
class ClassDeclaration:
    name: Optional[str]
    exported: bool
    comment: Optional[str] = None
    type_parameters: Tuple[str, ...] = ()
    constructors: Tuple[Signature, ...] = ()
    methods: Tuple[MethodDeclaration, ...] = ()
    properties: Tuple[PropertyDeclaration, ...] = ()

    kind: ClassVar[str] = "class"


@dataclass(frozen=True)
class InterfaceDeclaration:
    name: str
    exported: bool
    text: str
    comment: Optional[str] = None

    kind: ClassVar[str] = "interface"


@dataclass(frozen=True)
class TypeAliasDeclaration:
    name: str
    exported: bool
    text: str
    comment: Optional[str] = None

    kind: ClassVar[str] = "typeAlias"


@dataclass(frozen=True)
class VariableDeclaration:
    """One declarator of a ``const``/``let``/``var`` statement.

    Attributes:
        type_text: Declared or inferred type text.
        comment: JSDoc of the enclosing variable statement.
        is_function: Whether the initializer is an arrow or function expression.
    """

    name: str
    exported: bool
    type_text: str
    comment: Optional[str] = None
    is_function: bool = False

    kind: ClassVar[str] = "constant"


@dataclass(frozen=True)
class ExportSpecifier:
    """One entry of ``export { a, b as c }``; ``name`` is the exported name."""

    name: str
    type_text: str = "any"
    comment: Optional[str] = None

    kind: ClassVar[str] = "export"


@dataclass(frozen=True)
class WildcardExport:
    """``export * from "m"`` or ``export * as alias from "m"``.

    ``module_specifier`` keeps its quotes as written in the source.
    """

    module_specifier: str
    alias: Optional[str] = None
    comment: Optional[str] = None

    kind: ClassVar[str] = "export"

    @property
    def signature(self) -> str:
        if self.alias:
            return f"export * as {self.alias} from {self.module_specifier}"
        return f"export * from {self.module_specifier}"


@dataclass(frozen=True)
class NamespaceDeclaration:
    name: str
    exported: bool
    comment: Optional[str] = None
    interfaces: Tuple[InterfaceDeclaration, ...] = ()
    type_aliases: Tuple[TypeAliasDeclaration, ...] = ()
    namespaces: Tuple["NamespaceDeclaration", ...] = ()

    kind: ClassVar[str] = "namespace"


@dataclass(frozen=True)
class SourceModule:
    """All top-level declarations of one source file.

    Attributes:
        path: File path segments relative to the project root.
        comment: The file's leading comment, or None.
    """

    path: Tuple[str, ...]
    comment: Optional[str] = None
    interfaces: Tuple[InterfaceDeclaration, ...] = ()
    functions: Tuple[FunctionDeclaration, ...] = ()
    type_aliases: Tuple[TypeAliasDeclaration, ...] = ()
    classes: Tuple[ClassDeclaration, ...] = ()
    variables: Tuple[VariableDeclaration, ...] = ()
    exports: Tuple[Union[ExportSpecifier, WildcardExport], ...] = ()
    namespaces: Tuple[NamespaceDeclaration, ...] = ()

    kind: ClassVar[str] = "moduleDeclaration"

    @property
    def joined_path(self) -> str:
        return "/".join(self.path)
