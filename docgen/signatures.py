"""Textual signature canonicalisation for display."""

import re
from typing import Sequence

from extraction.models import Signature

_IMPORT_TYPE_RE = re.compile(r'import\("((?!").)*"\)\.')
_EXPORT_FUNCTION = "export function "
_EXPORT_DECLARE_FUNCTION = "export declare function "


def strip_import_types(text: str) -> str:
    """Drop ``import("...").`` qualifiers from type text.

    Example:
        >>> strip_import_types('(r: import("/src/function").Refinement<A, B>) => A')
        '(r: Refinement<A, B>) => A'
    """
    return _IMPORT_TYPE_RE.sub("", text)


def strip_body(signature: Signature) -> str:
    """Return the declaration text without its body and trailing separators."""
    text = signature.text
    if signature.body_start is not None:
        text = text[: signature.body_start]
    return text.rstrip().rstrip(";,").rstrip()


def declare_function(text: str) -> str:
    return text.replace(_EXPORT_FUNCTION, _EXPORT_DECLARE_FUNCTION, 1)


def callable_signatures(
    implementation: Signature, overloads: Sequence[Signature]
) -> list[str]:
    """Signatures shown for a callable.

    Without overloads this is the implementation with its body removed;
    otherwise it is every overload in declaration order and the
    implementation is left out.
    """
    if not overloads:
        return [strip_body(implementation)]
    return [strip_body(overload) for overload in overloads]


def callable_comment(implementation: Signature, overloads: Sequence[Signature]):
    """Documentation comment of a callable: the first overload's when overloaded."""
    if overloads:
        return overloads[0].comment
    return implementation.comment


def constant_signature(name: str, type_text: str) -> str:
    return f"export declare const {name}: {strip_import_types(type_text)}"


def property_signature(name: str, type_text: str, readonly: bool) -> str:
    prefix = "readonly " if readonly else ""
    return f"{prefix}{name}: {strip_import_types(type_text)}"


def class_signature(
    name: str, type_parameters: Sequence[str], constructors: Sequence[Signature]
) -> str:
    params = f"<{', '.join(type_parameters)}>" if type_parameters else ""
    head = f"export declare class {name}{params}"
    if not constructors:
        return head
    return f"{head} {{ {strip_body(constructors[0])} }}"
