"""
Documentation policy enforcement.

``resolve_doc`` derives the ``Doc`` fields of an entity from its parsed
comment and raises ``ValidationError`` listing every rule the comment breaks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from docgen.comments import Comment, parse_comment
from docgen.domain import Doc
from docgen.validation import ValidationError, collect

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Policy:
    """Which documentation tags are mandatory, plus module exclusion globs."""

    enforce_version: bool = True
    enforce_descriptions: bool = False
    enforce_examples: bool = False
    exclude: Tuple[str, ...] = ()

    @property
    def requires_documentation(self) -> bool:
        """Whether a module without any leading comment is an error."""
        return self.enforce_version or self.enforce_descriptions


@dataclass(frozen=True)
class Source:
    """Read-only context of the scope being walked."""

    path: Tuple[str, ...]
    policy: Policy = Policy()

    @property
    def joined_path(self) -> str:
        return "/".join(self.path)

    def with_policy(self, **changes) -> "Source":
        return replace(self, policy=replace(self.policy, **changes))


def missing_tag_error(tag: str, source: Source, name: str) -> str:
    return f"Missing {tag} tag in {source.joined_path}#{name} documentation"


def missing_error(what: str, source: Source, name: str) -> str:
    return f"Missing {what} in {source.joined_path}#{name} documentation"


def _since(name: str, comment: Comment, source: Source) -> Optional[str]:
    since = comment.first("since")
    if since is None and (comment.has_tag("since") or source.policy.enforce_version):
        raise ValidationError.single(missing_tag_error("@since", source, name))
    return since


def _category(name: str, comment: Comment, source: Source) -> Optional[str]:
    category = comment.first("category")
    if category is None and comment.has_tag("category"):
        raise ValidationError.single(missing_tag_error("@category", source, name))
    return category


def _description(name: str, comment: Comment, source: Source) -> Optional[str]:
    if comment.description is None and source.policy.enforce_descriptions:
        raise ValidationError.single(missing_error("description", source, name))
    return comment.description


def _examples(
    name: str, comment: Comment, source: Source, is_module: bool
) -> Tuple[str, ...]:
    examples = tuple(e for e in comment.tags.get("example", []) if e)
    if not examples and source.policy.enforce_examples and not is_module:
        raise ValidationError.single(missing_tag_error("@example", source, name))
    return examples


def resolve_doc(
    name: str,
    comment: Comment,
    source: Source,
    is_module: bool = False,
) -> Doc:
    """Resolve the documentation of ``name`` under the active policy.

    Every rule is evaluated; failures are reported in the order since,
    category, description, examples.

    Args:
        name: Entity name used in error messages.
        comment: Parsed documentation comment.
        source: Scope context carrying the module path and policy.
        is_module: Module documentation is exempt from example enforcement.

    Returns:
        The resolved ``Doc``.

    Raises:
        ValidationError: With one message per violated rule.
    """
    try:
        since, category, description, examples = collect(
            lambda: _since(name, comment, source),
            lambda: _category(name, comment, source),
            lambda: _description(name, comment, source),
            lambda: _examples(name, comment, source, is_module),
        )
    except ValidationError as exc:
        logger.debug(
            "Documentation of %s#%s rejected: %s", source.joined_path, name, exc.messages
        )
        raise

    return Doc(
        description=description,
        since=since,
        deprecated=comment.has_tag("deprecated"),
        examples=examples,
        category=category,
    )


def resolve_comment_text(
    name: str,
    text: Optional[str],
    source: Source,
    is_module: bool = False,
) -> Doc:
    """Parse raw comment text and resolve it (``resolve_doc`` shorthand)."""
    return resolve_doc(name, parse_comment(text), source, is_module=is_module)
