"""
JSDoc comment parsing.

Turns the raw text of a ``/** ... */`` block into a free-text description
plus the ordered values of each ``@tag``.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

_TAG_LINE_RE = re.compile(r"^@([A-Za-z][\w-]*)(?:\s+(.*))?$")
_LEADING_STAR_RE = re.compile(r"^\s*\*(?!/) ?")


@dataclass(frozen=True)
class Comment:
    """A parsed documentation comment.

    Attributes:
        description: Text before the first tag, or None when empty.
        tags: Tag name -> values in source order. A tag written without a
            value contributes None.
    """

    description: Optional[str] = None
    tags: Dict[str, List[Optional[str]]] = field(default_factory=dict)

    def has_tag(self, name: str) -> bool:
        return name in self.tags

    def first(self, name: str) -> Optional[str]:
        """First value of ``name``, or None if absent or empty."""
        values = self.tags.get(name)
        if not values:
            return None
        return values[0]

    @property
    def should_ignore(self) -> bool:
        """Whether ``@internal`` or ``@ignore`` hides the declaration."""
        return self.has_tag("internal") or self.has_tag("ignore")


def unwrap_comment(text: str) -> List[str]:
    """Strip comment delimiters and leading ``*`` continuation markers.

    Args:
        text: Raw comment text including ``/**`` and ``*/``.

    Returns:
        The content lines of the comment.
    """
    body = text.strip()
    if body.startswith("/*"):
        body = body[2:]
        while body.startswith("*"):
            body = body[1:]
    if body.endswith("*/"):
        body = body[:-2]
    elif body.startswith("//"):
        body = body.lstrip("/")

    lines = []
    for line in body.split("\n"):
        line = _LEADING_STAR_RE.sub("", line, count=1)
        lines.append(line.rstrip())
    return lines


def _finish(lines: List[str]) -> Optional[str]:
    value = "\n".join(lines).strip()
    return value or None


def parse_comment(text: Optional[str]) -> Comment:
    """Parse raw comment text into a ``Comment``.

    Never raises: malformed input degrades to an empty comment.

    Example:
        >>> parse_comment("/** description\\n * @since 1.0.0\\n */").tags
        {'since': ['1.0.0']}
    """
    if not text or not text.strip():
        return Comment()
    lines = unwrap_comment(text)

    description_lines: List[str] = []
    tags: Dict[str, List[Optional[str]]] = {}
    current_tag: Optional[str] = None
    current_lines: List[str] = []

    def flush() -> None:
        if current_tag is not None:
            tags.setdefault(current_tag, []).append(_finish(current_lines))

    for line in lines:
        match = _TAG_LINE_RE.match(line.strip())
        if match:
            flush()
            current_tag = match.group(1)
            current_lines = [match.group(2) or ""]
        elif current_tag is None:
            description_lines.append(line.strip())
        else:
            current_lines.append(line)
    flush()

    return Comment(description=_finish(description_lines), tags=tags)
