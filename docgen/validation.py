"""Accumulate-all validation helpers.

Every documentation check raises ``ValidationError`` carrying one or more
messages. The combinators here evaluate every item of a collection, gather
all failures in item order and raise them together, so a single run reports
every violation of a scope instead of only the first.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class ValidationError(Exception):
    """Raised when one or more documentation rules are violated."""

    def __init__(self, messages: Sequence[str]):
        self.messages: List[str] = list(messages)
        super().__init__("\n".join(self.messages))

    @classmethod
    def single(cls, message: str) -> "ValidationError":
        return cls([message])


class DocgenError(RuntimeError):
    """Fatal error for a whole documentation run."""


def validate_all(items: Iterable[T], fn: Callable[[T], R]) -> List[R]:
    """Apply ``fn`` to every item, accumulating failures.

    Args:
        items: Items to validate, in declaration order.
        fn: Per-item parser that returns a value or raises ``ValidationError``.

    Returns:
        All results in item order when every item succeeded.

    Raises:
        ValidationError: With the concatenated messages of every failed item.
    """
    results: List[R] = []
    errors: List[str] = []
    for item in items:
        try:
            results.append(fn(item))
        except ValidationError as exc:
            errors.extend(exc.messages)
    if errors:
        raise ValidationError(errors)
    return results


def validate_optional(items: Iterable[T], fn: Callable[[T], Optional[R]]) -> List[R]:
    """Like ``validate_all`` but drops ``None`` results (ignored members)."""
    return [result for result in validate_all(items, fn) if result is not None]


def collect(*steps: Callable[[], object]) -> list:
    """Run independent steps and return their results positionally.

    Each step is a zero-argument callable. All steps run even if earlier ones
    fail; the messages of all failed steps are raised together.
    """
    return validate_all(steps, lambda step: step())
