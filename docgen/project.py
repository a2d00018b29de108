"""
Project assembly: parse every module of a project independently.

One module's failures never block another module; the caller decides
whether any failure fails the run (see ``ProjectExtraction.raise_for_errors``).
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional, Sequence, Tuple, Union

import pathspec

from core.structured_logging import module_scope
from docgen.domain import Module, sort_modules
from docgen.entities import parse_module
from docgen.policy import Policy, Source
from docgen.validation import DocgenError, ValidationError
from extraction.models import SourceModule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModuleFailure:
    """Every validation message produced by one module."""

    path: Tuple[str, ...]
    messages: Tuple[str, ...]

    @property
    def joined_path(self) -> str:
        return "/".join(self.path)


@dataclass
class ProjectExtraction:
    """Result of assembling a project.

    Attributes:
        modules: Successfully parsed, non-deprecated modules sorted by path.
        failures: One entry per failed module, in input order.
        excluded: Paths skipped by exclusion globs.
        deprecated: Paths of valid modules dropped as deprecated.
    """

    modules: List[Module] = field(default_factory=list)
    failures: List[ModuleFailure] = field(default_factory=list)
    excluded: List[str] = field(default_factory=list)
    deprecated: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def messages(self) -> List[str]:
        return [message for failure in self.failures for message in failure.messages]

    def raise_for_errors(self) -> None:
        """Raise ``DocgenError`` listing every message, one per line."""
        if self.failures:
            raise DocgenError(
                "The following error(s) occurred while parsing the TypeScript "
                "source files:\n" + "\n".join(self.messages)
            )

    def to_dict(self) -> dict:
        return {
            "modules": len(self.modules),
            "failed_modules": len(self.failures),
            "excluded": list(self.excluded),
            "deprecated": list(self.deprecated),
            "errors": [
                {"path": failure.joined_path, "messages": list(failure.messages)}
                for failure in self.failures
            ],
        }


@lru_cache(maxsize=32)
def exclusion_spec(patterns: Tuple[str, ...]) -> pathspec.PathSpec:
    """Compile exclusion globs; ``*`` stays within a segment, ``**`` spans directories."""
    return pathspec.PathSpec.from_lines("gitwildmatch", patterns)


def is_excluded(path: Sequence[str], patterns: Sequence[str]) -> bool:
    if not patterns:
        return False
    return exclusion_spec(tuple(patterns)).match_file("/".join(path))


def _parse_one(
    module: SourceModule, policy: Policy
) -> Union[Module, ModuleFailure]:
    source = Source(path=tuple(module.path), policy=policy)
    with module_scope(source.joined_path):
        try:
            return parse_module(module, source)
        except ValidationError as exc:
            logger.debug("Module failed with %d error(s)", len(exc.messages))
            return ModuleFailure(path=source.path, messages=tuple(exc.messages))


def assemble(
    modules: Sequence[SourceModule],
    policy: Policy,
    max_workers: Optional[int] = None,
) -> ProjectExtraction:
    """Parse, validate and order every module of a project.

    Args:
        modules: Declarations of each source file.
        policy: Documentation policy, including exclusion globs.
        max_workers: Parse modules on a thread pool of this size. None or 1
            parses sequentially; results are identical either way.

    Returns:
        ProjectExtraction with sorted modules and per-module failures.
    """
    result = ProjectExtraction()
    selected: List[SourceModule] = []
    for module in modules:
        if is_excluded(module.path, policy.exclude):
            result.excluded.append("/".join(module.path))
        else:
            selected.append(module)

    if max_workers and max_workers > 1 and len(selected) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            outcomes = list(pool.map(lambda m: _parse_one(m, policy), selected))
    else:
        outcomes = [_parse_one(module, policy) for module in selected]

    parsed: List[Module] = []
    for outcome in outcomes:
        if isinstance(outcome, ModuleFailure):
            result.failures.append(outcome)
        elif outcome.deprecated:
            result.deprecated.append(outcome.joined_path)
        else:
            parsed.append(outcome)
    result.modules = sort_modules(parsed)

    logger.info(
        "Assembled %d module(s): %d failed, %d excluded, %d deprecated",
        len(result.modules),
        len(result.failures),
        len(result.excluded),
        len(result.deprecated),
    )
    return result
