"""Core shared configuration, logging and artifact utilities."""

from core.structured_logging import (
    configure_structured_logging,
    get_run_id,
    module_scope,
    phase_scope,
    set_run_id,
)
from core.run_artifacts import write_modules_jsonl, write_run_report
from core.docgen_config import (
    ConfigValidationError,
    DocgenConfig,
    load_docgen_config,
    resolve_strict_config,
)

__all__ = [
    "configure_structured_logging",
    "get_run_id",
    "module_scope",
    "phase_scope",
    "set_run_id",
    "write_modules_jsonl",
    "write_run_report",
    "ConfigValidationError",
    "DocgenConfig",
    "load_docgen_config",
    "resolve_strict_config",
]
