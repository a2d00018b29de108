"""Documentation run configuration.

Loads ``docgen.yaml`` / ``docgen.yml`` / ``docgen.json`` from the project
root and merges it over defaults derived from ``package.json``. Strict mode
raises ``ConfigValidationError`` on any problem; non-strict mode logs a
warning and falls back to defaults.
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import asdict, dataclass, fields
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from docgen.policy import Policy

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES: tuple[str, ...] = ("docgen.yaml", "docgen.yml", "docgen.json")
PACKAGE_JSON_FILE_NAME = "package.json"
STRICT_ENV_VAR = "DOCGEN_STRICT_CONFIG"

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


class ConfigValidationError(RuntimeError):
    """Raised when strict configuration validation fails."""


@dataclass(frozen=True)
class DocgenConfig:
    """Settings of one documentation run."""

    project_name: str = ""
    src_dir: str = "src"
    out_dir: str = "docs"
    enforce_descriptions: bool = False
    enforce_examples: bool = False
    enforce_version: bool = True
    exclude: tuple[str, ...] = ()

    def policy(self) -> Policy:
        return Policy(
            enforce_version=self.enforce_version,
            enforce_descriptions=self.enforce_descriptions,
            enforce_examples=self.enforce_examples,
            exclude=tuple(self.exclude),
        )

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["exclude"] = list(self.exclude)
        return payload


_FIELD_TYPES: dict[str, type] = {
    "project_name": str,
    "src_dir": str,
    "out_dir": str,
    "enforce_descriptions": bool,
    "enforce_examples": bool,
    "enforce_version": bool,
    "exclude": list,
}

# Site rendering and example type-checking keys: accepted, not acted on.
IGNORED_KEYS: frozenset[str] = frozenset(
    {
        "project_homepage",
        "theme",
        "enable_search",
        "parse_compiler_options",
        "examples_compiler_options",
    }
)


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_strict_config(default: bool = False) -> bool:
    """Resolve strict mode from the ``DOCGEN_STRICT_CONFIG`` env var."""
    return _env_flag(STRICT_ENV_VAR, default=default)


def normalize_key(key: str) -> str:
    """``enforceVersion`` -> ``enforce_version``; snake_case passes through."""
    return _CAMEL_RE.sub("_", key).lower()


def _fail(message: str, strict: bool, exc: Optional[BaseException] = None) -> None:
    if strict:
        raise ConfigValidationError(message) from exc
    logger.warning("%s; continuing with defaults", message)


def find_config_file(project_root: str) -> Optional[str]:
    for name in CONFIG_FILE_NAMES:
        path = os.path.join(project_root, name)
        if os.path.isfile(path):
            return path
    return None


def load_config_file(path: str, strict: bool = False) -> dict[str, Any]:
    """Read a configuration file (YAML or JSON) into a dict.

    In non-strict mode this returns an empty dict on read/parse failures.
    In strict mode this raises ``ConfigValidationError``.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = yaml.safe_load(f)
    except FileNotFoundError as exc:
        _fail(f"Configuration file not found: {path}", strict, exc)
        return {}
    except yaml.YAMLError as exc:
        _fail(f"Failed to parse configuration at {path}: {exc}", strict, exc)
        return {}

    if payload is None:
        return {}
    if not isinstance(payload, dict):
        _fail(
            f"Unexpected configuration payload type: {type(payload).__name__}",
            strict,
        )
        return {}
    return payload


def _package_defaults(project_root: str, strict: bool) -> dict[str, Any]:
    path = os.path.join(project_root, PACKAGE_JSON_FILE_NAME)
    fallback = {"project_name": os.path.basename(os.path.abspath(project_root))}
    try:
        with open(path, "r", encoding="utf-8") as f:
            package = json.load(f)
    except FileNotFoundError as exc:
        _fail(f"{PACKAGE_JSON_FILE_NAME} not found in {project_root}", strict, exc)
        return fallback
    except json.JSONDecodeError as exc:
        _fail(f"Failed to parse {path}: {exc}", strict, exc)
        return fallback

    if not isinstance(package, dict):
        _fail(f"Unexpected {PACKAGE_JSON_FILE_NAME} payload", strict)
        return fallback
    defaults = dict(fallback)
    if isinstance(package.get("name"), str):
        defaults["project_name"] = package["name"]
    return defaults


def validate_overrides(raw: dict[str, Any], strict: bool = False) -> dict[str, Any]:
    """Normalize keys and type-check values of a configuration payload.

    Unknown keys and values of the wrong type are rejected in strict mode
    and dropped with a warning otherwise. Keys in ``IGNORED_KEYS`` are
    skipped in both modes.
    """
    overrides: dict[str, Any] = {}
    for key, value in raw.items():
        name = normalize_key(str(key))
        if name in IGNORED_KEYS:
            logger.debug("Ignoring configuration key '%s'", key)
            continue
        expected = _FIELD_TYPES.get(name)
        if expected is None:
            _fail(f"Unknown configuration key '{key}'", strict)
            continue
        if not isinstance(value, expected):
            _fail(
                f"Configuration key '{key}' must be {expected.__name__}, "
                f"got {type(value).__name__}",
                strict,
            )
            continue
        if name == "exclude":
            if not all(isinstance(item, str) for item in value):
                _fail("Configuration key 'exclude' must list glob strings", strict)
                continue
            value = tuple(value)
        overrides[name] = value
    return overrides


def load_docgen_config(
    project_root: str = ".",
    config_path: Optional[str] = None,
    strict: Optional[bool] = None,
) -> DocgenConfig:
    """Load the configuration of the project at ``project_root``.

    Args:
        project_root: Directory holding ``package.json`` and the config file.
        config_path: Explicit config file; defaults to the first of
            ``CONFIG_FILE_NAMES`` found in ``project_root``.
        strict: Strict validation; None reads ``DOCGEN_STRICT_CONFIG``.

    Returns:
        The merged ``DocgenConfig``.

    Raises:
        ConfigValidationError: In strict mode, on any configuration problem.
    """
    load_dotenv()
    if strict is None:
        strict = resolve_strict_config()

    values = _package_defaults(project_root, strict)

    path = config_path or find_config_file(project_root)
    if path is None:
        logger.info("No configuration file detected, using default configuration")
    else:
        logger.info("Configuration file found: %s", path)
        values.update(validate_overrides(load_config_file(path, strict=strict), strict))

    known = {f.name for f in fields(DocgenConfig)}
    return DocgenConfig(**{k: v for k, v in values.items() if k in known})
