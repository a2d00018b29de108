"""
High-level orchestrator for TypeScript declaration extraction.

This module provides the main entry points for extracting declarations from
single files or entire source trees.
"""

import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Dict, Tuple

from extraction.config import EXCLUDED_SUFFIXES, SKIPPED_DIRECTORIES, TS_EXTENSIONS
from extraction.models import SourceModule
from extraction.parser import parse_file, count_error_nodes
from extraction.traversal import extract_module_from_tree

logger = logging.getLogger(__name__)


@dataclass
class FileExtractionDiagnostics:
    """Per-file extraction diagnostics."""

    module: SourceModule
    parse_error_count: int


class ExtractionStats:
    """Statistics for an extraction operation."""

    def __init__(self):
        self.files_processed = 0
        self.files_failed = 0
        self.declarations_extracted = 0
        self.parse_errors = 0
        self.failed_paths: List[str] = []

    def to_dict(self) -> Dict[str, object]:
        """Convert stats to dictionary."""
        return {
            "files_processed": self.files_processed,
            "files_failed": self.files_failed,
            "declarations_extracted": self.declarations_extracted,
            "parse_errors": self.parse_errors,
            "failed_paths": list(self.failed_paths),
        }

    def __str__(self) -> str:
        """String representation of stats."""
        return (
            f"ExtractionStats(processed={self.files_processed}, "
            f"failed={self.files_failed}, declarations={self.declarations_extracted}, "
            f"parse_errors={self.parse_errors})"
        )


def count_declarations(module: SourceModule) -> int:
    return (
        len(module.interfaces)
        + len(module.functions)
        + len(module.type_aliases)
        + len(module.classes)
        + len(module.variables)
        + len(module.exports)
        + len(module.namespaces)
    )


def is_typescript_source(file_name: str) -> bool:
    if file_name.endswith(EXCLUDED_SUFFIXES):
        return False
    return os.path.splitext(file_name)[1] in TS_EXTENSIONS


def path_segments(relative_path: str) -> Tuple[str, ...]:
    """Split an OS path into ``/``-independent segments."""
    normalized = os.path.normpath(relative_path)
    return tuple(part for part in normalized.split(os.sep) if part and part != ".")


def _extract_file_with_diagnostics(
    file_path: str,
    root: Optional[str],
) -> FileExtractionDiagnostics:
    """Extract declarations from a single file with parse diagnostics."""
    file_path = os.path.abspath(file_path)

    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    if not is_typescript_source(file_path):
        raise ValueError(
            f"File {file_path} is not a TypeScript source file. "
            f"Expected one of: {TS_EXTENSIONS}"
        )

    if root is None:
        resolved_root = os.path.dirname(file_path)
    else:
        resolved_root = os.path.abspath(root)

    try:
        relative_path = os.path.relpath(file_path, resolved_root)
    except ValueError:
        logger.warning(
            "Cannot compute relative path for %s from %s. Using absolute path.",
            file_path,
            resolved_root,
        )
        relative_path = file_path

    tree, source_bytes = parse_file(file_path)
    parse_error_count = count_error_nodes(tree.root_node)

    if tree.root_node.has_error:
        logger.warning(
            "File %s contains syntax errors (%d error nodes)",
            relative_path,
            parse_error_count,
        )

    module = extract_module_from_tree(
        tree=tree,
        source_bytes=source_bytes,
        path=path_segments(relative_path),
    )

    return FileExtractionDiagnostics(
        module=module,
        parse_error_count=parse_error_count,
    )


def extract_file(file_path: str, root: Optional[str] = None) -> SourceModule:
    """Extract all top-level declarations from a single TypeScript file.

    Args:
        file_path: Absolute or relative path to the .ts file.
        root: Project root the module path is relative to. If None, uses
            the file's parent directory.

    Returns:
        The file's declarations.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a TypeScript source file.

    Example:
        >>> module = extract_file("src/index.ts", "/path/to/project")
        >>> module.path
        ('src', 'index.ts')
    """
    try:
        return _extract_file_with_diagnostics(file_path=file_path, root=root).module
    except Exception as e:
        logger.error("Error extracting declarations from %s: %s", file_path, e)
        raise


def discover_ts_files(directory: str) -> List[str]:
    """Recursively discover all TypeScript source files in a directory.

    Declaration files (``.d.ts``), hidden directories and dependency or
    build output directories are skipped.

    Args:
        directory: Root directory to search.

    Returns:
        Sorted list of absolute paths to .ts files.
    """
    ts_files = []
    directory = os.path.abspath(directory)

    logger.info(f"Discovering TypeScript files in {directory}")

    for root, dirs, files in os.walk(directory):
        dirs[:] = [d for d in dirs if not d.startswith('.') and d not in SKIPPED_DIRECTORIES]

        for file in files:
            if is_typescript_source(file):
                ts_files.append(os.path.join(root, file))

    logger.info(f"Found {len(ts_files)} TypeScript files")
    return sorted(ts_files)


def extract_directory(
    directory: str,
    root: Optional[str] = None,
    continue_on_error: bool = True,
    ts_files: Optional[List[str]] = None,
) -> Tuple[List[SourceModule], ExtractionStats]:
    """Extract declarations from all TypeScript files in a directory tree.

    Args:
        directory: Source directory to process.
        root: Project root for computing module paths.
              If None, uses the directory parameter.
        continue_on_error: If True, continue processing files even if some fail.
                          If False, raise exception on first error.
        ts_files: Files to process, as returned by discover_ts_files.
                  If None, the directory is walked.

    Returns:
        A tuple of (modules, stats) where:
        - modules: One SourceModule per successfully processed file
        - stats: ExtractionStats object with processing statistics

    Raises:
        FileNotFoundError: If directory does not exist.

    Example:
        >>> modules, stats = extract_directory("/path/to/project/src", "/path/to/project")
        >>> print(f"Extracted {stats.declarations_extracted} declarations")
    """
    directory = os.path.abspath(directory)

    if not os.path.isdir(directory):
        raise FileNotFoundError(f"Directory not found: {directory}")

    if root is None:
        root = directory
    else:
        root = os.path.abspath(root)

    stats = ExtractionStats()
    modules: List[SourceModule] = []

    if ts_files is None:
        ts_files = discover_ts_files(directory)

    if not ts_files:
        logger.warning(f"No TypeScript files found in {directory}")
        return modules, stats

    logger.info(f"Processing {len(ts_files)} TypeScript files from {directory}")

    for file_path in ts_files:
        try:
            diagnostics = _extract_file_with_diagnostics(file_path=file_path, root=root)
            modules.append(diagnostics.module)
            stats.files_processed += 1
            stats.declarations_extracted += count_declarations(diagnostics.module)
            stats.parse_errors += diagnostics.parse_error_count

        except FileNotFoundError as e:
            logger.error(f"File not found: {e}")
            stats.files_failed += 1
            stats.failed_paths.append(file_path)
            if not continue_on_error:
                raise

        except ValueError as e:
            logger.error(f"Invalid file: {e}")
            stats.files_failed += 1
            stats.failed_paths.append(file_path)
            if not continue_on_error:
                raise

        except Exception as e:
            logger.error(f"Unexpected error processing {file_path}: {e}", exc_info=True)
            stats.files_failed += 1
            stats.failed_paths.append(file_path)
            if not continue_on_error:
                raise

    logger.info(f"Extraction complete: {stats}")
    return modules, stats
