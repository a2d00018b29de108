#!/usr/bin/env python3
"""
Documentation pipeline: TypeScript sources -> validated documentation model.

Phases:
    discover  Find the .ts files under the configured source directory.
    extract   Parse each file with tree-sitter into declarations.
    validate  Enforce the documentation policy and assemble the modules.
    write     Write the module model as JSONL plus a JSON run report.

Every documentation violation is printed, one per line, and the process
exits with status 1 when any module fails validation or any source file
cannot be read.

Usage:
    python run_docgen.py
    python run_docgen.py --project-root ../my-lib --jobs 4
    python run_docgen.py --enforce-examples --strict-config
"""

import argparse
import logging
import os
import sys
from dataclasses import replace

from core.docgen_config import (
    ConfigValidationError,
    DocgenConfig,
    load_docgen_config,
    resolve_strict_config,
)
from core.run_artifacts import write_modules_jsonl, write_run_report
from core.structured_logging import configure_structured_logging, phase_scope, set_run_id
from docgen.project import assemble
from docgen.validation import DocgenError

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="TypeScript documentation extraction & validation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_docgen.py --project-root ../my-lib\n"
            "  python run_docgen.py --enforce-descriptions --enforce-examples\n"
        ),
    )
    parser.add_argument(
        "--project-root",
        default=".",
        help="Directory holding package.json and docgen.yaml/.json (default: .)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Explicit configuration file (default: docgen.yaml/.yml/.json in the project root)",
    )
    parser.add_argument(
        "--src-dir",
        default=None,
        help="Override the configured source directory",
    )
    parser.add_argument(
        "--out-dir",
        default=None,
        help="Override the configured output directory",
    )
    parser.add_argument(
        "--enforce-descriptions",
        action="store_true",
        default=None,
        help="Require a description on every documented declaration",
    )
    parser.add_argument(
        "--enforce-examples",
        action="store_true",
        default=None,
        help="Require at least one @example on every documented declaration",
    )
    parser.add_argument(
        "--no-enforce-version",
        dest="enforce_version",
        action="store_false",
        default=None,
        help="Do not require @since tags",
    )
    parser.add_argument(
        "--jobs",
        type=int,
        default=None,
        help="Parse modules on this many threads (default: sequential)",
    )
    parser.add_argument(
        "--report-dir",
        default="output/run_reports",
        help="Where to write the JSON run report (default: output/run_reports)",
    )
    parser.add_argument(
        "--strict-config",
        action="store_true",
        default=resolve_strict_config(default=False),
        help="Fail on unreadable or invalid configuration instead of using defaults",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def apply_overrides(config: DocgenConfig, args: argparse.Namespace) -> DocgenConfig:
    """Apply command-line flags on top of the loaded configuration."""
    changes = {}
    if args.src_dir is not None:
        changes["src_dir"] = args.src_dir
    if args.out_dir is not None:
        changes["out_dir"] = args.out_dir
    if args.enforce_descriptions is not None:
        changes["enforce_descriptions"] = args.enforce_descriptions
    if args.enforce_examples is not None:
        changes["enforce_examples"] = args.enforce_examples
    if args.enforce_version is not None:
        changes["enforce_version"] = args.enforce_version
    return replace(config, **changes) if changes else config


def run(config: DocgenConfig, project_root: str, jobs=None):
    """Run the discover, extract and validate phases.

    Returns:
        A tuple of (ProjectExtraction, ExtractionStats).

    Raises:
        DocgenError: If the source directory does not exist or a source file
            cannot be read.
    """
    from extraction.extractor import discover_ts_files, extract_directory

    src_dir = os.path.join(project_root, config.src_dir)
    if not os.path.isdir(src_dir):
        raise DocgenError(f"Source directory not found: {os.path.abspath(src_dir)}")

    with phase_scope("discover"):
        files = discover_ts_files(src_dir)
        logger.info("Found %d TypeScript file(s) in %s", len(files), src_dir)

    with phase_scope("extract"):
        modules, stats = extract_directory(src_dir, root=project_root, ts_files=files)
        logger.info("Extraction stats: %s", stats)
        if stats.failed_paths:
            for path in stats.failed_paths:
                print(f"Unable to read file: {path}", file=sys.stderr)
            raise DocgenError(
                "The following file(s) could not be read:\n" + "\n".join(stats.failed_paths)
            )

    with phase_scope("validate"):
        result = assemble(modules, config.policy(), max_workers=jobs)

    return result, stats


def main(argv=None) -> None:
    """Main entry point for the documentation pipeline."""
    args = parse_args(argv)
    configure_structured_logging(level=logging.DEBUG if args.verbose else logging.INFO)
    run_id = set_run_id()

    logger.info("*" * 80)
    logger.info(" TypeScript documentation pipeline")
    logger.info(" Run ID: %s", run_id)
    logger.info("*" * 80)

    run_report = {
        "run_id": run_id,
        "pipeline": "docgen",
        "project_root": os.path.abspath(args.project_root),
        "status": "failed",
        "strict_config": args.strict_config,
    }

    try:
        config = load_docgen_config(
            args.project_root, config_path=args.config, strict=args.strict_config
        )
        config = apply_overrides(config, args)
        run_report["config"] = config.to_dict()

        result, stats = run(config, args.project_root, jobs=args.jobs)
        run_report["extraction"] = stats.to_dict()
        run_report["validation"] = result.to_dict()

        if not result.ok:
            for message in result.messages:
                print(message, file=sys.stderr)
            result.raise_for_errors()

        with phase_scope("write"):
            out_dir = os.path.join(args.project_root, config.out_dir)
            model_path = write_modules_jsonl(result.modules, out_dir)
            run_report["model_path"] = model_path
            logger.info("Wrote %d module(s) to %s", len(result.modules), model_path)

        run_report["status"] = "success"
        report_path = write_run_report(run_report, run_id, args.report_dir)
        logger.info("Run report written: %s", report_path)

    except ConfigValidationError as e:
        logger.error(f"Configuration error: {e}")
        run_report["error"] = str(e)
        report_path = write_run_report(run_report, run_id, args.report_dir)
        logger.info("Run report written: %s", report_path)
        sys.exit(1)
    except DocgenError as e:
        logger.error(f"Documentation run failed: {e}")
        run_report["error"] = str(e)
        report_path = write_run_report(run_report, run_id, args.report_dir)
        logger.info("Run report written: %s", report_path)
        sys.exit(1)
    except Exception as e:
        logger.error(f"Pipeline failed: {e}", exc_info=True)
        run_report["error"] = str(e)
        report_path = write_run_report(run_report, run_id, args.report_dir)
        logger.info("Run report written: %s", report_path)
        sys.exit(1)


if __name__ == "__main__":
    main()
