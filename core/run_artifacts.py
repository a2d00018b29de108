"""Run artifact helpers: JSON run reports and the JSONL documentation model."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any, Iterable

from docgen.domain import Module


def write_run_report(
    report: dict[str, Any],
    run_id: str,
    output_dir: str = "output/run_reports",
) -> str:
    """Write a JSON run report and return its path."""
    os.makedirs(output_dir, exist_ok=True)
    payload = dict(report)
    payload.setdefault("run_id", run_id)
    payload.setdefault("timestamp_utc", datetime.now(timezone.utc).isoformat())
    path = os.path.join(output_dir, f"{run_id}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
    return path


def write_modules_jsonl(
    modules: Iterable[Module],
    output_dir: str,
    file_name: str = "modules.jsonl",
) -> str:
    """Write one JSON object per documented module and return the file path.

    Modules are written in the given order, which callers keep sorted by
    path so that renderers can stream the file.
    """
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, file_name)
    with open(path, "w", encoding="utf-8") as f:
        for module in modules:
            f.write(json.dumps(module.to_dict(), ensure_ascii=False))
            f.write("\n")
    return path
