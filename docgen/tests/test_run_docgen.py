"""End-to-end tests for the run_docgen command line."""

import json
import os
from pathlib import Path

import pytest

import run_docgen

DOCUMENTED = """/**
 * Entry point.
 *
 * @since 1.0.0
 */

/**
 * @since 1.0.0
 */
export const a = 1;
"""

UNDOCUMENTED = """export const b = 2;
"""


def _project(root: Path, files: dict) -> None:
    (root / "package.json").write_text(json.dumps({"name": "sample-lib"}), encoding="utf-8")
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def _argv(root: Path, *extra):
    return ["--project-root", str(root), "--report-dir", str(root / "reports"), *extra]


def test_successful_run_writes_model_and_report(tmp_path):
    _project(tmp_path, {"src/index.ts": DOCUMENTED})
    run_docgen.main(_argv(tmp_path))

    lines = (tmp_path / "docs" / "modules.jsonl").read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["path"] for line in lines] == [["src", "index.ts"]]

    (report_path,) = list((tmp_path / "reports").iterdir())
    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert report["status"] == "success"
    assert report["config"]["project_name"] == "sample-lib"
    assert report["extraction"]["files_processed"] == 1


def test_violations_printed_and_exit_status(tmp_path, capsys):
    _project(tmp_path, {"src/index.ts": DOCUMENTED, "src/bad.ts": UNDOCUMENTED})
    with pytest.raises(SystemExit) as exc_info:
        run_docgen.main(_argv(tmp_path))
    assert exc_info.value.code == 1

    err = capsys.readouterr().err.splitlines()
    assert "Missing documentation in src/bad.ts module" in err
    assert "Missing @since tag in src/bad.ts#b documentation" in err
    assert not (tmp_path / "docs").exists()


def test_unreadable_source_fails_run(tmp_path, capsys):
    _project(tmp_path, {"src/good.ts": DOCUMENTED})
    (tmp_path / "src" / "bad.ts").write_bytes(
        b"/** \xff\xfe @since 1.0.0 */\nexport const a = 1;\n"
    )
    with pytest.raises(SystemExit) as exc_info:
        run_docgen.main(_argv(tmp_path))
    assert exc_info.value.code == 1

    err = capsys.readouterr().err
    assert "Unable to read file:" in err
    assert "bad.ts" in err
    assert not (tmp_path / "docs").exists()

    (report_path,) = list((tmp_path / "reports").iterdir())
    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert report["status"] == "failed"
    assert "bad.ts" in report["error"]


def test_flags_relax_policy(tmp_path):
    _project(tmp_path, {"src/bad.ts": UNDOCUMENTED})
    run_docgen.main(_argv(tmp_path, "--no-enforce-version", "--out-dir", "site"))
    assert (tmp_path / "site" / "modules.jsonl").is_file()


def test_missing_source_directory(tmp_path):
    _project(tmp_path, {})
    with pytest.raises(SystemExit):
        run_docgen.main(_argv(tmp_path))
    (report_path,) = list((tmp_path / "reports").iterdir())
    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert report["status"] == "failed"
    assert "Source directory not found" in report["error"]


def test_apply_overrides_keeps_unset_fields():
    args = run_docgen.parse_args(["--enforce-examples"])
    config = run_docgen.apply_overrides(run_docgen.DocgenConfig(src_dir="lib"), args)
    assert config.enforce_examples is True
    assert config.src_dir == "lib"
    assert config.enforce_version is True


def test_jobs_flag_gives_same_model(tmp_path):
    _project(
        tmp_path,
        {"src/index.ts": DOCUMENTED, "src/other.ts": DOCUMENTED.replace("Entry", "Other")},
    )
    run_docgen.main(_argv(tmp_path, "--out-dir", "seq"))
    run_docgen.main(_argv(tmp_path, "--out-dir", "par", "--jobs", "2"))
    seq = (tmp_path / "seq" / "modules.jsonl").read_text(encoding="utf-8")
    par = (tmp_path / "par" / "modules.jsonl").read_text(encoding="utf-8")
    assert seq == par
    assert os.path.getsize(tmp_path / "seq" / "modules.jsonl") > 0
