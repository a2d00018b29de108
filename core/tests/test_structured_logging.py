"""Tests for run/phase/module logging context."""

import logging

from core.structured_logging import (
    _RunContextFilter,
    get_run_id,
    module_scope,
    phase_scope,
    set_run_id,
)


def _context() -> tuple:
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    _RunContextFilter().filter(record)
    return record.phase, record.doc_module


def test_set_run_id_generates_value() -> None:
    run_id = set_run_id()
    assert run_id
    assert get_run_id() == run_id
    assert set_run_id("fixed") == "fixed"
    assert get_run_id() == "fixed"


def test_scopes_reset_on_exit() -> None:
    assert _context() == ("-", "-")
    with phase_scope("extract"):
        assert _context() == ("extract", "-")
        with module_scope("src/index.ts"):
            assert _context() == ("extract", "src/index.ts")
        assert _context() == ("extract", "-")
    assert _context() == ("-", "-")


def test_scope_reset_after_exception() -> None:
    try:
        with module_scope("src/a.ts"):
            raise ValueError("boom")
    except ValueError:
        pass
    assert _context()[1] == "-"


def test_filter_injects_context() -> None:
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    set_run_id("run-1")
    with phase_scope("validate"), module_scope("src/b.ts"):
        assert _RunContextFilter().filter(record)
    assert record.run_id == "run-1"
    assert record.phase == "validate"
    assert record.doc_module == "src/b.ts"
