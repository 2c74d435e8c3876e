import json
import logging
import sys
from pathlib import Path

import pytest

from lox import lox_cli
from lox.lox_errors import LexError, ParseError

GOOD_SOURCE = "var x = 1;\nprint x + 2;"
BAD_SOURCE = "var = 1;\nprint @;"


def test_check_source_collects_lex_errors_first() -> None:
    tokens, statements, diagnostics = lox_cli.check_source(BAD_SOURCE)
    assert tokens[-1].kind.name == "EOF"
    assert statements == []
    assert isinstance(diagnostics[0], LexError)
    assert all(isinstance(d, ParseError) for d in diagnostics[1:])


def test_run_lox_string_ok(capsys: pytest.CaptureFixture[str]) -> None:
    code = lox_cli.run_lox(GOOD_SOURCE, is_string=True)
    captured = capsys.readouterr()
    assert code == lox_cli.EX_OK
    assert captured.out == ""
    assert captured.err == ""


def test_run_lox_reports_diagnostics(capsys: pytest.CaptureFixture[str]) -> None:
    code = lox_cli.run_lox(BAD_SOURCE, is_string=True)
    err = capsys.readouterr().err.splitlines()
    assert code == lox_cli.EX_DATAERR
    assert err == [
        "[line 2] Error: Unexpected character '@'.",
        "[line 1] Error at '=': Expect variable name.",
        "[line 2] Error at ';': Expect expression.",
    ]


def test_run_lox_file_input(tmp_path: Path) -> None:
    file_path = tmp_path / "input.lox"
    file_path.write_text(GOOD_SOURCE, encoding="utf-8")
    assert lox_cli.run_lox(str(file_path)) == lox_cli.EX_OK


def test_run_lox_missing_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    code = lox_cli.run_lox(str(tmp_path / "missing.lox"))
    assert code == lox_cli.EX_NOINPUT
    assert capsys.readouterr().err.startswith("error:")


def test_run_lox_dumps_tokens(capsys: pytest.CaptureFixture[str]) -> None:
    lox_cli.run_lox('print "a";', is_string=True, tokens=True)
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 4
    assert "PRINT" in lines[0]
    assert "STRING" in lines[1] and "'a'" in lines[1]
    assert "EOF" in lines[-1]


def test_run_lox_dumps_ast(capsys: pytest.CaptureFixture[str]) -> None:
    lox_cli.run_lox("print 1 + 2;", is_string=True, ast=True)
    dumped = json.loads(capsys.readouterr().out)
    assert dumped[0]["kind"] == "print"
    assert dumped[0]["expr"]["operator"]["lexeme"] == "+"


def test_run_lox_ast_rejects_out_of_range_number(
    capsys: pytest.CaptureFixture[str],
) -> None:
    code = lox_cli.run_lox("print " + "9" * 400 + ";", is_string=True, ast=True)
    captured = capsys.readouterr()
    assert code == lox_cli.EX_DATAERR
    assert captured.out == ""
    assert captured.err.startswith("error:")
    assert "Infinity" not in captured.out


def test_main_exit_codes(monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(SystemExit) as excinfo:
        lox_cli.main(["-s", GOOD_SOURCE])
    assert excinfo.value.code == lox_cli.EX_OK

    with pytest.raises(SystemExit) as excinfo:
        lox_cli.main(["-s", BAD_SOURCE])
    assert excinfo.value.code == lox_cli.EX_DATAERR


def test_main_without_source_is_usage_error(
    capsys: pytest.CaptureFixture[str],
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        lox_cli.main([])
    assert excinfo.value.code == lox_cli.EX_USAGE
    assert "usage: lox" in capsys.readouterr().err


def test_main_reads_sys_argv(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "argv", ["lox", "-s", "print 1;"])
    with pytest.raises(SystemExit) as excinfo:
        lox_cli.main()
    assert excinfo.value.code == lox_cli.EX_OK


def test_main_verbose_enables_debug_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[int] = []
    monkeypatch.setattr(
        logging, "basicConfig", lambda **kwargs: calls.append(kwargs["level"])
    )
    with pytest.raises(SystemExit):
        lox_cli.main(["-s", "print 1;", "--verbose"])
    assert calls == [logging.DEBUG]


def test_scanner_and_parser_log_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="lox"):
        lox_cli.check_source("print ;")
    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("Scanned") for m in messages)
    assert any("Expect expression." in m for m in messages)
    assert any(m.startswith("Parsed 0 statements") for m in messages)
