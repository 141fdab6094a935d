"""Tests for the batchlower command-line driver."""

from __future__ import annotations

import json

from batchlower import source_ast as src
from batchlower.cli import main

PROGRAM = src.Program(
    items=[
        src.StatementItem(
            statement=src.ExpressionStatement(
                expression=src.Call(name="echo", args=[src.String(value="hi")])
            )
        )
    ]
)

BROKEN = src.Program(
    items=[
        src.StatementItem(
            statement=src.Assignment(
                lvalue=src.Identifier(name="x"), expression=src.Float(value=2.5)
            )
        )
    ]
)


def _write(tmp_path, program: src.Program):
    path = tmp_path / "program.json"
    path.write_text(program.model_dump_json(), encoding="utf-8")
    return path


class TestCli:
    def test_prints_script(self, tmp_path, capsys):
        assert main([str(_write(tmp_path, PROGRAM))]) == 0
        out = capsys.readouterr().out
        assert out.splitlines()[0] == "@echo off"
        assert out.splitlines()[-1] == "echo hi"

    def test_no_prologue(self, tmp_path, capsys):
        assert main([str(_write(tmp_path, PROGRAM)), "--no-prologue"]) == 0
        assert capsys.readouterr().out == "echo hi\n"

    def test_ast_output(self, tmp_path, capsys):
        assert main([str(_write(tmp_path, PROGRAM)), "--ast", "--no-prologue"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["statements"][0]["kind"] == "call"

    def test_output_file_with_crlf(self, tmp_path):
        out_path = tmp_path / "out.bat"
        code = main([str(_write(tmp_path, PROGRAM)), "--crlf", "-o", str(out_path)])
        assert code == 0
        assert out_path.read_bytes().endswith(b"echo hi\r\n")

    def test_stats_go_to_stderr(self, tmp_path, capsys):
        assert main([str(_write(tmp_path, PROGRAM)), "--stats"]) == 0
        captured = capsys.readouterr()
        assert "Compilation Statistics" in captured.err
        assert "Compilation Statistics" not in captured.out

    def test_lowering_error_exits_one(self, tmp_path, capsys):
        assert main([str(_write(tmp_path, BROKEN))]) == 1
        assert capsys.readouterr().err.startswith("error: not an arithmetic value")

    def test_invalid_json_exits_one(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        assert main([str(path)]) == 1
        assert capsys.readouterr().err.startswith("error:")

    def test_missing_file_exits_one(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.json")]) == 1
        assert "error:" in capsys.readouterr().err
