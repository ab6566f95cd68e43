"""Tests for the command line driver."""

import json

import pytest

from libsyntaxgen import main
from libsyntaxgen import report


@pytest.fixture(autouse=True)
def restore_error_stream():
    old = report.error_stream
    yield
    report.set_error_stream(old, use_colors=False)

@pytest.fixture
def schema_file(tmp_path, schema_data):
    path = tmp_path / "Syntax.json"
    path.write_text(json.dumps(schema_data))
    return str(path)


def test_interface_to_stdout(schema_file, capsys):
    assert main.main(["--action", "interface", "--category", "Stmt", schema_file]) == 0
    out = capsys.readouterr().out
    assert "class IfStmtSyntax final : public StmtSyntax {" in out

def test_python_implementation(schema_file, capsys):
    argv = ["-a", "implementation", "-c", "Expr", "-l", "python", schema_file]
    assert main.main(argv) == 0
    assert "class ParenExprSyntax(ExprSyntax):" in capsys.readouterr().out

def test_output_file(schema_file, tmp_path, capsys):
    output = tmp_path / "StmtSyntax.h"
    argv = ["-a", "interface", "-c", "Stmt", "-o", str(output), "-v", "--no-color", schema_file]
    assert main.main(argv) == 0
    text = output.read_text()
    assert "#ifndef STMTSYNTAX_H" in text
    assert "wrote '%s'" % output in capsys.readouterr().err

    assert main.main(argv) == 0
    assert "is up to date" in capsys.readouterr().err
    assert output.read_text() == text

def test_defines(schema_file, capsys):
    argv = ["-a", "interface", "-c", "Expr", "-D", "namespace=swift::syntax",
            "-D", "header_guard=SWIFT_SYNTAX_EXPRS_H", schema_file]
    assert main.main(argv) == 0
    out = capsys.readouterr().out
    assert "#ifndef SWIFT_SYNTAX_EXPRS_H" in out
    assert "namespace syntax {" in out

def test_malformed_define(schema_file, capsys):
    with pytest.raises(SystemExit):
        main.main(["-a", "interface", "-c", "Expr", "-D", "namespace", schema_file])
    assert "malformed option override 'namespace'" in capsys.readouterr().err

def test_missing_action(schema_file, capsys):
    assert main.main(["--category", "Stmt", schema_file]) == 1
    err = capsys.readouterr().err
    assert "action required" in err
    assert "usage: syntaxgen" in err

def test_unknown_category(schema_file, capsys):
    assert main.main(["--action", "interface", "--category", "Statement", schema_file]) == 1
    assert "Statement is an unknown category!" in capsys.readouterr().err

def test_reserved_category(schema_file, capsys):
    assert main.main(["-a", "implementation", "-c", "SyntaxFactory", schema_file]) == 0
    assert "// SyntaxFactory implementation generation is not implemented." in capsys.readouterr().out

def test_missing_schema(tmp_path, capsys):
    with pytest.raises(SystemExit):
        main.main(["-a", "interface", "-c", "Stmt", str(tmp_path / "nope.json")])
    assert "cannot read schema" in capsys.readouterr().err

def test_dump_schema(schema_file, capsys):
    assert main.main(["--dump-schema", schema_file]) == 0
    out = capsys.readouterr().out
    assert out.startswith('<Schema src="%s">' % schema_file)
    assert '<Node name="IfStmt" bases="Stmt" category="Stmt">' in out
    assert '<Slot name="Condition" ordinal="1" type="Expr"/>' in out
    assert '<Field name="IsRequired">True</Field>' in out
    assert '<Token name="IdentifierToken" kind="identifier" open="True"/>' in out
    assert '<Token name="IfKeyword" kind="kw_if" spelling="if" open="False"/>' in out
