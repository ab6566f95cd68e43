"""Tests for the request checks and output helpers of the generator."""

import pytest

from libsyntaxgen import codegen
from libsyntaxgen import schema


class TestRequest:
    """Misconfigured requests are reported before anything is generated."""

    def test_unknown_category(self, sample_schema, errors):
        with pytest.raises(SystemExit) as exc:
            codegen.codegen(sample_schema, "Statement", "interface")
        assert exc.value.code == 1
        assert "Statement is an unknown category" in errors.getvalue()

    def test_token_is_not_a_category(self, sample_schema, errors):
        with pytest.raises(SystemExit):
            codegen.codegen(sample_schema, "Token", "interface")
        assert "Token is an unknown category" in errors.getvalue()

    def test_missing_action(self, sample_schema, errors):
        with pytest.raises(SystemExit) as exc:
            codegen.codegen(sample_schema, "Stmt", None)
        assert exc.value.code == 1
        assert "action required" in errors.getvalue()

    def test_unknown_action(self, sample_schema, errors):
        with pytest.raises(SystemExit):
            codegen.codegen(sample_schema, "Stmt", "declarations")
        assert "unknown action 'declarations'" in errors.getvalue()

    def test_unknown_language(self, sample_schema, errors):
        with pytest.raises(SystemExit):
            codegen.codegen(sample_schema, "Stmt", "interface", language="rust")
        assert "unknown target language 'rust'" in errors.getvalue()


def test_languages():
    assert codegen.languages() == ["c++", "python"]
    assert codegen.target_for_language("python").name == "Python"
    assert codegen.target_for_language("cobol") is None


@pytest.mark.parametrize("language", ["c++", "python"])
def test_categories_are_independent(sample_schema, language):
    exprs = codegen.codegen(sample_schema, "Expr", "implementation", language=language)
    stmts = codegen.codegen(sample_schema, "Stmt", "implementation", language=language)
    assert "ParenExpr" in exprs and "ParenExpr" not in stmts
    assert "IfStmt" in stmts and "IfStmt" not in exprs


class TestWriteIfDifferent:

    def test_new_file(self, tmp_path):
        path = tmp_path / "StmtSyntax.h"
        assert codegen.write_if_different(str(path), "contents\n")
        assert path.read_text() == "contents\n"

    def test_unchanged_file_is_left_alone(self, tmp_path):
        path = tmp_path / "StmtSyntax.h"
        path.write_text("contents\n")
        assert not codegen.write_if_different(str(path), "contents\n")

    def test_changed_file_is_rewritten(self, tmp_path):
        path = tmp_path / "StmtSyntax.h"
        path.write_text("old\n")
        assert codegen.write_if_different(str(path), "new\n")
        assert path.read_text() == "new\n"


def test_empty_category_warns(schema_data, errors):
    schema_data["nodes"] = [n for n in schema_data["nodes"] if n["name"] != "TypeIdentifier"]
    code = codegen.codegen(schema.from_dict(schema_data, "notypes.json"), "Type", "interface")
    assert "warning: schema 'notypes.json' defines no 'Type' nodes" in errors.getvalue()
    assert "#ifndef TYPESYNTAX_H" in code
