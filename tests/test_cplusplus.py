"""Tests for the C++ target."""

import pytest

from libsyntaxgen import ccode
from libsyntaxgen import codegen
from libsyntaxgen import schema
from libsyntaxgen.categories import CategoryRegistry
from libsyntaxgen.cplusplus import CPlusPlusTarget
from libsyntaxgen.slots import ChildSlotResolver


def make_target(model, overrides=None):
    registry = CategoryRegistry(model)
    return CPlusPlusTarget(model, registry, ChildSlotResolver(registry), overrides)

def stripped_lines(code):
    return [line.strip() for line in code.splitlines()]


class TestIfStmt:
    """The emitted pieces for a three slot statement."""

    def test_cursor_matches_slots(self, sample_schema):
        target = make_target(sample_schema)
        handle = target.handles.emit(sample_schema.get_type("IfStmt"))
        enum = [m for m in handle.private if isinstance(m, ccode.EnumClass)][0]
        assert enum.name == "Cursor"
        assert enum.enumerators == ["IfKeyword", "Condition", "Body"]

    def test_accessors(self, sample_schema):
        target = make_target(sample_schema)
        handle = target.handles.emit(sample_schema.get_type("IfStmt"))
        names = [m.name for m in handle.public if isinstance(m, ccode.MethodDecl)]
        assert names == ["getIfKeyword", "withIfKeyword", "getCondition", "withCondition",
                         "getBody", "withBody"]

    def test_invariants(self, sample_schema):
        target = make_target(sample_schema)
        code = [s.code for s in target.wrappers.invariants(sample_schema.get_type("IfStmt"))]
        assert code == [
            "assert(Raw->getKind() == SyntaxKind::IfStmt)",
            "assert(Raw->getLayout().size() == 3)",
            'syntax_assert_token_is(Raw->getChild(cursorIndex(IfStmtSyntax::Cursor::IfKeyword)), '
            'tok::kw_if, "if")',
            "assert(getSyntaxCategory(Raw->getChild(cursorIndex(IfStmtSyntax::Cursor::Condition))"
            "->getKind()) == SyntaxCategory::Expr)",
            "assert(getSyntaxCategory(Raw->getChild(cursorIndex(IfStmtSyntax::Cursor::Body))"
            "->getKind()) == SyntaxCategory::Stmt)",
        ]

    def test_blank_placeholders(self, sample_schema):
        target = make_target(sample_schema)
        slots = target.resolver.slots_of(sample_schema.get_type("IfStmt"))
        assert [target.wrappers.placeholder(s) for s in slots] == [
            'TokenSyntax::missingToken(tok::kw_if, "if")',
            "RawSyntax::missing(SyntaxKind::MissingExpr)",
            "RawSyntax::missing(SyntaxKind::MissingStmt)",
        ]

    def test_interface_text(self, sample_schema):
        code = codegen.codegen(sample_schema, "Stmt", "interface")
        lines = stripped_lines(code)
        assert "class IfStmtSyntax final : public StmtSyntax {" in lines
        assert "class WhileStmtSyntax final : public LoopStmtSyntax {" in lines
        assert "enum class Cursor : CursorIndex {" in lines
        assert "llvm::Optional<TokenSyntax> getIfKeyword() const;" in lines
        assert "IfStmtSyntax withCondition(ExprSyntax NewCondition) const;" in lines
        assert "RC<SyntaxData> CachedBody;" in lines
        assert "static RC<IfStmtSyntaxData> makeBlank();" in lines
        assert "return S->getKind() == SyntaxKind::IfStmt;" in lines
        assert "class IfStmtSyntaxData;" in lines

    def test_implementation_text(self, sample_schema):
        code = codegen.codegen(sample_schema, "Stmt", "implementation")
        lines = stripped_lines(code)
        assert "#pragma mark - IfStmt API" in lines
        assert "IfStmtSyntax::getCondition() const {" in lines
        assert "return Data->replaceChild<IfStmtSyntax>(NewCondition.getRaw(), Cursor::Condition);" in lines
        assert ('syntax_assert_token_is(NewIfKeyword.getRaw(), tok::kw_if, "if");') in lines
        assert "return make(RawSyntax::make(SyntaxKind::IfStmt, {" in lines
        assert 'TokenSyntax::missingToken(tok::kw_if, "if"),' in lines
        assert "RawSyntax::missing(SyntaxKind::MissingExpr)," in lines
        assert "RawSyntax::missing(SyntaxKind::MissingStmt)," in lines
        assert "}, SourcePresence::Present));" in lines
        assert "assert(Raw->getLayout().size() == 3);" in lines

    def test_empty_node_blank(self, sample_schema):
        code = codegen.codegen(sample_schema, "Stmt", "implementation")
        assert "return make(RawSyntax::make(SyntaxKind::EmptyStmt, {}, SourcePresence::Present));" \
            in stripped_lines(code)


class TestOutput:
    """Whole-document properties."""

    def test_umbrella_node_is_excluded(self, sample_schema):
        code = codegen.codegen(sample_schema, "Expr", "interface")
        assert "AnyExprSyntax" not in code
        assert "class ParenExprSyntax final : public ExprSyntax {" in stripped_lines(code)

    def test_only_requested_category(self, sample_schema):
        code = codegen.codegen(sample_schema, "Decl", "interface")
        assert "VarDeclSyntax" in code
        assert "IfStmtSyntax" not in code
        assert "IdentifierExprSyntax" not in code

    def test_open_token_assertion(self, sample_schema):
        code = codegen.codegen(sample_schema, "Expr", "implementation")
        assert "syntax_assert_token_kind(NewName.getRaw(), tok::identifier);" in stripped_lines(code)

    def test_collection_slot(self, sample_schema):
        code = codegen.codegen(sample_schema, "Stmt", "implementation")
        lines = stripped_lines(code)
        assert "RawSyntax::missing(SyntaxKind::MissingSyntaxCollection)," in lines
        assert "CodeBlockStmtSyntax::withStatements(SyntaxCollectionSyntax NewStatements) const {" in lines

    def test_header_guard(self, sample_schema):
        code = codegen.codegen(sample_schema, "Stmt", "interface")
        lines = code.splitlines()
        assert lines[0] == "// This file is auto-generated, do not edit."
        assert lines[1] == "#ifndef STMTSYNTAX_H"
        assert lines[2] == "# define STMTSYNTAX_H 1"
        assert lines[-1] == "#endif // STMTSYNTAX_H"

    def test_header_guard_follows_output_name(self, sample_schema):
        code = codegen.codegen(sample_schema, "Expr", "interface",
                               out_filename="include/ExprNodes.h")
        assert "#ifndef EXPRNODES_H" in code

    def test_implementation_has_no_header_guard(self, sample_schema):
        code = codegen.codegen(sample_schema, "Expr", "implementation")
        assert "#ifndef" not in code

    def test_schema_options(self, schema_data):
        schema_data["targets"] = {"CPlusPlus": {
            "namespace": "swift::syntax",
            "includes": ["swift/Syntax/SyntaxData.h", "<atomic>"],
            "prolog": "using llvm::Optional;",
        }}
        code = codegen.codegen(schema.from_dict(schema_data), "Stmt", "implementation")
        lines = code.splitlines()
        assert '#include "swift/Syntax/SyntaxData.h"' in lines
        assert "#include <atomic>" in lines
        assert "using llvm::Optional;" in lines
        assert lines.index("namespace swift {") < lines.index("namespace syntax {")
        assert "} // end namespace syntax" in lines
        assert lines[-1] == "} // end namespace swift"

    def test_line_directives(self, sample_schema):
        code = codegen.codegen(sample_schema, "Stmt", "implementation",
                               overrides={"use_line_directives": "true"},
                               out_filename="StmtSyntax.cpp")
        assert '#line 12 "Stmt.td"' in code.splitlines()
        reset = [line for line in code.splitlines() if line.startswith('#line') and "StmtSyntax.cpp" in line]
        assert reset

    def test_override_wrong_type(self, sample_schema, errors):
        with pytest.raises(SystemExit):
            make_target(sample_schema, {"use_line_directives": "maybe"})
        assert "expects a boolean" in errors.getvalue()

    def test_unknown_option(self, schema_data, errors):
        schema_data["targets"] = {"CPlusPlus": {"colour": "blue"}}
        with pytest.raises(SystemExit):
            make_target(schema.from_dict(schema_data))
        assert "unexpected option 'colour' in target 'CPlusPlus'" in errors.getvalue()

    @pytest.mark.parametrize("category", ["SyntaxFactory", "SyntaxRewriter"])
    @pytest.mark.parametrize("action", ["interface", "implementation"])
    def test_reserved_categories(self, sample_schema, category, action):
        code = codegen.codegen(sample_schema, category, action)
        assert "// %s %s generation is not implemented." % (category, action) in code.splitlines()
        assert "Syntax final" not in code

    def test_pure(self, sample_schema):
        first = codegen.codegen(sample_schema, "Stmt", "implementation")
        assert codegen.codegen(sample_schema, "Stmt", "implementation") == first
