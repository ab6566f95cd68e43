import copy
import io

import pytest

from libsyntaxgen import codegen
from libsyntaxgen import report
from libsyntaxgen import schema

SAMPLE_SCHEMA = {
    "classes": {
        "LoopStmt": ["Stmt"],
    },
    "tokens": [
        {"name": "IfKeyword", "bases": ["Keyword"], "kind": "kw_if", "spelling": "if"},
        {"name": "WhileKeyword", "bases": ["Keyword"], "kind": "kw_while", "spelling": "while"},
        {"name": "BreakKeyword", "bases": ["Keyword"], "kind": "kw_break", "spelling": "break"},
        {"name": "VarKeyword", "bases": ["Keyword"], "kind": "kw_var", "spelling": "var"},
        {"name": "LeftParen", "bases": ["Punctuator"], "kind": "l_paren", "spelling": "("},
        {"name": "RightParen", "bases": ["Punctuator"], "kind": "r_paren", "spelling": ")"},
        {"name": "LeftBrace", "bases": ["Punctuator"], "kind": "l_brace", "spelling": "{"},
        {"name": "RightBrace", "bases": ["Punctuator"], "kind": "r_brace", "spelling": "}"},
        {"name": "Colon", "bases": ["Punctuator"], "kind": "colon", "spelling": ":"},
        {"name": "IdentifierToken", "bases": ["Identifier"], "kind": "identifier"},
        {"name": "IntegerLiteralToken", "bases": ["Literal"], "kind": "integer_literal"},
    ],
    "nodes": [
        {"name": "AnyExpr", "bases": ["Expr"]},
        {"name": "IdentifierExpr", "bases": ["Expr"], "fields": [
            {"name": "Name", "layout": "IdentifierToken"},
        ]},
        {"name": "IntegerLiteralExpr", "bases": ["Expr"], "fields": [
            {"name": "Digits", "layout": "IntegerLiteralToken"},
        ]},
        {"name": "ParenExpr", "bases": ["Expr"], "fields": [
            {"name": "LeftParen", "layout": "LeftParen"},
            {"name": "Expression", "layout": "Expr"},
            {"name": "RightParen", "layout": "RightParen"},
        ]},
        {"name": "AnyStmt", "bases": ["Stmt"]},
        {"name": "IfStmt", "bases": ["Stmt"], "location": {"file": "Stmt.td", "line": 12, "column": 1},
         "fields": [
            {"name": "IfKeyword", "layout": "IfKeyword"},
            {"name": "IsRequired", "value": True},
            {"name": "Condition", "layout": "Expr"},
            {"name": "Body", "layout": "Stmt"},
        ]},
        {"name": "WhileStmt", "bases": ["LoopStmt"], "fields": [
            {"name": "WhileKeyword", "layout": "WhileKeyword"},
            {"name": "Condition", "layout": "Expr"},
            {"name": "Body", "layout": "Stmt"},
        ]},
        {"name": "BreakStmt", "bases": ["Stmt"], "fields": [
            {"name": "BreakKeyword", "layout": "BreakKeyword"},
        ]},
        {"name": "StmtList", "bases": ["SyntaxCollection"]},
        {"name": "CodeBlockStmt", "bases": ["Stmt"], "fields": [
            {"name": "LeftBrace", "layout": "LeftBrace"},
            {"name": "Statements", "layout": "StmtList"},
            {"name": "RightBrace", "layout": "RightBrace"},
        ]},
        {"name": "EmptyStmt", "bases": ["Stmt"]},
        {"name": "TypeIdentifier", "bases": ["Type"], "fields": [
            {"name": "Name", "layout": "IdentifierToken"},
        ]},
        {"name": "IdentifierPattern", "bases": ["Pattern"], "fields": [
            {"name": "Name", "layout": "IdentifierToken"},
        ]},
        {"name": "VarDecl", "bases": ["Decl"], "fields": [
            {"name": "VarKeyword", "layout": "VarKeyword"},
            {"name": "Pattern", "layout": "Pattern"},
            {"name": "Colon", "layout": "Colon"},
            {"name": "TypeAnnotation", "layout": "Type"},
            {"name": "Documentation", "value": "A variable declaration."},
        ]},
    ],
}

@pytest.fixture
def schema_data():
    ' A fresh, mutable copy of the sample schema document. '
    return copy.deepcopy(SAMPLE_SCHEMA)

@pytest.fixture
def sample_schema(schema_data):
    return schema.from_dict(schema_data, "sample.json")

@pytest.fixture
def errors():
    ' Capture diagnostics written through libsyntaxgen.report. '
    stream = io.StringIO()
    old = report.set_error_stream(stream, use_colors=False)
    yield stream
    report.set_error_stream(old, use_colors=False)

def generate_module(model, category):
    code = codegen.codegen(model, category, "implementation", language="python")
    namespace = {"__name__": "generated_%s" % category.lower()}
    exec(compile(code, "<generated %s>" % category, "exec"), namespace)
    return namespace

@pytest.fixture(scope="module")
def generated():
    """
    The classes of every generated implementation module, executed once per
    test module. Executing registers the node kinds with the runtime.
    """
    model = schema.from_dict(copy.deepcopy(SAMPLE_SCHEMA), "sample.json")
    namespace = {}
    for category in ("Decl", "Expr", "Stmt", "Type", "Pattern"):
        namespace.update(generate_module(model, category))
    return namespace
