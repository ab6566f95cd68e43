"""
This module contains the tree nodes that represent the Python code to be
output. They share the `_fields` machinery of the C++ code nodes.
"""

from .ccode import CCodeNode

class PyCodeNode(CCodeNode):
    pass

class BlankLine(PyCodeNode):
    def codegen(self, out):
        out.write('\n')

class Comment(PyCodeNode):
    _fields = [ ("text", "") ]
    def codegen(self, out):
        for line in self.text.split('\n'):
            out.write_line(('# ' + line).rstrip())

class Docstring(PyCodeNode):
    _fields = [ ("text", "") ]
    def codegen(self, out):
        lines = self.text.strip('\n').split('\n')
        if len(lines) == 1:
            out.write_line('"""' + lines[0] + '"""')
            return
        out.write_line('"""')
        for line in lines:
            out.write_line(line)
        out.write_line('"""')

class Module(PyCodeNode):
    _fields = [
        ("docstring", ""),
        ("imports", []),
        ("prolog", ""),
        ("epilog", ""),
        ("stmts", []),
    ]
    def codegen(self, out):
        out.write_line('# This file is auto-generated, do not edit.')
        if self.docstring:
            Docstring(text=self.docstring).codegen(out)
        out.write('\n')
        for imp in self.imports:
            imp.codegen(out)
        if self.prolog:
            out.write('\n' + self.prolog.rstrip('\n') + '\n')
        for stmt in self.stmts:
            stmt.codegen(out)
        if self.epilog:
            out.write('\n' + self.epilog.rstrip('\n') + '\n')

class ImportFrom(PyCodeNode):
    _fields = [ ("module", ""), ("names", []) ]
    def codegen(self, out):
        names = sorted(set(self.names))
        if len(names) <= 2:
            out.write_line('from %s import %s' % (self.module, ', '.join(names)))
            return
        out.write_line('from %s import (' % self.module)
        out.indent()
        for name in names:
            out.write_line(name + ',')
        out.unindent()
        out.write_line(')')

class Stmt(PyCodeNode):
    _fields = [ ("code", "") ]
    def codegen(self, out):
        out.write_line(self.code)

class Block(PyCodeNode):
    ' A compound statement: `head:` followed by an indented body. '
    _fields = [ ("head", ""), ("body", []) ]
    def codegen(self, out):
        out.write_line(self.head + ':')
        out.indent()
        if not self.body:
            out.write_line('pass')
        for stmt in self.body:
            stmt.codegen(out)
        out.unindent()

class BracketStmt(PyCodeNode):
    ' `<head>[ item, ... ]<tail>` with one item per line. '
    _fields = [ ("head", ""), ("items", []), ("tail", "") ]
    def codegen(self, out):
        if not self.items:
            out.write_line(self.head + '[]' + self.tail)
            return
        out.write_line(self.head + '[')
        out.indent()
        for item in self.items:
            out.write_line(item + ',')
        out.unindent()
        out.write_line(']' + self.tail)

class FunctionDef(PyCodeNode):
    _fields = [
        ("name", ""),
        ("params", []),
        ("returns", ""),
        ("decorators", []),
        ("body", []),
        ("is_stub", False),
    ]
    def codegen(self, out):
        for decorator in self.decorators:
            out.write_line('@' + decorator)
        sig = 'def %s(%s)' % (self.name, ', '.join(self.params))
        if self.returns:
            sig += ' -> ' + self.returns
        if self.is_stub:
            out.write_line(sig + ': ...')
        else:
            Block(head=sig, body=self.body).codegen(out)

class ClassDef(PyCodeNode):
    _fields = [
        ("name", ""),
        ("bases", []),
        ("body", []),
    ]
    def codegen(self, out):
        head = 'class ' + self.name
        if self.bases:
            head += '(' + ', '.join(self.bases) + ')'
        Block(head=head, body=self.body).codegen(out)
