"""
This module contains the tree nodes that represent the C++ code to be output.
"""

import inspect
import os
import re

class CCodeNode(object):
    """
    The base CCodeNode that all other nodes subclass from. It adds all of
    the `_fields` from each class in the hierarchy as attributes on the
    instance.
    """
    _fields = [ ("parent", None) ]
    _all_fields = None

    def __init__(self, **ka):
        fld_list = self.__class__.__dict__.get("_all_fields")
        if fld_list is None:
            fld_list = self.__class__._find_fields()
        for field, default in fld_list:
            # since lists are mutable and the fields are evaluated at class
            # creation time, prevent using the same list for each instance
            if isinstance(default, list):
                default = default[:]
            if field in ka and ka[field] is not None:
                setattr(self, field, ka[field])
            else:
                setattr(self, field, default)

    @classmethod
    def _find_fields(self_class):
        all_fields = []
        field_set = {}
        for klass in inspect.getmro(self_class):
            class_fields = klass.__dict__.get("_fields", [])
            for field, default in class_fields:
                if field not in field_set:
                    all_fields.append((field, default))
                    field_set[field] = klass.__name__
        self_class._all_fields = all_fields
        return all_fields

    def codegen(self, out):
        pass

def _write_list(out, items, sep=', '):
    for num, item in enumerate(items):
        if num > 0:
            out.write(sep)
        if isinstance(item, str):
            out.write(item)
        else:
            item.codegen(out)

class BlankLine(CCodeNode):
    def codegen(self, out):
        out.write('\n')

class Comment(CCodeNode):
    _fields = [ ("text", "") ]
    def codegen(self, out):
        out.write_comment(self.text)

class CppMacro(CCodeNode):
    """
    All the C-Preprocessor macros subclass this. The `first` field is the
    part that comes after the preprocessor directive and `second` is the
    part that comes after that. For example, `#define <first> <second>`.
    """
    _fields = [
        ("first", None),
        ("second", None)
    ]
    def codegen(self, out, name='define', indents=False, unindents=False):
        if unindents: out.cpp_unindent()
        out.cpp_write_indented(name)
        if self.first: out.write(' ' + self.first)
        if self.second: out.write(' ' + self.second)
        out.write('\n')
        if indents: out.cpp_indent()

class CppDefine(CppMacro):
    def codegen(self, out):
        super().codegen(out, name='define')

class CppInclude(CppMacro):
    def codegen(self, out):
        super().codegen(out, name='include')

class CppIfndef(CppMacro):
    def codegen(self, out):
        super().codegen(out, name='ifndef', indents=True)

class CppEndif(CppMacro):
    def codegen(self, out):
        super().codegen(out, name='endif', unindents=True)

class CppPragmaMark(CppMacro):
    def codegen(self, out):
        super().codegen(out, name='pragma mark -')

class CppLine(CppMacro):
    def codegen(self, out):
        super().codegen(out, name='line')

class CppLineReset(CppMacro):
    def codegen(self, out):
        loc = out.reset_location
        CppLine(first='%d' % (loc.line + 1),
                second='"%s"' % loc.file
        ).codegen(out)

def header_guard_for(filename):
    return re.sub(r'[^a-zA-Z_0-9]+', '_', os.path.basename(filename)).upper()

class TranslationUnit(CCodeNode):
    _fields = [
        ("filename", ""),
        ("header_guard", ""),
        ("includes", []),
        ("prolog", ""),
        ("epilog", ""),
        ("stmts", []),
    ]
    def codegen(self, out):
        out.write_line('// This file is auto-generated, do not edit.')
        if self.header_guard:
            CppIfndef(first=self.header_guard).codegen(out)
            CppDefine(first=self.header_guard, second='1').codegen(out)
        out.write('\n')
        if self.includes:
            for inc in self.includes:
                inc.codegen(out)
            out.write('\n')
        if self.prolog:
            out.write(self.prolog.rstrip('\n') + '\n\n')
        for stmt in self.stmts:
            stmt.codegen(out)
        if self.epilog:
            out.write('\n' + self.epilog.rstrip('\n') + '\n')
        if self.header_guard:
            out.write('\n')
            CppEndif(first='// ' + self.header_guard).codegen(out)

class Namespace(CCodeNode):
    _fields = [
        ("name", ""),
        ("stmts", []),
    ]
    def codegen(self, out):
        out.write_line('namespace ' + self.name + ' {')
        out.write('\n')
        for stmt in self.stmts:
            stmt.codegen(out)
        out.write_line('} // end namespace ' + self.name)

class ClassForwardDecl(CCodeNode):
    _fields = [ ("name", "") ]
    def codegen(self, out):
        out.write_line('class ' + self.name + ';')

class DataType(CCodeNode):
    _fields = [
        ("name", ""),
        ("namespace", "")
    ]
    def codegen(self, out):
        if self.namespace:
            out.write(self.namespace + '::')
        out.write(self.name)

class TemplatedType(DataType):
    _fields = [ ("template_args", []) ]
    def codegen(self, out):
        super().codegen(out) # generate the data-type part
        out.write('<')
        _write_list(out, self.template_args)
        out.write('>')

class Parameter(CCodeNode):
    _fields = [
        ("type", None),
        ("name", ""),
        ("default", None),
        ("is_const", False),
    ]
    def codegen(self, out, with_default=True):
        if self.is_const:
            out.write('const ')
        self.type.codegen(out)
        out.write(' ' + self.name)
        if self.default and with_default:
            out.write(' = ' + self.default)

def _write_params(out, params, with_defaults=True):
    for num, param in enumerate(params):
        if num > 0:
            out.write(', ')
        param.codegen(out, with_defaults)

class ConstructorChainUp(CCodeNode):
    _fields = [ ("target", ""), ("args", []) ]
    def codegen(self, out):
        out.write(self.target + '(' + ', '.join(self.args) + ')')

class Friend(CCodeNode):
    _fields = [ ("name", ""), ("is_struct", False) ]
    def codegen(self, out):
        kind = 'struct' if self.is_struct else 'class'
        out.write_line('friend ' + kind + ' ' + self.name + ';')

class UsingAlias(CCodeNode):
    _fields = [ ("name", ""), ("type", None) ]
    def codegen(self, out):
        out.write_indented('using ' + self.name + ' = ')
        self.type.codegen(out)
        out.write(';\n')

class EnumClass(CCodeNode):
    _fields = [ ("name", ""), ("underlying", ""), ("enumerators", []) ]
    def codegen(self, out):
        out.write_indented('enum class ' + self.name)
        if self.underlying:
            out.write(' : ' + self.underlying)
        out.write(' {\n')
        out.indent()
        for enumerator in self.enumerators:
            out.write_line(enumerator + ',')
        out.unindent()
        out.write_line('};')

class Field(CCodeNode):
    _fields = [ ("type", None), ("name", "") ]
    def codegen(self, out):
        out.write_indented('')
        self.type.codegen(out)
        out.write(' ' + self.name + ';\n')

class MethodDecl(CCodeNode):
    _fields = [
        ("type", None),
        ("name", ""),
        ("params", []),
        ("is_const", False),
        ("is_static", False),
    ]
    def codegen(self, out):
        out.write_indented('static ' if self.is_static else '')
        self.type.codegen(out)
        out.write(' ' + self.name + '(')
        _write_params(out, self.params)
        out.write(') const;\n' if self.is_const else ');\n')

class InlineMethod(CCodeNode):
    _fields = [
        ("type", None),
        ("name", ""),
        ("params", []),
        ("stmts", []),
        ("is_const", False),
        ("is_static", False),
    ]
    def codegen(self, out):
        out.write_indented('static ' if self.is_static else '')
        self.type.codegen(out)
        out.write(' ' + self.name + '(')
        _write_params(out, self.params)
        out.write(') const {' if self.is_const else ') {')
        _write_body(out, self.stmts)

class Method(CCodeNode):
    """
    An out-of-class method definition. The return type goes on a line of
    its own, followed by `Class::name(...)`.
    """
    _fields = [
        ("type", None),
        ("name", ""),
        ("params", []),
        ("stmts", []),
        ("is_const", False),
        ("cls", None) ]
    def codegen(self, out):
        out.write_indented('')
        self.type.codegen(out)
        out.write('\n')
        out.write_indented(self.cls + '::' + self.name + '(')
        _write_params(out, self.params, with_defaults=False)
        out.write(') const {' if self.is_const else ') {')
        _write_body(out, self.stmts)

def _write_body(out, stmts):
    if len(stmts) == 0:
        out.write('}\n')
    else:
        out.write('\n')
        out.indent()
        for stmt in stmts:
            stmt.codegen(out)
        out.unindent()
        out.write_line('}')

class Constructor(CCodeNode):
    """
    A constructor. Inside a class body `cls` is left empty; for an
    out-of-class definition it names the class. With `is_decl` only the
    declaration is written.
    """
    _fields = [
        ("name", ""),
        ("params", []),
        ("initializers", []),
        ("stmts", []),
        ("cls", ""),
        ("is_decl", False),
    ]
    def codegen(self, out):
        prefix = self.cls + '::' if self.cls else ''
        out.write_indented(prefix + self.name + '(')
        _write_params(out, self.params, with_defaults=not self.cls)
        out.write(')')
        if self.is_decl:
            out.write(';\n')
            return
        if self.initializers:
            out.write('\n')
            out.indent()
            out.write_indented(': ')
            _write_list(out, self.initializers)
            out.unindent()
        out.write(' {')
        _write_body(out, self.stmts)

class Stmt(CCodeNode):
    _fields = [ ("code", "") ]
    def codegen(self, out):
        if self.code:
            out.write_indented(self.code)
            if not self.code.endswith(';'):
                out.write(';')
            out.write('\n')

class IfBlock(CCodeNode):
    _fields = [ ("cond", ""), ("stmts", []) ]
    def codegen(self, out):
        out.write_indented('if (' + self.cond + ') {')
        _write_body(out, self.stmts)

class BraceInitStmt(CCodeNode):
    """
    A statement whose middle is a braced initializer list, one item per
    line: `<head>{ item, ... }<tail>;`.
    """
    _fields = [ ("head", ""), ("items", []), ("tail", "") ]
    def codegen(self, out):
        if not self.items:
            out.write_line(self.head + '{}' + self.tail + ';')
            return
        out.write_line(self.head + '{')
        out.indent()
        out.indent()
        for item in self.items:
            out.write_line(item + ',')
        out.unindent()
        out.write_line('}' + self.tail + ';')
        out.unindent()

class ClassDecl(CCodeNode):
    """
    A class definition. `private` members are written first, under the
    default access of a `class`, and `public` ones after a `public:` label.
    """
    _fields = [
        ("name", ""),
        ("bases", []),
        ("private", []),
        ("public", []),
        ("is_final", False),
    ]
    def codegen(self, out):
        out.write_indented('class ' + self.name)
        if self.is_final:
            out.write(' final')
        if len(self.bases) > 0:
            out.write(' : ')
            _write_list(out, ['public ' + base for base in self.bases])
        out.write(' {\n')
        out.indent()
        for member in self.private:
            member.codegen(out)
        if self.public:
            out.unindent()
            out.write_line('public:')
            out.indent()
            for member in self.public:
                member.codegen(out)
        out.unindent()
        out.write_line('};')
