import re
from . import categories
from . import codeio
from . import nodes
from . import pycode
from . import target
from .slots import is_token_slot
from .target import OptionInfo as OptInf

_camel_boundary = re.compile(r'(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])')

def snake_case(name):
    return _camel_boundary.sub('_', name).lower()

def handle_name(name):
    return name + 'Syntax'

def data_name(name):
    return name + 'SyntaxData'

def slot_type_name(slot):
    if is_token_slot(slot):
        return 'TokenSyntax'
    return handle_name(slot.target.category)

def token_assertion(variable, constraint):
    if constraint.is_identifier_like:
        return pycode.Stmt(code='syntax_assert_token_kind(%s, %r)' % (variable, constraint.kind))
    return pycode.Stmt(code='syntax_assert_token_is(%s, %r, %r)' % (
        variable, constraint.kind, constraint.spelling))

_WRAPPER_PARAMS = ['raw', 'parent=None', 'index_in_parent=0']
_WRAPPER_STUB_PARAMS = ['raw: RawSyntax', 'parent: Optional[SyntaxData] = ...',
                        'index_in_parent: int = ...']

class HandleEmitter(object):
    """
    The user-facing `<Node>Syntax` class. With `is_stub` only signatures
    are written (for a .pyi interface); otherwise the bodies come from the
    ValueImplEmitter.
    """

    def __init__(self, target, is_stub=False):
        self.target = target
        self.is_stub = is_stub

    def cursor(self, slots):
        if self.is_stub:
            body = [pycode.Stmt(code='%s: int' % slot.name) for slot in slots]
        else:
            body = [pycode.Stmt(code='%s = %d' % (slot.name, slot.ordinal)) for slot in slots]
        return pycode.ClassDef(name='Cursor', bases=['object'], body=body)

    def emit(self, node):
        slots = self.target.resolver.slots_of(node)
        name = handle_name(node.name)
        category = self.target.registry.resolve(node)
        base = handle_name(category)
        self.target.use(base)
        body = []
        if not self.is_stub:
            body.append(pycode.Stmt(code='__slots__ = ()'))
            body.append(pycode.BlankLine())
            body.append(pycode.Stmt(code='data_class = %s' % data_name(node.name)))
        else:
            body.append(pycode.Stmt(code='data_class: type[%s]' % data_name(node.name)))
        body.append(pycode.BlankLine())
        body.append(self.cursor(slots))
        body.append(pycode.BlankLine())
        values = self.target.values
        for slot in slots:
            child_type = slot_type_name(slot)
            self.target.use(child_type)
            attr = snake_case(slot.name)
            body.append(pycode.FunctionDef(
                name='get_' + attr,
                params=['self'],
                returns='Optional[%s]' % child_type if self.is_stub else '',
                body=[] if self.is_stub else values.getter(node, slot),
                is_stub=self.is_stub))
            body.append(pycode.BlankLine())
            arg = 'new_' + attr
            body.append(pycode.FunctionDef(
                name='with_' + attr,
                params=['self', arg + ': ' + child_type if self.is_stub else arg],
                returns=name if self.is_stub else '',
                body=[] if self.is_stub else values.updater(node, slot),
                is_stub=self.is_stub))
            body.append(pycode.BlankLine())
        body.append(pycode.FunctionDef(
            name='classof',
            params=['cls', 'syntax: Syntax' if self.is_stub else 'syntax'],
            returns='bool' if self.is_stub else '',
            decorators=['classmethod'],
            body=[pycode.Stmt(code='return syntax.kind == %r' % node.name)],
            is_stub=self.is_stub))
        if self.is_stub:
            self.target.use('Syntax')
        return pycode.ClassDef(name=name, bases=[base], body=body)

class WrapperEmitter(object):
    """
    The cached wrapper `<Node>SyntaxData`: constructor invariants, `make`
    and `make_blank`.
    """

    def __init__(self, target, is_stub=False):
        self.target = target
        self.is_stub = is_stub

    def invariants(self, node):
        slots = self.target.resolver.slots_of(node)
        self.target.use('syntax_assert_kind', 'syntax_assert_layout_size')
        stmts = [
            pycode.Stmt(code='syntax_assert_kind(raw, %r)' % node.name),
            pycode.Stmt(code='syntax_assert_layout_size(raw, %d)' % len(slots)),
        ]
        for slot in slots:
            child = 'raw.get_child(%d)' % slot.ordinal
            if is_token_slot(slot):
                self.target.use('syntax_assert_token_kind' if slot.target.is_identifier_like
                                else 'syntax_assert_token_is')
                stmts.append(token_assertion(child, slot.target))
            else:
                self.target.use('syntax_assert_category')
                stmts.append(pycode.Stmt(code='syntax_assert_category(%s, %r)' % (
                    child, slot.target.category)))
        return stmts

    def placeholder(self, slot):
        if is_token_slot(slot):
            self.target.use('RawTokenSyntax')
            spelling = slot.target.spelling if slot.target.spelling is not None else ''
            return 'RawTokenSyntax.missing_token(%r, %r)' % (slot.target.kind, spelling)
        return 'RawSyntax.missing(%r)' % self.target.registry.missing_kind_for(slot.target.category)

    def emit(self, node):
        name = data_name(node.name)
        self.target.use('SyntaxData', 'RawSyntax')
        if self.is_stub:
            body = [
                pycode.Stmt(code='syntax_kind: str'),
                pycode.FunctionDef(name='__init__', params=['self'] + _WRAPPER_STUB_PARAMS,
                                   returns='None', is_stub=True),
                pycode.FunctionDef(name='make', params=['cls'] + _WRAPPER_STUB_PARAMS,
                                   returns=name, decorators=['classmethod'], is_stub=True),
                pycode.FunctionDef(name='make_blank', params=['cls'], returns=name,
                                   decorators=['classmethod'], is_stub=True),
            ]
            return pycode.ClassDef(name=name, bases=['SyntaxData'], body=body)

        self.target.use('SourcePresence')
        slots = self.target.resolver.slots_of(node)
        body = [
            pycode.Stmt(code='__slots__ = ()'),
            pycode.BlankLine(),
            pycode.Stmt(code='syntax_kind = %r' % node.name),
            pycode.BlankLine(),
            pycode.FunctionDef(
                name='__init__', params=['self'] + _WRAPPER_PARAMS,
                body=[pycode.Stmt(code='super().__init__(raw, parent, index_in_parent)')] +
                     self.invariants(node)),
            pycode.BlankLine(),
            pycode.FunctionDef(
                name='make', params=['cls'] + _WRAPPER_PARAMS, decorators=['classmethod'],
                body=[pycode.Stmt(code='return cls(raw, parent, index_in_parent)')]),
            pycode.BlankLine(),
            pycode.FunctionDef(
                name='make_blank', params=['cls'], decorators=['classmethod'],
                body=[pycode.BracketStmt(
                    head='return cls.make(RawSyntax.make(%r, ' % node.name,
                    items=[self.placeholder(slot) for slot in slots],
                    tail=', SourcePresence.PRESENT))')]),
        ]
        return pycode.ClassDef(name=name, bases=['SyntaxData'], body=body)

class ValueImplEmitter(object):

    def __init__(self, target):
        self.target = target

    def getter(self, node, slot):
        self.target.use('make_handle')
        cursor = 'self.Cursor.' + slot.name
        return [
            pycode.Stmt(code='raw_child = self.raw.get_child(%s)' % cursor),
            pycode.Block(head='if raw_child.is_missing',
                         body=[pycode.Stmt(code='return None')]),
            pycode.Stmt(code='return make_handle(self.data.realize_child(%s))' % cursor),
        ]

    def updater(self, node, slot):
        arg = 'new_' + snake_case(slot.name)
        stmts = []
        if is_token_slot(slot):
            self.target.use('syntax_assert_token_kind' if slot.target.is_identifier_like
                            else 'syntax_assert_token_is')
            stmts.append(token_assertion(arg + '.raw', slot.target))
        stmts.append(pycode.Stmt(code='return %s(self.data.replace_child(self.Cursor.%s, %s.raw))' % (
            handle_name(node.name), slot.name, arg)))
        return stmts

class PythonTarget(target.CodegenTarget):
    # Name of the target as in the schema's "targets" section
    name = "Python"
    # Name of the target on the command line
    language = "python"

    options = {
        "epilog":         OptInf(nodes.StringLiteral, ""),
        "indent":         OptInf(nodes.StringLiteral, "    "),
        "prolog":         OptInf(nodes.StringLiteral, ""),
        "runtime_module": OptInf(nodes.StringLiteral, "libsyntaxgen.runtime"),
    }

    def __init__(self, schema, registry, resolver, overrides=None):
        super().__init__(schema, registry, resolver, overrides)
        self.runtime_names = set()
        self.values = ValueImplEmitter(self)

    def use(self, *names):
        ' Note runtime names the generated module has to import. '
        self.runtime_names.update(names)

    def gen_interface(self, node_list, stmts):
        handles = HandleEmitter(self, is_stub=True)
        wrappers = WrapperEmitter(self, is_stub=True)
        for node in node_list:
            stmts.append(pycode.BlankLine())
            stmts.append(wrappers.emit(node))
            stmts.append(pycode.BlankLine())
            stmts.append(handles.emit(node))

    def gen_implementation(self, node_list, stmts):
        handles = HandleEmitter(self)
        wrappers = WrapperEmitter(self)
        for node in node_list:
            stmts.append(pycode.BlankLine())
            stmts.append(pycode.BlankLine())
            stmts.append(wrappers.emit(node))
            stmts.append(pycode.BlankLine())
            stmts.append(pycode.BlankLine())
            stmts.append(handles.emit(node))
        if node_list:
            self.use('register_syntax_kind')
            stmts.append(pycode.BlankLine())
            stmts.append(pycode.BlankLine())
        for node in node_list:
            category = self.registry.resolve(node)
            stmts.append(pycode.Stmt(code='register_syntax_kind(%r, %r, %s, %s)' % (
                node.name, category, data_name(node.name), handle_name(node.name))))

    def codegen(self, category, action, out_filename=None):
        self.runtime_names = set()
        stmts = []
        is_stub = action == 'interface'
        what = 'interface' if is_stub else 'implementation'
        module = pycode.Module(
            docstring='%s syntax nodes (%s).' % (category, what),
            prolog=self.opt_value("prolog"),
            epilog=self.opt_value("epilog"),
            stmts=stmts)

        if category in categories.TREE_CATEGORIES:
            node_list = self.tree_nodes(category)
            if is_stub:
                self.gen_interface(node_list, stmts)
            else:
                self.gen_implementation(node_list, stmts)
        else:
            stmts.append(pycode.Comment(
                text='%s %s generation is not implemented.' % (category, what)))

        if is_stub and self.runtime_names:
            module.imports.append(pycode.ImportFrom(module='typing', names=['Optional']))
            module.imports.append(pycode.BlankLine())
        if self.runtime_names:
            module.imports.append(pycode.ImportFrom(module=self.opt_value("runtime_module"),
                                                    names=sorted(self.runtime_names)))

        out = codeio.CodeIO(out_filename or '<stdout>', self.opt_value("indent"))
        module.codegen(out)
        return out.contents
