from . import categories
from . import ccode
from . import ccodeio
from . import nodes
from . import report
from . import target
from .slots import is_token_slot
from .target import OptionInfo as OptInf

def cpp_string(text):
    ' Quote text as a C++ string literal. '
    escaped = text.replace('\\', '\\\\').replace('"', '\\"').replace('\n', '\\n')
    return '"' + escaped + '"'

def handle_name(name):
    return name + 'Syntax'

def data_name(name):
    return name + 'SyntaxData'

def slot_type_name(slot):
    if is_token_slot(slot):
        return 'TokenSyntax'
    return handle_name(slot.target.category)

def cursor_index(node, slot, qualified=False):
    cursor = handle_name(node.name) + '::Cursor' if qualified else 'Cursor'
    return 'cursorIndex(%s::%s)' % (cursor, slot.name)

def token_assertion(variable, constraint):
    ' The statement checking that `variable` holds a token matching `constraint`. '
    kind = 'tok::' + constraint.kind
    if constraint.is_identifier_like:
        return ccode.Stmt(code='syntax_assert_token_kind(%s, %s)' % (variable, kind))
    return ccode.Stmt(code='syntax_assert_token_is(%s, %s, %s)' % (
        variable, kind, cpp_string(constraint.spelling)))

def _super_name(node):
    return node.bases[0].name if node.bases else 'Syntax'

class HandleEmitter(object):
    """
    Declares the user-facing `<Node>Syntax` class: its cursor enumeration,
    one getter and one `with` updater per slot, and `classof`.
    """

    def __init__(self, target):
        self.target = target

    def emit(self, node):
        slots = self.target.resolver.slots_of(node)
        name = handle_name(node.name)
        super_name = handle_name(_super_name(node))
        cls = ccode.ClassDecl(name=name, bases=[super_name], is_final=True)
        cls.private.extend([
            ccode.Friend(name='SyntaxFactory', is_struct=True),
            ccode.Friend(name=data_name(node.name)),
            ccode.Friend(name='SyntaxData'),
            ccode.BlankLine(),
            ccode.UsingAlias(name='DataType', type=ccode.DataType(name=data_name(node.name))),
            ccode.BlankLine(),
            ccode.EnumClass(name='Cursor', underlying='CursorIndex',
                            enumerators=[slot.name for slot in slots]),
            ccode.BlankLine(),
            ccode.Constructor(
                name=name,
                params=[
                    ccode.Parameter(type=rc('SyntaxData'), name='Root'),
                    ccode.Parameter(type=ccode.DataType(name=data_name(node.name)),
                                    name='*Data', is_const=True),
                ],
                initializers=[ccode.ConstructorChainUp(
                    target=super_name,
                    args=['Root', 'Data'])]),
            ccode.BlankLine(),
        ])
        for slot in slots:
            child_type = ccode.DataType(name=slot_type_name(slot))
            cls.public.append(ccode.MethodDecl(
                type=optional(slot_type_name(slot)),
                name='get' + slot.name,
                is_const=True))
            cls.public.append(ccode.MethodDecl(
                type=ccode.DataType(name=name),
                name='with' + slot.name,
                params=[ccode.Parameter(type=child_type, name='New' + slot.name)],
                is_const=True))
            cls.public.append(ccode.BlankLine())
        cls.public.append(ccode.InlineMethod(
            type=ccode.DataType(name='bool'),
            name='classof',
            params=[ccode.Parameter(type=ccode.DataType(name='Syntax'), name='*S',
                                    is_const=True)],
            stmts=[ccode.Stmt(code='return S->getKind() == SyntaxKind::' + node.name)],
            is_static=True))
        return cls

def rc(name):
    return ccode.TemplatedType(name='RC', template_args=[ccode.DataType(name=name)])

def optional(name):
    return ccode.TemplatedType(name='Optional', namespace='llvm',
                               template_args=[ccode.DataType(name=name)])

def _wrapper_params(with_defaults=True):
    return [
        ccode.Parameter(type=rc('RawSyntax'), name='Raw'),
        ccode.Parameter(type=ccode.DataType(name='SyntaxData'), name='*Parent',
                        default='nullptr' if with_defaults else None, is_const=True),
        ccode.Parameter(type=ccode.DataType(name='CursorIndex'), name='IndexInParent',
                        default='0' if with_defaults else None),
    ]

class WrapperEmitter(object):
    """
    The cached wrapper `<Node>SyntaxData`: its declaration (one cache field
    per slot, constructor, make, makeBlank) and the definitions of the
    constructor invariants, make and makeBlank.
    """

    def __init__(self, target):
        self.target = target

    def emit_interface(self, node):
        slots = self.target.resolver.slots_of(node)
        name = data_name(node.name)
        cls = ccode.ClassDecl(name=name, bases=[data_name(_super_name(node))],
                              is_final=True)
        cls.private.extend([
            ccode.Friend(name='SyntaxData'),
            ccode.Friend(name=handle_name(node.name)),
            ccode.Friend(name='SyntaxFactory', is_struct=True),
            ccode.BlankLine(),
        ])
        for slot in slots:
            cls.private.append(ccode.Field(type=rc('SyntaxData'), name='Cached' + slot.name))
        if slots:
            cls.private.append(ccode.BlankLine())
        cls.private.extend([
            ccode.Constructor(name=name, params=_wrapper_params(), is_decl=True),
            ccode.BlankLine(),
            ccode.MethodDecl(type=rc(name), name='make', params=_wrapper_params(),
                             is_static=True),
            ccode.MethodDecl(type=rc(name), name='makeBlank', is_static=True),
            ccode.BlankLine(),
        ])
        cls.public.append(ccode.InlineMethod(
            type=ccode.DataType(name='bool'),
            name='classof',
            params=[ccode.Parameter(type=ccode.DataType(name='SyntaxData'), name='*SD',
                                    is_const=True)],
            stmts=[ccode.Stmt(code='return SD->getKind() == SyntaxKind::' + node.name)],
            is_static=True))
        return cls

    def invariants(self, node):
        ' Assertions every raw node handed to the constructor must satisfy. '
        slots = self.target.resolver.slots_of(node)
        stmts = [
            ccode.Stmt(code='assert(Raw->getKind() == SyntaxKind::%s)' % node.name),
            ccode.Stmt(code='assert(Raw->getLayout().size() == %d)' % len(slots)),
        ]
        for slot in slots:
            child = 'Raw->getChild(%s)' % cursor_index(node, slot, qualified=True)
            if is_token_slot(slot):
                stmts.append(token_assertion(child, slot.target))
            else:
                stmts.append(ccode.Stmt(
                    code='assert(getSyntaxCategory(%s->getKind()) == SyntaxCategory::%s)' % (
                        child, slot.target.category)))
        return stmts

    def placeholder(self, slot):
        if is_token_slot(slot):
            spelling = slot.target.spelling if slot.target.spelling is not None else ''
            return 'TokenSyntax::missingToken(tok::%s, %s)' % (
                slot.target.kind, cpp_string(spelling))
        kind = self.target.registry.missing_kind_for(slot.target.category)
        return 'RawSyntax::missing(SyntaxKind::%s)' % kind

    def emit_implementation(self, node):
        name = data_name(node.name)
        stmts = []
        stmts.append(ccode.Constructor(
            name=name,
            cls=name,
            params=_wrapper_params(with_defaults=False),
            initializers=[ccode.ConstructorChainUp(
                target=data_name(_super_name(node)),
                args=['Raw', 'Parent', 'IndexInParent'])],
            stmts=self.invariants(node)))
        stmts.append(ccode.BlankLine())

        stmts.append(ccode.Method(
            type=rc(name), name='make', cls=name,
            params=_wrapper_params(with_defaults=False),
            stmts=[ccode.Stmt(code='return RC<%s> { new %s { Raw, Parent, IndexInParent } }' % (
                name, name))]))
        stmts.append(ccode.BlankLine())

        slots = self.target.resolver.slots_of(node)
        stmts.append(ccode.Method(
            type=rc(name), name='makeBlank', cls=name,
            stmts=[ccode.BraceInitStmt(
                head='return make(RawSyntax::make(SyntaxKind::%s, ' % node.name,
                items=[self.placeholder(slot) for slot in slots],
                tail=', SourcePresence::Present))')]))
        stmts.append(ccode.BlankLine())
        return stmts

class ValueImplEmitter(object):
    """
    Bodies of the handle's getters (lazy, atomically published child
    realization) and `with` updaters (copy-on-write child replacement).
    """

    def __init__(self, target):
        self.target = target

    def getter(self, node, slot):
        name = handle_name(node.name)
        child_type = slot_type_name(slot)
        index = cursor_index(node, slot)
        return ccode.Method(
            type=optional(child_type),
            name='get' + slot.name,
            cls=name,
            is_const=True,
            stmts=[
                ccode.Stmt(code='auto RawChild = getRaw()->getChild(%s)' % index),
                ccode.IfBlock(cond='RawChild->isMissing()',
                              stmts=[ccode.Stmt(code='return llvm::None')]),
                ccode.Stmt(code='auto *MyData = getUnsafeData<%s>()' % name),
                ccode.Stmt(code='auto &ChildPtr = *reinterpret_cast<std::atomic<uintptr_t>*>('
                                '&MyData->Cached%s)' % slot.name),
                ccode.Stmt(code='SyntaxData::realizeSyntaxNode<%s>(ChildPtr, RawChild, MyData, %s)' % (
                    child_type, index)),
                ccode.Stmt(code='return %s { Root, MyData->Cached%s.get() }' % (
                    child_type, slot.name)),
            ])

    def updater(self, node, slot):
        name = handle_name(node.name)
        arg = 'New' + slot.name
        stmts = []
        if is_token_slot(slot):
            stmts.append(token_assertion(arg + '.getRaw()', slot.target))
        stmts.append(ccode.Stmt(code='return Data->replaceChild<%s>(%s.getRaw(), Cursor::%s)' % (
            name, arg, slot.name)))
        return ccode.Method(
            type=ccode.DataType(name=name),
            name='with' + slot.name,
            cls=name,
            is_const=True,
            params=[ccode.Parameter(type=ccode.DataType(name=slot_type_name(slot)), name=arg)],
            stmts=stmts)

    def emit(self, node):
        stmts = []
        for slot in self.target.resolver.slots_of(node):
            stmts.append(self.getter(node, slot))
            stmts.append(ccode.BlankLine())
            stmts.append(self.updater(node, slot))
            stmts.append(ccode.BlankLine())
        return stmts

class CPlusPlusTarget(target.CodegenTarget):
    # Name of the target as in the schema's "targets" section
    name = "CPlusPlus"
    # Name of the target on the command line
    language = "c++"

    options = {
        "cpp_indent":          OptInf(nodes.StringLiteral, " "),
        "epilog":              OptInf(nodes.StringLiteral, ""),
        "header_guard":        OptInf(nodes.StringLiteral, ""),
        "includes":            OptInf(nodes.ListLiteral, []),
        "indent":              OptInf(nodes.StringLiteral, "  "),
        "namespace":           OptInf(nodes.StringLiteral, ""),
        "prolog":              OptInf(nodes.StringLiteral, ""),
        "use_line_directives": OptInf(nodes.BoolLiteral, False),
    }

    def __init__(self, schema, registry, resolver, overrides=None):
        super().__init__(schema, registry, resolver, overrides)
        self.pstack = []
        self.handles = HandleEmitter(self)
        self.wrappers = WrapperEmitter(self)
        self.values = ValueImplEmitter(self)

    @property
    def top(self):
        return self.pstack[-1]

    def line_dir(self, location):
        if location and self.opt_value("use_line_directives"):
            return ccode.CppLine(first='%d' % location.line,
                                 second='"%s"' % location.file)
        return ccode.Stmt(code='')

    def reset_line_dir(self):
        if self.opt_value("use_line_directives"):
            return ccode.CppLineReset()
        return ccode.Stmt(code='')

    def header_guard(self, category, out_filename):
        guard = self.opt_value("header_guard")
        if guard:
            return guard
        return ccode.header_guard_for(out_filename or category + 'Syntax.h')

    def add_includes(self):
        includes = self.get_opt("includes")
        for inc in includes.value:
            if not isinstance(inc, nodes.StringLiteral):
                report.error("invalid data type '%s' in " % inc.__class__.__name__ +
                             "'includes' option for codegen target '%s'" % self.name)
            inc_name = inc.value
            # Add double quotes if not <> include and has no enclosing quotes
            if not inc_name.startswith(('<', '"')):
                inc_name = '"' + inc_name + '"'
            self.tu.includes.append(ccode.CppInclude(first=inc_name))

    def open_namespaces(self):
        ns_name = self.opt_value("namespace")
        if not ns_name:
            return 0
        parts = [p for p in ns_name.split('::') if p]
        for part in parts:
            ns = ccode.Namespace(name=part)
            self.top.stmts.append(ns)
            self.pstack.append(ns)
        return len(parts)

    def gen_interface(self, node_list):
        for node in node_list:
            self.top.stmts.append(ccode.ClassForwardDecl(name=data_name(node.name)))
        if node_list:
            self.top.stmts.append(ccode.BlankLine())
        for node in node_list:
            self.top.stmts.append(self.line_dir(node.location))
            self.top.stmts.append(self.handles.emit(node))
            self.top.stmts.append(self.reset_line_dir())
            self.top.stmts.append(ccode.BlankLine())
            self.top.stmts.append(self.wrappers.emit_interface(node))
            self.top.stmts.append(ccode.BlankLine())

    def gen_implementation(self, node_list):
        for node in node_list:
            self.top.stmts.append(ccode.CppPragmaMark(first=node.name + ' API'))
            self.top.stmts.append(ccode.BlankLine())
            self.top.stmts.extend(self.values.emit(node))
            self.top.stmts.append(ccode.CppPragmaMark(first=node.name + ' Data'))
            self.top.stmts.append(ccode.BlankLine())
            self.top.stmts.append(self.line_dir(node.location))
            self.top.stmts.extend(self.wrappers.emit_implementation(node))
            self.top.stmts.append(self.reset_line_dir())

    def gen_placeholder(self, category, action):
        what = 'interface' if action == 'interface' else 'implementation'
        self.top.stmts.append(ccode.Comment(
            text='%s %s generation is not implemented.' % (category, what)))

    def codegen(self, category, action, out_filename=None):
        """
        First builds a CCodeNode tree for the requested category and action
        and then calls its codegen method to generate output code.
        """
        self.tu = ccode.TranslationUnit(
            filename=out_filename or '',
            prolog=self.opt_value("prolog"),
            epilog=self.opt_value("epilog"))
        if action == 'interface':
            self.tu.header_guard = self.header_guard(category, out_filename)
        self.pstack = [self.tu]
        self.add_includes()
        depth = self.open_namespaces()

        if category in categories.TREE_CATEGORIES:
            node_list = self.tree_nodes(category)
            if action == 'interface':
                self.gen_interface(node_list)
            else:
                self.gen_implementation(node_list)
        else:
            self.gen_placeholder(category, action)

        for _ in range(depth):
            self.pstack.pop()

        out = ccodeio.CCodeIO(out_filename or '<stdout>',
                              self.opt_value("indent"),
                              self.opt_value("cpp_indent"))
        self.tu.codegen(out)
        return out.contents
