import sys
from .nodes import *
from . import codeio
from . import categories
from . import slots

class DebugTree(NodeVisitor):
    """
    Dumps a loaded schema as an indented XML-ish tree, annotated with the
    category each definition resolves to and the ordinal of each slot.
    """

    def __init__(self, out=sys.stdout, indent='  '):
        self.out = out
        self.code = codeio.CodeIO(None, indent)
        self.registry = None
        self.resolver = None

    def dump(self, schema):
        self.registry = categories.CategoryRegistry(schema)
        self.resolver = slots.ChildSlotResolver(self.registry)
        schema.accept(self)
        self.out.write(self.code.contents)

    def write(self, txt):
        self.code.write(txt)
    def write_line(self, txt):
        self.code.write_line(txt)
    def indent(self):
        self.code.indent()
    def unindent(self):
        self.code.unindent()

    def generic_visit(self, node):
        # if this runs, there's a problem :(
        self.write_line('<Unhandled>%s</Unhandled>' % node.__class__.__name__)

    def literal(self, node):
        if isinstance(node, ListLiteral):
            return '[' + ', '.join(self.literal(item) for item in node.value) + ']'
        return '%s' % node.value

    def category_attr(self, definition):
        category = self.registry.table.get(definition.name)
        return ' category="%s"' % category if category else ''

    def bases_attr(self, definition):
        if not definition.bases:
            return ''
        return ' bases="%s"' % ','.join(definition.base_names)

    def visit_Option(self, node):
        self.write_line('<Option name="%s">%s</Option>' % (node.name, self.literal(node.value)))

    def visit_Target(self, node):
        self.write_line('<Target name="%s">' % node.name)
        self.indent()
        for opt in node.options:
            opt.accept(self)
        self.unindent()
        self.write_line('</Target>')

    def visit_SyntaxClass(self, node):
        self.write_line('<Class name="%s"%s%s/>' % (
            node.name, self.bases_attr(node), self.category_attr(node)))

    def visit_TokenDef(self, node):
        constraint = self.resolver.tokens.constraint_for(node)
        spelling = '' if constraint.is_identifier_like else ' spelling="%s"' % constraint.spelling
        self.write_line('<Token name="%s" kind="%s"%s open="%s"/>' % (
            node.name, constraint.kind, spelling, constraint.is_identifier_like))

    def visit_NodeDef(self, node):
        self.write_line('<Node name="%s"%s%s>' % (
            node.name, self.bases_attr(node), self.category_attr(node)))
        self.indent()
        ordinals = dict((slot.name, slot.ordinal) for slot in self.resolver.slots_of(node))
        for field in node.fields:
            if field.is_layout:
                self.write_line('<Slot name="%s" ordinal="%d" type="%s"/>' % (
                    field.name, ordinals[field.name], field.value.node.name))
            else:
                self.write_line('<Field name="%s">%s</Field>' % (
                    field.name, self.literal(field.value)))
        self.unindent()
        self.write_line('</Node>')

    def visit_SchemaFile(self, node):
        self.write_line('<Schema src="%s">' % (node.filename or ''))
        self.indent()
        for target in node.targets:
            target.accept(self)
        for cls in node.classes:
            cls.accept(self)
        for token in node.tokens:
            token.accept(self)
        for treenode in node.nodes:
            treenode.accept(self)
        self.unindent()
        self.write_line('</Schema>')
