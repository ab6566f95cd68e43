"""
This module contains the schema model nodes: the syntax classes, token
definitions and node definitions that code generation consumes.
"""

from collections import namedtuple

Location = namedtuple("Location", "file line column")

class BaseNode(object):
    def __init__(self, parent=None, children=None, location=None):
        self.parent = parent
        self.children = [] if children is None else children
        self.location = location
    def accept(self, visitor):
        return visitor.visit(self)

class Literal(BaseNode):
    def __init__(self, value):
        super().__init__()
        self.value = value

class BoolLiteral(Literal):
    def __init__(self, value):
        super().__init__(value)

class IntLiteral(Literal):
    def __init__(self, value):
        super().__init__(value)

class StringLiteral(Literal):
    def __init__(self, value):
        super().__init__(value)

class NullLiteral(Literal):
    def __init__(self, value=None):
        super().__init__(value)

class ListLiteral(Literal):
    def __init__(self, list=None):
        super().__init__(list if list is not None else [])

# Temp node, replaced with the referenced definition after loading
class UnresolvedType(BaseNode):
    def __init__(self, name):
        super().__init__()
        self.name = name

class Option(BaseNode):
    def __init__(self, name, value):
        super().__init__()
        self.name = name
        self.value = value

class Target(BaseNode):
    def __init__(self, name, options=None):
        super().__init__()
        self.name = name
        self.options = [] if options is None else options
    def get_option(self, name, default=None):
        for opt in self.options:
            if opt.name == name:
                return opt.value
        return default

class Definition(BaseNode):
    """
    Common base of everything that takes part in the class hierarchy.
    `bases` holds the declared parents, nearest first.
    """
    def __init__(self, name, bases=None):
        super().__init__()
        self.name = name
        self.bases = [] if bases is None else bases
    @property
    def base_names(self):
        return [base.name for base in self.bases]
    def ancestors(self):
        ' Breadth-first walk of the declared ancestry, self excluded. '
        seen = set()
        queue = list(self.bases)
        while queue:
            base = queue.pop(0)
            if base.name in seen:
                continue
            seen.add(base.name)
            yield base
            queue.extend(getattr(base, "bases", []))
    def is_subclass_of(self, name):
        if self.name == name:
            return True
        return any(base.name == name for base in self.ancestors())

class SyntaxClass(Definition):
    ' An abstract class, such as a category (Expr) or a token class (Keyword). '
    pass

class TokenDef(Definition):
    def __init__(self, name, bases=None, kind=None, spelling=None):
        super().__init__(name, bases)
        self.kind = kind
        self.spelling = spelling

class Layout(BaseNode):
    ' The value of a child field; `node` references a token, node or class. '
    def __init__(self, node):
        super().__init__()
        self.node = node

class Field(BaseNode):
    def __init__(self, name, value):
        super().__init__()
        self.name = name
        self.value = value
    @property
    def is_layout(self):
        return isinstance(self.value, Layout)

class NodeDef(Definition):
    def __init__(self, name, bases=None, fields=None):
        super().__init__(name, bases)
        self.fields = [] if fields is None else fields
    def get_field(self, name):
        for field in self.fields:
            if field.name == name:
                return field
        return None

class SchemaFile(BaseNode):
    def __init__(self, filename=None, targets=None, classes=None, tokens=None, nodes=None):
        super().__init__()
        self.filename = filename
        self.targets = [] if targets is None else targets
        self.classes = [] if classes is None else classes
        self.tokens = [] if tokens is None else tokens
        self.nodes = [] if nodes is None else nodes
        self.types = {}
    def get_type(self, name):
        return self.types.get(name)

class NodeVisitor(object):
    def generic_visit(self, node):
        pass
    def visit(self, node):
        func = 'visit_' + node.__class__.__name__
        if hasattr(self, func):
            func = getattr(self, func)
            return func(node)
        else:
            return self.generic_visit(node)
