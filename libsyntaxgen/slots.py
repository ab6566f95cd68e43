"""
Child slot extraction. The ordinal assigned here is emitted verbatim as the
cursor index used by every generated accessor, so slot order must stay the
field declaration order.
"""

from collections import namedtuple
from .nodes import TokenDef
from . import categories
from . import report

ChildSlot = namedtuple("ChildSlot", "name ordinal target")

# `node` is the referenced definition, `category` its resolved category
NodeTarget = namedtuple("NodeTarget", "node category")

TokenConstraintT = namedtuple("TokenConstraint", "kind spelling is_identifier_like")
def TokenConstraint(kind, spelling=None, is_identifier_like=False):
    return TokenConstraintT(kind, None if is_identifier_like else spelling,
                            is_identifier_like)

def is_token_slot(slot):
    return isinstance(slot.target, TokenConstraintT)

class TokenConstraintExtractor(object):

    def __init__(self, open_classes=categories.OPEN_TOKEN_CLASSES):
        self.open_classes = tuple(open_classes)

    def is_identifier_like(self, token):
        return any(token.is_subclass_of(name) for name in self.open_classes)

    def constraint_for(self, token):
        if not token.kind:
            report.error("token '%s' does not declare a kind" % token.name,
                         token.location)
        if self.is_identifier_like(token):
            return TokenConstraint(token.kind, is_identifier_like=True)
        return TokenConstraint(token.kind, token.spelling or '')

class ChildSlotResolver(object):

    def __init__(self, registry, tokens=None):
        self.registry = registry
        self.tokens = tokens if tokens is not None else TokenConstraintExtractor()
        self._cache = {}

    def target_of(self, field):
        definition = field.value.node
        if isinstance(definition, TokenDef):
            return self.tokens.constraint_for(definition)
        category = self.registry.resolve(definition)
        if category == categories.TOKEN:
            report.error("field '%s' refers to token class '%s'; " % (field.name, definition.name) +
                         "token slots must name a concrete token",
                         field.location)
        return NodeTarget(definition.name, category)

    def slots_of(self, node):
        slots = self._cache.get(node.name)
        if slots is None:
            layout_fields = [f for f in node.fields if f.is_layout]
            slots = [ChildSlot(f.name, ordinal, self.target_of(f))
                     for ordinal, f in enumerate(layout_fields)]
            self._cache[node.name] = slots
        return list(slots)
