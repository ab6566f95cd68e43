"""
Runtime support for the syntax trees emitted by the Python target.

Three layers cooperate:

* `RawSyntax` / `RawTokenSyntax`: the immutable, structurally shared tree.
  Placeholders for absent children are raw nodes whose presence is
  `SourcePresence.MISSING`.
* `SyntaxData`: a wrapper linking a raw node to its parent wrapper and
  index, caching one child wrapper per slot. Child wrappers are realized
  lazily and published through an `AtomicCell`, so concurrent first
  accesses agree on a single child.
* `Syntax`: the handle users hold. Generated subclasses add `get_*` and
  `with_*` methods; `with_*` never mutates, it returns a handle into a new
  tree that shares every untouched subtree with the old one.

Generated node kinds register themselves with `register_syntax_kind` so
that raw children can be wrapped with the right classes.
"""

import enum
import threading
from collections import namedtuple
from .categories import MISSING_KINDS

__all__ = [
    "SyntaxInvariantError", "SourcePresence", "RawSyntax", "RawTokenSyntax",
    "AtomicCell", "SyntaxData", "TokenSyntaxData", "Syntax", "DeclSyntax",
    "ExprSyntax", "StmtSyntax", "TypeSyntax", "PatternSyntax",
    "SyntaxCollectionSyntax", "TokenSyntax", "register_syntax_kind",
    "lookup_syntax_kind", "syntax_kind_category", "make_handle",
    "syntax_assert", "syntax_assert_kind", "syntax_assert_layout_size",
    "syntax_assert_token_is", "syntax_assert_token_kind",
    "syntax_assert_category",
]

TOKEN_KIND = "Token"

class SyntaxInvariantError(AssertionError):
    """
    A tree does not have the shape its node kind declares. Trees built only
    through the generated factories never raise this.
    """
    pass

class SourcePresence(enum.Enum):
    PRESENT = "Present"
    MISSING = "Missing"

class _Immutable(object):
    __slots__ = ()

    def __setattr__(self, name, value):
        raise AttributeError("'%s' objects are immutable" % self.__class__.__name__)

    def __delattr__(self, name):
        raise AttributeError("'%s' objects are immutable" % self.__class__.__name__)

#
# Raw tree
#

class RawSyntax(_Immutable):
    __slots__ = ("kind", "layout", "presence")

    def __init__(self, kind, layout=(), presence=SourcePresence.PRESENT):
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "layout", tuple(layout))
        object.__setattr__(self, "presence", presence)

    @classmethod
    def make(cls, kind, layout, presence=SourcePresence.PRESENT):
        return RawSyntax(kind, layout, presence)

    @classmethod
    def missing(cls, kind):
        return RawSyntax(kind, (), SourcePresence.MISSING)

    @property
    def is_missing(self):
        return self.presence is SourcePresence.MISSING

    @property
    def is_token(self):
        return False

    def get_child(self, index):
        return self.layout[index]

    def replace_child(self, index, new_child):
        ' Return a copy with layout[index] replaced; other children are shared. '
        layout = list(self.layout)
        layout[index] = new_child
        return RawSyntax(self.kind, layout, self.presence)

    def _key(self):
        return (self.kind, self.presence, self.layout)

    def __eq__(self, other):
        if self is other:
            return True
        if type(self) is not type(other):
            return NotImplemented
        return self._key() == other._key()

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        missing = ', missing' if self.is_missing else ''
        return 'RawSyntax(%s, %r%s)' % (self.kind, list(self.layout), missing)

class RawTokenSyntax(RawSyntax):
    __slots__ = ("token_kind", "text")

    def __init__(self, token_kind, text='', presence=SourcePresence.PRESENT):
        super().__init__(TOKEN_KIND, (), presence)
        object.__setattr__(self, "token_kind", token_kind)
        object.__setattr__(self, "text", text)

    @classmethod
    def make(cls, token_kind, text='', presence=SourcePresence.PRESENT):
        return RawTokenSyntax(token_kind, text, presence)

    @classmethod
    def missing_token(cls, token_kind, text=''):
        return RawTokenSyntax(token_kind, text, SourcePresence.MISSING)

    @property
    def is_token(self):
        return True

    def _key(self):
        return (self.token_kind, self.text, self.presence)

    def __repr__(self):
        missing = ', missing' if self.is_missing else ''
        return 'RawTokenSyntax(%s, %r%s)' % (self.token_kind, self.text, missing)

#
# Assertions used by generated constructors and updaters
#

def syntax_assert(condition, message):
    if not condition:
        raise SyntaxInvariantError(message)

def syntax_assert_kind(raw, kind):
    syntax_assert(raw.kind == kind,
                  "expected a '%s' node, got '%s'" % (kind, raw.kind))

def syntax_assert_layout_size(raw, size):
    syntax_assert(len(raw.layout) == size,
                  "'%s' expects %d children, got %d" % (raw.kind, size, len(raw.layout)))

def syntax_assert_token_kind(raw, token_kind):
    syntax_assert(raw.is_token, "expected a token, got a '%s' node" % raw.kind)
    syntax_assert(raw.token_kind == token_kind,
                  "expected a '%s' token, got '%s'" % (token_kind, raw.token_kind))

def syntax_assert_token_is(raw, token_kind, text):
    syntax_assert_token_kind(raw, token_kind)
    syntax_assert(raw.text == text,
                  "expected '%s' token spelled %r, got %r" % (token_kind, text, raw.text))

def syntax_assert_category(raw, category):
    actual = syntax_kind_category(raw.kind)
    syntax_assert(actual == category,
                  "expected a %s, got a '%s' node (%s)" % (category, raw.kind, actual))

#
# Wrappers
#

class AtomicCell(object):
    """
    A write-once slot. `publish` stores a value only if the cell is still
    empty and returns whichever value won; a loser's value is dropped.
    `get` never blocks.
    """
    __slots__ = ("_value", "_lock")

    def __init__(self):
        self._value = None
        self._lock = threading.Lock()

    def get(self):
        return self._value

    def publish(self, value):
        with self._lock:
            if self._value is None:
                self._value = value
            return self._value

class SyntaxData(_Immutable):
    __slots__ = ("raw", "parent", "index_in_parent", "_children")

    def __init__(self, raw, parent=None, index_in_parent=0):
        object.__setattr__(self, "raw", raw)
        object.__setattr__(self, "parent", parent)
        object.__setattr__(self, "index_in_parent", index_in_parent)
        object.__setattr__(self, "_children", tuple(AtomicCell() for _ in raw.layout))

    @classmethod
    def make(cls, raw, parent=None, index_in_parent=0):
        return cls(raw, parent, index_in_parent)

    @property
    def kind(self):
        return self.raw.kind

    @property
    def root(self):
        data = self
        while data.parent is not None:
            data = data.parent
        return data

    def cached_child(self, index):
        return self._children[index].get()

    def realize_child(self, index):
        """
        Return the wrapper for child `index`, creating it on first use.
        Racing threads may each build one; only the first to publish is
        ever returned.
        """
        cell = self._children[index]
        child = cell.get()
        if child is None:
            raw_child = self.raw.get_child(index)
            data_class = lookup_syntax_kind(raw_child.kind).data_class
            child = cell.publish(data_class.make(raw_child, self, index))
        return child

    def replace_child(self, index, new_raw_child):
        """
        Return a wrapper of the same type over a copy of this node with child
        `index` replaced. Ancestors are rebuilt up to a new root so the
        result stays linked into a consistent tree.
        """
        new_raw = self.raw.replace_child(index, new_raw_child)
        if self.parent is None:
            return type(self).make(new_raw)
        new_parent = self.parent.replace_child(self.index_in_parent, new_raw)
        return new_parent.realize_child(self.index_in_parent)

    def __repr__(self):
        return '%s(%r)' % (self.__class__.__name__, self.raw)

class TokenSyntaxData(SyntaxData):
    __slots__ = ()

    def __init__(self, raw, parent=None, index_in_parent=0):
        super().__init__(raw, parent, index_in_parent)
        syntax_assert(raw.is_token, "expected a token, got a '%s' node" % raw.kind)

#
# Handles
#

class Syntax(_Immutable):
    __slots__ = ("data",)

    category = None
    data_class = SyntaxData

    def __init__(self, data):
        object.__setattr__(self, "data", data)

    @classmethod
    def make_blank(cls):
        return cls(cls.data_class.make_blank())

    @property
    def raw(self):
        return self.data.raw

    @property
    def kind(self):
        return self.data.raw.kind

    @property
    def is_missing(self):
        return self.data.raw.is_missing

    @property
    def root(self):
        return make_handle(self.data.root)

    @property
    def parent(self):
        if self.data.parent is None:
            return None
        return make_handle(self.data.parent)

    @property
    def index_in_parent(self):
        return self.data.index_in_parent

    @property
    def num_children(self):
        return len(self.data.raw.layout)

    def get_child(self, index):
        ' Generic child access; None for missing children. '
        if self.data.raw.get_child(index).is_missing:
            return None
        return make_handle(self.data.realize_child(index))

    @classmethod
    def classof(cls, syntax):
        return cls.category is None or syntax_kind_category(syntax.kind) == cls.category

    def __eq__(self, other):
        if not isinstance(other, Syntax):
            return NotImplemented
        return self.raw == other.raw

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    def __hash__(self):
        return hash(self.raw)

    def __repr__(self):
        return '%s(%r)' % (self.__class__.__name__, self.raw)

class DeclSyntax(Syntax):
    __slots__ = ()
    category = "Decl"

class ExprSyntax(Syntax):
    __slots__ = ()
    category = "Expr"

class StmtSyntax(Syntax):
    __slots__ = ()
    category = "Stmt"

class TypeSyntax(Syntax):
    __slots__ = ()
    category = "Type"

class PatternSyntax(Syntax):
    __slots__ = ()
    category = "Pattern"

class SyntaxCollectionSyntax(Syntax):
    __slots__ = ()
    category = "SyntaxCollection"

    def __len__(self):
        return self.num_children

    def __getitem__(self, index):
        return self.get_child(index)

class TokenSyntax(Syntax):
    __slots__ = ()
    category = TOKEN_KIND
    data_class = TokenSyntaxData

    @classmethod
    def make(cls, token_kind, text=''):
        return cls(TokenSyntaxData.make(RawTokenSyntax.make(token_kind, text)))

    @classmethod
    def missing_token(cls, token_kind, text=''):
        return cls(TokenSyntaxData.make(RawTokenSyntax.missing_token(token_kind, text)))

    @property
    def token_kind(self):
        return self.data.raw.token_kind

    @property
    def text(self):
        return self.data.raw.text

#
# Kind registry
#

SyntaxKindInfo = namedtuple("SyntaxKindInfo", "kind category data_class handle_class")

_registry = {}
_registry_lock = threading.Lock()

_CATEGORY_HANDLES = {
    "Decl": DeclSyntax,
    "Expr": ExprSyntax,
    "Stmt": StmtSyntax,
    "Type": TypeSyntax,
    "Pattern": PatternSyntax,
    "SyntaxCollection": SyntaxCollectionSyntax,
}

def register_syntax_kind(kind, category, data_class=None, handle_class=None):
    """
    Register the classes used to wrap raw nodes of `kind`. Registering a kind
    again under the same category replaces its classes; a different category
    is an error.
    """
    if data_class is None:
        data_class = SyntaxData
    if handle_class is None:
        handle_class = _CATEGORY_HANDLES.get(category, Syntax)
    with _registry_lock:
        existing = _registry.get(kind)
        if existing is not None and existing.category != category:
            raise ValueError("syntax kind '%s' is already registered as a %s" % (
                kind, existing.category))
        info = SyntaxKindInfo(kind, category, data_class, handle_class)
        _registry[kind] = info
    return info

def lookup_syntax_kind(kind):
    info = _registry.get(kind)
    if info is None:
        raise KeyError("unknown syntax kind '%s'" % kind)
    return info

def syntax_kind_category(kind):
    info = _registry.get(kind)
    return info.category if info is not None else None

def make_handle(data):
    ' Wrap `data` in the handle class registered for its kind. '
    return lookup_syntax_kind(data.raw.kind).handle_class(data)

register_syntax_kind(TOKEN_KIND, TOKEN_KIND, TokenSyntaxData, TokenSyntax)
for _category, _missing in sorted(MISSING_KINDS.items()):
    register_syntax_kind(_missing, _category)
