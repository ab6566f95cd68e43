"""
Syntax categories and the registry that maps every definition in a schema
to its nearest registered category.
"""

from . import report

DECL              = "Decl"
EXPR              = "Expr"
STMT              = "Stmt"
TYPE              = "Type"
PATTERN           = "Pattern"
TOKEN             = "Token"
SYNTAX_COLLECTION = "SyntaxCollection"
SYNTAX_FACTORY    = "SyntaxFactory"
SYNTAX_REWRITER   = "SyntaxRewriter"

# Categories a definition can resolve to
REGISTERED = (DECL, STMT, EXPR, TYPE, PATTERN, TOKEN, SYNTAX_COLLECTION)

# Categories that get a handle/wrapper pair per node definition
TREE_CATEGORIES = (DECL, EXPR, STMT, TYPE, PATTERN)

# Accepted on the command line but generate only a placeholder
RESERVED_CATEGORIES = (SYNTAX_FACTORY, SYNTAX_REWRITER)

MISSING_KINDS = {
    DECL:              "MissingDecl",
    EXPR:              "MissingExpr",
    STMT:              "MissingStmt",
    TYPE:              "MissingType",
    PATTERN:           "MissingPattern",
    SYNTAX_COLLECTION: "MissingSyntaxCollection",
}

# Token classes whose spelling is not fixed by their kind
OPEN_TOKEN_CLASSES = ("Identifier", "Literal")

# Abstract classes every schema implicitly starts from, with their parents
BUILTIN_CLASSES = [
    ("Syntax", []),
    (DECL, ["Syntax"]),
    (EXPR, ["Syntax"]),
    (STMT, ["Syntax"]),
    (TYPE, ["Syntax"]),
    (PATTERN, ["Syntax"]),
    (SYNTAX_COLLECTION, ["Syntax"]),
    (TOKEN, ["Syntax"]),
    ("Identifier", [TOKEN]),
    ("Literal", [TOKEN]),
    ("Keyword", [TOKEN]),
    ("Punctuator", [TOKEN]),
]

def is_known_category(name):
    return name in TREE_CATEGORIES or name in RESERVED_CATEGORIES

class CategoryRegistry(object):
    """
    Precomputed definition -> category table. Building the registry walks
    the ancestry of every class, token and node once; `resolve` is then a
    dictionary lookup.
    """

    def __init__(self, schema, registered=REGISTERED):
        self.schema = schema
        self.registered = tuple(registered)
        self.table = {}
        for definition in schema.classes + schema.tokens + schema.nodes:
            category = self._nearest(definition)
            if category is not None:
                self.table[definition.name] = category

    def _nearest(self, definition):
        if definition.name in self.registered:
            return definition.name
        for ancestor in definition.ancestors():
            if ancestor.name in self.registered:
                return ancestor.name
        return None

    def resolve(self, definition):
        category = self.table.get(definition.name)
        if category is None:
            report.error("'%s' does not derive from any syntax category " % definition.name +
                         "(expected one of %s)" % ', '.join(self.registered),
                         definition.location)
        return category

    def missing_kind_for(self, category):
        kind = MISSING_KINDS.get(category)
        if kind is None:
            report.error("category '%s' has no missing placeholder kind" % category)
        return kind

    def nodes_in(self, category):
        ' Node definitions whose effective category is `category`, in schema order. '
        return [node for node in self.schema.nodes
                if self.table.get(node.name) == category]
