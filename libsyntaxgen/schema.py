"""
Builds the schema model from the JSON document written by the schema front
end, then resolves every name reference to its definition.

Document layout::

    {
      "classes": {"LoopStmt": ["Stmt"]},
      "tokens":  [{"name": "IfKeyword", "bases": ["Keyword"],
                   "kind": "kw_if", "spelling": "if"}],
      "nodes":   [{"name": "IfStmt", "bases": ["Stmt"],
                   "fields": [{"name": "IfKeyword", "layout": "IfKeyword"},
                              {"name": "IsRequired", "value": true}]}],
      "targets": {"CPlusPlus": {"namespace": "swift::syntax"}}
    }

Tokens and nodes may carry a "location": {"file": ..., "line": ..., "column": ...}
pointing back into the original schema source.
"""

import json
from .nodes import *
from . import categories
from . import report

def _location(data, filename):
    loc = data.get("location")
    if not loc:
        return None
    return Location(loc.get("file", filename), loc.get("line", 0), loc.get("column", 0))

def _literal(value):
    if isinstance(value, bool):
        return BoolLiteral(value)
    elif isinstance(value, int):
        return IntLiteral(value)
    elif isinstance(value, str):
        return StringLiteral(value)
    elif isinstance(value, list):
        return ListLiteral([_literal(v) for v in value])
    elif value is None:
        return NullLiteral()
    report.error("unsupported value '%r' in schema document" % (value,))

def _require(data, key, what):
    if key not in data:
        report.error("%s is missing required key '%s'" % (what, key))
    return data[key]

def _bases(names):
    return [UnresolvedType(name) for name in names]

def _load_field(data, owner, filename):
    name = _require(data, "name", "a field of node '%s'" % owner)
    if "layout" in data:
        value = Layout(UnresolvedType(data["layout"]))
    elif "value" in data:
        value = _literal(data["value"])
    else:
        report.error("field '%s' of node '%s' has neither a 'layout' " % (name, owner) +
                     "nor a 'value'")
    field = Field(name, value)
    field.location = _location(data, filename)
    return field

def _load_token(data, filename):
    name = _require(data, "name", "a token definition")
    token = TokenDef(name, _bases(data.get("bases", [categories.TOKEN])),
                     kind=_require(data, "kind", "token '%s'" % name),
                     spelling=data.get("spelling", ""))
    token.location = _location(data, filename)
    return token

def _load_node(data, filename):
    name = _require(data, "name", "a node definition")
    node = NodeDef(name, _bases(data.get("bases", [])))
    node.location = _location(data, filename)
    for field_data in data.get("fields", []):
        field = _load_field(field_data, name, filename)
        field.parent = node
        node.fields.append(field)
    return node

def _load_targets(data):
    targets = []
    for name, options in data.items():
        target = Target(name)
        for opt_name, opt_value in options.items():
            opt = Option(opt_name, _literal(opt_value))
            opt.parent = target
            target.options.append(opt)
        targets.append(target)
    return targets

def _load_classes(data):
    classes = []
    declared = set()
    for name, bases in data.items():
        classes.append(SyntaxClass(name, _bases(bases)))
        declared.add(name)
    builtins = [SyntaxClass(name, _bases(bases))
                for name, bases in categories.BUILTIN_CLASSES
                if name not in declared]
    return builtins + classes

def find_types(schema, types):
    for definition in schema.classes + schema.tokens + schema.nodes:
        if definition.name in types:
            report.error("duplicate definition '%s'" % definition.name,
                         definition.location)
        types[definition.name] = definition

def resolve_bases(definition, types):
    resolved = []
    for base in definition.bases:
        if isinstance(base, UnresolvedType):
            if base.name not in types:
                report.error("unresolved base '%s' of '%s'" % (base.name, definition.name),
                             definition.location)
            base = types[base.name]
        resolved.append(base)
    definition.bases = resolved

def resolve_layouts(node, types):
    for field in node.fields:
        if not field.is_layout:
            continue
        target = field.value.node
        if isinstance(target, UnresolvedType):
            if target.name not in types:
                report.error("unresolved layout type '%s' " % target.name +
                             "for field '%s' of node '%s'" % (field.name, node.name),
                             field.location or node.location)
            field.value.node = types[target.name]

def resolve_types(schema):
    types = {}
    find_types(schema, types)
    for definition in schema.classes + schema.tokens + schema.nodes:
        resolve_bases(definition, types)
    for node in schema.nodes:
        resolve_layouts(node, types)
    return types

def from_dict(data, filename=None):
    if not isinstance(data, dict):
        report.error("schema document must be a JSON object")
    schema = SchemaFile(filename=filename)
    schema.classes = _load_classes(data.get("classes", {}))
    schema.tokens = [_load_token(t, filename) for t in data.get("tokens", [])]
    schema.nodes = [_load_node(n, filename) for n in data.get("nodes", [])]
    schema.targets = _load_targets(data.get("targets", {}))
    for item in schema.classes + schema.tokens + schema.nodes + schema.targets:
        item.parent = schema
    schema.types = resolve_types(schema)
    return schema

def load(file, filename):
    try:
        if file is not None:
            data = json.load(file)
        else:
            with open(filename, 'r') as f:
                data = json.load(f)
    except ValueError as e:
        report.error("could not decode schema document '%s': %s" % (filename, e))
    return from_dict(data, filename)
