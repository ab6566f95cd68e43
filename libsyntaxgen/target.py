from collections import namedtuple
from . import nodes
from . import report

OptionInfoT = namedtuple('OptionInfo', "type default required")
def OptionInfo(type, default, required=False):
    return OptionInfoT(type, default, required)

class CodegenTarget(object):
    """
    Base class for codegen targets (ex. CPlusPlusTarget).

    Subclasses declare a `name` (as used in the schema's "targets" section),
    a `language` (as used on the command line) and an `options` table.
    Option values end up as literal nodes in `self.opts`, defaults filled in.
    """

    def __init__(self, schema, registry, resolver, overrides=None):

        if not hasattr(self.__class__, "name"):
            raise ValueError("The codegen target class does not contain a 'name' variable")
        if not hasattr(self.__class__, "options"):
            raise ValueError("The codegen target %s class does " % self.name +
                             "not contain an 'options' variable")

        self.schema = schema
        self.registry = registry
        self.resolver = resolver
        opts = []
        have_target = False
        for target in schema.targets:
            if target.name == self.name:
                if have_target:
                    report.error("schema '%s' contains multiple " % schema.filename +
                                 "'%s' targets, only one is allowed" % self.name)
                opts.extend(target.options)
                have_target = True

        self._dupe_check_options(opts)
        self.opts = dict((o.name, o.value) for o in opts)
        for name, text in (overrides or {}).items():
            self.opts[name] = self._coerce_override(name, text)
        self._validate_opts()

    def _dupe_check_options(self, options):
        optset = set()
        for opt in options:
            if opt.name in optset:
                report.error("duplicate option '%s' in codegen target " % opt.name +
                             "'%s'" % self.name, opt.location)
            optset.add(opt.name)

    def _coerce_override(self, name, text):
        info = self.options.get(name)
        if info is None:
            report.error("unexpected option '%s' in target '%s'" % (name, self.name))
        if info.type is nodes.BoolLiteral:
            if text.lower() not in ("true", "false", "1", "0", "yes", "no"):
                report.error("option '%s' of codegen target '%s' " % (name, self.name) +
                             "expects a boolean, got '%s'" % text)
            return nodes.BoolLiteral(text.lower() in ("true", "1", "yes"))
        elif info.type is nodes.IntLiteral:
            try:
                return nodes.IntLiteral(int(text, 0))
            except ValueError:
                report.error("option '%s' of codegen target '%s' " % (name, self.name) +
                             "expects an integer, got '%s'" % text)
        elif info.type is nodes.ListLiteral:
            items = [t.strip() for t in text.split(',') if t.strip()]
            return nodes.ListLiteral([nodes.StringLiteral(t) for t in items])
        return nodes.StringLiteral(text)

    def _validate_opts(self):
        # First validate the existence and types of the options supplied
        for name, value in self.opts.items():
            if not name in self.options:
                report.error("unexpected option '%s' in target '%s'" % (name, self.name),
                             self.opts[name].location)
            elif not isinstance(value, self.options[name].type):
                report.error("wrong data type for option '%s' of codegen " % name +
                             "target '%s', expected a '%s' but a '%s' was used" % (
                                self.name,
                                self.options[name].type.__name__,
                                value.__class__.__name__),
                             self.opts[name].location)
        # Then fill in the default values for those not specified
        for name, info in self.options.items():
            if name not in self.opts:
                if info.required:
                    report.error("required option '%s' was " % name +
                                "missing for codegen target '%s'" % self.name)
                default = info.default
                if isinstance(default, list): # copy to prevent using same list over and over
                    default = list(default)
                self.opts[name] = info.type(default)

    def get_opt(self, name, default=None):
        return self.opts.get(name, default)

    def opt_value(self, name):
        opt = self.opts.get(name)
        return opt.value if opt is not None else None

    def tree_nodes(self, category):
        ' Node definitions to generate for `category`, minus its Any<category> umbrella. '
        umbrella = "Any" + category
        node_list = [node for node in self.registry.nodes_in(category)
                     if node.name != umbrella]
        if not node_list:
            report.warning("schema '%s' defines no '%s' nodes" % (self.schema.filename, category))
        return node_list

    def codegen(self, category, action, out_filename=None):
        raise NotImplementedError
