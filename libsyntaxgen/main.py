"""
Command line driver: syntaxgen --action ACTION --category CATEGORY SCHEMA
"""

import argparse
import sys
from . import categories
from . import codegen
from . import debug
from . import report
from . import schema

def build_argument_parser():
    parser = argparse.ArgumentParser(
        prog="syntaxgen",
        description="Generate syntax node handle and wrapper types from a schema document.")
    parser.add_argument("schema", metavar="SCHEMA",
                        help="schema document (JSON) produced by the schema front end, "
                             "or '-' for stdin")
    parser.add_argument("-a", "--action", choices=codegen.ACTIONS, default=None,
                        help="generate the interface (declarations) or the "
                             "implementation (definitions)")
    parser.add_argument("-c", "--category", default=None,
                        help="category to emit: %s" % ', '.join(
                            categories.TREE_CATEGORIES + categories.RESERVED_CATEGORIES))
    parser.add_argument("-l", "--language", default="c++", choices=codegen.languages(),
                        help="target language to emit (default: %(default)s)")
    parser.add_argument("-o", "--output", default=None,
                        help="output file, only rewritten when its contents change "
                             "(default: stdout)")
    parser.add_argument("-D", "--define", action="append", default=[], metavar="NAME=VALUE",
                        help="override a target option")
    parser.add_argument("--dump-schema", action="store_true",
                        help="print the loaded schema and exit")
    parser.add_argument("--no-color", action="store_true",
                        help="don't colorize diagnostics")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="report progress notes")
    return parser

def parse_defines(defines):
    overrides = {}
    for define in defines:
        name, sep, value = define.partition('=')
        if not sep or not name:
            report.error("malformed option override '%s', expected NAME=VALUE" % define)
        overrides[name.strip()] = value
    return overrides

def load_schema(path):
    if path == '-':
        return schema.load(sys.stdin, '<stdin>')
    try:
        with open(path, 'r') as file:
            return schema.load(file, path)
    except (IOError, OSError) as e:
        report.error("cannot read schema '%s': %s" % (path, e.strerror or e))

def usage_error(parser, message):
    report.error(message, fatal=False)
    parser.print_help(report.error_stream)
    return 1

def main(argv=None):
    parser = build_argument_parser()
    args = parser.parse_args(argv)
    report.set_error_stream(sys.stderr, use_colors=not args.no_color)

    if not args.dump_schema:
        if args.action is None:
            return usage_error(parser, "action required")
        if not args.category or not categories.is_known_category(args.category):
            return usage_error(parser, "%s is an unknown category!" % args.category)

    overrides = parse_defines(args.define)
    model = load_schema(args.schema)

    if args.dump_schema:
        debug.DebugTree(sys.stdout).dump(model)
        return 0

    code = codegen.codegen(model, args.category, args.action, args.language,
                           overrides=overrides, out_filename=args.output)
    if args.verbose:
        report.note("generated %s %s for category '%s'" % (
            args.language, args.action, args.category))

    if args.output is None:
        sys.stdout.write(code)
    elif codegen.write_if_different(args.output, code):
        if args.verbose:
            report.note("wrote '%s'" % args.output)
    elif args.verbose:
        report.note("'%s' is up to date" % args.output)
    return 0

if __name__ == "__main__":
    sys.exit(main())
