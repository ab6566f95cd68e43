from . import categories
from . import report
from . import slots

# Supported codegen targets, update when adding new targets
from . import cplusplus
from . import python
targets = {
    "CPlusPlus": cplusplus.CPlusPlusTarget,
    "Python": python.PythonTarget,
}

ACTIONS = ("interface", "implementation")

def target_for_language(language):
    for target in targets.values():
        if target.language == language:
            return target
    return None

def languages():
    return sorted(target.language for target in targets.values())

def write_if_different(fn, content):
    """
    Write content to fn unless the file already holds exactly that, so
    build systems don't see a new timestamp when nothing changed.
    Returns True if the file was written.
    """
    existing_content = None
    try:
        with open(fn, 'r') as file:
            existing_content = file.read()
    except (IOError, OSError):
        pass
    if existing_content == content:
        return False
    with open(fn, 'w') as file:
        file.write(content)
    return True

def check_request(category, action, language):
    ' Report configuration errors before anything is generated. '
    if not action:
        report.error("action required (one of: %s)" % ', '.join(ACTIONS))
    if action not in ACTIONS:
        report.error("unknown action '%s' (expected one of: %s)" % (action, ', '.join(ACTIONS)))
    if not categories.is_known_category(category):
        report.error("%s is an unknown category (expected one of: %s)" % (
            category, ', '.join(categories.TREE_CATEGORIES + categories.RESERVED_CATEGORIES)))
    target_class = target_for_language(language)
    if target_class is None:
        report.error("unknown target language '%s' (expected one of: %s)" % (
            language, ', '.join(languages())))
    return target_class

def codegen(schema, category, action, language="c++", overrides=None, out_filename=None):
    """
    Generate the `action` document ("interface" or "implementation") for
    every node of `category` in `schema`, in the given target language.
    Returns the generated text; nothing is written anywhere.
    """
    target_class = check_request(category, action, language)
    registry = categories.CategoryRegistry(schema)
    resolver = slots.ChildSlotResolver(registry)
    target = target_class(schema, registry, resolver, overrides)
    return target.codegen(category, action, out_filename)
