"""Named constants — eliminates magic strings across the codebase."""

from __future__ import annotations

LANGUAGE = "javascript"

PROTOTYPE_PROPERTY = "prototype"
PROPS_PROPERTY = "props"
CONSTRUCTOR_PROPERTY = "constructor"

CONSTRUCTOR_METHOD_NAME = "constructor"
METHOD_KIND = "method"
CONSTRUCTOR_KIND = "constructor"

# Name of the rest parameter that replaces a copied ``arguments`` array
REST_PARAM_NAME = "args"

SUPER_FALLBACK_OPERATOR = "||"
INHERITANCE_HELPER_ARITY = 2

LOGICAL_OPERATORS: frozenset[str] = frozenset({"||", "&&", "??"})

PRINTER_INDENT = "  "
