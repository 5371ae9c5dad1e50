"""Restore ES2015 class syntax from compiled class factories."""

from .rewriter import rewrite  # noqa: F401
from .walk import DEFAULT_BASE  # noqa: F401
from .printer import print_node  # noqa: F401
from .api import (  # noqa: F401
    parse_program,
    dump_ast,
    rewrite_declaration,
)
