"""Public rewrite entry point: one compiled-class declarator → class syntax."""

from __future__ import annotations

import logging

from .assembler import assemble
from .classifier import find_class_type
from .context import build_parsing_context
from .estree import Node
from .walk import WalkBase

logger = logging.getLogger(__name__)


def rewrite(node: Node | None, parent: Node | None, base: WalkBase | None) -> Node | None:
    """Rewrite the declarator *node* of declaration *parent* into a class.

    Returns a new node to substitute for *parent*: a class declaration for a
    directly invoked factory, or a copy of *parent* whose declarator now does
    ``new (class … {})()`` for a factory invoked through ``new``.  When the
    candidate is not a recognized shape, *parent* itself is returned
    unchanged.  The caller's nodes are never modified.

    *base* is the walk configuration used for every sub-tree traversal.
    """
    if node is None or parent is None or base is None:
        return parent

    kind = find_class_type(node, parent)
    if kind is None:
        return parent

    context = build_parsing_context(node, parent, kind)
    if context is None:
        return parent

    logger.debug("Restoring class %s from %s", context.name, kind.value)
    try:
        return assemble(context, base)
    except (AttributeError, IndexError, KeyError, TypeError, ValueError) as exc:
        logger.warning("Failed to assemble class %s: %s", context.name, exc)
        return parent
