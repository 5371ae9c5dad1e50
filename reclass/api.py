"""Composable API functions for parsing, rewriting and printing snippets.

Each function corresponds to a CLI mode but is callable programmatically
without argparse.
"""

from __future__ import annotations

import logging

from .estree import Program, VariableDeclaration
from .frontend import JavaScriptFrontend
from .parser import Parser, TreeSitterParserFactory
from .printer import PrinterConfig, print_node
from .rewriter import rewrite
from .walk import DEFAULT_BASE
from . import constants

logger = logging.getLogger(__name__)


def parse_program(source: str) -> Program:
    """Parse JavaScript source into the ESTree node model.

    Raises:
        JsSyntaxError: If tree-sitter reports a syntax error.
    """
    tree = Parser(TreeSitterParserFactory(), constants.LANGUAGE).parse(source)
    return JavaScriptFrontend().lower(tree, source.encode("utf-8"))


def dump_ast(source: str) -> str:
    """Parse source and return the node model as indented JSON."""
    return parse_program(source).model_dump_json(indent=2, serialize_as_any=True)


def rewrite_declaration(source: str, config: PrinterConfig = PrinterConfig()) -> str:
    """Restore class syntax for a snippet holding one compiled-class declaration.

    The snippet must consist of exactly one variable declaration; its first
    declarator is the rewrite candidate.  A snippet that is not a recognized
    shape is printed back unchanged.

    Args:
        source: JavaScript source of a single ``var`` statement.
        config: Printer settings for the output.

    Returns:
        The rewritten statement as JavaScript source.

    Raises:
        ValueError: If the snippet is not a single variable declaration.
    """
    program = parse_program(source)
    if len(program.body) != 1 or not isinstance(program.body[0], VariableDeclaration):
        raise ValueError("Expected a single variable declaration statement")
    declaration = program.body[0]
    if not declaration.declarations:
        raise ValueError("Declaration has no declarators")

    result = rewrite(declaration.declarations[0], declaration, DEFAULT_BASE)
    if result is declaration:
        logger.info("No compiled class shape found; leaving snippet unchanged")
    else:
        logger.info("Restored class syntax (%s)", result.type.value)
    return print_node(result, config)
