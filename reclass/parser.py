"""Tree-sitter parsing layer for JavaScript snippets."""

from __future__ import annotations

from abc import ABC, abstractmethod

from . import constants


class JsSyntaxError(Exception):
    """Raised when tree-sitter reports errors in the parsed source."""

    def __init__(self, language: str, line: int, column: int):
        super().__init__(
            f"Source does not parse as {language} (line {line}, column {column})"
        )
        self.line = line
        self.column = column


class ParserFactory(ABC):
    @abstractmethod
    def get_parser(self, language: str): ...


class TreeSitterParserFactory(ParserFactory):
    """Looks up grammars in tree-sitter-language-pack."""

    def get_parser(self, language: str):
        import tree_sitter_language_pack as tslp

        return tslp.get_parser(language)


def first_error_point(node) -> tuple[int, int] | None:
    """1-based (line, column) of the first ERROR or missing node under *node*."""
    if node.type == "ERROR" or node.is_missing:
        row, column = node.start_point
        return row + 1, column + 1
    for child in node.children:
        if child.has_error or child.is_missing:
            point = first_error_point(child)
            if point is not None:
                return point
    return None


class Parser:
    """Parses source for one language, reusing the underlying tree-sitter parser."""

    def __init__(self, parser_factory: ParserFactory, language: str = constants.LANGUAGE):
        self._factory = parser_factory
        self._language = language
        self._parser = None

    def parse(self, source: str):
        if self._parser is None:
            self._parser = self._factory.get_parser(self._language)
        tree = self._parser.parse(source.encode("utf-8"))
        root = tree.root_node
        if root.has_error:
            line, column = first_error_point(root) or (1, 1)
            raise JsSyntaxError(self._language, line, column)
        return tree
