"""Tests for find_class_type: recognizing compiled class factory shapes."""

from __future__ import annotations

from reclass.api import parse_program
from reclass.classifier import ShapeKind, find_class_type


def _classify(source: str, index: int = 0) -> ShapeKind | None:
    declaration = parse_program(source).body[0]
    return find_class_type(declaration.declarations[index], declaration)


class TestDirectFactory:
    def test_parenthesized_factory_call(self):
        assert _classify("var Foo = (function () {})();") is ShapeKind.DIRECT_FACTORY

    def test_call_inside_parens(self):
        assert _classify("var Foo = (function () {}());") is ShapeKind.DIRECT_FACTORY

    def test_unparenthesized_factory_call(self):
        assert _classify("var Foo = function () {}();") is ShapeKind.DIRECT_FACTORY


class TestWrappedFactory:
    def test_new_on_parenthesized_factory(self):
        source = "var foo = new ((function () {})())();"
        assert _classify(source) is ShapeKind.WRAPPED_FACTORY

    def test_second_declarator(self):
        source = "var a = 1, foo = new ((function () {})(Base))();"
        assert _classify(source, index=1) is ShapeKind.WRAPPED_FACTORY


class TestNoMatch:
    def test_literal_initializer(self):
        assert _classify("var x = 1;") is None

    def test_missing_initializer(self):
        assert _classify("var x;") is None

    def test_call_of_identifier(self):
        assert _classify("var x = make();") is None

    def test_new_of_identifier(self):
        assert _classify("var x = new Foo();") is None

    def test_arrow_factory(self):
        assert _classify("var x = (() => {})();") is None

    def test_parent_must_be_declaration(self):
        program = parse_program("var Foo = (function () {})();")
        declarator = program.body[0].declarations[0]
        assert find_class_type(declarator, program) is None

    def test_node_must_be_declarator(self):
        declaration = parse_program("var Foo = (function () {})();").body[0]
        assert find_class_type(declaration, declaration) is None

    def test_none_inputs(self):
        assert find_class_type(None, None) is None
