"""Tests for build_parsing_context: extracting a factory's named parts."""

from __future__ import annotations

import logging

from reclass.api import parse_program
from reclass.classifier import ShapeKind, find_class_type
from reclass.context import ParsingContext, build_parsing_context
from reclass.estree import FunctionDeclaration
from reclass.printer import print_node

INHERITING_FACTORY = """\
var Bar = (function (_Foo) {
  _inheritsLoose(Bar, _Foo);
  function Bar() {}
  var _proto = Bar.prototype;
  _proto.a = function () {};
  return Bar;
})(Foo.Base);
"""


def _context(source: str, index: int = 0) -> ParsingContext | None:
    declaration = parse_program(source).body[0]
    node = declaration.declarations[index]
    return build_parsing_context(node, declaration, find_class_type(node, declaration))


class TestPlainFactoryContext:
    def test_name_and_constructor(self):
        context = _context("var Foo = (function () { function Foo(x) {} return Foo; })();")
        assert context.name == "Foo"
        assert context.kind is ShapeKind.DIRECT_FACTORY
        assert context.constructor_index == 0
        assert isinstance(context.constructor, FunctionDeclaration)
        assert context.constructor_name == "Foo"

    def test_no_superclass_or_alias(self):
        context = _context("var Foo = (function () { function Foo() {} return Foo; })();")
        assert context.super_class is None
        assert context.prototype_alias is None

    def test_declaration_is_private_copy(self):
        declaration = parse_program(
            "var Foo = (function () { function Foo() {} return Foo; })();"
        ).body[0]
        node = declaration.declarations[0]
        context = build_parsing_context(node, declaration, ShapeKind.DIRECT_FACTORY)
        assert context.declaration is not declaration
        assert context.declaration == declaration


class TestInheritingFactoryContext:
    def test_superclass_from_outer_argument(self):
        context = _context(INHERITING_FACTORY)
        assert print_node(context.super_class) == "Foo.Base"

    def test_constructor_follows_helper(self):
        context = _context(INHERITING_FACTORY)
        assert context.constructor_index == 1
        assert context.constructor_name == "Bar"

    def test_prototype_alias(self):
        assert _context(INHERITING_FACTORY).prototype_alias == "_proto"

    def test_helper_naming_other_function_is_not_inheritance(self):
        source = """\
var Bar = (function (_Foo) {
  _inheritsLoose(Baz, _Foo);
  function Bar() {}
  return Bar;
})(Foo);
"""
        assert _context(source).super_class is None

    def test_helper_with_wrong_arity_is_not_inheritance(self):
        source = """\
var Bar = (function (_Foo) {
  _inheritsLoose(Bar);
  function Bar() {}
  return Bar;
})(Foo);
"""
        assert _context(source).super_class is None

    def test_alias_of_other_prototype_is_ignored(self):
        source = """\
var Bar = (function () {
  function Bar() {}
  var _proto = Baz.prototype;
  return Bar;
})();
"""
        assert _context(source).prototype_alias is None


class TestWrappedFactoryContext:
    def test_reads_through_new(self):
        source = """\
var a = 1, store = new ((function (_Base) {
  _inheritsLoose(Store, _Base);
  function Store() {}
  return Store;
})(Base))();
"""
        context = _context(source, index=1)
        assert context.kind is ShapeKind.WRAPPED_FACTORY
        assert context.name == "store"
        assert context.constructor_name == "Store"
        assert context.declarator_index == 1
        assert print_node(context.super_class) == "Base"


class TestContextFailures:
    def test_empty_factory(self):
        assert _context("var Foo = (function () {})();") is None

    def test_no_function_declaration(self):
        assert _context("var Foo = (function () { var a = 1; return a; })();") is None

    def test_destructuring_target(self):
        source = "var { a } = (function () { function A() {} return A; })();"
        assert _context(source) is None

    def test_direct_factory_with_siblings(self):
        source = "var Foo = (function () { function Foo() {} return Foo; })(), b = 2;"
        assert _context(source) is None

    def test_failure_is_logged_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="reclass.context"):
            assert _context("var Foo = (function () {})();") is None
        assert "No class layout" in caplog.text

    def test_node_outside_parent(self):
        first = parse_program("var Foo = (function () { function Foo() {} })();").body[0]
        second = parse_program("var Bar = (function () { function Bar() {} })();").body[0]
        context = build_parsing_context(
            second.declarations[0], first, ShapeKind.DIRECT_FACTORY
        )
        assert context is None
