"""Tests for the constructor reconstructor: super-call idioms to super()."""

from __future__ import annotations

import logging

from reclass.api import parse_program
from reclass.constructor import (
    is_regular_super_call,
    is_spread_super_call,
    reconstruct_constructor,
    rename_to_this,
)
from reclass.estree import FunctionExpression, Identifier, RestElement
from reclass.printer import print_node
from reclass.walk import DEFAULT_BASE

SUPER = Identifier(name="_Foo")

REGULAR = """\
var f = function (a, b) {
  var _this;
  _this = _Foo.call(this, a, b) || this;
  _this.sum = a + b;
  return _this;
};
"""

SPREAD = """\
var f = function () {
  var _this;
  for (var _len = arguments.length, args = new Array(_len), _key = 0; _key < _len; _key++) {
    args[_key] = arguments[_key];
  }
  _this = _Foo.call.apply(_Foo, [this].concat(args)) || this;
  _this.ready = true;
  return _this;
};
"""


def _function(source: str) -> FunctionExpression:
    return parse_program(source).body[0].declarations[0].init


class TestSuperCallDetection:
    def test_regular_shape(self):
        assert is_regular_super_call(_function(REGULAR), SUPER)
        assert not is_spread_super_call(_function(REGULAR), SUPER)

    def test_spread_shape(self):
        assert is_spread_super_call(_function(SPREAD), SUPER)
        assert not is_regular_super_call(_function(SPREAD), SUPER)

    def test_requires_superclass(self):
        assert not is_regular_super_call(_function(REGULAR), None)
        assert not is_spread_super_call(_function(SPREAD), None)

    def test_spread_requires_no_parameters(self):
        source = SPREAD.replace("function ()", "function (x)")
        assert not is_spread_super_call(_function(source), SUPER)

    def test_requires_return_of_temporary(self):
        source = REGULAR.replace("return _this;", "return other;")
        assert not is_regular_super_call(_function(source), SUPER)

    def test_requires_fallback_to_this(self):
        source = REGULAR.replace("|| this", "|| null")
        assert not is_regular_super_call(_function(source), SUPER)

    def test_regular_requires_member_callee(self):
        source = REGULAR.replace("_Foo.call(this, a, b)", "_Foo(this, a, b)")
        assert not is_regular_super_call(_function(source), SUPER)


class TestReconstructConstructor:
    def test_regular_super_call(self):
        result = reconstruct_constructor(_function(REGULAR), SUPER, DEFAULT_BASE)
        assert print_node(result) == (
            "function(a, b) {\n"
            "  super(a, b);\n"
            "  this.sum = a + b;\n"
            "}"
        )

    def test_spread_super_call(self):
        result = reconstruct_constructor(_function(SPREAD), SUPER, DEFAULT_BASE)
        assert print_node(result) == (
            "function(...args) {\n"
            "  super(...args);\n"
            "  this.ready = true;\n"
            "}"
        )
        assert isinstance(result.params[0], RestElement)

    def test_without_superclass_only_dealiases(self):
        source = "var f = function (x) { var self = this; self.x = x; };"
        result = reconstruct_constructor(_function(source), None, DEFAULT_BASE)
        assert print_node(result) == "function(x) {\n  this.x = x;\n}"

    def test_empty_body_is_unchanged(self):
        function = _function("var f = function () {};")
        assert reconstruct_constructor(function, SUPER, DEFAULT_BASE) is function

    def test_temporary_inside_closure_is_renamed(self):
        source = """\
var f = function () {
  var _this;
  _this = _Foo.call(this) || this;
  _this.cb = function () {
    return _this.value;
  };
  return _this;
};
"""
        result = reconstruct_constructor(_function(source), SUPER, DEFAULT_BASE)
        assert "_this" not in print_node(result)

    def test_redeclared_temporary_in_closure_is_kept(self):
        source = """\
var f = function () {
  var _this;
  _this = _Foo.call(this) || this;
  _this.cb = function () {
    var _this = 1;
    return _this;
  };
  return _this;
};
"""
        result = reconstruct_constructor(_function(source), SUPER, DEFAULT_BASE)
        assert print_node(result) == (
            "function() {\n"
            "  super();\n"
            "  this.cb = function() {\n"
            "    var _this = 1;\n"
            "    return _this;\n"
            "  };\n"
            "}"
        )


class TestRenameToThis:
    def test_renames_every_reference(self):
        function = _function("var f = function () { use(tmp); tmp.a = tmp.b; };")
        result = rename_to_this(function, "tmp", DEFAULT_BASE)
        assert print_node(result) == "function() {\n  use(this);\n  this.a = this.b;\n}"

    def test_property_names_are_not_references(self):
        function = _function("var f = function () { a.tmp = 1; };")
        result = rename_to_this(function, "tmp", DEFAULT_BASE)
        assert print_node(result) == "function() {\n  a.tmp = 1;\n}"


class TestRenameEdgeCases:
    def test_shorthand_property_is_expanded(self):
        source = """\
var f = function (a) {
  var _this;
  _this = _Foo.call(this, a) || this;
  register({ _this });
  return _this;
};
"""
        result = reconstruct_constructor(_function(source), SUPER, DEFAULT_BASE)
        assert print_node(result) == (
            "function(a) {\n"
            "  super(a);\n"
            "  register({ _this: this });\n"
            "}"
        )

    def test_template_reference_is_logged(self, caplog):
        function = _function("var f = function () { log(`${tmp}`); };")
        with caplog.at_level(logging.DEBUG, logger="reclass.constructor"):
            rename_to_this(function, "tmp", DEFAULT_BASE)
        assert "tmp survives inside verbatim source" in caplog.text

    def test_unrelated_template_is_not_logged(self, caplog):
        function = _function("var f = function () { log(`${tmpValue}`); };")
        with caplog.at_level(logging.DEBUG, logger="reclass.constructor"):
            rename_to_this(function, "tmp", DEFAULT_BASE)
        assert "survives" not in caplog.text
