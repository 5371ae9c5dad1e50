"""Tests for the body de-aliaser and nested function recurser."""

from __future__ import annotations

from reclass.api import parse_program
from reclass.dealias import (
    AliasMap,
    AliasTarget,
    alias_target,
    collect_aliases,
    dealias_function,
    dealias_recursively,
)
from reclass.estree import FunctionExpression, Identifier, ThisExpression
from reclass.printer import print_node
from reclass.walk import DEFAULT_BASE


def _function(source: str) -> FunctionExpression:
    """The function expression assigned by ``var f = function () {...};``."""
    return parse_program(source).body[0].declarations[0].init


def _printed(source: str) -> str:
    return print_node(_function(source))


class TestAliasMap:
    def test_first_alias_wins(self):
        aliases = AliasMap()
        assert aliases.record(AliasTarget.THIS, "self")
        assert not aliases.record(AliasTarget.THIS, "that")
        assert aliases.target_of("self") is AliasTarget.THIS
        assert aliases.target_of("that") is None

    def test_empty_map_is_falsy(self):
        assert not AliasMap()

    def test_alias_targets(self):
        body = _function(
            "var f = function () { var a = this, b = this.props, c = this.constructor, d = this.state; };"
        ).body.body
        inits = [d.init for d in body[0].declarations]
        assert [alias_target(init) for init in inits] == [
            AliasTarget.THIS,
            AliasTarget.PROPS,
            AliasTarget.CONSTRUCTOR,
            None,
        ]

    def test_collect_scans_top_level_only(self):
        body = _function(
            "var f = function () { if (x) { var inner = this; } var self = this; };"
        ).body.body
        assert collect_aliases(body).names == {AliasTarget.THIS: "self"}


class TestDealiasFunction:
    def test_this_alias(self):
        result = dealias_function(
            _function("var f = function () { var self = this; self.y = 1; };"),
            DEFAULT_BASE,
        )
        assert print_node(result) == _printed("var f = function () { this.y = 1; };")

    def test_props_alias(self):
        result = dealias_function(
            _function("var f = function () { var p = this.props; return p.z; };"),
            DEFAULT_BASE,
        )
        assert print_node(result) == _printed(
            "var f = function () { return this.props.z; };"
        )

    def test_constructor_alias_points_at_this(self):
        result = dealias_function(
            _function("var f = function () { var C = this.constructor; return C.name; };"),
            DEFAULT_BASE,
        )
        assert print_node(result) == _printed("var f = function () { return this.name; };")

    def test_literal_this_constructor_collapses(self):
        result = dealias_function(
            _function("var f = function () { return this.constructor.displayName; };"),
            DEFAULT_BASE,
        )
        assert print_node(result) == _printed(
            "var f = function () { return this.displayName; };"
        )

    def test_other_declarators_are_kept(self):
        result = dealias_function(
            _function("var f = function () { var self = this, n = 0; self.n = n; };"),
            DEFAULT_BASE,
        )
        assert print_node(result) == _printed(
            "var f = function () { var n = 0; this.n = n; };"
        )

    def test_second_alias_for_same_target_is_kept(self):
        result = dealias_function(
            _function("var f = function () { var a = this; var b = this; a.x = 1; b.y = 2; };"),
            DEFAULT_BASE,
        )
        assert print_node(result) == _printed(
            "var f = function () { var b = this; this.x = 1; b.y = 2; };"
        )

    def test_bare_alias_reference_is_left_alone(self):
        result = dealias_function(
            _function("var f = function () { var self = this; return self; };"),
            DEFAULT_BASE,
        )
        assert print_node(result) == _printed("var f = function () { return self; };")

    def test_computed_member_through_alias(self):
        result = dealias_function(
            _function("var f = function () { var self = this; return self[key]; };"),
            DEFAULT_BASE,
        )
        assert print_node(result) == _printed("var f = function () { return this[key]; };")

    def test_shadowing_parameter_is_respected(self):
        result = dealias_function(
            _function(
                "var f = function () { var self = this; self.a = 1;"
                " list.forEach(function (self) { self.b = 2; }); };"
            ),
            DEFAULT_BASE,
        )
        assert print_node(result) == _printed(
            "var f = function () { this.a = 1;"
            " list.forEach(function (self) { self.b = 2; }); };"
        )

    def test_function_without_aliases_is_unchanged(self):
        source = "var f = function () { return this.x + 1; };"
        assert print_node(dealias_function(_function(source), DEFAULT_BASE)) == _printed(
            source
        )


class TestDealiasRecursively:
    def test_nested_function_is_dealiased(self):
        result = dealias_recursively(
            _function(
                "var f = function () {"
                " return function () { var that = this; return that.v; }; };"
            ),
            DEFAULT_BASE,
        )
        assert print_node(result) == _printed(
            "var f = function () { return function () { return this.v; }; };"
        )

    def test_outer_alias_reaches_into_closures(self):
        result = dealias_recursively(
            _function(
                "var f = function () { var _this = this;"
                " setTimeout(function () { _this.done = true; }); };"
            ),
            DEFAULT_BASE,
        )
        assert print_node(result) == _printed(
            "var f = function () { setTimeout(function () { this.done = true; }); };"
        )

    def test_arrow_functions_are_walked(self):
        result = dealias_recursively(
            _function(
                "var f = function () { var self = this; return () => self.value; };"
            ),
            DEFAULT_BASE,
        )
        assert print_node(result) == _printed(
            "var f = function () { return () => this.value; };"
        )


class TestAliasHelpers:
    def test_identifier_is_not_an_alias_target(self):
        assert alias_target(Identifier(name="x")) is None

    def test_this_is_an_alias_target(self):
        assert alias_target(ThisExpression()) is AliasTarget.THIS
