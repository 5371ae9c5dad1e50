"""Tests for the reclass command-line entry point."""

from __future__ import annotations

import json

from reclass.cli import main

FACTORY_SOURCE = """\
var Foo = (function () {
  function Foo() {}
  Foo.make = function () {
    return new Foo();
  };
  return Foo;
})();
"""


class TestCli:
    def test_rewrites_file(self, tmp_path, capsys):
        path = tmp_path / "factory.js"
        path.write_text(FACTORY_SOURCE)
        assert main([str(path)]) == 0
        out = capsys.readouterr().out
        assert out.startswith("class Foo {")
        assert "static make()" in out

    def test_ast_flag(self, tmp_path, capsys):
        path = tmp_path / "factory.js"
        path.write_text("var x = 1;")
        assert main([str(path), "--ast"]) == 0
        assert json.loads(capsys.readouterr().out)["type"] == "Program"

    def test_indent_flag(self, tmp_path, capsys):
        path = tmp_path / "factory.js"
        path.write_text(FACTORY_SOURCE)
        main([str(path), "--indent", "4"])
        assert "\n    constructor() {}" in capsys.readouterr().out

    def test_demo(self, capsys):
        assert main(["--demo"]) == 0
        assert "class Foo {" in capsys.readouterr().out

    def test_syntax_error_exit_code(self, tmp_path, capsys):
        path = tmp_path / "broken.js"
        path.write_text("var = ;")
        assert main([str(path)]) == 1
        assert capsys.readouterr().err.startswith("error:")

    def test_stdin(self, monkeypatch, capsys):
        import io

        monkeypatch.setattr("sys.stdin", io.StringIO("var x = 1;"))
        assert main([]) == 0
        assert capsys.readouterr().out.strip() == "var x = 1;"
