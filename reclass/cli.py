"""Command-line entry point."""

from __future__ import annotations

import argparse
import logging
import sys

from .api import dump_ast, rewrite_declaration
from .parser import JsSyntaxError
from .printer import PrinterConfig

DEMO_SOURCE = """\
var Foo = (function () {
  function Foo(x) {
    this.x = x;
  }
  Foo.prototype.get = function () {
    return this.x;
  };
  return Foo;
})();
"""


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Restore class syntax from a compiled class factory declaration"
    )
    parser.add_argument(
        "file", nargs="?", help="File holding one declaration (default: stdin)"
    )
    parser.add_argument(
        "--ast", action="store_true", help="Print the parsed node model as JSON"
    )
    parser.add_argument(
        "--indent", type=int, default=2, help="Spaces per indent level (default: 2)"
    )
    parser.add_argument(
        "--demo", action="store_true", help="Rewrite a built-in example"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log rewrite decisions"
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.demo:
        source = DEMO_SOURCE
        print("Rewriting built-in demo:\n")
        print(source)
    elif args.file:
        with open(args.file) as f:
            source = f.read()
    else:
        source = sys.stdin.read()

    try:
        if args.ast:
            print(dump_ast(source))
        else:
            print(rewrite_declaration(source, PrinterConfig(indent=" " * args.indent)))
    except (JsSyntaxError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
