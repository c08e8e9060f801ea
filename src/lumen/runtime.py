## lumen — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, TextIO

from .types import Primitive, Statement, Expr, ExprStatement
from .errors import LumenParseError, LumenRecursionError
from .parser import parse as _parse
from .lexer import tokenize as _tokenize
from .interpreter import Interpreter
from .environment import Environment, make_environment


class Runtime:
    """Minimal runtime facade focused on embedding: parse, execute, inspect bindings."""

    def __init__(self, bindings: dict[str, Any] | None = None, output: TextIO | None = None):
        self.environment: Environment = make_environment(bindings)
        self.output = output

    # Assembly ────────────────────────────────────────────────────────────────────────────────
    def tokenize(self, source: str) -> list:
        return _tokenize(source)

    def parse(self, source: str, filename: str | None = None) -> list[Statement]:
        return _parse(source, filename=filename)

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def run(self, program: str, filename: str | None = None, verbosity: int = 0,
            stats: dict | None = None) -> Primitive | None:
        """Parse and execute source text, returning the value of its last expression statement."""
        return self.execute(self.parse(program, filename=filename), verbosity=verbosity, stats=stats)

    def execute(self, statements: list[Statement], verbosity: int = 0, stats: dict | None = None) -> Primitive | None:
        interpreter = Interpreter(self.environment, output=self.output, verbosity=verbosity, stats=stats)
        return self._guarded(interpreter.run, statements)

    def evaluate(self, expr: Expr | str) -> Primitive:
        """Evaluate a single expression, given as a node or as source text."""
        if isinstance(expr, str):
            statements = self.parse(expr, filename='<EXPR>')
            if len(statements) != 1 or not isinstance(statements[0], ExprStatement):
                raise LumenParseError("Expected exactly one expression.", filename='<EXPR>', line=1, column=1,
                                      token=expr.strip(), expected="an expression")
            expr = statements[0].expr
        return self._guarded(Interpreter(self.environment, output=self.output).eval, expr)

    def _guarded(self, fn, arg):
        try:
            return fn(arg)
        except RecursionError:
            raise LumenRecursionError("Program is nested too deeply to evaluate.") from None

    # Bindings ────────────────────────────────────────────────────────────────────────────────
    def define(self, name: str, value: Any) -> None:
        for key, converted in make_environment({name: value}).items():
            self.environment.assign(key, converted)

    def lookup(self, name: str) -> Primitive | None:
        return self.environment.lookup(name)

    def bindings(self) -> dict[str, Primitive]:
        return dict(self.environment.items())
