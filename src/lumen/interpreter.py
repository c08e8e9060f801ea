## lumen — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import sys
from typing import TextIO

from .types import (Primitive, Operator, COMPOUND_ASSIGNMENT, type_name,
                    Expr, Identifier, Number, String, PrefixExpr, InfixExpr, PostfixExpr, TypeofExpr,
                    Statement, ExprStatement, PrintStatement, ReturnStatement, Block, IfStatement)
from .errors import LumenError, LumenTypeError, LumenAssignmentError, LumenUnsupportedFeature, LumenExit
from .operators import BINARY_OPERATORS, UNARY_OPERATORS, op_typeof, to_exit_status
from .formatting import format_value, show_statement_and_environment
from .environment import Environment


class Interpreter:
    """Tree-walking evaluator; all statements share one global environment."""

    def __init__(self, environment: Environment | None = None, output: TextIO | None = None,
                 verbosity: int = 0, stats: dict | None = None):
        self.environment = Environment() if environment is None else environment
        self.output = output
        self.verbosity = verbosity
        self.stats = stats
        self.depth = 0
        self.steps = 0

    def run(self, statements: list[Statement] | tuple[Statement, ...]) -> Primitive | None:
        """Execute statements in order, returning the value of the last expression statement."""
        last = None
        for statement in statements:
            if self.verbosity == 2 or (self.verbosity == 1 and self.depth == 0):
                print(f"\033[90m{self.steps:>3} :\033[0m  ", end='', file=sys.stderr)
                show_statement_and_environment(statement, self.environment, file=sys.stderr)
            self.steps += 1
            if self.stats is not None:
                self.stats['steps'] = self.stats.get('steps', 0) + 1

            try:
                result = self.execute(statement)
            except LumenError as exc:
                if exc.lumen_meta is None: exc.lumen_meta = statement.meta
                raise
            if isinstance(statement, ExprStatement):
                last = result
        return last

    def execute(self, statement: Statement) -> Primitive | None:
        match statement:
            case ExprStatement(expr):
                return self.eval(expr)
            case PrintStatement(expr):
                print(format_value(self.eval(expr)), file=self.output or sys.stdout)
            case ReturnStatement(expr):
                value = self.eval(expr)
                raise LumenExit(to_exit_status(value), value)
            case Block(statements):
                self.depth += 1
                try:
                    self.run(statements)
                finally:
                    self.depth -= 1
            case IfStatement(condition, block, else_block):
                value = self.eval(condition)
                if type(value) is not bool:
                    raise LumenTypeError(f"`if` condition must be a boolean, got {type_name(value)}.",
                                         lumen_node=condition, lumen_token='if', lumen_meta=condition.meta)
                if value: self.execute(block)
                elif else_block is not None: self.execute(else_block)
            case _:
                raise LumenUnsupportedFeature(f"Statement `{type(statement).__name__}` cannot be executed.",
                                              lumen_node=statement, lumen_meta=statement.meta)
        return None

    def eval(self, expr: Expr) -> Primitive:
        try:
            return self._eval(expr)
        except LumenError as exc:
            if exc.lumen_node is None:
                exc.lumen_node, exc.lumen_meta = expr, expr.meta
            raise

    def _eval(self, expr: Expr) -> Primitive:
        match expr:
            case Identifier(name):
                # Names that were never assigned read as zero.
                value = self.environment.lookup(name)
                return 0.0 if value is None else value
            case Number(value):
                return value
            case String(text):
                return text
            case PrefixExpr(operator, right):
                value = self.eval(right)
                if (fn := UNARY_OPERATORS.get(operator)) is None:
                    raise LumenTypeError(f"`{operator}` is not a prefix operator.", lumen_token=str(operator))
                return fn(value)
            case TypeofExpr(right):
                return op_typeof(self.eval(right))
            case InfixExpr(left, operator, right) if operator.is_assignment:
                return self.assign(left, operator, right)
            case InfixExpr(left, operator, right):
                lhs, rhs = self.eval(left), self.eval(right)
                if (fn := BINARY_OPERATORS.get(operator)) is None:
                    raise LumenTypeError(f"`{operator}` is not a binary operator.", lumen_token=str(operator))
                return fn(lhs, rhs)
            case PostfixExpr(_, operator):
                raise LumenUnsupportedFeature(f"Postfix operator `{operator}` is not supported.",
                                              lumen_token=str(operator))
        raise LumenUnsupportedFeature(f"Expression `{type(expr).__name__}` cannot be evaluated.")

    def assign(self, target: Expr, operator: Operator, right: Expr) -> Primitive:
        if not isinstance(target, Identifier):
            raise LumenAssignmentError(f"Invalid left-hand side for `{operator}`, expected an identifier.",
                                       lumen_node=target, lumen_token=str(operator), lumen_meta=target.meta)
        if operator is Operator.ASSIGN:
            value = self.eval(right)
        else:
            current, rhs = self.eval(target), self.eval(right)
            value = BINARY_OPERATORS[COMPOUND_ASSIGNMENT[operator]](current, rhs)
        return self.environment.assign(target.name, value)
