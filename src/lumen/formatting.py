## lumen — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
import sys
import math
from decimal import Decimal

from .types import (Text, Identifier, Number, String, PrefixExpr, InfixExpr, PostfixExpr, TypeofExpr,
                    ExprStatement, PrintStatement, ReturnStatement, Block, IfStatement)


def format_number(n: float) -> str:
    """Shortest decimal form that reads back as the same float, never in exponent notation."""
    if math.isnan(n): return 'NaN'
    if math.isinf(n): return 'inf' if n > 0 else '-inf'
    if n == 0.0: return '-0' if math.copysign(1.0, n) < 0 else '0'
    if n.is_integer() and abs(n) < 1e16: return str(int(n))
    text = repr(n)
    return format(Decimal(text), 'f') if 'e' in text else text

def format_value(it) -> str:
    if isinstance(it, bool): return str(it).lower()
    if isinstance(it, float): return format_number(it)
    return str(it)

def format_literal(it) -> str:
    """Like `format_value` but strings are quoted, as used in traces and the REPL."""
    if isinstance(it, Text): return '"' + it + '"'
    return format_value(it)


def format_node(node) -> str:
    """Render an AST node back to source, with every compound expression parenthesised."""
    match node:
        case Identifier(name): return name
        case Number(value): return format_number(value)
        case String(text): return f'"{text}"'
        case PrefixExpr(op, right): return f"({op}{format_node(right)})"
        case InfixExpr(left, op, right): return f"({format_node(left)} {op} {format_node(right)})"
        case PostfixExpr(left, op): return f"({format_node(left)}{op})"
        case TypeofExpr(right): return f"(typeof {format_node(right)})"
        case ExprStatement(expr): return format_node(expr)
        case PrintStatement(expr): return f"print {format_node(expr)}"
        case ReturnStatement(expr): return f"return {format_node(expr)}"
        case Block(statements):
            return '{ ' + ' ; '.join(format_node(s) for s in statements) + ' }' if statements else '{ }'
        case IfStatement(condition, block, else_block):
            text = f"if {format_node(condition)} {format_node(block)}"
            return text + (f" else {format_node(else_block)}" if else_block is not None else '')
    raise NotImplementedError(f"Cannot format {type(node).__name__}.")


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))

def show_environment(env, width=72, end='\n', file=None):
    items = [f"{name}={format_literal(value)}" for name, value in env.items()]
    env_str = ' '.join(items) if items else '∅'
    if width is not None and len(env_str) > width:
        env_str = '… ' + env_str[-width+2:]
    print(f"{env_str:>{width}}" if width else env_str, end=end, file=file)

def show_statement_and_environment(statement, env, width=72, file=None):
    file = sys.stderr if file is None else file
    stmt_str = format_node(statement)
    if len(stmt_str) > width:
        stmt_str = stmt_str[:+width-2] + ' …'
    show_environment(env, width=width, end='', file=file)
    print(f" \033[36m <=> \033[0m {stmt_str:<{width}}", file=file)
