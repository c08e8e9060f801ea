## lumen — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import math
from typing import Callable

from .types import Operator, Primitive, Text, type_name
from .errors import LumenTypeError


num = float

# Ordering between different kinds follows declaration order of the value model.
_KIND_RANK = {float: 0, bool: 1, Text: 2}


def _expect(op: Operator, kind: type, *values: Primitive) -> None:
    if all(type(v) is kind for v in values): return
    got = ' and '.join(type_name(v) for v in values)
    expected = 'a ' + type_name(kind()) if len(values) == 1 else type_name(kind()) + ' operands'
    raise LumenTypeError(f"`{op}` expects {expected}, got {got}.", lumen_token=str(op))

def _ieee_div(b: num, a: num) -> num:
    if a != 0.0: return b / a
    if b == 0.0 or math.isnan(b): return math.nan
    return math.copysign(math.inf, b) * math.copysign(1.0, a)

def _ieee_rem(b: num, a: num) -> num:
    if a == 0.0 or math.isinf(b) or math.isnan(a) or math.isnan(b): return math.nan
    return math.fmod(b, a)

def to_int32(x: num) -> int:
    """Truncate toward zero, saturating at the 32-bit signed range; NaN becomes zero."""
    if math.isnan(x): return 0
    if x >= 2**31 - 1: return 2**31 - 1
    if x <= -2**31: return -2**31
    return int(x)

def _compare(b: Primitive, a: Primitive) -> int:
    if type(b) is not type(a):
        return _KIND_RANK[type(b)] - _KIND_RANK[type(a)]
    return (b > a) - (b < a)

## ARITHMETIC
def op_add(b: Primitive, a: Primitive) -> Primitive:
    if type(b) is Text and type(a) is Text: return Text(str(b) + str(a))
    _expect(Operator.PLUS, float, b, a)
    return b + a

def op_sub(b: num, a: num) -> num: _expect(Operator.MINUS, float, b, a); return b - a
def op_mul(b: num, a: num) -> num: _expect(Operator.MUL, float, b, a); return b * a
def op_div(b: num, a: num) -> num: _expect(Operator.DIV, float, b, a); return _ieee_div(b, a)
def op_rem(b: num, a: num) -> num: _expect(Operator.MOD, float, b, a); return _ieee_rem(b, a)
## COMPARISON
def op_equal(b: Primitive, a: Primitive) -> bool: return type(b) is type(a) and b == a
def op_differ(b: Primitive, a: Primitive) -> bool: return not op_equal(b, a)
def op_gt(b: Primitive, a: Primitive) -> bool: return _compare(b, a) > 0 and not _unordered(b, a)
def op_gte(b: Primitive, a: Primitive) -> bool: return _compare(b, a) >= 0 and not _unordered(b, a)
def op_lt(b: Primitive, a: Primitive) -> bool: return _compare(b, a) < 0 and not _unordered(b, a)
def op_lte(b: Primitive, a: Primitive) -> bool: return _compare(b, a) <= 0 and not _unordered(b, a)

def _unordered(b: Primitive, a: Primitive) -> bool:
    # NaN compares false against everything, including itself.
    return type(b) is float and type(a) is float and (math.isnan(b) or math.isnan(a))

def op_same(b: Text, a: Text) -> bool:
    _expect(Operator.OBJECT_EQUAL, Text, b, a)
    return b is a
## BOOLEAN LOGIC
def op_and(b: bool, a: bool) -> bool: _expect(Operator.LOGICAL_AND, bool, b, a); return b and a
def op_or(b: bool, a: bool) -> bool: _expect(Operator.LOGICAL_OR, bool, b, a); return b or a
## BITWISE
def op_bitand(b: num, a: num) -> num: _expect(Operator.BIT_AND, float, b, a); return float(to_int32(b) & to_int32(a))
def op_bitor(b: num, a: num) -> num: _expect(Operator.BIT_OR, float, b, a); return float(to_int32(b) | to_int32(a))
## UNARY
def op_pos(x: num) -> num: _expect(Operator.PLUS, float, x); return x
def op_neg(x: num) -> num: _expect(Operator.MINUS, float, x); return -x
def op_not(x: num) -> bool: _expect(Operator.NOT, float, x); return x == 0.0
## INTROSPECTION
def op_typeof(x: Primitive) -> Text: return Text(type_name(x))


BINARY_OPERATORS: dict[Operator, Callable[[Primitive, Primitive], Primitive]] = {
    Operator.PLUS: op_add, Operator.MINUS: op_sub, Operator.MUL: op_mul,
    Operator.DIV: op_div, Operator.MOD: op_rem,
    Operator.EQUAL: op_equal, Operator.NOT_EQUAL: op_differ, Operator.OBJECT_EQUAL: op_same,
    Operator.GREATER_THAN: op_gt, Operator.GREATER_THAN_EQUAL: op_gte,
    Operator.LESS_THAN: op_lt, Operator.LESS_THAN_EQUAL: op_lte,
    Operator.LOGICAL_AND: op_and, Operator.LOGICAL_OR: op_or,
    Operator.BIT_AND: op_bitand, Operator.BIT_OR: op_bitor,
}

UNARY_OPERATORS: dict[Operator, Callable[[Primitive], Primitive]] = {
    Operator.PLUS: op_pos, Operator.MINUS: op_neg, Operator.NOT: op_not,
}


def to_exit_status(value: Primitive) -> int:
    """Integer interpretation of a value, as used for the process exit status."""
    if type(value) is bool: return int(value)
    if type(value) is float: return to_int32(value)
    raise LumenTypeError(f"`return` expects a number or boolean, got {type_name(value)}.", lumen_token='return')
