## lumen — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import math

import pytest

from lumen import operators as O
from lumen.types import Text, Operator, Precedence
from lumen.errors import LumenTypeError


def test_every_infix_operator_has_semantics_or_is_assignment():
    for op in Operator:
        if op is Operator.NOT or op.is_assignment: continue
        assert op in O.BINARY_OPERATORS, op


def test_precedence_table_orders_operators():
    assert Operator.ASSIGN.precedence < Operator.LOGICAL_OR.precedence < Operator.LOGICAL_AND.precedence
    assert Operator.LOGICAL_AND.precedence < Operator.BIT_OR.precedence < Operator.BIT_AND.precedence
    assert Operator.BIT_AND.precedence < Operator.EQUAL.precedence < Operator.LESS_THAN.precedence
    assert Operator.LESS_THAN.precedence < Operator.PLUS.precedence < Operator.MUL.precedence
    assert Operator.NOT.precedence == Precedence.PREFIX
    assert Operator.MOD_ASSIGN.precedence == Precedence.ASSIGN


def test_add_numbers_and_strings():
    assert O.op_add(1.0, 2.0) == 3.0
    joined = O.op_add(Text("a"), Text("b"))
    assert joined == "ab" and type(joined) is Text
    with pytest.raises(LumenTypeError):
        O.op_add(Text("a"), 1.0)
    with pytest.raises(LumenTypeError):
        O.op_add(True, 1.0)


def test_booleans_are_not_numbers():
    with pytest.raises(LumenTypeError):
        O.op_mul(True, 2.0)
    with pytest.raises(LumenTypeError):
        O.op_neg(False)


def test_equality_is_structural_and_kind_aware():
    assert O.op_equal(1.0, 1.0)
    assert O.op_equal(Text("x"), Text("x"))
    assert not O.op_equal(1.0, True)
    assert not O.op_equal(0.0, False)
    assert O.op_differ(Text("1"), 1.0)


def test_identity_compares_storage():
    a = Text("same")
    assert O.op_same(a, a)
    assert not O.op_same(a, Text("same"))
    with pytest.raises(LumenTypeError) as exc:
        O.op_same(1.0, 1.0)
    assert "`===` expects string operands" in str(exc.value)


def test_ordering_across_kinds_follows_value_model_order():
    assert O.op_lt(5.0, False)
    assert O.op_lt(True, Text(""))
    assert O.op_gt(Text("a"), 100.0)


def test_nan_is_unordered():
    nan = math.nan
    assert not O.op_lt(nan, 1.0) and not O.op_gt(nan, 1.0)
    assert not O.op_lte(nan, nan) and not O.op_gte(nan, nan)
    assert not O.op_equal(nan, nan)


def test_to_int32_truncates_and_saturates():
    assert O.to_int32(3.99) == 3
    assert O.to_int32(-3.99) == -3
    assert O.to_int32(1e20) == 2**31 - 1
    assert O.to_int32(-1e20) == -2**31
    assert O.to_int32(math.nan) == 0
    assert O.op_bitor(2.0**31, 0.0) == float(2**31 - 1)


def test_unary_not_only_accepts_numbers():
    assert O.op_not(0.0) is True
    assert O.op_not(-0.0) is True
    assert O.op_not(0.5) is False
    with pytest.raises(LumenTypeError) as exc:
        O.op_not(Text(""))
    assert "`!` expects a number, got string." in str(exc.value)


def test_exit_status_conversion():
    assert O.to_exit_status(3.7) == 3
    assert O.to_exit_status(True) == 1
    assert O.to_exit_status(False) == 0
    with pytest.raises(LumenTypeError):
        O.to_exit_status(Text("3"))


def test_typeof_names():
    assert O.op_typeof(1.0) == "number"
    assert O.op_typeof(False) == "boolean"
    assert O.op_typeof(Text("")) == "string"
    assert O.op_typeof(1.0) is not O.op_typeof(1.0)
