## lumen — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import io

import pytest

from lumen.formatting import format_number, format_value, format_literal, write_without_ansi, show_environment
from lumen.environment import Environment
from lumen.types import Text


@pytest.mark.parametrize("value, expected", [
    (7.0, "7"), (-3.0, "-3"), (0.5, "0.5"), (0.0, "0"), (-0.0, "-0"),
    (1e21, "1000000000000000000000"), (1e23, "100000000000000000000000"),
    (123456789012345678901234567890.0, "123456789012345680000000000000"), (2.0**53, "9007199254740992"),
    (1e-7, "0.0000001"), (2.5e-10, "0.00000000025"),
    (float('inf'), "inf"), (float('-inf'), "-inf"), (float('nan'), "NaN"),
])
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_format_value_and_literal():
    assert format_value(True) == "true"
    assert format_value(False) == "false"
    assert format_value(Text("raw text")) == "raw text"
    assert format_literal(Text("q")) == '"q"'
    assert format_literal(2.0) == "2"


def test_write_without_ansi():
    out = io.StringIO()
    write = write_without_ansi(out.write)
    write("\033[30;43m ERROR. \033[0m plain")
    assert out.getvalue() == " ERROR.  plain"


def test_show_environment_lists_bindings():
    env = Environment()
    env.assign("a", 1.0)
    env.assign("s", Text("x"))
    out = io.StringIO()
    show_environment(env, width=None, file=out)
    assert out.getvalue() == 'a=1 s="x"\n'

    out = io.StringIO()
    show_environment(Environment(), width=None, file=out)
    assert out.getvalue() == "∅\n"
