## lumen — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from lumen.lexer import Lexer, tokenize
from lumen.types import Token, TokenType as T, Operator, Reserved


def kinds(source: str):
    return [t.type for t in tokenize(source)]


def test_assignment_tokens():
    assert tokenize("x = 5") == [
        Token(T.IDENTIFIER, 'x'), Token(T.OPERATOR, Operator.ASSIGN), Token(T.NUMBER, 5.0)]


def test_numbers_are_floats_including_fractions():
    assert tokenize("3 0.25 .5") == [Token(T.NUMBER, 3.0), Token(T.NUMBER, 0.25), Token(T.NUMBER, 0.5)]


def test_number_run_that_does_not_parse_falls_through_to_identifier():
    assert tokenize("1.5.2") == [Token(T.IDENTIFIER, '1.5.2')]


def test_minus_before_digit_is_an_operator():
    assert tokenize("3-5") == [Token(T.NUMBER, 3.0), Token(T.OPERATOR, Operator.MINUS), Token(T.NUMBER, 5.0)]


def test_operators_use_longest_match():
    source = "=== == = += -= *= /= %= >= > <= < && & || | != !"
    ops = [t.value for t in tokenize(source)]
    assert ops == [
        Operator.OBJECT_EQUAL, Operator.EQUAL, Operator.ASSIGN,
        Operator.ADD_ASSIGN, Operator.SUB_ASSIGN, Operator.MUL_ASSIGN, Operator.DIV_ASSIGN, Operator.MOD_ASSIGN,
        Operator.GREATER_THAN_EQUAL, Operator.GREATER_THAN, Operator.LESS_THAN_EQUAL, Operator.LESS_THAN,
        Operator.LOGICAL_AND, Operator.BIT_AND, Operator.LOGICAL_OR, Operator.BIT_OR,
        Operator.NOT_EQUAL, Operator.NOT,
    ]


def test_adjacent_operators_are_not_merged():
    assert [t.value for t in tokenize("a ==! b")][1:3] == [Operator.EQUAL, Operator.NOT]


def test_reserved_words_need_trailing_space():
    assert tokenize("print x") == [Token(T.RESERVED, Reserved.PRINT), Token(T.IDENTIFIER, 'x')]
    assert tokenize("printer") == [Token(T.IDENTIFIER, 'printer')]
    assert tokenize("if x")[0] == Token(T.RESERVED, Reserved.IF)
    assert tokenize("iffy")[0] == Token(T.IDENTIFIER, 'iffy')
    assert tokenize("print\n") == [Token(T.IDENTIFIER, 'print'), Token(T.NEWLINE)]


def test_else_does_not_need_trailing_space():
    assert tokenize("}else{") == [Token(T.RBRACE), Token(T.RESERVED, Reserved.ELSE), Token(T.LBRACE)]
    assert tokenize("elsewhere") == [Token(T.RESERVED, Reserved.ELSE), Token(T.IDENTIFIER, 'where')]


def test_all_reserved_words():
    words = [t.value for t in tokenize("print return if else for fn typeof ")]
    assert words == [Reserved.PRINT, Reserved.RETURN, Reserved.IF, Reserved.ELSE,
                     Reserved.FOR, Reserved.FN, Reserved.TYPEOF]


def test_brackets_and_braces():
    assert kinds("( ) { }") == [T.LPAREN, T.RPAREN, T.LBRACE, T.RBRACE]
    assert kinds("(1 + 2)") == [T.LPAREN, T.NUMBER, T.OPERATOR, T.NUMBER, T.RPAREN]


def test_string_literal_keeps_raw_content():
    assert tokenize('"hello world" "a\\n"') == [Token(T.STRING, 'hello world'), Token(T.STRING, 'a\\n')]


def test_unterminated_string_runs_to_end_of_input():
    assert tokenize('"abc') == [Token(T.STRING, 'abc')]


def test_identifier_is_a_run_of_non_whitespace():
    assert tokenize("foo)") == [Token(T.IDENTIFIER, 'foo)')]
    assert tokenize("a_b1 c") == [Token(T.IDENTIFIER, 'a_b1'), Token(T.IDENTIFIER, 'c')]


def test_newlines_are_tokens_and_tabs_are_skipped():
    assert kinds("\tx\n\n y") == [T.IDENTIFIER, T.NEWLINE, T.NEWLINE, T.IDENTIFIER]


def test_token_positions_track_lines_and_columns():
    tokens = tokenize('x = "a\nb"\n  y')
    assert (tokens[0].line, tokens[0].column) == (1, 1)
    assert (tokens[2].line, tokens[2].column) == (1, 5)
    assert (tokens[-1].line, tokens[-1].column) == (3, 3)


def test_lexer_is_pulled_one_token_at_a_time():
    lexer = Lexer("1 2")
    assert lexer.next_token() == Token(T.NUMBER, 1.0)
    assert lexer.position == 1
    assert lexer.next_token() == Token(T.NUMBER, 2.0)
    assert lexer.next_token() is None
    assert lexer.next_token() is None


def test_empty_and_blank_sources():
    assert tokenize("") == []
    assert tokenize("  \t ") == []
