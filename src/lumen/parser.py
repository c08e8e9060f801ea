## lumen — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import os
import textwrap

from .types import (Token, TokenType, Operator, Reserved, Precedence, Text, PREFIX_OPERATORS, INFIX_OPERATORS,
                    Expr, Identifier, Number, String, PrefixExpr, InfixExpr, TypeofExpr,
                    Statement, ExprStatement, PrintStatement, ReturnStatement, Block, IfStatement)
from .lexer import Lexer
from .errors import LumenParseError, LumenIncompleteParse, LumenUnsupportedFeature, LumenRecursionError


class Parser:
    """Recursive-descent parser for statements, with precedence climbing for expressions.

    The parser looks at two tokens at a time: `current` is the token being consumed and
    `peek` the one after it.  Every `parse_*` method starts with its first token in
    `current` and returns with its last token in `current`.
    """

    def __init__(self, lexer: Lexer, filename: str | None = None):
        self.lexer = lexer
        self.filename = filename
        self._tokens = lexer.tokens()
        self.current: Token | None = next(self._tokens, None)
        self.peek: Token | None = next(self._tokens, None)

    def next(self) -> None:
        self.current, self.peek = self.peek, next(self._tokens, None)

    def parse(self) -> list[Statement]:
        statements = []
        self.skip_newlines()
        while self.current is not None:
            statements.append(self.parse_statement())
            self.next()
            self.skip_newlines()
        return statements

    def skip_newlines(self) -> None:
        while self.current is not None and self.current.type is TokenType.NEWLINE:
            self.next()

    # Statements ──────────────────────────────────────────────────────────────────────────────
    def parse_statement(self) -> Statement:
        token = self.current
        match (token.type, token.value):
            case (TokenType.RESERVED, Reserved.PRINT):
                return self.parse_print_statement()
            case (TokenType.RESERVED, Reserved.RETURN):
                return self.parse_return_statement()
            case (TokenType.RESERVED, Reserved.IF):
                return self.parse_if_statement()
            case (TokenType.RESERVED, Reserved.FOR | Reserved.FN):
                raise LumenUnsupportedFeature(f"`{token}` is a reserved word, but it is not supported yet.",
                                              lumen_token=str(token), lumen_meta=self._meta(token))
        return ExprStatement(self.parse_expr(), meta=self._meta(token))

    def parse_print_statement(self) -> PrintStatement:
        token = self.current
        self.next()
        expr = self.parse_expr()
        self._expect_terminator(TokenType.NEWLINE, TokenType.RBRACE)
        return PrintStatement(expr, meta=self._meta(token))

    def parse_return_statement(self) -> ReturnStatement:
        token = self.current
        self.next()
        expr = self.parse_expr()
        self._expect_terminator(TokenType.NEWLINE)
        return ReturnStatement(expr, meta=self._meta(token))

    def parse_if_statement(self) -> IfStatement:
        token = self.current
        self.next()
        condition = self.parse_expr()
        self._expect_peek(TokenType.LBRACE, "`{` after if condition")
        block = self.parse_block()

        else_block = None
        if self.peek is not None and self.peek.is_reserved(Reserved.ELSE):
            self.next()
            self._expect_peek(TokenType.LBRACE, "`{` after else")
            else_block = self.parse_block()
        return IfStatement(condition, block, else_block, meta=self._meta(token))

    def parse_block(self) -> Block:
        token = self.current
        self.next()
        self.skip_newlines()

        statements = []
        while self.current is None or self.current.type is not TokenType.RBRACE:
            if self.current is None:
                raise self._error("`}` to close block", None)
            statements.append(self.parse_statement())
            self.next()
            self.skip_newlines()
        return Block(tuple(statements), meta=self._meta(token))

    # Expressions ─────────────────────────────────────────────────────────────────────────────
    def parse_expr(self, precedence: Precedence = Precedence.LOWEST) -> Expr:
        left = self.parse_prefix()
        while precedence < self.peeking_precedence():
            self.next()
            left = self.parse_postfix(left) or self.parse_infix(left)
        return left

    def parse_prefix(self) -> Expr:
        token = self.current
        if token is None: raise self._error("an expression", None)

        match token.type:
            case TokenType.OPERATOR if token.value in PREFIX_OPERATORS:
                self.next()
                return PrefixExpr(token.value, self.parse_expr(Precedence.PREFIX), meta=self._meta(token))
            case TokenType.IDENTIFIER:
                return Identifier(token.value, meta=self._meta(token))
            case TokenType.NUMBER:
                return Number(token.value, meta=self._meta(token))
            case TokenType.STRING:
                return String(Text(token.value), meta=self._meta(token))
            case TokenType.LPAREN:
                return self.parse_grouped_expr()
            case TokenType.RESERVED if token.value is Reserved.TYPEOF:
                self.next()
                return TypeofExpr(self.parse_expr(Precedence.PREFIX), meta=self._meta(token))
        raise self._error("an expression", token)

    def parse_grouped_expr(self) -> Expr:
        self.next()
        expr = self.parse_expr()
        self._expect_peek(TokenType.RPAREN, "`)` to close group")
        return expr

    def parse_postfix(self, left: Expr) -> Expr | None:
        # No postfix operators are defined; infix parsing always follows.
        return None

    def parse_infix(self, left: Expr) -> Expr:
        token = self.current
        if not token.is_operator(*INFIX_OPERATORS):
            raise self._error("an infix operator", token)
        operator: Operator = token.value
        # Assignment is right-associative: `a = b = 1` stores into `b` first.
        precedence = Precedence.LOWEST if operator.is_assignment else operator.precedence
        self.next()
        right = self.parse_expr(precedence)
        return InfixExpr(left, operator, right, meta=self._meta(token))

    def peeking_precedence(self) -> Precedence:
        return Precedence.LOWEST if self.peek is None else self.peek.precedence

    # Helpers ─────────────────────────────────────────────────────────────────────────────────
    def _expect_peek(self, kind: TokenType, expected: str) -> None:
        if self.peek is None or self.peek.type is not kind:
            raise self._error(expected, self.peek)
        self.next()

    def _expect_terminator(self, *kinds: TokenType) -> None:
        if self.peek is None or self.peek.type in kinds: return
        names = ' or '.join(['newline'] + [f"`{k.value}`" for k in kinds if k is not TokenType.NEWLINE])
        raise self._error(f"{names} after `{self.current}`", self.peek)

    def _meta(self, token: Token) -> dict:
        return {'filename': self.filename, 'line': token.line, 'column': token.column}

    def _error(self, expected: str, token: Token | None) -> LumenParseError:
        if token is None:
            column = self.lexer.position - self.lexer.line_start + 1
            return LumenIncompleteParse(f"Expected {expected}, found end of input.", filename=self.filename,
                                        line=self.lexer.line, column=column, token='', expected=expected)
        return LumenParseError(f"Expected {expected}, found `{token}`.", filename=self.filename,
                               line=token.line, column=token.column, token=str(token), expected=expected)


def parse(source: str, filename: str | None = None) -> list[Statement]:
    parser = Parser(Lexer(source), filename=filename)
    try:
        return parser.parse()
    except RecursionError:
        token = parser.current
        raise LumenRecursionError("Source is nested too deeply to parse.",
                                  lumen_meta=parser._meta(token) if token else None) from None


def load_source_lines(meta: dict, source: str | None = None) -> str:
    if source is None:
        if meta['filename'] is None or not os.path.isfile(meta['filename']): return ""
        source = open(meta['filename'], 'r', encoding='utf-8').read()
    lines = source.split('\n')
    return lines[meta['line']-1] if 0 < meta['line'] <= len(lines) else ""

def format_source_lines(meta: dict | None, identifier: str, source: str | None = None) -> str:
    if not meta: return ""
    header = f"\033[97m  File \"{meta['filename']}\", line {meta['line']}, in {identifier}\033[0m\n"
    line = load_source_lines(meta, source)
    return header + (textwrap.indent(line.strip(), prefix='    ') + "\n" if line.strip() else "")


def format_parse_error_context(filename, line, column, token_value, source=None):
    lines = source.splitlines(keepends=True) if source is not None else open(filename, 'r', encoding='utf-8').readlines()
    start_line, end_line = max(0, line - 3), min(len(lines), line + 2)
    result = [f"\033[97m  File \"{filename}\", line {line}\033[0m"]

    for i in range(start_line, end_line):
        line_content = lines[i].rstrip('\n')
        line_color = '\033[90m'
        if i+1 == line:
            line_color = '\033[97m'
            if column > 0 and column <= len(line_content):
                width = max(1, len(token_value))
                line_content = (
                    line_content[:column-1] +
                    f"\033[48;5;30m\033[1;97m{line_content[column-1:column+width-1]}\033[0m" +
                    line_content[column+width-1:]
                )
        result.append(f"{line_color}{i+1:>5} |\033[0m {line_content}")
    return '\n' + '\n'.join(result) + '\n'
