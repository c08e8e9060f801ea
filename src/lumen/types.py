## lumen — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from enum import Enum, IntEnum
from typing import Any
from dataclasses import dataclass, field


class TokenType(Enum):
    IDENTIFIER = 'identifier'
    NUMBER = 'number'
    STRING = 'string'
    LPAREN = '('
    RPAREN = ')'
    LBRACE = '{'
    RBRACE = '}'
    OPERATOR = 'operator'
    RESERVED = 'reserved'
    NEWLINE = 'newline'


class Precedence(IntEnum):
    LOWEST = 0
    ASSIGN = 1
    LOGICAL_OR = 2
    LOGICAL_AND = 3
    BIT_OR = 4
    BIT_AND = 5
    EQUALITY = 6
    COMPARE = 7
    SUM = 8
    PRODUCT = 9
    PREFIX = 10
    POSTFIX = 11


class Operator(Enum):
    PLUS = '+'
    MINUS = '-'
    MUL = '*'
    DIV = '/'
    MOD = '%'
    EQUAL = '=='
    OBJECT_EQUAL = '==='
    NOT_EQUAL = '!='
    GREATER_THAN = '>'
    GREATER_THAN_EQUAL = '>='
    LESS_THAN = '<'
    LESS_THAN_EQUAL = '<='
    LOGICAL_AND = '&&'
    LOGICAL_OR = '||'
    NOT = '!'
    BIT_AND = '&'
    BIT_OR = '|'
    ASSIGN = '='
    ADD_ASSIGN = '+='
    SUB_ASSIGN = '-='
    MUL_ASSIGN = '*='
    DIV_ASSIGN = '/='
    MOD_ASSIGN = '%='

    def __str__(self):
        return self.value

    @property
    def precedence(self) -> Precedence:
        return _OPERATOR_PRECEDENCE[self]

    @property
    def is_assignment(self) -> bool:
        return self in COMPOUND_ASSIGNMENT or self is Operator.ASSIGN


_OPERATOR_PRECEDENCE: dict[Operator, Precedence] = {
    Operator.ASSIGN: Precedence.ASSIGN, Operator.ADD_ASSIGN: Precedence.ASSIGN,
    Operator.SUB_ASSIGN: Precedence.ASSIGN, Operator.MUL_ASSIGN: Precedence.ASSIGN,
    Operator.DIV_ASSIGN: Precedence.ASSIGN, Operator.MOD_ASSIGN: Precedence.ASSIGN,
    Operator.LOGICAL_OR: Precedence.LOGICAL_OR,
    Operator.LOGICAL_AND: Precedence.LOGICAL_AND,
    Operator.BIT_OR: Precedence.BIT_OR,
    Operator.BIT_AND: Precedence.BIT_AND,
    Operator.EQUAL: Precedence.EQUALITY, Operator.NOT_EQUAL: Precedence.EQUALITY,
    Operator.OBJECT_EQUAL: Precedence.EQUALITY,
    Operator.GREATER_THAN: Precedence.COMPARE, Operator.GREATER_THAN_EQUAL: Precedence.COMPARE,
    Operator.LESS_THAN: Precedence.COMPARE, Operator.LESS_THAN_EQUAL: Precedence.COMPARE,
    Operator.PLUS: Precedence.SUM, Operator.MINUS: Precedence.SUM,
    Operator.MUL: Precedence.PRODUCT, Operator.DIV: Precedence.PRODUCT, Operator.MOD: Precedence.PRODUCT,
    Operator.NOT: Precedence.PREFIX,
}

# Compound assignment maps onto the binary operator it applies before storing.
COMPOUND_ASSIGNMENT: dict[Operator, Operator] = {
    Operator.ADD_ASSIGN: Operator.PLUS,
    Operator.SUB_ASSIGN: Operator.MINUS,
    Operator.MUL_ASSIGN: Operator.MUL,
    Operator.DIV_ASSIGN: Operator.DIV,
    Operator.MOD_ASSIGN: Operator.MOD,
}

PREFIX_OPERATORS = frozenset({Operator.PLUS, Operator.MINUS, Operator.NOT})
INFIX_OPERATORS = frozenset(op for op in Operator if op is not Operator.NOT)


class Reserved(Enum):
    PRINT = 'print'
    RETURN = 'return'
    IF = 'if'
    ELSE = 'else'
    FOR = 'for'
    FN = 'fn'
    TYPEOF = 'typeof'

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: Any = None
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    @property
    def precedence(self) -> Precedence:
        if self.type is TokenType.OPERATOR: return self.value.precedence
        return Precedence.LOWEST

    def is_operator(self, *ops: Operator) -> bool:
        return self.type is TokenType.OPERATOR and self.value in ops

    def is_reserved(self, word: Reserved) -> bool:
        return self.type is TokenType.RESERVED and self.value is word

    def __str__(self):
        match self.type:
            case TokenType.NEWLINE: return '\\n'
            case TokenType.STRING: return f'"{self.value}"'
            case TokenType.NUMBER:
                return str(int(self.value)) if self.value.is_integer() else repr(self.value)
            case TokenType.IDENTIFIER | TokenType.OPERATOR | TokenType.RESERVED:
                return str(self.value)
        return self.type.value


class Text(str):
    """Immutable string value; every literal or concatenation creates one distinct
    instance which is then shared by reference wherever the value is copied.
    Content equality uses `==`, storage identity uses `is`.
    """
    __slots__ = ()

    def __repr__(self):
        return f"Text({str.__repr__(self)})"


# Runtime values are plain Python objects: float for numbers, bool, and Text.
Primitive = float | bool | Text


def _meta():
    return field(default=None, compare=False, repr=False, kw_only=True)


class Expr:
    meta: dict | None


@dataclass(frozen=True)
class Identifier(Expr):
    name: str
    meta: dict | None = _meta()


@dataclass(frozen=True)
class Number(Expr):
    value: float
    meta: dict | None = _meta()


@dataclass(frozen=True)
class String(Expr):
    text: Text
    meta: dict | None = _meta()


@dataclass(frozen=True)
class PrefixExpr(Expr):
    operator: Operator
    right: Expr
    meta: dict | None = _meta()


@dataclass(frozen=True)
class InfixExpr(Expr):
    left: Expr
    operator: Operator
    right: Expr
    meta: dict | None = _meta()


@dataclass(frozen=True)
class PostfixExpr(Expr):
    """Reserved for postfix operators; the parser never produces it."""
    left: Expr
    operator: Operator
    meta: dict | None = _meta()


@dataclass(frozen=True)
class TypeofExpr(Expr):
    right: Expr
    meta: dict | None = _meta()


class Statement:
    meta: dict | None


@dataclass(frozen=True)
class ExprStatement(Statement):
    expr: Expr
    meta: dict | None = _meta()


@dataclass(frozen=True)
class PrintStatement(Statement):
    expr: Expr
    meta: dict | None = _meta()


@dataclass(frozen=True)
class ReturnStatement(Statement):
    expr: Expr
    meta: dict | None = _meta()


@dataclass(frozen=True)
class Block(Statement):
    statements: tuple[Statement, ...]
    meta: dict | None = _meta()


@dataclass(frozen=True)
class IfStatement(Statement):
    condition: Expr
    block: Block
    else_block: Block | None = None
    meta: dict | None = _meta()


TYPE_NAME_MAP: dict[type, str] = {
    float: 'number',
    bool: 'boolean',
    Text: 'string',
}


def type_name(value: Primitive) -> str:
    """Name of the value's kind as exposed by `typeof` and error messages."""
    return TYPE_NAME_MAP.get(type(value), type(value).__name__)
