## lumen — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Iterator

from .types import Token, TokenType, Operator, Reserved


BRACKETS: dict[str, TokenType] = {
    '(': TokenType.LPAREN, ')': TokenType.RPAREN,
    '{': TokenType.LBRACE, '}': TokenType.RBRACE,
}

# Longest candidate first, so multi-character operators are never split.
OPERATOR_CANDIDATES: dict[str, tuple[str, ...]] = {
    '+': ('+=', '+'), '-': ('-=', '-'), '*': ('*=', '*'), '/': ('/=', '/'), '%': ('%=', '%'),
    '=': ('===', '==', '='), '>': ('>=', '>'), '<': ('<=', '<'),
    '&': ('&&', '&'), '|': ('||', '|'), '!': ('!=', '!'),
}

# (keyword, needs trailing space) keyed by first character; `else` may touch what follows.
RESERVED_CANDIDATES: dict[str, tuple[tuple[Reserved, bool], ...]] = {
    'p': ((Reserved.PRINT, True),),
    'r': ((Reserved.RETURN, True),),
    'i': ((Reserved.IF, True),),
    'e': ((Reserved.ELSE, False),),
    'f': ((Reserved.FOR, True), (Reserved.FN, True)),
    't': ((Reserved.TYPEOF, True),),
}


def is_space(ch: str) -> bool: return ch == ' ' or ch == '\t'
def is_part_of_number(ch: str) -> bool: return ch.isascii() and (ch.isdigit() or ch == '.')


class Lexer:
    """Pull-based tokenizer over a source string.

    Recognizers run in a fixed order at each position: number, newline, bracket,
    reserved word, operator, string literal, identifier.  The first one to match
    produces the token and moves the cursor past it.
    """

    def __init__(self, source: str):
        self.source = source
        self.position = 0
        self.line = 1
        self.line_start = 0

    @property
    def current(self) -> str | None:
        return self.source[self.position] if self.position < len(self.source) else None

    def __iter__(self) -> Iterator[Token]:
        return self.tokens()

    def tokens(self) -> Iterator[Token]:
        while (token := self.next_token()) is not None:
            yield token

    def next_token(self) -> Token | None:
        self._skip_whitespace()
        if self.current is None: return None

        line, column = self.line, self.position - self.line_start + 1
        kind, value = (self._number() or self._newline() or self._bracket() or self._reserved()
                       or self._operator() or self._string() or self._identifier())
        return Token(kind, value, line=line, column=column)

    def _skip_whitespace(self) -> None:
        while self.current is not None and is_space(self.current):
            self.position += 1

    def _starts_with(self, text: str) -> bool:
        return self.source.startswith(text, self.position)

    def _number(self):
        if not is_part_of_number(self.current): return None
        end = self.position
        while end < len(self.source) and is_part_of_number(self.source[end]):
            end += 1
        try:
            value = float(self.source[self.position:end])
        except ValueError:
            return None
        self.position = end
        return TokenType.NUMBER, value

    def _newline(self):
        if self.current != '\n': return None
        self.position += 1
        self.line, self.line_start = self.line + 1, self.position
        return TokenType.NEWLINE, None

    def _bracket(self):
        if (kind := BRACKETS.get(self.current)) is None: return None
        self.position += 1
        return kind, None

    def _reserved(self):
        for word, needs_space in RESERVED_CANDIDATES.get(self.current, ()):
            text = word.value + ' ' if needs_space else word.value
            if self._starts_with(text):
                self.position += len(text)
                return TokenType.RESERVED, word
        return None

    def _operator(self):
        for candidate in OPERATOR_CANDIDATES.get(self.current, ()):
            if self._starts_with(candidate):
                self.position += len(candidate)
                return TokenType.OPERATOR, Operator(candidate)
        return None

    def _string(self):
        if self.current != '"': return None
        start = self.position + 1
        if (end := self.source.find('"', start)) == -1:
            end = len(self.source)
        text = self.source[start:end]
        self.position = end + 1
        if (breaks := text.count('\n')) > 0:
            self.line += breaks
            self.line_start = start + text.rfind('\n') + 1
        return TokenType.STRING, text

    def _identifier(self):
        start = self.position
        self.position += 1
        while self.current is not None and not self.current.isspace():
            self.position += 1
        return TokenType.IDENTIFIER, self.source[start:self.position]


def tokenize(source: str) -> list[Token]:
    return list(Lexer(source).tokens())
