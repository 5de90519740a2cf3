"""Tokenizer for hexconf documents.

Whitespace, ``# line`` comments and ``#= block =#`` comments are skipped
before every token. Line and column are 1-based and count newlines inside
comments too.
"""

import re
from enum import Enum
from typing import NamedTuple

from hexconf.errors import LexError


class TokenType(Enum):
    LBRACE = "{"
    RBRACE = "}"
    COLON = ":"
    COMMA = ","
    EQ = "="
    LBRACK = "["
    RBRACK = "]"
    NUMBER = "number"
    IDENT = "identifier"
    EOF = "end of input"


class Token(NamedTuple):
    type: TokenType
    text: str
    line: int
    column: int

    def __str__(self):
        return f"{self.type.name}('{self.text}')@{self.line}:{self.column}"


PUNCTUATORS = {t.value: t for t in (
    TokenType.LBRACE, TokenType.RBRACE, TokenType.COLON, TokenType.COMMA,
    TokenType.EQ, TokenType.LBRACK, TokenType.RBRACK,
)}

IGNORED_REGEX = [
    re.compile(r"[ \t\r\n]+"),
    re.compile(r"#=.*?=#", re.S),
    re.compile(r"#(?!=)[^\n]*"),
]

TOKEN_REGEX = [
    (TokenType.NUMBER, re.compile(r"0[xX][0-9a-fA-F]*")),
    (TokenType.IDENT,  re.compile(r"[A-Za-z_][A-Za-z0-9_]*")),
]


class Lexer:
    def __init__(self, text):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1

    def advance(self, length):
        chunk = self.text[self.pos:self.pos + length]
        newlines = chunk.count("\n")
        if newlines:
            self.line += newlines
            self.column = length - chunk.rfind("\n")
        else:
            self.column += length
        self.pos += length

    def skip_ignored(self):
        while self.pos < len(self.text):
            for pattern in IGNORED_REGEX:
                match = pattern.match(self.text, self.pos)
                if match:
                    self.advance(match.end() - self.pos)
                    break
            else:
                if self.text.startswith("#=", self.pos):
                    raise LexError(self.line, self.column, "Unterminated multiline comment")
                return

    def next(self):
        """Return the next token, or an EOF token once the input is exhausted."""
        self.skip_ignored()
        line, column = self.line, self.column
        if self.pos >= len(self.text):
            return Token(TokenType.EOF, "", line, column)

        char = self.text[self.pos]
        if char in PUNCTUATORS:
            self.advance(1)
            return Token(PUNCTUATORS[char], char, line, column)

        for ttype, pattern in TOKEN_REGEX:
            match = pattern.match(self.text, self.pos)
            if match:
                self.advance(len(match.group()))
                return Token(ttype, match.group(), line, column)

        raise LexError(line, column, f"Unexpected character: '{char}'")

    def __iter__(self):
        while True:
            token = self.next()
            yield token
            if token.type is TokenType.EOF:
                return


def tokenize(text):
    """Return every token of ``text``, the final one being EOF."""
    return list(Lexer(text))
