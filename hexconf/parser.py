import logging

from hexconf.errors import ParseError
from hexconf.lexer import Lexer, TokenType
from hexconf.values import ConstRef, Dict, Number

logger = logging.getLogger("hexconf.parser")


class Parser:
    """Recursive-descent parser with one token of lookahead.

    ``parse_all`` returns the environment: binding name to raw value, in
    declaration order. A repeated binding name or dict field keeps its first
    position and takes the last value.

    Nested dicts are tracked on an explicit stack, so nesting depth is not
    bounded by the interpreter's recursion limit.
    """

    def __init__(self, lexer):
        self.lexer = lexer
        self.cur = lexer.next()

    def peek(self):
        return self.cur

    def error(self, message):
        return ParseError(self.cur.line, self.cur.column, message)

    def expect(self, ttype):
        if self.cur.type is not ttype:
            raise self.error(f"Expected {ttype.name} but got {self.cur.type.name}")

    def eat(self, ttype):
        self.expect(ttype)
        token = self.cur
        self.cur = self.lexer.next()
        return token

    def parse_all(self):
        env = {}
        while self.cur.type is not TokenType.EOF:
            if self.cur.type is not TokenType.IDENT:
                raise self.error("Expected identifier at top level")
            name = self.eat(TokenType.IDENT).text
            self.eat(TokenType.EQ)
            env[name] = self.parse_value()
            logger.debug("Parsed binding %s", name)
        return env

    def parse_field_name(self):
        if self.cur.type is not TokenType.IDENT:
            raise self.error("Expected identifier in dict")
        key = self.eat(TokenType.IDENT).text
        self.eat(TokenType.COLON)
        return key

    def parse_scalar(self):
        tok = self.peek()

        if tok.type is TokenType.NUMBER:
            try:
                number = Number.from_lexeme(tok.text)
            except ValueError as e:
                raise self.error(str(e)) from e
            self.eat(TokenType.NUMBER)
            return number

        if tok.type is TokenType.LBRACK:
            self.eat(TokenType.LBRACK)
            if self.cur.type is not TokenType.IDENT:
                raise self.error("Expected identifier inside []")
            name = self.eat(TokenType.IDENT).text
            self.eat(TokenType.RBRACK)
            return ConstRef(name)

        raise self.error(f"Unexpected token when parsing value: {tok.type.name}")

    def parse_value(self):
        # (fields, key) for every open dict waiting on the value of `key`
        open_dicts = []
        while True:
            if self.cur.type is TokenType.LBRACE:
                self.eat(TokenType.LBRACE)
                if self.cur.type is not TokenType.RBRACE:
                    open_dicts.append(({}, self.parse_field_name()))
                    continue
                self.eat(TokenType.RBRACE)
                value = Dict({})
            else:
                value = self.parse_scalar()

            while open_dicts:
                fields, key = open_dicts[-1]
                fields[key] = value
                if self.cur.type is TokenType.COMMA:
                    self.eat(TokenType.COMMA)
                    if self.cur.type is TokenType.RBRACE:
                        raise self.error("Trailing comma in dict")
                    open_dicts[-1] = (fields, self.parse_field_name())
                    break
                if self.cur.type is not TokenType.RBRACE:
                    raise self.error("Expected ',' or '}' after dict entry")
                self.eat(TokenType.RBRACE)
                open_dicts.pop()
                value = Dict(fields)
            else:
                return value

    def parse_dict(self):
        self.expect(TokenType.LBRACE)
        return self.parse_value()


def parse(text):
    """Parse a whole document into its environment."""
    return Parser(Lexer(text)).parse_all()
