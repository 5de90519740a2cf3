from hexconf.errors import (
    ConfigError,
    CyclicDependencyError,
    EvaluationError,
    LexError,
    ParseError,
    UnknownConstantError,
)
from hexconf.evaluator import Evaluator, resolve
from hexconf.lexer import Lexer, Token, TokenType, tokenize
from hexconf.main import translate
from hexconf.parser import Parser, parse
from hexconf.serializer import to_xml, to_yaml
from hexconf.values import ConstRef, Dict, Number

__version__ = "0.1.0"
