'''
Infix calculator.

Reads one arithmetic expression per line, in the usual infix notation, and
prints its value as a float. Supports + - * / ^, parentheses, unary signs, and
the trigonometric functions sin, cos, tan, asin, acos, atan and atan2.

Each line goes through three stages, each of which either produces its whole
output or raises a CalcError:

- Scanner: text to tokens.
- Parser: tokens to AST.
- Evaluator: AST to float.

Floating point oddities (1/0, asin(2)) aren't errors; they come out as inf or
nan.
'''

from .cli import CLI
from .scanner import Scanner, tokenize
from .parser import Parser, parse
from .evaluator import Evaluator, evaluate, calculate
from .util import (CalcError, LexError, ParseError, UnknownFunctionError,
                   EvalError, ArityError)


__all__ = ('Scanner', 'Parser', 'Evaluator', 'CLI',
           'tokenize', 'parse', 'evaluate', 'calculate',
           'CalcError', 'LexError', 'ParseError', 'UnknownFunctionError',
           'EvalError', 'ArityError')
