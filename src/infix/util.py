from decimal import Decimal
import math


class CalcError(Exception):
    pass


class LexError(CalcError):
    '''
    Input that no token pattern matches, or a number too large for a float.
    '''
    def __init__(self, text, position, reason="Couldn't lex"):
        super().__init__('{0} {1}'.format(reason, text.strip()))
        self.text = text
        self.position = position


class ParseError(CalcError):
    '''
    Tokens that don't form exactly one complete expression.

    :param expected: Description of the construct the grammar wanted.
    :param found: The offending token, or None at end of input.
    '''
    def __init__(self, message, expected=None, found=None):
        super().__init__(message)
        self.expected = expected
        self.found = found


class UnknownFunctionError(ParseError):
    def __init__(self, name):
        super().__init__('Unknown external function {0}'.format(name),
                         expected='external function name',
                         found=name)
        self.name = name


class EvalError(CalcError):
    pass


class ArityError(EvalError):
    def __init__(self, function, actual, expected):
        super().__init__('Wrong number of arguments for external function '
                         '{0}, is {1}, should be {2}'.format(function,
                                                             actual,
                                                             expected))
        self.function = function
        self.actual = actual
        self.expected = expected


def format_number(value):
    '''
    Render float in positional notation, never exponent notation.

    Shortest round-tripping digits, as repr() would pick them.
    '''
    # Decimal would spell these 'Infinity' and 'NaN'
    if not math.isfinite(value):
        return repr(value)
    return format(Decimal(repr(value)), 'f')
