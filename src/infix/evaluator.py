from functools import wraps
import math
import operator

from .parser import Op, Function, Literal, BinaryOp, UnaryOp, ExternalCall
from .parser import parse
from .scanner import tokenize
from .util import EvalError, ArityError


def _odd_sign(base, exponent):
    '''
    Sign a pole or overflow of base ** exponent takes.
    '''
    if exponent.is_integer() and exponent % 2 == 1:
        return math.copysign(1.0, base)
    return 1.0


def _divide(left, right):
    try:
        return left / right
    except ZeroDivisionError:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(1.0, left) * math.copysign(math.inf, right)


def _power(base, exponent):
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return _odd_sign(base, exponent) * math.inf
    except ValueError:
        # 0 ** negative is a pole, anything else is out of domain
        if base == 0:
            return _odd_sign(base, exponent) * math.inf
        return math.nan


def _domain(f):
    '''
    Make math function return NaN outside its domain rather than raise.
    '''
    @wraps(f)
    def wrapper(*args):
        try:
            return f(*args)
        except ValueError:
            return math.nan
    return wrapper


class Evaluator:
    '''
    Tree walking evaluator, AST to float.

    Stateless; never mutates the tree.
    '''

    BINARY = {
        Op.ADD: operator.__add__,
        Op.SUB: operator.__sub__,
        Op.MUL: operator.__mul__,
        Op.DIV: _divide,
        Op.POW: _power,
    }

    UNARY = {
        Op.ADD: operator.__pos__,
        Op.SUB: operator.__neg__,
    }

    # Function to implementations, by number of arguments.
    FUNCTIONS = {
        Function.SIN: {1: _domain(math.sin)},
        Function.COS: {1: _domain(math.cos)},
        Function.TAN: {1: _domain(math.tan)},
        Function.ASIN: {1: _domain(math.asin)},
        Function.ACOS: {1: _domain(math.acos)},
        Function.ATAN: {1: math.atan, 2: math.atan2},
        Function.ATAN2: {2: math.atan2},
    }

    def evaluate(self, node):
        '''
        Walk the tree post-order with an explicit stack, so depth is bounded
        by memory alone.
        '''
        values = []
        pending = [(node, False)]
        while pending:
            node, visited = pending.pop()
            if isinstance(node, Literal):
                values.append(node.value)
                continue
            children = self.children(node)
            if not visited:
                pending.append((node, True))
                # Reversed, so the leftmost child comes off first
                pending.extend((child, False) for child in reversed(children))
                continue
            start = len(values) - len(children)
            arguments = values[start:]
            del values[start:]
            values.append(self.apply(node, arguments))
        return values.pop()

    def children(self, node):
        if isinstance(node, BinaryOp):
            return (node.left, node.right)
        elif isinstance(node, UnaryOp):
            return (node.operand,)
        elif isinstance(node, ExternalCall):
            return node.arguments
        raise EvalError('Invalid node {0!r}'.format(node))

    def apply(self, node, arguments):
        '''
        Combine node's already evaluated children.
        '''
        if isinstance(node, BinaryOp):
            return type(self).BINARY[node.operator](*arguments)
        elif isinstance(node, UnaryOp):
            f = type(self).UNARY.get(node.operator)
            if f is None:
                raise EvalError('Invalid unary operator '
                                '{0}'.format(node.operator.value))
            return f(*arguments)
        return self.call(node.function, arguments)

    def call(self, function, arguments):
        '''
        Apply external function to already evaluated arguments.

        Arguments are passed in order; atan2(y, x) and atan(y, x) take the y
        component first.
        '''
        overloads = type(self).FUNCTIONS[function]
        f = overloads.get(len(arguments))
        if f is None:
            expected = ' or '.join(map(str, sorted(overloads)))
            raise ArityError(function.value, len(arguments), expected)
        return f(*arguments)


def evaluate(ast):
    return Evaluator().evaluate(ast)


def calculate(text):
    '''
    Run the whole pipeline on one line of text.
    '''
    return evaluate(parse(tokenize(text)))
