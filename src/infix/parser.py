'''
Operator precedence parser, tokens to AST.

Grammar, loosest binding first::

    expr    := add
    add     := mul (('+' | '-') mul)*
    mul     := pow (('*' | '/') pow)*
    pow     := unary ('^' unary)*
    unary   := '-' primary | '+' primary | primary
    primary := number | '(' expr ')' | external expr (',' expr)* ')'

Every binary level folds left, '^' included: 2^3^2 is (2^3)^2. A sign
applies to a primary only, so --1 doesn't parse, and -2^2 is (-2)^2.

Parentheses and calls open a frame on an explicit stack rather than a
Python call, so nesting is limited by memory, not the recursion limit.
Likewise AST reprs are built without recursion.
'''

from collections import deque
from dataclasses import dataclass
from enum import Enum

from . import scanner
from .util import ParseError, UnknownFunctionError


class Op(Enum):
    ADD = '+'
    SUB = '-'
    MUL = '*'
    DIV = '/'
    POW = '^'


class Function(Enum):
    SIN = 'sin'
    COS = 'cos'
    TAN = 'tan'
    ASIN = 'asin'
    ACOS = 'acos'
    ATAN = 'atan'
    ATAN2 = 'atan2'

    @classmethod
    def lookup(cls, name):
        '''
        Resolve function name, case insensitively.
        '''
        try:
            return cls(name.lower())
        except ValueError:
            raise UnknownFunctionError(name) from None


class Node:
    def __repr__(self):
        return dump(self)


@dataclass(frozen=True, repr=False)
class Literal(Node):
    value: float


@dataclass(frozen=True, repr=False)
class BinaryOp(Node):
    operator: Op
    left: Node
    right: Node


@dataclass(frozen=True, repr=False)
class UnaryOp(Node):
    # Only ADD (identity) or SUB (negation)
    operator: Op
    operand: Node


@dataclass(frozen=True, repr=False)
class ExternalCall(Node):
    function: Function
    arguments: tuple


def dump(node):
    '''
    Return dataclass style repr of AST, however deep.
    '''
    pieces = []
    pending = [node]
    while pending:
        item = pending.pop()
        if isinstance(item, str):
            pieces.append(item)
            continue
        if isinstance(item, Literal):
            parts = ['Literal(value={0!r})'.format(item.value)]
        elif isinstance(item, BinaryOp):
            parts = ['BinaryOp(operator={0!r}, left='.format(item.operator),
                     item.left,
                     ', right=',
                     item.right,
                     ')']
        elif isinstance(item, UnaryOp):
            parts = ['UnaryOp(operator={0!r}, operand='.format(item.operator),
                     item.operand,
                     ')']
        elif isinstance(item, ExternalCall):
            parts = ['ExternalCall(function={0!r}, '
                     'arguments=('.format(item.function)]
            for i, argument in enumerate(item.arguments):
                if i:
                    parts.append(', ')
                parts.append(argument)
            # One-tuple
            if len(item.arguments) == 1:
                parts.append(',')
            parts.append('))')
        else:
            parts = [repr(item)]
        pending.extend(reversed(parts))
    return ''.join(pieces)


def _signed(node, negate):
    return UnaryOp(Op.SUB, node) if negate else node


class _Frame:
    '''
    Expression under construction: the whole line, a parenthesized
    expression, or the current argument of a call.
    '''
    TOP = 'top'
    PAREN = 'paren'
    CALL = 'call'

    # Binding strength of binary operators; equal strength folds left
    PRECEDENCE = {
        Op.ADD: 1,
        Op.SUB: 1,
        Op.MUL: 2,
        Op.DIV: 2,
        Op.POW: 3,
    }

    def __init__(self, kind, negate=False, function=None):
        self.kind = kind
        # Sign in front of the parenthesis or call
        self.negate = negate
        self.function = function
        self.arguments = []
        self.operands = []
        self.operators = []

    def _fold(self):
        op = self.operators.pop()
        right = self.operands.pop()
        left = self.operands.pop()
        self.operands.append(BinaryOp(op, left, right))

    def push_operator(self, op):
        precedence = type(self).PRECEDENCE
        while self.operators and \
                precedence[self.operators[-1]] >= precedence[op]:
            self._fold()
        self.operators.append(op)

    def finish(self):
        '''
        Fold what's left and return the completed expression.
        '''
        while self.operators:
            self._fold()
        return self.operands.pop()


class Parser:
    '''
    Parser over one line's worth of tokens.

    Single use: parse() consumes the tokens it was given.
    '''

    BINARY = ''.join(op.value for op in Op)

    def __init__(self, tokens):
        self.tokens = deque(tokens)

    def _peek(self):
        return self.tokens[0] if self.tokens else None

    def _next(self, expected):
        '''
        Consume and return next token, failing if there's none left.
        '''
        if not self.tokens:
            raise ParseError('Unexpected end of input, expected '
                             '{0}'.format(expected),
                             expected=expected)
        return self.tokens.popleft()

    def _accept(self, symbols):
        '''
        Consume and return next token if it's an operator in symbols.
        '''
        token = self._peek()
        if isinstance(token, scanner.Operator) and token.symbol in symbols:
            return self.tokens.popleft()
        return None

    def parse(self):
        '''
        Parse exactly one expression, nothing left over.
        '''
        frames = [_Frame(_Frame.TOP)]
        tree = None
        while tree is None:
            node = self.parse_operand(frames)
            if node is not None:
                tree = self.parse_operators(frames, node)
        if self.tokens:
            remainder = scanner.render(self.tokens)
            raise ParseError('Unconsumed tokens {0}'.format(remainder),
                             expected='end of input',
                             found=self.tokens[0])
        return tree

    def parse_operand(self, frames):
        '''
        Parse an optional sign and a primary.

        Return the primary, or None if it opened a parenthesis or call, in
        which case an operand of the new frame comes next.
        '''
        negate = self._accept('-') is not None
        # Unary plus is dropped, not wrapped
        if not negate:
            self._accept('+')
        token = self._next('expression')
        if isinstance(token, scanner.Number):
            return _signed(Literal(token.value), negate)
        elif isinstance(token, scanner.LeftParen):
            frames.append(_Frame(_Frame.PAREN, negate))
            return None
        elif isinstance(token, scanner.ExternalCall):
            # The scanner consumed the '(' along with the name
            function = Function.lookup(token.name)
            frames.append(_Frame(_Frame.CALL, negate, function))
            return None
        raise ParseError('Unexpected token {0}'.format(token),
                         expected='expression',
                         found=token)

    def parse_operators(self, frames, node):
        '''
        Add operand node to the innermost frame, then take a binary operator
        or close frames.

        Return the whole line's AST once the top frame is done, otherwise
        None when another operand comes next.
        '''
        while True:
            frame = frames[-1]
            frame.operands.append(node)
            token = self._accept(type(self).BINARY)
            if token is not None:
                frame.push_operator(Op(token.symbol))
                return None
            expression = frame.finish()
            if frame.kind == _Frame.TOP:
                frames.pop()
                return expression
            elif frame.kind == _Frame.PAREN:
                closing = self._next("')'")
                if not isinstance(closing, scanner.RightParen):
                    raise ParseError("Expected ')', found "
                                     "{0}".format(closing),
                                     expected="')'",
                                     found=closing)
                frames.pop()
                node = _signed(expression, frame.negate)
                continue
            frame.arguments.append(expression)
            separator = self._next("',' or ')'")
            if isinstance(separator, scanner.Comma):
                return None
            elif not isinstance(separator, scanner.RightParen):
                raise ParseError("Expected ',' or ')', found "
                                 "{0}".format(separator),
                                 expected="',' or ')'",
                                 found=separator)
            frames.pop()
            node = _signed(ExternalCall(frame.function,
                                        tuple(frame.arguments)),
                           frame.negate)


def parse(tokens):
    return Parser(tokens).parse()
