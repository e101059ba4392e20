from dataclasses import dataclass
from functools import reduce
import operator
import math

import regex

from .util import LexError, format_number


@dataclass(frozen=True)
class Number:
    value: float

    def __str__(self):
        return format_number(self.value)


@dataclass(frozen=True)
class LeftParen:
    def __str__(self):
        return '('


@dataclass(frozen=True)
class RightParen:
    def __str__(self):
        return ')'


@dataclass(frozen=True)
class Comma:
    def __str__(self):
        return ','


@dataclass(frozen=True)
class Operator:
    symbol: str

    def __str__(self):
        return self.symbol


@dataclass(frozen=True)
class ExternalCall:
    '''
    Name of a function call; the opening parenthesis is part of this token.
    '''
    name: str

    def __str__(self):
        # Name only, so a rendered call doesn't re-lex as one
        return self.name


class Scanner:
    '''
    Scanner for the calculator's *regular* token grammar.

    Holds no state between lines; one instance can scan any number of them.
    '''
    # Number literal
    NUMBER = r'''
              # 1, 12, 1. (notice trailing dot), 1.25
              # No sign, that's the parser's unary minus. No exponent.
              [0-9]+
              (?:
                  \.
                  [0-9]*
              )?
              '''
    # Name of an external function, with its opening parenthesis
    EXTERNAL = r'''
                # sin(, atan2(, but not sin (
                (?<name>
                    [A-Za-z]
                    [A-Za-z0-9]*
                )
                \(
                '''
    OPERATORS = '+-*/^'
    OPERATOR = r'[' + regex.escape(OPERATORS) + r']'
    SPACE = r'\s+'

    # All possible lexemes. Alternatives are mutually exclusive, so the first
    # one to match is also the longest.
    GRAMMAR = r'(?<number>' + NUMBER + r')|' \
              r'(?<external>' + EXTERNAL + r')|' \
              r'(?<lparen>\()|' \
              r'(?<rparen>\))|' \
              r'(?<comma>,)|' \
              r'(?<operator>' + OPERATOR + r')|' \
              r'(?<space>' + SPACE + r')'
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.VERSION1,
                    regex.VERBOSE,
                    regex.ASCII},
                   0)
    PATTERN = regex.compile(GRAMMAR, flags=FLAGS)

    def lex(self, line):
        '''
        Take a line and yield all lexeme matches, whitespace included.

        Raise LexError on the first segment that doesn't lex.
        '''
        position = 0
        while position < len(line):
            match = type(self).PATTERN.match(line, position)
            if match is None:
                raise LexError(line[position:], position)
            yield match
            position = match.end()

    def matchedgroups(self, match):
        '''
        Return the named groups that took part in the match.
        '''
        return {key: value
                for key, value
                in match.groupdict().items()
                if value is not None}

    def token(self, match):
        '''
        Convert lexeme match to token, or None for whitespace.
        '''
        groups = self.matchedgroups(match)
        if 'number' in groups:
            value = float(groups['number'])
            if math.isinf(value):
                raise LexError(groups['number'], match.start(),
                               reason='Number out of range')
            return Number(value)
        elif 'external' in groups:
            return ExternalCall(groups['name'])
        elif 'lparen' in groups:
            return LeftParen()
        elif 'rparen' in groups:
            return RightParen()
        elif 'comma' in groups:
            return Comma()
        elif 'operator' in groups:
            return Operator(groups['operator'])
        return None

    def tokenize(self, line):
        '''
        Return the list of tokens in line.

        All or nothing: a bad segment anywhere fails the whole line.
        '''
        return [token
                for token
                in map(self.token, self.lex(line))
                if token is not None]


def tokenize(text):
    return Scanner().tokenize(text)


def render(tokens):
    '''
    Render tokens back into text, space separated.
    '''
    return ' '.join(map(str, tokens))
