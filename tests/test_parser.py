'''
Parser tests
'''

import regex

from infix.util import ParseError, UnknownFunctionError
from infix.scanner import tokenize, render, Number, Operator
from infix.parser import (Parser, Op, Function, Literal, BinaryOp, UnaryOp,
                          ExternalCall, parse)

from pytest import raises, mark


def p(text):
    return parse(tokenize(text))


@mark.parametrize('name, function', [
    ('Sin', Function.SIN),
    ('ASin', Function.ASIN),
    ('Cos', Function.COS),
    ('ACOS', Function.ACOS),
    ('tan', Function.TAN),
    ('ATan', Function.ATAN),
    ('aTaN2', Function.ATAN2),
])
def test_function_lookup(name, function):
    assert Function.lookup(name) is function


def test_single_literal():
    assert parse([Number(1.0)]) == Literal(1.0)


@mark.parametrize('symbol, op', [
    ('+', Op.ADD),
    ('-', Op.SUB),
    ('*', Op.MUL),
    ('/', Op.DIV),
    ('^', Op.POW),
])
def test_binary(symbol, op):
    assert p('1 {0} 2'.format(symbol)) == BinaryOp(op,
                                                   Literal(1.0),
                                                   Literal(2.0))


def test_parens():
    assert p('(1)') == Literal(1.0)
    assert p('(1) + (2)') == BinaryOp(Op.ADD, Literal(1.0), Literal(2.0))
    assert p('((3))') == Literal(3.0)


def test_precedence():
    assert p('1 + 2 * 3') == BinaryOp(Op.ADD,
                                      Literal(1.0),
                                      BinaryOp(Op.MUL,
                                               Literal(2.0),
                                               Literal(3.0)))
    assert p('1 * 2 + 3') == BinaryOp(Op.ADD,
                                      BinaryOp(Op.MUL,
                                               Literal(1.0),
                                               Literal(2.0)),
                                      Literal(3.0))
    assert p('2 * 3 ^ 2') == BinaryOp(Op.MUL,
                                      Literal(2.0),
                                      BinaryOp(Op.POW,
                                               Literal(3.0),
                                               Literal(2.0)))


def test_parens_override_precedence():
    assert p('(1 + 2) * 3') == BinaryOp(Op.MUL,
                                        BinaryOp(Op.ADD,
                                                 Literal(1.0),
                                                 Literal(2.0)),
                                        Literal(3.0))


@mark.parametrize('text, op', [
    ('8 - 3 - 2', Op.SUB),
    ('8 / 4 / 2', Op.DIV),
    # Folds left, like the rest
    ('2 ^ 3 ^ 2', Op.POW),
])
def test_left_associative(text, op):
    a, b, c = (Literal(float(n)) for n in text.split()[::2])
    assert p(text) == BinaryOp(op, BinaryOp(op, a, b), c)


def test_unary():
    assert p('-1') == UnaryOp(Op.SUB, Literal(1.0))
    assert p('+1') == Literal(1.0)
    assert p('2 ^ -1') == BinaryOp(Op.POW,
                                   Literal(2.0),
                                   UnaryOp(Op.SUB, Literal(1.0)))
    assert p('1 - -1') == BinaryOp(Op.SUB,
                                   Literal(1.0),
                                   UnaryOp(Op.SUB, Literal(1.0)))


def test_unary_binds_to_primary():
    assert p('-2 ^ 2') == BinaryOp(Op.POW,
                                   UnaryOp(Op.SUB, Literal(2.0)),
                                   Literal(2.0))
    assert p('-(-1)') == UnaryOp(Op.SUB, UnaryOp(Op.SUB, Literal(1.0)))


@mark.parametrize('text', ['--1', '+-1', '-+1', '++1'])
def test_no_repeated_sign(text):
    with raises(ParseError):
        p(text)


def test_external():
    assert p('sin(1)') == ExternalCall(Function.SIN, (Literal(1.0),))
    assert p('ATAN2(1, 2 + 3)') == ExternalCall(Function.ATAN2,
                                                (Literal(1.0),
                                                 BinaryOp(Op.ADD,
                                                          Literal(2.0),
                                                          Literal(3.0))))


def test_external_arity_not_checked():
    # Only evaluation knows how many arguments a function takes.
    assert p('sin(1, 2)') == ExternalCall(Function.SIN,
                                          (Literal(1.0), Literal(2.0)))


def test_nested_external():
    assert p('cos(sin(0)) * 2') == BinaryOp(
        Op.MUL,
        ExternalCall(Function.COS,
                     (ExternalCall(Function.SIN, (Literal(0.0),)),)),
        Literal(2.0))


def test_unknown_function():
    with raises(UnknownFunctionError, match='foo') as e:
        p('foo(1)')
    assert e.value.name == 'foo'
    assert isinstance(e.value, ParseError)


def test_unknown_function_before_arguments():
    with raises(UnknownFunctionError):
        p('foo(1 +')


def test_empty_arguments():
    with raises(ParseError):
        p('sin()')


def test_unterminated_call():
    with raises(ParseError, match=regex.escape("expected ',' or ')'")):
        p('sin(1')
    with raises(ParseError, match=regex.escape("Expected ',' or ')'")):
        p('sin(1 (')


@mark.parametrize('text', ['1 +', '(1', '1 2', '', '*', ')', '1 )',
                           '(', '()', '1 + * 2', ','])
def test_malformed(text):
    with raises(ParseError):
        p(text)


def test_unexpected_end():
    with raises(ParseError, match='Unexpected end of input') as e:
        p('1 +')
    assert e.value.found is None
    assert e.value.expected == 'expression'


def test_unmatched_paren():
    with raises(ParseError, match=regex.escape("Expected ')'")) as e:
        p('(1 , 2)')
    assert e.value.expected == "')'"


def test_unconsumed():
    with raises(ParseError, match='Unconsumed tokens 2.0 3.0') as e:
        p('1 2 3')
    assert e.value.found == Number(2.0)


def test_unexpected_token():
    with raises(ParseError, match=regex.escape('Unexpected token *')) as e:
        parse([Operator('*')])
    assert e.value.found == Operator('*')


def test_round_trip():
    for text in ['1 + 2 * 3', '(8 - 3) - 2', '-(1.5 ^ 2) / +4',
                 '2 ^ -1 * (3 + (4))']:
        tokens = tokenize(text)
        assert parse(tokenize(render(tokens))) == parse(tokens)


def test_parser_consumes_only_its_copy():
    tokens = tokenize('1 + 2')
    Parser(tokens).parse()
    assert len(tokens) == 3


def test_deep_nesting():
    assert p('(' * 10000 + '1' + ')' * 10000) == Literal(1.0)
    assert p('sin(' * 5000 + '0' + ')' * 5000).function is Function.SIN


def test_deep_nesting_unbalanced():
    with raises(ParseError, match='Unexpected end of input'):
        p('(' * 10000 + '1' + ')' * 9999)
    with raises(ParseError, match='Unconsumed tokens'):
        p('(' * 9999 + '1' + ')' * 10000)


def test_long_flat_expression():
    tree = p(' - '.join(['1'] * 5000))
    assert tree.operator is Op.SUB
    assert tree.right == Literal(1.0)


def test_repr():
    assert repr(p('-sin(1)')) == (
        "UnaryOp(operator=<Op.SUB: '-'>, "
        "operand=ExternalCall(function=<Function.SIN: 'sin'>, "
        "arguments=(Literal(value=1.0),)))")
    assert repr(p('atan2(1, 2 * 3)')) == (
        "ExternalCall(function=<Function.ATAN2: 'atan2'>, "
        "arguments=(Literal(value=1.0), "
        "BinaryOp(operator=<Op.MUL: '*'>, left=Literal(value=2.0), "
        "right=Literal(value=3.0))))")


def test_repr_deep():
    text = repr(p(' + '.join(['1'] * 5000)))
    assert text.startswith("BinaryOp(operator=<Op.ADD: '+'>, left=BinaryOp(")
    assert text.count('Literal(value=1.0)') == 5000
