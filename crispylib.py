#!/usr/bin/env python
"""crispylib - Stuff used by crispy"""

# ---------------------------
#  The Process in a Nutshell
# ---------------------------
#
#             +------------+     +---------+     +------------+
# [input] >>> | tokenize() | >>> | parse() | >>> | evaluate() | >>> [result]
#          |  +------------+  |  +---------+  |  +------------+  |
#          |                  |       |       |                  |
#        string         list of tokens |   expression tree    fraction
#                                     v
#                               +-----------+
#                               |  write()  | >>> [canonical text]
#                               +-----------+

import io
import math
import operator
import re

from fractions import Fraction
from functools import reduce


class Number(Fraction):
    """An integer literal read from the source, as an exact rational."""
    def __new__(cls, value, pos=None):
        self = Fraction.__new__(cls, value)
        self.pos = pos
        return self


class CalcSyntaxError(ValueError):
    pass


class CalcEvaluationError(ValueError):
    pass


class Operator(object):
    """The base class for operators.

    Do not instantiate this class directly; use create_operator_class().
    The class name doubles as the operator's printed name, and `name` is
    the token it is spelled with in the source.
    """
    name = None
    func = None
    identity = None

    def __init__(self, pos=None):
        if self.__class__ is Operator:
            raise NotImplementedError("Operator class is abstract; it cannot be called directly")
        self.pos = pos

    def __call__(self, *args):
        """Call the operator with the specified arguments."""
        return self.__class__.func(*args)

    def __eq__(self, other):
        return type(self) is type(other)

    def __hash__(self):
        return hash(self.__class__)

    def __repr__(self):
        return self.__class__.__name__

    def __str__(self):
        return self.__class__.name

    def fold(self, values):
        """Combine a list of values left to right.

        A lone value is folded into the operator's identity, so that
        (- 5) means 0 - 5 and (/ 4) means 1 / 4.
        """
        if len(values) > 1:
            return reduce(self, values[1:], values[0])
        return self(self.identity, values[0])


def wrap_div_by_zero(func):
    """Turn the ZeroDivisionError raised by Fraction into an evaluation error.

    The default message is "Fraction(1, 0)", which says more about Python
    than about the expression being evaluated.
    """
    def newfunc(*args):
        try:
            return func(*args)
        except ZeroDivisionError:
            raise CalcEvaluationError("divide by zero")
    return newfunc


def create_operator_class(clsname, name_, func_, identity_):
    """Factory function for creating a new operator class."""
    class newop(Operator):
        name = name_
        func = staticmethod(wrap_div_by_zero(func_))
        identity = Fraction(identity_)
    newop.__name__ = clsname
    return newop


def modulo(a, b):
    """Remainder of the reduced quotient a/b.

    The remainder takes the sign of the numerator, so (% -7 2) is -1.
    """
    q = a / b
    r = abs(q.numerator) % q.denominator
    return Fraction(-r if q.numerator < 0 else r)


def power(base, exp):
    """Raise base to exp in floating point, truncated back to an integer."""
    try:
        result = float(base) ** float(exp)
    except OverflowError:
        raise CalcEvaluationError("exponent result out of range")
    if isinstance(result, complex) or math.isnan(result):
        raise CalcEvaluationError("exponent has no real result")
    if math.isinf(result):
        raise CalcEvaluationError("exponent result out of range")
    return Fraction(int(result))


operators = {
    '+':   create_operator_class('Add',      '+',   operator.add,     0),
    '-':   create_operator_class('Subtract', '-',   operator.sub,     0),
    '/':   create_operator_class('Divide',   '/',   operator.truediv, 1),
    '*':   create_operator_class('Multiply', '*',   operator.mul,     1),
    '%':   create_operator_class('Modulo',   '%',   modulo,           1),
    '^':   create_operator_class('Exponent', '^',   power,            1),
    'min': create_operator_class('Min',      'min', min,              0),
    'max': create_operator_class('Max',      'max', max,              0),
}


class Bracket(object):
    """One of ( ) { }, as a token."""
    def __init__(self, char, pos=None):
        self.char = char
        self.pos = pos

    @property
    def opening(self):
        return self.char in expression_classes

    def __repr__(self):
        return 'Bracket(%r)' % self.char

    def __str__(self):
        return self.char


class Expression(object):
    """An operator applied to one or more operands.

    Do not instantiate this class directly; use EvaluatedExpression for
    ( ... ) and QuotedExpression for { ... }. The two differ only in how
    they are printed.
    """
    brackets = None

    def __init__(self, op, operands):
        if self.__class__ is Expression:
            raise NotImplementedError("Expression class is abstract; it cannot be called directly")
        operands = list(operands)
        if not operands:
            raise CalcSyntaxError("%r needs at least one operand" % op)
        self.op = op
        self.operands = operands

    def __eq__(self, other):
        return (type(self) is type(other)
                and self.op == other.op
                and self.operands == other.operands)

    __hash__ = None

    def __repr__(self):
        return '%s(%r, %r)' % (self.__class__.__name__, self.op, self.operands)

    def __str__(self):
        return to_string(self)


class EvaluatedExpression(Expression):
    brackets = '()'


class QuotedExpression(Expression):
    brackets = '{}'


expression_classes = {
    '(': EvaluatedExpression,
    '{': QuotedExpression,
}

token_re = re.compile(r"""
    \s*
    (?:
        (?P<number>  [+-]?[0-9]+)  # optional sign, then digits
      | (?P<bracket> [(){}])
      | (?P<symbol>  \S)           # anything that didn't match the others
    )
""", re.VERBOSE)

# Words first; there are no identifiers to confuse them with
operator_re = re.compile(r"\s*(?P<operator>min|max|[-+/*%^])")


def should_be_operator(prev_token):
    """Helper function for tokenize()."""
    # The only place an operator may appear is straight after an opening
    # bracket; everywhere else a '-' or '+' starts a signed integer
    return isinstance(prev_token, Bracket) and prev_token.opening


def tokenize(s):
    """Convert a string into a list of tokens."""
    s = s.rstrip()
    pos = 0
    tokens = []

    while pos < len(s):
        prev_token = tokens[-1] if tokens else None

        if should_be_operator(prev_token):
            m = operator_re.match(s, pos)
            if m is None:
                m = token_re.match(s, pos)
                raise CalcSyntaxError("invalid operator at %d: %s" % (m.start(m.lastgroup), m.group(m.lastgroup)))
            tokens.append(operators[m.group('operator')](m.start('operator')))

        else:
            m = token_re.match(s, pos)
            d = m.groupdict()
            if d['number'] is not None:
                tokens.append(Number(int(d['number']), m.start('number')))
            elif d['bracket'] is not None:
                tokens.append(Bracket(d['bracket'], m.start('bracket')))
            else:
                raise CalcSyntaxError("unexpected character at %d: %s" % (m.start('symbol'), d['symbol']))

        # Update the position to read the next token
        pos = m.end()
    return tokens


def parse_expression(tokens, i):
    """Parse the bracketed expression opening at tokens[i].

    Returns the expression and the index of the token following it.
    """
    opener = tokens[i]
    cls = expression_classes[opener.char]
    closer = cls.brackets[1]

    i += 1
    if i >= len(tokens):
        raise CalcSyntaxError("missing operator after '%s' at %d" % (opener, opener.pos))
    op = tokens[i]
    # tokenize() only ever puts an operator here
    assert isinstance(op, Operator), repr(op)

    operands = []
    i += 1
    while True:
        if i >= len(tokens):
            raise CalcSyntaxError("missing '%s' to close '%s' at %d" % (closer, opener, opener.pos))
        token = tokens[i]
        if isinstance(token, Number):
            operands.append(token)
            i += 1
        elif token.opening:
            sub, i = parse_expression(tokens, i)
            operands.append(sub)
        elif token.char != closer:
            raise CalcSyntaxError("'%s' at %d does not close '%s' at %d" % (token, token.pos, opener, opener.pos))
        else:
            break

    if not operands:
        raise CalcSyntaxError("%r at %d needs at least one operand" % (op, op.pos))
    return cls(op, operands), i + 1


def parse(s):
    """Parse a string into an EvaluatedExpression.

    The whole string has to be one parenthesized expression, give or take
    surrounding whitespace; a braced expression is only allowed inside one.
    """
    tokens = tokenize(s)
    if not tokens:
        raise CalcSyntaxError("empty expression")

    first = tokens[0]
    if not (isinstance(first, Bracket) and first.char == '('):
        raise CalcSyntaxError("expression must start with '(' at %d" % first.pos)

    expr, i = parse_expression(tokens, 0)
    if i < len(tokens):
        raise CalcSyntaxError("unexpected '%s' after the end of the expression at %d" % (tokens[i], tokens[i].pos))
    return expr


def evaluate(operand):
    """Reduce an operand to a single Fraction.

    Quoted expressions are evaluated exactly like evaluated ones.
    """
    if isinstance(operand, Expression):
        assert isinstance(operand.op, Operator), repr(operand.op)
        values = [evaluate(x) for x in operand.operands]
        return operand.op.fold(values)
    elif isinstance(operand, Fraction):
        return operand
    else:
        raise TypeError("found alien object: %s" % repr(operand))


def calculate(s):
    """Parse and evaluate a string in one go."""
    return evaluate(parse(s))


def write(obj, out):
    """Write the canonical form of a value or expression to out.

    Returns out, so calls can be chained.
    """
    if isinstance(obj, Expression):
        out.write('%r:%s' % (obj.op, obj.brackets[0]))
        for operand in obj.operands:
            write(operand, out)
        out.write(obj.brackets[1])
    elif obj.denominator == 1:
        out.write('%d ' % obj.numerator)
    else:
        out.write('%d/%d ' % (obj.numerator, obj.denominator))
    return out


def to_string(obj):
    return write(obj, io.StringIO()).getvalue()


def main():
    """Test a few things."""
    for s in ("(+ 1 2)",
              "(- 10 3 2)",          # left to right
              "(- 5)",               # one operand
              "(/ 1 3)",
              "(% 7 2)",
              "(^ 2 10)",
              "(min 3 {max 5 1} 1)", # quoted
              ):
        expr = parse(s)
        print(s.ljust(22), "==>", to_string(expr), "=", to_string(evaluate(expr)))


if __name__ == "__main__":
    main()
