"""Tokenizer and infix-to-postfix converter for arithmetic expressions.

A token is a `float` (a number), an `Op` from `OPS`, or one of the strings
"(" and ")".
"""
import math
import operator
import re
from typing import Callable, NamedTuple


class CalculatorError(Exception):
    pass


class InvalidCharacterError(CalculatorError):
    def __init__(self, char):
        super().__init__(char)
        self.char = char

    def __str__(self):
        return f"{self.char} is Invalid"


class ExpressionSyntaxError(CalculatorError):
    def __init__(self, reason=None):
        super().__init__(reason)
        self.reason = reason

    def __str__(self):
        return "Syntax Error." if self.reason is None else f"Syntax Error: {self.reason}."


class DivisionByZeroError(CalculatorError, ZeroDivisionError):
    def __str__(self):
        return "Invalid division by zero."


class NumericOverflowError(CalculatorError, OverflowError):
    def __init__(self, what):
        super().__init__(what)
        self.what = what

    def __str__(self):
        return f"Numeric overflow: {self.what}."


class Op(NamedTuple):
    op: str
    prec: int
    fun: Callable

    def __call__(self, lhs, rhs):
        try:
            ans = self.fun(lhs, rhs)
        except ZeroDivisionError:
            raise DivisionByZeroError() from None
        if not math.isfinite(ans):
            raise NumericOverflowError(f"{lhs!r} {self.op} {rhs!r}")
        return ans

    def __repr__(self):
        return f"op({self.op!r:})"

    def left_first(self, other):
        # All operators are left-associative, so equal precedence pops too.
        return self.prec >= other.prec


OP_GROUPS = """
add+ sub-
mul* truediv/
""".strip()
OPS = {
    o: Op(o, prec, getattr(operator, fun))
    for prec, op_groups in enumerate(OP_GROUPS.split("\n"), 1)
    for [(fun, o)] in map(re.compile(r"^(\w+)(\W)$").findall, op_groups.split())
}

PARENS = ("(", ")")
NUMERAL = re.compile(r"[0-9.]+")
ALPHABET = frozenset("0123456789.()").union(OPS)


def canonicalize_num(num):
    return repr(integer if (integer := int(num)) == num else num)


def to_str(tokens):
    """Render `tokens` space separated.

    >>> to_str([1.0, OPS['+'], '(', -2.5, ')'])
    '1 + ( -2.5 )'
    """
    return " ".join(
        tok.op if isinstance(tok, Op) else tok if tok in PARENS else canonicalize_num(tok)
        for tok in tokens
    )


def parse_number(text):
    """Parse a numeral run. Only finite doubles are numbers; a numeral too
    large for a double raises NumericOverflowError, the same as an operation
    whose result overflows.
    """
    if text.count(".") > 1:
        raise ExpressionSyntaxError("double decimal")
    try:
        num = float(text)
    except ValueError:
        raise ExpressionSyntaxError(f"malformed number {text!r}") from None
    if not math.isfinite(num):
        raise NumericOverflowError(f"number out of range {text!r}")
    return num


def _unary_position(tokens):
    return not tokens or tokens[-1] == "(" or isinstance(tokens[-1], Op)


def tokenize(raw):
    """Split `raw` into a list of tokens, rejecting malformed input.

    Whitespace is ignored, "--" reads as "+", and a minus in unary position
    becomes part of the number it precedes.

    >>> tokenize("-1*-2-4")
    [-1.0, op('*'), -2.0, op('-'), 4.0]
    >>> tokenize("1 -- 2") == tokenize("1+2")
    True
    >>> tokenize("2++4")
    Traceback (most recent call last):
    ...
    parser.ExpressionSyntaxError: Syntax Error: double operator.
    """
    s = re.sub(r"\s+", "", raw)
    if not s:
        raise ExpressionSyntaxError("empty expression")
    tokens = []
    i = 0
    while i < len(s):
        c = s[i]
        nxt = s[i + 1 : i + 2]
        if c == "-" and nxt == "-":
            if tokens and isinstance(tokens[-1], Op):
                raise ExpressionSyntaxError("double operator")
            tokens.append(OPS["+"])
            i += 2
        elif c in OPS and nxt in OPS and nxt != "-":
            raise ExpressionSyntaxError("double operator")
        elif c == "-" and _unary_position(tokens):
            if not (m := NUMERAL.match(s, i + 1)):
                if nxt and nxt not in ALPHABET:
                    raise InvalidCharacterError(nxt)
                raise ExpressionSyntaxError("unary minus must precede a number")
            tokens.append(parse_number(c + m.group()))
            i = m.end()
        elif c in OPS:
            tokens.append(OPS[c])
            i += 1
        elif c in PARENS:
            tokens.append(c)
            i += 1
        elif m := NUMERAL.match(s, i):
            tokens.append(parse_number(m.group()))
            i = m.end()
        else:
            raise InvalidCharacterError(c)
    if isinstance(tokens[0], Op) or isinstance(tokens[-1], Op):
        raise ExpressionSyntaxError("expression cannot start or end with an operator")
    return tokens


def to_postfix(tokens):
    """Reorder infix `tokens` into postfix order (shunting-yard).

    >>> to_str(to_postfix(tokenize("2+4*3")))
    '2 4 3 * +'
    >>> to_str(to_postfix(tokenize("(25-10*(5/-29))")))
    '25 10 5 -29 / * -'
    """
    out = []
    ops = []
    for tok in tokens:
        if tok == "(":
            ops.append(tok)
        elif tok == ")":
            while (top := ops.pop() if ops else None) != "(":
                if top is None:
                    raise ExpressionSyntaxError("unbalanced parenthesis")
                out.append(top)
        elif isinstance(tok, Op):
            while ops and ops[-1] != "(" and ops[-1].left_first(tok):
                out.append(ops.pop())
            ops.append(tok)
        else:
            out.append(tok)
    while ops:
        if (top := ops.pop()) == "(":
            raise ExpressionSyntaxError("unbalanced parenthesis")
        out.append(top)
    return out
