"""Evaluate infix arithmetic expressions.

The expression is tokenized, reordered into postfix (Reverse Polish) form and
then reduced on an operand stack:

>>> calculate("(4-2)*3.5")
7.0
>>> calculate("-5+-8+11*2")
9.0
"""
import argparse
import logging
import os
import sys

from parser import PARENS, CalculatorError, ExpressionSyntaxError, Op, to_postfix, to_str, tokenize

DEBUG = bool(os.getenv("DEBUG", False))

PROMPT = "Enter a mathematical expression in infix notation."
NO_INPUT = "No input was given."

logger = logging.getLogger(__name__)


def evaluate(postfix):
    """Reduce a postfix token sequence to a single float.

    The result is always finite: dividing by zero raises DivisionByZeroError
    and any other step that leaves the range of a double raises
    NumericOverflowError.

    >>> evaluate(to_postfix(tokenize("4*5/2")))
    10.0
    >>> evaluate(to_postfix(tokenize("5/0")))
    Traceback (most recent call last):
    ...
    parser.DivisionByZeroError: Invalid division by zero.
    """
    stack = []
    for tok in postfix:
        if isinstance(tok, Op):
            if len(stack) < 2:
                raise ExpressionSyntaxError(f"missing operand for {tok.op}")
            rhs = stack.pop()
            lhs = stack.pop()
            stack.append(tok(lhs, rhs))
        elif tok in PARENS:
            raise ExpressionSyntaxError("parenthesis in postfix expression")
        else:
            stack.append(float(tok))
    if len(stack) != 1:
        raise ExpressionSyntaxError("malformed expression")
    (ans,) = stack
    return ans


def calculate(expr):
    debug = logger.isEnabledFor(logging.DEBUG)
    tokens = tokenize(expr)
    if debug:
        logger.debug("tokens: %s", to_str(tokens))
    postfix = to_postfix(tokens)
    if debug:
        logger.debug("postfix: %s", to_str(postfix))
    return evaluate(postfix)


def main(argv=None):
    ap = argparse.ArgumentParser(
        usage="%(prog)s [--postfix] [-v] [expression ...]",
        description="Evaluate an arithmetic expression written in infix notation. "
        "Every argument that is not an option is part of the expression; "
        "the words are joined without spaces.",
    )
    ap.add_argument("--postfix", action="store_true", help="print the postfix form instead of the value")
    ap.add_argument("-v", "--verbose", action="store_true", help="log the intermediate token sequences")
    # Expressions like -1*-2 look like options, so the words are whatever argparse leaves over.
    args, words = ap.parse_known_args(argv)
    if words[:1] == ["--"]:
        words = words[1:]

    logging.basicConfig(
        level=logging.DEBUG if args.verbose or DEBUG else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if words:
        expr = "".join(words)
    else:
        print(PROMPT)
        try:
            expr = input()
        except EOFError:
            expr = ""

    if not expr.strip():
        print(NO_INPUT)
        return 0

    try:
        if args.postfix:
            print(to_str(to_postfix(tokenize(expr))))
        else:
            print(f"{expr} = {calculate(expr)}")
    except CalculatorError as exc:
        logger.debug("failed to evaluate %r", expr, exc_info=True)
        print(exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
