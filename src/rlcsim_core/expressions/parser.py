# src/rlcsim_core/expressions/parser.py

"""
Parses calculator-style input expressions into Python AST.

Users write custom inputs the way they would in a graphing calculator:
`^` for powers, `c ? a : b` for conditionals, `&&`/`||`/`!` next to the word
operators. Python's own `ast.parse` cannot read that syntax, so this module
implements a small recursive-descent parser that produces standard
`ast.Expression` trees. Everything downstream (symbol analysis, compilation,
evaluation) then works on ordinary Python AST.

Precedence, lowest first:

    c ? a : b                 (right-associative)
    or  ||
    and &&
    <  <=  >  >=  ==  !=      (chainable, as in Python)
    +  -
    *  /  %
    -x  +x  not x  !x
    x ^ y   x ** y            (right-associative; -2^2 == -4, 2^-1 == 0.5)
    f(a, b)   (expr)   number   name
"""

import ast
import logging
import re
from typing import List, NamedTuple

from .exceptions import ExpressionSyntaxError

logger = logging.getLogger(__name__)

_TOKEN_REGEX = re.compile(r"""
    (?P<number>(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?)
  | (?P<name>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<op>\*\*|<=|>=|==|!=|&&|\|\||[-+*/%^()?:,<>!])
  | (?P<space>\s+)
""", re.VERBOSE)

_COMPARISON_OPS = {
    "<": ast.Lt,
    "<=": ast.LtE,
    ">": ast.Gt,
    ">=": ast.GtE,
    "==": ast.Eq,
    "!=": ast.NotEq,
}
_ADDITIVE_OPS = {"+": ast.Add, "-": ast.Sub}
_MULTIPLICATIVE_OPS = {"*": ast.Mult, "/": ast.Div, "%": ast.Mod}
_WORD_OPERATORS = {"and", "or", "not"}

#: Name of the helper that turns logical results into booleans, so that
#: `2 or 0` yields true rather than Python's operand-returning `2`.
TRUTH_HELPER = "_rlc_truth"


class Token(NamedTuple):
    kind: str   # 'number', 'name', 'op' or 'end'
    text: str
    position: int


def tokenize(expression: str) -> List[Token]:
    """Splits an expression into tokens, terminated by an 'end' token."""
    tokens: List[Token] = []
    position = 0
    while position < len(expression):
        match = _TOKEN_REGEX.match(expression, position)
        if match is None:
            raise ExpressionSyntaxError(
                expression=expression,
                position=position,
                details=f"Unexpected character '{expression[position]}'"
            )
        kind = match.lastgroup
        if kind != "space":
            tokens.append(Token(kind, match.group(), position))
        position = match.end()
    tokens.append(Token("end", "", len(expression)))
    return tokens


class _ExpressionParser:
    """Single-use recursive-descent parser over a token list."""

    def __init__(self, expression: str):
        self._expression = expression
        self._tokens = tokenize(expression)
        self._index = 0

    # --- Token helpers ---

    def _peek(self) -> Token:
        return self._tokens[self._index]

    def _advance(self) -> Token:
        token = self._tokens[self._index]
        self._index += 1
        return token

    def _at(self, *texts: str) -> bool:
        token = self._peek()
        return token.kind in ("op", "name") and token.text in texts

    def _error(self, token: Token, details: str) -> ExpressionSyntaxError:
        return ExpressionSyntaxError(expression=self._expression, position=token.position, details=details)

    def _expect(self, text: str) -> Token:
        token = self._peek()
        if token.kind == "op" and token.text == text:
            return self._advance()
        if token.kind == "end":
            raise self._error(token, f"'{text}' expected, found end of expression")
        raise self._error(token, f"'{text}' expected, found '{token.text}'")

    def _truth(self, node: ast.expr) -> ast.expr:
        return ast.Call(func=ast.Name(id=TRUTH_HELPER, ctx=ast.Load()), args=[node], keywords=[])

    # --- Grammar ---

    def parse(self) -> ast.Expression:
        body = self._conditional()
        token = self._peek()
        if token.kind != "end":
            raise self._error(token, f"Unexpected token '{token.text}'")
        tree = ast.Expression(body=body)
        return ast.fix_missing_locations(tree)

    def _conditional(self) -> ast.expr:
        test = self._logical_or()
        if self._at("?"):
            self._advance()
            body = self._conditional()
            self._expect(":")
            orelse = self._conditional()
            return ast.IfExp(test=test, body=body, orelse=orelse)
        return test

    def _logical_or(self) -> ast.expr:
        values = [self._logical_and()]
        while self._at("or", "||"):
            self._advance()
            values.append(self._logical_and())
        if len(values) == 1:
            return values[0]
        return self._truth(ast.BoolOp(op=ast.Or(), values=values))

    def _logical_and(self) -> ast.expr:
        values = [self._comparison()]
        while self._at("and", "&&"):
            self._advance()
            values.append(self._comparison())
        if len(values) == 1:
            return values[0]
        return self._truth(ast.BoolOp(op=ast.And(), values=values))

    def _comparison(self) -> ast.expr:
        left = self._additive()
        ops, comparators = [], []
        while self._peek().kind == "op" and self._peek().text in _COMPARISON_OPS:
            ops.append(_COMPARISON_OPS[self._advance().text]())
            comparators.append(self._additive())
        if not ops:
            return left
        return ast.Compare(left=left, ops=ops, comparators=comparators)

    def _additive(self) -> ast.expr:
        node = self._multiplicative()
        while self._peek().kind == "op" and self._peek().text in _ADDITIVE_OPS:
            op = _ADDITIVE_OPS[self._advance().text]()
            node = ast.BinOp(left=node, op=op, right=self._multiplicative())
        return node

    def _multiplicative(self) -> ast.expr:
        node = self._unary()
        while self._peek().kind == "op" and self._peek().text in _MULTIPLICATIVE_OPS:
            op = _MULTIPLICATIVE_OPS[self._advance().text]()
            node = ast.BinOp(left=node, op=op, right=self._unary())
        return node

    def _unary(self) -> ast.expr:
        if self._at("-"):
            self._advance()
            return ast.UnaryOp(op=ast.USub(), operand=self._unary())
        if self._at("+"):
            self._advance()
            return ast.UnaryOp(op=ast.UAdd(), operand=self._unary())
        if self._at("not", "!"):
            self._advance()
            return ast.UnaryOp(op=ast.Not(), operand=self._unary())
        return self._power()

    def _power(self) -> ast.expr:
        base = self._primary()
        if self._at("^", "**"):
            self._advance()
            # The exponent may carry its own sign and power: 2^-1, 2^3^2.
            return ast.BinOp(left=base, op=ast.Pow(), right=self._unary())
        return base

    def _primary(self) -> ast.expr:
        token = self._peek()
        if token.kind == "number":
            self._advance()
            return ast.Constant(value=float(token.text))

        if token.kind == "name" and token.text not in _WORD_OPERATORS:
            self._advance()
            if self._at("("):
                return self._call(token)
            return ast.Name(id=token.text, ctx=ast.Load())

        if token.kind == "op" and token.text == "(":
            self._advance()
            node = self._conditional()
            self._expect(")")
            return node

        if token.kind == "end":
            raise self._error(token, "Unexpected end of expression")
        raise self._error(token, f"Value expected, found '{token.text}'")

    def _call(self, name_token: Token) -> ast.expr:
        self._expect("(")
        args: List[ast.expr] = []
        if not self._at(")"):
            args.append(self._conditional())
            while self._at(","):
                self._advance()
                args.append(self._conditional())
        self._expect(")")
        return ast.Call(func=ast.Name(id=name_token.text, ctx=ast.Load()), args=args, keywords=[])


def parse_expression(expression: str) -> ast.Expression:
    """
    Parses a calculator-style expression into an `ast.Expression`.

    Raises:
        ExpressionSyntaxError: If the text is not a valid expression. The error
                               carries the 0-based position of the offending token.
    """
    tree = _ExpressionParser(expression).parse()
    logger.debug("Parsed expression '%s' -> %s", expression, ast.dump(tree.body))
    return tree
