# src/rlcsim_core/expressions/evaluator.py

"""
Evaluates custom input expressions such as `t < 1 ? 0 : sin(2*t)`.

`ExpressionEvaluator` is the default implementation of the capability the
response engine depends on: a callable `(expression, bindings) -> float` that
fails with a descriptive message. Any other callable with that signature can be
injected into the engine instead.

The pipeline:

1.  `parse_expression` turns the text into a Python `ast.Expression`.
2.  `_SymbolVisitor` walks the tree and records every value name and every
    called function, so undefined names are reported before any arithmetic.
3.  The tree is compiled once and evaluated with `eval()` in a namespace that
    contains nothing but the whitelisted numpy functions, the constants and
    the caller's bindings. The parser never emits attribute access,
    subscripts or lambdas, so nothing outside that namespace is reachable.
4.  The result must be a finite real number; booleans become 1.0 / 0.0.
"""

import ast
import logging
import math
from dataclasses import dataclass
from types import CodeType
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional, Set

import numpy as np

from .exceptions import ExpressionError, ExpressionEvaluationError, ExpressionScopeError
from .parser import TRUTH_HELPER, parse_expression

logger = logging.getLogger(__name__)


DEFAULT_FUNCTIONS: Dict[str, Callable[..., Any]] = {
    "sin": np.sin,
    "cos": np.cos,
    "tan": np.tan,
    "asin": np.arcsin,
    "acos": np.arccos,
    "atan": np.arctan,
    "atan2": np.arctan2,
    "sinh": np.sinh,
    "cosh": np.cosh,
    "tanh": np.tanh,
    "exp": np.exp,
    "log": np.log,
    "log10": np.log10,
    "log2": np.log2,
    "sqrt": np.sqrt,
    "abs": np.abs,
    "sign": np.sign,
    "floor": np.floor,
    "ceil": np.ceil,
    "round": np.round,
    "min": min,
    "max": max,
    "pow": np.power,
    "mod": np.mod,
}

DEFAULT_CONSTANTS: Dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
}


class _SymbolVisitor(ast.NodeVisitor):
    """Collects value names and called function names from a parsed expression."""

    def __init__(self):
        self.symbols: Set[str] = set()
        self.functions: Set[str] = set()

    def visit_Call(self, node: ast.Call):
        if isinstance(node.func, ast.Name):
            if node.func.id != TRUTH_HELPER:
                self.functions.add(node.func.id)
        else:
            self.visit(node.func)
        for arg in node.args:
            self.visit(arg)

    def visit_Name(self, node: ast.Name):
        self.symbols.add(node.id)


def _truth(value: Any) -> bool:
    return bool(value)


@dataclass(frozen=True)
class CompiledExpression:
    """A parsed, checked and compiled expression, ready to evaluate many times."""
    source: str
    code: CodeType
    symbols: FrozenSet[str]
    functions: Mapping[str, Callable[..., Any]]
    constants: Mapping[str, float]

    @property
    def free_symbols(self) -> FrozenSet[str]:
        """Names that must be supplied as bindings (e.g. {'t'})."""
        return frozenset(self.symbols - set(self.constants))

    def evaluate(self, bindings: Mapping[str, float]) -> float:
        """
        Evaluates the expression for one set of variable bindings.

        Raises:
            ExpressionScopeError: If a free symbol has no binding.
            ExpressionEvaluationError: If evaluation raises, or yields a complex
                                       or non-finite value.
        """
        missing = sorted(self.free_symbols - set(bindings))
        if missing:
            raise ExpressionScopeError(expression=self.source, symbol=missing[0])

        scalar_bindings = {name: float(value) for name, value in bindings.items()}
        namespace: Dict[str, Any] = {}
        namespace.update(self.functions)
        namespace.update(self.constants)
        namespace.update(scalar_bindings)
        namespace[TRUTH_HELPER] = _truth

        try:
            with np.errstate(all='ignore'):
                value = eval(self.code, {"__builtins__": {}}, namespace)
        except Exception as e:
            if isinstance(e, ExpressionError):
                raise
            raise ExpressionEvaluationError(expression=self.source, details=str(e), bindings=scalar_bindings) from e

        if isinstance(value, (complex, np.complexfloating)):
            raise ExpressionEvaluationError(
                expression=self.source,
                details=f"Expression resulted in a complex value ({value})",
                bindings=scalar_bindings
            )
        try:
            result = float(value)
        except (TypeError, ValueError) as e:
            raise ExpressionEvaluationError(
                expression=self.source,
                details=f"Expression did not evaluate to a number: {e}",
                bindings=scalar_bindings
            ) from e
        if not math.isfinite(result):
            raise ExpressionEvaluationError(
                expression=self.source,
                details=f"Expression resulted in a non-finite value ({result})",
                bindings=scalar_bindings
            )
        return result


class ExpressionEvaluator:
    """
    Default expression evaluator for custom inputs.

    Instances memoize compiled expressions in an instance-level dictionary, so a
    single evaluator can be called once per time step without re-parsing.
    Nothing is shared between instances.
    """

    def __init__(
        self,
        functions: Optional[Mapping[str, Callable[..., Any]]] = None,
        constants: Optional[Mapping[str, float]] = None,
    ):
        self._functions = dict(DEFAULT_FUNCTIONS if functions is None else functions)
        self._constants = dict(DEFAULT_CONSTANTS if constants is None else constants)
        self._compiled: Dict[str, CompiledExpression] = {}

    def compile(self, expression: str) -> CompiledExpression:
        """
        Parses and checks an expression, returning a reusable compiled form.

        Raises:
            ExpressionSyntaxError: If the text cannot be parsed.
            ExpressionScopeError: If it calls a function that does not exist.
        """
        cached = self._compiled.get(expression)
        if cached is not None:
            return cached

        tree = parse_expression(expression)
        visitor = _SymbolVisitor()
        visitor.visit(tree)

        unknown_functions = sorted(visitor.functions - set(self._functions))
        if unknown_functions:
            raise ExpressionScopeError(expression=expression, symbol=unknown_functions[0], kind="function")

        compiled = CompiledExpression(
            source=expression,
            code=compile(tree, "<input expression>", "eval"),
            symbols=frozenset(visitor.symbols),
            functions=self._functions,
            constants=self._constants,
        )
        self._compiled[expression] = compiled
        logger.debug("Compiled expression '%s' (free symbols: %s)", expression, sorted(compiled.free_symbols))
        return compiled

    def __call__(self, expression: str, bindings: Mapping[str, float]) -> float:
        return self.compile(expression).evaluate(bindings)


def evaluate_expression(expression: str, bindings: Mapping[str, float]) -> float:
    """One-shot convenience wrapper around a fresh `ExpressionEvaluator`."""
    return ExpressionEvaluator()(expression, bindings)
