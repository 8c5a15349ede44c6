# src/rlcsim_core/expressions/__init__.py
from .exceptions import (
    ExpressionError,
    ExpressionSyntaxError,
    ExpressionScopeError,
    ExpressionEvaluationError,
)
from .parser import parse_expression, tokenize
from .evaluator import (
    DEFAULT_CONSTANTS,
    DEFAULT_FUNCTIONS,
    CompiledExpression,
    ExpressionEvaluator,
    evaluate_expression,
)

__all__ = [
    # Exceptions
    "ExpressionError",
    "ExpressionSyntaxError",
    "ExpressionScopeError",
    "ExpressionEvaluationError",
    # Parsing
    "parse_expression",
    "tokenize",
    # Evaluation
    "DEFAULT_CONSTANTS",
    "DEFAULT_FUNCTIONS",
    "CompiledExpression",
    "ExpressionEvaluator",
    "evaluate_expression",
]
