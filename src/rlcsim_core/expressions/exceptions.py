# src/rlcsim_core/expressions/exceptions.py
"""
Defines the diagnosable exceptions raised while parsing and evaluating custom
input expressions.

The string form of each exception (`str(e)`) is the short message the response
engine hands back to callers unchanged, so it is kept to one line. The longer
`get_diagnostic_report()` is for logs and command-line tools.
"""
from dataclasses import dataclass, field
from typing import Dict

from ..errors import DiagnosableError, format_diagnostic_report


class ExpressionError(DiagnosableError):
    """
    Base class for all expression errors. A single `except ExpressionError:`
    catches syntax, scope and evaluation failures alike.
    """
    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Generic Expression Error",
            details=str(self),
            suggestion="Review the custom input expression.",
            context={}
        )


@dataclass()
class ExpressionSyntaxError(ExpressionError):
    """Raised when the expression text cannot be parsed."""
    expression: str
    position: int
    details: str

    def __str__(self):
        # 1-based character index, the way most calculators report it.
        return f"{self.details} (char {self.position + 1})"

    def get_diagnostic_report(self) -> str:
        pointer = " " * self.position + "^"
        return format_diagnostic_report(
            error_type="Invalid Expression Syntax",
            details=f"{self}\n\n{self.expression}\n{pointer}",
            suggestion="Check for unbalanced parentheses, a missing operand, or a '?' without its ':'.",
            context={'user_input': self.expression}
        )


@dataclass()
class ExpressionScopeError(ExpressionError):
    """Raised when an expression uses a symbol or function that is not defined."""
    expression: str
    symbol: str
    kind: str = "symbol"

    def __str__(self):
        return f"Undefined {self.kind} {self.symbol}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Undefined Name in Expression",
            details=f"The {self.kind} '{self.symbol}' is not defined.",
            suggestion="The only variable is 't'. Available constants are 'pi' and 'e'; functions include sin, cos, exp, sqrt, log and abs.",
            context={'user_input': self.expression}
        )


@dataclass()
class ExpressionEvaluationError(ExpressionError):
    """Raised when a syntactically valid expression fails for specific bindings."""
    expression: str
    details: str
    bindings: Dict[str, float] = field(default_factory=dict)

    def __str__(self):
        if not self.bindings:
            return self.details
        at = ", ".join(f"{name} = {value:g}" for name, value in sorted(self.bindings.items()))
        return f"{self.details} (at {at})"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Expression Evaluation Error",
            details=str(self),
            suggestion="Check for operations that are invalid at this time point (e.g., division by zero, the square root or logarithm of a negative number).",
            context={'user_input': self.expression, 'time': self.bindings.get('t')}
        )
