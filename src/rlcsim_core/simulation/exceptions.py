# src/rlcsim_core/simulation/exceptions.py
"""
Defines diagnosable exceptions for misuse of the response engine.

Failures of the custom input expression are not exceptions at the engine
boundary; they come back inside `ResponseResult.error`. The classes here cover
arguments the caller should never pass, such as a non-positive time step.
"""
from dataclasses import dataclass

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class TimeGridError(DiagnosableError, ValueError):
    """Raised when the simulation horizon or step size cannot form a time grid."""
    t_max: float
    dt: float
    details: str

    def __str__(self):
        return f"Invalid time grid (t_max={self.t_max}, dt={self.dt}): {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Invalid Time Grid",
            details=str(self),
            suggestion="Both t_max and dt must be finite, positive numbers, with dt much smaller than t_max.",
            context={}
        )


@dataclass()
class ParameterMismatchError(DiagnosableError, ValueError):
    """Raised when parameters mapped for one system type are used to simulate another."""
    requested: str
    mapped: str

    def __str__(self):
        return f"Parameters were mapped for '{self.mapped}' but '{self.requested}' was requested."

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Parameter / System Type Mismatch",
            details=str(self),
            suggestion="Map the circuit again for the requested system type; the series and parallel damping formulas differ.",
            context={'system_type': self.requested}
        )
