# src/rlcsim_core/errors.py
"""
User-facing exceptions and the diagnostic report shared by every subsystem.

Subsystems raise their own `DiagnosableError` subclasses (bad expression, bad
scenario file, invalid grid, ...). The public entry points catch those and
re-raise one of the two top-level errors below with the subsystem's report as
the message, so callers only ever need `except RLCSimError`.
"""
import logging
from abc import abstractmethod
from typing import Any, Dict, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class RLCSimError(Exception):
    """Base class for the errors the public API raises."""


class ScenarioBuildError(RLCSimError):
    """A scenario file could not be read, validated against the schema or converted to SI values."""


class SimulationRunError(RLCSimError):
    """A scenario was refused by validation or failed while being simulated."""


@runtime_checkable
class Diagnosable(Protocol):
    """Anything that can describe itself as a diagnostic report."""
    def get_diagnostic_report(self) -> str:
        ...


class DiagnosableError(Exception, Diagnosable):
    """
    Base class of the subsystem exceptions. Subclasses must implement
    `get_diagnostic_report`, usually by calling `format_diagnostic_report`.
    """
    @abstractmethod
    def get_diagnostic_report(self) -> str:
        raise NotImplementedError


# Context entries shown in the report header, in display order.
_CONTEXT_LINES = (
    ('system_type', "System Type:    {}"),
    ('source_file', "Source File:    {}"),
    ('user_input', "User Input:     '{}'"),
    ('time', "Time:           {}"),
)

_TITLE = "================ RLCSim Core: Actionable Diagnostic Report ================"


def _indented(text: str):
    return [f"  {line}" for line in text.splitlines()]


def format_diagnostic_report(
    error_type: str,
    details: str,
    suggestion: str,
    context: Dict[str, Any]
) -> str:
    """
    Formats a multi-line report.

    Args:
        error_type: Short category, e.g. "Invalid Expression Syntax".
        details: What went wrong; may span several lines.
        suggestion: How to fix it; omitted from the report when empty.
        context: Optional header entries: `system_type`, `source_file`,
                 `user_input` and `time`. Missing or empty entries are skipped;
                 a time of 0 is still shown.
    """
    lines = ["\n", _TITLE, f"Error Type:     {error_type}"]
    for key, template in _CONTEXT_LINES:
        value = context.get(key)
        if value is None or (value == "" and key != 'time'):
            continue
        lines.append(template.format(value))

    lines.append("\nDetails:")
    lines.extend(_indented(details))
    if suggestion:
        lines.append("\nSuggestion:")
        lines.extend(_indented(suggestion))

    lines.append("=" * len(_TITLE))
    return "\n".join(lines)


def unexpected_error_report(error: BaseException, context: Dict[str, Any]) -> str:
    """Report for an exception that is not a `DiagnosableError`, i.e. a bug."""
    return format_diagnostic_report(
        error_type=f"An Unexpected Simulation Error Occurred ({type(error).__name__})",
        details=f"The simulator encountered an unexpected internal error: {error}",
        suggestion="This may be a bug. Review the traceback and consider filing a bug report.",
        context=context
    )
