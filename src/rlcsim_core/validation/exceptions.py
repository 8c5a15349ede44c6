# src/rlcsim_core/validation/exceptions.py
"""
Defines the diagnosable exception raised when a scenario fails validation.
"""
from typing import List

from .issues import ValidationIssue
from ..errors import DiagnosableError, format_diagnostic_report


class ScenarioValidationError(DiagnosableError):
    """
    Container for the ERROR-level issues of a validation pass. Warnings and
    info issues passed in are dropped; they never stop a run.
    """
    def __init__(self, issues: List[ValidationIssue]):
        self.issues: List[ValidationIssue] = [
            issue for issue in issues if issue.is_error
        ]
        if not self.issues:
            summary_message = "ScenarioValidationError was raised with no error-level issues."
        else:
            error_lines = [str(issue) for issue in self.issues]
            summary_message = (
                f"Scenario validation failed with {len(self.issues)} error(s):\n"
                + "\n".join(f"  - {line}" for line in error_lines)
            )
        super().__init__(summary_message)

    def get_diagnostic_report(self) -> str:
        error_lines = [str(issue) for issue in self.issues]
        details = (
            f"The scenario cannot be simulated as given.\n"
            f"Found {len(self.issues)} error(s). See details below:\n\n"
            + "\n".join(f"  - {line}" for line in error_lines)
        )

        first_issue = self.issues[0] if self.issues else None
        context = {}
        if first_issue:
            context['system_type'] = first_issue.system_type
            if source_path := first_issue.details.get('source_file'):
                context['source_file'] = source_path

        return format_diagnostic_report(
            error_type="Scenario Validation Error",
            details=details,
            suggestion="Correct the component values and input settings listed above, then run the scenario again.",
            context=context
        )
