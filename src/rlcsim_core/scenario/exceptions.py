# src/rlcsim_core/scenario/exceptions.py
"""
Defines diagnosable exceptions for loading scenario files.

`ScenarioParsingError` covers file access and YAML syntax, `ScenarioSchemaError`
covers structural violations found by Cerberus, and `ScenarioValueError`
covers values that are well-formed YAML but cannot be turned into physical
quantities (unknown units, wrong dimensions, impossible time grids).
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Tuple, Union

from ..errors import DiagnosableError, format_diagnostic_report


def flatten_schema_errors(errors: Dict[Any, Any], prefix: Tuple[str, ...] = ()) -> Iterator[Tuple[str, str]]:
    """Yields (dotted.field.path, message) pairs from a nested Cerberus error tree."""
    for key, messages in sorted(errors.items(), key=lambda item: str(item[0])):
        path = prefix + (str(key),)
        for message in messages:
            if isinstance(message, dict):
                yield from flatten_schema_errors(message, path)
            else:
                yield ".".join(path), str(message)


class BaseScenarioError(DiagnosableError):
    """Common base of all scenario loading errors."""
    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Generic Scenario Error",
            details=str(self),
            suggestion="Please check the format and content of the scenario YAML file.",
            context={}
        )


@dataclass()
class ScenarioParsingError(BaseScenarioError):
    """The file is missing or unreadable, or its content is not a YAML mapping."""
    details: str
    file_path: Union[Path, str]

    def __str__(self):
        return f"Parsing error in scenario '{self.file_path}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="YAML Parsing or File Error",
            details=self.details,
            suggestion="Ensure the file exists, has the correct read permissions, and contains valid YAML syntax.",
            context={'source_file': self.file_path}
        )


@dataclass()
class ScenarioSchemaError(BaseScenarioError):
    """The YAML loaded but does not match the scenario schema."""
    errors: Dict[str, Any]
    file_path: Union[Path, str]

    def __str__(self):
        error_lines = [f"  - In field '{field}': {message}" for field, message in flatten_schema_errors(self.errors)]
        return (
            f"YAML schema validation failed for scenario '{self.file_path}':\n"
            + "\n".join(error_lines)
        )

    def get_diagnostic_report(self) -> str:
        flat = list(flatten_schema_errors(self.errors))
        error_list_str = "\n".join(f"  - Field '{field}': {message}" for field, message in flat)
        details = (
            "The structure of the scenario file does not conform to the required schema.\n"
            f"See details for {len(flat)} issue(s) below:\n\n{error_list_str}"
        )
        return format_diagnostic_report(
            error_type="YAML Schema Validation Error",
            details=details,
            suggestion="Correct the listed fields. A scenario needs a 'circuit' section with a known 'system_type'; 'initial_conditions', 'input', 'time' and 'options' are optional.",
            context={'source_file': self.file_path}
        )


@dataclass()
class ScenarioValueError(BaseScenarioError):
    """A field is structurally valid but its value cannot be used."""
    field: str
    value: Any
    details: str
    file_path: Optional[Union[Path, str]] = None

    def __str__(self):
        return f"Invalid value {self.value!r} for '{self.field}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Invalid Scenario Value",
            details=f"Field '{self.field}': {self.details}",
            suggestion="Give a plain number in SI base units or a quantity string with a compatible unit, e.g. '10 mH', '4.7 uF', '50 ms'.",
            context={'source_file': self.file_path, 'user_input': self.value}
        )
