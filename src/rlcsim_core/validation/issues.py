# src/rlcsim_core/validation/issues.py
import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger(__name__)


class ValidationIssueLevel(Enum):
    """How a finding affects the run: ERROR refuses it, the others are reported."""
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class ValidationIssue:
    """
    One finding about a scenario. `field_name` names the circuit, input or
    grid field to change; `details` holds the template arguments of the
    message (component values, ratios, limits) for programmatic use.
    """
    level: ValidationIssueLevel
    code: str
    message: str
    system_type: Optional[str] = None
    field_name: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        return self.level is ValidationIssueLevel.ERROR

    def __str__(self) -> str:
        header = f"[{self.level.name} - {self.code}]"
        located = [
            f"System: {self.system_type}" if self.system_type else "",
            f"Field: {self.field_name}" if self.field_name else "",
        ]
        text = " ".join(part for part in [header, *located, f"Message: {self.message}"] if part)

        # system_type is already in the header line.
        extra = sorted((k, v) for k, v in self.details.items() if k != 'system_type')
        if extra:
            text += " Details: (" + ", ".join(f"{k}={v}" for k, v in extra) + ")"
        return text


def has_errors(issues: Iterable[ValidationIssue]) -> bool:
    return any(issue.is_error for issue in issues)


def count_by_level(issues: Iterable[ValidationIssue]) -> Dict[ValidationIssueLevel, int]:
    """Number of issues per level, with every level present."""
    counts = Counter(issue.level for issue in issues)
    return {level: counts.get(level, 0) for level in ValidationIssueLevel}
