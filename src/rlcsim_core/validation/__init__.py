# src/rlcsim_core/validation/__init__.py
import logging
logger = logging.getLogger(__name__)

from .issues import ValidationIssue, ValidationIssueLevel, count_by_level, has_errors
from .issue_codes import ScenarioIssueCode
from .validator import ScenarioValidator
from .exceptions import ScenarioValidationError

__all__ = [
    "ValidationIssue",
    "ValidationIssueLevel",
    "count_by_level",
    "has_errors",
    "ScenarioIssueCode",
    "ScenarioValidator",
    "ScenarioValidationError",
]
