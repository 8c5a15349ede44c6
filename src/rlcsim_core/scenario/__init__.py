# src/rlcsim_core/scenario/__init__.py
from .model import Scenario
from .loader import ScenarioLoader
from .exceptions import ScenarioParsingError, ScenarioSchemaError, ScenarioValueError

__all__ = [
    # Scenario Model
    "Scenario",
    # Loader and Exceptions
    "ScenarioLoader",
    "ScenarioParsingError",
    "ScenarioSchemaError",
    "ScenarioValueError",
]
