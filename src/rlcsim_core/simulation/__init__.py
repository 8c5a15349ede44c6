# src/rlcsim_core/simulation/__init__.py
from .exceptions import (
    TimeGridError,
    ParameterMismatchError,
)
from .grid import TimeGrid
from .inputs import InputKind, InputSpec
from .results import ResponseResult, ResponseSample
from .analytical import classify_damping
from .engine import respond
from .execution import ScenarioResult, simulate, run_scenario, run_scenario_file

__all__ = [
    # Exceptions
    "TimeGridError",
    "ParameterMismatchError",
    # Contracts
    "TimeGrid",
    "InputKind",
    "InputSpec",
    "ResponseResult",
    "ResponseSample",
    "ScenarioResult",
    # Engine
    "classify_damping",
    "respond",
    # Facade
    "simulate",
    "run_scenario",
    "run_scenario_file",
]
