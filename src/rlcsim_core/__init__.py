# src/rlcsim_core/__init__.py
import logging
from .log_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)
logger.info("RLCSim Core package initialized.")

from .units import ureg, pint, Quantity
from .data_structures import (
    CircuitSpec,
    DampingRegime,
    InitialConditions,
    SimulationParameters,
    SystemType,
)
from .parameters import map_circuit, preset_circuit
from .expressions import ExpressionEvaluator, evaluate_expression
from .simulation import (
    InputSpec,
    ResponseResult,
    ScenarioResult,
    TimeGrid,
    respond,
    run_scenario,
    run_scenario_file,
    simulate,
)
from .analysis import ResponseMarkers, compute_markers
from .scenario import Scenario, ScenarioLoader
from .errors import RLCSimError, ScenarioBuildError, SimulationRunError

__all__ = [
    # Units
    "ureg", "pint", "Quantity",
    # Data Structures
    "CircuitSpec", "DampingRegime", "InitialConditions", "SimulationParameters", "SystemType",
    # Parameter Mapper
    "map_circuit", "preset_circuit",
    # Expressions
    "ExpressionEvaluator", "evaluate_expression",
    # Response Engine
    "InputSpec", "ResponseResult", "TimeGrid", "respond",
    # Facade
    "ScenarioResult", "simulate", "run_scenario", "run_scenario_file",
    # Analysis
    "ResponseMarkers", "compute_markers",
    # Scenario Files
    "Scenario", "ScenarioLoader",
    # Top-Level Errors (Actionable Diagnostics)
    "RLCSimError", "ScenarioBuildError", "SimulationRunError",
]
