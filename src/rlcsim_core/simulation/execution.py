# src/rlcsim_core/simulation/execution.py
"""
Provides the public API functions for running simulations.

This module is a thin Facade over the stateless pieces of the core: it maps
the circuit, validates the scenario, calls the response engine and computes
the plot markers, then hands everything back as one `ScenarioResult`.

Error policy:
  - ERROR-level validation issues stop the run with a `SimulationRunError`
    carrying the validator's diagnostic report.
  - A failing custom input expression does NOT raise: it is returned as data
    in `ScenarioResult.response.error`, exactly as the engine reports it.
  - Any other diagnosable failure is wrapped in `SimulationRunError`; anything
    unexpected is wrapped too, with a generic report and the original chained.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from ..analysis.markers import compute_markers
from ..analysis.results import ResponseMarkers
from ..constants import DEFAULT_CRITICAL_DAMPING_TOLERANCE, DEFAULT_MATCH_INITIAL_SLOPE
from ..data_structures import CircuitSpec, InitialConditions, SimulationParameters
from ..errors import DiagnosableError, ScenarioBuildError, SimulationRunError, unexpected_error_report
from ..parameters.mapper import map_circuit
from ..scenario import Scenario, ScenarioLoader
from ..validation import ScenarioValidationError, ScenarioValidator, ValidationIssue, has_errors
from .engine import Evaluator, respond
from .grid import TimeGrid
from .inputs import InputSpec
from .results import ResponseResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScenarioResult:
    """
    The complete outcome of one run.

    Attributes:
        parameters: The mapped simulation parameters.
        response: The response series, or the expression error as data.
        markers: Time constant, damping regime and peak markers for plotting.
        issues: Non-fatal validation findings (warnings and info).
    """
    parameters: SimulationParameters
    response: ResponseResult
    markers: ResponseMarkers
    issues: List[ValidationIssue]

    @property
    def is_error(self) -> bool:
        return self.response.is_error


def simulate(
    circuit: CircuitSpec,
    initial_conditions: InitialConditions,
    grid: TimeGrid,
    input_spec: InputSpec,
    evaluator: Optional[Evaluator] = None,
    critical_damping_tolerance: float = DEFAULT_CRITICAL_DAMPING_TOLERANCE,
    validate: bool = True,
    source_file: Optional[Union[str, Path]] = None,
    match_initial_slope: bool = DEFAULT_MATCH_INITIAL_SLOPE,
) -> ScenarioResult:
    """
    Maps, validates and simulates one circuit.

    Args:
        circuit: Raw component values and system type.
        initial_conditions: Capacitor voltage and inductor current at t=0.
        grid: Simulation horizon, step and display precision.
        input_spec: Step, impulse or custom input.
        evaluator: Optional replacement for the default expression evaluator.
        critical_damping_tolerance: See `classify_damping`.
        validate: When False, skips the validator; degenerate values then show
                  up as non-finite samples instead of an error.
        source_file: Scenario file the inputs came from, for diagnostics only.
        match_initial_slope: See `second_order_response`.

    Raises:
        SimulationRunError: If validation finds errors or the run fails.
    """
    try:
        logger.info(f"--- Starting {circuit.system_type} simulation with {input_spec.kind} input ---")
        issues: List[ValidationIssue] = []
        if validate:
            validator = ScenarioValidator(
                circuit, grid, input_spec,
                critical_damping_tolerance=critical_damping_tolerance,
                source_file=str(source_file) if source_file is not None else None,
            )
            issues = validator.validate()
            if has_errors(issues):
                raise ScenarioValidationError(issues)

        params = map_circuit(circuit)
        response = respond(
            circuit.system_type, params, initial_conditions,
            grid.t_max, grid.dt, input_spec,
            evaluator=evaluator,
            critical_damping_tolerance=critical_damping_tolerance,
            decimals=grid.decimals,
            match_initial_slope=match_initial_slope,
        )
        markers = compute_markers(params, response, grid.dt, critical_damping_tolerance)

        if response.is_error:
            logger.info(f"Simulation finished with an input error: {response.error}")
        else:
            logger.info(f"Simulation successful: {len(response)} samples up to t={response.times[-1]} s.")
        return ScenarioResult(parameters=params, response=response, markers=markers, issues=issues)

    except DiagnosableError as e:
        logger.error(f"A diagnosable error occurred during simulation: {e}")
        raise SimulationRunError(e.get_diagnostic_report()) from e

    except Exception as e:
        logger.critical(f"An unexpected internal error occurred during simulation: {e}", exc_info=True)
        report = unexpected_error_report(e, context={'system_type': circuit.system_type})
        raise SimulationRunError(report) from e


def run_scenario(scenario: Scenario, evaluator: Optional[Evaluator] = None) -> ScenarioResult:
    """Runs a loaded `Scenario`. See `simulate` for the error policy."""
    logger.info(f"Running scenario '{scenario.name}'.")
    return simulate(
        scenario.circuit,
        scenario.initial_conditions,
        scenario.grid,
        scenario.input_spec,
        evaluator=evaluator,
        critical_damping_tolerance=scenario.critical_damping_tolerance,
        source_file=scenario.source_file,
        match_initial_slope=scenario.match_initial_slope,
    )


def run_scenario_file(path: Union[str, Path], evaluator: Optional[Evaluator] = None) -> ScenarioResult:
    """
    Loads a scenario YAML file and runs it.

    Raises:
        ScenarioBuildError: If the file cannot be loaded (syntax, schema, units).
        SimulationRunError: If the loaded scenario cannot be simulated.
    """
    try:
        scenario = ScenarioLoader().load(path)
    except DiagnosableError as e:
        logger.error(f"Failed to load scenario '{path}': {e}")
        raise ScenarioBuildError(e.get_diagnostic_report()) from e
    return run_scenario(scenario, evaluator=evaluator)
