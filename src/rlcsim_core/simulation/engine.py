# src/rlcsim_core/simulation/engine.py
"""
The response engine: turns mapped parameters, initial conditions, an input and
a time horizon into a sampled output trajectory.

`respond()` is a pure function of its arguments. It keeps no state between
calls, performs no I/O, and either returns a complete series or an error; a
partially computed series is never returned.

Branch selection:

    step / impulse -> closed form (`analytical`)
    custom         -> input sampled through the evaluator, then forward Euler
                      (`integrators`)

Output variable and initial state per system type:

    RC            v_C,  y0 = Vc0
    RL            i_L,  y0 = Il0, step steady state V / R
    series RLC    v_C,  y0 = Vc0, dy0 = Il0 / C,   step steady state V
    parallel RLC  i_L,  y0 = Il0, dy0 = 0,         step steady state V,
                  where V is read as a current amplitude
"""
import logging
import math
from typing import Callable, Mapping, Optional, Tuple, Union

import numpy as np

from ..constants import (
    DEFAULT_CRITICAL_DAMPING_TOLERANCE,
    DEFAULT_MATCH_INITIAL_SLOPE,
    DEFAULT_TIME_DECIMALS,
)
from ..data_structures import InitialConditions, SimulationParameters, SystemType
from ..expressions import ExpressionEvaluationError, ExpressionEvaluator
from .analytical import (
    classify_damping,
    first_order_impulse,
    first_order_step,
    second_order_response,
)
from .exceptions import ParameterMismatchError
from .grid import TimeGrid
from .inputs import InputKind, InputSpec
from .integrators import euler_first_order, euler_second_order
from .results import ResponseResult

logger = logging.getLogger(__name__)

#: The injected expression capability: (expression, {"t": time}) -> value.
Evaluator = Callable[[str, Mapping[str, float]], float]


def _first_order_initial_value(system_type: SystemType, ic: InitialConditions) -> float:
    if system_type is SystemType.FIRST_ORDER_RL:
        return float(ic.inductor_current)
    return float(ic.capacitor_voltage)


def _second_order_initial_state(
    system_type: SystemType, params: SimulationParameters, ic: InitialConditions
) -> Tuple[float, float]:
    """(y0, dy0) of the output variable for a step input."""
    if system_type is SystemType.PARALLEL_RLC:
        # No initial voltage across the inductor is assumed, so di_L/dt(0) = 0.
        return float(ic.inductor_current), 0.0
    with np.errstate(all='ignore'):
        dy0 = float(np.float64(ic.inductor_current) / np.float64(params.capacitance))
    return float(ic.capacitor_voltage), dy0


def _step_response(
    system_type: SystemType,
    params: SimulationParameters,
    ic: InitialConditions,
    t: np.ndarray,
    critical_damping_tolerance: float,
    match_initial_slope: bool,
) -> np.ndarray:
    if system_type.is_first_order:
        y0 = _first_order_initial_value(system_type, ic)
        final_value = params.gain
        if system_type is SystemType.FIRST_ORDER_RL:
            # V is a voltage; the RL output is the current, which settles at V/R.
            with np.errstate(all='ignore'):
                final_value = float(np.float64(params.gain) / np.float64(params.resistance))
        return first_order_step(t, params.time_constant, y0, final_value)

    y0, dy0 = _second_order_initial_state(system_type, params, ic)
    regime = classify_damping(params.damping, critical_damping_tolerance)
    logger.debug("Step response of %s in %s regime (zeta=%s).", system_type, regime, params.damping)
    return second_order_response(
        t, params.natural_frequency, params.damping,
        y0=y0, dy0=dy0, steady=params.source_amplitude, regime=regime,
        match_initial_slope=match_initial_slope
    )


def _impulse_response(
    system_type: SystemType,
    params: SimulationParameters,
    amplitude: float,
    t: np.ndarray,
    critical_damping_tolerance: float,
) -> np.ndarray:
    if system_type.is_first_order:
        return first_order_impulse(t, params.time_constant, amplitude)

    # The impulse acts as an initial velocity kick on a circuit at rest.
    regime = classify_damping(params.damping, critical_damping_tolerance)
    logger.debug("Impulse response of %s in %s regime (zeta=%s).", system_type, regime, params.damping)
    return second_order_response(
        t, params.natural_frequency, params.damping,
        y0=0.0, dy0=amplitude, steady=0.0, regime=regime
    )


def sample_input(evaluator: Evaluator, expression: str, times: np.ndarray) -> np.ndarray:
    """
    Evaluates the custom input once per grid time, stopping at the first failure.

    Raises:
        Whatever the evaluator raises, and `ExpressionEvaluationError` if it
        returns a value that is not a finite real number.
    """
    u = np.empty(len(times), dtype=float)
    for k, t_k in enumerate(times):
        t_k = float(t_k)
        value = float(evaluator(expression, {"t": t_k}))
        if not math.isfinite(value):
            raise ExpressionEvaluationError(
                expression=expression,
                details=f"Expression resulted in a non-finite value ({value})",
                bindings={"t": t_k}
            )
        u[k] = value
    return u


def _custom_response(
    system_type: SystemType,
    params: SimulationParameters,
    ic: InitialConditions,
    u: np.ndarray,
    dt: float,
) -> np.ndarray:
    if system_type.is_first_order:
        y0 = _first_order_initial_value(system_type, ic)
        return euler_first_order(u, dt, params.time_constant, y0)

    if system_type is SystemType.PARALLEL_RLC:
        y0 = float(ic.inductor_current)
    else:
        y0 = float(ic.capacitor_voltage)
    return euler_second_order(u, dt, params.natural_frequency, params.damping, y0=y0, dy0=0.0)


def respond(
    system_type: Union[str, SystemType],
    params: SimulationParameters,
    initial_conditions: InitialConditions,
    t_max: float,
    dt: float,
    input_spec: InputSpec,
    evaluator: Optional[Evaluator] = None,
    critical_damping_tolerance: float = DEFAULT_CRITICAL_DAMPING_TOLERANCE,
    decimals: int = DEFAULT_TIME_DECIMALS,
    match_initial_slope: bool = DEFAULT_MATCH_INITIAL_SLOPE,
) -> ResponseResult:
    """
    Computes the response of a circuit to a step, impulse or custom input.

    Args:
        system_type: Circuit type; must match the type `params` were mapped for.
        params: Output of `map_circuit`.
        initial_conditions: Capacitor voltage and inductor current at t=0.
        t_max: Simulation horizon in seconds (> 0).
        dt: Sampling step in seconds (> 0); also the Euler step for custom inputs.
        input_spec: The driving signal.
        evaluator: Callable `(expression, {"t": t}) -> float` used for custom
                   inputs. Defaults to a fresh `ExpressionEvaluator`.
        critical_damping_tolerance: Half-width of the band around zeta == 1 that
                   selects the critically damped closed form. 0 means exact.
        decimals: Decimal places kept on the reported sample times.
        match_initial_slope: Pick second-order step coefficients so that
                   y'(0) == dy0 for any initial state (see
                   `second_order_response`).

    Returns:
        A `ResponseResult` holding either `ceil(t_max/dt) + 1` samples or, when
        the custom input expression fails at any grid point, only the error
        message raised by the evaluator.

    Raises:
        TimeGridError: If t_max or dt is not a finite positive number.
        ParameterMismatchError: If `params` were mapped for another system type.
        ValueError: If `system_type` is unknown.
    """
    system_type = SystemType.coerce(system_type)
    if params.system_type is not system_type:
        raise ParameterMismatchError(requested=str(system_type), mapped=str(params.system_type))

    grid = TimeGrid(t_max=t_max, dt=dt, decimals=decimals)
    t = grid.times()
    kind = input_spec.kind

    if kind is InputKind.CUSTOM:
        active_evaluator = evaluator if evaluator is not None else ExpressionEvaluator()
        try:
            u = sample_input(active_evaluator, input_spec.expression, t)
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.warning("Custom input '%s' failed; returning error result: %s", input_spec.expression, message)
            return ResponseResult.failure(message)
        values = _custom_response(system_type, params, initial_conditions, u, grid.dt)
    elif kind is InputKind.IMPULSE:
        values = _impulse_response(system_type, params, input_spec.impulse_amplitude, t, critical_damping_tolerance)
    else:
        values = _step_response(
            system_type, params, initial_conditions, t, critical_damping_tolerance, match_initial_slope
        )

    if not np.all(np.isfinite(values)):
        logger.debug("Response of %s contains non-finite samples (degenerate parameters or unstable step).", system_type)

    return ResponseResult.success(grid.display_times(), values)
