# src/rlcsim_core/analysis/markers.py
import logging
import math
from typing import Optional

import numpy as np

from ..constants import DEFAULT_CRITICAL_DAMPING_TOLERANCE
from ..data_structures import DampingRegime, SimulationParameters
from ..simulation.analytical import classify_damping
from ..simulation.results import ResponseResult, ResponseSample
from .results import ResponseMarkers

logger = logging.getLogger(__name__)


def damped_frequency(params: SimulationParameters, tolerance: float = DEFAULT_CRITICAL_DAMPING_TOLERANCE) -> Optional[float]:
    """omega_d = omega_n sqrt(1 - zeta^2), only defined for underdamped circuits."""
    if params.system_type.is_first_order:
        return None
    if classify_damping(params.damping, tolerance) is not DampingRegime.UNDERDAMPED:
        return None
    with np.errstate(all='ignore'):
        return float(np.float64(params.natural_frequency) * np.sqrt(1.0 - np.float64(params.damping) ** 2))


def peak_time(params: SimulationParameters, tolerance: float = DEFAULT_CRITICAL_DAMPING_TOLERANCE) -> Optional[float]:
    """Time of the first overshoot peak of the step response, pi / omega_d."""
    wd = damped_frequency(params, tolerance)
    if wd is None or not math.isfinite(wd) or wd <= 0.0:
        return None
    return math.pi / wd


def value_near(response: ResponseResult, target: Optional[float], dt: float) -> Optional[ResponseSample]:
    """
    Returns the sample whose time is closest to `target`, provided it lies
    within `dt / 2` of it. Error results and non-finite targets give None.
    """
    if response.is_error or len(response) == 0 or target is None or not math.isfinite(target):
        return None
    index = int(np.argmin(np.abs(response.times - target)))
    if abs(response.times[index] - target) > dt / 2.0:
        return None
    return ResponseSample(float(response.times[index]), float(response.values[index]))


def compute_markers(
    params: SimulationParameters,
    response: ResponseResult,
    dt: float,
    critical_damping_tolerance: float = DEFAULT_CRITICAL_DAMPING_TOLERANCE,
) -> ResponseMarkers:
    symbol, unit = params.system_type.output_quantity
    regime = None
    wd = None
    t_peak = None
    if not params.system_type.is_first_order:
        regime = classify_damping(params.damping, critical_damping_tolerance)
        wd = damped_frequency(params, critical_damping_tolerance)
        t_peak = peak_time(params, critical_damping_tolerance)

    markers = ResponseMarkers(
        system_type=params.system_type,
        output_symbol=symbol,
        output_unit=unit,
        time_constant=float(params.time_constant),
        regime=regime,
        damped_frequency=wd,
        peak_time=t_peak,
        tau_sample=value_near(response, params.time_constant, dt),
        peak_sample=value_near(response, t_peak, dt),
    )
    logger.debug(f"Computed markers for {params.system_type}: regime={regime}, tau={params.time_constant}, peak_time={t_peak}")
    return markers
