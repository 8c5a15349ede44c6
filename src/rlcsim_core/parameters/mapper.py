# src/rlcsim_core/parameters/mapper.py

"""
Translates raw component values into the normalized parameters consumed by the
response engine.

The mapping is a pure, total function. It never validates its input: R, L and
C are guaranteed positive by whoever collected them (see `rlcsim_core.validation`
for the checks a collection layer can run). If a zero does slip through, the
arithmetic is carried out in numpy float64 with floating-point warnings
silenced, so the affected quantities come out as `inf` or `nan` instead of
raising `ZeroDivisionError`:

    - RC with R or C zero gives tau = 0.
    - RL with R zero gives tau = inf.
    - Second order with L or C zero gives omega_n = inf and an infinite or
      undefined zeta.

Those non-finite values then propagate into the response series.
"""

import logging

import numpy as np

from ..data_structures import CircuitSpec, SimulationParameters, SystemType

logger = logging.getLogger(__name__)


def _series_damping(r: np.float64, l: np.float64, c: np.float64) -> np.float64:
    return r / 2.0 * np.sqrt(c / l)


def _parallel_damping(r: np.float64, l: np.float64, c: np.float64) -> np.float64:
    return 1.0 / (2.0 * r) * np.sqrt(l / c)


def map_circuit(spec: CircuitSpec) -> SimulationParameters:
    """
    Maps a `CircuitSpec` onto `SimulationParameters`.

    | system type  | gain | time constant | damping           | natural frequency |
    |--------------|------|---------------|-------------------|-------------------|
    | RC           | V    | R*C           | -                 | -                 |
    | RL           | V    | L/R           | -                 | -                 |
    | series RLC   | 1    | 1/wn          | R/2 * sqrt(C/L)   | 1/sqrt(L*C)       |
    | parallel RLC | 1    | 1/wn          | 1/(2R) * sqrt(L/C)| 1/sqrt(L*C)       |

    The series and parallel damping formulas are not interchangeable.
    """
    system_type = spec.system_type
    r = np.float64(spec.resistance)
    l = np.float64(spec.inductance)
    c = np.float64(spec.capacitance)

    damping = None
    natural_frequency = None

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        if system_type is SystemType.FIRST_ORDER_RC:
            gain = float(spec.source_amplitude)
            time_constant = float(r * c)
        elif system_type is SystemType.FIRST_ORDER_RL:
            gain = float(spec.source_amplitude)
            time_constant = float(l / r)
        else:
            wn = 1.0 / np.sqrt(l * c)
            gain = 1.0
            natural_frequency = float(wn)
            time_constant = float(1.0 / wn)
            if system_type is SystemType.SERIES_RLC:
                damping = float(_series_damping(r, l, c))
            else:
                damping = float(_parallel_damping(r, l, c))

    params = SimulationParameters(
        system_type=system_type,
        gain=gain,
        time_constant=time_constant,
        damping=damping,
        natural_frequency=natural_frequency,
        resistance=float(spec.resistance),
        capacitance=float(spec.capacitance),
        source_amplitude=float(spec.source_amplitude),
    )
    logger.debug(
        "Mapped %s: gain=%s, tau=%s, zeta=%s, wn=%s",
        system_type, params.gain, params.time_constant, params.damping, params.natural_frequency
    )
    return params
