# src/rlcsim_core/simulation/analytical.py
"""
Closed-form responses for step and impulse inputs, evaluated on whole time
arrays at once.

All functions run under `np.errstate(all='ignore')`: degenerate parameters
(tau = 0, omega_n = inf, ...) are allowed to produce `inf`/`nan` samples
instead of raising, and it is up to the caller to decide what to do with them.
"""
import logging

import numpy as np

from ..constants import DEFAULT_CRITICAL_DAMPING_TOLERANCE, DEFAULT_MATCH_INITIAL_SLOPE
from ..data_structures import DampingRegime

logger = logging.getLogger(__name__)


def classify_damping(zeta: float, tolerance: float = DEFAULT_CRITICAL_DAMPING_TOLERANCE) -> DampingRegime:
    """
    Selects the damping regime for `zeta`.

    With the default tolerance of 0 the critical branch requires zeta == 1.0
    exactly. Floating-point damping ratios computed from arbitrary R, L, C
    almost never hit it, so in practice only presets such as R=2, L=1, C=1
    (series) reach it. A positive `tolerance` widens it to |zeta - 1| <= tolerance.
    A `nan` zeta falls through to the overdamped branch and yields `nan` samples.
    """
    if abs(zeta - 1.0) <= tolerance:
        return DampingRegime.CRITICALLY_DAMPED
    if zeta < 1.0:
        return DampingRegime.UNDERDAMPED
    return DampingRegime.OVERDAMPED


def first_order_step(t: np.ndarray, tau: float, y0: float, final_value: float) -> np.ndarray:
    """y(t) = y0 e^(-t/tau) + final_value (1 - e^(-t/tau))"""
    with np.errstate(all='ignore'):
        decay = np.exp(-t / np.float64(tau))
        return y0 * decay + final_value * (1.0 - decay)


def first_order_impulse(t: np.ndarray, tau: float, amplitude: float) -> np.ndarray:
    """
    y(t) = (amplitude / tau) e^(-t/tau)

    Initial conditions are ignored: the impulse response describes the circuit
    starting from rest.
    """
    with np.errstate(all='ignore'):
        tau = np.float64(tau)
        return (amplitude / tau) * np.exp(-t / tau)


def second_order_response(
    t: np.ndarray,
    wn: float,
    zeta: float,
    y0: float,
    dy0: float,
    steady: float,
    regime: DampingRegime,
    match_initial_slope: bool = DEFAULT_MATCH_INITIAL_SLOPE,
) -> np.ndarray:
    """
    Solution of y'' + 2 zeta wn y' + wn^2 y = wn^2 steady starting from
    y(0) = y0, in the given damping regime.

    The regime is passed in rather than derived so that the caller decides how
    strictly zeta == 1 is detected (see `classify_damping`).

    Coefficients, with A = y0 - steady:

        zeta < 1   B = (dy0 + zeta wn (steady - y0)) / wd
        zeta = 1   B = dy0 + wn (steady - y0)
        zeta > 1   C1, C2 from y(0) = y0 and y'(0) = dy0

    The under- and critically damped B terms give y'(0) = dy0 - 2 zeta wn A,
    which equals dy0 only when y0 == steady (impulse responses, or a step
    starting at its final value). With `match_initial_slope=True` the
    (steady - y0) term changes sign so that y'(0) = dy0 in every regime; a
    step from rest then peaks at pi / wd and the critical step does not
    overshoot.
    """
    wn = np.float64(wn)
    zeta = np.float64(zeta)
    offset = y0 - steady
    toward = -offset if not match_initial_slope else offset

    with np.errstate(all='ignore'):
        if regime is DampingRegime.UNDERDAMPED:
            wd = wn * np.sqrt(1.0 - zeta * zeta)
            a = offset
            b = (dy0 + zeta * wn * toward) / wd
            envelope = np.exp(-zeta * wn * t)
            return steady + envelope * (a * np.cos(wd * t) + b * np.sin(wd * t))

        if regime is DampingRegime.CRITICALLY_DAMPED:
            a = offset
            b = dy0 + wn * toward
            return steady + (a + b * t) * np.exp(-wn * t)

        root = np.sqrt(zeta * zeta - 1.0)
        s1 = -wn * (zeta - root)
        s2 = -wn * (zeta + root)
        denom = s1 - s2
        c1 = (dy0 - offset * s2) / denom
        c2 = (offset * s1 - dy0) / denom
        return steady + c1 * np.exp(s1 * t) + c2 * np.exp(s2 * t)
