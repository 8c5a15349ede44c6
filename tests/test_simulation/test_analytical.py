# tests/test_simulation/test_analytical.py

"""
Checks the closed-form solutions against their defining differential
equations: initial value, initial slope, the ODE residual (by central finite
differences) and the long-time limit, in each damping regime.
"""

import math

import numpy as np
import pytest

from rlcsim_core.data_structures import DampingRegime
from rlcsim_core.simulation.analytical import (
    classify_damping,
    first_order_impulse,
    first_order_step,
    second_order_response,
)

WN = 2.0
Y0 = 0.3
DY0 = -0.7
STEADY = 1.2

REGIMES = [
    (0.3, DampingRegime.UNDERDAMPED),
    (1.0, DampingRegime.CRITICALLY_DAMPED),
    (2.5, DampingRegime.OVERDAMPED),
]


# =========================================================================
# === Group 1: Regime Selection
# =========================================================================

@pytest.mark.parametrize("zeta, tolerance, expected", [
    (0.5, 0.0, DampingRegime.UNDERDAMPED),
    (1.0, 0.0, DampingRegime.CRITICALLY_DAMPED),
    (1.0000001, 0.0, DampingRegime.OVERDAMPED),
    (0.9999999, 0.0, DampingRegime.UNDERDAMPED),
    (1.0000001, 1e-6, DampingRegime.CRITICALLY_DAMPED),
    (0.9999999, 1e-6, DampingRegime.CRITICALLY_DAMPED),
    (3.0, 1e-6, DampingRegime.OVERDAMPED),
])
def test_classify_damping(zeta, tolerance, expected):
    assert classify_damping(zeta, tolerance) is expected


def test_nan_damping_is_not_critical():
    assert classify_damping(float("nan")) is DampingRegime.OVERDAMPED


# =========================================================================
# === Group 2: First Order
# =========================================================================

def test_first_order_step_reaches_63_percent_at_tau():
    t = np.array([0.0, 1.0, 10.0])
    y = first_order_step(t, tau=1.0, y0=0.0, final_value=1.0)
    np.testing.assert_allclose(y, [0.0, 1 - math.exp(-1), 1 - math.exp(-10)])


def test_first_order_step_from_initial_value():
    t = np.array([0.0, 2.0])
    y = first_order_step(t, tau=2.0, y0=5.0, final_value=1.0)
    np.testing.assert_allclose(y, [5.0, 1.0 + 4.0 * math.exp(-1)])


def test_first_order_impulse_scales_with_amplitude():
    t = np.array([0.0, 0.5])
    y = first_order_impulse(t, tau=0.5, amplitude=3.0)
    np.testing.assert_allclose(y, [6.0, 6.0 * math.exp(-1)])


def test_zero_time_constant_gives_nan_instead_of_raising():
    y = first_order_step(np.array([0.0, 1.0]), tau=0.0, y0=0.0, final_value=1.0)
    assert math.isnan(y[0])
    assert y[1] == 1.0


# =========================================================================
# === Group 3: Second Order
# =========================================================================

def published_closed_form(t, wn, zeta, y0, dy0, steady):
    """Under- and critically damped step solutions written out term by term."""
    if zeta < 1:
        wd = wn * math.sqrt(1 - zeta * zeta)
        a = y0 - steady
        b = (dy0 + zeta * wn * (steady - y0)) / wd
        return steady + math.exp(-zeta * wn * t) * (a * math.cos(wd * t) + b * math.sin(wd * t))
    a = y0 - steady
    b = dy0 + wn * (steady - y0)
    return steady + (a + b * t) * math.exp(-wn * t)


@pytest.mark.parametrize("zeta, regime", REGIMES[:2])
def test_default_coefficients_follow_the_published_closed_form(zeta, regime):
    t = np.array([0.0, 0.4, 1.0, 3.7])
    y = second_order_response(t, WN, zeta, Y0, DY0, STEADY, regime)
    expected = [published_closed_form(ti, WN, zeta, Y0, DY0, STEADY) for ti in t]
    np.testing.assert_allclose(y, expected, rtol=1e-12)


def test_series_rlc_from_half_charged_capacitor():
    # R = L = C = 1, V = 1, Vc0 = 0.5, Il0 = 0.
    y = second_order_response(np.array([1.0]), 1.0, 0.5, 0.5, 0.0, 1.0, DampingRegime.UNDERDAMPED)
    assert y[0] == pytest.approx(0.93690, abs=1e-5)
    matched = second_order_response(
        np.array([1.0]), 1.0, 0.5, 0.5, 0.0, 1.0, DampingRegime.UNDERDAMPED, match_initial_slope=True
    )
    assert matched[0] == pytest.approx(0.67015, abs=1e-5)


@pytest.mark.parametrize("zeta, regime", REGIMES)
def test_second_order_initial_value_and_slope(zeta, regime):
    h = 1e-6
    y = second_order_response(np.array([-h, 0.0, h]), WN, zeta, Y0, DY0, STEADY, regime)
    assert y[1] == pytest.approx(Y0, abs=1e-12)
    # The published under/critical coefficients shift the slope by -2 zeta wn (y0 - steady).
    expected_slope = DY0 if regime is DampingRegime.OVERDAMPED else DY0 - 2 * zeta * WN * (Y0 - STEADY)
    assert (y[2] - y[0]) / (2 * h) == pytest.approx(expected_slope, abs=1e-5)


@pytest.mark.parametrize("zeta, regime", REGIMES)
def test_matched_initial_slope_in_every_regime(zeta, regime):
    h = 1e-6
    y = second_order_response(
        np.array([-h, 0.0, h]), WN, zeta, Y0, DY0, STEADY, regime, match_initial_slope=True
    )
    assert y[1] == pytest.approx(Y0, abs=1e-12)
    assert (y[2] - y[0]) / (2 * h) == pytest.approx(DY0, abs=1e-5)


@pytest.mark.parametrize("match_initial_slope", [False, True])
@pytest.mark.parametrize("zeta, regime", REGIMES)
def test_second_order_satisfies_the_ode(zeta, regime, match_initial_slope):
    h = 1e-4
    for t0 in (0.2, 0.9, 2.3):
        y_minus, y_mid, y_plus = second_order_response(
            np.array([t0 - h, t0, t0 + h]), WN, zeta, Y0, DY0, STEADY, regime,
            match_initial_slope=match_initial_slope,
        )
        dy = (y_plus - y_minus) / (2 * h)
        ddy = (y_plus - 2 * y_mid + y_minus) / (h * h)
        residual = ddy + 2 * zeta * WN * dy + WN ** 2 * (y_mid - STEADY)
        assert residual == pytest.approx(0.0, abs=1e-4)


@pytest.mark.parametrize("match_initial_slope", [False, True])
@pytest.mark.parametrize("zeta, regime", REGIMES)
def test_second_order_settles_at_steady_state(zeta, regime, match_initial_slope):
    y = second_order_response(
        np.array([40.0]), WN, zeta, Y0, DY0, STEADY, regime, match_initial_slope=match_initial_slope
    )
    assert y[0] == pytest.approx(STEADY, abs=1e-6)


@pytest.mark.parametrize("zeta, regime", REGIMES)
def test_impulse_kick_is_the_same_in_both_variants(zeta, regime):
    t = np.linspace(0.0, 5.0, 11)
    published = second_order_response(t, WN, zeta, 0.0, 2.0, 0.0, regime)
    matched = second_order_response(t, WN, zeta, 0.0, 2.0, 0.0, regime, match_initial_slope=True)
    np.testing.assert_array_equal(published, matched)


def test_matched_underdamped_step_peak_matches_textbook_overshoot():
    zeta = 0.5
    t = np.linspace(0.0, 10.0, 100001)
    y = second_order_response(t, 1.0, zeta, 0.0, 0.0, 1.0, DampingRegime.UNDERDAMPED, match_initial_slope=True)
    expected_overshoot = math.exp(-zeta * math.pi / math.sqrt(1 - zeta ** 2))
    assert y.max() == pytest.approx(1.0 + expected_overshoot, rel=1e-6)
    assert t[np.argmax(y)] == pytest.approx(math.pi / math.sqrt(1 - zeta ** 2), abs=1e-3)


def test_published_critical_step_from_rest_peaks_at_two_over_wn():
    t = np.linspace(0.0, 10.0, 10001)
    y = second_order_response(t, 1.0, 1.0, 0.0, 0.0, 1.0, DampingRegime.CRITICALLY_DAMPED)
    np.testing.assert_allclose(y, 1.0 + (t - 1.0) * np.exp(-t), atol=1e-12)
    assert t[np.argmax(y)] == pytest.approx(2.0, abs=1e-3)
