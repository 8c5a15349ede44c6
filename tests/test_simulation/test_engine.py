# tests/test_simulation/test_engine.py

"""
Behavioural tests of `respond()`.

Organized as:

1.  Step responses of all four system types, including the role of the
    initial conditions and the three damping regimes.
2.  Impulse responses.
3.  Custom inputs: the forward Euler recurrence, sampling of the input, and
    expression failures returned as data.
4.  Contract: result shape, purity, and misuse of the engine.
"""

import math

import numpy as np
import pytest

from rlcsim_core.data_structures import CircuitSpec, InitialConditions, SystemType
from rlcsim_core.parameters import map_circuit
from rlcsim_core.simulation import (
    InputSpec,
    ParameterMismatchError,
    ResponseResult,
    TimeGridError,
    respond,
)

SERIES = SystemType.SERIES_RLC
PARALLEL = SystemType.PARALLEL_RLC


# =========================================================================
# === Group 1: Step Responses
# =========================================================================

def test_rc_step_time_constant_and_final_value(run, value_at):
    _, result = run(SystemType.FIRST_ORDER_RC, resistance=1.0, capacitance=1.0)
    assert value_at(result, 1.0) == pytest.approx(0.632, abs=1e-2)
    assert result.values[-1] == pytest.approx(1.0, abs=1e-3)


def test_rl_step_settles_at_v_over_r(run, value_at):
    _, result = run(SystemType.FIRST_ORDER_RL, resistance=2.0, inductance=2.0, source_amplitude=1.0)
    assert value_at(result, 1.0) == pytest.approx(0.5 * (1 - math.exp(-1)), abs=1e-9)
    assert result.values[-1] == pytest.approx(0.5, abs=1e-3)


def test_first_order_step_starts_from_the_relevant_initial_condition(run):
    ic = InitialConditions(capacitor_voltage=2.0, inductor_current=-1.0)
    _, rc = run(SystemType.FIRST_ORDER_RC, initial_conditions=ic)
    _, rl = run(SystemType.FIRST_ORDER_RL, initial_conditions=ic)
    assert rc.values[0] == 2.0
    assert rl.values[0] == -1.0


def test_series_underdamped_step_overshoots_once_near_pi_over_wd(run):
    params, result = run(SERIES, resistance=1.0, match_initial_slope=True)
    wd = params.natural_frequency * math.sqrt(1 - params.damping ** 2)
    peak_index = int(np.argmax(result.values))

    assert params.damping == pytest.approx(0.5)
    assert result.values[0] == 0.0
    assert result.values[peak_index] == pytest.approx(1.0 + math.exp(-math.pi / math.sqrt(3)), abs=1e-2)
    assert result.times[peak_index] == pytest.approx(math.pi / wd, abs=0.05)

    # Within the first period there is exactly one excursion above V.
    first_period = result.values[result.times < 2 * math.pi / wd]
    above = first_period > 1.0
    upward_crossings = np.count_nonzero(above[1:] & ~above[:-1])
    assert upward_crossings == 1


@pytest.mark.parametrize("resistance", [2.0, 4.0])
def test_series_critical_and_overdamped_steps_do_not_overshoot(run, resistance):
    _, result = run(SERIES, resistance=resistance, match_initial_slope=True)
    assert result.values.max() <= 1.0 + 1e-12
    assert np.all(np.diff(result.values) >= -1e-12)


def test_overdamped_step_is_slower_than_critical(run, value_at):
    _, critical = run(SERIES, resistance=2.0, match_initial_slope=True)
    _, overdamped = run(SERIES, resistance=4.0, match_initial_slope=True)
    assert value_at(critical, 2.0) == pytest.approx(1 - 3 * math.exp(-2), abs=1e-9)
    assert value_at(overdamped, 2.0) < value_at(critical, 2.0)
    assert overdamped.values[-1] < critical.values[-1]


def test_series_step_uses_capacitor_voltage_and_inductor_current(run):
    # Vc0 = V and Il0 = 0: the circuit is already at its steady state.
    _, at_steady = run(SERIES, source_amplitude=3.0, initial_conditions=InitialConditions(capacitor_voltage=3.0))
    np.testing.assert_allclose(at_steady.values, 3.0, atol=1e-12)

    # Il0 / C sets the initial slope of v_C.
    kick = dict(capacitance=0.5, inductance=2.0, initial_conditions=InitialConditions(inductor_current=1.0), dt=1e-4, t_max=0.01)
    _, kicked = run(SERIES, match_initial_slope=True, **kick)
    slope = (kicked.values[1] - kicked.values[0]) / 1e-4
    assert slope == pytest.approx(2.0, rel=1e-3)

    # Published coefficients: zeta = 0.25, wn = 1, so the slope is 2 + 2 * 0.25 * 1 * (1 - 0).
    _, published = run(SERIES, **kick)
    slope = (published.values[1] - published.values[0]) / 1e-4
    assert slope == pytest.approx(2.5, rel=1e-3)


def test_parallel_step_reads_v_as_a_current(run):
    ic = InitialConditions(capacitor_voltage=9.0, inductor_current=0.5)
    _, result = run(PARALLEL, resistance=5.0, source_amplitude=2.0, initial_conditions=ic, t_max=200.0, dt=0.5)
    assert result.values[0] == 0.5
    assert result.values[-1] == pytest.approx(2.0, abs=1e-3)
    # di_L/dt(0) = 0
    _, fine = run(PARALLEL, resistance=5.0, source_amplitude=2.0, initial_conditions=ic, t_max=0.01, dt=1e-4, match_initial_slope=True)
    assert (fine.values[1] - fine.values[0]) / 1e-4 == pytest.approx(0.0, abs=1e-3)


def test_parallel_critical_preset_takes_the_critical_branch(run, value_at):
    _, published = run(PARALLEL, resistance=0.5)
    _, matched = run(PARALLEL, resistance=0.5, match_initial_slope=True)
    # y = V + (A + B t) e^(-t) with A = -1 and B = 1 (published) or -1 (matched).
    assert value_at(published, 2.0) == pytest.approx(1 + math.exp(-2), abs=1e-12)
    assert value_at(matched, 1.0) == pytest.approx(1 - 2 * math.exp(-1), abs=1e-12)


def test_series_step_from_half_charged_capacitor_uses_published_coefficients(run, value_at):
    ic = InitialConditions(capacitor_voltage=0.5)
    _, published = run(SERIES, initial_conditions=ic)
    _, matched = run(SERIES, initial_conditions=ic, match_initial_slope=True)
    assert published.values[0] == matched.values[0] == 0.5
    assert value_at(published, 1.0) == pytest.approx(0.93690, abs=1e-5)
    assert value_at(matched, 1.0) == pytest.approx(0.67015, abs=1e-5)


def test_critical_tolerance_widens_the_critical_branch(run):
    params, exact = run(SERIES, resistance=2.0 + 2e-9, match_initial_slope=True)
    assert params.damping != 1.0
    _, widened = run(SERIES, resistance=2.0 + 2e-9, critical_damping_tolerance=1e-6, match_initial_slope=True)
    _, critical = run(SERIES, resistance=2.0, match_initial_slope=True)
    np.testing.assert_array_equal(widened.values, critical.values)
    np.testing.assert_allclose(exact.values, critical.values, atol=1e-6)


# =========================================================================
# === Group 2: Impulse Responses
# =========================================================================

def test_rc_impulse_starts_at_amp_over_tau_and_decays(run):
    _, result = run(SystemType.FIRST_ORDER_RC, input_spec=InputSpec.impulse(1.0))
    assert result.values[0] == pytest.approx(1.0, abs=1e-6)
    assert np.all(np.diff(result.values) < 0)
    assert result.values[-1] == pytest.approx(0.0, abs=1e-4)


def test_first_order_impulse_ignores_initial_conditions(run):
    ic = InitialConditions(capacitor_voltage=5.0, inductor_current=5.0)
    _, with_ic = run(SystemType.FIRST_ORDER_RL, resistance=2.0, input_spec=InputSpec.impulse(3.0), initial_conditions=ic)
    _, without = run(SystemType.FIRST_ORDER_RL, resistance=2.0, input_spec=InputSpec.impulse(3.0))
    np.testing.assert_array_equal(with_ic.values, without.values)
    assert with_ic.values[0] == pytest.approx(6.0)


@pytest.mark.parametrize("system_type, resistance", [
    (SERIES, 1.0), (SERIES, 2.0), (SERIES, 4.0),
    (PARALLEL, 5.0), (PARALLEL, 0.5), (PARALLEL, 0.2),
])
def test_second_order_impulse_is_a_velocity_kick_from_rest(run, system_type, resistance):
    _, result = run(system_type, resistance=resistance, input_spec=InputSpec.impulse(2.0), t_max=100.0, dt=1e-3)
    assert result.values[0] == 0.0
    assert (result.values[1] - result.values[0]) / 1e-3 == pytest.approx(2.0, rel=1e-2)
    assert result.values[-1] == pytest.approx(0.0, abs=1e-3)


# =========================================================================
# === Group 3: Custom Inputs
# =========================================================================

def test_first_order_euler_recurrence(run):
    _, result = run(SystemType.FIRST_ORDER_RC, input_spec=InputSpec.custom("1"))
    k = np.arange(1, len(result) + 1)
    np.testing.assert_allclose(result.values, 1.0 - (1.0 - 0.05) ** k, rtol=1e-12, atol=1e-15)
    assert result.values[0] == pytest.approx(0.05)


def test_first_order_euler_is_seeded_with_the_initial_condition(run):
    ic = InitialConditions(capacitor_voltage=4.0, inductor_current=-2.0)
    _, rc = run(SystemType.FIRST_ORDER_RC, input_spec=InputSpec.custom("0"), initial_conditions=ic)
    _, rl = run(SystemType.FIRST_ORDER_RL, input_spec=InputSpec.custom("0"), initial_conditions=ic)
    assert rc.values[0] == pytest.approx(4.0 * 0.95)
    assert rc.values[1] == pytest.approx(4.0 * 0.95 ** 2)
    assert rl.values[0] == pytest.approx(-2.0 * 0.95)


def test_second_order_euler_updates_velocity_first(run):
    _, result = run(SERIES, input_spec=InputSpec.custom("1"))
    dt = 0.05
    # Velocity first: dy = dt * 1, then y = dt * dy.
    assert result.values[0] == pytest.approx(dt * dt)
    acceleration = 1.0 - dt * dt - 2 * 0.5 * dt
    assert result.values[1] == pytest.approx(dt * dt + dt * (dt + dt * acceleration))
    assert result.values[-1] == pytest.approx(1.0, abs=0.05)


def test_second_order_euler_seed_depends_on_type(run):
    ic = InitialConditions(capacitor_voltage=0.25, inductor_current=0.75)
    _, series = run(SERIES, input_spec=InputSpec.custom("0"), initial_conditions=ic)
    _, parallel = run(PARALLEL, input_spec=InputSpec.custom("0"), initial_conditions=ic)
    # One step from the seed with u = 0: y0 (1 - dt^2).
    assert series.values[0] == pytest.approx(0.25 * (1 - 0.05 ** 2))
    assert parallel.values[0] == pytest.approx(0.75 * (1 - 0.05 ** 2))


def test_custom_step_matches_closed_form_for_small_dt(run):
    _, euler = run(SystemType.FIRST_ORDER_RC, input_spec=InputSpec.custom("1"), t_max=5.0, dt=1e-3)
    _, exact = run(SystemType.FIRST_ORDER_RC, t_max=5.0, dt=1e-3)
    # The sample at t_k holds the state one step later.
    np.testing.assert_allclose(euler.values[:-1], exact.values[1:], atol=1e-3)


def test_input_is_evaluated_once_per_grid_point(run):
    calls = []

    def recording_evaluator(expression, bindings):
        calls.append(bindings["t"])
        return 0.0

    _, result = run(SystemType.FIRST_ORDER_RC, input_spec=InputSpec.custom("anything"), evaluator=recording_evaluator)
    assert len(calls) == len(result) == 201
    assert calls[0] == 0.0
    assert calls[20] == pytest.approx(1.0)
    assert calls == sorted(calls)


def test_syntax_error_yields_error_and_no_samples(run):
    _, result = run(SERIES, input_spec=InputSpec.custom("sin(2*"))
    assert result.is_error
    assert result.error == "Unexpected end of expression (char 7)"
    assert len(result) == 0
    assert result.to_records() == {"error": "Unexpected end of expression (char 7)"}


def test_undefined_symbol_message_is_preserved(run):
    _, result = run(SystemType.FIRST_ORDER_RL, input_spec=InputSpec.custom("x * 2"))
    assert result.error == "Undefined symbol x"


def test_failure_midway_discards_partial_results(run):
    _, result = run(SystemType.FIRST_ORDER_RC, input_spec=InputSpec.custom("t < 1 ? 0 : 1 / (t - t)"))
    assert result.is_error
    assert "division by zero" in result.error
    assert len(result.values) == 0


def test_injected_evaluator_message_is_returned_verbatim(run):
    def failing_evaluator(expression, bindings):
        if bindings["t"] > 3:
            raise RuntimeError("sensor offline at 3 s")
        return 1.0

    _, result = run(SystemType.FIRST_ORDER_RC, input_spec=InputSpec.custom("u"), evaluator=failing_evaluator)
    assert result.error == "sensor offline at 3 s"


def test_non_finite_value_from_injected_evaluator_is_an_error(run):
    _, result = run(SystemType.FIRST_ORDER_RC, input_spec=InputSpec.custom("u"), evaluator=lambda e, b: float("inf"))
    assert result.is_error
    assert "non-finite" in result.error


# =========================================================================
# === Group 4: Contract
# =========================================================================

def test_default_grid_has_201_increasing_samples(run):
    _, result = run(SystemType.FIRST_ORDER_RC)
    assert len(result) == 201
    assert result.times[0] == 0.0
    assert result.times[-1] == 10.0
    assert np.all(np.diff(result.times) > 0)


def test_records_are_rounded_time_value_pairs(run):
    _, result = run(SystemType.FIRST_ORDER_RC, dt=0.1, t_max=0.3)
    records = result.to_records()
    assert [r["t"] for r in records] == [0.0, 0.1, 0.2, 0.3]
    assert records[1]["y"] == pytest.approx(1 - math.exp(-0.1))


def test_result_arrays_are_read_only(run):
    _, result = run(SystemType.FIRST_ORDER_RC)
    with pytest.raises(ValueError):
        result.values[0] = 42.0


@pytest.mark.parametrize("input_spec", [InputSpec.step(), InputSpec.impulse(2.0), InputSpec.custom("sin(2*t)")])
def test_respond_is_idempotent(input_spec):
    spec = CircuitSpec(SERIES, resistance=0.7, inductance=1.3, capacitance=0.4)
    params = map_circuit(spec)
    ic = InitialConditions(capacitor_voltage=0.2, inductor_current=-0.1)
    first = respond(SERIES, params, ic, 10.0, 0.05, input_spec)
    second = respond(SERIES, params, ic, 10.0, 0.05, input_spec)
    np.testing.assert_array_equal(first.times, second.times)
    np.testing.assert_array_equal(first.values, second.values)


def test_system_type_may_be_given_as_string():
    params = map_circuit(CircuitSpec(SystemType.FIRST_ORDER_RC))
    result = respond("firstOrderRC", params, InitialConditions(), 1.0, 0.5, InputSpec.step())
    assert len(result) == 3


def test_mismatched_parameters_are_rejected():
    params = map_circuit(CircuitSpec(SERIES))
    with pytest.raises(ParameterMismatchError):
        respond(PARALLEL, params, InitialConditions(), 1.0, 0.1, InputSpec.step())


def test_unknown_system_type_is_rejected():
    params = map_circuit(CircuitSpec(SERIES))
    with pytest.raises(ValueError, match="Unknown system type"):
        respond("thirdOrder", params, InitialConditions(), 1.0, 0.1, InputSpec.step())


@pytest.mark.parametrize("t_max, dt", [(10.0, 0.0), (-1.0, 0.05)])
def test_invalid_grid_is_rejected(t_max, dt):
    params = map_circuit(CircuitSpec(SERIES))
    with pytest.raises(TimeGridError):
        respond(SERIES, params, InitialConditions(), t_max, dt, InputSpec.step())


@pytest.mark.parametrize("system_type, values", [
    (SystemType.FIRST_ORDER_RC, {"capacitance": 0.0}),
    (SystemType.FIRST_ORDER_RL, {"resistance": 0.0}),
    (SERIES, {"inductance": 0.0}),
])
def test_degenerate_parameters_produce_non_finite_samples(run, system_type, values):
    _, result = run(system_type, **values)
    assert isinstance(result, ResponseResult)
    assert not result.is_error
    assert not np.all(np.isfinite(result.values))


def test_unknown_input_kind_is_rejected():
    with pytest.raises(ValueError):
        InputSpec(kind="ramp")
