# tests/conftest.py
import pytest
import numpy as np

from rlcsim_core import (
    CircuitSpec,
    InitialConditions,
    InputSpec,
    SystemType,
    map_circuit,
    respond,
)
from rlcsim_core.expressions import ExpressionEvaluator

DEFAULT_T_MAX = 10.0
DEFAULT_DT = 0.05


@pytest.fixture
def evaluator():
    return ExpressionEvaluator()


@pytest.fixture
def at_rest():
    return InitialConditions(capacitor_voltage=0.0, inductor_current=0.0)


def run_response(
    system_type,
    resistance=1.0,
    inductance=1.0,
    capacitance=1.0,
    source_amplitude=1.0,
    input_spec=None,
    initial_conditions=None,
    t_max=DEFAULT_T_MAX,
    dt=DEFAULT_DT,
    **engine_kwargs
):
    """
    Maps a circuit and runs the response engine in one call.
    Returns (params, result) so tests can check both sides of the pipeline.
    """
    spec = CircuitSpec(
        system_type=system_type,
        resistance=resistance,
        inductance=inductance,
        capacitance=capacitance,
        source_amplitude=source_amplitude,
    )
    params = map_circuit(spec)
    result = respond(
        spec.system_type,
        params,
        initial_conditions or InitialConditions(),
        t_max,
        dt,
        input_spec or InputSpec.step(),
        **engine_kwargs
    )
    return params, result


def sample_at(result, t):
    """Value of the sample whose (rounded) time equals `t`."""
    matches = np.nonzero(np.isclose(result.times, t, atol=1e-9))[0]
    assert len(matches) == 1, f"No unique sample at t={t}"
    return float(result.values[matches[0]])


@pytest.fixture
def series_underdamped():
    """R=1, L=1, C=1 series RLC: zeta = 0.5, wn = 1."""
    return CircuitSpec(system_type=SystemType.SERIES_RLC, resistance=1.0, inductance=1.0, capacitance=1.0)


@pytest.fixture
def run():
    """The `run_response` helper, for tests in subdirectories."""
    return run_response


@pytest.fixture
def value_at():
    """The `sample_at` helper, for tests in subdirectories."""
    return sample_at
