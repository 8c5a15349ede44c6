# src/rlcsim_core/data_structures.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from .constants import (
    DEFAULT_CAPACITANCE_F,
    DEFAULT_INDUCTANCE_H,
    DEFAULT_RESISTANCE_OHM,
    DEFAULT_SOURCE_AMPLITUDE,
)

logger = logging.getLogger(__name__)


class SystemType(Enum):
    """
    The four supported circuit types. The value is the identifier used in
    scenario files and by presentation layers.
    """
    FIRST_ORDER_RC = "firstOrderRC"
    FIRST_ORDER_RL = "firstOrderRL"
    SERIES_RLC = "secondOrderSeriesRLC"
    PARALLEL_RLC = "secondOrderParallelRLC"

    def __str__(self):
        return self.value

    @classmethod
    def coerce(cls, value: Union[str, "SystemType"]) -> "SystemType":
        """Accepts an enum member or its string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            allowed = [member.value for member in cls]
            raise ValueError(f"Unknown system type '{value}'. Use one of: {allowed}") from None

    @property
    def is_first_order(self) -> bool:
        return self in (SystemType.FIRST_ORDER_RC, SystemType.FIRST_ORDER_RL)

    @property
    def output_quantity(self) -> Tuple[str, str]:
        """(symbol, unit) of the plotted output variable."""
        if self in (SystemType.FIRST_ORDER_RL, SystemType.PARALLEL_RLC):
            return ("i_L", "A")
        return ("v_C", "V")


class DampingRegime(Enum):
    """Qualitative behaviour of a second-order response."""
    UNDERDAMPED = "underdamped"
    CRITICALLY_DAMPED = "critically_damped"
    OVERDAMPED = "overdamped"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class CircuitSpec:
    """
    Raw physical values of the circuit as collected from the user.

    R, L and C are expected to be positive. The parallel RLC type reads
    `source_amplitude` as a current amplitude (amperes) even though every other
    type reads it as a voltage; the field is shared on purpose.
    """
    system_type: SystemType
    resistance: float = DEFAULT_RESISTANCE_OHM
    inductance: float = DEFAULT_INDUCTANCE_H
    capacitance: float = DEFAULT_CAPACITANCE_F
    source_amplitude: float = DEFAULT_SOURCE_AMPLITUDE

    def __post_init__(self):
        object.__setattr__(self, "system_type", SystemType.coerce(self.system_type))


@dataclass(frozen=True)
class InitialConditions:
    """Stored energy at t=0. Both values are always present."""
    capacitor_voltage: float = 0.0
    inductor_current: float = 0.0


@dataclass(frozen=True)
class SimulationParameters:
    """
    Normalized, per-type view of a circuit produced by the parameter mapper.

    `damping` and `natural_frequency` are None for first-order types.
    `resistance`, `capacitance` and `source_amplitude` are carried through
    unchanged because the output equations need them (RL steady-state current
    V/R, series RLC initial slope Il0/C, second-order step steady state).
    """
    system_type: SystemType
    gain: float
    time_constant: float
    damping: Optional[float]
    natural_frequency: Optional[float]
    resistance: float
    capacitance: float
    source_amplitude: float
