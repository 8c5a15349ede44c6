# src/rlcsim_core/scenario/model.py
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..constants import DEFAULT_CRITICAL_DAMPING_TOLERANCE, DEFAULT_MATCH_INITIAL_SLOPE
from ..data_structures import CircuitSpec, InitialConditions
from ..simulation.grid import TimeGrid
from ..simulation.inputs import InputSpec


@dataclass(frozen=True)
class Scenario:
    """
    Everything needed for one simulation run, with every physical value already
    converted to SI base units and every omitted value filled with its default.
    """
    name: str
    circuit: CircuitSpec
    initial_conditions: InitialConditions
    input_spec: InputSpec
    grid: TimeGrid
    critical_damping_tolerance: float = DEFAULT_CRITICAL_DAMPING_TOLERANCE
    match_initial_slope: bool = DEFAULT_MATCH_INITIAL_SLOPE
    source_file: Optional[Path] = None
