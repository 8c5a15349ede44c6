# src/rlcsim_core/parameters/__init__.py
from .mapper import map_circuit
from .presets import DAMPING_PRESETS, preset_circuit

__all__ = [
    # Parameter Mapper
    "map_circuit",
    # Presets
    "DAMPING_PRESETS",
    "preset_circuit",
]
