# src/rlcsim_core/parameters/presets.py
import logging
from typing import Dict, Tuple, Union

from ..data_structures import CircuitSpec, DampingRegime, SystemType
from ..constants import DEFAULT_SOURCE_AMPLITUDE

logger = logging.getLogger(__name__)

# (R, L, C) per second-order type and regime. With L = C = 1 the series zeta
# is R/2 and the parallel zeta is 1/(2R), hence the mirrored resistances.
DAMPING_PRESETS: Dict[SystemType, Dict[DampingRegime, Tuple[float, float, float]]] = {
    SystemType.SERIES_RLC: {
        DampingRegime.UNDERDAMPED: (1.0, 1.0, 1.0),
        DampingRegime.CRITICALLY_DAMPED: (2.0, 1.0, 1.0),
        DampingRegime.OVERDAMPED: (4.0, 1.0, 1.0),
    },
    SystemType.PARALLEL_RLC: {
        DampingRegime.UNDERDAMPED: (5.0, 1.0, 1.0),
        DampingRegime.CRITICALLY_DAMPED: (0.5, 1.0, 1.0),
        DampingRegime.OVERDAMPED: (0.2, 1.0, 1.0),
    },
}


def preset_circuit(
    system_type: Union[str, SystemType],
    regime: Union[str, DampingRegime],
    source_amplitude: float = DEFAULT_SOURCE_AMPLITUDE,
) -> CircuitSpec:
    """
    Returns a circuit whose component values land in the requested damping regime.

    Raises:
        ValueError: For first-order types (they have no damping ratio) or an
                    unknown regime name.
    """
    system_type = SystemType.coerce(system_type)
    regime = DampingRegime(regime)
    if system_type not in DAMPING_PRESETS:
        raise ValueError(f"Damping presets exist only for second-order types, not '{system_type}'.")

    r, l, c = DAMPING_PRESETS[system_type][regime]
    logger.debug("Using %s preset for %s: R=%s, L=%s, C=%s", regime, system_type, r, l, c)
    return CircuitSpec(
        system_type=system_type,
        resistance=r,
        inductance=l,
        capacitance=c,
        source_amplitude=source_amplitude,
    )
