# --- src/rlcsim_core/units.py ---
import logging
from typing import Union

import pint

logger = logging.getLogger(__name__)
ureg = pint.UnitRegistry()
Quantity = ureg.Quantity
logger.debug("Pint Unit Registry initialized.")

# Base unit assumed for bare numbers, keyed by the physical role of the value.
BASE_UNITS = {
    "resistance": "ohm",
    "inductance": "henry",
    "capacitance": "farad",
    "voltage": "volt",
    "current": "ampere",
    "time": "second",
    "dimensionless": "dimensionless",
}


def to_base_magnitude(value: Union[str, int, float], role: str) -> float:
    """
    Converts a user value into a float expressed in the base unit for `role`.

    Numbers and dimensionless strings ("2.2", "1e-3") are taken to already be in
    the base unit. Strings with units ("10 mH", "50 ms") are converted.

    Raises:
        pint.UndefinedUnitError: If the string names an unknown unit.
        pint.DimensionalityError: If the unit is incompatible with the role.
        KeyError: If `role` is not one of BASE_UNITS.
    """
    base_unit = BASE_UNITS[role]
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)

    quantity = ureg.Quantity(str(value).strip())
    if quantity.dimensionless:
        return float(quantity.to("dimensionless").magnitude)
    return float(quantity.to(base_unit).magnitude)
