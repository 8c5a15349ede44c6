# --- src/rlcsim_core/constants.py ---
import logging

logger = logging.getLogger(__name__)

# --- Default Circuit Values (SI base units) ---

DEFAULT_RESISTANCE_OHM: float = 1.0
DEFAULT_INDUCTANCE_H: float = 1.0
DEFAULT_CAPACITANCE_F: float = 1.0
DEFAULT_SOURCE_AMPLITUDE: float = 1.0
DEFAULT_IMPULSE_AMPLITUDE: float = 1.0
DEFAULT_CUSTOM_EXPRESSION: str = "sin(2*t)"

# --- Time Grid ---

DEFAULT_T_MAX_S: float = 10.0
DEFAULT_DT_S: float = 0.05

#: Decimal places kept on reported sample times.
DEFAULT_TIME_DECIMALS: int = 2

#: Relative distance from an integer below which t_max/dt is treated as that
#: integer when sizing the grid, so 10/0.05 yields 200 steps and not 201.
GRID_RATIO_REL_TOLERANCE: float = 1.0e-9

# --- Damping Regimes ---

#: Half-width of the band around zeta == 1 treated as critically damped.
#: Zero keeps the exact comparison, so only hand-picked values such as the
#: R=2, L=1, C=1 series preset reach the critical branch.
DEFAULT_CRITICAL_DAMPING_TOLERANCE: float = 0.0

#: Distance from zeta == 1 inside which validation reports that the
#: critically damped branch was narrowly missed.
NEAR_CRITICAL_REPORT_BAND: float = 1.0e-6

#: Under- and critically damped step coefficients as published. True selects
#: the variant whose initial slope equals y'(0) for any initial state.
DEFAULT_MATCH_INITIAL_SLOPE: bool = False

# --- Explicit Euler Stability ---

#: Largest dt/tau (first order) or wn*dt (second order) considered stable
#: for the fixed-step integrator.
EULER_STABILITY_LIMIT: float = 2.0

logger.debug("Defined core constants (defaults, grid and damping tolerances).")
