# src/rlcsim_core/simulation/grid.py
import logging
import math
from dataclasses import dataclass

import numpy as np

from ..constants import DEFAULT_TIME_DECIMALS, GRID_RATIO_REL_TOLERANCE
from .exceptions import TimeGridError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeGrid:
    """
    Fixed-step sampling grid `t_k = k * dt` for k = 0 .. ceil(t_max / dt).

    Times are generated by multiplication, never by accumulation, so the k-th
    sample does not drift. `display_times()` rounds them to `decimals` places
    for reporting; the response itself is always computed on `times()`.

    When t_max is not a whole multiple of dt, the last sample lies past t_max
    (at ceil(t_max/dt) * dt) so that the horizon is always covered.
    """
    t_max: float
    dt: float
    decimals: int = DEFAULT_TIME_DECIMALS

    def __post_init__(self):
        if not (math.isfinite(self.t_max) and self.t_max > 0):
            raise TimeGridError(t_max=self.t_max, dt=self.dt, details="t_max must be a finite, positive number.")
        if not (math.isfinite(self.dt) and self.dt > 0):
            raise TimeGridError(t_max=self.t_max, dt=self.dt, details="dt must be a finite, positive number.")
        if int(self.decimals) != self.decimals or self.decimals < 0:
            raise TimeGridError(t_max=self.t_max, dt=self.dt, details=f"decimals must be a non-negative integer, got {self.decimals}.")

    @property
    def num_steps(self) -> int:
        ratio = self.t_max / self.dt
        nearest = round(ratio)
        # 10 / 0.05 may come out a hair above 200; that is still 200 steps.
        if abs(ratio - nearest) <= GRID_RATIO_REL_TOLERANCE * max(1.0, abs(ratio)):
            return int(nearest)
        return math.ceil(ratio)

    @property
    def num_samples(self) -> int:
        return self.num_steps + 1

    def times(self) -> np.ndarray:
        """Exact sample times used for computation."""
        return np.arange(self.num_samples, dtype=float) * self.dt

    def display_times(self) -> np.ndarray:
        """Sample times rounded for display and lookup."""
        return np.round(self.times(), int(self.decimals))
