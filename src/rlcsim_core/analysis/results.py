# src/rlcsim_core/analysis/results.py
"""
Defines the result contract of the response-marker analysis.

Markers are the annotations a plot usually carries on top of the series: the
time constant, and for an underdamped second-order circuit the damped
frequency and the first peak. They are derived from the mapped parameters and
looked up in an already computed `ResponseResult`; nothing here re-simulates.
"""
from dataclasses import dataclass
from typing import Optional

from ..data_structures import DampingRegime, SystemType
from ..simulation.results import ResponseSample


@dataclass(frozen=True)
class ResponseMarkers:
    """
    Immutable bundle of the markers for one response.

    Attributes:
        system_type: Circuit type the markers were computed for.
        output_symbol: Plotted variable, `v_C` or `i_L`.
        output_unit: Its unit, `V` or `A`.
        time_constant: tau in seconds (may be non-finite for degenerate circuits).
        regime: Damping regime; None for first-order types.
        damped_frequency: omega_d in rad/s; None unless underdamped.
        peak_time: pi / omega_d in seconds; None unless underdamped.
        tau_sample: Sample of the series at tau, or None when no sample lies
                    within half a step of it.
        peak_sample: Sample of the series at the peak time, same rule.
    """
    system_type: SystemType
    output_symbol: str
    output_unit: str
    time_constant: float
    regime: Optional[DampingRegime] = None
    damped_frequency: Optional[float] = None
    peak_time: Optional[float] = None
    tau_sample: Optional[ResponseSample] = None
    peak_sample: Optional[ResponseSample] = None

    @property
    def output_label(self) -> str:
        """Axis label such as `v_C(t) (V)`."""
        return f"{self.output_symbol}(t) ({self.output_unit})"
