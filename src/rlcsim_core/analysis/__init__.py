# src/rlcsim_core/analysis/__init__.py
"""
Post-processing of computed responses: damping regime, damped frequency, peak
time and the sampled values plot markers are drawn at.
"""
from .results import ResponseMarkers
from .markers import compute_markers, damped_frequency, peak_time, value_near

__all__ = [
    # Result Contract
    "ResponseMarkers",
    # Marker Services
    "compute_markers",
    "damped_frequency",
    "peak_time",
    "value_near",
]
