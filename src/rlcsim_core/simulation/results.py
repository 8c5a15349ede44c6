# src/rlcsim_core/simulation/results.py
"""
Defines the result contract of the response engine.

A `ResponseResult` has exactly one of two shapes: a time-ascending series of
samples, or an error message. Consumers branch on `is_error`. The series is
stored as two read-only numpy arrays; `samples` and `to_records()` give the
per-point views presentation code usually wants.
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import numpy as np


def _frozen_array(values) -> np.ndarray:
    array = np.array(values, dtype=float, copy=True)
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class ResponseSample:
    """One plotted point: time in seconds, output in volts or amperes."""
    t: float
    y: float


@dataclass(frozen=True, eq=False)
class ResponseResult:
    """
    Attributes:
        times: Sample times, rounded for display. Empty on error.
        values: Output values at those times. Empty on error.
        error: Human-readable message when the run failed, otherwise None.
    """
    times: np.ndarray
    values: np.ndarray
    error: Optional[str] = None

    @classmethod
    def success(cls, times: np.ndarray, values: np.ndarray) -> "ResponseResult":
        if len(times) != len(values):
            raise ValueError(f"Got {len(times)} times but {len(values)} values.")
        return cls(times=_frozen_array(times), values=_frozen_array(values))

    @classmethod
    def failure(cls, message: str) -> "ResponseResult":
        return cls(times=_frozen_array([]), values=_frozen_array([]), error=message)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def samples(self) -> Tuple[ResponseSample, ...]:
        return tuple(ResponseSample(float(t), float(y)) for t, y in zip(self.times, self.values))

    def __len__(self) -> int:
        return len(self.times)

    def __iter__(self) -> Iterator[ResponseSample]:
        return iter(self.samples)

    def to_records(self) -> Union[List[Dict[str, float]], Dict[str, Any]]:
        """`[{"t": ..., "y": ...}, ...]` on success, `{"error": "..."}` on failure."""
        if self.is_error:
            return {"error": self.error}
        return [{"t": sample.t, "y": sample.y} for sample in self.samples]
