# src/rlcsim_core/simulation/inputs.py
from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..constants import DEFAULT_IMPULSE_AMPLITUDE


class InputKind(Enum):
    STEP = "step"
    IMPULSE = "impulse"
    CUSTOM = "custom"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class InputSpec:
    """
    The signal driving the circuit.

    A step has no payload of its own: its amplitude is the circuit's source
    amplitude V. An impulse carries its own amplitude, and a custom input
    carries an expression in the variable `t`.
    """
    kind: InputKind
    impulse_amplitude: float = DEFAULT_IMPULSE_AMPLITUDE
    expression: str = ""

    def __post_init__(self):
        object.__setattr__(self, "kind", InputKind(self.kind))

    @classmethod
    def step(cls) -> "InputSpec":
        return cls(kind=InputKind.STEP)

    @classmethod
    def impulse(cls, amplitude: float = DEFAULT_IMPULSE_AMPLITUDE) -> "InputSpec":
        return cls(kind=InputKind.IMPULSE, impulse_amplitude=float(amplitude))

    @classmethod
    def custom(cls, expression: Union[str, None]) -> "InputSpec":
        return cls(kind=InputKind.CUSTOM, expression=expression or "")
