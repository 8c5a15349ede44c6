# src/rlcsim_core/validation/issue_codes.py
import logging
from enum import Enum

logger = logging.getLogger(__name__)


class ScenarioIssueCode(Enum):
    """
    Registry of scenario validation issue codes and their message templates.
    Each enum member's value is a tuple: (code_str, message_template_str).
    """

    # --- Component Values (COMP_...) ---
    COMP_DEGENERATE = ("COMP_DEGENERATE", "{component} value {value} is not a finite, positive number; a {system_type} circuit needs it to compute {quantity}.")

    # --- Input Signal (INPUT_...) ---
    INPUT_EXPR_EMPTY = ("INPUT_EXPR_EMPTY", "Custom input selected but no expression in 't' was given.")

    # --- Numerical Integration (EULER_...) ---
    EULER_UNSTABLE = ("EULER_UNSTABLE", "Forward Euler step is outside its stability range ({ratio_name} = {ratio:.4g} > {limit}); the custom-input response will diverge. Reduce dt below {max_dt:.4g} s.")

    # --- Time Grid (GRID_...) ---
    GRID_RESOLUTION = ("GRID_RESOLUTION", "Step dt = {dt} s is finer than the reported time resolution of {resolution} s; consecutive sample times will round to the same value.")

    # --- Damping (DAMPING_...) ---
    DAMPING_NEAR_CRITICAL = ("DAMPING_NEAR_CRITICAL", "Damping ratio {zeta!r} is within {band} of 1 but is handled by the {regime} formula (critical damping tolerance {tolerance}).")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def template(self) -> str:
        return self.value[1]

    def format_message(self, **kwargs) -> str:
        """Formats the message template with provided keyword arguments."""
        try:
            return self.template.format(**kwargs)
        except KeyError as e:
            logger.error(f"Missing key {e} for formatting message template of {self.name} (code: {self.code}): '{self.template}'. Provided args: {kwargs}")
            return f"Error formatting message for {self.code}: Missing key {e}. Template: '{self.template}' Args: {kwargs}"
