# src/rlcsim_core/validation/validator.py
import logging
import math
from typing import List, Optional

from ..constants import (
    DEFAULT_CRITICAL_DAMPING_TOLERANCE,
    EULER_STABILITY_LIMIT,
    NEAR_CRITICAL_REPORT_BAND,
)
from ..data_structures import CircuitSpec, DampingRegime, SimulationParameters, SystemType
from ..parameters.mapper import map_circuit
from ..simulation.analytical import classify_damping
from ..simulation.grid import TimeGrid
from ..simulation.inputs import InputKind, InputSpec
from .issues import ValidationIssue, ValidationIssueLevel, count_by_level
from .issue_codes import ScenarioIssueCode

logger = logging.getLogger(__name__)

# (field name, display name, quantity it feeds) per system type.
_REQUIRED_COMPONENTS = {
    SystemType.FIRST_ORDER_RC: (
        ("resistance", "Resistance R", "tau = R*C"),
        ("capacitance", "Capacitance C", "tau = R*C"),
    ),
    SystemType.FIRST_ORDER_RL: (
        ("resistance", "Resistance R", "tau = L/R"),
        ("inductance", "Inductance L", "tau = L/R"),
    ),
    SystemType.SERIES_RLC: (
        ("resistance", "Resistance R", "zeta"),
        ("inductance", "Inductance L", "omega_n and zeta"),
        ("capacitance", "Capacitance C", "omega_n and zeta"),
    ),
    SystemType.PARALLEL_RLC: (
        ("resistance", "Resistance R", "zeta"),
        ("inductance", "Inductance L", "omega_n and zeta"),
        ("capacitance", "Capacitance C", "omega_n and zeta"),
    ),
}


class ScenarioValidator:
    """
    Checks a fully specified scenario for problems the response engine does not
    guard against itself.

    The engine is total: degenerate component values turn into `inf`/`nan`
    samples and an unstable Euler step turns into a diverging series. This
    validator is where those situations become readable issues. ERROR issues
    mean the run is meaningless; WARNING and INFO issues are reported alongside
    the result.
    """

    def __init__(
        self,
        circuit: CircuitSpec,
        grid: TimeGrid,
        input_spec: InputSpec,
        critical_damping_tolerance: float = DEFAULT_CRITICAL_DAMPING_TOLERANCE,
        source_file: Optional[str] = None,
    ):
        self.circuit = circuit
        self.grid = grid
        self.input_spec = input_spec
        self.critical_damping_tolerance = critical_damping_tolerance
        self.source_file = source_file
        self.issues: List[ValidationIssue] = []

    def validate(self) -> List[ValidationIssue]:
        """
        Runs every check and returns all issues found (errors, warnings and
        info). The caller decides whether ERROR issues stop the run.
        """
        self.issues = []
        system_type = self.circuit.system_type
        logger.debug(f"Validating {system_type} scenario with {self.input_spec.kind} input.")

        components_ok = self._check_components()
        self._check_input_expression()
        self._check_grid_resolution()
        if components_ok:
            params = map_circuit(self.circuit)
            self._check_euler_stability(params)
            self._check_near_critical_damping(params)

        if self.issues:
            counts = count_by_level(self.issues)
            logger.info(
                f"Validation complete. Found: {counts[ValidationIssueLevel.ERROR]} errors, "
                f"{counts[ValidationIssueLevel.WARNING]} warnings, {counts[ValidationIssueLevel.INFO]} info messages."
            )
            for issue in self.issues:
                if issue.level == ValidationIssueLevel.WARNING:
                    logger.warning(str(issue))
        else:
            logger.info("Validation complete with no issues found.")

        return self.issues

    def _add_issue(self, level: ValidationIssueLevel, code_enum: ScenarioIssueCode, field_name: Optional[str] = None, **kwargs):
        system_type = str(self.circuit.system_type)
        kwargs.setdefault('system_type', system_type)
        message = code_enum.format_message(**kwargs)
        details = dict(kwargs)
        if self.source_file:
            details['source_file'] = self.source_file
        self.issues.append(ValidationIssue(
            level=level, code=code_enum.code, message=message,
            system_type=system_type, field_name=field_name, details=details
        ))

    def _check_components(self) -> bool:
        all_ok = True
        for field_name, display_name, quantity in _REQUIRED_COMPONENTS[self.circuit.system_type]:
            value = getattr(self.circuit, field_name)
            if isinstance(value, (int, float)) and math.isfinite(value) and value > 0:
                continue
            all_ok = False
            self._add_issue(
                ValidationIssueLevel.ERROR, ScenarioIssueCode.COMP_DEGENERATE,
                field_name=field_name, component=display_name, value=value, quantity=quantity
            )
        return all_ok

    def _check_input_expression(self):
        if self.input_spec.kind is not InputKind.CUSTOM:
            return
        if not self.input_spec.expression.strip():
            self._add_issue(ValidationIssueLevel.ERROR, ScenarioIssueCode.INPUT_EXPR_EMPTY, field_name="expression")

    def _check_grid_resolution(self):
        resolution = 10.0 ** -int(self.grid.decimals)
        if self.grid.dt < resolution:
            self._add_issue(
                ValidationIssueLevel.WARNING, ScenarioIssueCode.GRID_RESOLUTION,
                field_name="dt", dt=self.grid.dt, resolution=resolution
            )

    def _check_euler_stability(self, params: SimulationParameters):
        if self.input_spec.kind is not InputKind.CUSTOM:
            return
        dt = self.grid.dt
        if params.system_type.is_first_order:
            ratio_name = "dt/tau"
            ratio = dt / params.time_constant
            max_dt = EULER_STABILITY_LIMIT * params.time_constant
        else:
            ratio_name = "omega_n*dt"
            ratio = params.natural_frequency * dt
            max_dt = EULER_STABILITY_LIMIT / params.natural_frequency
        if ratio > EULER_STABILITY_LIMIT:
            self._add_issue(
                ValidationIssueLevel.WARNING, ScenarioIssueCode.EULER_UNSTABLE,
                field_name="dt", ratio_name=ratio_name, ratio=ratio, limit=EULER_STABILITY_LIMIT, max_dt=max_dt
            )

    def _check_near_critical_damping(self, params: SimulationParameters):
        if params.system_type.is_first_order:
            return
        zeta = params.damping
        if abs(zeta - 1.0) >= NEAR_CRITICAL_REPORT_BAND:
            return
        regime = classify_damping(zeta, self.critical_damping_tolerance)
        if regime is DampingRegime.CRITICALLY_DAMPED:
            return
        self._add_issue(
            ValidationIssueLevel.INFO, ScenarioIssueCode.DAMPING_NEAR_CRITICAL,
            field_name="resistance", zeta=zeta, band=NEAR_CRITICAL_REPORT_BAND,
            regime=str(regime), tolerance=self.critical_damping_tolerance
        )
