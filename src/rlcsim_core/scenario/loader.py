# src/rlcsim_core/scenario/loader.py
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import cerberus
import yaml

from ..constants import (
    DEFAULT_CAPACITANCE_F,
    DEFAULT_CRITICAL_DAMPING_TOLERANCE,
    DEFAULT_CUSTOM_EXPRESSION,
    DEFAULT_DT_S,
    DEFAULT_IMPULSE_AMPLITUDE,
    DEFAULT_INDUCTANCE_H,
    DEFAULT_MATCH_INITIAL_SLOPE,
    DEFAULT_RESISTANCE_OHM,
    DEFAULT_SOURCE_AMPLITUDE,
    DEFAULT_T_MAX_S,
    DEFAULT_TIME_DECIMALS,
)
from ..data_structures import CircuitSpec, DampingRegime, InitialConditions, SystemType
from ..parameters.presets import preset_circuit
from ..simulation.exceptions import TimeGridError
from ..simulation.grid import TimeGrid
from ..simulation.inputs import InputKind, InputSpec
from ..units import to_base_magnitude
from .exceptions import ScenarioParsingError, ScenarioSchemaError, ScenarioValueError
from .model import Scenario

logger = logging.getLogger(__name__)

STRING_SOURCE_NAME = "<string>"


class EnhancedValidator(cerberus.Validator):
    """Cerberus validator with the extra rules scenario files need."""

    def _validate_nonblank(self, constraint: bool, field: str, value: Any):
        """
        Rejects strings made only of whitespace.
        The rule's arguments are validated against this schema:
        {'type': 'boolean'}
        """
        if constraint and isinstance(value, str) and not value.strip():
            self._error(field, "must not be blank.")


class ScenarioLoader:
    """
    Reads a scenario YAML file and produces a frozen `Scenario`.

    Loading happens in three stages, each with its own exception:
      1. file and YAML syntax        -> ScenarioParsingError
      2. structure (Cerberus schema) -> ScenarioSchemaError
      3. units and value ranges      -> ScenarioValueError
    Physical plausibility (zero resistance, unstable step sizes, ...) is not
    checked here; that is the job of `ScenarioValidator`.
    """
    _quantity_rule = {"type": ["string", "number"], "nonblank": True}

    _schema = {
        "name": {"type": "string", "required": False, "empty": False},
        "circuit": {
            "type": "dict", "required": True, "schema": {
                "system_type": {"type": "string", "required": True, "allowed": [t.value for t in SystemType]},
                "resistance": _quantity_rule,
                "inductance": _quantity_rule,
                "capacitance": _quantity_rule,
                "source_amplitude": _quantity_rule,
                "preset": {
                    "type": "string", "allowed": [r.value for r in DampingRegime],
                    "excludes": ["resistance", "inductance", "capacitance"],
                },
            },
        },
        "initial_conditions": {
            "type": "dict", "required": False, "schema": {
                "capacitor_voltage": _quantity_rule,
                "inductor_current": _quantity_rule,
            },
        },
        "input": {
            "type": "dict", "required": False, "schema": {
                "type": {"type": "string", "allowed": [k.value for k in InputKind], "default": InputKind.STEP.value},
                "amplitude": dict(_quantity_rule, dependencies={"type": [InputKind.IMPULSE.value]}),
                "expression": {"type": "string", "dependencies": {"type": [InputKind.CUSTOM.value]}},
            },
        },
        "time": {
            "type": "dict", "required": False, "schema": {
                "t_max": _quantity_rule,
                "dt": _quantity_rule,
                "decimals": {"type": "integer", "min": 0, "max": 12},
            },
        },
        "options": {
            "type": "dict", "required": False, "schema": {
                "critical_damping_tolerance": {"type": "number", "min": 0},
                "match_initial_slope": {"type": "boolean"},
            },
        },
    }

    def __init__(self):
        self._validator = EnhancedValidator(self._schema)
        self._validator.allow_unknown = False

    def load(self, path: Union[str, Path]) -> Scenario:
        """Loads a scenario from a YAML file."""
        source = Path(path).resolve()
        logger.info(f"Loading scenario file: {source}")
        content = self._load_yaml(source)
        return self._build(content, source, default_name=source.stem)

    def load_string(self, text: str, source_name: str = STRING_SOURCE_NAME) -> Scenario:
        """Loads a scenario from YAML text, e.g. one embedded in a test or a notebook."""
        try:
            content = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ScenarioParsingError(details=f"Invalid YAML syntax: {e}", file_path=source_name) from e
        self._check_root(content, source_name)
        return self._build(content, None, default_name="scenario", source_name=source_name)

    # --- Stage 1: file and YAML ---

    def _load_yaml(self, source: Path) -> Dict[str, Any]:
        if not source.is_file():
            raise ScenarioParsingError(details=f"Scenario file not found at path: {source}", file_path=source)
        try:
            with source.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except PermissionError as e:
            raise ScenarioParsingError(details=f"Permission denied when trying to read file: {e}", file_path=source) from e
        except yaml.YAMLError as e:
            raise ScenarioParsingError(details=f"Invalid YAML syntax: {e}", file_path=source) from e
        self._check_root(content, source)
        return content

    @staticmethod
    def _check_root(content: Any, source: Union[Path, str]):
        if content is None:
            raise ScenarioParsingError(details="The YAML file is empty or contains no valid content.", file_path=source)
        if not isinstance(content, dict):
            raise ScenarioParsingError(details="The root of the YAML file must be a dictionary (mapping).", file_path=source)

    # --- Stages 2 and 3: schema, then values ---

    def _build(
        self,
        content: Dict[str, Any],
        source_path: Optional[Path],
        default_name: str,
        source_name: Optional[str] = None,
    ) -> Scenario:
        origin = source_path if source_path is not None else source_name
        if not self._validator.validate(content):
            raise ScenarioSchemaError(errors=self._validator.errors, file_path=origin)
        document = self._validator.document

        circuit_data = document["circuit"]
        system_type = SystemType(circuit_data["system_type"])
        circuit = self._build_circuit(system_type, circuit_data, origin)

        ic_data = document.get("initial_conditions") or {}
        initial_conditions = InitialConditions(
            capacitor_voltage=self._quantity(ic_data, "capacitor_voltage", "voltage", 0.0, "initial_conditions", origin),
            inductor_current=self._quantity(ic_data, "inductor_current", "current", 0.0, "initial_conditions", origin),
        )

        input_spec = self._build_input(document.get("input") or {}, origin)
        grid = self._build_grid(document.get("time") or {}, origin)
        options = document.get("options") or {}
        tolerance = float(options.get("critical_damping_tolerance", DEFAULT_CRITICAL_DAMPING_TOLERANCE))
        match_initial_slope = bool(options.get("match_initial_slope", DEFAULT_MATCH_INITIAL_SLOPE))

        scenario = Scenario(
            name=document.get("name", default_name),
            circuit=circuit,
            initial_conditions=initial_conditions,
            input_spec=input_spec,
            grid=grid,
            critical_damping_tolerance=tolerance,
            match_initial_slope=match_initial_slope,
            source_file=source_path,
        )
        logger.info(f"Scenario '{scenario.name}' loaded: {system_type}, {input_spec.kind} input, {grid.num_samples} samples.")
        return scenario

    def _build_circuit(self, system_type: SystemType, data: Dict[str, Any], origin) -> CircuitSpec:
        amplitude_role = "current" if system_type is SystemType.PARALLEL_RLC else "voltage"
        source_amplitude = self._quantity(data, "source_amplitude", amplitude_role, DEFAULT_SOURCE_AMPLITUDE, "circuit", origin)

        if "preset" in data:
            try:
                return preset_circuit(system_type, data["preset"], source_amplitude=source_amplitude)
            except ValueError as e:
                raise ScenarioValueError(field="circuit.preset", value=data["preset"], details=str(e), file_path=origin) from e

        return CircuitSpec(
            system_type=system_type,
            resistance=self._quantity(data, "resistance", "resistance", DEFAULT_RESISTANCE_OHM, "circuit", origin),
            inductance=self._quantity(data, "inductance", "inductance", DEFAULT_INDUCTANCE_H, "circuit", origin),
            capacitance=self._quantity(data, "capacitance", "capacitance", DEFAULT_CAPACITANCE_F, "circuit", origin),
            source_amplitude=source_amplitude,
        )

    def _build_input(self, data: Dict[str, Any], origin) -> InputSpec:
        kind = InputKind(data.get("type", InputKind.STEP.value))
        if kind is InputKind.IMPULSE:
            amplitude = self._quantity(data, "amplitude", "dimensionless", DEFAULT_IMPULSE_AMPLITUDE, "input", origin)
            return InputSpec.impulse(amplitude)
        if kind is InputKind.CUSTOM:
            return InputSpec.custom(data.get("expression", DEFAULT_CUSTOM_EXPRESSION))
        return InputSpec.step()

    def _build_grid(self, data: Dict[str, Any], origin) -> TimeGrid:
        t_max = self._quantity(data, "t_max", "time", DEFAULT_T_MAX_S, "time", origin)
        dt = self._quantity(data, "dt", "time", DEFAULT_DT_S, "time", origin)
        decimals = data.get("decimals", DEFAULT_TIME_DECIMALS)
        try:
            return TimeGrid(t_max=t_max, dt=dt, decimals=decimals)
        except TimeGridError as e:
            raise ScenarioValueError(field="time", value={"t_max": t_max, "dt": dt}, details=e.details, file_path=origin) from e

    @staticmethod
    def _quantity(data: Dict[str, Any], key: str, role: str, default: float, section: str, origin) -> float:
        if key not in data:
            return float(default)
        raw = data[key]
        try:
            return to_base_magnitude(raw, role)
        except Exception as e:
            raise ScenarioValueError(
                field=f"{section}.{key}",
                value=raw,
                details=f"Cannot interpret as a {role} value ({type(e).__name__}: {e}).",
                file_path=origin,
            ) from e
