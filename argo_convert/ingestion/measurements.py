"""
ARGO Measurement Extraction

Builds, for the parameters declared in a profile file, the measurement
arrays of the selected processing mode together with their quality flags
and descriptive attributes.
"""

import math
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
import xarray as xr

from .. import config
from ..exceptions import MissingParameterError
from .unpacker import (
    FLOAT_SENTINEL, STRING1, PROFILE_DIM, PROFILE_INDEX,
    unpack_fixed_string, unpack_fixed_string_array
)

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

REALTIME_MODE = 'R'


class MeasurementKind(Enum):
    """Which variant of the measurement variables a profile carries"""
    REALTIME = 'realtime'
    ADJUSTED = 'adjusted'

    @classmethod
    def from_data_mode(cls, data_mode: str) -> 'MeasurementKind':
        return cls.REALTIME if data_mode == REALTIME_MODE else cls.ADJUSTED


@dataclass
class ParameterMeasurement:
    """Everything extracted for one measured parameter"""
    name: str
    kind: MeasurementKind
    values: List[float]
    level_qc: List[str]
    profile_qc: str
    units: str
    long_name: str
    data_mode: str
    adjusted_level_qc: Optional[List[str]] = None

    @property
    def variable_name(self) -> str:
        return measurement_variable(self.name, self.kind)


@dataclass
class MeasurementSet:
    """Measurements of one profile, keyed by parameter name in declaration order"""
    kind: MeasurementKind
    n_levels: int
    parameters: Dict[str, ParameterMeasurement] = field(default_factory=dict)

    def values(self) -> Dict[str, List[float]]:
        return {name: p.values for name, p in self.parameters.items()}

    def level_qc(self) -> Dict[str, List[str]]:
        return {name: p.level_qc for name, p in self.parameters.items()}

    def adjusted_level_qc(self) -> Optional[Dict[str, List[str]]]:
        if self.kind is not MeasurementKind.ADJUSTED:
            return None
        return {name: p.adjusted_level_qc for name, p in self.parameters.items()}


def measurement_variable(parameter: str, kind: MeasurementKind) -> str:
    """Name of the variable holding a parameter's values for a given kind"""
    if kind is MeasurementKind.ADJUSTED:
        return f"{parameter}_ADJUSTED"
    return parameter


def _read_levels(name: str, n_levels: int, container: xr.Dataset) -> List[float]:
    """Read the per-level values of the first profile"""
    if name not in container.variables:
        raise MissingParameterError(f"measurement variable {name} not found")

    var = container[name]
    if PROFILE_DIM in var.dims:
        var = var.isel({PROFILE_DIM: PROFILE_INDEX})

    values = np.asarray(var.values)
    if values.dtype.kind not in ('i', 'u', 'f'):
        raise MissingParameterError(f"measurement variable {name} is not numeric ({values.dtype})")
    values = values.ravel()
    if values.size != n_levels:
        raise MissingParameterError(
            f"measurement variable {name} has {values.size} levels, expected {n_levels}"
        )

    levels = []
    for value in values.tolist():
        value = float(value)
        levels.append(value if math.isfinite(value) else FLOAT_SENTINEL)
    return levels


def _attribute(container: xr.Dataset, names: List[str], attr: str) -> str:
    """First non-empty attribute among the given variables"""
    for name in names:
        if name in container.variables:
            value = container[name].attrs.get(attr)
            if value is not None:
                if isinstance(value, bytes):
                    value = value.decode('utf-8', errors='replace')
                return str(value).strip()
    return ""


def extract_parameter(container: xr.Dataset, parameter: str, kind: MeasurementKind,
                      n_levels: int, data_mode: str) -> ParameterMeasurement:
    """
    Extract one declared parameter

    Raises:
        MissingParameterError: the measurement variable is absent or malformed
    """
    variable = measurement_variable(parameter, kind)
    values = _read_levels(variable, n_levels, container)

    adjusted_level_qc = None
    if kind is MeasurementKind.ADJUSTED:
        adjusted_level_qc = unpack_fixed_string_array(
            f"{parameter}_ADJUSTED_QC", STRING1, n_levels, container
        )

    return ParameterMeasurement(
        name=parameter,
        kind=kind,
        values=values,
        level_qc=unpack_fixed_string_array(f"{parameter}_QC", STRING1, n_levels, container),
        adjusted_level_qc=adjusted_level_qc,
        profile_qc=unpack_fixed_string(f"PROFILE_{parameter}_QC", STRING1, container),
        units=_attribute(container, [parameter, variable], 'units'),
        long_name=_attribute(container, [parameter, variable], 'long_name'),
        data_mode=data_mode,
    )


def extract_measurements(container: xr.Dataset, parameters: List[str], data_mode: str,
                         n_levels: int, parameter_modes: Optional[List[str]] = None) -> MeasurementSet:
    """
    Extract the measurements of every declared parameter

    Args:
        container: Raw NetCDF dataset
        parameters: Parameter names as read from STATION_PARAMETERS
        data_mode: Profile processing mode; "R" selects the raw variables,
            anything else the adjusted ones
        n_levels: Number of vertical levels
        parameter_modes: Per-parameter processing modes (PARAMETER_DATA_MODE),
            aligned with ``parameters``

    Returns:
        MeasurementSet with one descriptor per non-blank parameter
    """
    kind = MeasurementKind.from_data_mode(data_mode)
    measurements = MeasurementSet(kind=kind, n_levels=n_levels)

    for i, parameter in enumerate(parameters):
        if not parameter:
            continue
        if parameter in measurements.parameters:
            logger.warning(f"Parameter {parameter} declared twice, keeping the first")
            continue

        mode = data_mode
        if parameter_modes and i < len(parameter_modes) and parameter_modes[i]:
            mode = parameter_modes[i]

        measurements.parameters[parameter] = extract_parameter(
            container, parameter, kind, n_levels, mode
        )

    logger.debug(f"Extracted {len(measurements.parameters)} {kind.value} parameters")
    return measurements
