"""
ARGO NetCDF Data Reader

This module reads ARGO profile NetCDF files and extracts the fields needed to
build profile and metadata documents. Only the first profile of a file is
converted.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List

import xarray as xr

from .. import config
from ..exceptions import MissingDimensionError
from .measurements import MeasurementSet, extract_measurements
from .unpacker import (
    STRING1, STRING2, STRING4, STRING8, STRING16, STRING32, STRING64, STRING256, DATE_TIME,
    unpack_fixed_string, unpack_fixed_string_array, unpack_float, unpack_int
)

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

REQUIRED_DIMENSIONS = ('N_PROF', 'N_PARAM', 'N_LEVELS')
OPTIONAL_DIMENSIONS = ('N_CALIB', 'N_HISTORY')

# (variable, width) of the fixed-width string fields
STRING_FIELDS = (
    ('DATA_TYPE', STRING16),
    ('FORMAT_VERSION', STRING4),
    ('HANDBOOK_VERSION', STRING4),
    ('REFERENCE_DATE_TIME', DATE_TIME),
    ('DATE_CREATION', DATE_TIME),
    ('DATE_UPDATE', DATE_TIME),
    ('PLATFORM_NUMBER', STRING8),
    ('PROJECT_NAME', STRING64),
    ('PI_NAME', STRING64),
    ('DIRECTION', STRING1),
    ('DATA_CENTRE', STRING2),
    ('DC_REFERENCE', STRING32),
    ('DATA_STATE_INDICATOR', STRING4),
    ('DATA_MODE', STRING1),
    ('PLATFORM_TYPE', STRING32),
    ('FLOAT_SERIAL_NO', STRING32),
    ('FIRMWARE_VERSION', STRING32),
    ('WMO_INST_TYPE', STRING4),
    ('JULD_QC', STRING1),
    ('POSITION_QC', STRING1),
    ('POSITIONING_SYSTEM', STRING8),
    ('VERTICAL_SAMPLING_SCHEME', STRING256),
)

INT_FIELDS = ('CYCLE_NUMBER', 'CONFIG_MISSION_NUMBER')
FLOAT_FIELDS = ('JULD', 'JULD_LOCATION', 'LATITUDE', 'LONGITUDE')


@dataclass
class ArgoProfile:
    """Fields extracted from one ARGO profile file"""
    source: str
    dimensions: Dict[str, int]
    strings: Dict[str, str]
    integers: Dict[str, int]
    floats: Dict[str, float]
    station_parameters: List[str]
    measurements: MeasurementSet

    @property
    def platform_number(self) -> str:
        return self.strings['PLATFORM_NUMBER']

    @property
    def cycle_number(self) -> int:
        return self.integers['CYCLE_NUMBER']

    @property
    def data_mode(self) -> str:
        return self.strings['DATA_MODE']

    @property
    def latitude(self) -> float:
        return self.floats['LATITUDE']

    @property
    def longitude(self) -> float:
        return self.floats['LONGITUDE']


class ArgoNetCDFReader:
    """Class to read and unpack ARGO NetCDF profile files"""

    def read_argo_file(self, file_path: str) -> ArgoProfile:
        """
        Read an ARGO NetCDF file and extract its first profile

        Args:
            file_path: Path to the NetCDF file

        Returns:
            ArgoProfile with every field needed to build the documents

        Raises:
            ArgoFileError: the file is structurally unusable
            OSError: the file cannot be opened
        """
        with xr.open_dataset(file_path, decode_cf=False) as ds:
            profile = self.read_dataset(ds, source=str(file_path))

        logger.info(f"Read profile {profile.platform_number}_{profile.cycle_number} from {file_path}")
        return profile

    def read_dataset(self, ds: xr.Dataset, source: str = '<dataset>') -> ArgoProfile:
        """Extract the first profile from an already opened raw dataset"""
        dimensions = self._read_dimensions(ds)

        strings = {name: unpack_fixed_string(name, width, ds) for name, width in STRING_FIELDS}
        integers = {name: unpack_int(name, ds) for name in INT_FIELDS}
        floats = {name: unpack_float(name, ds) for name in FLOAT_FIELDS}

        station_parameters = unpack_fixed_string_array(
            'STATION_PARAMETERS', STRING16, dimensions['N_PARAM'], ds
        )

        parameter_modes = None
        if 'PARAMETER_DATA_MODE' in ds.variables:
            parameter_modes = unpack_fixed_string_array(
                'PARAMETER_DATA_MODE', STRING1, dimensions['N_PARAM'], ds
            )

        measurements = extract_measurements(
            ds,
            station_parameters,
            strings['DATA_MODE'],
            dimensions['N_LEVELS'],
            parameter_modes=parameter_modes,
        )

        return ArgoProfile(
            source=source,
            dimensions=dimensions,
            strings=strings,
            integers=integers,
            floats=floats,
            station_parameters=station_parameters,
            measurements=measurements,
        )

    def _read_dimensions(self, ds: xr.Dataset) -> Dict[str, int]:
        """Read the ARGO dimensions, failing on missing required ones"""
        sizes = dict(ds.sizes)
        dimensions = {}

        for name in REQUIRED_DIMENSIONS:
            if name not in sizes:
                raise MissingDimensionError(f"dimension {name} not found")
            dimensions[name] = int(sizes[name])

        if dimensions['N_PROF'] < 1:
            raise MissingDimensionError("file contains no profile")

        for name in OPTIONAL_DIMENSIONS:
            dimensions[name] = int(sizes.get(name, 0))

        return dimensions
