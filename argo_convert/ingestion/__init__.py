"""
ARGO Data Ingestion Module

This module provides functionality to unpack ARGO NetCDF profile files.
"""

from .argo_reader import ArgoNetCDFReader, ArgoProfile
from .measurements import MeasurementKind, MeasurementSet, ParameterMeasurement, extract_measurements
from .unpacker import (
    FLOAT_SENTINEL,
    INT_SENTINEL,
    unpack_scalar,
    unpack_fixed_string,
    unpack_fixed_string_array
)

__all__ = [
    'ArgoNetCDFReader',
    'ArgoProfile',
    'MeasurementKind',
    'MeasurementSet',
    'ParameterMeasurement',
    'extract_measurements',
    'FLOAT_SENTINEL',
    'INT_SENTINEL',
    'unpack_scalar',
    'unpack_fixed_string',
    'unpack_fixed_string_array'
]
