"""
ARGO NetCDF Field Unpacker

This module reads named fields from an ARGO NetCDF container. Character
variables are read as raw fixed-width byte buffers, decoded and trimmed.
Numeric scalars fall back to sentinel values when a field is absent or
malformed so that a batch can continue past partial files.

The container is an ``xarray.Dataset`` opened with ``decode_cf=False`` so
character arrays keep their raw byte layout.
"""

import math
import logging
from typing import Any, List

import numpy as np
import xarray as xr

from .. import config
from ..exceptions import FieldDecodeError

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

# ARGO string widths
STRING1 = 1
STRING2 = 2
STRING4 = 4
STRING8 = 8
STRING16 = 16
STRING32 = 32
STRING64 = 64
STRING256 = 256
DATE_TIME = 14

# Fallbacks for missing or malformed scalars
INT_SENTINEL = 99999
FLOAT_SENTINEL = 999999.0

PROFILE_DIM = 'N_PROF'
PROFILE_INDEX = 0


def decode_fixed_width(raw: bytes) -> str:
    """Decode a fixed-width byte buffer and strip trailing NULs and spaces"""
    return raw.decode('utf-8', errors='replace').rstrip('\x00 ')


def _select_profile(var: xr.DataArray) -> xr.DataArray:
    """Restrict a per-profile variable to the profile being converted"""
    if PROFILE_DIM in var.dims:
        if var.sizes[PROFILE_DIM] <= PROFILE_INDEX:
            raise FieldDecodeError(f"{var.name} has no profile {PROFILE_INDEX}")
        return var.isel({PROFILE_DIM: PROFILE_INDEX})
    return var


def _to_raw_bytes(values: Any, item_width: int) -> bytes:
    """
    Flatten a character array into its raw byte buffer

    Variable-length strings are padded or cut to ``item_width`` bytes so
    entries stay at fixed offsets.
    """
    arr = np.asarray(values)

    if arr.dtype.kind == 'S':
        return arr.tobytes()

    if arr.dtype.kind == 'U':
        width = arr.dtype.itemsize // 4
        return b''.join(
            item.encode('utf-8').ljust(width, b'\x00')
            for item in arr.ravel().tolist()
        )

    if arr.dtype.kind == 'O':
        chunks = []
        for item in arr.ravel().tolist():
            if isinstance(item, str):
                item = item.encode('utf-8')
            elif not isinstance(item, bytes):
                raise FieldDecodeError(f"unexpected {type(item).__name__} in character array")
            chunks.append(item[:item_width].ljust(item_width, b'\x00'))
        return b''.join(chunks)

    raise FieldDecodeError(f"variable of dtype {arr.dtype} is not a character array")


def _read_raw(name: str, byte_width: int, count: int, container: xr.Dataset) -> bytes:
    """Read exactly ``count`` entries of ``byte_width`` raw bytes of a character variable"""
    if name not in container.variables:
        raise FieldDecodeError(f"variable {name} not found")

    nbytes = byte_width * count
    raw = _to_raw_bytes(_select_profile(container[name]).values, byte_width)
    return raw[:nbytes].ljust(nbytes, b'\x00')


def unpack_scalar(name: str, container: xr.Dataset, fallback: Any) -> Any:
    """
    Read a numeric scalar of the first profile

    Args:
        name: Variable name
        container: Raw NetCDF dataset
        fallback: Value returned when the field is absent or malformed

    Returns:
        The scalar value, or ``fallback``
    """
    if name not in container.variables:
        logger.warning(f"Variable {name} missing, using {fallback}")
        return fallback

    try:
        values = np.asarray(_select_profile(container[name]).values)
        if values.size != 1 or values.dtype.kind not in ('i', 'u', 'f'):
            raise FieldDecodeError(f"expected one number, got {values.dtype} with shape {values.shape}")
        value = values.item()
        if isinstance(value, float) and not math.isfinite(value):
            raise FieldDecodeError(f"non-finite value {value}")
        return value
    except FieldDecodeError as e:
        logger.warning(f"Variable {name} malformed ({e}), using {fallback}")
        return fallback


def unpack_int(name: str, container: xr.Dataset) -> int:
    value = unpack_scalar(name, container, INT_SENTINEL)
    if value != int(value):
        logger.warning(f"Variable {name} is not integral ({value}), using {INT_SENTINEL}")
        return INT_SENTINEL
    return int(value)


def unpack_float(name: str, container: xr.Dataset) -> float:
    value = unpack_scalar(name, container, FLOAT_SENTINEL)
    return float(value)


def unpack_fixed_string(name: str, byte_width: int, container: xr.Dataset) -> str:
    """
    Read a fixed-width string of the first profile

    Absent or undecodable variables yield an empty string.
    """
    try:
        raw = _read_raw(name, byte_width, 1, container)
    except FieldDecodeError as e:
        logger.warning(f"Could not unpack string {name}: {e}")
        return ""
    return decode_fixed_width(raw)


def unpack_fixed_string_array(name: str, byte_width: int, count: int,
                              container: xr.Dataset) -> List[str]:
    """
    Read an array of ``count`` fixed-width strings of the first profile

    The result always has exactly ``count`` entries; entries that cannot be
    read are empty strings.
    """
    try:
        raw = _read_raw(name, byte_width, count, container)
    except FieldDecodeError as e:
        logger.warning(f"Could not unpack string array {name}: {e}")
        return [""] * count

    return [
        decode_fixed_width(raw[i * byte_width:(i + 1) * byte_width])
        for i in range(count)
    ]
