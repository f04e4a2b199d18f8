"""
Document Schemas

Defines the two record types produced by the converter: profile records
(one per measurement cycle) and metadata records (one per distinct float
configuration), and their plain document form.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class GeoJSONPoint:
    """GeoJSON point, longitude first"""
    longitude: float
    latitude: float

    def to_document(self) -> Dict[str, Any]:
        return {'type': 'Point', 'coordinates': [self.longitude, self.latitude]}


@dataclass(frozen=True)
class DataInfo:
    """Descriptive information about one measured parameter"""
    data_mode: str
    units: str
    long_name: str
    profile_parameter_qc: str

    def to_document(self) -> Dict[str, str]:
        return {
            'DATA_MODE': self.data_mode,
            'UNITS': self.units,
            'LONG_NAME': self.long_name,
            'PROFILE_PARAMETER_QC': self.profile_parameter_qc,
        }


@dataclass(frozen=True)
class MetaFields:
    """Platform and instrument configuration compared during deduplication"""
    PLATFORM_NUMBER: str
    DATA_TYPE: str
    FORMAT_VERSION: str
    HANDBOOK_VERSION: str
    REFERENCE_DATE_TIME: str
    PROJECT_NAME: str
    PI_NAME: Tuple[str, ...]
    DATA_CENTRE: str
    DC_REFERENCE: str
    PLATFORM_TYPE: str
    FLOAT_SERIAL_NO: str
    FIRMWARE_VERSION: str
    WMO_INST_TYPE: str
    POSITIONING_SYSTEM: str

    def to_document(self) -> Dict[str, Any]:
        document = {}
        for f in fields(self):
            value = getattr(self, f.name)
            document[f.name] = list(value) if isinstance(value, tuple) else value
        return document


@dataclass(frozen=True)
class MetaRecord:
    _id: str
    meta_fields: MetaFields

    @property
    def platform_number(self) -> str:
        return self.meta_fields.PLATFORM_NUMBER

    def to_document(self) -> Dict[str, Any]:
        document = {'_id': self._id}
        document.update(self.meta_fields.to_document())
        return document


@dataclass(frozen=True)
class ProfileRecord:
    """
    One measurement cycle of one float

    Exactly one of ``realtime_data`` and ``adjusted_data`` is set. Maps left
    as ``None`` are omitted from the document rather than stored empty.
    """
    _id: str
    geolocation: GeoJSONPoint
    metadata: Tuple[str, ...]
    CYCLE_NUMBER: int
    DIRECTION: str
    DATA_STATE_INDICATOR: str
    DATA_MODE: str
    DATE_CREATION: str
    DATE_UPDATE: str
    JULD: float
    JULD_QC: str
    JULD_LOCATION: float
    POSITION_QC: str
    VERTICAL_SAMPLING_SCHEME: str
    CONFIG_MISSION_NUMBER: int
    realtime_data: Optional[Dict[str, List[float]]] = None
    adjusted_data: Optional[Dict[str, List[float]]] = None
    data_info: Optional[Dict[str, DataInfo]] = None
    level_qc: Optional[Dict[str, List[str]]] = None
    adjusted_level_qc: Optional[Dict[str, List[str]]] = None

    def __post_init__(self):
        if (self.realtime_data is None) == (self.adjusted_data is None):
            raise ValueError(f"profile {self._id} must carry exactly one of realtime_data and adjusted_data")

    def to_document(self) -> Dict[str, Any]:
        """Plain document form, keys in schema order"""
        document = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if f.name == 'geolocation':
                value = value.to_document()
            elif f.name == 'metadata':
                value = list(value)
            elif f.name == 'data_info':
                value = {name: info.to_document() for name, info in value.items()}
            elif isinstance(value, dict):
                value = {name: list(items) for name, items in value.items()}
            document[f.name] = value
        return document
