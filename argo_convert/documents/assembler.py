"""
Document Assembly

Builds profile and metadata records from the fields extracted from an ARGO
profile file.
"""

from typing import Tuple

from ..ingestion.argo_reader import ArgoProfile
from ..ingestion.measurements import MeasurementKind
from .schema import DataInfo, GeoJSONPoint, MetaFields, MetaRecord, ProfileRecord


def split_names(value: str, separator: str = ',') -> Tuple[str, ...]:
    """Split a delimited list of names, trimming each entry"""
    # Empty entries are dropped, so "" gives () rather than ("",)
    return tuple(name.strip() for name in value.split(separator) if name.strip())


def profile_id(platform_number: str, cycle_number: int) -> str:
    return f"{platform_number}_{cycle_number}"


def build_meta_fields(fields: ArgoProfile) -> MetaFields:
    strings = fields.strings
    return MetaFields(
        PLATFORM_NUMBER=strings['PLATFORM_NUMBER'],
        DATA_TYPE=strings['DATA_TYPE'],
        FORMAT_VERSION=strings['FORMAT_VERSION'],
        HANDBOOK_VERSION=strings['HANDBOOK_VERSION'],
        REFERENCE_DATE_TIME=strings['REFERENCE_DATE_TIME'],
        PROJECT_NAME=strings['PROJECT_NAME'],
        PI_NAME=split_names(strings['PI_NAME']),
        DATA_CENTRE=strings['DATA_CENTRE'],
        DC_REFERENCE=strings['DC_REFERENCE'],
        PLATFORM_TYPE=strings['PLATFORM_TYPE'],
        FLOAT_SERIAL_NO=strings['FLOAT_SERIAL_NO'],
        FIRMWARE_VERSION=strings['FIRMWARE_VERSION'],
        WMO_INST_TYPE=strings['WMO_INST_TYPE'],
        POSITIONING_SYSTEM=strings['POSITIONING_SYSTEM'],
    )


def build_meta_record(meta_id: str, meta_fields: MetaFields) -> MetaRecord:
    return MetaRecord(_id=meta_id, meta_fields=meta_fields)


def assemble(fields: ArgoProfile, metadata_id: str) -> ProfileRecord:
    """
    Build the profile record of an extracted profile

    Args:
        fields: Fields extracted from the file
        metadata_id: Identifier of the profile's metadata record

    Returns:
        ProfileRecord carrying the raw or adjusted measurements according
        to the profile's processing mode
    """
    strings = fields.strings
    measurements = fields.measurements

    values = measurements.values()
    realtime_data = values if measurements.kind is MeasurementKind.REALTIME else None
    adjusted_data = values if measurements.kind is MeasurementKind.ADJUSTED else None

    data_info = {
        name: DataInfo(
            data_mode=p.data_mode,
            units=p.units,
            long_name=p.long_name,
            profile_parameter_qc=p.profile_qc,
        )
        for name, p in measurements.parameters.items()
    }

    return ProfileRecord(
        _id=profile_id(fields.platform_number, fields.cycle_number),
        geolocation=GeoJSONPoint(longitude=fields.longitude, latitude=fields.latitude),
        metadata=(metadata_id,),
        CYCLE_NUMBER=fields.cycle_number,
        DIRECTION=strings['DIRECTION'],
        DATA_STATE_INDICATOR=strings['DATA_STATE_INDICATOR'],
        DATA_MODE=strings['DATA_MODE'],
        DATE_CREATION=strings['DATE_CREATION'],
        DATE_UPDATE=strings['DATE_UPDATE'],
        JULD=fields.floats['JULD'],
        JULD_QC=strings['JULD_QC'],
        JULD_LOCATION=fields.floats['JULD_LOCATION'],
        POSITION_QC=strings['POSITION_QC'],
        VERTICAL_SAMPLING_SCHEME=strings['VERTICAL_SAMPLING_SCHEME'],
        CONFIG_MISSION_NUMBER=fields.integers['CONFIG_MISSION_NUMBER'],
        realtime_data=realtime_data,
        adjusted_data=adjusted_data,
        data_info=data_info,
        level_qc=measurements.level_qc(),
        adjusted_level_qc=measurements.adjusted_level_qc(),
    )
