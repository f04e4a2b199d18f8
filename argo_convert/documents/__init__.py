"""
Documents package for the ARGO converter

This package defines the profile and metadata records, the metadata
deduplication and the assembly of records from extracted fields.
"""

from .schema import DataInfo, GeoJSONPoint, MetaFields, MetaRecord, ProfileRecord
from .dedup import MetadataCache, resolve
from .assembler import assemble, build_meta_fields, build_meta_record

__all__ = [
    'DataInfo',
    'GeoJSONPoint',
    'MetaFields',
    'MetaRecord',
    'ProfileRecord',
    'MetadataCache',
    'resolve',
    'assemble',
    'build_meta_fields',
    'build_meta_record'
]
