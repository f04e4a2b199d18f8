"""
Database Models for the ARGO document store

Each record is stored as a JSON document keyed by its ``_id``. A few plain
columns mirror the fields the query service filters on.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import declarative_base

from ..documents.schema import MetaRecord, ProfileRecord

Base = declarative_base()


class MetaDocument(Base):
    """Table to store float metadata documents"""
    __tablename__ = 'argo_metadata'

    id = Column('_id', String(64), primary_key=True)
    platform_number = Column(String(50), nullable=False)
    document = Column(JSON, nullable=False)
    date_creation = Column(DateTime, default=datetime.utcnow)

    @classmethod
    def from_record(cls, record: MetaRecord) -> 'MetaDocument':
        return cls(
            id=record._id,
            platform_number=record.platform_number,
            document=record.to_document(),
        )

    def __repr__(self):
        return f"<MetaDocument(_id='{self.id}')>"


class ProfileDocument(Base):
    """Table to store profile documents"""
    __tablename__ = 'argo_profiles'

    id = Column('_id', String(64), primary_key=True)
    metadata_id = Column(String(64), ForeignKey('argo_metadata._id'), nullable=False)
    cycle_number = Column(Integer, nullable=False)
    data_mode = Column(String(1))  # R (real-time), A (adjusted), D (delayed-mode)

    # Location and time
    longitude = Column(Float, nullable=False)
    latitude = Column(Float, nullable=False)
    juld = Column(Float, nullable=False)  # days since REFERENCE_DATE_TIME

    document = Column(JSON, nullable=False)
    date_creation = Column(DateTime, default=datetime.utcnow)

    @classmethod
    def from_record(cls, record: ProfileRecord) -> 'ProfileDocument':
        return cls(
            id=record._id,
            metadata_id=record.metadata[0],
            cycle_number=record.CYCLE_NUMBER,
            data_mode=record.DATA_MODE[:1],
            longitude=record.geolocation.longitude,
            latitude=record.geolocation.latitude,
            juld=record.JULD,
            document=record.to_document(),
        )

    def __repr__(self):
        return f"<ProfileDocument(_id='{self.id}')>"
