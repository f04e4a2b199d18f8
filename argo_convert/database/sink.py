"""
Document Sinks

Append-only stores for profile and metadata records. Inserting a record
whose ``_id`` already exists is an error, never an overwrite.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .. import config
from ..documents.schema import MetaRecord, ProfileRecord
from .connection import DatabaseError, DatabaseManager, get_db_manager
from .models import MetaDocument, ProfileDocument

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)


class DuplicateDocumentError(DatabaseError):
    """A document with the same _id is already stored"""
    pass


class DocumentSink(ABC):
    """Interface of the stores the converter writes to"""

    @abstractmethod
    def insert_records(self, profile: ProfileRecord, metadata: Optional[MetaRecord] = None):
        """
        Insert a profile record, preceded by its metadata record when new

        Both records are stored or neither is.

        Raises:
            DuplicateDocumentError: a record with the same _id exists
            DatabaseError: the insert failed
        """

    @abstractmethod
    def find_profile(self, doc_id: str) -> Optional[Dict[str, Any]]:
        """Return the profile document with the given _id, or None"""

    @abstractmethod
    def find_metadata(self, doc_id: str) -> Optional[Dict[str, Any]]:
        """Return the metadata document with the given _id, or None"""


class SQLDocumentSink(DocumentSink):
    """Document sink backed by the SQL database"""

    def __init__(self, db_manager: Optional[DatabaseManager] = None):
        self.db_manager = db_manager or get_db_manager()

    def insert_records(self, profile: ProfileRecord, metadata: Optional[MetaRecord] = None):
        try:
            with self.db_manager.session_scope() as session:
                if metadata is not None:
                    session.add(MetaDocument.from_record(metadata))
                    session.flush()  # Metadata must exist before the profile references it
                session.add(ProfileDocument.from_record(profile))
        except IntegrityError as e:
            logger.error(f"Duplicate or dangling key inserting profile {profile._id}: {e.orig}")
            raise DuplicateDocumentError(f"Could not insert profile {profile._id}: {e.orig}") from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to insert profile {profile._id}: {str(e)}")
            raise DatabaseError(f"Failed to insert profile {profile._id}: {str(e)}") from e

        logger.debug(f"Stored profile {profile._id}")

    def find_profile(self, doc_id: str) -> Optional[Dict[str, Any]]:
        with self.db_manager.session_scope() as session:
            row = session.get(ProfileDocument, doc_id)
            return dict(row.document) if row else None

    def find_metadata(self, doc_id: str) -> Optional[Dict[str, Any]]:
        with self.db_manager.session_scope() as session:
            row = session.get(MetaDocument, doc_id)
            return dict(row.document) if row else None

    def count_profiles(self) -> int:
        with self.db_manager.session_scope() as session:
            return session.query(ProfileDocument).count()

    def count_metadata(self) -> int:
        with self.db_manager.session_scope() as session:
            return session.query(MetaDocument).count()


class MemorySink(DocumentSink):
    """Document sink keeping the documents in memory, for dry runs"""

    def __init__(self):
        self.profiles: Dict[str, Dict[str, Any]] = {}
        self.metadata: Dict[str, Dict[str, Any]] = {}

    def insert_records(self, profile: ProfileRecord, metadata: Optional[MetaRecord] = None):
        if metadata is not None and metadata._id in self.metadata:
            raise DuplicateDocumentError(f"Metadata {metadata._id} already stored")
        if profile._id in self.profiles:
            raise DuplicateDocumentError(f"Profile {profile._id} already stored")

        if metadata is not None:
            self.metadata[metadata._id] = metadata.to_document()
        self.profiles[profile._id] = profile.to_document()

    def find_profile(self, doc_id: str) -> Optional[Dict[str, Any]]:
        return self.profiles.get(doc_id)

    def find_metadata(self, doc_id: str) -> Optional[Dict[str, Any]]:
        return self.metadata.get(doc_id)

    def documents(self) -> List[Dict[str, Any]]:
        return list(self.metadata.values()) + list(self.profiles.values())

    def to_json(self, indent: int = 2) -> str:
        return json.dumps({
            'metadata': list(self.metadata.values()),
            'profiles': list(self.profiles.values()),
        }, indent=indent)
