"""
Database package for the ARGO converter

This package provides the document store models, the database connection
and the sinks the converter writes profile and metadata records to.
"""

from .models import Base, MetaDocument, ProfileDocument

from .connection import (
    DatabaseManager,
    DatabaseError,
    get_db_manager
)

from .sink import (
    DocumentSink,
    DuplicateDocumentError,
    MemorySink,
    SQLDocumentSink
)

__all__ = [
    'Base',
    'MetaDocument',
    'ProfileDocument',
    'DatabaseManager',
    'DatabaseError',
    'get_db_manager',
    'DocumentSink',
    'DuplicateDocumentError',
    'MemorySink',
    'SQLDocumentSink'
]
