"""
Data Conversion Pipeline

This module provides the end-to-end pipeline converting ARGO NetCDF files
into profile and metadata documents and handing them to a document sink.
Files are processed one at a time, in order.
"""

import os
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from tqdm import tqdm

from .. import config
from ..database.connection import DatabaseError, DatabaseManager
from ..database.sink import DocumentSink, MemorySink, SQLDocumentSink
from ..documents.assembler import assemble, build_meta_fields
from ..documents.dedup import MetadataCache
from ..exceptions import ArgoFileError
from ..ingestion.argo_reader import ArgoNetCDFReader, ArgoProfile

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

CONVERTED = 'converted'
SKIPPED = 'skipped'
FAILED = 'failed'


@dataclass
class FileResult:
    """Outcome of converting one file"""
    source: str
    status: str
    profile_id: Optional[str] = None
    metadata_id: Optional[str] = None
    new_metadata: bool = False
    error: Optional[str] = None


class BatchConverter:
    """Converts a batch of ARGO files, sharing metadata records across the batch"""

    def __init__(self, sink: DocumentSink, reader: Optional[ArgoNetCDFReader] = None,
                 cache: Optional[MetadataCache] = None):
        self.sink = sink
        self.reader = reader or ArgoNetCDFReader()
        self.cache = cache if cache is not None else MetadataCache()

    def process_single_file(self, file_path: str) -> FileResult:
        """
        Convert a single NetCDF file

        Unusable files are skipped and failed inserts are reported; neither
        raises.
        """
        try:
            fields = self.reader.read_argo_file(file_path)
        except (ArgoFileError, OSError, ValueError) as e:
            error_msg = f"Skipped {os.path.basename(str(file_path))}: {str(e)}"
            logger.error(error_msg)
            return FileResult(source=str(file_path), status=SKIPPED, error=error_msg)

        return self.convert_profile(fields)

    def convert_profile(self, fields: ArgoProfile) -> FileResult:
        """Resolve metadata, assemble and store the records of one profile"""
        meta_id, is_new = self.cache.resolve(build_meta_fields(fields))
        profile = assemble(fields, meta_id)
        metadata = self.cache.get(meta_id) if is_new else None

        try:
            self.sink.insert_records(profile, metadata)
        except DatabaseError as e:
            if is_new:
                self.cache.retract(meta_id)
            error_msg = f"Failed to store {profile._id} from {os.path.basename(fields.source)}: {str(e)}"
            logger.error(error_msg)
            return FileResult(
                source=fields.source,
                status=FAILED,
                profile_id=profile._id,
                metadata_id=meta_id,
                new_metadata=is_new,
                error=error_msg,
            )

        logger.info(f"Converted {os.path.basename(fields.source)} -> {profile._id} (metadata {meta_id})")
        return FileResult(
            source=fields.source,
            status=CONVERTED,
            profile_id=profile._id,
            metadata_id=meta_id,
            new_metadata=is_new,
        )

    def process_files(self, file_paths: Iterable[str]) -> Dict[str, Any]:
        """
        Convert files in the given order

        Returns:
            Summary dictionary with processing results
        """
        file_paths = list(file_paths)
        results: List[FileResult] = []

        for file_path in tqdm(file_paths, desc="Converting files"):
            results.append(self.process_single_file(file_path))

        summary = self._summarize(results)
        logger.info(
            f"Conversion complete: {summary['successful_files']}/{summary['total_files']} files, "
            f"{summary['metadata_records']} new metadata records"
        )
        return summary

    def process_directory(self, directory_path: str) -> Dict[str, Any]:
        """
        Convert all NetCDF files in a directory, in name order

        Raises:
            ValueError: the directory does not exist
            OSError: the directory cannot be listed
        """
        if not os.path.isdir(directory_path):
            raise ValueError(f"Directory does not exist: {directory_path}")

        netcdf_files = sorted(
            os.path.join(directory_path, f)
            for f in os.listdir(directory_path)
            if f.endswith(config.FILE_SUFFIX)
        )

        if not netcdf_files:
            logger.warning(f"No NetCDF files found in {directory_path}")

        logger.info(f"Found {len(netcdf_files)} NetCDF files to convert")
        return self.process_files(netcdf_files)

    def _summarize(self, results: List[FileResult]) -> Dict[str, Any]:
        return {
            'total_files': len(results),
            'successful_files': sum(1 for r in results if r.status == CONVERTED),
            'skipped_files': sum(1 for r in results if r.status == SKIPPED),
            'failed_files': sum(1 for r in results if r.status == FAILED),
            'profiles': [r.profile_id for r in results if r.status == CONVERTED],
            'metadata_records': sum(1 for r in results if r.status == CONVERTED and r.new_metadata),
            'errors': [r.error for r in results if r.error],
        }


# Utility functions
def convert_directory(directory_path: str, database_url: Optional[str] = None,
                      sink: Optional[DocumentSink] = None) -> Dict[str, Any]:
    """Convenience function to convert a directory into the document store"""
    if sink is None:
        manager = DatabaseManager(database_url)
        manager.create_tables()
        sink = SQLDocumentSink(manager)
    converter = BatchConverter(sink)
    return converter.process_directory(directory_path)


if __name__ == "__main__":
    import sys

    if len(sys.argv) not in (2, 3) or (len(sys.argv) == 3 and sys.argv[2] != '--dry-run'):
        print("Usage: python -m argo_convert.utils.data_pipeline <directory_path> [--dry-run]")
        sys.exit(1)

    directory_path = sys.argv[1]
    dry_run = len(sys.argv) == 3
    memory_sink = MemorySink() if dry_run else None

    try:
        results = convert_directory(directory_path, sink=memory_sink)
    except (ValueError, OSError, DatabaseError) as e:
        print(f"Fatal error: {e}")
        sys.exit(1)

    if memory_sink is not None:
        print(memory_sink.to_json())

    print(f"Files: {results['successful_files']}/{results['total_files']} converted, "
          f"{results['skipped_files']} skipped, {results['failed_files']} failed")
    if results['errors']:
        print(f"Errors: {len(results['errors'])}")
        for error in results['errors'][:5]:  # Show first 5 errors
            print(f"  - {error}")
