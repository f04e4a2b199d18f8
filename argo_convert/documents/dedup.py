"""
Metadata Deduplication

Profiles from the same float deployment share one metadata record. A
candidate configuration is compared field by field against the records
already emitted in the batch; a match reuses the existing identifier,
otherwise a new one is minted.
"""

import logging
from typing import Iterator, List, Optional, Tuple

from .. import config
from .schema import MetaFields, MetaRecord

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)


def mint_metadata_id(platform_number: str, sequence: int) -> str:
    return f"{platform_number}_m{sequence}"


def resolve(candidate: MetaFields, seen: List[MetaRecord]) -> Tuple[str, bool]:
    """
    Resolve the metadata identifier of a candidate configuration

    Args:
        candidate: Metadata fields extracted from the current file
        seen: Records emitted so far in the batch, in insertion order;
            a newly minted record is appended to it

    Returns:
        Tuple of (metadata_id, is_new)
    """
    for record in seen:
        if record.meta_fields == candidate:
            return record._id, False

    record = MetaRecord(
        _id=mint_metadata_id(candidate.PLATFORM_NUMBER, len(seen)),
        meta_fields=candidate,
    )
    seen.append(record)
    return record._id, True


class MetadataCache:
    """Metadata records emitted during one batch run"""

    def __init__(self):
        self._records: List[MetaRecord] = []

    def resolve(self, candidate: MetaFields) -> Tuple[str, bool]:
        meta_id, is_new = resolve(candidate, self._records)
        if is_new:
            logger.debug(f"Minted metadata record {meta_id}")
        return meta_id, is_new

    def get(self, meta_id: str) -> Optional[MetaRecord]:
        for record in self._records:
            if record._id == meta_id:
                return record
        return None

    def retract(self, meta_id: str) -> bool:
        """Forget a record whose persistence failed"""
        for i, record in enumerate(self._records):
            if record._id == meta_id:
                del self._records[i]
                logger.warning(f"Retracted metadata record {meta_id}")
                return True
        return False

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[MetaRecord]:
        return iter(list(self._records))
