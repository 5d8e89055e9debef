"""
Source metadata rows for finporter.

Builds the single ``sourceMeta`` row a vendor importer emits for a
whole document (not per block): where the document came from, which
importer read it, and when the vendor says it was exported.

The row id is derived from the SHA-256 of the normalized document text,
so decoding the same bytes twice yields the same row.
"""

from __future__ import annotations

import hashlib
import logging
import re
import uuid

from finporter.schemas import DecodedRow
from finporter.transforms.dates import parse_banner_timestamp

logger = logging.getLogger(__name__)


def _compute_text_hash(text: str) -> str:
    """SHA-256 hex digest of the document text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def source_meta_id(text: str) -> str:
    """A UUID-formatted id that is stable for identical documents."""
    return str(uuid.UUID(hex=_compute_text_hash(text)[:32]))


def build_source_meta(
    importer_id: str,
    text: str,
    url: str | None = None,
    exported_at_pattern: re.Pattern[str] | None = None,
) -> DecodedRow:
    """Build the sourceMeta row for one document.

    Args:
        importer_id: Id of the importer that decoded the document.
        text: The normalized document text.
        url: Origin of the document, if known.
        exported_at_pattern: Pattern with an ``exported_at`` group that
            locates the vendor's banner timestamp.

    Returns:
        A DecodedRow; ``url`` and ``exportedAt`` are omitted when unknown.
    """
    row: DecodedRow = {
        "sourceMetaID": source_meta_id(text),
        "importerID": importer_id,
    }
    if url:
        row["url"] = url
    if exported_at_pattern is not None:
        match = exported_at_pattern.search(text)
        exported_at = parse_banner_timestamp(match.group("exported_at")) if match else None
        if exported_at is not None:
            row["exportedAt"] = exported_at
        else:
            logger.debug("No export timestamp found for importer '%s'", importer_id)
    return row
