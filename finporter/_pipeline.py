"""
Internal conversion orchestration for finporter.

Extracted from ``__init__.py`` so the public ``convert()`` function and
tests can reuse the same resolve -> decode -> export sequence.

This module is **not** part of the public API.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from finporter.config import PorterConfig
from finporter.detect import Prospector
from finporter.importers.base import BaseImporter
from finporter.schemas import CanonicalSchema, DecodedRow, RawRow, SourceFormat

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """Outcome of one conversion.

    Attributes:
        importer: The importer that decoded the document.
        schema: The schema the rows were decoded for.
        rows: Accepted rows, in encounter order.
        rejected_rows: Rows that failed validation, in encounter order.
        output: The accepted rows serialized in ``output_format``.
        output_format: Format of ``output``.
    """
    importer: BaseImporter
    schema: CanonicalSchema
    rows: list[DecodedRow] = field(default_factory=list)
    rejected_rows: list[RawRow] = field(default_factory=list)
    output: bytes = b""
    output_format: SourceFormat = SourceFormat.CSV


def run_conversion(
    data: bytes,
    config: PorterConfig,
    prospector: Prospector,
    importer_id: str | None = None,
    target_schema: CanonicalSchema | str | None = None,
    input_format: SourceFormat | None = None,
    output_format: SourceFormat | None = None,
    url: str | None = None,
    time_of_day: str | None = None,
    time_zone: str | None = None,
    timestamp: datetime | None = None,
) -> ConversionResult:
    """Resolve the importer and schema, decode, and export.

    Steps:
      1. ``prospector.resolve_source()`` -> ``(importer, schema, format)``.
         The detected format stands in for a missing *input_format*.
      2. ``importer.decode()`` -> accepted + rejected rows. Call
         arguments override the config's decode defaults.
      3. ``importer.export()`` -> bytes in the output format.

    Returns:
        A ConversionResult.
    """
    importer, schema, detected_format = prospector.resolve_source(data, importer_id, target_schema)
    logger.info("Converting with importer '%s' to schema '%s'", importer.id, schema.value)

    decoded = importer.decode(
        data,
        schema,
        input_format=input_format or detected_format,
        url=url,
        time_of_day=time_of_day or config.decode.time_of_day,
        time_zone=time_zone or config.decode.time_zone,
        timestamp=timestamp,
    )

    output_format = output_format or config.output_format
    output = importer.export(decoded.rows, schema, output_format)

    return ConversionResult(
        importer=importer,
        schema=schema,
        rows=decoded.rows,
        rejected_rows=decoded.rejected_rows,
        output=output,
        output_format=output_format,
    )
