"""
Generic tabular importer for finporter.

Reads any comma- or tab-delimited document whose header row already
uses canonical column names (e.g., files written by finporter's own
exporter). There is no institution-specific knowledge here:

- detect() reads only the header row, once per delimiter, and reports
  every schema whose required signature is a subset of the header. A
  header can legitimately satisfy several schemas; that ambiguity is
  reported, not resolved.
- decode() needs the source format, either from the explicit hint or
  from the file extension of the origin URL, and then parses each row
  with the schema's own field parsers. A row is rejected only when a
  required field fails to parse; optional fields that fail are omitted.
"""

from __future__ import annotations

import logging
from pathlib import PurePath

from finporter.exceptions import CapabilityNotImplementedError, DecodingError
from finporter.importers.base import (
    BaseImporter,
    DecodeContext,
    DecodeResult,
    DetectResult,
)
from finporter.reader import decode_text, read_header, read_table
from finporter.schemas import CanonicalSchema, SourceFormat, match_signatures

logger = logging.getLogger(__name__)


class TabularImporter(BaseImporter):
    """Detect and decode schema-supported tabular documents."""

    id = "tabular"
    name = "Tabular"
    description = "Detect and decode schema-supported tabular documents."
    source_formats = (SourceFormat.CSV, SourceFormat.TSV)
    output_schemas = tuple(CanonicalSchema)

    def detect(self, prefix: bytes) -> DetectResult:
        text = decode_text(prefix, final=False)
        result: DetectResult = {}
        for source_format in self.source_formats:
            try:
                header = read_header(text, source_format.delimiter)
            except DecodingError as exc:
                logger.debug(
                    "Header not readable as %s: %s", source_format.value, exc
                )
                continue
            for schema in match_signatures(header, self.output_schemas):
                result.setdefault(schema, []).append(source_format)
        return result

    def _decode(
        self,
        text: str,
        schema: CanonicalSchema,
        context: DecodeContext,
        result: DecodeResult,
    ) -> None:
        source_format = self._infer_format(context)
        required = schema.required_signature
        for raw in read_table(text, source_format.delimiter):
            result.add_row(schema.decode_row(raw), raw, required)

    def _infer_format(self, context: DecodeContext) -> SourceFormat:
        """Pick the delimiter from the explicit hint, else the URL extension."""
        source_format = context.input_format
        if source_format is None and context.url:
            source_format = SourceFormat.from_extension(PurePath(context.url).suffix)
        if source_format is None:
            raise DecodingError("Unable to infer format (and delimiter) from url.")
        if source_format not in self.source_formats:
            raise CapabilityNotImplementedError(
                f"Not implemented. Cannot read '{source_format.value}' documents."
            )
        return source_format
