"""
Importer contract for finporter.

All format-specific importers implement this interface. The contract is:
1. detect() inspects a prefix of the input and returns, per canonical
   schema, the source formats under which it recognized the input
   (empty when the input is not its shape).
2. decode() parses the whole document for one target schema and
   returns a DecodeResult: accepted DecodedRows plus the RawRows that
   failed validation, both in encounter order.
3. export() serializes accepted rows back to CSV/TSV/JSON.

Failure handling follows one rule throughout: *parse leniently, validate
the row*. Field parsers never raise; a mapping function builds a
DecodedRow from whatever parsed, and ``DecodeResult.add_row`` accepts it
only if every required field is present. Anything else goes to
``rejected_rows`` unmodified, as is a row with more cells than its
header. Only unreadable bytes or an untokenizable table (e.g., an
unterminated quote) raise DecodingError.

BlockImporter implements the shared vendor algorithm: normalize line
endings, then walk a cursor through the text, decoding each block
(title line + embedded table) that the layout's block pattern finds.

Why an ABC:
- Enforces one interface across vendor and generic importers.
- The Prospector only ever talks to BaseImporter.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import ClassVar

from finporter.config import DecodeOptions
from finporter.exceptions import (
    NeedExplicitOutputSchemaError,
    TargetSchemaNotSupportedError,
)
from finporter.export import export_rows
from finporter.layout_registry import Layout, get_layout
from finporter.meta import build_source_meta
from finporter.reader import MalformedRow, decode_text, read_table
from finporter.schemas import (
    CanonicalSchema,
    DecodedRow,
    FieldValue,
    RawRow,
    SourceFormat,
)
from finporter.transforms.dates import parse_naked_date

logger = logging.getLogger(__name__)

DetectResult = dict[CanonicalSchema, list[SourceFormat]]


def present(values: dict[str, FieldValue | None]) -> DecodedRow:
    """Drop ``None`` entries: a field that did not parse is absent."""
    return {key: value for key, value in values.items() if value is not None}


@dataclass
class DecodeContext:
    """Per-call hints available to mapping functions.

    Attributes:
        url: Origin of the document (path or URL), if known.
        options: Defaults for naked vendor dates.
        timestamp: Caller-supplied "as of" instant for rows that need
            one (e.g., security prices). Never defaulted to the clock.
        input_format: Explicit source format hint.
    """
    url: str | None = None
    options: DecodeOptions = field(default_factory=DecodeOptions)
    timestamp: datetime | None = None
    input_format: SourceFormat | None = None

    def __post_init__(self) -> None:
        self._zone = self.options.zone()

    @property
    def zone(self) -> tzinfo | None:
        return self._zone

    def naked_date(self, raw: str | None) -> datetime | None:
        """Resolve a vendor MM/DD/YYYY date with the configured defaults."""
        return parse_naked_date(raw, self.options.time_of_day, self._zone)


@dataclass
class DecodeResult:
    """Output of one decode call.

    Attributes:
        schema: The schema the rows were decoded for.
        rows: Accepted rows, in encounter order.
        rejected_rows: RawRows that failed validation, in encounter order.
            When the caller passes its own list to decode(), this is
            that same list.
    """
    schema: CanonicalSchema
    rows: list[DecodedRow] = field(default_factory=list)
    rejected_rows: list[RawRow] = field(default_factory=list)

    def add_row(
        self,
        decoded: DecodedRow | None,
        raw: RawRow | None,
        required: Iterable[str],
    ) -> bool:
        """Accept *decoded* if every required field is present, else reject *raw*.

        A MalformedRow is rejected whatever was decoded from it.

        Returns:
            True if the row was accepted.
        """
        if isinstance(raw, MalformedRow):
            self.rejected_rows.append(raw)
            return False
        if decoded is not None and all(name in decoded for name in required):
            self.rows.append(decoded)
            return True
        if raw is not None:
            self.rejected_rows.append(raw)
        return False


class BaseImporter(ABC):
    """Abstract base class for format importers.

    Subclasses declare their identity as class attributes and implement
    detect() and _decode(). Importers hold no per-call state, so one
    instance can serve any number of (concurrent) decode calls.
    """

    id: ClassVar[str] = ""
    name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    source_formats: ClassVar[tuple[SourceFormat, ...]] = ()
    output_schemas: ClassVar[tuple[CanonicalSchema, ...]] = ()

    @abstractmethod
    def detect(self, prefix: bytes) -> DetectResult:
        """Inspect a prefix of the input.

        Args:
            prefix: Leading bytes of the document.

        Returns:
            Schema -> source formats recognized; empty if no match.

        Raises:
            DecodingError: Only if the prefix is not text at all.
        """

    def decode(
        self,
        data: bytes,
        target_schema: CanonicalSchema | str | None = None,
        *,
        input_format: SourceFormat | None = None,
        url: str | None = None,
        time_of_day: str | None = None,
        time_zone: str | None = None,
        timestamp: datetime | None = None,
        rejected_rows: list[RawRow] | None = None,
    ) -> DecodeResult:
        """Decode a whole document into rows of one canonical schema.

        Args:
            data: The document bytes.
            target_schema: Schema to produce. May be omitted only when the
                importer produces exactly one schema.
            input_format: Source format hint (used by tabular documents).
            url: Origin of the document; used for format inference and
                provenance.
            time_of_day: Default ``HH:MM`` for naked vendor dates.
            time_zone: IANA zone for naked vendor dates.
            timestamp: Explicit "as of" instant for rows that need one.
            rejected_rows: Caller-owned list to append rejected rows to.

        Returns:
            DecodeResult with accepted and rejected rows.

        Raises:
            NeedExplicitOutputSchemaError: If no schema was given and the
                importer supports several.
            TargetSchemaNotSupportedError: If the importer cannot produce
                *target_schema*.
            DecodingError: If the bytes or an embedded table are unreadable.
            pydantic.ValidationError: If *time_of_day* or *time_zone* is invalid.
        """
        schema = self.resolve_target_schema(target_schema)
        options = DecodeOptions.model_validate(
            {
                key: value
                for key, value in (("time_of_day", time_of_day), ("time_zone", time_zone))
                if value is not None
            }
        )
        context = DecodeContext(
            url=url, options=options, timestamp=timestamp, input_format=input_format,
        )
        result = DecodeResult(
            schema=schema,
            rejected_rows=rejected_rows if rejected_rows is not None else [],
        )
        self._decode(decode_text(data), schema, context, result)
        logger.info(
            "Importer '%s' decoded %d %s rows (%d rejected)",
            self.id, len(result.rows), schema.value, len(result.rejected_rows),
        )
        return result

    @abstractmethod
    def _decode(
        self,
        text: str,
        schema: CanonicalSchema,
        context: DecodeContext,
        result: DecodeResult,
    ) -> None:
        """Decode normalized *text* into *result* for *schema*."""

    def export(
        self,
        rows: Sequence[DecodedRow],
        schema: CanonicalSchema,
        output_format: SourceFormat = SourceFormat.CSV,
    ) -> bytes:
        """Serialize accepted rows (see finporter.export)."""
        return export_rows(rows, schema, output_format)

    def resolve_target_schema(
        self, target_schema: CanonicalSchema | str | None
    ) -> CanonicalSchema:
        """Validate *target_schema* against the importer's output schemas."""
        if target_schema is None:
            if len(self.output_schemas) == 1:
                return self.output_schemas[0]
            raise NeedExplicitOutputSchemaError(self.output_schemas)
        try:
            schema = CanonicalSchema(target_schema)
        except ValueError:
            raise TargetSchemaNotSupportedError(self.output_schemas) from None
        if schema not in self.output_schemas:
            raise TargetSchemaNotSupportedError(self.output_schemas)
        return schema

    def _identity(self) -> tuple[str, tuple[SourceFormat, ...], tuple[CanonicalSchema, ...]]:
        return (self.id, tuple(self.source_formats), tuple(self.output_schemas))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BaseImporter):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


# ---------------------------------------------------------------------------
# Vendor block decoding
# ---------------------------------------------------------------------------

def iter_blocks(text: str, pattern: re.Pattern[str]) -> Iterator[str]:
    """Yield successive non-overlapping matches of *pattern*.

    A cursor advances past each match; the loop ends when the cursor
    reaches the end of *text* or nothing further matches.
    """
    position = 0
    while position < len(text):
        match = pattern.search(text, position)
        if match is None or match.end() == position:
            return
        yield match.group(0)
        position = match.end()


class BlockImporter(BaseImporter):
    """Shared algorithm for institution-specific exports.

    Subclasses set ``id`` (which selects the YAML layout), declare which
    schemas come from block metadata alone (``block_schemas``), and
    implement map_row(). ``sourceMeta`` is decoded once per document
    and bypasses the block loop.
    """

    block_schemas: ClassVar[frozenset[CanonicalSchema]] = frozenset()

    @property
    def layout(self) -> Layout:
        return get_layout(self.id)

    def detect(self, prefix: bytes) -> DetectResult:
        text = decode_text(prefix, final=False)
        if self.layout.header.search(text) is None:
            return {}
        return {schema: list(self.source_formats) for schema in self.output_schemas}

    def _decode(
        self,
        text: str,
        schema: CanonicalSchema,
        context: DecodeContext,
        result: DecodeResult,
    ) -> None:
        layout = self.layout
        required = self.required_fields(schema)

        if schema is CanonicalSchema.SOURCE_META:
            row = build_source_meta(self.id, text, context.url, layout.exported_at)
            result.add_row(row, None, required)
            return

        for block in iter_blocks(text, layout.block):
            title = block.split("\n", 1)[0]
            metadata = self.parse_title(title)
            if metadata is None:
                logger.debug("Skipping block with unrecognized title line: %r", title)
                continue

            if schema in self.block_schemas:
                result.add_row(self.map_block(schema, metadata, context), None, required)
                continue

            table_match = layout.table.search(block) if layout.table else None
            table = table_match.group(0) if table_match else block
            for raw in read_table(table):
                decoded = self.map_row(schema, raw, metadata, context)
                result.add_row(decoded, raw, required)

    def parse_title(self, title: str) -> dict[str, str] | None:
        """Recover block metadata from its title line.

        Layouts without a title pattern have no metadata (the block is
        just a table). Returns ``None`` when the title does not parse.
        """
        pattern = self.layout.title
        if pattern is None:
            return {}
        match = pattern.search(title)
        if match is None:
            return None
        return {key: value.strip() for key, value in match.groupdict().items() if value}

    def required_fields(self, schema: CanonicalSchema) -> frozenset[str]:
        """Fields a decoded row must have to be accepted."""
        return schema.required_signature

    def map_block(
        self,
        schema: CanonicalSchema,
        metadata: dict[str, str],
        context: DecodeContext,
    ) -> DecodedRow | None:
        """Build a row from block metadata alone (e.g., the account of a block)."""
        return None

    @abstractmethod
    def map_row(
        self,
        schema: CanonicalSchema,
        raw: RawRow,
        metadata: dict[str, str],
        context: DecodeContext,
    ) -> DecodedRow | None:
        """Map one RawRow (plus block metadata) to a DecodedRow, or ``None``."""
