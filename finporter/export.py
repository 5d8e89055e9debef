"""
Exporter for finporter.

Serializes decoded rows of one canonical schema to CSV, TSV or JSON
bytes.

Delimited output:
- Header line: every column of the schema, in catalog order.
- Values: numbers in shortest round-trip form ("3.0", "105.0736"),
  booleans as "true"/"false", dates as ISO-8601 UTC ("2021-03-01T17:00:00Z"),
  absent fields as an empty field (never a null token).
- Quoting: standard CSV via pandas. A value containing the delimiter,
  a double quote or a newline is quoted, with inner quotes doubled.

JSON output is an array of objects holding only the present fields.

The output re-reads through the tabular importer: decode -> export ->
decode recovers the same accepted rows, with present-but-empty strings
coming back as absent.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime

import pandas as pd
import pydantic_core

from finporter.exceptions import EncodingError
from finporter.schemas import CanonicalSchema, DecodedRow, FieldValue, SourceFormat
from finporter.transforms.dates import format_iso_datetime

logger = logging.getLogger(__name__)


def render_value(value: FieldValue | None) -> str:
    """Render one field value as delimited text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return format_iso_datetime(value)
    if isinstance(value, float):
        return repr(value)
    return str(value)


def _json_value(value: FieldValue) -> FieldValue:
    return format_iso_datetime(value) if isinstance(value, datetime) else value


def export_rows(
    rows: Sequence[DecodedRow],
    schema: CanonicalSchema,
    output_format: SourceFormat = SourceFormat.CSV,
) -> bytes:
    """Serialize *rows* of *schema* to bytes.

    Fields not in the schema are not written.

    Args:
        rows: Accepted rows from a decode call.
        schema: The schema the rows were decoded for.
        output_format: CSV, TSV or JSON.

    Returns:
        UTF-8 encoded document.

    Raises:
        EncodingError: If serialization fails.
    """
    columns = schema.column_names

    if output_format is SourceFormat.JSON:
        payload = [
            {name: _json_value(row[name]) for name in columns if name in row}
            for row in rows
        ]
        try:
            data = pydantic_core.to_json(payload)
        except pydantic_core.PydanticSerializationError as exc:
            raise EncodingError(f"Failure to encode rows as JSON: {exc}") from exc
        logger.info("Exported %d %s rows as json", len(rows), schema.value)
        return data

    delimiter = output_format.delimiter
    if delimiter is None:
        raise EncodingError(f"Unsupported output format: '{output_format}'")

    df = pd.DataFrame(
        [[render_value(row.get(name)) for name in columns] for row in rows],
        columns=columns,
        dtype=object,
    )
    try:
        text = df.to_csv(sep=delimiter, index=False, lineterminator="\n")
    except (ValueError, TypeError) as exc:
        raise EncodingError(
            f"Failure to encode rows as {output_format.value}: {exc}"
        ) from exc
    logger.info(
        "Exported %d %s rows as %s (%d cols)",
        len(rows), schema.value, output_format.value, len(columns),
    )
    return text.encode("utf-8")
