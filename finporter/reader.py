"""
Text and table reading for finporter.

Two read-side helpers shared by every importer:

- ``decode_text()`` turns raw bytes into text with a single line-ending
  convention. Vendors mix CRLF, CR and LF, and every header/block
  pattern is written against ``\\n``; normalizing first is what lets
  those patterns match at all.
- ``read_table()`` / ``read_header()`` parse a delimited table (a whole
  tabular document, or one block's embedded table) into RawRows via
  ``pandas.read_csv``.

Why ``header=None`` and manual row assembly instead of letting pandas
name the columns:
- pandas renames blank and duplicate headers ("Unnamed: 25", "X.1").
  RawRow keys must be the header text exactly as it appeared.
- Every cell is read as a string (``dtype=str``, no NA inference) so
  that "--", "n/a" and "" reach the field parsers untouched.

A data row with more cells than the header does not fail the table:
it is returned as a MalformedRow and rejected by the importer, and its
neighbours decode normally. Only text pandas cannot tokenize at all
raises DecodingError.
"""

from __future__ import annotations

import codecs
import io
import logging

import pandas as pd

from finporter.exceptions import DecodingError
from finporter.schemas import RawRow

logger = logging.getLogger(__name__)


def decode_text(data: bytes, final: bool = True) -> str:
    """Decode UTF-8 bytes (optional BOM) and normalize line endings to ``\\n``.

    Args:
        data: The document, or a prefix of it.
        final: ``False`` for a detection prefix, which may end in the
            middle of a multi-byte character; the incomplete tail is
            dropped instead of failing.

    Raises:
        DecodingError: If the bytes are not valid UTF-8.
    """
    decoder = codecs.getincrementaldecoder("utf-8-sig")()
    try:
        text = decoder.decode(data, final=final)
    except UnicodeDecodeError as exc:
        raise DecodingError(f"Failure to decode. Input is not UTF-8 text: {exc}") from exc
    return text.replace("\r\n", "\n").replace("\r", "\n")


class MalformedRow(dict):
    """A RawRow with more cells than its header has columns.

    The header-mapped cells are the dict itself; the surplus cells are
    kept in ``extra_cells``. Importers always reject such a row.
    """

    def __init__(self, values: RawRow, extra_cells: list[str]) -> None:
        super().__init__(values)
        self.extra_cells = extra_cells


def _read_csv(
    text: str,
    delimiter: str,
    nrows: int | None,
    names: list[int] | None = None,
) -> pd.DataFrame:
    return pd.read_csv(
        io.StringIO(text),
        sep=delimiter,
        header=None,
        names=names,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        nrows=nrows,
    )


def _read_frame(text: str, delimiter: str, nrows: int | None) -> list[list[str]]:
    """Read *text* into a list of string rows (header row first).

    A row with more cells than the header keeps its surplus cells.
    """
    if not text.strip():
        return []
    try:
        df = _read_csv(text, delimiter, nrows)
    except pd.errors.EmptyDataError:
        return []
    except pd.errors.ParserError:
        return _read_ragged(text, delimiter, nrows)
    # Short rows are padded with NaN by pandas
    return df.fillna("").values.tolist()


def _read_ragged(text: str, delimiter: str, nrows: int | None) -> list[list[str]]:
    """Re-read a table in which some rows outgrow the header.

    Columns are sized by the widest physical line (its delimiter count
    bounds its cell count). Padding comes back as NaN and is dropped, so
    each row keeps exactly the cells it had.
    """
    width = max(line.count(delimiter) for line in text.split("\n")) + 1
    try:
        df = _read_csv(text, delimiter, nrows, names=list(range(width)))
    except pd.errors.ParserError as exc:
        raise DecodingError(f"Failure to decode. Embedded table is not parseable: {exc}") from exc
    rows = [
        [cell for cell in values if isinstance(cell, str)]
        for values in df.values.tolist()
    ]
    if not rows:
        return []
    header_width = len(rows[0])
    return [row + [""] * (header_width - len(row)) for row in rows]


def read_header(text: str, delimiter: str = ",") -> list[str]:
    """Return the column names of the first non-blank row of *text*.

    Only the first row is tokenized, so a truncated detection prefix is
    fine as long as the header line itself is complete.
    """
    rows = _read_frame(text, delimiter, nrows=1)
    return rows[0] if rows else []


def read_table(text: str, delimiter: str = ",") -> list[RawRow]:
    """Parse a delimited table into RawRows keyed by the literal header text.

    A data row with more cells than the header comes back as a
    MalformedRow, in its original position.

    Raises:
        DecodingError: If the table is structurally unparseable (e.g., an
            unterminated quoted field).
    """
    rows = _read_frame(text, delimiter, nrows=None)
    if not rows:
        return []
    header, body = rows[0], rows[1:]
    logger.debug("Read table: %d columns, %d rows", len(header), len(body))
    table: list[RawRow] = []
    for values in body:
        if len(values) > len(header):
            logger.warning(
                "Row has %d cells for %d columns; rejecting it", len(values), len(header)
            )
            table.append(MalformedRow(dict(zip(header, values)), values[len(header):]))
        else:
            table.append(dict(zip(header, values)))
    return table
