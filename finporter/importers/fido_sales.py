"""
Fidelity realized sales importer.

The table never names the account; Fidelity puts the account number in
the downloaded file name (``..._X12345678.csv``), so the origin URL is
needed to attribute the sales. Without it every row lacks an account
and is rejected.
"""

from __future__ import annotations

import re
from pathlib import PurePath

from finporter.importers.base import BlockImporter, DecodeContext
from finporter.importers.chuck_sales import sale_row
from finporter.schemas import CanonicalSchema, DecodedRow, RawRow, SourceFormat
from finporter.transforms.numbers import parse_number, parse_string

# Trailing alphanumeric run of the file stem
_ACCOUNT_IN_NAME_RE = re.compile(r"([A-Za-z0-9]+)$")


def account_id_from_url(url: str | None) -> str | None:
    """``"/tmp/Realized_Gain_Loss_Account_X12345678.csv"`` -> ``"X12345678"``."""
    if not url:
        return None
    match = _ACCOUNT_IN_NAME_RE.search(PurePath(url).stem)
    return match.group(1) if match else None


def _symbol(raw: RawRow) -> str | None:
    """``"VTI(922908769)"`` -> ``"VTI"``."""
    text = parse_string(raw.get("Symbol(CUSIP)"))
    if text is None:
        return None
    return text.split("(", 1)[0].strip() or None


class FidoSalesImporter(BlockImporter):
    """Fidelity realized sales export."""

    id = "fido_sales"
    name = "Fidelity Sales"
    description = "Detect and decode realized sale export files from Fidelity."
    source_formats = (SourceFormat.CSV,)
    output_schemas = (CanonicalSchema.TRANSACTION,)

    def map_row(
        self,
        schema: CanonicalSchema,
        raw: RawRow,
        metadata: dict[str, str],
        context: DecodeContext,
    ) -> DecodedRow | None:
        return sale_row(
            symbol=_symbol(raw),
            quantity=parse_number(raw.get("Quantity")),
            proceeds=parse_number(raw.get("Proceeds")),
            account_id=account_id_from_url(context.url),
            closed_at=context.naked_date(raw.get("Date Sold")),
            gain_short=parse_number(raw.get("Short Term Gain/Loss")),
            gain_long=parse_number(raw.get("Long Term Gain/Loss")),
        )
