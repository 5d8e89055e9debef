"""
Schwab realized gain/loss importer.

Each closed lot becomes a sell transaction: shares leave the account
(negative count) at the per-share proceeds, with the long- and
short-term realized gains carried along when present.
"""

from __future__ import annotations

from datetime import datetime

from finporter.importers.base import BlockImporter, DecodeContext, present
from finporter.schemas import (
    CanonicalSchema,
    DecodedRow,
    RawRow,
    SourceFormat,
    TransactionAction,
)
from finporter.transforms.numbers import parse_number, parse_string


def sale_row(
    symbol: str | None,
    quantity: float | None,
    proceeds: float | None,
    account_id: str | None,
    closed_at: datetime | None,
    gain_short: float | None,
    gain_long: float | None,
) -> DecodedRow | None:
    """Build a sell transaction from a realized lot.

    Shared with the Fidelity sales importer. Returns ``None`` when the
    lot has no symbol, quantity or proceeds to price it by.
    """
    if symbol is None or not quantity or proceeds is None:
        return None
    return present({
        "txnAction": TransactionAction.SELL.value,
        "txnTransactedAt": closed_at,
        "txnAccountID": account_id,
        "txnSecurityID": symbol,
        "txnLotID": "",
        "txnShareCount": -quantity,
        "txnSharePrice": proceeds / quantity,
        "realizedGainShort": gain_short,
        "realizedGainLong": gain_long,
    })


class ChuckSalesImporter(BlockImporter):
    """Schwab realized sales export."""

    id = "chuck_sales"
    name = "Schwab Realized Sales"
    description = "Detect and decode realized sale export files from Schwab."
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
            symbol=parse_string(raw.get("Symbol")),
            quantity=parse_number(raw.get("Quantity")),
            proceeds=parse_number(raw.get("Proceeds")),
            account_id=metadata.get("account_id"),
            closed_at=context.naked_date(raw.get("Closed Date")),
            gain_short=parse_number(raw.get("Short Term Gain/Loss ($)")),
            gain_long=parse_number(raw.get("Long Term Gain/Loss ($)")),
        )
