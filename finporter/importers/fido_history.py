"""
Fidelity account history importer.

A single table without a title line; the account is named on each row
(``"MY TACTICAL (taxable) X00000000"``, the id being the last token).
Fidelity pads most values with a leading space, so every value goes
through the stripping parsers.

Actions are free text ("YOU BOUGHT VANGUARD ... (VV) (Cash)") and are
classified by their leading phrase.
"""

from __future__ import annotations

from finporter.importers.base import BlockImporter, DecodeContext, present
from finporter.schemas import (
    CanonicalSchema,
    DecodedRow,
    RawRow,
    SourceFormat,
    TransactionAction,
)
from finporter.transforms.numbers import parse_number, parse_string

# Checked in order; first phrase contained in the action wins
_ACTION_PHRASES: tuple[tuple[str, TransactionAction], ...] = (
    ("YOU BOUGHT", TransactionAction.BUY),
    ("REINVESTMENT", TransactionAction.BUY),
    ("YOU SOLD", TransactionAction.SELL),
    ("DIVIDEND RECEIVED", TransactionAction.DIVIDEND_INCOME),
    ("INTEREST EARNED", TransactionAction.INTEREST_INCOME),
    ("TRANSFER", TransactionAction.TRANSFER),
)


def classify_action(action: str | None) -> TransactionAction | None:
    if action is None:
        return None
    upper = action.upper()
    for phrase, kind in _ACTION_PHRASES:
        if phrase in upper:
            return kind
    return TransactionAction.MISC_INCOME


def account_id_from(account: str | None) -> str | None:
    """``"MY TACTICAL (taxable) X00000000"`` -> ``"X00000000"``."""
    if account is None:
        return None
    return account.split()[-1]


def _symbol(raw: RawRow) -> str | None:
    symbol = parse_string(raw.get("Symbol"))
    if symbol is None:
        return None
    # Core money market positions carry asterisks ("SPAXX**")
    return symbol.strip("*") or None


def transaction_row(raw: RawRow, context: DecodeContext) -> DecodedRow | None:
    action = classify_action(parse_string(raw.get("Action")))
    symbol = _symbol(raw)
    quantity = parse_number(raw.get("Quantity"))
    price = parse_number(raw.get("Price ($)"))
    amount = parse_number(raw.get("Amount ($)"))

    row: dict = {
        "txnAction": action.value if action else None,
        "txnTransactedAt": context.naked_date(raw.get("Run Date")),
        "txnAccountID": account_id_from(parse_string(raw.get("Account"))),
        "txnLotID": "",
    }

    if action in (TransactionAction.BUY, TransactionAction.SELL):
        if symbol is None or quantity is None or price is None:
            return None
        row["txnSecurityID"] = symbol
        # Fidelity signs sells negative already; normalize either way
        row["txnShareCount"] = abs(quantity) if action is TransactionAction.BUY else -abs(quantity)
        row["txnSharePrice"] = price
    elif action is TransactionAction.TRANSFER and symbol is not None and quantity:
        row["txnSecurityID"] = symbol
        row["txnShareCount"] = quantity
        row["txnSharePrice"] = price
    elif action is not None:
        if amount is None:
            return None
        if action is TransactionAction.DIVIDEND_INCOME:
            row["txnSecurityID"] = symbol
        row["txnShareCount"] = amount
        row["txnSharePrice"] = 1.0

    return present(row)


class FidoHistoryImporter(BlockImporter):
    """Fidelity account history export."""

    id = "fido_history"
    name = "Fidelity History"
    description = "Detect and decode account history export files from Fidelity."
    source_formats = (SourceFormat.CSV,)
    output_schemas = (CanonicalSchema.TRANSACTION,)

    def map_row(
        self,
        schema: CanonicalSchema,
        raw: RawRow,
        metadata: dict[str, str],
        context: DecodeContext,
    ) -> DecodedRow | None:
        return transaction_row(raw, context)
