"""
Schwab transaction history importer.

Each block is one account: ``"Transactions  for account XXXX-1234 as
of ..."`` followed by the activity table and a ``Transactions Total``
line (which has no date and is therefore rejected).

Action mapping:
- Buy / Reinvest Shares: shares bought at the quoted price.
- Sell: share count negated.
- Transfers: a cash transfer (no quantity, or the "NO NUMBER" symbol)
  moves ``Amount`` at a price of 1.0 under an empty security id; a
  security transfer moves ``Quantity``, with the price signed like the
  amount.
- Dividends and interest: income of ``Amount`` at a price of 1.0.
- Anything else (e.g., "Promotional Award") is miscellaneous income.

Dates like "06/06/2021 as of 06/05/2021" use the first date.
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

_BUY_ACTIONS = frozenset({"Buy", "Reinvest Shares"})
_SELL_ACTIONS = frozenset({"Sell"})
_TRANSFER_ACTIONS = frozenset({"Security Transfer", "MoneyLink Transfer", "Journal"})
_DIVIDEND_ACTIONS = frozenset({
    "Cash Dividend",
    "Qualified Dividend",
    "Non-Qualified Div",
    "Pr Yr Cash Div",
    "Reinvest Dividend",
    "Special Dividend",
})
_INTEREST_ACTIONS = frozenset({"Bank Interest", "Credit Interest"})

_NO_SYMBOL = "NO NUMBER"


def classify_action(action: str | None) -> TransactionAction | None:
    """Map a Schwab action label to a transaction action."""
    if action is None:
        return None
    if action in _BUY_ACTIONS:
        return TransactionAction.BUY
    if action in _SELL_ACTIONS:
        return TransactionAction.SELL
    if action in _TRANSFER_ACTIONS:
        return TransactionAction.TRANSFER
    if action in _DIVIDEND_ACTIONS:
        return TransactionAction.DIVIDEND_INCOME
    if action in _INTEREST_ACTIONS:
        return TransactionAction.INTEREST_INCOME
    return TransactionAction.MISC_INCOME


def transaction_row(
    raw: RawRow,
    account_id: str | None,
    context: DecodeContext,
) -> DecodedRow | None:
    """Map one history line to a transaction, or ``None`` if it cannot be."""
    action = classify_action(parse_string(raw.get("Action")))
    symbol = parse_string(raw.get("Symbol"))
    quantity = parse_number(raw.get("Quantity"))
    price = parse_number(raw.get("Price"))
    amount = parse_number(raw.get("Amount"))

    row: dict = {
        "txnAction": action.value if action else None,
        "txnTransactedAt": context.naked_date(raw.get("Date")),
        "txnAccountID": account_id,
        "txnLotID": "",
    }

    if action in (TransactionAction.BUY, TransactionAction.SELL):
        if symbol is None or quantity is None or price is None:
            return None
        row["txnSecurityID"] = symbol
        row["txnShareCount"] = quantity if action is TransactionAction.BUY else -quantity
        row["txnSharePrice"] = price
    elif action is TransactionAction.TRANSFER:
        if quantity is None or symbol in (None, _NO_SYMBOL):
            if amount is None:
                return None
            row["txnSecurityID"] = ""
            row["txnShareCount"] = amount
            row["txnSharePrice"] = 1.0
        else:
            if price is None:
                return None
            row["txnSecurityID"] = symbol
            row["txnShareCount"] = quantity
            row["txnSharePrice"] = -price if amount is not None and amount < 0 else price
    elif action is not None:
        if amount is None:
            return None
        if action is TransactionAction.DIVIDEND_INCOME:
            row["txnSecurityID"] = symbol
        row["txnShareCount"] = amount
        row["txnSharePrice"] = 1.0

    return present(row)


class ChuckHistoryImporter(BlockImporter):
    """Schwab transaction history export."""

    id = "chuck_history"
    name = "Schwab Transaction History"
    description = "Detect and decode transaction history export files from Schwab."
    source_formats = (SourceFormat.CSV,)
    output_schemas = (CanonicalSchema.TRANSACTION,)

    def map_row(
        self,
        schema: CanonicalSchema,
        raw: RawRow,
        metadata: dict[str, str],
        context: DecodeContext,
    ) -> DecodedRow | None:
        return transaction_row(raw, metadata.get("account_id"), context)
