"""
Schwab positions importers.

Two export shapes share one field mapping:

- ``chuck_positions_all``: "Positions for All-Accounts", one block per
  account, each block titled ``"<account title>  <ACCOUNT-ID>"``.
- ``chuck_positions_indiv``: "Positions for account <title> <ID> as of
  ...", a single block whose banner line carries the account.

Both produce sourceMeta (from the banner), account (from each block's
title), holding and security rows. The cash line ("Cash & Cash
Investments") becomes a holding of the synthetic ``CORE`` security at a
basis of 1.0; "Account Total" summary lines are rejected.
"""

from __future__ import annotations

from finporter.importers.base import BlockImporter, DecodeContext, present
from finporter.schemas import CanonicalSchema, DecodedRow, RawRow, SourceFormat
from finporter.transforms.numbers import parse_number, parse_string

CASH_SYMBOL = "Cash & Cash Investments"
CASH_SECURITY_ID = "CORE"


def _symbol(raw: RawRow) -> str | None:
    symbol = parse_string(raw.get("Symbol"))
    if symbol is None:
        return None
    return symbol.strip("*") or None


def holding_row(raw: RawRow, account_id: str | None) -> DecodedRow | None:
    """Map one positions line to a holding.

    Cash is valued at 1.0 per share so its share count is the market
    value; other positions derive the per-share basis from the total
    cost basis.
    """
    symbol = _symbol(raw)
    if symbol is None or symbol == "Account Total":
        return None

    if symbol == CASH_SYMBOL:
        return present({
            "holdingAccountID": account_id,
            "holdingSecurityID": CASH_SECURITY_ID,
            "shareBasis": 1.0,
            "shareCount": parse_number(raw.get("Market Value")),
        })

    share_count = parse_number(raw.get("Quantity"))
    cost_basis = parse_number(raw.get("Cost Basis"))
    share_basis = None
    if share_count and cost_basis is not None:
        share_basis = cost_basis / share_count
    return present({
        "holdingAccountID": account_id,
        "holdingSecurityID": symbol,
        "shareBasis": share_basis,
        "shareCount": share_count,
    })


def security_row(raw: RawRow, context: DecodeContext) -> DecodedRow | None:
    """Map one positions line to a security price (cash and totals have none)."""
    symbol = _symbol(raw)
    if symbol is None or symbol in (CASH_SYMBOL, "Account Total"):
        return None
    return present({
        "securityID": symbol,
        "sharePrice": parse_number(raw.get("Price")),
        "updatedAt": context.timestamp,
    })


class _ChuckPositions(BlockImporter):
    source_formats = (SourceFormat.CSV,)
    output_schemas = (
        CanonicalSchema.SOURCE_META,
        CanonicalSchema.ACCOUNT,
        CanonicalSchema.HOLDING,
        CanonicalSchema.SECURITY,
    )
    block_schemas = frozenset({CanonicalSchema.ACCOUNT})

    def required_fields(self, schema: CanonicalSchema) -> frozenset[str]:
        if schema is CanonicalSchema.HOLDING:
            return schema.required_signature | {"shareCount"}
        if schema is CanonicalSchema.SECURITY:
            return schema.required_signature | {"sharePrice"}
        return schema.required_signature

    def map_block(
        self,
        schema: CanonicalSchema,
        metadata: dict[str, str],
        context: DecodeContext,
    ) -> DecodedRow | None:
        return present({
            "accountID": metadata.get("account_id"),
            "title": metadata.get("title"),
        })

    def map_row(
        self,
        schema: CanonicalSchema,
        raw: RawRow,
        metadata: dict[str, str],
        context: DecodeContext,
    ) -> DecodedRow | None:
        if schema is CanonicalSchema.HOLDING:
            return holding_row(raw, metadata.get("account_id"))
        if schema is CanonicalSchema.SECURITY:
            return security_row(raw, context)
        return None


class ChuckPositionsAllImporter(_ChuckPositions):
    """Schwab "Positions for All-Accounts" export."""

    id = "chuck_positions_all"
    name = "Schwab Positions (All Accounts)"
    description = "Detect and decode position export files from Schwab, for all accounts."


class ChuckPositionsIndivImporter(_ChuckPositions):
    """Schwab positions export for a single account."""

    id = "chuck_positions_indiv"
    name = "Schwab Positions (Individual Account)"
    description = "Detect and decode position export files from Schwab, for a single account."
