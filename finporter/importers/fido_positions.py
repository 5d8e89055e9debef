"""
Fidelity positions importer.

A single table, one row per position, with the account number and name
repeated on every row. Produces account, holding and security rows.
The "Pending Activity" pseudo-position carries no shares and is
rejected.
"""

from __future__ import annotations

from finporter.importers.base import BlockImporter, DecodeContext, present
from finporter.schemas import CanonicalSchema, DecodedRow, RawRow, SourceFormat
from finporter.transforms.numbers import parse_number, parse_string

_PENDING = "Pending Activity"


def _symbol(raw: RawRow) -> str | None:
    symbol = parse_string(raw.get("Symbol"))
    if symbol is None or symbol == _PENDING:
        return None
    # Money market funds are flagged with trailing asterisks ("SPAXX**")
    return symbol.strip("*") or None


class FidoPositionsImporter(BlockImporter):
    """Fidelity positions export."""

    id = "fido_positions"
    name = "Fidelity Positions"
    description = "Detect and decode position export files from Fidelity."
    source_formats = (SourceFormat.CSV,)
    output_schemas = (
        CanonicalSchema.ACCOUNT,
        CanonicalSchema.HOLDING,
        CanonicalSchema.SECURITY,
    )

    def required_fields(self, schema: CanonicalSchema) -> frozenset[str]:
        if schema is CanonicalSchema.HOLDING:
            return schema.required_signature | {"shareCount"}
        if schema is CanonicalSchema.SECURITY:
            return schema.required_signature | {"sharePrice"}
        return schema.required_signature

    def map_row(
        self,
        schema: CanonicalSchema,
        raw: RawRow,
        metadata: dict[str, str],
        context: DecodeContext,
    ) -> DecodedRow | None:
        account_id = parse_string(raw.get("Account Number"))
        symbol = _symbol(raw)

        if schema is CanonicalSchema.ACCOUNT:
            return present({
                "accountID": account_id,
                "title": parse_string(raw.get("Account Name")),
            })
        if symbol is None:
            return None
        if schema is CanonicalSchema.HOLDING:
            return present({
                "holdingAccountID": account_id,
                "holdingSecurityID": symbol,
                "shareCount": parse_number(raw.get("Quantity")),
                "shareBasis": parse_number(raw.get("Cost Basis Per Share")),
            })
        if schema is CanonicalSchema.SECURITY:
            return present({
                "securityID": symbol,
                "sharePrice": parse_number(raw.get("Last Price")),
                "updatedAt": context.timestamp,
            })
        return None
