"""
Canonical schema catalog for finporter.

Defines the source formats finporter reads and writes, and the
canonical row shapes ("schemas") that every importer decodes into.

Each schema is a static, ordered list of columns. A column belongs to
either the *required signature* (must be present in a tabular header
for the schema to match, and must parse for a row to be accepted) or
the *optional signature*. Column order is the export order.

Row model:
- ``RawRow``: header -> original cell text, exactly as read (keys keep
  any vendor whitespace quirks).
- ``DecodedRow``: canonical field -> typed value. The value type is the
  tag (``str`` / ``float`` / ``bool`` / ``datetime``); an absent field is
  a missing key, which is not the same as a present empty string.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from finporter.transforms.dates import parse_iso_datetime
from finporter.transforms.numbers import parse_bool, parse_number, parse_string

FieldValue = str | float | bool | datetime
RawRow = dict[str, str]
DecodedRow = dict[str, FieldValue]


class SourceFormat(str, Enum):
    """Document formats an importer can read or the exporter can write."""

    CSV = "csv"
    TSV = "tsv"
    JSON = "json"

    @property
    def delimiter(self) -> str | None:
        return _DELIMITERS.get(self)

    @classmethod
    def from_extension(cls, suffix: str) -> SourceFormat | None:
        """Map a file suffix (``".csv"`` or ``"csv"``) to a format."""
        return _EXTENSIONS.get(suffix.lower().lstrip("."))


_DELIMITERS = {SourceFormat.CSV: ",", SourceFormat.TSV: "\t"}
_EXTENSIONS = {
    "csv": SourceFormat.CSV,
    "tsv": SourceFormat.TSV,
    "tab": SourceFormat.TSV,
    "json": SourceFormat.JSON,
}


class TransactionAction(str, Enum):
    """Kinds of account activity a transaction row records."""

    BUY = "buy"
    SELL = "sell"
    TRANSFER = "transfer"
    DIVIDEND_INCOME = "dividendIncome"
    INTEREST_INCOME = "interestIncome"
    MISC_INCOME = "miscIncome"


def parse_action(raw: str | None) -> str | None:
    text = parse_string(raw)
    if text is None:
        return None
    try:
        return TransactionAction(text).value
    except ValueError:
        return None


# Field-level parsers, keyed by column kind
_PARSERS: dict[str, Callable[[str | None], FieldValue | None]] = {
    "string": parse_string,
    "number": parse_number,
    "boolean": parse_bool,
    "date": parse_iso_datetime,
    "action": parse_action,
}


@dataclass(frozen=True)
class Column:
    """One canonical field of a schema."""

    name: str
    kind: str = "string"
    required: bool = False

    def parse(self, raw: str | None) -> FieldValue | None:
        return _PARSERS[self.kind](raw)


class CanonicalSchema(str, Enum):
    """Identifiers of the canonical row shapes."""

    ACCOUNT = "account"
    ALLOCATION = "allocation"
    ASSET = "asset"
    CAP = "cap"
    HOLDING = "holding"
    SECURITY = "security"
    STRATEGY = "strategy"
    TRACKER = "tracker"
    TRANSACTION = "transaction"
    SOURCE_META = "sourceMeta"

    @property
    def columns(self) -> tuple[Column, ...]:
        return _CATALOG[self]

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in _CATALOG[self]]

    @property
    def required_signature(self) -> frozenset[str]:
        return frozenset(c.name for c in _CATALOG[self] if c.required)

    @property
    def optional_signature(self) -> frozenset[str]:
        return frozenset(c.name for c in _CATALOG[self] if not c.required)

    def decode_row(self, raw: RawRow) -> DecodedRow:
        """Parse every schema column present in *raw*; unparseable values are omitted.

        Header keys are matched literally. Columns not in the schema are ignored.
        """
        row: DecodedRow = {}
        for column in _CATALOG[self]:
            if column.name not in raw:
                continue
            value = column.parse(raw[column.name])
            if value is not None:
                row[column.name] = value
        return row


def _required(name: str, kind: str = "string") -> Column:
    return Column(name, kind, required=True)


_CATALOG: dict[CanonicalSchema, tuple[Column, ...]] = {
    CanonicalSchema.ACCOUNT: (
        _required("accountID"),
        Column("title"),
        Column("isActive", "boolean"),
        Column("isTaxable", "boolean"),
        Column("canTrade", "boolean"),
        Column("strategyID"),
    ),
    CanonicalSchema.ALLOCATION: (
        _required("allocationStrategyID"),
        _required("allocationAssetID"),
        Column("targetPct", "number"),
        Column("isLocked", "boolean"),
    ),
    CanonicalSchema.ASSET: (
        _required("assetID"),
        Column("title"),
        Column("colorCode", "number"),
        Column("parentAssetID"),
    ),
    CanonicalSchema.CAP: (
        _required("capAccountID"),
        _required("capAssetID"),
        Column("limitPct", "number"),
    ),
    CanonicalSchema.HOLDING: (
        _required("holdingAccountID"),
        _required("holdingSecurityID"),
        Column("holdingLotID"),
        Column("shareCount", "number"),
        Column("shareBasis", "number"),
        Column("acquiredAt", "date"),
    ),
    CanonicalSchema.SECURITY: (
        _required("securityID"),
        Column("securityAssetID"),
        Column("sharePrice", "number"),
        Column("updatedAt", "date"),
        Column("securityTrackerID"),
    ),
    CanonicalSchema.STRATEGY: (
        _required("strategyID"),
        Column("title"),
    ),
    CanonicalSchema.TRACKER: (
        _required("trackerID"),
        Column("title"),
    ),
    CanonicalSchema.TRANSACTION: (
        _required("txnAction", "action"),
        _required("txnTransactedAt", "date"),
        _required("txnAccountID"),
        Column("txnSecurityID"),
        Column("txnLotID"),
        Column("txnShareCount", "number"),
        Column("txnSharePrice", "number"),
        Column("realizedGainShort", "number"),
        Column("realizedGainLong", "number"),
    ),
    CanonicalSchema.SOURCE_META: (
        _required("sourceMetaID"),
        Column("url"),
        Column("importerID"),
        Column("exportedAt", "date"),
    ),
}


def match_signatures(
    header: Iterable[str],
    schemas: Iterable[CanonicalSchema] | None = None,
) -> list[CanonicalSchema]:
    """Return every schema whose required signature is a subset of *header*.

    Extra, unrecognized header columns do not prevent a match. Names are
    compared literally (case-sensitive).

    Args:
        header: Observed column names.
        schemas: Schemas to test, in order. Defaults to the whole catalog.

    Returns:
        Matching schemas in catalog order; empty when nothing matches.
    """
    observed = set(header)
    candidates = list(CanonicalSchema) if schemas is None else list(schemas)
    return [schema for schema in candidates if schema.required_signature <= observed]
