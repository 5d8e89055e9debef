"""
AllocateSmartly model portfolio importer.

Each strategy block (e.g., "20M") lists target weights by asset
description. Descriptions are mapped to short asset class ids; rows
with an unknown description or a missing/negative weight are rejected.
"""

from __future__ import annotations

from finporter.importers.base import BlockImporter, DecodeContext, present
from finporter.schemas import CanonicalSchema, DecodedRow, RawRow, SourceFormat
from finporter.transforms.numbers import parse_percent, parse_string

ASSET_CLASS_MAP: dict[str, str] = {
    "US Aggregate Bonds": "Bond",
    "Cash": "Cash",
    "Commodities": "Cmdty",
    "US Corporate Bonds": "CorpBond",
    "Emerging Market Equities": "EM",
    "Emerging Market Bonds": "EMBond",
    "Europe Equities": "Europe",
    "Global Real Estate": "GlobRE",
    "Gold": "Gold",
    "High Yield Bonds": "HYBond",
    "Int-Term US Treasuries": "ITGov",
    "International Equities": "Intl",
    "Intl Aggregate Bonds": "IntlBond",
    "International Treasuries": "IntlGov",
    "International Real Estate": "IntlRE",
    "Intl Small Cap Equities": "IntlSC",
    "International Value": "IntlVal",
    "Japan Equities": "Japan",
    "S&P 500": "LC",
    "US Large Cap Growth": "LCGrow",
    "US Large Cap Value": "LCVal",
    "Long-Term US Treasuries": "LTGov",
    "US Momentum": "Momentum",
    "Pacific Equities": "Pacific",
    "US Real Estate": "RE",
    "US Mortgage REITs": "REMort",
    "US Small Cap Equities": "SC",
    "US Small Cap Growth": "SCGrow",
    "US Small Cap Value": "SCVal",
    "Short-Term US Treasuries": "STGov",
    "TIPS": "TIPS",
    "Nasdaq 100": "Tech",
    "US Total Market": "Total",
}


class AllocSmartImporter(BlockImporter):
    """AllocateSmartly model portfolio export."""

    id = "alloc_smart"
    name = "AllocateSmartly"
    description = "Detect and decode export files from Allocate Smartly."
    source_formats = (SourceFormat.CSV,)
    output_schemas = (CanonicalSchema.ALLOCATION,)

    def required_fields(self, schema: CanonicalSchema) -> frozenset[str]:
        return schema.required_signature | {"targetPct"}

    def map_row(
        self,
        schema: CanonicalSchema,
        raw: RawRow,
        metadata: dict[str, str],
        context: DecodeContext,
    ) -> DecodedRow | None:
        description = parse_string(raw.get("Description"))
        target_pct = parse_percent(raw.get("Optimal Allocation"))
        if target_pct is not None and target_pct < 0:
            return None
        return present({
            "allocationStrategyID": metadata.get("strategy_id"),
            "allocationAssetID": ASSET_CLASS_MAP.get(description) if description else None,
            "targetPct": target_pct,
            "isLocked": False,
        })
