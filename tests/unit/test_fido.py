"""
Unit tests for the Fidelity history and positions importers
(finporter.importers.fido_history, finporter.importers.fido_positions).
"""

from __future__ import annotations

import pytest

from finporter.config import DecodeOptions
from finporter.importers.base import DecodeContext
from finporter.importers.fido_history import (
    FidoHistoryImporter,
    account_id_from,
    classify_action,
    transaction_row,
)
from finporter.importers.fido_positions import FidoPositionsImporter
from finporter.reader import read_table
from finporter.schemas import CanonicalSchema, SourceFormat, TransactionAction
from tests.conftest import FIDO_HISTORY, FIDO_HISTORY_HEADER, FIDO_POSITIONS, NEW_YORK, utc

CONTEXT = DecodeContext(options=DecodeOptions(time_zone=NEW_YORK))


class TestFidoHistory:
    """Fidelity account history export."""

    @pytest.fixture
    def imp(self) -> FidoHistoryImporter:
        return FidoHistoryImporter()

    def test_detect(self, imp):
        assert imp.detect(FIDO_HISTORY.encode()) == {CanonicalSchema.TRANSACTION: [SourceFormat.CSV]}

    def test_detect_requires_banner(self, imp):
        assert imp.detect(FIDO_HISTORY.replace("Brokerage", "Retirement").encode()) == {}

    def test_decode(self, imp):
        result = imp.decode(FIDO_HISTORY.encode(), time_zone=NEW_YORK)
        assert result.rows == [
            {
                "txnAction": "buy",
                "txnTransactedAt": utc(2021, 3, 1, 17),
                "txnAccountID": "X00000000",
                "txnLotID": "",
                "txnSecurityID": "VV",
                "txnShareCount": 0.999,
                "txnSharePrice": 180.95,
            },
            {
                "txnAction": "dividendIncome",
                "txnTransactedAt": utc(2021, 3, 31, 16),
                "txnAccountID": "X00000000",
                "txnLotID": "",
                "txnSecurityID": "VV",
                "txnShareCount": 12.34,
                "txnSharePrice": 1.0,
            },
        ]

    def test_sell_without_quantity_is_rejected(self, imp):
        result = imp.decode(FIDO_HISTORY.encode(), time_zone=NEW_YORK)
        assert len(result.rejected_rows) == 1
        assert "YOU SOLD" in result.rejected_rows[0]["Action"]

    def test_trailing_disclaimer_is_ignored(self, imp):
        """The "XXX" line after the blank line is not part of the table."""
        result = imp.decode(FIDO_HISTORY.encode(), time_zone=NEW_YORK)
        assert len(result.rows) + len(result.rejected_rows) == 3

    @pytest.mark.parametrize(
        "label, expected",
        [
            (" YOU BOUGHT VANGUARD LARGE-CAP INDEX FUND (VV) (Cash)", TransactionAction.BUY),
            ("REINVESTMENT VANGUARD LARGE-CAP", TransactionAction.BUY),
            ("YOU SOLD VANGUARD", TransactionAction.SELL),
            ("DIVIDEND RECEIVED VANGUARD", TransactionAction.DIVIDEND_INCOME),
            ("INTEREST EARNED FDIC INSURED DEPOSIT", TransactionAction.INTEREST_INCOME),
            ("TRANSFER OF ASSETS ACAT RECEIVE", TransactionAction.TRANSFER),
            ("FEE CHARGED", TransactionAction.MISC_INCOME),
        ],
    )
    def test_classify_action(self, label, expected):
        assert classify_action(label) is expected

    def test_account_id_from(self):
        assert account_id_from("MY TACTICAL (taxable) X00000000") == "X00000000"
        assert account_id_from(None) is None

    def test_money_market_symbol_is_trimmed(self):
        raw = read_table(
            FIDO_HISTORY_HEADER + "\n"
            " 04/01/2021,MY TACTICAL (taxable) X00000000, DIVIDEND RECEIVED FIDELITY GOVERNMENT MONEY MARKET,"
            " SPAXX**, FIDELITY GOVERNMENT MONEY MARKET,Cash,,,,,,0.05,\n"
        )[0]
        row = transaction_row(raw, CONTEXT)
        assert row["txnSecurityID"] == "SPAXX"
        assert row["txnLotID"] == ""


class TestFidoPositions:
    """Fidelity positions export."""

    @pytest.fixture
    def imp(self) -> FidoPositionsImporter:
        return FidoPositionsImporter()

    def test_detect(self, imp):
        assert imp.detect(FIDO_POSITIONS.encode()) == {
            CanonicalSchema.ACCOUNT: [SourceFormat.CSV],
            CanonicalSchema.HOLDING: [SourceFormat.CSV],
            CanonicalSchema.SECURITY: [SourceFormat.CSV],
        }

    def test_accounts_are_not_deduplicated(self, imp):
        result = imp.decode(FIDO_POSITIONS.encode(), "account")
        assert result.rows == [{"accountID": "X12345678", "title": "MY TACTICAL"}] * 3

    def test_holdings(self, imp):
        result = imp.decode(FIDO_POSITIONS.encode(), "holding")
        assert result.rows == [
            {"holdingAccountID": "X12345678", "holdingSecurityID": "SPAXX", "shareCount": 1000.0},
            {
                "holdingAccountID": "X12345678",
                "holdingSecurityID": "VTI",
                "shareCount": 10.0,
                "shareBasis": 200.0,
            },
        ]
        assert [raw["Symbol"] for raw in result.rejected_rows] == ["Pending Activity"]

    def test_securities(self, imp):
        ts = utc(2021, 3, 31, 20)
        result = imp.decode(FIDO_POSITIONS.encode(), "security", timestamp=ts)
        assert result.rows == [
            {"securityID": "SPAXX", "sharePrice": 1.0, "updatedAt": ts},
            {"securityID": "VTI", "sharePrice": 220.0, "updatedAt": ts},
        ]
        assert len(result.rejected_rows) == 1

    def test_no_source_meta(self, imp):
        assert CanonicalSchema.SOURCE_META not in imp.output_schemas
