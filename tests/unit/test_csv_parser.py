"""
Unit tests for ledger CSV import/export.
"""
from datetime import datetime

import pytest

from py_csv_parser.csv_parser import (
    COLUMNS, SAMPLE_CSV, CsvFormatError, check_header, export_transactions_csv, parse_transactions_csv
)
from py_ledger.calculator import calculate_portfolio
from py_ledger.domain import TransactionAction


def test_sample_file_parses():
    txs = parse_transactions_csv(SAMPLE_CSV)

    assert [t.stock_id for t in txs] == ["AAPL", "GOOGL"]
    aapl = txs[0]
    assert aapl.company_name == "Apple Inc."
    assert aapl.quantity == 10.0
    assert aapl.total_charges == pytest.approx(6.5)
    assert aapl.transaction_date == datetime(2023, 1, 15)
    assert aapl.action == TransactionAction.BUY


def test_ids_are_deterministic_and_unique():
    row = "AAPL,Apple Inc.,X,Family,Buy,1,1,0,0,0,B,NASDAQ,2023-01-01\n"
    text = ",".join(COLUMNS) + "\n" + row + row

    first = parse_transactions_csv(text)
    second = parse_transactions_csv(text)
    assert [t.id for t in first] == [t.id for t in second]
    assert first[1].id == first[0].id + "-1"


def test_bom_blank_and_short_rows():
    text = "\ufeff" + ",".join(COLUMNS) + "\n\n,,,,,,,,,,,,\nAAPL,short row\n" + SAMPLE_CSV.splitlines()[1] + "\n"
    txs = parse_transactions_csv(text)
    assert [t.stock_id for t in txs] == ["AAPL"]


def test_loose_values_are_sanitized():
    text = ",".join(COLUMNS) + "\n" + "infy,,X,,SELL ALL,-3,abc,,,,B,NSE,bad-date\n"
    tx = parse_transactions_csv(text)[0]

    assert tx.stock_id == "INFY"
    assert tx.company_name == "infy"
    assert tx.owner == "Unknown"
    assert tx.action == TransactionAction.SELL
    assert tx.quantity == 3.0
    assert tx.transaction_price == 0.0
    assert tx.transaction_date is None


def test_header_mismatch():
    with pytest.raises(CsvFormatError, match="missing: Owner"):
        check_header([c for c in COLUMNS if c != "Owner"])
    with pytest.raises(CsvFormatError, match="unexpected: Notes"):
        check_header(COLUMNS + ["Notes"])
    with pytest.raises(CsvFormatError, match="out of order"):
        check_header(list(reversed(COLUMNS)))
    with pytest.raises(CsvFormatError, match="empty"):
        parse_transactions_csv("")


def test_export_then_value():
    txs = parse_transactions_csv(SAMPLE_CSV)
    exported = export_transactions_csv(txs)

    lines = exported.splitlines()
    assert lines[0] == ",".join(COLUMNS)
    assert lines[1] == "AAPL,Apple Inc.,US0378331005,Family,Buy,10,150,5,1,0.5,Fidelity,NASDAQ,2023-01-15"

    reparsed = parse_transactions_csv(exported)
    holdings, summary = calculate_portfolio(reparsed, {"AAPL": 160.0, "GOOGL": 110.0})
    assert summary.total_investment == pytest.approx(1506.5 + 505.9)
