"""
Shared fixtures for ledger tests.
"""
import pytest
from datetime import datetime

from py_ledger.domain import Transaction, TransactionAction


@pytest.fixture
def make_tx():
    """Factory for Transaction objects with sensible defaults."""
    counter = {"n": 0}

    def _make(stock_id="AAPL", action="Buy", quantity=10.0, price=100.0, charges=0.0,
              date="2023-01-15", owner="Family", company_name=None, exchange="NASDAQ", tx_id=None):
        counter["n"] += 1
        return Transaction(
            id=tx_id if tx_id is not None else f"tx{counter['n']}",
            stock_id=stock_id,
            company_name=company_name or f"{stock_id} Corp",
            isin_code="",
            owner=owner,
            action=TransactionAction(action),
            quantity=quantity,
            transaction_price=price,
            brokerage=charges,
            exchange=exchange,
            transaction_date=datetime.fromisoformat(date) if date else None,
        )

    return _make


@pytest.fixture
def form_data():
    """Valid add-transaction form values."""
    return {
        "stock_id": "aapl",
        "company_name": "Apple Inc.",
        "isin_code": "US0378331005",
        "owner": "Family",
        "action": "Buy",
        "quantity": "10",
        "transaction_price": "150",
        "brokerage": "5",
        "stamp_duty": "1",
        "transaction_charges": "0.5",
        "broker": "Fidelity",
        "exchange": "NASDAQ",
        "transaction_date": "2023-01-15",
    }
