"""
Unit tests for holdings valuation and the portfolio summary.
"""
import pytest

from py_ledger.calculator import build_calculated_stock, calculate_holdings, calculate_portfolio, summarize
from py_ledger.domain import ValuationFilters


def test_end_to_end_scenario(make_tx):
    txs = [
        make_tx("AAPL", quantity=10, price=150, charges=6.5, date="2023-01-15", company_name="Apple Inc."),
        make_tx("AAPL", quantity=5, price=100, charges=5.9, date="2023-02-20", company_name="Apple Inc."),
    ]
    holdings, summary = calculate_portfolio(txs, {"AAPL": 160.0})

    assert len(holdings) == 1
    aapl = holdings[0]
    assert aapl.stock.id == "AAPL"
    assert aapl.stock.company_name == "Apple Inc."
    assert aapl.quantity == pytest.approx(15)
    assert aapl.investment == pytest.approx(2012.4)
    assert aapl.current_value == pytest.approx(2400)
    assert aapl.p_and_l == pytest.approx(387.6)
    assert aapl.first_transaction_date == txs[0].transaction_date
    assert aapl.recommendation == "Hold"
    assert aapl.avg_annual_return == 0.0

    assert summary.total_investment == pytest.approx(2012.4)
    assert summary.current_value == pytest.approx(2400)
    assert summary.total_p_and_l == pytest.approx(387.6)


def test_unset_price(make_tx):
    calc = build_calculated_stock("INFY", [make_tx("INFY", quantity=4, price=1500, charges=12)], {})

    assert calc.stock.current_price == 0.0
    assert not calc.stock.has_price
    assert calc.current_value == 0.0
    assert calc.p_and_l == pytest.approx(-calc.investment)
    assert calc.investment == pytest.approx(6012)


def test_summary_is_sum_of_holdings(make_tx):
    txs = [
        make_tx("AAPL", quantity=10, price=150.13, charges=6.5),
        make_tx("INFY", quantity=3, price=1432.7, charges=2.1),
        make_tx("TCS", quantity=7, price=3300.05),
        make_tx("TCS", action="Sell", quantity=2, price=3400, date="2023-02-01"),
    ]
    holdings = calculate_holdings(txs, {"AAPL": 171.2, "TCS": 3500.0})
    summary = summarize(holdings)

    assert summary.total_investment == pytest.approx(sum(s.investment for s in holdings))
    assert summary.current_value == pytest.approx(sum(s.current_value for s in holdings))
    assert summary.total_p_and_l == pytest.approx(sum(s.p_and_l for s in holdings))
    assert summary.avg_annual_return == 0.0


def test_summary_of_nothing():
    summary = summarize([])
    assert summary.total_investment == 0.0
    assert summary.current_value == 0.0
    assert summary.total_p_and_l == 0.0


def test_divested_stock_excluded(make_tx):
    txs = [
        make_tx("AAPL", quantity=10, price=100, date="2023-01-01"),
        make_tx("AAPL", action="Sell", quantity=10, price=150, date="2023-03-01"),
        make_tx("INFY", quantity=1, price=1500, date="2023-01-01"),
        make_tx("TCS", quantity=1, price=10, date="2023-01-01"),
        make_tx("TCS", action="Sell", quantity=0.99995, price=10, date="2023-01-02"),
    ]
    holdings = calculate_holdings(txs, {"AAPL": 200.0})
    assert [s.stock.id for s in holdings] == ["INFY"]


def test_oversold_stock_excluded(make_tx):
    txs = [
        make_tx("AAPL", quantity=2, price=100),
        make_tx("AAPL", action="Sell", quantity=5, price=100, date="2023-02-01"),
    ]
    assert calculate_holdings(txs, {"AAPL": 100.0}) == []


def test_negative_quantity_zeroes_investment_and_pnl(make_tx):
    calc = build_calculated_stock("AAPL", [make_tx(action="Sell", quantity=3)], {"AAPL": 50.0})
    assert calc.quantity == pytest.approx(-3)
    assert calc.investment == 0.0
    assert calc.p_and_l == 0.0


def test_owner_and_date_filter_change_holdings(make_tx):
    txs = [
        make_tx("AAPL", quantity=10, price=100, owner="Alice", date="2023-01-01"),
        make_tx("AAPL", quantity=5, price=120, owner="Bob", date="2023-06-01"),
        make_tx("INFY", quantity=2, price=1500, owner="Bob", date="2023-06-01"),
    ]
    prices = {"AAPL": 130.0, "INFY": 1600.0}

    alice = calculate_holdings(txs, prices, ValuationFilters(owner="Alice"))
    assert [(s.stock.id, s.quantity) for s in alice] == [("AAPL", 10)]

    h2 = calculate_holdings(txs, prices, ValuationFilters(start_date="2023-03-01"))
    assert [(s.stock.id, s.quantity) for s in h2] == [("AAPL", 5), ("INFY", 2)]
    assert h2[0].investment == pytest.approx(600)


def test_company_name_from_unfiltered_list(make_tx):
    txs = [
        make_tx("AAPL", company_name="Apple Inc.", owner="Alice", date="2023-01-01"),
        make_tx("AAPL", company_name="Apple Computer", owner="Bob", date="2023-02-01"),
    ]
    holdings = calculate_holdings(txs, {}, ValuationFilters(owner="Bob"))
    assert holdings[0].stock.company_name == "Apple Inc."


def test_inputs_not_mutated(make_tx):
    txs = [make_tx("AAPL", date="2023-02-01"), make_tx("AAPL", date="2023-01-01")]
    prices = {"AAPL": 10.0}
    before = list(txs)
    calculate_portfolio(txs, prices)
    assert txs == before
    assert prices == {"AAPL": 10.0}
