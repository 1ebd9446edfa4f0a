import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from py_ledger.config_loader import LedgerConfig
from py_ledger.domain import CalculatedStock, Transaction
from py_ledger.formatting import format_currency, format_date, format_price
from py_ledger.price_store import PriceStore
from py_ledger.store import LedgerStore, LedgerStoreError


@dataclass
class LedgerData:
    transactions: List[Transaction] = field(default_factory=list)
    owners: List[str] = field(default_factory=list)
    prices: Dict[str, float] = field(default_factory=dict)


def load_ledger(store: LedgerStore, price_store: PriceStore,
                previous: Optional[LedgerData] = None) -> Tuple[LedgerData, Optional[str]]:
    """
    Loads a fresh snapshot of transactions, owners and prices.
    On failure the previous snapshot is returned untouched with an error message.
    """
    try:
        data = LedgerData(
            transactions=store.load_transactions(),
            owners=store.load_owners(),
            prices=price_store.get_prices()
        )
    except LedgerStoreError as e:
        logging.error(f"Fetch error: {e}")
        return (previous or LedgerData()), str(e)
    return data, None


def build_stores(config: LedgerConfig) -> Tuple[LedgerStore, PriceStore]:
    store = LedgerStore(config.data_dir, user_email=config.user_email)
    store.ensure_owners(config.default_owners)
    return store, PriceStore(config.prices_path)


def holdings_to_frame(holdings: Sequence[CalculatedStock], currency: str = "INR") -> pd.DataFrame:
    """ Display table for the holdings list; numbers formatted, P&L kept numeric for styling. """
    rows = []
    for s in holdings:
        rows.append({
            'Company': s.stock.company_name,
            'Symbol': s.stock.id,
            'Holding Qty': s.quantity,
            'Total Cost': format_currency(s.investment, currency),
            'Current Price': format_price(s.stock.current_price, currency),
            'Net P&L': format_currency(s.p_and_l, currency),
            'PnL_Value': s.p_and_l,
        })
    columns = ['Company', 'Symbol', 'Holding Qty', 'Total Cost', 'Current Price', 'Net P&L', 'PnL_Value']
    return pd.DataFrame(rows, columns=columns)


def transactions_to_frame(transactions: Sequence[Transaction], currency: str = "INR") -> pd.DataFrame:
    """ Newest first, as shown in the stock details and collective ledgers. """
    ordered = sorted(
        transactions,
        key=lambda t: (t.transaction_date is not None, t.transaction_date or 0),
        reverse=True
    )
    rows = []
    for t in ordered:
        rows.append({
            'Date': format_date(t.transaction_date),
            'Symbol': t.stock_id,
            'Type': t.action.value,
            'Owner': t.owner,
            'Qty': t.quantity,
            'Price/Share': format_currency(t.transaction_price, currency),
            'Charges': format_currency(t.total_charges, currency),
            'Total': format_currency(t.gross_amount, currency),
            'Recorded By': t.user_email or "",
            'id': t.id,
        })
    columns = ['Date', 'Symbol', 'Type', 'Owner', 'Qty', 'Price/Share', 'Charges', 'Total', 'Recorded By', 'id']
    return pd.DataFrame(rows, columns=columns)
