from datetime import datetime
from typing import Dict, Iterable, List, Optional

from .domain import ALL_OWNERS, CalculatedStock, Transaction, ValuationFilters
from .sanitize import parse_datetime

# Undated transactions sort ahead of everything else
_EARLIEST = datetime.min


def _date_key(t: Transaction) -> datetime:
    return t.transaction_date if t.transaction_date is not None else _EARLIEST


def transaction_matches(t: Transaction, filters: ValuationFilters) -> bool:
    """ Owner match AND inclusive start/end bounds on transaction_date. """
    if filters.owner != ALL_OWNERS and t.owner != filters.owner:
        return False

    start = parse_datetime(filters.start_date)
    end = parse_datetime(filters.end_date)
    if start is None and end is None:
        return True

    # An undated transaction cannot satisfy an active bound
    if t.transaction_date is None:
        return False
    if start is not None and t.transaction_date < start:
        return False
    if end is not None and t.transaction_date > end:
        return False
    return True


def sort_chronologically(transactions: Iterable[Transaction]) -> List[Transaction]:
    # sorted() is stable: same-date transactions keep their input order
    return sorted(transactions, key=_date_key)


def group_by_stock(transactions: Iterable[Transaction],
                   filters: Optional[ValuationFilters] = None) -> Dict[str, List[Transaction]]:
    """
    Partitions the passing transactions by stock_id.
    Groups appear in order of first occurrence and are sorted ascending by date.
    """
    filters = filters or ValuationFilters()
    groups: Dict[str, List[Transaction]] = {}
    for t in transactions:
        if not transaction_matches(t, filters):
            continue
        groups.setdefault(t.stock_id, []).append(t)

    return {stock_id: sort_chronologically(txs) for stock_id, txs in groups.items()}


def apply_search(stocks: List[CalculatedStock], query: str) -> List[CalculatedStock]:
    """ Case-insensitive substring match on company name or symbol. """
    if not query:
        return list(stocks)
    needle = query.lower()
    return [
        s for s in stocks
        if needle in s.stock.company_name.lower() or needle in s.stock.id.lower()
    ]
