from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .cost_basis import accumulate
from .domain import (
    DIVESTED_EPSILON, CalculatedStock, PortfolioSummary, Stock, Transaction,
    ValuationFilters
)
from .filters import apply_search, group_by_stock


def company_names(transactions: Sequence[Transaction]) -> Dict[str, str]:
    """ First-seen company name per symbol across the unfiltered list. """
    names: Dict[str, str] = {}
    for t in transactions:
        names.setdefault(t.stock_id, t.company_name)
    return names


def build_calculated_stock(stock_id: str,
                           transactions: List[Transaction],
                           prices: Mapping[str, float],
                           company_name: Optional[str] = None) -> CalculatedStock:
    """
    Runs the accumulator over one chronologically sorted group and values it.
    Investment and P&L are zero whenever the net quantity is not positive.
    """
    result = accumulate(transactions)
    if company_name is None:
        company_name = transactions[0].company_name if transactions else stock_id

    stock = Stock(id=stock_id, company_name=company_name, current_price=prices.get(stock_id, 0.0))
    current_value = result.quantity * stock.current_price
    p_and_l = current_value - result.cost_basis
    held = result.quantity > 0

    return CalculatedStock(
        stock=stock,
        transactions=list(transactions),
        quantity=result.quantity,
        investment=result.cost_basis if held else 0.0,
        current_value=current_value,
        p_and_l=p_and_l if held else 0.0,
        first_transaction_date=result.first_transaction_date,
    )


def calculate_holdings(transactions: Sequence[Transaction],
                       prices: Mapping[str, float],
                       filters: Optional[ValuationFilters] = None) -> List[CalculatedStock]:
    """
    Full recomputation: filter, group, accumulate, drop divested, then search.
    Neither the transactions nor the price map are modified.
    """
    filters = filters or ValuationFilters()
    names = company_names(transactions)
    groups = group_by_stock(transactions, filters)

    holdings = []
    for stock_id, txs in groups.items():
        calc = build_calculated_stock(stock_id, txs, prices, names.get(stock_id))
        if calc.quantity > DIVESTED_EPSILON:
            holdings.append(calc)

    return apply_search(holdings, filters.search)


def summarize(stocks: Sequence[CalculatedStock]) -> PortfolioSummary:
    summary = PortfolioSummary()
    for s in stocks:
        summary.total_investment += s.investment
        summary.current_value += s.current_value
        summary.total_p_and_l += s.p_and_l
    return summary


def calculate_portfolio(transactions: Sequence[Transaction],
                        prices: Mapping[str, float],
                        filters: Optional[ValuationFilters] = None) -> Tuple[List[CalculatedStock], PortfolioSummary]:
    holdings = calculate_holdings(transactions, prices, filters)
    return holdings, summarize(holdings)
