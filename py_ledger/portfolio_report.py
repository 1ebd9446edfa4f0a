import io
import os
import csv
import sys
import argparse
import logging
from datetime import datetime
from typing import List, Optional, Sequence

from .calculator import calculate_portfolio
from .config_loader import SUPPORTED_CURRENCIES, load_config
from .domain import ALL_OWNERS, CalculatedStock, PortfolioSummary, ValuationFilters
from .formatting import format_currency, format_price, format_quantity
from .price_store import PriceStore
from .sanitize import parse_datetime
from .store import LedgerStore, LedgerStoreError


class HoldingsCsvGenerator:
    def __init__(self):
        self.fieldnames = [
            'symbol', 'company', 'quantity', 'investment',
            'current_price', 'current_value', 'pnl',
        ]

    def _fmt(self, d: float) -> str:
        if d is None: return "0.00"
        return f"{d:.2f}"

    def generate(self, holdings: Sequence[CalculatedStock]) -> str:
        output = io.StringIO()
        # Semicolon separator, same as the other journal exports
        writer = csv.DictWriter(output, fieldnames=self.fieldnames, delimiter=';', lineterminator="\n")
        writer.writeheader()
        for s in holdings:
            writer.writerow({
                'symbol': s.stock.id,
                'company': s.stock.company_name,
                'quantity': f"{s.quantity:g}",
                'investment': self._fmt(s.investment),
                'current_price': self._fmt(s.stock.current_price),
                'current_value': self._fmt(s.current_value),
                'pnl': self._fmt(s.p_and_l),
            })
        return output.getvalue()


def parse_date_arg(value: str) -> datetime:
    parsed = parse_datetime(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"invalid date: {value!r} (expected YYYY-MM-DD)")
    return parsed


def render_table(holdings: Sequence[CalculatedStock], summary: PortfolioSummary, currency: str) -> str:
    lines = [f"{'Symbol':<12}{'Company':<28}{'Qty':>10}{'Total Cost':>18}{'Price':>14}{'Net P&L':>18}"]
    for s in holdings:
        lines.append(
            f"{s.stock.id:<12}{s.stock.company_name[:27]:<28}{format_quantity(s.quantity):>10}"
            f"{format_currency(s.investment, currency):>18}{format_price(s.stock.current_price, currency):>14}"
            f"{format_currency(s.p_and_l, currency):>18}"
        )
    lines.append("")
    lines.append(f"Portfolio Cost:  {format_currency(summary.total_investment, currency)}")
    lines.append(f"Current Value:   {format_currency(summary.current_value, currency)}")
    lines.append(f"Cumulative P&L:  {format_currency(summary.total_p_and_l, currency)}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    parser = argparse.ArgumentParser(description="Shared Ledger Portfolio Report")
    parser.add_argument("--config", help="Path to ledger.json")
    parser.add_argument("--data-dir", help="Override the ledger data directory")
    parser.add_argument("--owner", default=ALL_OWNERS, help=f"Owner filter (default: {ALL_OWNERS})")
    parser.add_argument("--start", type=parse_date_arg, help="Start date YYYY-MM-DD (inclusive)")
    parser.add_argument("--end", type=parse_date_arg, help="End date YYYY-MM-DD (inclusive)")
    parser.add_argument("--search", default="", help="Filter holdings by company name or symbol")
    parser.add_argument("--currency", choices=SUPPORTED_CURRENCIES, help="Display currency")
    parser.add_argument("--output", help="Write holdings as ;-separated CSV")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    data_dir = args.data_dir or config.data_dir
    currency = args.currency or config.currency

    store = LedgerStore(data_dir, user_email=config.user_email)
    prices = PriceStore(os.path.join(data_dir, config.prices_file))

    try:
        transactions = store.load_transactions()
    except LedgerStoreError as e:
        logging.error(f"Could not load transactions: {e}")
        return 1
    logging.info(f"Loaded {len(transactions)} transactions from {data_dir}")

    filters = ValuationFilters(owner=args.owner, start_date=args.start, end_date=args.end, search=args.search)
    holdings, summary = calculate_portfolio(transactions, prices.get_prices(), filters)

    unpriced = [s.stock.id for s in holdings if not s.stock.has_price]
    if unpriced:
        logging.warning(f"No current price set for: {', '.join(unpriced)}")

    logging.info("Holdings:\n" + render_table(holdings, summary, currency))

    if args.output:
        with open(args.output, "w", encoding="utf-8", newline="") as f:
            f.write(HoldingsCsvGenerator().generate(holdings))
        logging.info(f"Done. Output written to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
