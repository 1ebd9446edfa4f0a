import logging
from typing import Dict, List, Optional

from py_ledger.price_store import PriceStore
from py_ledger.sanitize import normalize_symbol
from .error_logger import ErrorLogger
from .types import DataFetcherError, IPriceProvider, PriceQuote

DEFAULT_EXCHANGE_SUFFIXES = {"NSE": ".NS", "BSE": ".BO"}


class PriceSync:
    """
    User-triggered price refresh for one symbol at a time.
    Providers are tried in order; the first positive price is stored.
    """

    def __init__(self, providers: List[IPriceProvider], price_store: PriceStore,
                 ticker_map: Optional[Dict[str, str]] = None,
                 exchange_suffixes: Optional[Dict[str, str]] = None,
                 error_logger: Optional[ErrorLogger] = None):
        self.providers = providers  # Sorted by priority already
        self.price_store = price_store
        self.ticker_map = {k.upper(): v for k, v in (ticker_map or {}).items()}
        self.exchange_suffixes = exchange_suffixes if exchange_suffixes is not None else dict(DEFAULT_EXCHANGE_SUFFIXES)
        self.error_logger = error_logger

    def resolve_ticker(self, stock_id: str, exchange: str = "") -> str:
        symbol = normalize_symbol(stock_id)
        if symbol in self.ticker_map:
            return self.ticker_map[symbol]
        return symbol + self.exchange_suffixes.get((exchange or "").upper().strip(), "")

    def fetch_quote(self, stock_id: str, exchange: str = "") -> Optional[PriceQuote]:
        symbol = normalize_symbol(stock_id)
        ticker = self.resolve_ticker(symbol, exchange)

        errors = []
        for provider in self.providers:
            name = provider.__class__.__name__
            try:
                logging.info(f"Fetching {ticker} from {name}")
                price = provider.fetch_current_price(ticker)
            except DataFetcherError as e:
                logging.warning(f"Provider {name} failed: {e}")
                errors.append(f"{name}: {e}")
                continue
            if price is None or not price > 0:
                logging.warning(f"Provider {name} returned no usable price for {ticker}: {price}")
                errors.append(f"{name}: no usable price ({price})")
                continue
            return PriceQuote(symbol=symbol, ticker=ticker, price=float(price), provider=name)

        logging.error(f"All providers failed to price {symbol} (ticker {ticker}).")
        if self.error_logger:
            self.error_logger.log_failure(symbol, exchange or "", ticker, errors)
        return None

    def sync_price(self, stock_id: str, exchange: str = "") -> float:
        """
        Returns the stored price, or 0.0 when nothing could be fetched.
        PriceStoreError from saving the price propagates to the caller.
        """
        quote = self.fetch_quote(stock_id, exchange)
        if quote is None:
            return 0.0
        self.price_store.update_price(quote.symbol, quote.price)
        logging.info(f"Synced {quote.symbol} = {quote.price} via {quote.provider}")
        return quote.price
