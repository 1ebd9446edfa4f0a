import yfinance as yf
import logging
from .types import IPriceProvider, DataFetcherError

class YahooProvider(IPriceProvider):
    # Different keys depending on yfinance version/asset type
    PRICE_KEYS = ['currentPrice', 'regularMarketPrice', 'bid', 'ask']

    def fetch_current_price(self, ticker: str) -> float:
        try:
            ticker_obj = yf.Ticker(ticker)
            price = None

            info = ticker_obj.info or {}
            for k in self.PRICE_KEYS:
                if k in info and info[k] is not None:
                    price = info[k]
                    break

            if price is None:
                # Fallback: last close from 1d history
                logging.debug(f"No quote fields for {ticker}, falling back to 1d history")
                hist = ticker_obj.history(period="1d")
                if not hist.empty:
                    price = hist['Close'].iloc[-1]

            if price is None:
                raise DataFetcherError(f"Could not determine current price for {ticker}")

            return float(price)

        except DataFetcherError:
            raise
        except Exception as e:
            # Wrap library exceptions for the sync chain
            raise DataFetcherError(f"Yahoo Price Error for {ticker}: {e}")
