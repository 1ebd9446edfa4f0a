from dataclasses import dataclass
from enum import Enum

class ProviderType(Enum):
    YAHOO = "YAHOO"

@dataclass
class ProviderConfig:
    name: ProviderType
    priority: int = 1

@dataclass
class PriceQuote:
    symbol: str  # Ledger symbol (e.g. INFY)
    ticker: str  # Provider ticker actually queried (e.g. INFY.NS)
    price: float
    provider: str

class IPriceProvider:
    """ Interface for all price providers """
    def fetch_current_price(self, ticker: str) -> float:
        raise NotImplementedError

class DataFetcherError(Exception):
    pass
