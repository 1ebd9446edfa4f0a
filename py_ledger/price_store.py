import os
import json
import math
import shutil
import logging
from typing import Dict, Optional

from .sanitize import normalize_symbol, to_number
from .store import LedgerStoreError


class PriceStoreError(LedgerStoreError):
    pass


class PriceStore:
    """
    Manually entered prices, persisted as {SYMBOL: price}.
    Absent symbols have price 0.0, meaning "NOT SET".
    """

    def __init__(self, path: str):
        self.path = path
        self.cache_memory: Optional[Dict[str, float]] = None

    def _load_json(self) -> Dict[str, float]:
        if self.cache_memory is not None:
            return self.cache_memory

        prices: Dict[str, float] = {}
        if os.path.exists(self.path):
            try:
                with open(self.path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except json.JSONDecodeError as e:
                logging.warning(f"Price file corruption detected in {self.path}: {e}")
                self._backup_corrupt_file()
                data = {}
            except OSError as e:
                logging.error(f"Failed to load prices {self.path}: {e}")
                raise PriceStoreError(f"Failed to load prices {self.path}: {e}") from e

            if isinstance(data, dict):
                prices = {normalize_symbol(k): to_number(v) for k, v in data.items()}
            else:
                logging.warning(f"Ignoring price file {self.path}: expected an object")
                self._backup_corrupt_file()

        self.cache_memory = prices
        return prices

    def _backup_corrupt_file(self) -> None:
        # Keep the unreadable file so no stored price is silently overwritten
        backup_path = self.path + ".corrupt"
        try:
            shutil.move(self.path, backup_path)
            logging.info(f"Moved corrupt price file to {backup_path}")
        except OSError as e:
            logging.error(f"Failed to backup corrupt file {self.path}: {e}")
            raise PriceStoreError(f"Failed to backup corrupt file {self.path}: {e}") from e

    def get_prices(self) -> Dict[str, float]:
        return dict(self._load_json())

    def get_price(self, symbol: str) -> float:
        return self._load_json().get(normalize_symbol(symbol), 0.0)

    def update_price(self, symbol: str, price: float) -> Dict[str, float]:
        """
        Stores one price and returns the full price map.

        Raises:
            ValueError: price is missing, NaN or negative.
            PriceStoreError: the price file could not be read or written.
        """
        if price is None or math.isnan(price) or price < 0:
            raise ValueError(f"Invalid price {price!r} for {symbol}")

        prices = dict(self._load_json())
        prices[normalize_symbol(symbol)] = float(price)

        tmp_path = self.path + ".tmp"
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(prices, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logging.error(f"Failed to write prices {self.path}: {e}")
            if os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    pass
            raise PriceStoreError(f"Failed to write prices {self.path}: {e}") from e

        self.cache_memory = prices
        logging.info(f"Stored price {price} for {normalize_symbol(symbol)}")
        return dict(prices)
