import json
import os
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from py_datafetcher.types import ProviderConfig, ProviderType

DEFAULT_CONFIG_PATH = "ledger.json"
CONFIG_ENV_VAR = "LEDGER_CONFIG"

SUPPORTED_CURRENCIES = ["INR", "USD"]


@dataclass
class LedgerConfig:
    data_dir: str = "./data/ledger"
    prices_file: str = "prices.json"
    currency: str = "INR"
    user_email: Optional[str] = None
    default_owners: List[str] = field(default_factory=list)
    ticker_map: Dict[str, str] = field(default_factory=dict)  # Symbol -> provider ticker
    exchange_suffixes: Dict[str, str] = field(default_factory=lambda: {"NSE": ".NS", "BSE": ".BO"})
    providers: List[ProviderConfig] = field(default_factory=list)

    @property
    def prices_path(self) -> str:
        return os.path.join(self.data_dir, self.prices_file)


def resolve_config_path(config_path: Optional[str] = None) -> str:
    return config_path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH


def _parse_providers(raw: Dict) -> List[ProviderConfig]:
    providers = []
    for p_key, p_data in raw.items():
        p_data = p_data or {}
        if not p_data.get("enabled", True):
            continue
        try:
            providers.append(ProviderConfig(
                name=ProviderType(p_key.upper()),
                priority=p_data.get("priority", 99)
            ))
        except (ValueError, KeyError, AttributeError) as e:
            logging.warning(f"Skipping provider {p_key}: {e}")
    return providers


def load_config(config_path: Optional[str] = None) -> LedgerConfig:
    """
    Loads ledger settings from JSON, falling back to defaults for anything
    missing. Ensures the data directory exists.
    """
    path = resolve_config_path(config_path)
    config = LedgerConfig()

    if os.path.exists(path):
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)

            if not isinstance(data, dict):
                raise ValueError("Top-level JSON value must be an object")

            config.data_dir = data.get("data_dir", config.data_dir)
            config.prices_file = data.get("prices_file", config.prices_file)
            config.user_email = data.get("user_email", config.user_email)

            currency = str(data.get("currency", config.currency)).upper()
            if currency in SUPPORTED_CURRENCIES:
                config.currency = currency
            else:
                logging.warning(f"Unsupported currency '{currency}'. Using {config.currency}.")

            if isinstance(data.get("default_owners"), list):
                config.default_owners = [str(o) for o in data["default_owners"]]
            if isinstance(data.get("ticker_map"), dict):
                config.ticker_map = {k.upper(): v for k, v in data["ticker_map"].items()}
            if isinstance(data.get("exchange_suffixes"), dict):
                config.exchange_suffixes = {k.upper(): v for k, v in data["exchange_suffixes"].items()}
            if isinstance(data.get("providers"), dict):
                config.providers = _parse_providers(data["providers"])

        except (OSError, ValueError) as e:
            logging.error(f"Failed to load config file {path}: {e}")
            config = LedgerConfig()
    else:
        logging.info(f"Config file {path} not found. Using defaults.")

    if not config.providers:
        config.providers.append(ProviderConfig(name=ProviderType.YAHOO, priority=1))
    config.providers.sort(key=lambda p: p.priority)

    os.makedirs(config.data_dir, exist_ok=True)
    return config
