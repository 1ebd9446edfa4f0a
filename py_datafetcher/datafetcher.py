import argparse
import sys
import logging
from typing import List, Optional, Tuple

from py_ledger.config_loader import LedgerConfig, load_config
from py_ledger.price_store import PriceStore, PriceStoreError
from py_datafetcher.error_logger import ErrorLogger
from py_datafetcher.price_sync import PriceSync
from py_datafetcher.provider_yahoo import YahooProvider
from py_datafetcher.types import IPriceProvider, ProviderType


def parse_symbol_list(arg_str: str) -> List[Tuple[str, str]]:
    """ Parses 'SYMBOL:EXCHANGE,SYMBOL2' into [(symbol, exchange), ...] """
    if not arg_str:
        return []

    items = []
    for p in arg_str.split(','):
        p = p.strip()
        if not p:
            continue
        if ':' in p:
            symbol, exchange = p.split(':', 1)
            items.append((symbol.strip(), exchange.strip()))
        else:
            items.append((p, ""))
    return items


def build_providers(config: LedgerConfig) -> List[IPriceProvider]:
    providers: List[IPriceProvider] = []
    for p_conf in config.providers:
        if p_conf.name == ProviderType.YAHOO:
            providers.append(YahooProvider())
    return providers


def build_price_sync(config: LedgerConfig) -> PriceSync:
    return PriceSync(
        providers=build_providers(config),
        price_store=PriceStore(config.prices_path),
        ticker_map=config.ticker_map,
        exchange_suffixes=config.exchange_suffixes,
        error_logger=ErrorLogger(config.data_dir)
    )


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    parser = argparse.ArgumentParser(description="Ledger Price Sync")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--symbols", help="List of symbols 'SYMBOL[:EXCHANGE],...'")
    target.add_argument("--retry-failed", action="store_true", help="Retry every symbol in the failure log")
    parser.add_argument("--config", help="Path to ledger.json")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    sync = build_price_sync(config)

    success_count = 0
    fail_count = 0
    if args.retry_failed:
        targets = sync.error_logger.retry_targets()
        # Symbols that fail again are logged afresh
        sync.error_logger.clear_log()
        logging.info(f"Retrying {len(targets)} previously failed symbols")
    else:
        targets = parse_symbol_list(args.symbols)

    for symbol, exchange in targets:
        try:
            price = sync.sync_price(symbol, exchange)
        except PriceStoreError as e:
            logging.error(f"Could not store price for {symbol}: {e}")
            price = 0.0
        if price > 0:
            success_count += 1
        else:
            fail_count += 1

    logging.info(f"Price sync finished. Success: {success_count}, Failed: {fail_count}")
    return 1 if fail_count > 0 else 0


if __name__ == "__main__":
    sys.exit(main())
