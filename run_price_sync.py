#!/usr/bin/env python3
"""
Run Price Sync - Fetch current prices for the given symbols and store them

Usage:
    python run_price_sync.py --symbols INFY:NSE,AAPL
    python run_price_sync.py --retry-failed
"""
import sys

from py_datafetcher.datafetcher import main

if __name__ == "__main__":
    sys.exit(main())
