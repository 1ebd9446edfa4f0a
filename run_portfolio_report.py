#!/usr/bin/env python3
"""
Run Portfolio Report - Print current holdings and the portfolio summary

Usage:
    python run_portfolio_report.py [--owner NAME] [--start YYYY-MM-DD] [--end YYYY-MM-DD] [--search TEXT] [--output holdings.csv]
"""
import sys

from py_ledger.portfolio_report import main

if __name__ == "__main__":
    sys.exit(main())
