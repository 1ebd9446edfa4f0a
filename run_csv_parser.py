#!/usr/bin/env python3
"""
Run CSV Parser - Import/export the ledger as CSV

Usage:
    python run_csv_parser.py import transactions.csv   (replaces all stored transactions)
    python run_csv_parser.py export transactions.csv
    python run_csv_parser.py sample sample.csv
"""
import sys

from py_csv_parser.csv_parser import main

if __name__ == "__main__":
    sys.exit(main())
