#!/usr/bin/env python3
"""
Run Dashboard - Start the Streamlit ledger dashboard

Usage:
    python run_dashboard.py
"""
import os
import sys
import subprocess

if __name__ == "__main__":
    script = os.path.join(os.path.dirname(os.path.abspath(__file__)), "py_dashboard", "run_dashboard.py")
    sys.exit(subprocess.call([sys.executable, "-m", "streamlit", "run", script]))
