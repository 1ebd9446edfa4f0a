"""
AI narrative features.

Both generators are disconnected so that no paid API is ever called; they
only return a fixed notice for the dashboard to display.
"""
import logging

PORTFOLIO_ANALYSIS_DISABLED = "AI Analysis is currently disabled to prevent usage charges."
STOCK_ANALYSIS_DISABLED = "AI Intelligence features are disconnected."


def generate_portfolio_analysis(*args, **kwargs) -> str:
    logging.debug("Portfolio analysis requested while AI features are disabled")
    return PORTFOLIO_ANALYSIS_DISABLED


def generate_stock_analysis(*args, **kwargs) -> str:
    logging.debug("Stock analysis requested while AI features are disabled")
    return STOCK_ANALYSIS_DISABLED
