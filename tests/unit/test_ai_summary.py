from py_ledger.ai_summary import (
    PORTFOLIO_ANALYSIS_DISABLED, STOCK_ANALYSIS_DISABLED, generate_portfolio_analysis, generate_stock_analysis
)


def test_ai_features_return_fixed_notice():
    assert generate_portfolio_analysis([], None) == PORTFOLIO_ANALYSIS_DISABLED
    assert generate_stock_analysis(object()) == STOCK_ANALYSIS_DISABLED
