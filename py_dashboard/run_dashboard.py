import os
import sys
import logging
import streamlit as st

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from py_datafetcher.datafetcher import build_price_sync
from py_ledger.ai_summary import generate_portfolio_analysis
from py_ledger.calculator import calculate_portfolio
from py_ledger.config_loader import load_config
from py_dashboard.data_loader import build_stores, load_ledger
from py_dashboard.filters_panel import render_filters
from py_dashboard.holdings_view import render_holdings_table, render_pnl_chart, render_summary_tiles
from py_dashboard.ledger_view import render_transaction_ledger
from py_dashboard.owners_panel import render_csv_panel, render_owners_panel
from py_dashboard.stock_details import render_stock_details
from py_dashboard.transaction_form import render_transaction_form

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)

# --- Page Config ---
st.set_page_config(
    page_title="Shared Ledger",
    layout="wide",
    initial_sidebar_state="expanded"
)

# --- Load CSS ---
def local_css(file_name):
    script_dir = os.path.dirname(__file__)
    file_path = os.path.join(script_dir, file_name)
    with open(file_path) as f:
        st.markdown(f'<style>{f.read()}</style>', unsafe_allow_html=True)

local_css("styles.css")

# --- Title ---
st.title("Shared Ledger")
st.caption("Shared Asset Management · Cost-Control Mode Active")

# --- Data Loading ---
config = load_config()
store, price_store = build_stores(config)
price_sync = build_price_sync(config)

ledger, load_error = load_ledger(store, price_store, st.session_state.get("ledger"))
if load_error:
    st.error(f"Could not refresh ledger data: {load_error}")
st.session_state.ledger = ledger

# --- Layout ---
filters, currency = render_filters(ledger.owners, config.currency)
holdings, summary = calculate_portfolio(ledger.transactions, ledger.prices, filters)

# 1. Summary
render_summary_tiles(summary, currency)
st.markdown("---")

# 2. Holdings
tab_assets, tab_ledger, tab_add, tab_owners, tab_csv = st.tabs(
    ["Team Assets", "All Transactions", "Add Entry", "Owners", "Import / Export"]
)

with tab_assets:
    selected = render_holdings_table(holdings, currency)
    render_pnl_chart(holdings, currency)
    st.caption(generate_portfolio_analysis(holdings, summary))

    calc = next((s for s in holdings if s.stock.id == selected), None)
    if calc is not None:
        st.markdown("---")
        if render_stock_details(calc, ledger.owners, store, price_store, price_sync, currency):
            st.rerun()

with tab_ledger:
    render_transaction_ledger(ledger.transactions, ledger.owners, currency)

with tab_add:
    to_edit = st.session_state.get("transaction_to_edit")
    if to_edit is not None:
        st.info(f"Editing {to_edit.stock_id} transaction {to_edit.id}")
        if st.button("Cancel edit"):
            st.session_state.transaction_to_edit = None
            st.rerun()
    if render_transaction_form(store, ledger.owners, to_edit):
        st.session_state.transaction_to_edit = None
        st.rerun()

with tab_owners:
    if render_owners_panel(store, ledger.owners):
        st.rerun()

with tab_csv:
    if render_csv_panel(store, ledger.transactions):
        st.rerun()
