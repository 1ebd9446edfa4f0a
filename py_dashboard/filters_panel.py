import streamlit as st
from typing import List, Tuple

from py_ledger.config_loader import SUPPORTED_CURRENCIES
from py_ledger.domain import ALL_OWNERS, ValuationFilters


def render_filters(owners: List[str], default_currency: str = "INR") -> Tuple[ValuationFilters, str]:
    """
    Renders the Filter Tools tile in the sidebar.

    Args:
        owners: Known owner names.
        default_currency: Display currency preselected on first run.

    Returns:
        (ValuationFilters, currency) built from the widget state.
    """
    with st.sidebar:
        st.markdown('<div class="focus-header">Filter Tools</div>', unsafe_allow_html=True)

        search = st.text_input("Search", placeholder="SEARCH SYMBOLS...", key="filter_search")
        owner = st.selectbox("Owner", options=[ALL_OWNERS] + list(owners), key="filter_owner")

        use_dates = st.checkbox("Limit by transaction date", key="filter_use_dates")
        start_date = end_date = None
        if use_dates:
            col_von, col_bis = st.columns(2)
            with col_von:
                start_date = st.date_input("From", value=None, key="filter_start", format="DD/MM/YYYY")
            with col_bis:
                end_date = st.date_input("To", value=None, key="filter_end", format="DD/MM/YYYY")

        if "filter_currency" not in st.session_state:
            st.session_state.filter_currency = default_currency if default_currency in SUPPORTED_CURRENCIES else "INR"
        currency = st.selectbox("Currency", options=SUPPORTED_CURRENCIES, key="filter_currency")

        st.markdown("---")
        st.caption(
            "Automatic background price fetching is disabled. "
            "Prices are only refreshed when you trigger a sync on an asset."
        )

    return ValuationFilters(owner=owner, start_date=start_date, end_date=end_date, search=search), currency
