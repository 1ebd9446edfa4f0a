import logging
import streamlit as st
from typing import List, Optional

from py_datafetcher.price_sync import PriceSync
from py_ledger.ai_summary import generate_stock_analysis
from py_ledger.domain import CalculatedStock
from py_ledger.formatting import format_currency, format_price
from py_ledger.price_store import PriceStore, PriceStoreError
from py_ledger.store import LedgerStore, LedgerStoreError
from .data_loader import transactions_to_frame


def render_stock_details(calc: CalculatedStock, owners: List[str], store: LedgerStore,
                         price_store: PriceStore, price_sync: Optional[PriceSync], currency: str) -> bool:
    """
    Renders the details panel of one holding with its actions.

    Returns:
        True when a mutation succeeded and the ledger must be reloaded.
    """
    stock = calc.stock
    st.markdown(f"## {stock.company_name}")
    st.caption(stock.id)

    changed = False
    c_price, c_stats = st.columns([5, 7])

    with c_price:
        st.markdown("**Market Price**")
        st.markdown(f"### {format_price(stock.current_price, currency)}")

        manual = st.number_input("Enter price manually", min_value=0.0, value=None,
                                 step=0.05, key=f"manual_price_{stock.id}")
        if st.button("SAVE", key=f"save_price_{stock.id}") and manual is not None:
            try:
                price_store.update_price(stock.id, manual)
                changed = True
            except PriceStoreError as e:
                st.error(str(e))

        exchange = calc.transactions[-1].exchange if calc.transactions else ""
        if price_sync is not None and st.button("Sync via Web", key=f"sync_{stock.id}"):
            try:
                with st.spinner("Fetching price..."):
                    price = price_sync.sync_price(stock.id, exchange)
            except PriceStoreError as e:
                st.error(f"Fetched a price but could not save it: {e}")
            else:
                if price > 0:
                    changed = True
                else:
                    st.error("Could not retrieve live price. Please try manual entry.")

    with c_stats:
        s1, s2 = st.columns(2)
        s1.metric("Total Team Cost", format_currency(calc.investment, currency))
        s2.metric("Current Value", format_currency(calc.current_value, currency))
        s3, s4 = st.columns(2)
        s3.metric("Holding Qty", f"{calc.quantity:g}")
        s4.metric("Net P&L", format_currency(calc.p_and_l, currency))
        st.caption(generate_stock_analysis(calc))

    st.markdown("#### Ownership")
    active_owner = calc.transactions[0].owner if calc.transactions else ""
    st.write(f"Active: {active_owner}")
    if owners:
        new_owner = st.selectbox("Reassign all transactions to", options=owners, index=None,
                                 key=f"reassign_{stock.id}")
        if new_owner and st.button(f"Reassign all {stock.id} to {new_owner}", key=f"confirm_reassign_{stock.id}"):
            try:
                store.bulk_reassign_owner(stock.id, new_owner)
                changed = True
            except LedgerStoreError as e:
                logging.error(f"Reassign failed: {e}")
                st.error(str(e))

    st.markdown("#### Transactions")
    df = transactions_to_frame(calc.transactions, currency)
    st.dataframe(df.drop(columns=['id']), hide_index=True, use_container_width=True)

    tx_ids = [str(t.id) for t in calc.transactions]
    selected = st.selectbox("Select transaction", options=tx_ids, index=None,
                            format_func=lambda i: _describe(calc, i), key=f"tx_select_{stock.id}")
    if selected:
        c_edit, c_delete = st.columns(2)
        if c_edit.button("Edit", key=f"edit_{selected}"):
            st.session_state.transaction_to_edit = next(t for t in calc.transactions if str(t.id) == selected)
            changed = True
        if c_delete.button("Delete", key=f"delete_{selected}"):
            try:
                store.delete_transaction(selected)
                changed = True
            except LedgerStoreError as e:
                logging.error(f"Delete failed: {e}")
                st.error(str(e))

    return changed


def _describe(calc: CalculatedStock, tx_id: str) -> str:
    for t in calc.transactions:
        if str(t.id) == tx_id:
            when = t.transaction_date.strftime("%d/%m/%Y") if t.transaction_date else "-"
            return f"{when} {t.action.value} {t.quantity:g} @ {t.transaction_price:g} ({t.owner})"
    return tx_id
