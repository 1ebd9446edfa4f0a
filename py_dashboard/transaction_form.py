import logging
import streamlit as st
from datetime import date
from typing import List, Optional

from py_ledger.domain import Transaction, TransactionAction
from py_ledger.store import LedgerStore, LedgerStoreError
from py_ledger.validation import TransactionValidationError


def render_transaction_form(store: LedgerStore, owners: List[str],
                            transaction_to_edit: Optional[Transaction] = None) -> bool:
    """
    Add / Edit transaction form.

    Returns:
        True when the transaction was saved.
    """
    t = transaction_to_edit
    is_edit = t is not None
    title = "Edit Transaction" if is_edit else "Add New Transaction"
    key = f"tx_form_{t.id}" if is_edit else "tx_form_new"
    actions = [a.value for a in TransactionAction]

    with st.form(key, clear_on_submit=not is_edit):
        st.markdown(f"### {title}")

        c1, c2 = st.columns(2)
        stock_id = c1.text_input("Stock Symbol*", value=t.stock_id if is_edit else "", placeholder="e.g., AAPL")
        company_name = c2.text_input("Company Name*", value=t.company_name if is_edit else "", placeholder="e.g., Apple Inc.")
        isin_code = st.text_input("ISIN Code*", value=t.isin_code if is_edit else "", placeholder="e.g., US0378331005")

        c3, c4 = st.columns(2)
        owner_index = owners.index(t.owner) if is_edit and t.owner in owners else 0
        owner = c3.selectbox("Owner*", options=owners, index=owner_index if owners else None)
        action = c4.selectbox("Action*", options=actions, index=actions.index(t.action.value) if is_edit else 0)

        c5, c6 = st.columns(2)
        quantity = c5.number_input("Quantity*", min_value=0.0, value=t.quantity if is_edit else None, step=1.0, format="%f")
        price = c6.number_input("Transaction Price/Share*", min_value=0.0,
                                value=t.transaction_price if is_edit else None, format="%f")

        c7, c8, c9 = st.columns(3)
        brokerage = c7.number_input("Brokerage", min_value=0.0, value=t.brokerage if is_edit else 0.0, format="%f")
        stamp_duty = c8.number_input("Stamp Duty", min_value=0.0, value=t.stamp_duty if is_edit else 0.0, format="%f")
        charges = c9.number_input("Transaction Charges", min_value=0.0,
                                  value=t.transaction_charges if is_edit else 0.0, format="%f")

        c10, c11, c12 = st.columns(3)
        broker = c10.text_input("Broker*", value=t.broker if is_edit else "")
        exchange = c11.text_input("Exchange*", value=t.exchange if is_edit else "", placeholder="e.g., NASDAQ")
        default_date = t.transaction_date.date() if is_edit and t.transaction_date else date.today()
        tx_date = c12.date_input("Date*", value=default_date, max_value=date.today())

        submitted = st.form_submit_button("Save Changes" if is_edit else "Save Transaction")

    if not submitted:
        return False

    data = {
        "stock_id": stock_id,
        "company_name": company_name,
        "isin_code": isin_code,
        "owner": owner,
        "action": action,
        "quantity": quantity,
        "transaction_price": price,
        "brokerage": brokerage,
        "stamp_duty": stamp_duty,
        "transaction_charges": charges,
        "broker": broker,
        "exchange": exchange,
        "transaction_date": tx_date,
    }
    try:
        store.save_transaction(data, t.id if is_edit else None)
    except TransactionValidationError as e:
        st.error(str(e))
        return False
    except LedgerStoreError as e:
        logging.error(f"Sync Error: {e}")
        st.error(f"Sync Error: {e}")
        return False
    return True
