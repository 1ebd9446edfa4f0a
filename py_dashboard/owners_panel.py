import logging
import streamlit as st
from typing import List

from py_csv_parser.csv_parser import SAMPLE_CSV, CsvFormatError, export_transactions_csv, parse_transactions_csv
from py_ledger.domain import Transaction
from py_ledger.store import LedgerStore, LedgerStoreError


def render_owners_panel(store: LedgerStore, owners: List[str]) -> bool:
    """Manage Owners: add, rename, delete. Returns True after a successful change."""
    st.markdown("### Manage Owners")
    changed = False

    with st.form("add_owner", clear_on_submit=True):
        new_owner = st.text_input("Add New Owner", placeholder="Enter owner name")
        if st.form_submit_button("Add"):
            try:
                store.add_owner(new_owner)
                changed = True
            except LedgerStoreError as e:
                st.error(str(e))

    for owner in owners:
        c_name, c_rename, c_delete = st.columns([3, 3, 1])
        c_name.write(owner)
        renamed = c_rename.text_input("Rename", value=owner, key=f"rename_{owner}", label_visibility="collapsed")
        if renamed != owner:
            try:
                store.rename_owner(owner, renamed)
                changed = True
            except LedgerStoreError as e:
                st.error(str(e))
        if c_delete.button("Delete", key=f"delete_owner_{owner}"):
            try:
                store.delete_owner(owner)
                changed = True
            except LedgerStoreError as e:
                logging.warning(f"Owner delete refused: {e}")
                st.error(str(e))

    return changed


def render_csv_panel(store: LedgerStore, transactions: List[Transaction]) -> bool:
    """CSV upload (replaces all data) and download. Returns True after an import."""
    st.markdown("### Import / Export")
    st.caption("The uploaded CSV file will replace all existing transaction data. "
               "Column headers must exactly match the sample file.")

    c_sample, c_export = st.columns(2)
    c_sample.download_button("Download Sample File", data=SAMPLE_CSV,
                             file_name="investment_tracker_sample_file.csv", mime="text/csv")
    c_export.download_button("Export Transactions", data=export_transactions_csv(transactions),
                             file_name="transactions.csv", mime="text/csv")

    uploaded = st.file_uploader("Upload CSV File", type=["csv"])
    if uploaded is None or not st.button("Upload File"):
        return False

    try:
        imported = parse_transactions_csv(uploaded.getvalue().decode("utf-8-sig"))
        store.replace_all(imported)
    except (CsvFormatError, UnicodeDecodeError) as e:
        st.error(f"Please select a valid CSV file. {e}")
        return False
    except LedgerStoreError as e:
        logging.error(f"Import failed: {e}")
        st.error(str(e))
        return False

    st.success(f"Imported {len(imported)} transactions.")
    return True
