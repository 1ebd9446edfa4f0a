import streamlit as st
from typing import Sequence

from py_ledger.domain import Transaction
from .data_loader import transactions_to_frame


def owner_tag_style(owner: str, owners: Sequence[str]) -> str:
    """ Stable tag color per owner, cycling through a small palette. """
    palette = ['#2563eb', '#9333ea', '#0d9488', '#ea580c', '#db2777', '#4b5563']
    index = list(owners).index(owner) if owner in owners else len(owners)
    return f'color: {palette[index % len(palette)]}; font-weight: bold'


def render_transaction_ledger(transactions: Sequence[Transaction], owners: Sequence[str], currency: str):
    """
    Collective Transaction Ledger: every recorded transaction, newest first,
    tagged with its owner. Ignores the sidebar filters.
    """
    st.markdown("### Collective Transaction Ledger")

    if not transactions:
        st.info("No transactions recorded yet.")
        return

    st.caption(f"{len(transactions)} transactions across {len({t.stock_id for t in transactions})} assets")
    df = transactions_to_frame(transactions, currency).drop(columns=['id'])
    styled = df.style.map(lambda o: owner_tag_style(o, owners), subset=['Owner'])
    st.dataframe(styled, hide_index=True, use_container_width=True)
