import streamlit as st
import pandas as pd
import plotly.graph_objects as go
from typing import Optional, Sequence

from py_ledger.domain import CalculatedStock, PortfolioSummary
from py_ledger.formatting import format_currency
from .data_loader import holdings_to_frame


def pnl_class(value: float) -> str:
    return "status-green" if value >= 0 else "status-red"


def render_summary_tiles(summary: PortfolioSummary, currency: str):
    """Portfolio Cost / Current Value / Cumulative P&L tiles."""
    c1, c2, c3 = st.columns(3)
    c1.metric("Portfolio Cost", format_currency(summary.total_investment, currency))
    c2.metric("Current Value", format_currency(summary.current_value, currency))
    with c3:
        st.markdown(f"""
            <div class="metric-container">
                <div style="margin-bottom: 0.5rem; color: #888;">Cumulative P&L</div>
                <div class="status-badge {pnl_class(summary.total_p_and_l)}">
                    {format_currency(summary.total_p_and_l, currency)}
                </div>
            </div>
        """, unsafe_allow_html=True)


def _style_pnl(df: pd.DataFrame):
    def color_row(row):
        color = '#16a34a' if row['PnL_Value'] >= 0 else '#dc2626'
        return ['color: %s' % color if col == 'Net P&L' else '' for col in row.index]

    def price_color(val):
        return 'color: #f59e0b; font-weight: bold' if val == "NOT SET" else ''

    return df.style.apply(color_row, axis=1).map(price_color, subset=['Current Price'])


def render_holdings_table(holdings: Sequence[CalculatedStock], currency: str) -> Optional[str]:
    """
    Renders the Team Assets table.

    Returns:
        Symbol of the holding selected for the details view, or None.
    """
    st.markdown("### Team Assets")

    if not holdings:
        st.info("No open holdings for the current filters.")
        return None

    df = holdings_to_frame(holdings, currency)
    st.dataframe(
        _style_pnl(df),
        hide_index=True,
        use_container_width=True,
        column_config={'PnL_Value': None}
    )

    symbols = [s.stock.id for s in holdings]
    return st.selectbox("Manage asset", options=symbols, index=None, placeholder="Select a symbol...",
                        key="selected_stock_id")


def render_pnl_chart(holdings: Sequence[CalculatedStock], currency: str):
    """Net P&L per holding as a bar chart."""
    if not holdings:
        return

    symbols = [s.stock.id for s in holdings]
    values = [s.p_and_l for s in holdings]
    colors = ['#00e676' if v >= 0 else '#ff1744' for v in values]

    fig = go.Figure(go.Bar(
        x=symbols,
        y=values,
        marker_color=colors,
        text=[format_currency(v, currency) for v in values],
        hovertemplate="%{x}: %{text}<extra></extra>"
    ))
    fig.update_layout(
        title="Net P&L by Holding",
        template="plotly_dark",
        height=320,
        margin=dict(l=10, r=10, t=40, b=10),
        showlegend=False
    )
    st.plotly_chart(fig, use_container_width=True)
