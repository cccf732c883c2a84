from __future__ import annotations

from datetime import date
from typing import List

import streamlit as st

from trends.core.schemas import TIMEFRAME_LABELS, Bar, FavoriteQuery, SymbolInfo
from trends.utils.favorites import FavoritesStore
from trends.utils.logging import get_logger
from trends.utils.market_data import RelayClient, RelayClientError
from trends.web_app.ui_helpers import OHLC_FIELDS, _badge, bars_to_frame, build_chart, form_to_favorite

logger = get_logger("pages.bars")

_CHART_TYPES = {"line": "Line Chart", "bar": "Bar Chart"}


def prefill_form(fav: FavoriteQuery) -> None:
    """Copies a favorite into the form widgets. Must run before the widgets render (e.g. in a callback)."""
    st.session_state["form_symbol1"] = fav.primary_symbol
    st.session_state["form_symbol2"] = fav.secondary_symbol or ""
    st.session_state["form_start"] = fav.start_date
    st.session_state["form_end"] = fav.end_date
    st.session_state["form_timeframe"] = fav.timeframe


def _init_form() -> None:
    today = date.today()
    st.session_state.setdefault("form_symbol1", "")
    st.session_state.setdefault("form_symbol2", "")
    st.session_state.setdefault("form_start", today)
    st.session_state.setdefault("form_end", today)
    st.session_state.setdefault("form_timeframe", "1min")
    st.session_state.setdefault("bars", [])
    st.session_state.setdefault("bars_error", "")


def _load_symbols(client: RelayClient) -> List[SymbolInfo]:
    # once per session
    if "symbols" not in st.session_state:
        try:
            st.session_state["symbols"] = client.fetch_symbols()
        except RelayClientError as e:
            logger.warning(f"symbols_unavailable err={e.message}")
            st.session_state["symbols"] = []
            st.session_state["bars_error"] = "Failed to fetch stock symbols"
    return st.session_state["symbols"]


def _pick_symbol() -> None:
    picked = st.session_state.get("symbol_picker")
    if picked:
        st.session_state["form_symbol1"] = picked


def _fetch(client: RelayClient, query: FavoriteQuery) -> None:
    st.session_state["bars_error"] = ""
    try:
        with st.spinner("Loading..."):
            st.session_state["bars"] = client.fetch_favorite_bars(query)
    except RelayClientError as e:
        st.session_state["bars"] = []
        st.session_state["bars_error"] = e.message


def _render_charts(bars: List[Bar]) -> None:
    df = bars_to_frame(bars)
    if df.empty:
        return

    sections = [
        ("OHLC Data", OHLC_FIELDS, "line", "chart_ohlc"),
        ("Volume Data", ["volume"], "bar", "chart_volume"),
        ("Trades Count Data", ["trade_count"], "bar", "chart_trades"),
    ]
    for title, fields, default_kind, key in sections:
        st.markdown(f"#### {title}")
        st.session_state.setdefault(key, default_kind)
        kind = st.selectbox("Chart Type", list(_CHART_TYPES), format_func=_CHART_TYPES.get, key=key)
        st.plotly_chart(build_chart(df, fields, kind=kind), use_container_width=True)


def render(store: FavoritesStore, client: RelayClient) -> None:
    st.subheader("Bars Data")
    _init_form()
    symbols = _load_symbols(client)

    selection = store.current_selection()
    if selection is not None:
        _badge("Editing favorite", "warn")
        st.button("Cancel edit", on_click=store.select_for_edit, args=(None,))

    if symbols:
        st.selectbox(
            "Symbol lookup",
            [""] + [s.ticker for s in symbols],
            format_func=lambda t: next((f"{s.ticker} ({s.name})" for s in symbols if s.ticker == t), t),
            key="symbol_picker",
            on_change=_pick_symbol,
        )

    with st.form("bars_form"):
        symbol1 = st.text_input("Stock Symbol 1", key="form_symbol1", placeholder="e.g. AAPL")
        symbol2 = st.text_input("Stock Symbol 2 (optional)", key="form_symbol2", placeholder="e.g. TSLA")
        start = st.date_input("Start Date", key="form_start")
        end = st.date_input("End Date", key="form_end")
        timeframe = st.selectbox(
            "Timeframe", list(TIMEFRAME_LABELS), format_func=TIMEFRAME_LABELS.get, key="form_timeframe"
        )
        c1, c2 = st.columns(2)
        submitted = c1.form_submit_button("Update Favorite" if selection is not None else "Fetch Bars Data", type="primary")
        add = c2.form_submit_button("Add to Favorites")

    if submitted or add:
        query = form_to_favorite(symbol1, symbol2, start, end, timeframe)
        if query is None:
            st.session_state["bars_error"] = "Enter a stock symbol."
        elif add:
            store.add_favorite(query)
        elif selection is not None:
            store.update_favorite(store.index_of(selection), query)
            store.select_for_edit(None)
            st.rerun()
        else:
            _fetch(client, query)

    sym = (symbol1 or "").strip().upper()
    if sym and store.is_favorite(sym):
        _badge(f"★ {sym} is in favorites", "ok")

    if st.session_state["bars_error"]:
        st.error(st.session_state["bars_error"])

    _render_charts(st.session_state["bars"])
