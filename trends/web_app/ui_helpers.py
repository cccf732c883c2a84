from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from trends.core.schemas import TIMEFRAME_LABELS, Bar, FavoriteQuery

ChartKind = Literal["line", "bar"]

OHLC_FIELDS = ["open", "high", "low", "close"]
_FIELD_LABELS = {
    "open": "Open",
    "high": "High",
    "low": "Low",
    "close": "Close",
    "volume": "Volume",
    "trade_count": "Trades Count",
}


def bars_to_frame(bars: List[Bar]) -> pd.DataFrame:
    cols = ["symbol", "timestamp", *OHLC_FIELDS, "volume", "trade_count"]
    if not bars:
        return pd.DataFrame(columns=cols)
    df = pd.DataFrame([b.model_dump() for b in bars], columns=cols)
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, errors="coerce")
    return df.dropna(subset=["timestamp"])


def build_chart(df: pd.DataFrame, fields: List[str], kind: ChartKind = "line", title: str = "") -> go.Figure:
    """One figure for one or more numeric columns, split by symbol when there are several."""
    long = df.melt(id_vars=["timestamp", "symbol"], value_vars=fields, var_name="field", value_name="value")
    long["field"] = long["field"].map(lambda f: _FIELD_LABELS.get(f, f))
    multi_symbol = df["symbol"].nunique() > 1
    color = "field" if len(fields) > 1 else ("symbol" if multi_symbol else None)

    if kind == "bar":
        fig = px.bar(
            long,
            x="timestamp",
            y="value",
            color=color,
            pattern_shape="symbol" if multi_symbol and len(fields) > 1 else None,
            barmode="group",
            title=title,
        )
    else:
        fig = px.line(
            long,
            x="timestamp",
            y="value",
            color=color,
            line_dash="symbol" if multi_symbol and len(fields) > 1 else None,
            title=title,
        )
    fig.update_layout(xaxis_title=None, yaxis_title=None, legend_title_text=None)
    return fig


def favorite_label(fav: FavoriteQuery) -> str:
    syms = " vs ".join(fav.symbols)
    tf = TIMEFRAME_LABELS.get(fav.timeframe, fav.timeframe)
    return f"{syms} · {fav.start_date.isoformat()} → {fav.end_date.isoformat()} · {tf}"


def form_to_favorite(
    symbol1: str, symbol2: Optional[str], start: date, end: date, timeframe: str
) -> Optional[FavoriteQuery]:
    """Form values -> FavoriteQuery, or None when the primary symbol is blank."""
    s1 = (symbol1 or "").strip().upper()
    if not s1:
        return None
    s2 = (symbol2 or "").strip().upper() or None
    return FavoriteQuery(
        primary_symbol=s1,
        secondary_symbol=s2,
        start_date=start,
        end_date=end,
        timeframe=timeframe,
    )


def _badge(text: str, kind: str = "info") -> None:
    """Small colored badge using HTML."""
    color = {
        "ok": "#0f9d58",
        "warn": "#f4b400",
        "bad": "#db4437",
        "info": "#4285f4",
    }.get(kind, "#4285f4")
    st.markdown(
        f"""
        <span style="display:inline-block;padding:2px 10px;border-radius:999px;font-size:12px;background:{color};color:white;">
          {text}
        </span>
        """,
        unsafe_allow_html=True,
    )
