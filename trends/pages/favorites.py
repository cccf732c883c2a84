from __future__ import annotations

import streamlit as st

from trends.core.schemas import FavoriteQuery
from trends.pages.bars import prefill_form
from trends.utils.favorites import FavoritesStore
from trends.web_app.ui_helpers import favorite_label


def _edit(store: FavoritesStore, fav: FavoriteQuery) -> None:
    store.select_for_edit(fav)
    prefill_form(fav)
    st.session_state["nav"] = "Home"


def render(store: FavoritesStore) -> None:
    st.subheader("Favorites")

    items = store.favorites
    if not items:
        st.info("No favorites yet. Fill in the form on Home and press **Add to Favorites**.")
        return

    selection = store.current_selection()
    for i, fav in enumerate(items):
        col1, col2, col3 = st.columns([0.7, 0.15, 0.15])
        label = favorite_label(fav)
        col1.markdown(f"**{label}**" if fav is selection else label)
        col2.button("Edit", key=f"fav_edit_{i}", on_click=_edit, args=(store, fav))
        col3.button("Remove", key=f"fav_remove_{i}", on_click=store.remove_favorite, args=(i,))
