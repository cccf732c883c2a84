import streamlit as st
import uuid
from typing import List
from trends.core.config import SETTINGS
from trends.core.schemas import FavoriteQuery
from trends.utils.favorites import FavoritesStore
from trends.utils.logging import get_logger, set_log_context, setup_logging
from trends.utils.market_data import RelayClient
from trends.utils.storage import FileStorage
from trends.pages import bars, favorites

# Setup logging
setup_logging(SETTINGS.log_level)
logger = get_logger("web_app")

st.set_page_config(page_title="Trends", layout="wide")


def _on_favorites_changed(items: List[FavoriteQuery]) -> None:
    logger.info(f"favorites_saved count={len(items)}")
    st.toast(f"Favorites saved ({len(items)})")


# Session initialization
def _init_session() -> None:
    st.session_state.setdefault("session_id", str(uuid.uuid4()))
    st.session_state.setdefault("nav", "Home")
    if "favorites_store" not in st.session_state:
        store = FavoritesStore(FileStorage(SETTINGS.storage_dir), key=SETTINGS.favorites_key)
        store.subscribe(_on_favorites_changed)
        st.session_state["favorites_store"] = store
    if "relay_client" not in st.session_state:
        st.session_state["relay_client"] = RelayClient()

_init_session()
set_log_context(session_id=st.session_state["session_id"], component="web_app")

store: FavoritesStore = st.session_state["favorites_store"]

# Sidebar navigation
with st.sidebar:
    st.subheader("Navigate")
    page = st.radio("Page", ["Home", "Favorites"], key="nav", label_visibility="collapsed")

    st.divider()
    st.caption(f"Favorites: {len(store)}")
    st.caption(f"Relay: {SETTINGS.relay_base_url}")
    st.caption(f"Session: {st.session_state['session_id']}")

# Main UI
st.title("Trends")

if page == "Favorites":
    favorites.render(store)
else:
    bars.render(store, st.session_state["relay_client"])
