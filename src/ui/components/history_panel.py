"""
History panel — searchable list of past transcriptions.
"""

import streamlit as st

from src.ui.history import ListingStatus
from src.ui.state import AppController, UIEvent

SEARCH_KEY = "history_search"


def _clear_search() -> None:
    st.session_state[SEARCH_KEY] = ""


def render_history(controller: AppController) -> None:
    """Render the search box and the filtered history list.

    The filter is re-applied on every render, so new entries respect an
    active search.
    """
    st.subheader("Recent files")

    col1, col2 = st.columns([4, 1])
    with col1:
        term = st.text_input(
            "Search files and transcripts",
            key=SEARCH_KEY,
            placeholder="Search...",
            label_visibility="collapsed",
        )
    with col2:
        st.button("✕", key="clear_search", help="Clear search", on_click=_clear_search)

    controller.dispatch(UIEvent.change_search, term=term)
    listing = controller.history.list(controller.state.search_term)

    if listing.status == ListingStatus.empty:
        st.caption("No files uploaded yet")
        return
    if listing.status == ListingStatus.no_matches:
        st.caption("No matches found")
        return

    selected_id = controller.state.selected_history_id
    for entry in listing.entries:
        label = entry.name
        if listing.is_match(entry):
            label = f"🔎 {label}"
        if st.button(
            label,
            key=f"history_{entry.id}",
            help=entry.timestamp,
            type="primary" if entry.id == selected_id else "secondary",
            use_container_width=True,
        ):
            controller.dispatch(UIEvent.select_history, entry_id=entry.id)
            st.rerun()
