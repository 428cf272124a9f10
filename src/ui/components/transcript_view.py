"""
Transcript panel — shows the active transcript with search highlighting.
"""

import streamlit as st

from src.ui.components.uploader import reset_uploader
from src.ui.search import count_matches, highlight_html
from src.ui.state import AppController, UIEvent

_BODY_STYLE = "white-space: pre-wrap; line-height: 1.6;"


def render_transcript(controller: AppController) -> None:
    """Render the current transcript, or a placeholder when there is none."""
    current = controller.state.current
    term = controller.state.search_term

    with st.container(border=True):
        if current is None:
            st.caption("Upload an audio file to see the transcription here...")
            return

        title = f"**{current.filename}**"
        if current.is_mock:
            title += "  :orange-background[DEMO MODE]"
        st.markdown(title)

        if term:
            hits = count_matches(current.text, term)
            st.caption(f"{hits} match{'es' if hits != 1 else ''} for “{term}”")
        st.html(f'<div style="{_BODY_STYLE}">{highlight_html(current.text, term)}</div>')

    with st.expander("Copy transcript"):
        st.code(current.text, language=None, wrap_lines=True)

    if st.button("Clear transcript", use_container_width=True):
        controller.dispatch(UIEvent.clear_transcript)
        reset_uploader()
        st.rerun()
