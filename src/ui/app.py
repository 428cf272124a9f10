"""
TranscriptChat Streamlit UI — main entry point.

Run with: ``streamlit run src/ui/app.py``
"""

# ---------------------------------------------------------------------------
# Ensure project root is on sys.path so ``from src.xxx`` imports work.
# Streamlit replaces sys.path[0] with the script directory (src/ui/),
# which removes the project root needed for absolute ``src.*`` imports.
# ---------------------------------------------------------------------------
import sys  # noqa: E402
from pathlib import Path  # noqa: E402

_project_root = str(Path(__file__).resolve().parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import streamlit as st  # noqa: E402

from src.core.config import get_settings  # noqa: E402
from src.ui.api_client import get_api_client  # noqa: E402
from src.ui.components.chat_panel import render_chat  # noqa: E402
from src.ui.components.history_panel import SEARCH_KEY, render_history  # noqa: E402
from src.ui.components.transcript_view import render_transcript  # noqa: E402
from src.ui.components.uploader import render_status, render_uploader  # noqa: E402
from src.ui.history import HistoryStore, JsonFileHistoryRepository  # noqa: E402
from src.ui.state import AppController, UIEvent  # noqa: E402

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="TranscriptChat",
    page_icon="\U0001f399️",
    layout="wide",
)

_settings = get_settings()

# ---------------------------------------------------------------------------
# Session state defaults
# ---------------------------------------------------------------------------
if "api_base_url" not in st.session_state:
    st.session_state.api_base_url = _settings.api_base_url

if "controller" not in st.session_state:
    _history = HistoryStore(
        JsonFileHistoryRepository(_settings.history_path),
        limit=_settings.history_limit,
    )
    st.session_state.controller = AppController(
        client=get_api_client(st.session_state.api_base_url),
        history=_history,
        max_upload_bytes=_settings.max_upload_bytes,
    )

controller: AppController = st.session_state.controller

# ---------------------------------------------------------------------------
# Load custom CSS
# ---------------------------------------------------------------------------
_css_path = Path(__file__).parent / "assets" / "styles.css"
if _css_path.exists():
    st.html(f"<style>{_css_path.read_text()}</style>")

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
with st.sidebar:
    st.title("\U0001f399️ TranscriptChat")
    st.caption("Upload audio, read the transcript, ask questions about it")
    st.divider()
    st.session_state.api_base_url = st.text_input(
        "Backend API URL",
        value=st.session_state.api_base_url,
        help="URL of the TranscriptChat FastAPI backend server (default: http://localhost:3000)",
    )
    controller.client = get_api_client(st.session_state.api_base_url)

    # Connection status indicator
    _conn_ok, _conn_msg = controller.client.check_connection()
    if _conn_ok:
        st.success(f"Backend: {_conn_msg}")
    else:
        st.error(f"Backend: {_conn_msg}")

    st.divider()
    st.caption(f"History: {len(controller.history)} / {_settings.history_limit} files")
    if st.button("Clear history", use_container_width=True, disabled=len(controller.history) == 0):
        controller.dispatch(UIEvent.clear_history)
        st.rerun()

# ---------------------------------------------------------------------------
# Main layout
# ---------------------------------------------------------------------------
# The search box renders after the transcript, so apply its value up front.
controller.dispatch(UIEvent.change_search, term=st.session_state.get(SEARCH_KEY, ""))
render_status(controller)

left, right = st.columns([3, 1])
with left:
    st.header("Upload audio")
    render_uploader(controller)
    st.header("Transcript")
    render_transcript(controller)
with right:
    render_history(controller)

st.divider()
render_chat(controller)
