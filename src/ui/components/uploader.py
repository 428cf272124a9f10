"""
Uploader component — file selection, playback and transcription.

States: empty -> file_selected -> uploading -> transcript_ready / upload_failed
"""

import streamlit as st

from src.core.utils import format_size_mb
from src.ui.state import AppController, UIEvent, UploadPhase

_NONCE_KEY = "_uploader_nonce"
_LAST_FILE_KEY = "_last_upload_id"


def reset_uploader() -> None:
    """Give the file widget a fresh key so it drops the current file."""
    st.session_state[_NONCE_KEY] = st.session_state.get(_NONCE_KEY, 0) + 1
    st.session_state.pop(_LAST_FILE_KEY, None)


def render_status(controller: AppController) -> None:
    """Show the status banner; success banners are shown once as a toast."""
    banner = controller.state.status
    if banner is None:
        return
    if banner.kind == "success":
        st.toast(banner.message)
        controller.state.status = None
    elif banner.kind == "error":
        st.error(banner.message)
    else:
        st.info(banner.message)


def _render_player(controller: AppController) -> None:
    audio = controller.state.audio
    with st.container(border=True):
        if audio is None:
            st.markdown("**No file loaded**")
            st.caption("Upload an audio file to see details here")
            return
        st.markdown(f"**{audio.name}**")
        st.audio(audio.data, format=audio.mime_type or "audio/wav")
        col1, col2 = st.columns(2)
        with col1:
            st.caption(f"Size: {format_size_mb(audio.size)}")
        with col2:
            st.caption(f"Type: {audio.mime_type or 'Unknown'}")


def render_uploader(controller: AppController) -> None:
    """Render the drop zone and player; transcribe newly selected files."""
    nonce = st.session_state.get(_NONCE_KEY, 0)
    uploaded = st.file_uploader(
        "Drop a .wav or .mp3 file here, or click to browse",
        type=["wav", "mp3"],
        key=f"audio_upload_{nonce}",
    )

    is_new = uploaded is not None and uploaded.file_id != st.session_state.get(_LAST_FILE_KEY)
    if is_new:
        st.session_state[_LAST_FILE_KEY] = uploaded.file_id
        accepted = controller.dispatch(
            UIEvent.select_file,
            name=uploaded.name,
            data=uploaded.getvalue(),
            mime_type=uploaded.type,
        )
        if not accepted:
            # The banner renders above this widget, so show it on a fresh run.
            st.rerun()
    else:
        accepted = False

    _render_player(controller)

    if accepted:
        with st.spinner("Transcribing audio..."):
            controller.dispatch(UIEvent.transcribe)
        st.rerun()

    if controller.state.phase == UploadPhase.upload_failed and controller.state.audio is not None:
        if st.button("Retry transcription", use_container_width=True):
            with st.spinner("Transcribing audio..."):
                controller.dispatch(UIEvent.transcribe)
            st.rerun()
