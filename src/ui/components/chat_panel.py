"""
Chat panel — conversation about the transcribed audio.
"""

import streamlit as st

from src.ui.state import AppController, UIEvent

_AVATARS = {"user": "🧑", "assistant": "🤖"}


def render_chat(controller: AppController) -> None:
    """Render the conversation and the input box.

    The input is disabled until a transcript exists (current or history).
    """
    st.subheader("Ask about your audio")

    for message in controller.state.messages:
        with st.chat_message(message.sender.value, avatar=_AVATARS[message.sender.value]):
            st.markdown(message.content)

    enabled = controller.can_chat
    placeholder = (
        "Ask questions about your transcribed audio..."
        if enabled
        else "Upload and transcribe audio first..."
    )
    prompt = st.chat_input(placeholder, disabled=not enabled)

    if prompt:
        with st.chat_message("user", avatar=_AVATARS["user"]):
            st.markdown(prompt)
        with st.spinner("Thinking..."):
            controller.dispatch(UIEvent.send_message, message=prompt)
        st.rerun()
