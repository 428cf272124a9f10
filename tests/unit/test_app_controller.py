"""Unit tests for AppController state transitions and event dispatch."""

from unittest.mock import MagicMock

import pytest

from src.core.models import Sender
from src.ui.api_client import APIError
from src.ui.state import AppController, UIEvent, UploadPhase

MAX_BYTES = 50 * 1024 * 1024


@pytest.fixture
def api():
    """Mock backend client with successful default responses."""
    client = MagicMock()
    client.transcribe.return_value = {
        "transcription": "Hello world",
        "filename": "meeting.mp3",
        "mock": False,
    }
    client.chat.return_value = {"response": "They said hello.", "mock": False}
    return client


@pytest.fixture
def controller(api, history):
    return AppController(client=api, history=history, max_upload_bytes=MAX_BYTES)


def _upload(controller, name="meeting.mp3", data=b"x" * 2048, mime="audio/mpeg"):
    accepted = controller.dispatch(UIEvent.select_file, name=name, data=data, mime_type=mime)
    if accepted:
        controller.dispatch(UIEvent.transcribe)
    return accepted


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


class TestDispatch:
    def test_initial_state(self, controller):
        assert controller.state.phase == UploadPhase.empty
        assert controller.state.current is None
        assert controller.state.chat_enabled is False

    def test_custom_handler_registration(self, controller):
        calls = []
        controller.register(UIEvent.change_search, lambda term: calls.append(term))

        controller.dispatch(UIEvent.change_search, term="abc")

        assert calls == ["abc"]

    def test_unregistered_event_raises(self, controller):
        controller._handlers.pop(UIEvent.clear_history)
        with pytest.raises(KeyError):
            controller.dispatch(UIEvent.clear_history)


# ---------------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------------


class TestUpload:
    def test_rejects_wrong_type_before_network(self, controller, api):
        accepted = _upload(controller, name="notes.txt", mime="text/plain")

        assert accepted is False
        api.transcribe.assert_not_called()
        assert controller.state.status.kind == "error"
        assert controller.state.phase == UploadPhase.empty

    def test_rejects_oversize_before_network(self, controller, api):
        accepted = controller.dispatch(
            UIEvent.select_file,
            name="big.wav",
            data=b"\x00" * (MAX_BYTES + 1),
            mime_type="audio/wav",
        )

        assert accepted is False
        api.transcribe.assert_not_called()
        assert "50MB" in controller.state.status.message

    def test_select_file_loads_player(self, controller):
        controller.dispatch(
            UIEvent.select_file, name="meeting.mp3", data=b"abc", mime_type="audio/mpeg"
        )

        assert controller.state.phase == UploadPhase.file_selected
        assert controller.state.audio.name == "meeting.mp3"
        assert controller.state.audio.size == 3

    def test_successful_transcription(self, controller, api, history):
        _upload(controller)

        api.transcribe.assert_called_once_with("meeting.mp3", b"x" * 2048, "audio/mpeg")
        assert controller.state.phase == UploadPhase.transcript_ready
        assert controller.state.current.text == "Hello world"
        assert controller.state.current.is_mock is False
        assert [e.name for e in history.entries] == ["meeting.mp3"]
        assert controller.state.chat_enabled is True
        assert controller.state.status.message == "Successfully transcribed: meeting.mp3"

    def test_server_error_keeps_file_for_retry(self, controller, api, history):
        api.transcribe.side_effect = APIError("Request timeout.", category="http", status_code=408)

        _upload(controller)

        assert controller.state.phase == UploadPhase.upload_failed
        assert controller.state.audio is not None
        assert controller.state.status.message == "Error: Request timeout."
        assert len(history) == 0
        assert controller.state.chat_enabled is False

    def test_network_error_message(self, controller, api):
        api.transcribe.side_effect = APIError("Backend down", category="connection")

        _upload(controller)

        assert controller.state.status.message == "Network error: Backend down"

    def test_retry_after_failure(self, controller, api):
        api.transcribe.side_effect = [
            APIError("boom", category="http"),
            {"transcription": "Hello world", "filename": "meeting.mp3", "mock": False},
        ]
        _upload(controller)

        controller.dispatch(UIEvent.transcribe)

        assert controller.state.phase == UploadPhase.transcript_ready

    def test_transcribe_without_file_is_noop(self, controller, api):
        assert controller.dispatch(UIEvent.transcribe) is None
        api.transcribe.assert_not_called()

    def test_clear_resets_but_keeps_chat_log(self, controller):
        _upload(controller)
        controller.dispatch(UIEvent.send_message, message="What was discussed?")

        controller.dispatch(UIEvent.clear_transcript)

        assert controller.state.phase == UploadPhase.empty
        assert controller.state.current is None
        assert controller.state.audio is None
        assert controller.state.chat_enabled is False
        assert len(controller.state.messages) == 2


# ---------------------------------------------------------------------------
# History selection
# ---------------------------------------------------------------------------


class TestHistorySelection:
    def test_chat_enabled_at_startup_when_history_exists(self, api, history):
        history.add("old.mp3", "old transcript")

        controller = AppController(client=api, history=history, max_upload_bytes=MAX_BYTES)

        assert controller.state.chat_enabled is True

    def test_select_history_sets_current(self, controller, history):
        entry = history.add("old.mp3", "old transcript")

        controller.dispatch(UIEvent.select_history, entry_id=entry.id)

        assert controller.state.current.text == "old transcript"
        assert controller.state.current.filename == "old.mp3"
        assert controller.state.selected_history_id == entry.id
        assert controller.state.status.message == "Loaded: old.mp3"
        assert len(history) == 1

    def test_select_history_reenables_chat_after_clear(self, controller, history):
        entry = history.add("old.mp3", "old transcript")
        controller.dispatch(UIEvent.clear_transcript)
        assert controller.can_chat is False

        controller.dispatch(UIEvent.select_history, entry_id=entry.id)

        assert controller.can_chat is True

    def test_select_history_keeps_conversation(self, controller, history):
        _upload(controller)
        controller.dispatch(UIEvent.send_message, message="hi")
        other = history.add("other.wav", "other text")

        controller.dispatch(UIEvent.select_history, entry_id=other.id)

        assert len(controller.state.messages) == 2

    def test_select_unknown_entry(self, controller):
        assert controller.dispatch(UIEvent.select_history, entry_id=123) is None
        assert controller.state.current is None

    def test_clear_history_disables_chat_without_current(self, controller, history):
        history.add("old.mp3", "t")
        controller.state.chat_enabled = True

        controller.dispatch(UIEvent.clear_history)

        assert len(history) == 0
        assert controller.can_chat is False


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


class TestChat:
    def test_send_rejected_without_transcript(self, controller, api):
        result = controller.dispatch(UIEvent.send_message, message="hello?")

        assert result is None
        api.chat.assert_not_called()
        assert controller.state.messages == []

    def test_blank_message_rejected(self, controller, api):
        _upload(controller)

        assert controller.dispatch(UIEvent.send_message, message="   ") is None
        api.chat.assert_not_called()

    def test_send_appends_user_then_reply(self, controller, api):
        _upload(controller)

        reply = controller.dispatch(UIEvent.send_message, message="  What was discussed?  ")

        assert reply.content == "They said hello."
        assert [(m.sender, m.content) for m in controller.state.messages] == [
            (Sender.user, "What was discussed?"),
            (Sender.assistant, "They said hello."),
        ]
        assert controller.state.chat_busy is False

    def test_context_is_all_history(self, controller, api, history):
        history.add("a.mp3", "alpha")
        _upload(controller)

        controller.dispatch(UIEvent.send_message, message="q")

        api.chat.assert_called_once_with(
            "q", "File: meeting.mp3\nHello world\n\nFile: a.mp3\nalpha"
        )

    def test_context_falls_back_to_current_transcript(self, controller, api, history):
        _upload(controller)
        history.clear()

        controller.dispatch(UIEvent.send_message, message="q")

        api.chat.assert_called_once_with("q", "Hello world")

    def test_server_error_appended_as_assistant(self, controller, api):
        _upload(controller)
        api.chat.side_effect = APIError("Chat request timeout. Please try again.", category="http")

        reply = controller.dispatch(UIEvent.send_message, message="q")

        assert reply.sender == Sender.assistant
        assert reply.content == "Sorry, there was an error: Chat request timeout. Please try again."
        assert controller.state.chat_busy is False

    def test_network_error_appended_as_assistant(self, controller, api):
        _upload(controller)
        api.chat.side_effect = APIError("Backend down", category="connection")

        reply = controller.dispatch(UIEvent.send_message, message="q")

        assert reply.content == "Network error. Please try again."
        assert len(controller.state.messages) == 2

    def test_send_blocked_while_busy(self, controller, api):
        _upload(controller)
        controller.state.chat_busy = True

        assert controller.dispatch(UIEvent.send_message, message="q") is None
        api.chat.assert_not_called()


class TestSearch:
    def test_change_search_strips(self, controller):
        controller.dispatch(UIEvent.change_search, term="  budget ")
        assert controller.state.search_term == "budget"
