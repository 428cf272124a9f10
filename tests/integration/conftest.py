"""Integration test fixtures for TranscriptChat.

Wires the real providers (``AzureWhisperSTT``, ``AzureChatLLM``) to fake
upstream services through ``httpx.MockTransport`` and exposes the app to the
Streamlit-side ``APIClient`` through a synchronous transport that runs each
request on ``httpx.ASGITransport``.
"""

import asyncio
import json

import httpx
import pytest

from src.api.app import create_app
from src.api.routes.chat import get_chat_relay
from src.api.routes.transcribe import get_transcription_relay
from src.core.config import Settings
from src.services.llm.azure import AzureChatLLM
from src.services.relay import ChatRelay, TranscriptionRelay
from src.services.transcription.azure import AzureWhisperSTT
from src.ui.api_client import APIClient


class FakeUpstream:
    """Records upstream requests and answers with configurable responses."""

    def __init__(self) -> None:
        self.stt_requests: list[httpx.Request] = []
        self.chat_payloads: list[dict] = []
        self.stt_response = httpx.Response(200, text="Hello world")
        self.chat_reply = "The speaker greeted the world."
        self.stt_timeout = False

    def stt_handler(self, request: httpx.Request) -> httpx.Response:
        self.stt_requests.append(request)
        if self.stt_timeout:
            raise httpx.ReadTimeout("upstream exceeded 30s", request=request)
        return self.stt_response

    def chat_handler(self, request: httpx.Request) -> httpx.Response:
        self.chat_payloads.append(json.loads(request.content))
        return httpx.Response(
            200,
            json={"choices": [{"message": {"role": "assistant", "content": self.chat_reply}}]},
        )


class InProcessTransport(httpx.BaseTransport):
    """Sync transport that hands each request to an ASGI app."""

    def __init__(self, app) -> None:
        self._transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        return asyncio.run(self._send(request))

    async def _send(self, request: httpx.Request) -> httpx.Response:
        forwarded = httpx.Request(
            request.method, request.url, headers=request.headers, content=request.read()
        )
        response = await self._transport.handle_async_request(forwarded)
        content = await response.aread()
        return httpx.Response(response.status_code, headers=response.headers, content=content)


@pytest.fixture
def settings(upload_dir):
    """Settings with the production 50 MiB upload limit."""
    return Settings(
        upload_dir=str(upload_dir),
        transcription_endpoint="https://stt.test/transcribe",
        transcription_api_key="stt-key",
        chat_endpoint="https://chat.test/completions",
        chat_api_key="chat-key",
    )


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def live_app(settings, upstream):
    """App with real providers pointed at the fake upstream."""
    application = create_app()
    stt = AzureWhisperSTT(settings=settings, transport=httpx.MockTransport(upstream.stt_handler))
    llm = AzureChatLLM(
        endpoint=settings.chat_endpoint,
        api_key=settings.chat_api_key,
        max_tokens=settings.chat_max_tokens,
        temperature=settings.chat_temperature,
        timeout=settings.request_timeout,
        transport=httpx.MockTransport(upstream.chat_handler),
    )
    application.dependency_overrides[get_transcription_relay] = lambda: TranscriptionRelay(
        stt=stt, settings=settings
    )
    application.dependency_overrides[get_chat_relay] = lambda: ChatRelay(llm=llm, settings=settings)
    return application


@pytest.fixture
def api_client(live_app):
    """APIClient whose HTTP traffic goes to the in-process app."""
    api = APIClient(base_url="http://testserver", transport=InProcessTransport(live_app))
    yield api
    api.close()
