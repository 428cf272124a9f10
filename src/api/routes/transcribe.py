"""
Transcription REST endpoint.

Delegates to ``TranscriptionRelay`` — no business logic here.
"""

from fastapi import APIRouter, Depends, File, UploadFile

from src.core.models import TranscriptionResponse
from src.services.relay import TranscriptionRelay

router = APIRouter(tags=["transcription"])


def get_transcription_relay() -> TranscriptionRelay:
    return TranscriptionRelay()


@router.post("/transcribe", response_model=TranscriptionResponse)
async def transcribe(
    audio: UploadFile | None = File(None),
    relay: TranscriptionRelay = Depends(get_transcription_relay),
):
    """Transcribe one uploaded wav/mp3 file (multipart field ``audio``)."""
    return await relay.transcribe(audio)
