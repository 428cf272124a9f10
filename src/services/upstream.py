"""
Helpers shared by the httpx-based upstream providers.

Translate transport failures and non-2xx responses into the relay
exception taxonomy so every provider reports errors the same way.
"""

import logging

import httpx

from src.core.exceptions import UpstreamError

logger = logging.getLogger(__name__)


def extract_error_message(response: httpx.Response) -> str | None:
    """Best-effort extraction of ``error.message`` from an upstream body.

    Returns None when the body is not JSON or carries no message.
    """
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        return str(message) if message else None
    if isinstance(error, str) and error:
        return error
    return None


def raise_for_upstream(response: httpx.Response, service: str) -> None:
    """Raise ``UpstreamError`` if ``response`` is not a success.

    Args:
        response: The upstream HTTP response.
        service: Short name used in log lines ("transcription", "chat").
    """
    if response.is_success:
        return
    message = extract_error_message(response)
    logger.warning(
        "Upstream %s service returned %s: %s",
        service,
        response.status_code,
        message or response.text[:200],
    )
    raise UpstreamError(status_code=response.status_code, message=message)
