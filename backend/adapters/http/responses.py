"""Response handling shared by the HTTP transcription adapters.

Providers disagree on where the recognized text lives, so extraction tries
each known shape in a fixed order:

1. ``{"text": "..."}`` (Whisper / OpenAI compatible)
2. ``{"results": [{"text": "..."}]}``
3. ``{"segments": [{"results": [{"text": "..."}]}]}``

A body that is not JSON at all is taken as plain text.
"""

import json
import logging
from typing import Any

import requests

from domain.errors import ApiError, DecodingError, UnauthorizedError

logger = logging.getLogger(__name__)


def check_status(response: requests.Response) -> None:
    """Map non-2xx responses onto the transcription error taxonomy."""
    status = response.status_code
    if 200 <= status < 300:
        return
    if status == 401:
        raise UnauthorizedError()
    body = response.text or "Unknown error"
    logger.error(f"API error [{status}]: {body}")
    raise ApiError(code=str(status), message=body)


def extract_text(body: bytes) -> str:
    """Return the first non-empty transcript found in a 2xx response body."""
    try:
        payload = json.loads(body)
    except ValueError:
        return _plain_text(body)

    if not isinstance(payload, dict):
        logger.warning(f"Unexpected JSON response type: {type(payload).__name__}")
        return ""

    text = payload.get("text")
    if isinstance(text, str) and text:
        return text

    combined = _join_results(payload.get("results"))
    if combined:
        return combined

    segments = payload.get("segments")
    if isinstance(segments, list):
        combined = "".join(
            _join_results(segment.get("results"))
            for segment in segments
            if isinstance(segment, dict)
        )
        if combined:
            return combined

    logger.warning(f"No transcript in response (keys: {', '.join(payload.keys())})")
    return ""


def _join_results(results: Any) -> str:
    if not isinstance(results, list):
        return ""
    return "".join(
        item["text"]
        for item in results
        if isinstance(item, dict) and isinstance(item.get("text"), str)
    )


def _plain_text(body: bytes) -> str:
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError:
        raise DecodingError() from None
    if not text.strip():
        raise DecodingError()
    logger.info("Response is not JSON, using it as plain text")
    return text
