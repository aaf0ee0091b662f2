"""Upload helper for OpenAI/Whisper-compatible transcription endpoints."""

import os
import logging
import time
from typing import Any

import requests

from adapters.http.responses import check_status, extract_text
from domain.errors import InvalidAudioError, NetworkError

logger = logging.getLogger(__name__)


def post_audio_file(
    url: str,
    audio_path: str,
    model: str,
    timeout: float,
    **request_kwargs: Any,
) -> str:
    """POST a multipart ``model`` + ``file`` form and return the transcript."""
    try:
        with open(audio_path, "rb") as f:
            audio_data = f.read()
    except OSError as e:
        raise InvalidAudioError(f"Could not read audio file {audio_path}: {e}") from e

    filename = os.path.basename(audio_path)
    logger.info(f"Uploading {filename} ({len(audio_data) // 1024}KB) to {url} [model={model}]")

    started = time.monotonic()
    try:
        response = requests.post(
            url,
            data={"model": model},
            files={"file": (filename, audio_data, "audio/m4a")},
            timeout=timeout,
            **request_kwargs,
        )
    except requests.RequestException as e:
        logger.error(f"Upload to {url} failed: {e}")
        raise NetworkError(e) from e

    logger.info(f"Response {response.status_code} in {time.monotonic() - started:.2f}s")
    check_status(response)
    text = extract_text(response.content)
    logger.info(f"Transcription finished: {len(text)} characters")
    return text
