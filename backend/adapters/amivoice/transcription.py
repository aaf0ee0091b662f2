"""AmiVoiceTranscriptionAdapter - AmiVoice Cloud HTTP recognition API.

AmiVoice only accepts WAV/MP3/FLAC. Everything that is not MP3 or FLAC is
converted to mono 16-bit WAV at the configured sample rate and sent as
headerless little-endian PCM, with the matching ``c`` codec parameter.
"""

import json
import os
import logging
from typing import Optional

import numpy as np
import requests
import soundfile

from adapters.http.responses import check_status, extract_text
from domain.errors import (
    ApiError, AudioProcessingError, InvalidAudioError, MissingCredentialsError, NetworkError,
)
from domain.providers import AmiVoiceConfig, TranscriptionProvider
from ports.audio import AudioProcessingPort
from ports.transcription import TranscriptionPort

logger = logging.getLogger(__name__)

PCM_CODECS = {
    8000: "LSB8K",
    16000: "LSB16K",
    22050: "LSB22K",
    44100: "LSB44K",
    48000: "LSB48K",
}

# Compressed formats AmiVoice decodes itself: extension -> (upload name, content type)
PASSTHROUGH_FORMATS = {
    ".mp3": ("audio.mp3", "audio/mpeg"),
    ".flac": ("audio.flac", "audio/flac"),
}


class AmiVoiceTranscriptionAdapter(TranscriptionPort):
    provider = TranscriptionProvider.AMIVOICE

    def __init__(self, config: AmiVoiceConfig, audio: AudioProcessingPort):
        self._config = config
        self._audio = audio

    def transcribe(self, audio_path: str) -> str:
        if not self._config.api_key:
            raise MissingCredentialsError(self.provider.display_name)

        ext = os.path.splitext(audio_path)[1].lower()
        codec: Optional[str] = None
        if ext in PASSTHROUGH_FORMATS:
            filename, content_type = PASSTHROUGH_FORMATS[ext]
            audio_data = self._read_file(audio_path)
        else:
            filename, content_type = "audio.pcm", "application/octet-stream"
            codec = self.codec()
            audio_data = self._pcm_data(audio_path)

        if not audio_data:
            raise InvalidAudioError(f"No audio data in {audio_path}")

        form = {
            "u": self._config.api_key,
            "d": f"grammarFileNames={self._config.engine} loggingOptOut=True",
        }
        if codec:
            form["c"] = codec

        logger.info(
            f"AmiVoice request: engine={self._config.engine}, codec={codec or content_type}, "
            f"{len(audio_data)} bytes"
        )
        try:
            response = requests.post(
                self._config.endpoint,
                data=form,
                files={"a": (filename, audio_data, content_type)},
                timeout=self._config.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"AmiVoice request failed: {e}")
            raise NetworkError(e) from e

        logger.info(f"AmiVoice response status: {response.status_code}")
        check_status(response)
        self._check_error_body(response.content)
        return extract_text(response.content)

    def model_name(self) -> str:
        return self._config.engine

    def codec(self) -> str:
        return PCM_CODECS.get(self._config.sample_rate, "LSB16K")

    def _read_file(self, path: str) -> bytes:
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            raise InvalidAudioError(f"Could not read audio file {path}: {e}") from e

    def _pcm_data(self, audio_path: str) -> bytes:
        try:
            wav_path = self._audio.convert_to_wav(audio_path, sample_rate=self._config.sample_rate)
        except (AudioProcessingError, OSError) as e:
            raise InvalidAudioError(f"Could not convert {audio_path} for AmiVoice: {e}") from e

        try:
            samples, _ = soundfile.read(wav_path, dtype="int16")
            return np.asarray(samples, dtype="<i2").tobytes()
        except (RuntimeError, OSError) as e:
            raise InvalidAudioError(f"Could not read PCM data from {wav_path}: {e}") from e
        finally:
            if os.path.exists(wav_path):
                os.unlink(wav_path)

    @staticmethod
    def _check_error_body(body: bytes) -> None:
        """AmiVoice reports some failures as a 200 with a non-empty ``code``."""
        try:
            payload = json.loads(body)
        except ValueError:
            return
        if not isinstance(payload, dict):
            return
        code = payload.get("code")
        message = payload.get("message")
        if isinstance(code, str) and code and isinstance(message, str):
            logger.error(f"AmiVoice error: code={code}, message={message}")
            raise ApiError(code=code, message=message)
