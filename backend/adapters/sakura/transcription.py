"""SakuraTranscriptionAdapter - Sakura AI Whisper endpoint (HTTP Basic auth)."""

import logging

from adapters.http.whisper import post_audio_file
from domain.errors import MissingCredentialsError
from domain.providers import SakuraConfig, TranscriptionProvider
from ports.transcription import TranscriptionPort

logger = logging.getLogger(__name__)


class SakuraTranscriptionAdapter(TranscriptionPort):
    provider = TranscriptionProvider.SAKURA

    def __init__(self, config: SakuraConfig):
        self._config = config

    def transcribe(self, audio_path: str) -> str:
        if not self._config.token_id or not self._config.secret:
            raise MissingCredentialsError(self.provider.display_name)
        return post_audio_file(
            self._config.endpoint,
            audio_path,
            model=self._config.model,
            timeout=self._config.timeout,
            auth=(self._config.token_id, self._config.secret),
        )

    def model_name(self) -> str:
        return self._config.model
