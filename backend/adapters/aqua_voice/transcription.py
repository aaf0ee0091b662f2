"""AquaVoiceTranscriptionAdapter - Aqua Voice (Avalon), OpenAI-compatible API."""

import logging

from adapters.http.whisper import post_audio_file
from domain.errors import MissingCredentialsError
from domain.providers import AquaVoiceConfig, TranscriptionProvider
from ports.transcription import TranscriptionPort

logger = logging.getLogger(__name__)


class AquaVoiceTranscriptionAdapter(TranscriptionPort):
    provider = TranscriptionProvider.AQUA_VOICE

    def __init__(self, config: AquaVoiceConfig):
        self._config = config

    def transcribe(self, audio_path: str) -> str:
        if not self._config.api_key:
            raise MissingCredentialsError(self.provider.display_name)
        logger.debug(f"Aqua Voice key: {self._config.api_key[:10]}...")
        return post_audio_file(
            self._config.endpoint,
            audio_path,
            model=self._config.model,
            timeout=self._config.timeout,
            headers={"Authorization": f"Bearer {self._config.api_key}"},
        )

    def model_name(self) -> str:
        return self._config.model
