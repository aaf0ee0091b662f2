"""TranscriptionPort - abstract interface for transcription backends."""

from abc import ABC, abstractmethod

from domain.providers import TranscriptionProvider


class TranscriptionPort(ABC):
    provider: TranscriptionProvider

    @abstractmethod
    def transcribe(self, audio_path: str) -> str:
        """Transcribe an audio file. Raises a TranscriptionError subclass on failure."""

    @abstractmethod
    def model_name(self) -> str:
        """Return the model or engine name sent to the backend."""
