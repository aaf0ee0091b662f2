"""AudioProcessingPort - abstract interface for probing and cutting audio."""

from abc import ABC, abstractmethod

from domain.models import AudioAsset


class AudioProcessingPort(ABC):
    @abstractmethod
    def probe(self, audio_path: str) -> AudioAsset:
        """Read duration and size of an audio file. Raises AudioProcessingError."""

    @abstractmethod
    def export_segment(
        self, source: AudioAsset, start: float, end: float, output_path: str
    ) -> AudioAsset:
        """Encode [start, end] of source into output_path. Raises ExportFailedError."""

    @abstractmethod
    def convert_to_wav(self, input_path: str, sample_rate: int = 16000) -> str:
        """Convert audio to mono 16-bit WAV. Returns path to converted file."""
