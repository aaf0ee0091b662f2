"""StoragePort - abstract interface for durable storage of audio and documents."""

import os
from abc import ABC, abstractmethod

from domain.models import AudioAsset
from domain.modes import ProcessingMode


class StoragePort(ABC):
    @abstractmethod
    def save_audio(self, asset: AudioAsset, timestamp: str, mode: ProcessingMode) -> str:
        """Persist an audio file. Returns its location. Raises StorageError."""

    @abstractmethod
    def save_transcript(self, content: str, timestamp: str, mode: ProcessingMode) -> str:
        """Persist a raw transcript document. Returns its location."""

    @abstractmethod
    def save_result(self, content: str, timestamp: str, mode: ProcessingMode) -> str:
        """Persist the Markdown result document. Returns its location."""

    @abstractmethod
    def audio_location(self, asset: AudioAsset, timestamp: str, mode: ProcessingMode) -> str:
        """Location save_audio uses for this run, for linking from documents.

        The name comes from the run (mode prefix, timestamp, extension), not
        from the uploaded file name.
        """


def stored_audio_name(asset: AudioAsset, timestamp: str, mode: ProcessingMode) -> str:
    ext = os.path.splitext(asset.path)[1] or ".m4a"
    return f"{mode.prefix}_{timestamp}{ext}"
