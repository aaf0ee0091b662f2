"""In-memory port implementations shared by the tests."""

import threading
from pathlib import Path
from typing import Callable, Optional

from domain.errors import ExportFailedError, StorageError, SummarizationError
from domain.models import AudioAsset
from domain.modes import ProcessingMode
from domain.providers import TranscriptionProvider
from ports.audio import AudioProcessingPort
from ports.progress import ProgressPort
from ports.storage import StoragePort, stored_audio_name
from ports.summarization import SummarizationPort
from ports.transcription import TranscriptionPort

MB = 1024 * 1024


class FakeAudio(AudioProcessingPort):
    def __init__(self, duration: float, byte_size: int, fail_on: Optional[int] = None):
        self.duration = duration
        self.byte_size = byte_size
        self.fail_on = fail_on
        self.exports: list[tuple[float, float, str]] = []

    def probe(self, audio_path: str) -> AudioAsset:
        return AudioAsset(audio_path, self.duration, self.byte_size)

    def export_segment(self, source, start, end, output_path):
        if self.fail_on == len(self.exports) + 1:
            raise ExportFailedError(RuntimeError("codec error"))
        Path(output_path).write_bytes(b"segment")
        self.exports.append((start, end, output_path))
        return AudioAsset(output_path, end - start, 7)

    def convert_to_wav(self, input_path: str, sample_rate: int = 16000) -> str:
        return input_path


class FakeTranscription(TranscriptionPort):
    provider = TranscriptionProvider.SAKURA

    def __init__(self, handler: Callable[[str], str]):
        self._handler = handler
        self._lock = threading.Lock()
        self.calls: list[str] = []

    def transcribe(self, audio_path: str) -> str:
        with self._lock:
            self.calls.append(audio_path)
        return self._handler(audio_path)

    def model_name(self) -> str:
        return "fake-model"


class FakeStorage(StoragePort):
    def __init__(self, fail_audio: bool = False):
        self.fail_audio = fail_audio
        self.audio: list[AudioAsset] = []
        self.transcripts: list[str] = []
        self.results: list[str] = []

    def save_audio(self, asset: AudioAsset, timestamp: str, mode: ProcessingMode) -> str:
        self.audio.append(asset)
        if self.fail_audio:
            raise StorageError("disk full")
        return self.audio_location(asset, timestamp, mode)

    def save_transcript(self, content: str, timestamp: str, mode: ProcessingMode) -> str:
        self.transcripts.append(content)
        return f"store/raw/{mode.prefix}_{timestamp}_raw.txt"

    def save_result(self, content: str, timestamp: str, mode: ProcessingMode) -> str:
        self.results.append(content)
        return f"store/{mode.prefix}_{timestamp}.md"

    def audio_location(self, asset: AudioAsset, timestamp: str, mode: ProcessingMode) -> str:
        return f"store/audio/{stored_audio_name(asset, timestamp, mode)}"


class FakeSummarizer(SummarizationPort):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[tuple[str, str]] = []

    def summarize(self, text: str, system_prompt: str) -> str:
        self.calls.append((text, system_prompt))
        if self.fail:
            raise SummarizationError("LLM unavailable")
        return "- summary"


class RecordingProgress(ProgressPort):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.events: list[tuple[str, Optional[str]]] = []

    def report(self, job_id, stage, progress=0.0, detail=None):
        self.events.append((stage, detail))
        if self.fail:
            raise RuntimeError("observer went away")

    @property
    def stages(self) -> list[str]:
        return [stage for stage, _ in self.events]


def make_response(status: int = 200, body=b"") -> "requests.Response":
    """Build a real requests.Response with a canned body."""
    import json

    import requests

    response = requests.Response()
    response.status_code = status
    if isinstance(body, (dict, list)):
        body = json.dumps(body)
    if isinstance(body, str):
        body = body.encode("utf-8")
    response._content = body
    response.encoding = "utf-8"
    return response
