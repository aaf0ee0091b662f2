import base64
from pathlib import Path

import pytest
import requests

from adapters.github.storage import GitHubStorageAdapter
from adapters.local.file_storage import LocalFileStorage
from domain.errors import StorageError
from domain.models import AudioAsset
from domain.modes import ProcessingMode

from fakes import make_response

TIMESTAMP = "2025-01-15_143000"


class PutRecorder:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def __call__(self, url, **kwargs):
        self.calls.append((url, kwargs))
        return self.response


def _asset(tmp_path: Path) -> AudioAsset:
    path = tmp_path / "recording_0001.m4a"
    path.write_bytes(b"audio bytes")
    return AudioAsset(str(path), 60.0, 11)


def test_local_storage_layout(tmp_path: Path) -> None:
    storage = LocalFileStorage(str(tmp_path / "store"))
    asset = _asset(tmp_path)

    audio_location = storage.save_audio(asset, TIMESTAMP, ProcessingMode.PERSONAL_MEMO)
    raw_location = storage.save_transcript("raw text", TIMESTAMP, ProcessingMode.PERSONAL_MEMO)
    result_location = storage.save_result("# Result", TIMESTAMP, ProcessingMode.MEETING_MINUTES)

    assert audio_location == str(tmp_path / "store" / "audio" / f"memo_{TIMESTAMP}.m4a")
    assert audio_location == storage.audio_location(asset, TIMESTAMP, ProcessingMode.PERSONAL_MEMO)
    assert Path(audio_location).read_bytes() == b"audio bytes"
    assert Path(raw_location).name == f"memo_{TIMESTAMP}_raw.txt"
    assert Path(raw_location).read_text(encoding="utf-8") == "raw text"
    assert Path(result_location) == tmp_path / "store" / f"meeting_{TIMESTAMP}.md"


def test_local_storage_missing_audio(tmp_path: Path) -> None:
    storage = LocalFileStorage(str(tmp_path / "store"))
    asset = AudioAsset(str(tmp_path / "gone.m4a"), 1.0, 1)

    with pytest.raises(StorageError):
        storage.save_audio(asset, TIMESTAMP, ProcessingMode.PERSONAL_MEMO)


def test_github_put_body(tmp_path: Path, monkeypatch) -> None:
    put = PutRecorder(make_response(201, {"content": {"html_url": "https://github.com/o/r/blob/main/x.md"}}))
    monkeypatch.setattr(requests, "put", put)
    storage = GitHubStorageAdapter(token="ghp_x", owner="o", repo="r", branch="notes")

    location = storage.save_result("# Memo", TIMESTAMP, ProcessingMode.PERSONAL_MEMO)

    assert location == "https://github.com/o/r/blob/main/x.md"
    url, kwargs = put.calls[0]
    assert url == f"https://api.github.com/repos/o/r/contents/recordings/memo_{TIMESTAMP}.md"
    assert kwargs["json"]["branch"] == "notes"
    assert base64.b64decode(kwargs["json"]["content"]) == b"# Memo"
    assert kwargs["headers"]["Authorization"] == "Bearer ghp_x"
    assert kwargs["headers"]["User-Agent"] == "echo-relay"


def test_github_audio_and_raw_paths(tmp_path: Path, monkeypatch) -> None:
    put = PutRecorder(make_response(200, b"not json"))
    monkeypatch.setattr(requests, "put", put)
    storage = GitHubStorageAdapter(token="t", owner="o", repo="r", base_path="/notes/")
    asset = _asset(tmp_path)

    audio_location = storage.save_audio(asset, TIMESTAMP, ProcessingMode.TRAINING_RECORD)
    raw_location = storage.save_transcript("raw", TIMESTAMP, ProcessingMode.TRAINING_RECORD)

    assert audio_location == f"notes/audio/training_{TIMESTAMP}.m4a"
    assert raw_location == f"notes/raw/training_{TIMESTAMP}_raw.txt"
    assert base64.b64decode(put.calls[0][1]["json"]["content"]) == b"audio bytes"


def test_github_rejects_other_status(monkeypatch) -> None:
    monkeypatch.setattr(requests, "put", PutRecorder(make_response(422, "sha wasn't supplied")))
    storage = GitHubStorageAdapter(token="t", owner="o", repo="r")

    with pytest.raises(StorageError):
        storage.save_result("x", TIMESTAMP, ProcessingMode.PERSONAL_MEMO)


def test_same_upload_name_gets_distinct_audio_paths(tmp_path: Path, monkeypatch) -> None:
    put = PutRecorder(make_response(201, b""))
    monkeypatch.setattr(requests, "put", put)
    storage = GitHubStorageAdapter(token="t", owner="o", repo="r")
    first_dir, second_dir = tmp_path / "a", tmp_path / "b"
    first_dir.mkdir()
    second_dir.mkdir()
    first, second = _asset(first_dir), _asset(second_dir)

    storage.save_audio(first, "2025-01-15_143000", ProcessingMode.PERSONAL_MEMO)
    storage.save_audio(second, "2025-01-15_150512", ProcessingMode.PERSONAL_MEMO)

    urls = [url for url, _ in put.calls]
    assert urls[0] != urls[1]
    assert urls[1].endswith("/contents/recordings/audio/memo_2025-01-15_150512.m4a")


def test_local_storage_keeps_both_recordings(tmp_path: Path) -> None:
    storage = LocalFileStorage(str(tmp_path / "store"))
    first_dir, second_dir = tmp_path / "a", tmp_path / "b"
    first_dir.mkdir()
    second_dir.mkdir()
    first, second = _asset(first_dir), _asset(second_dir)
    Path(second.path).write_bytes(b"second take")

    first_location = storage.save_audio(first, "2025-01-15_143000", ProcessingMode.PERSONAL_MEMO)
    second_location = storage.save_audio(second, "2025-01-15_150512", ProcessingMode.PERSONAL_MEMO)

    assert Path(first_location).read_bytes() == b"audio bytes"
    assert Path(second_location).read_bytes() == b"second take"
