"""LocalFileStorage - keeps documents and audio in a local directory tree."""

import shutil
import logging
from pathlib import Path

from domain.errors import StorageError
from domain.models import AudioAsset
from domain.modes import ProcessingMode
from ports.storage import StoragePort, stored_audio_name

logger = logging.getLogger(__name__)


class LocalFileStorage(StoragePort):
    """Mirrors the GitHub layout: <root>/audio, <root>/raw, <root>/*.md."""

    def __init__(self, root: str):
        self._root = Path(root)

    def save_audio(self, asset: AudioAsset, timestamp: str, mode: ProcessingMode) -> str:
        target = Path(self.audio_location(asset, timestamp, mode))
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(asset.path, target)
        except OSError as e:
            raise StorageError(f"Could not store audio {asset.path}: {e}") from e
        logger.info(f"Stored audio ({mode.prefix}_{timestamp}): {target}")
        return str(target)

    def save_transcript(self, content: str, timestamp: str, mode: ProcessingMode) -> str:
        return self._write(self._root / "raw" / f"{mode.prefix}_{timestamp}_raw.txt", content)

    def save_result(self, content: str, timestamp: str, mode: ProcessingMode) -> str:
        return self._write(self._root / f"{mode.prefix}_{timestamp}.md", content)

    def audio_location(self, asset: AudioAsset, timestamp: str, mode: ProcessingMode) -> str:
        return str(self._root / "audio" / stored_audio_name(asset, timestamp, mode))

    def _write(self, path: Path, content: str) -> str:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not write {path}: {e}") from e
        logger.info(f"Stored document: {path}")
        return str(path)
