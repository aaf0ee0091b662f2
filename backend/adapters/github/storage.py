"""GitHubStorageAdapter - stores documents and audio through the GitHub contents API."""

import base64
import logging
from typing import Optional

import requests

from domain.errors import StorageError
from domain.models import AudioAsset
from domain.modes import ProcessingMode
from ports.storage import StoragePort, stored_audio_name

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
USER_AGENT = "echo-relay"


class GitHubStorageAdapter(StoragePort):
    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        branch: str = "main",
        base_path: str = "recordings",
        api_url: str = GITHUB_API_URL,
        timeout: float = 120.0,
    ):
        self._token = token
        self._owner = owner
        self._repo = repo
        self._branch = branch
        self._base_path = base_path.strip("/")
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout

    def save_audio(self, asset: AudioAsset, timestamp: str, mode: ProcessingMode) -> str:
        try:
            with open(asset.path, "rb") as f:
                content = f.read()
        except OSError as e:
            raise StorageError(f"Could not read audio file {asset.path}: {e}") from e
        return self._put(
            self.audio_location(asset, timestamp, mode),
            content,
            message=f"Add audio file: {mode.prefix}_{timestamp}",
        )

    def save_transcript(self, content: str, timestamp: str, mode: ProcessingMode) -> str:
        path = self._path("raw", f"{mode.prefix}_{timestamp}_raw.txt")
        return self._put(path, content.encode("utf-8"), message=f"Add raw transcription: {timestamp}")

    def save_result(self, content: str, timestamp: str, mode: ProcessingMode) -> str:
        path = self._path(f"{mode.prefix}_{timestamp}.md")
        return self._put(path, content.encode("utf-8"), message=f"Add {mode.label}: {timestamp}")

    def audio_location(self, asset: AudioAsset, timestamp: str, mode: ProcessingMode) -> str:
        return self._path("audio", stored_audio_name(asset, timestamp, mode))

    def _path(self, *parts: str) -> str:
        return "/".join(p for p in (self._base_path, *parts) if p)

    def _put(self, path: str, content: bytes, message: str) -> str:
        url = f"{self._api_url}/repos/{self._owner}/{self._repo}/contents/{path}"
        body = {
            "message": message,
            "content": base64.b64encode(content).decode("ascii"),
            "branch": self._branch,
        }
        headers = {
            "Authorization": f"Bearer {self._token}",
            "User-Agent": USER_AGENT,
            "Accept": "application/vnd.github+json",
        }

        logger.info(f"Uploading to GitHub: {path} ({len(content)} bytes)")
        try:
            response = requests.put(url, json=body, headers=headers, timeout=self._timeout)
        except requests.RequestException as e:
            raise StorageError(f"GitHub upload failed: {e}") from e

        if response.status_code not in (200, 201):
            logger.error(f"GitHub error [{response.status_code}]: {response.text}")
            raise StorageError(f"GitHub upload failed: {response.status_code}")

        html_url = self._html_url(response)
        logger.info(f"GitHub upload succeeded: {html_url or path}")
        return html_url or path

    @staticmethod
    def _html_url(response: requests.Response) -> Optional[str]:
        try:
            return response.json()["content"]["html_url"]
        except (ValueError, KeyError, TypeError):
            return None
