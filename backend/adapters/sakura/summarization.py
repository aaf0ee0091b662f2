"""SakuraSummarizationAdapter - chat completions on Sakura AI (OpenAI-compatible)."""

import logging

import requests

from domain.errors import SummarizationError
from ports.summarization import SummarizationPort

logger = logging.getLogger(__name__)

DEFAULT_CHAT_URL = "https://api.ai.sakura.ad.jp/v1/chat/completions"
DEFAULT_CHAT_MODEL = "gpt-oss-120b"


class SakuraSummarizationAdapter(SummarizationPort):
    def __init__(
        self,
        token_id: str,
        secret: str,
        endpoint: str = DEFAULT_CHAT_URL,
        model: str = DEFAULT_CHAT_MODEL,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout: float = 120.0,
    ):
        self._auth = (token_id, secret)
        self._endpoint = endpoint
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout

    def summarize(self, text: str, system_prompt: str) -> str:
        body = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": text},
            ],
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
            "stream": False,
        }

        logger.info(f"Requesting summary from {self._model} ({len(text)} characters)")
        try:
            response = requests.post(
                self._endpoint, json=body, auth=self._auth, timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise SummarizationError(f"Summarization request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.error(f"Summarization API error [{response.status_code}]: {response.text}")
            raise SummarizationError(f"Summarization API error: {response.status_code}")

        try:
            payload = response.json()
            content = payload["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise SummarizationError(f"Unexpected summarization response: {e}") from e

        logger.info(f"Summary finished: {len(content)} characters")
        return content
