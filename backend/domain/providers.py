"""Transcription providers, their limits and their per-provider config payloads."""

from dataclasses import dataclass
from enum import Enum
from typing import Union

MB = 1024 * 1024


@dataclass(frozen=True)
class ProviderLimits:
    """Upload policy of a transcription backend."""
    max_duration: float
    max_file_size: int
    needs_splitting: bool


class TranscriptionProvider(str, Enum):
    SAKURA = "sakura"
    AQUA_VOICE = "aqua_voice"
    AMIVOICE = "amivoice"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def limits(self) -> ProviderLimits:
        return _LIMITS[self]

    @property
    def default_model(self) -> str:
        return _DEFAULT_MODELS[self]


_DISPLAY_NAMES = {
    TranscriptionProvider.SAKURA: "Sakura AI",
    TranscriptionProvider.AQUA_VOICE: "Aqua Voice (Avalon)",
    TranscriptionProvider.AMIVOICE: "AmiVoice Cloud",
}

# Aqua Voice and AmiVoice accept long recordings natively and are never split.
_LIMITS = {
    TranscriptionProvider.SAKURA: ProviderLimits(1800, 30 * MB, True),
    TranscriptionProvider.AQUA_VOICE: ProviderLimits(7200, 100 * MB, False),
    TranscriptionProvider.AMIVOICE: ProviderLimits(3600, 50 * MB, False),
}

_DEFAULT_MODELS = {
    TranscriptionProvider.SAKURA: "whisper-large-v3-turbo",
    TranscriptionProvider.AQUA_VOICE: "avalon-v1-ja",
    TranscriptionProvider.AMIVOICE: "-a-general",
}


@dataclass(frozen=True)
class SakuraConfig:
    token_id: str
    secret: str
    model: str = "whisper-large-v3-turbo"
    endpoint: str = "https://api.ai.sakura.ad.jp/v1/audio/transcriptions"
    timeout: float = 300.0

    provider = TranscriptionProvider.SAKURA


@dataclass(frozen=True)
class AquaVoiceConfig:
    api_key: str
    model: str = "avalon-v1-ja"
    endpoint: str = "https://api.aquavoice.com/api/v1/audio/transcriptions"
    timeout: float = 300.0

    provider = TranscriptionProvider.AQUA_VOICE


@dataclass(frozen=True)
class AmiVoiceConfig:
    api_key: str
    engine: str = "-a-general"
    endpoint: str = "https://acp-api.amivoice.com/v1/recognize"
    timeout: float = 60.0
    sample_rate: int = 16000

    provider = TranscriptionProvider.AMIVOICE


ProviderConfig = Union[SakuraConfig, AquaVoiceConfig, AmiVoiceConfig]
