import os
import logging
from typing import Dict, Optional, Any
from pathlib import Path

from dotenv import load_dotenv

from domain.documents import validate_timezone
from domain.providers import (
    AmiVoiceConfig, AquaVoiceConfig, ProviderConfig, SakuraConfig, TranscriptionProvider,
)

logger = logging.getLogger(__name__)

load_dotenv()

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8001
DEFAULT_PROVIDER = "sakura"
DEFAULT_MAX_RETRIES = 2
DEFAULT_ATTEMPT_TIMEOUT = 300.0
DEFAULT_TIMEZONE = "Asia/Tokyo"


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    def __init__(self):
        self.host = os.environ.get("HOST", DEFAULT_HOST)
        self.port = int(os.environ.get("PORT", DEFAULT_PORT))
        self.debug = os.environ.get("DEBUG", "0") == "1"
        self.temp_dir = os.environ.get("TEMP_DIR", "/tmp/echo-relay")
        self.timezone = validate_timezone(os.environ.get("TIMEZONE", DEFAULT_TIMEZONE))

        provider = os.environ.get("PROVIDER", DEFAULT_PROVIDER).strip().lower()
        try:
            self.provider = TranscriptionProvider(provider)
        except ValueError:
            valid = ", ".join(p.value for p in TranscriptionProvider)
            raise ValueError(f"Unknown PROVIDER: {provider!r}. Valid options: {valid}") from None

        self.sakura_token_id = os.environ.get("SAKURA_TOKEN_ID", "")
        self.sakura_secret = os.environ.get("SAKURA_SECRET", "")
        self.aqua_voice_api_key = os.environ.get("AQUA_VOICE_API_KEY", "")
        self.amivoice_api_key = os.environ.get("AMIVOICE_API_KEY", "")
        self.amivoice_engine = os.environ.get("AMIVOICE_ENGINE", "-a-general")
        self.amivoice_sample_rate = int(os.environ.get("AMIVOICE_SAMPLE_RATE", "16000"))

        self.storage = os.environ.get("STORAGE", "github").lower()
        self.local_storage_dir = os.environ.get("LOCAL_STORAGE_DIR", "/data/recordings")
        self.github_token = os.environ.get("GITHUB_TOKEN", "")
        self.github_owner = os.environ.get("GITHUB_OWNER", "")
        self.github_repo = os.environ.get("GITHUB_REPO", "")
        self.github_branch = os.environ.get("GITHUB_BRANCH", "main")
        self.github_path = os.environ.get("GITHUB_PATH", "recordings")

        self.save_audio_file = _env_bool("SAVE_AUDIO_FILE", False)
        self.save_audio_on_failure = _env_bool("SAVE_AUDIO_ON_FAILURE", True)
        self.save_raw_transcription = _env_bool("SAVE_RAW_TRANSCRIPTION", False)
        self.max_retries = int(os.environ.get("MAX_RETRIES", DEFAULT_MAX_RETRIES))
        self.attempt_timeout = float(os.environ.get("ATTEMPT_TIMEOUT", DEFAULT_ATTEMPT_TIMEOUT))

    def ensure_dirs(self) -> None:
        Path(self.temp_dir).mkdir(parents=True, exist_ok=True)

    @property
    def has_provider_credentials(self) -> bool:
        if self.provider is TranscriptionProvider.SAKURA:
            return bool(self.sakura_token_id and self.sakura_secret)
        if self.provider is TranscriptionProvider.AQUA_VOICE:
            return bool(self.aqua_voice_api_key)
        return bool(self.amivoice_api_key)

    @property
    def has_storage(self) -> bool:
        if self.storage == "github":
            return bool(self.github_token and self.github_owner and self.github_repo)
        return self.storage == "local"

    @property
    def is_configured(self) -> bool:
        # Summaries always go through Sakura AI, whatever the transcription provider.
        has_llm = bool(self.sakura_token_id and self.sakura_secret)
        return self.has_provider_credentials and self.has_storage and has_llm

    def as_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "provider": self.provider.value,
            "storage": self.storage,
            "github_repo": f"{self.github_owner}/{self.github_repo}" if self.github_repo else None,
            "github_branch": self.github_branch,
            "save_audio_file": self.save_audio_file,
            "save_audio_on_failure": self.save_audio_on_failure,
            "save_raw_transcription": self.save_raw_transcription,
            "max_retries": self.max_retries,
            "attempt_timeout": self.attempt_timeout,
            "has_provider_credentials": self.has_provider_credentials,
            "has_github_token": bool(self.github_token),
        }


_config: Optional[Config] = None


def get_config() -> Config:
    global _config
    if _config is None:
        _config = Config()
    return _config


def create_provider_config(cfg: Config) -> ProviderConfig:
    if cfg.provider is TranscriptionProvider.SAKURA:
        return SakuraConfig(token_id=cfg.sakura_token_id, secret=cfg.sakura_secret)
    if cfg.provider is TranscriptionProvider.AQUA_VOICE:
        return AquaVoiceConfig(api_key=cfg.aqua_voice_api_key)
    return AmiVoiceConfig(
        api_key=cfg.amivoice_api_key,
        engine=cfg.amivoice_engine,
        sample_rate=cfg.amivoice_sample_rate,
    )


def create_audio_adapter():
    """Create the audio processing adapter (always FFmpeg)."""
    from adapters.ffmpeg.audio import FFmpegAudioAdapter
    return FFmpegAudioAdapter()


def create_transcription_adapter(provider_config: ProviderConfig, audio=None):
    """Create the transcription adapter matching a provider config.

    Uses lazy imports so unused provider clients are never loaded.
    """
    if isinstance(provider_config, SakuraConfig):
        from adapters.sakura.transcription import SakuraTranscriptionAdapter
        adapter = SakuraTranscriptionAdapter(provider_config)
    elif isinstance(provider_config, AquaVoiceConfig):
        from adapters.aqua_voice.transcription import AquaVoiceTranscriptionAdapter
        adapter = AquaVoiceTranscriptionAdapter(provider_config)
    elif isinstance(provider_config, AmiVoiceConfig):
        from adapters.amivoice.transcription import AmiVoiceTranscriptionAdapter
        adapter = AmiVoiceTranscriptionAdapter(provider_config, audio or create_audio_adapter())
    else:
        raise TypeError(f"Unsupported provider config: {type(provider_config).__name__}")

    logger.info(
        f"Transcription adapter: {type(adapter).__name__} (model={adapter.model_name()})"
    )
    return adapter


def create_infra_adapters(cfg: Config):
    """Create storage, summarization and progress adapters."""
    from adapters.local.log_progress import LogProgressAdapter
    from adapters.sakura.summarization import SakuraSummarizationAdapter

    if cfg.storage == "github":
        from adapters.github.storage import GitHubStorageAdapter
        storage = GitHubStorageAdapter(
            token=cfg.github_token,
            owner=cfg.github_owner,
            repo=cfg.github_repo,
            branch=cfg.github_branch,
            base_path=cfg.github_path,
        )
    elif cfg.storage == "local":
        from adapters.local.file_storage import LocalFileStorage
        storage = LocalFileStorage(cfg.local_storage_dir)
    else:
        raise ValueError(f"Unknown STORAGE: {cfg.storage!r}. Valid options: github, local")

    adapters = {
        "storage": storage,
        "summarizer": SakuraSummarizationAdapter(cfg.sakura_token_id, cfg.sakura_secret),
        "progress": LogProgressAdapter(),
    }
    logger.info(f"Infra adapters: {', '.join(type(v).__name__ for v in adapters.values())}")
    return adapters


def create_pipeline_settings(cfg: Config):
    from use_cases.process_recording import PipelineSettings
    return PipelineSettings(
        max_retries=cfg.max_retries,
        attempt_timeout=cfg.attempt_timeout,
        save_audio_on_failure=cfg.save_audio_on_failure,
        save_audio_file=cfg.save_audio_file,
        save_raw_transcription=cfg.save_raw_transcription,
        timezone=cfg.timezone,
        work_dir=cfg.temp_dir,
    )


def build_use_case(cfg: Config):
    """Wire the full pipeline from configuration."""
    from use_cases.process_recording import ProcessRecordingUseCase

    audio = create_audio_adapter()
    transcription = create_transcription_adapter(create_provider_config(cfg), audio)
    infra = create_infra_adapters(cfg)
    return ProcessRecordingUseCase(
        transcription=transcription,
        audio=audio,
        storage=infra["storage"],
        summarizer=infra["summarizer"],
        progress=infra["progress"],
        settings=create_pipeline_settings(cfg),
    )
