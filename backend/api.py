"""HTTP API for echo-relay."""

import os
import logging
import shutil
import tempfile
from typing import Callable, Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile

from config import Config, build_use_case, get_config
from domain.errors import InvalidInputError
from domain.modes import parse_mode
from domain.providers import TranscriptionProvider
from mappers import modes_to_infos, outcome_to_response, provider_to_info
from models import HealthResponse, ModeInfo, ProcessRecordingResponse, ProviderList
from use_cases.process_recording import ProcessRecordingRequest, ProcessRecordingUseCase

logger = logging.getLogger(__name__)

__version__ = "0.1.0"


def create_app(
    config: Optional[Config] = None,
    use_case_factory: Optional[Callable[[], ProcessRecordingUseCase]] = None,
) -> FastAPI:
    """Build the FastAPI application."""
    cfg = config or get_config()
    app = FastAPI(
        title="echo-relay",
        version=__version__,
        description="Long-audio transcription relay with summarization.",
    )
    require_config = use_case_factory is None
    factory = use_case_factory or (lambda: build_use_case(cfg))
    state: dict = {}

    def get_use_case() -> ProcessRecordingUseCase:
        if "use_case" not in state:
            state["use_case"] = factory()
        return state["use_case"]

    @app.get("/health", response_model=HealthResponse, tags=["system"])
    def health() -> HealthResponse:
        return HealthResponse(status="ok", provider=cfg.provider.value, configured=cfg.is_configured)

    @app.get("/v1/providers", response_model=ProviderList, tags=["system"])
    def providers() -> ProviderList:
        return ProviderList(
            data=[provider_to_info(p, active=p is cfg.provider) for p in TranscriptionProvider]
        )

    @app.get("/v1/modes", response_model=list[ModeInfo], tags=["system"])
    def modes() -> list[ModeInfo]:
        return modes_to_infos()

    @app.post("/v1/audio/process", response_model=ProcessRecordingResponse, tags=["audio"])
    def process_audio(
        file: UploadFile = File(...),
        mode: str = Form("personal_memo"),
        custom_prompt: Optional[str] = Form(None),
        save_audio_on_failure: Optional[bool] = Form(None),
    ) -> ProcessRecordingResponse:
        if require_config and not cfg.is_configured:
            raise HTTPException(
                status_code=503,
                detail="Service is not configured: set provider, LLM and storage credentials",
            )
        try:
            processing_mode = parse_mode(mode)
        except InvalidInputError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc

        cfg.ensure_dirs()
        suffix = os.path.splitext(file.filename or "")[1] or ".m4a"
        stem = os.path.splitext(os.path.basename(file.filename or "recording"))[0] or "recording"
        upload_dir = tempfile.mkdtemp(prefix="upload_", dir=cfg.temp_dir)
        audio_path = os.path.join(upload_dir, f"{stem}{suffix}")
        try:
            with open(audio_path, "wb") as out:
                shutil.copyfileobj(file.file, out)
            logger.info(f"Received {file.filename} ({os.path.getsize(audio_path)} bytes)")

            outcome = get_use_case().execute(
                ProcessRecordingRequest(
                    audio_path=audio_path,
                    mode=processing_mode,
                    custom_prompt=custom_prompt,
                    save_audio_on_failure=save_audio_on_failure,
                )
            )
        finally:
            shutil.rmtree(upload_dir, ignore_errors=True)

        return outcome_to_response(outcome)

    return app
