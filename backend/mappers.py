"""Domain -> DTO mappers for the HTTP boundary."""

from domain.models import PipelineOutcome
from domain.modes import ProcessingMode
from domain.providers import TranscriptionProvider
from models import ModeInfo, ProcessRecordingResponse, ProviderInfo


def outcome_to_response(outcome: PipelineOutcome) -> ProcessRecordingResponse:
    """Convert a PipelineOutcome into the API response DTO."""
    return ProcessRecordingResponse(
        succeeded=outcome.succeeded,
        message=outcome.message,
        text=outcome.combined_text,
        summary=outcome.summary,
        segment_count=outcome.segment_count,
        failed_segment_index=outcome.failed_segment_index,
        failure_stage=outcome.failure_stage,
        error=outcome.error,
        audio_preserved=outcome.audio_preserved,
        result_location=outcome.result_location,
        locations=list(outcome.locations),
    )


def provider_to_info(provider: TranscriptionProvider, active: bool = False) -> ProviderInfo:
    limits = provider.limits
    return ProviderInfo(
        id=provider.value,
        name=provider.display_name,
        model=provider.default_model,
        max_duration=limits.max_duration,
        max_file_size=limits.max_file_size,
        needs_splitting=limits.needs_splitting,
        active=active,
    )


def modes_to_infos() -> list[ModeInfo]:
    return [ModeInfo(id=m.value, label=m.label) for m in ProcessingMode]
