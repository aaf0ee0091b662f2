from typing import List, Optional
from pydantic import BaseModel


class ProcessRecordingResponse(BaseModel):
    """Response format for a processed recording"""
    succeeded: bool
    message: str
    text: str = ""
    summary: Optional[str] = None
    segment_count: int = 0
    failed_segment_index: Optional[int] = None
    failure_stage: Optional[str] = None
    error: Optional[str] = None
    audio_preserved: bool = False
    result_location: Optional[str] = None
    locations: List[str] = []


class ProviderInfo(BaseModel):
    """Upload limits of a transcription provider."""
    id: str
    name: str
    model: str
    max_duration: float
    max_file_size: int
    needs_splitting: bool
    active: bool = False


class ProviderList(BaseModel):
    object: str = "list"
    data: List[ProviderInfo]


class ModeInfo(BaseModel):
    id: str
    label: str


class HealthResponse(BaseModel):
    status: str
    provider: str
    configured: bool
