"""Framework-agnostic domain models for the recording pipeline.

The pydantic DTOs in models.py stay at the HTTP boundary; everything the
use cases pass around is a plain dataclass from here.
"""

from dataclasses import dataclass, field
from typing import Optional

from domain.errors import InvalidInputError
from domain.providers import ProviderLimits

DURATION_MARGIN = 0.95
SIZE_MARGIN = 0.93


@dataclass(frozen=True)
class AudioAsset:
    """A recorded audio file with its probed duration and size."""
    path: str
    duration: float
    byte_size: int


@dataclass(frozen=True)
class SplitCriteria:
    """Provider limits with safety margins applied."""
    max_duration: float
    max_file_size: int

    def __post_init__(self):
        if self.max_duration <= 0 or self.max_file_size <= 0:
            raise InvalidInputError(
                f"Split criteria must be positive (max_duration={self.max_duration}, "
                f"max_file_size={self.max_file_size})"
            )

    @classmethod
    def from_limits(
        cls,
        limits: ProviderLimits,
        duration_margin: float = DURATION_MARGIN,
        size_margin: float = SIZE_MARGIN,
    ) -> "SplitCriteria":
        return cls(
            max_duration=limits.max_duration * duration_margin,
            max_file_size=int(limits.max_file_size * size_margin),
        )


@dataclass(frozen=True)
class SplitPlan:
    """NoSplit when effective_max_duration is None, otherwise Segments(d)."""
    effective_max_duration: Optional[float] = None

    @property
    def needs_split(self) -> bool:
        return self.effective_max_duration is not None


NO_SPLIT = SplitPlan()


@dataclass
class Segment:
    """A time-bounded slice of the source recording."""
    index: int
    total: int
    start_time: float
    end_time: float
    asset: AudioAsset

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time


@dataclass
class SegmentResult:
    segment_index: int
    succeeded: bool
    text: str = ""
    attempts: int = 0


@dataclass
class PipelineOutcome:
    """What a pipeline run reports back to its caller."""
    succeeded: bool
    combined_text: str = ""
    failed_segment_index: Optional[int] = None
    audio_preserved: bool = False
    failure_stage: Optional[str] = None
    error: Optional[str] = None
    summary: Optional[str] = None
    result_location: Optional[str] = None
    segment_count: int = 0
    locations: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.succeeded and self.failure_stage is None:
            return "Processing completed."
        if self.failure_stage == "summarization":
            message = "Transcription completed but summarization failed."
        elif self.failure_stage == "storage":
            message = "Processing completed but the result could not be stored."
        elif self.failure_stage == "input":
            message = "The recording could not be read."
        elif self.failure_stage == "segmentation":
            message = "Failed to split the recording."
        elif self.failure_stage == "transcription" and self.failed_segment_index is not None:
            if self.segment_count > 1:
                message = f"Transcription of segment {self.failed_segment_index} failed."
            else:
                message = "Transcription failed."
        elif self.failure_stage == "cancelled":
            message = "Processing was cancelled."
        else:
            message = "Processing failed."
        if not self.succeeded:
            if self.audio_preserved:
                message += " The original audio was saved."
            else:
                message += " The original audio was not saved."
        return message
