"""Error taxonomy for the recording pipeline.

Adapters raise these; the retry runner absorbs per-attempt transcription
errors and the use case converts everything else into a PipelineOutcome.
"""

from typing import Optional


class PipelineError(Exception):
    """Base class for every error raised inside the pipeline."""


class InvalidInputError(PipelineError):
    """Zero/negative duration or size, or unusable split criteria."""


class AudioProcessingError(PipelineError):
    """ffmpeg/ffprobe could not read or convert an audio file."""


class ExportFailedError(PipelineError):
    def __init__(self, cause: Optional[BaseException] = None, detail: str = ""):
        self.cause = cause
        message = "Audio segment export failed"
        if detail:
            message += f" ({detail})"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class TranscriptionError(PipelineError):
    """Base for a single failed transcription attempt."""


class UnauthorizedError(TranscriptionError):
    def __init__(self, message: str = "Authentication failed, check the API key"):
        super().__init__(message)


class ApiError(TranscriptionError):
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"API error [{code}]: {message}")


class NetworkError(TranscriptionError):
    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Network error: {cause}")


class DecodingError(TranscriptionError):
    def __init__(self, message: str = "Failed to decode the transcription response"):
        super().__init__(message)


class MissingCredentialsError(TranscriptionError):
    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"No credentials configured for {provider}")


class InvalidAudioError(TranscriptionError):
    """The audio file could not be read or is in an unsupported format."""


class SegmentExhaustedError(PipelineError):
    def __init__(self, index: int, attempts: int):
        self.index = index
        self.attempts = attempts
        super().__init__(f"Segment {index} failed after {attempts} attempts")


class SummarizationError(PipelineError):
    """The LLM summarization call failed."""


class StorageError(PipelineError):
    """A storage backend rejected or failed to persist an artifact."""
