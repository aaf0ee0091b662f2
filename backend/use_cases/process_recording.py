"""ProcessRecordingUseCase - orchestrates the long-audio transcription pipeline.

probe -> split decision -> segment export -> sequential transcription with
retries -> join -> summarization and storage.

All ports are injected. The use case never raises: every failure becomes a
PipelineOutcome, and whenever the run fails with save-audio-on-failure
enabled the *original* recording is handed to storage before returning.
Segment files are removed on every exit path.
"""

import os
import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Optional

from domain.documents import (
    build_raw_transcript, build_result_document, make_timestamp, validate_timezone,
)
from domain.errors import (
    AudioProcessingError, ExportFailedError, InvalidInputError, SegmentExhaustedError,
    StorageError, SummarizationError,
)
from domain.models import (
    DURATION_MARGIN, SIZE_MARGIN, AudioAsset, PipelineOutcome, Segment, SplitCriteria,
)
from domain.modes import ProcessingMode, resolve_prompt
from domain.providers import ProviderLimits
from domain.split_planner import plan_split
from ports.audio import AudioProcessingPort
from ports.progress import ProgressPort
from ports.storage import StoragePort
from ports.summarization import SummarizationPort
from ports.transcription import TranscriptionPort
from use_cases.retry import DEFAULT_ATTEMPT_TIMEOUT, DEFAULT_MAX_RETRIES, RetryTimeoutRunner
from use_cases.segment_audio import AudioSegmenter

logger = logging.getLogger(__name__)

SEGMENT_SEPARATOR = "\n\n"


@dataclass
class PipelineSettings:
    max_retries: int = DEFAULT_MAX_RETRIES
    attempt_timeout: float = DEFAULT_ATTEMPT_TIMEOUT
    duration_margin: float = DURATION_MARGIN
    size_margin: float = SIZE_MARGIN
    save_audio_on_failure: bool = True
    save_audio_file: bool = False
    save_raw_transcription: bool = False
    timezone: str = "Asia/Tokyo"
    work_dir: Optional[str] = None

    def __post_init__(self):
        validate_timezone(self.timezone)


@dataclass
class ProcessRecordingRequest:
    """One recording to process."""
    audio_path: str
    mode: ProcessingMode = ProcessingMode.PERSONAL_MEMO
    custom_prompt: Optional[str] = None
    save_audio_on_failure: Optional[bool] = None
    cancel_event: Optional[threading.Event] = None


class ProcessRecordingUseCase:
    def __init__(
        self,
        transcription: TranscriptionPort,
        audio: AudioProcessingPort,
        storage: StoragePort,
        summarizer: SummarizationPort,
        progress: ProgressPort,
        settings: Optional[PipelineSettings] = None,
        limits: Optional[ProviderLimits] = None,
        segmenter: Optional[AudioSegmenter] = None,
        runner: Optional[RetryTimeoutRunner] = None,
    ):
        self._settings = settings or PipelineSettings()
        self._transcription = transcription
        self._audio = audio
        self._storage = storage
        self._summarizer = summarizer
        self._progress = progress
        self._limits = limits or transcription.provider.limits
        self._segmenter = segmenter or AudioSegmenter(audio, work_dir=self._settings.work_dir)
        self._runner = runner or RetryTimeoutRunner(
            transcription,
            max_retries=self._settings.max_retries,
            attempt_timeout=self._settings.attempt_timeout,
            progress=progress,
        )

    def execute(self, req: ProcessRecordingRequest) -> PipelineOutcome:
        job_id = uuid.uuid4().hex[:12]
        save_on_failure = (
            self._settings.save_audio_on_failure
            if req.save_audio_on_failure is None
            else req.save_audio_on_failure
        )
        logger.info(
            f"[{job_id}] Processing {os.path.basename(req.audio_path)} "
            f"(mode={req.mode.value}, provider={self._transcription.provider.display_name})"
        )

        original = _unprobed_asset(req.audio_path)
        split_segments: list[Segment] = []
        try:
            self._report(job_id, "planning")
            try:
                original = self._audio.probe(req.audio_path)
                if original.duration <= 0:
                    raise InvalidInputError(f"Audio duration must be positive, got {original.duration}")
                segments = self._prepare_segments(original, job_id)
            except ExportFailedError as e:
                return self._fail(job_id, req, original, "segmentation", e, save_on_failure)
            except (InvalidInputError, AudioProcessingError) as e:
                return self._fail(job_id, req, original, "input", e, save_on_failure)

            if segments[0].asset is not original:
                split_segments = segments

            texts: list[str] = []
            total = len(segments)
            for seg in segments:
                if req.cancel_event is not None and req.cancel_event.is_set():
                    return self._fail(
                        job_id, req, original, "cancelled",
                        f"Cancelled before segment {seg.index}/{total}", save_on_failure,
                        segment_count=total,
                    )

                self._report(
                    job_id, "transcribing",
                    progress=0.1 + 0.8 * (seg.index - 1) / total,
                    detail=f"segment {seg.index}/{total}",
                )
                result = self._runner.run(seg, job_id)
                if not result.succeeded:
                    return self._fail(
                        job_id, req, original, "transcription",
                        SegmentExhaustedError(seg.index, result.attempts), save_on_failure,
                        failed_segment_index=seg.index, segment_count=total,
                    )
                texts.append(result.text)

            combined = SEGMENT_SEPARATOR.join(texts)
            logger.info(f"[{job_id}] All {total} segments transcribed: {len(combined)} characters")

            self._segmenter.cleanup(split_segments)
            split_segments = []

            return self._deliver(job_id, req, original, combined, total)

        except Exception as e:
            logger.exception(f"[{job_id}] Unexpected pipeline error")
            return self._fail(job_id, req, original, "internal", e, save_on_failure)
        finally:
            if split_segments:
                self._segmenter.cleanup(split_segments)

    def _prepare_segments(self, original: AudioAsset, job_id: str) -> list[Segment]:
        limits = self._limits
        exceeds_duration = original.duration > limits.max_duration
        exceeds_size = original.byte_size > limits.max_file_size

        if not (exceeds_duration or exceeds_size):
            return [_whole(original)]
        if not limits.needs_splitting:
            logger.info(f"[{job_id}] Provider handles long audio natively, not splitting")
            return [_whole(original)]

        reasons = []
        if exceeds_duration:
            reasons.append(f"duration > {limits.max_duration / 60:.0f}min")
        if exceeds_size:
            reasons.append(f"size > {limits.max_file_size // 1024 // 1024}MB")
        logger.info(f"[{job_id}] Splitting required: {', '.join(reasons)}")

        criteria = SplitCriteria.from_limits(
            limits, self._settings.duration_margin, self._settings.size_margin,
        )
        plan = plan_split(original.duration, original.byte_size, criteria)
        if not plan.needs_split:
            return [_whole(original)]

        self._report(job_id, "splitting", detail=f"max {plan.effective_max_duration:.0f}s per segment")
        segments = self._segmenter.segment(original, plan.effective_max_duration)
        self._report(job_id, "splitting", progress=0.1, detail=f"{len(segments)} segments")
        return segments

    def _deliver(
        self, job_id: str, req: ProcessRecordingRequest, original: AudioAsset,
        combined: str, segment_count: int,
    ) -> PipelineOutcome:
        outcome = PipelineOutcome(succeeded=True, combined_text=combined, segment_count=segment_count)
        timestamp = make_timestamp(self._settings.timezone)

        if self._settings.save_raw_transcription:
            try:
                document = build_raw_transcript(combined, req.mode, timestamp, original.path)
                outcome.locations.append(self._storage.save_transcript(document, timestamp, req.mode))
            except StorageError as e:
                logger.warning(f"[{job_id}] Raw transcription not stored: {e}")

        self._report(job_id, "summarizing", progress=0.9)
        try:
            summary = self._summarizer.summarize(combined, resolve_prompt(req.mode, req.custom_prompt))
        except SummarizationError as e:
            logger.error(f"[{job_id}] Summarization failed: {e}")
            outcome.failure_stage = "summarization"
            outcome.error = str(e)
            self._report(job_id, "failed", detail="summarization")
            return outcome
        outcome.summary = summary

        self._report(job_id, "saving", progress=0.95)
        save_audio = self._settings.save_audio_file
        audio_link = self._storage.audio_location(original, timestamp, req.mode) if save_audio else None
        try:
            document = build_result_document(summary, combined, req.mode, timestamp, audio_link)
            outcome.result_location = self._storage.save_result(document, timestamp, req.mode)
            outcome.locations.append(outcome.result_location)
        except StorageError as e:
            logger.error(f"[{job_id}] Result not stored: {e}")
            outcome.failure_stage = "storage"
            outcome.error = str(e)

        if save_audio:
            outcome.audio_preserved = self._preserve(job_id, original, req.mode, timestamp)

        self._report(job_id, "completed", progress=1.0)
        return outcome

    def _fail(
        self,
        job_id: str,
        req: ProcessRecordingRequest,
        original: AudioAsset,
        stage: str,
        error,
        save_on_failure: bool,
        failed_segment_index: Optional[int] = None,
        segment_count: int = 0,
    ) -> PipelineOutcome:
        logger.error(f"[{job_id}] {stage} failed: {error}")
        preserved = False
        if save_on_failure:
            self._report(job_id, "saving", detail="preserving original audio")
            preserved = self._preserve(
                job_id, original, req.mode, self._failure_timestamp(job_id),
            )
        self._report(job_id, "failed", detail=stage)
        return PipelineOutcome(
            succeeded=False,
            failed_segment_index=failed_segment_index,
            audio_preserved=preserved,
            failure_stage=stage,
            error=str(error),
            segment_count=segment_count,
        )

    def _preserve(self, job_id: str, asset: AudioAsset, mode: ProcessingMode, timestamp: str) -> bool:
        try:
            location = self._storage.save_audio(asset, timestamp, mode)
        except StorageError as e:
            logger.error(f"[{job_id}] Could not preserve audio {asset.path}: {e}")
            return False
        except Exception:
            logger.exception(f"[{job_id}] Unexpected error while preserving audio {asset.path}")
            return False
        logger.info(f"[{job_id}] Original audio stored at {location}")
        return True

    def _failure_timestamp(self, job_id: str) -> str:
        try:
            return make_timestamp(self._settings.timezone)
        except Exception as e:
            logger.warning(f"[{job_id}] Timestamp in {self._settings.timezone} failed, using UTC: {e}")
            return make_timestamp("UTC")

    def _report(self, job_id: str, stage: str, progress: float = 0.0, detail: Optional[str] = None) -> None:
        try:
            self._progress.report(job_id, stage, progress=progress, detail=detail)
        except Exception as e:
            logger.warning(f"[{job_id}] Progress report failed: {e}")


def _whole(asset: AudioAsset) -> Segment:
    return Segment(1, 1, 0.0, asset.duration, asset)


def _unprobed_asset(path: str) -> AudioAsset:
    try:
        size = os.path.getsize(path)
    except OSError:
        size = 0
    return AudioAsset(path=path, duration=0.0, byte_size=size)
