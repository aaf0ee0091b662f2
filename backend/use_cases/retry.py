"""RetryTimeoutRunner - bounded retries with a wall-clock timeout per attempt.

Each attempt runs on its own single-worker executor and is raced against
``attempt_timeout`` via ``Future.result(timeout=...)``. A timed-out attempt
is abandoned, not cancelled: the executor is shut down without waiting, the
HTTP call finishes in the background (bounded by the adapter's own request
timeout) and its result is discarded.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Optional

from domain.errors import TranscriptionError
from domain.models import Segment, SegmentResult
from ports.progress import ProgressPort
from ports.transcription import TranscriptionPort

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 2
DEFAULT_ATTEMPT_TIMEOUT = 300.0


class RetryTimeoutRunner:
    def __init__(
        self,
        transcription: TranscriptionPort,
        max_retries: int = DEFAULT_MAX_RETRIES,
        attempt_timeout: float = DEFAULT_ATTEMPT_TIMEOUT,
        progress: Optional[ProgressPort] = None,
    ):
        if max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {max_retries}")
        if attempt_timeout <= 0:
            raise ValueError(f"attempt_timeout must be > 0, got {attempt_timeout}")
        self._transcription = transcription
        self._max_retries = max_retries
        self._attempt_timeout = attempt_timeout
        self._progress = progress

    def run(self, segment: Segment, job_id: str = "-") -> SegmentResult:
        label = f"segment {segment.index}/{segment.total}"

        for attempt in range(self._max_retries + 1):
            if attempt > 0:
                logger.info(f"Retrying {label} ({attempt}/{self._max_retries})")
                self._notify(job_id, f"{label} retry {attempt}/{self._max_retries}")

            ok, text = self._attempt(segment.asset.path, label)
            if ok:
                logger.info(f"{label} transcribed on attempt {attempt + 1}: {text[:50]!r}")
                return SegmentResult(segment.index, True, text, attempts=attempt + 1)

        attempts = self._max_retries + 1
        logger.error(f"{label} failed after {attempts} attempts")
        return SegmentResult(segment.index, False, "", attempts=attempts)

    def _attempt(self, audio_path: str, label: str) -> tuple[bool, str]:
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="transcribe")
        try:
            future = executor.submit(self._transcription.transcribe, audio_path)
            try:
                return True, future.result(timeout=self._attempt_timeout)
            except FutureTimeoutError:
                logger.warning(f"{label} timed out after {self._attempt_timeout:.0f}s")
            except TranscriptionError as e:
                logger.warning(f"{label} attempt failed: {e}")
            except Exception:
                logger.exception(f"{label} attempt raised an unexpected error")
            return False, ""
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def _notify(self, job_id: str, detail: str) -> None:
        if self._progress is None:
            return
        try:
            self._progress.report(job_id, "retrying", detail=detail)
        except Exception as e:
            logger.warning(f"Progress report failed: {e}")
