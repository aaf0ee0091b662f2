"""ProgressPort - observer interface for recording pipeline stages."""

from abc import ABC, abstractmethod
from typing import Optional

PIPELINE_STAGES = (
    "planning",
    "splitting",
    "transcribing",
    "retrying",
    "summarizing",
    "saving",
    "completed",
    "failed",
)

# Stages an operator usually wants to see even with quiet logging.
ATTENTION_STAGES = frozenset({"retrying", "failed"})


class ProgressPort(ABC):
    @abstractmethod
    def report(
        self,
        job_id: str,
        stage: str,
        progress: float = 0.0,
        detail: Optional[str] = None,
    ) -> None:
        """Receive a stage event for one recording run.

        ``stage`` is one of PIPELINE_STAGES and ``progress`` a fraction in
        [0, 1]. Implementations may raise; the pipeline ignores observer errors.
        """
