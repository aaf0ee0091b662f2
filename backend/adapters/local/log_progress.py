"""LogProgressAdapter - writes recording pipeline events to the application log."""

import logging
from typing import Optional

from ports.progress import ATTENTION_STAGES, ProgressPort

logger = logging.getLogger(__name__)


class LogProgressAdapter(ProgressPort):
    def report(
        self,
        job_id: str,
        stage: str,
        progress: float = 0.0,
        detail: Optional[str] = None,
    ) -> None:
        parts = [f"[{job_id}]", stage]
        if progress > 0:
            parts.append(f"{progress:.0%}")
        if detail:
            parts.append(f"({detail})")
        level = logging.WARNING if stage in ATTENTION_STAGES else logging.INFO
        logger.log(level, " ".join(parts))
