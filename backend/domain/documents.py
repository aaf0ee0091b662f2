"""Text documents written to storage after a successful run."""

import os
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from domain.modes import ProcessingMode

TIMESTAMP_FORMAT = "%Y-%m-%d_%H%M%S"
FOOTER = "*Generated by echo-relay*"


def validate_timezone(timezone: str) -> str:
    """Return timezone unchanged if zoneinfo knows it, else raise ValueError."""
    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {timezone!r}") from e
    return timezone


def make_timestamp(timezone: str = "Asia/Tokyo", now: Optional[datetime] = None) -> str:
    now = now or datetime.now(ZoneInfo(timezone))
    return now.strftime(TIMESTAMP_FORMAT)


def build_raw_transcript(text: str, mode: ProcessingMode, timestamp: str, audio_path: str) -> str:
    return (
        "# Raw transcription\n"
        f"Date: {timestamp}\n"
        f"Mode: {mode.label}\n"
        f"Audio file: {os.path.basename(audio_path)}\n"
        "\n"
        "---\n"
        "\n"
        f"{text}\n"
    )


def build_result_document(
    summary: str,
    text: str,
    mode: ProcessingMode,
    timestamp: str,
    audio_link: Optional[str] = None,
) -> str:
    parts = [
        f"# {mode.label} - {timestamp}",
        "",
        "## Result",
        summary,
        "",
        "---",
        "",
        "## Original text",
        text,
        "",
        "---",
    ]
    if audio_link:
        name = audio_link.rsplit("/", 1)[-1]
        parts += ["", "## Audio file", f"[{name}]({audio_link})", "", "---"]
    parts += ["", FOOTER, ""]
    return "\n".join(parts)
