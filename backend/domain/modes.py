"""Processing modes and the summarization prompts that go with them."""

from enum import Enum
from typing import Optional

from domain.errors import InvalidInputError

MEETING_MINUTES_PROMPT = """\
Summarize this medical meeting as bullet points in the following format:

## Key decisions
- [decision]

## Examination and treatment policy
- [policy]

## Patient care
- [action]

## Next follow-up
- [schedule]
"""

TRAINING_RECORD_PROMPT = """\
Organize this training/education record in the following format:

## Training topic
- [topic]

## Main learning points
- [content]

## Practical takeaways
- [how to apply it in practice]

## References and URLs
- [related URLs, literature or guidelines, if any]

## Action items
- [planned practice, further study]
"""

PERSONAL_MEMO_PROMPT = """\
Organize the following idea memo:
- Fix obvious speech recognition errors from context
- List the key points as bullets
- Emphasize important keywords
- Group into categories where useful

## Memo
[organized content]
"""


class ProcessingMode(str, Enum):
    MEETING_MINUTES = "meeting_minutes"
    TRAINING_RECORD = "training_record"
    PERSONAL_MEMO = "personal_memo"
    CUSTOM_PROMPT = "custom_prompt"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def prefix(self) -> str:
        """File name prefix used for stored documents."""
        return _PREFIXES[self]

    @property
    def system_prompt(self) -> str:
        return _PROMPTS[self]


_LABELS = {
    ProcessingMode.MEETING_MINUTES: "Meeting minutes",
    ProcessingMode.TRAINING_RECORD: "Training record",
    ProcessingMode.PERSONAL_MEMO: "Idea memo",
    ProcessingMode.CUSTOM_PROMPT: "Custom prompt",
}

_PREFIXES = {
    ProcessingMode.MEETING_MINUTES: "meeting",
    ProcessingMode.TRAINING_RECORD: "training",
    ProcessingMode.PERSONAL_MEMO: "memo",
    ProcessingMode.CUSTOM_PROMPT: "custom",
}

_PROMPTS = {
    ProcessingMode.MEETING_MINUTES: MEETING_MINUTES_PROMPT,
    ProcessingMode.TRAINING_RECORD: TRAINING_RECORD_PROMPT,
    ProcessingMode.PERSONAL_MEMO: PERSONAL_MEMO_PROMPT,
    ProcessingMode.CUSTOM_PROMPT: "",
}


def parse_mode(value: str) -> ProcessingMode:
    try:
        return ProcessingMode(value)
    except ValueError:
        valid = ", ".join(m.value for m in ProcessingMode)
        raise InvalidInputError(f"Unknown mode {value!r}. Valid options: {valid}") from None


def resolve_prompt(mode: ProcessingMode, custom_prompt: Optional[str] = None) -> str:
    """System prompt for a run; custom mode uses the caller's prompt."""
    if mode is ProcessingMode.CUSTOM_PROMPT:
        return custom_prompt or ""
    return mode.system_prompt
