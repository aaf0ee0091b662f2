"""SummarizationPort - abstract interface for LLM post-processing."""

from abc import ABC, abstractmethod


class SummarizationPort(ABC):
    @abstractmethod
    def summarize(self, text: str, system_prompt: str) -> str:
        """Return the structured summary of text. Raises SummarizationError."""
