"""
Question summarizers.

Gemini writes a one or two sentence summary when an API key is configured.
Otherwise, or when the call fails, the title and content are joined and
truncated.
"""

from abc import ABC, abstractmethod
from typing import Optional

import httpx

from qa_routing.config import Settings, get_settings
from qa_routing.constants import MAX_SUMMARY_LENGTH, SUMMARY_FALLBACK_LENGTH
from qa_routing.logging import get_logger

from .gemini import generate_content

logger = get_logger("summarizer")

SUMMARY_PROMPT_TEMPLATE = """Create a brief, clear summary of this question in 1-2 sentences.
Focus on the main problem or topic.

Title: "{title}"
Question: "{content}"
"""


def _truncate(text: str, limit: int) -> str:
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


def truncate_summary(title: str, content: str) -> str:
    """Title and content joined, cut to SUMMARY_FALLBACK_LENGTH with an ellipsis."""
    text = f"{title}. {content}" if title else content
    return _truncate(text, SUMMARY_FALLBACK_LENGTH)


class QuestionSummarizer(ABC):
    """Interface: summarize(title, content) -> short summary."""

    @abstractmethod
    def summarize(self, title: str, content: str) -> str:
        ...


class TruncatingSummarizer(QuestionSummarizer):
    def summarize(self, title: str, content: str) -> str:
        return truncate_summary(title, content)


class GeminiSummarizer(QuestionSummarizer):
    """
    Summarizer backed by the Gemini generateContent REST API.

    Any HTTP or parsing error, or an empty answer, falls back to truncation.
    """

    def __init__(self, api_key: str, model: str = "gemini-pro", timeout: float = 15.0):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    def summarize(self, title: str, content: str) -> str:
        prompt = SUMMARY_PROMPT_TEMPLATE.format(title=title, content=content)
        try:
            summary = generate_content(self.api_key, self.model, prompt, timeout=self.timeout).strip()
        except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
            logger.warning("gemini_summary_failed", error=str(e), fallback="truncate")
            return truncate_summary(title, content)

        if not summary:
            logger.warning("gemini_summary_empty", fallback="truncate")
            return truncate_summary(title, content)
        return _truncate(summary, MAX_SUMMARY_LENGTH)


def get_summarizer(settings: Optional[Settings] = None) -> QuestionSummarizer:
    """Gemini summarizer when GEMINI_API_KEY is configured, truncation otherwise."""
    settings = settings or get_settings()
    if settings.gemini_api_key:
        return GeminiSummarizer(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            timeout=settings.classifier_timeout,
        )
    return TruncatingSummarizer()


__all__ = [
    "GeminiSummarizer",
    "QuestionSummarizer",
    "TruncatingSummarizer",
    "get_summarizer",
    "truncate_summary",
]
