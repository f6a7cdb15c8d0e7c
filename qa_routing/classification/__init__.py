"""Question text analysis: skill classification and summaries."""

from .classifier import (
    GeminiSkillClassifier,
    KeywordSkillClassifier,
    SkillClassifier,
    get_classifier,
)
from .summarizer import (
    GeminiSummarizer,
    QuestionSummarizer,
    TruncatingSummarizer,
    get_summarizer,
    truncate_summary,
)

__all__ = [
    "GeminiSkillClassifier",
    "GeminiSummarizer",
    "KeywordSkillClassifier",
    "QuestionSummarizer",
    "SkillClassifier",
    "TruncatingSummarizer",
    "get_classifier",
    "get_summarizer",
    "truncate_summary",
]
