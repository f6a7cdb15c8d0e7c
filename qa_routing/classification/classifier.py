"""
Skill classifiers.

Suggest which of the available moderator skills a question needs.
The Gemini classifier is optional; keyword matching is always available
and is used whenever the model cannot be reached.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Optional

import httpx

from qa_routing.config import Settings, get_settings
from qa_routing.logging import get_logger

from .gemini import GEMINI_API_URL, generate_content

logger = get_logger("classifier")

PROMPT_TEMPLATE = """Analyze this question and identify the most relevant technical skills/topics from the available list.
Return only the skill names as a comma-separated list, maximum {max_skills} skills.

Question: "{text}"

Available skills: {skills}

Response format: skill1, skill2, skill3
"""


class SkillClassifier(ABC):
    """Interface: classify(text, available_skills) -> suggested skills."""

    def __init__(self, max_skills: int = 3):
        self.max_skills = max_skills

    @abstractmethod
    def classify(self, text: str, available_skills: Sequence[str]) -> list[str]:
        """
        Suggest skills for a piece of text.

        Args:
            text: Question title and content
            available_skills: Vocabulary to choose from

        Returns:
            At most max_skills entries of available_skills
        """


class KeywordSkillClassifier(SkillClassifier):
    """Skills whose name appears in the text (case-insensitive), in vocabulary order."""

    def classify(self, text: str, available_skills: Sequence[str]) -> list[str]:
        haystack = (text or "").lower()
        found: list[str] = []
        for skill in available_skills:
            needle = skill.strip().lower()
            if needle and needle in haystack and skill not in found:
                found.append(skill)
            if len(found) >= self.max_skills:
                break
        return found


class GeminiSkillClassifier(SkillClassifier):
    """
    Classifier backed by the Gemini generateContent REST API.

    The model's comma-separated answer is filtered to the vocabulary.
    Any HTTP or parsing error falls back to keyword matching.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-pro",
        max_skills: int = 3,
        timeout: float = 15.0,
    ):
        super().__init__(max_skills=max_skills)
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.fallback = KeywordSkillClassifier(max_skills=max_skills)

    def _build_prompt(self, text: str, available_skills: Sequence[str]) -> str:
        return PROMPT_TEMPLATE.format(
            max_skills=self.max_skills,
            text=text,
            skills=", ".join(available_skills),
        )

    def _generate(self, prompt: str) -> str:
        return generate_content(self.api_key, self.model, prompt, timeout=self.timeout)

    def _parse(self, answer: str, available_skills: Sequence[str]) -> list[str]:
        by_name = {s.strip().lower(): s for s in available_skills if s.strip()}
        picked: list[str] = []
        for token in answer.split(","):
            skill = by_name.get(token.strip().strip(".").lower())
            if skill and skill not in picked:
                picked.append(skill)
        return picked[: self.max_skills]

    def classify(self, text: str, available_skills: Sequence[str]) -> list[str]:
        if not available_skills:
            return []
        try:
            answer = self._generate(self._build_prompt(text, available_skills))
            skills = self._parse(answer, available_skills)
        except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning("gemini_classification_failed", error=str(e), fallback="keyword")
            return self.fallback.classify(text, available_skills)

        logger.debug("gemini_classification_complete", skills=skills)
        return skills


def get_classifier(settings: Optional[Settings] = None) -> SkillClassifier:
    """
    Build the classifier the settings call for.

    Gemini is used only when GEMINI_API_KEY is configured.
    """
    settings = settings or get_settings()
    if settings.gemini_api_key:
        return GeminiSkillClassifier(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            max_skills=settings.classifier_max_skills,
            timeout=settings.classifier_timeout,
        )
    logger.info("classifier_selected", classifier="keyword", reason="no_api_key")
    return KeywordSkillClassifier(max_skills=settings.classifier_max_skills)


__all__ = [
    "GEMINI_API_URL",
    "GeminiSkillClassifier",
    "KeywordSkillClassifier",
    "SkillClassifier",
    "get_classifier",
]
