# Skill matching between moderators and question suggestions

from collections.abc import Iterable, Sequence


def _normalize_skill(skill: str) -> str:
    """
    Normalize a skill name for comparison.

    Args:
        skill: Raw skill string.

    Returns:
        Lower-cased, stripped skill token.
    """
    return skill.lower().strip()


def _skills_overlap(question_skill: str, moderator_skill: str) -> bool:
    """Bidirectional partial match: either name contains the other."""
    return question_skill in moderator_skill or moderator_skill in question_skill


def matching_skills(
    moderator_skills: Iterable[str],
    question_skills: Sequence[str],
) -> list[str]:
    """
    Return the question skills covered by a moderator.

    A question skill is covered when it is a case-insensitive substring of
    any moderator skill, or contains one ("js" vs "javascript"). Empty
    moderator skills are ignored since "" is contained in every string.

    Args:
        moderator_skills: Skills held by the moderator.
        question_skills: Skills suggested for the question.

    Returns:
        Matched question skills, in question order.
    """
    mod_norm = {_normalize_skill(s) for s in moderator_skills if s and s.strip()}
    if not mod_norm:
        return []

    matched = []
    for skill in question_skills:
        needle = _normalize_skill(skill)
        if needle and any(_skills_overlap(needle, mod) for mod in mod_norm):
            matched.append(skill)
    return matched


def match_fraction(
    moderator_skills: Iterable[str],
    question_skills: Sequence[str],
) -> float:
    """
    Fraction of a question's suggested skills a moderator covers.

    Args:
        moderator_skills: Skills held by the moderator.
        question_skills: Skills suggested for the question.

    Returns:
        Value in [0, 1]. Blank suggestions are not counted; 0.0 when no
        non-blank suggestion remains.
    """
    wanted = [s for s in question_skills if s and s.strip()]
    if not wanted:
        return 0.0
    return len(matching_skills(moderator_skills, wanted)) / len(wanted)
