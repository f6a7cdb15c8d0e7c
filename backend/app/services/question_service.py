"""
Question intake and moderator response handling.

Submission flow:
1. Validate the author (when given)
2. Suggest skills from the available moderators' vocabulary and summarize
3. Store the question as pending and commit
4. Auto-assign once; failure leaves the question pending for the batch sweep
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from qa_routing.classification import QuestionSummarizer, SkillClassifier
from qa_routing.constants import MAX_SUGGESTED_SKILLS, QuestionStatus
from qa_routing.logging import get_logger
from qa_routing.models import Question, QuestionResponse
from qa_routing.repositories import QuestionRepository, UserRepository
from qa_routing.routing import AssignmentEngine, AssignmentResult

from ..schemas import ModeratorReplyRequest, QuestionCreateRequest

logger = get_logger("api.questions")


def get_question(db: Session, question_id: int) -> Question:
    question = QuestionRepository(db).get_by_id(question_id)
    if question is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")
    return question


def submit_question(
    db: Session,
    payload: QuestionCreateRequest,
    classifier: SkillClassifier,
    engine: AssignmentEngine,
    summarizer: QuestionSummarizer,
) -> tuple[Question, AssignmentResult]:
    """
    Create a pending question and try to route it immediately.

    Returns:
        (question reloaded after the assignment attempt, assignment result)
    """
    users = UserRepository(db)
    if payload.author_id is not None and users.get_by_id(payload.author_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    vocabulary = users.all_moderator_skills()
    suggested = classifier.classify(f"{payload.title} {payload.content}", vocabulary)

    question = QuestionRepository(db).create(
        title=payload.title,
        content=payload.content,
        summary=summarizer.summarize(payload.title, payload.content),
        author_id=payload.author_id,
        priority=payload.priority,
        tags=payload.tags,
        suggested_skills=suggested[:MAX_SUGGESTED_SKILLS],
        status=QuestionStatus.PENDING.value,
    )
    # The engine decides in its own transaction; the question must be visible to it
    db.commit()
    logger.info("question_submitted", question_id=question.id, suggested_skills=suggested)

    result = engine.auto_assign(question.id)
    if not result.success:
        logger.info("question_left_pending", question_id=question.id, error=result.error)

    db.refresh(question)
    return question, result


def add_response(db: Session, question_id: int, payload: ModeratorReplyRequest) -> QuestionResponse:
    """
    Record a moderator reply and advance the question's status.

    Raises:
        HTTPException: 404 for an unknown question or moderator, 400 for closed questions
    """
    question = get_question(db, question_id)
    if UserRepository(db).get_by_id(payload.moderator_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if question.status == QuestionStatus.CLOSED.value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot respond to closed questions",
        )

    response = QuestionRepository(db).add_response(
        question,
        moderator_id=payload.moderator_id,
        content=payload.content,
        is_answer=payload.is_answer,
    )
    logger.info(
        "response_added",
        question_id=question.id,
        moderator_id=payload.moderator_id,
        is_answer=payload.is_answer,
        status=question.status,
    )
    return response


__all__ = ["add_response", "get_question", "submit_question"]
