"""
Question endpoints: submission, detail and moderator responses.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from qa_routing.classification import QuestionSummarizer, SkillClassifier
from qa_routing.routing import AssignmentEngine

from ..database import get_db
from ..dependencies import get_assignment_engine, get_question_summarizer, get_skill_classifier
from ..schemas import (
    AssignmentResultResponse,
    ModeratorReplyRequest,
    ModeratorReplyResponse,
    QuestionCreateRequest,
    QuestionDetailResponse,
    QuestionSubmitResponse,
    ReplyAddedResponse,
)
from ..services import question_service

router = APIRouter(prefix="/questions", tags=["questions"])


@router.post("", response_model=QuestionSubmitResponse, status_code=status.HTTP_201_CREATED)
def submit_question(
    payload: QuestionCreateRequest,
    db: Session = Depends(get_db),
    classifier: SkillClassifier = Depends(get_skill_classifier),
    engine: AssignmentEngine = Depends(get_assignment_engine),
    summarizer: QuestionSummarizer = Depends(get_question_summarizer),
):
    """
    Submit a question.

    Skills are suggested from the moderators' vocabulary and the question is
    routed once. A failed assignment is reported but does not fail the
    submission; the question stays pending.
    """
    question, result = question_service.submit_question(db, payload, classifier, engine, summarizer)
    return QuestionSubmitResponse(
        question=QuestionDetailResponse(**question.to_dict()),
        assignment=AssignmentResultResponse(**result.to_dict()),
    )


@router.get("/{question_id}", response_model=QuestionDetailResponse)
def get_question(question_id: int, db: Session = Depends(get_db)):
    """Return a single question."""
    return QuestionDetailResponse(**question_service.get_question(db, question_id).to_dict())


@router.get("/{question_id}/responses", response_model=list[ModeratorReplyResponse])
def list_responses(question_id: int, db: Session = Depends(get_db)):
    """Return the moderator responses of a question, oldest first."""
    return question_service.get_question(db, question_id).responses


@router.post(
    "/{question_id}/responses",
    response_model=ReplyAddedResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_response(
    question_id: int,
    payload: ModeratorReplyRequest,
    db: Session = Depends(get_db),
):
    """Add a moderator response; an answer marks the question answered."""
    response = question_service.add_response(db, question_id, payload)
    question = response.question
    return ReplyAddedResponse(
        response=ModeratorReplyResponse.model_validate(response),
        question_status=question.status,
        has_answer=question.has_answer,
        response_count=len(question.responses),
    )
