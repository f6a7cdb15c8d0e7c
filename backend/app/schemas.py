"""
Pydantic schemas for request and response validation.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from qa_routing.constants import (
    MAX_CONTENT_LENGTH,
    MAX_RESPONSE_LENGTH,
    MAX_TAGS,
    MAX_TITLE_LENGTH,
)

Priority = Literal["low", "medium", "high", "urgent"]


# =============================================================================
# Questions
# =============================================================================


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class QuestionCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=MAX_TITLE_LENGTH)
    content: str = Field(min_length=1, max_length=MAX_CONTENT_LENGTH)
    tags: list[str] = Field(default_factory=list)
    priority: Priority = "medium"
    author_id: int | None = None

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title and content are required")
        return v.strip()

    @field_validator("tags")
    @classmethod
    def limit_tags(cls, v: list[str]) -> list[str]:
        """Keep the first MAX_TAGS non-empty tags."""
        return [t.strip() for t in v if t and t.strip()][:MAX_TAGS]


class QuestionDetailResponse(BaseModel):
    id: int
    title: str
    content: str
    summary: str | None = None
    author: UserSummary | None = None
    assigned_to: UserSummary | None = None
    status: str
    priority: str
    suggested_skills: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    response_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ModeratorReplyRequest(BaseModel):
    moderator_id: int
    content: str = Field(min_length=1, max_length=MAX_RESPONSE_LENGTH)
    is_answer: bool = False

    @field_validator("content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Response content is required")
        return v


class ModeratorReplyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    question_id: int
    moderator_id: int
    content: str
    is_answer: bool
    created_at: datetime | None = None


class ReplyAddedResponse(BaseModel):
    success: bool = True
    message: str = "Response added successfully"
    response: ModeratorReplyResponse
    question_status: str
    has_answer: bool
    response_count: int


# =============================================================================
# Routing
# =============================================================================


class AssignmentResultResponse(BaseModel):
    success: bool
    message: str
    question_id: int
    moderator_id: int | None = None
    moderator_name: str | None = None
    score: float | None = None
    skill_match: float | None = None
    workload: int | None = None
    fallback: bool = False
    error: str | None = None


class ManualAssignRequest(BaseModel):
    moderator_id: int


class QuestionSubmitResponse(BaseModel):
    success: bool = True
    message: str = "Question submitted successfully"
    question: QuestionDetailResponse
    assignment: AssignmentResultResponse | None = None


class BatchItemResponse(AssignmentResultResponse):
    title: str


class ProcessPendingResponse(BaseModel):
    success: bool
    processed: int
    results: list[BatchItemResponse] = Field(default_factory=list)
    error: str | None = None


class StaleQuestionResponse(BaseModel):
    id: int
    title: str
    status: str
    priority: str
    author: UserSummary | None = None
    assigned_to: UserSummary | None = None
    updated_at: datetime
    hours_since_update: int


class StaleQuestionsResponse(BaseModel):
    success: bool = True
    hours_threshold: float
    count: int
    questions: list[StaleQuestionResponse] = Field(default_factory=list)


class ModeratorWorkloadResponse(BaseModel):
    id: int
    name: str
    email: str
    skills: list[str] = Field(default_factory=list)
    total_assigned: int
    active_questions: int


class RoutingStatsPayload(BaseModel):
    total: int
    pending: int
    assigned: int
    answered: int
    closed: int
    moderators: list[ModeratorWorkloadResponse] = Field(default_factory=list)


class RoutingStatsResponse(BaseModel):
    success: bool = True
    stats: RoutingStatsPayload


# =============================================================================
# Jobs
# =============================================================================


class JobInfo(BaseModel):
    id: str
    name: str | None = None
    description: str | None = None
    next_run_time: str | None = None
    trigger: str


class JobRunRequest(BaseModel):
    job_id: str
    hours_threshold: float | None = Field(default=None, ge=0)
