"""
Application constants for Question Router.

Contains question lifecycle values, roles and field limits.
"""

from enum import Enum


# =============================================================================
# Question Lifecycle
# =============================================================================


class QuestionStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in-progress"
    ANSWERED = "answered"
    CLOSED = "closed"


class QuestionPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class UserRole(str, Enum):
    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


QUESTION_STATUSES = [s.value for s in QuestionStatus]
QUESTION_PRIORITIES = [p.value for p in QuestionPriority]
USER_ROLES = [r.value for r in UserRole]

# Statuses that count towards a moderator's workload
ACTIVE_STATUSES = (QuestionStatus.ASSIGNED.value, QuestionStatus.IN_PROGRESS.value)

# Batch ordering: higher rank is processed first
PRIORITY_RANK = {
    QuestionPriority.LOW.value: 0,
    QuestionPriority.MEDIUM.value: 1,
    QuestionPriority.HIGH.value: 2,
    QuestionPriority.URGENT.value: 3,
}


# =============================================================================
# Field Limits
# =============================================================================

MAX_MODERATOR_SKILLS = 20
MAX_SUGGESTED_SKILLS = 10
MAX_TAGS = 10
MAX_TITLE_LENGTH = 200
MAX_CONTENT_LENGTH = 5000
MAX_SUMMARY_LENGTH = 300
MAX_RESPONSE_LENGTH = 3000
MAX_NAME_LENGTH = 50

# Fallback summary when no generated summary is available
SUMMARY_FALLBACK_LENGTH = 150


# =============================================================================
# Routing
# =============================================================================

MODERATOR_LOCK_KEY = "routing:moderator:{moderator_id}:lock"
