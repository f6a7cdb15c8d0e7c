"""
Routing error taxonomy.

These are raised inside the routing core and converted into soft
AssignmentResult failures at the AssignmentEngine boundary. Callers of the
engine operations and process_pending never see them.
"""


class RoutingError(Exception):
    """Base class for routing failures."""

    code = "routing_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class QuestionNotFound(RoutingError):
    code = "not_found"

    def __init__(self, question_id: int):
        super().__init__(f"Question {question_id} not found")
        self.question_id = question_id


class InvalidQuestionState(RoutingError):
    code = "invalid_state"

    def __init__(self, question_id: int, status: str, expected: str = "pending"):
        super().__init__(f"Question {question_id} is {status}, expected {expected}")
        self.question_id = question_id
        self.status = status


class NoCandidates(RoutingError):
    code = "no_candidates"

    def __init__(self, message: str = "No available moderators found"):
        super().__init__(message)


class InvalidModerator(RoutingError):
    """The named user cannot take questions (not an approved, verified moderator)."""

    code = "invalid_moderator"

    def __init__(self, moderator_id: int):
        super().__init__(f"User {moderator_id} is not an available moderator")
        self.moderator_id = moderator_id


class PersistenceFailure(RoutingError):
    code = "persistence_failure"


class LockTimeout(PersistenceFailure):
    """A moderator lock could not be acquired in time."""

    code = "lock_timeout"

    def __init__(self, moderator_id: int, waited: float):
        super().__init__(f"Timed out after {waited:.1f}s waiting for moderator {moderator_id}")
        self.moderator_id = moderator_id
