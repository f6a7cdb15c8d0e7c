"""
Tests for the pending-question batch sweep.
"""

from collections import Counter
from datetime import timedelta

from sqlalchemy.exc import OperationalError

from qa_routing.models import utcnow
from qa_routing.repositories import QuestionRepository
from qa_routing.routing import process_pending


def test_three_questions_three_moderators_each_get_one(
    routing_engine, make_moderator, make_question, load_question
):
    moderators = [make_moderator(), make_moderator(), make_moderator()]
    questions = [make_question(), make_question(), make_question()]

    batch = process_pending(routing_engine)

    assert batch.success
    assert batch.processed == 3
    assert all(r["success"] for r in batch.results)
    assert all(r["fallback"] for r in batch.results)

    loaded = [load_question(q) for q in questions]
    assert all(q.status == "assigned" for q in loaded)
    assert Counter(q.assigned_to_id for q in loaded) == Counter(moderators)


def test_more_moderators_than_questions(routing_engine, make_moderator, make_question, load_question):
    for _ in range(5):
        make_moderator(["python"])
    questions = [make_question(["python"]) for _ in range(3)]

    process_pending(routing_engine)

    assignees = [load_question(q).assigned_to_id for q in questions]
    assert len(set(assignees)) == 3


def test_priority_then_creation_order(routing_engine, make_moderator, make_question):
    make_moderator()
    now = utcnow()
    low_old = make_question(priority="low", created_at=now - timedelta(hours=5))
    urgent_new = make_question(priority="urgent", created_at=now - timedelta(minutes=1))
    high_old = make_question(priority="high", created_at=now - timedelta(hours=3))
    high_new = make_question(priority="high", created_at=now - timedelta(hours=1))
    medium = make_question(priority="medium", created_at=now - timedelta(hours=4))

    batch = process_pending(routing_engine)

    assert [r["question_id"] for r in batch.results] == [
        urgent_new,
        high_old,
        high_new,
        medium,
        low_old,
    ]


def test_only_pending_questions_processed(routing_engine, make_moderator, make_question):
    mod = make_moderator()
    make_question(status="assigned", assigned_to_id=mod)
    make_question(status="answered", assigned_to_id=mod)
    pending = make_question()

    batch = process_pending(routing_engine)

    assert batch.processed == 1
    assert batch.results[0]["question_id"] == pending


def test_results_carry_title(routing_engine, make_moderator, make_question):
    make_moderator()
    make_question(title="How do I profile a Django view?")

    batch = process_pending(routing_engine)

    assert batch.results[0]["title"] == "How do I profile a Django view?"
    assert batch.to_dict()["processed"] == 1


def test_failures_do_not_abort_batch(routing_engine, make_question, load_question):
    questions = [make_question(["python"]), make_question([]), make_question(["go"])]

    batch = process_pending(routing_engine)

    assert batch.success is True
    assert batch.processed == 3
    assert [r["error"] for r in batch.results] == ["no_candidates"] * 3
    assert all(load_question(q).status == "pending" for q in questions)


def test_single_persistence_failure_is_recorded(
    routing_engine, make_moderator, make_question, load_question, monkeypatch
):
    make_moderator()
    first = make_question(priority="urgent")
    second = make_question(priority="low")

    original_assign = QuestionRepository.assign

    def flaky_assign(self, question, moderator_id):
        if question.id == first:
            raise OperationalError("UPDATE questions", {}, Exception("database is locked"))
        return original_assign(self, question, moderator_id)

    monkeypatch.setattr(QuestionRepository, "assign", flaky_assign)

    batch = process_pending(routing_engine)

    assert [r["error"] for r in batch.results] == ["persistence_failure", None]
    assert load_question(first).status == "pending"
    assert load_question(second).status == "assigned"


def test_limit(routing_engine, make_moderator, make_question):
    make_moderator()
    for _ in range(4):
        make_question()

    assert process_pending(routing_engine, limit=2).processed == 2


def test_empty_queue(routing_engine):
    batch = process_pending(routing_engine)

    assert batch.success
    assert batch.processed == 0
    assert batch.results == []
