"""
Tests for routing statistics.
"""

from qa_routing.models import Question
from qa_routing.routing import routing_stats


def test_counts_by_status(test_session, make_moderator, make_question):
    mod = make_moderator()
    make_question()
    make_question()
    make_question(status="assigned", assigned_to_id=mod)
    make_question(status="in-progress", assigned_to_id=mod)
    make_question(status="answered", assigned_to_id=mod)
    make_question(status="closed")
    make_question(status="closed")

    stats = routing_stats(test_session)

    assert stats.total == 7
    assert stats.pending == 2
    assert stats.assigned == 2
    assert stats.answered == 1
    assert stats.closed == 2


def test_closed_is_the_remainder(test_session, make_question):
    for status in ("pending", "assigned", "answered", "closed"):
        make_question(status=status)
    # A status outside the known buckets; Core insert skips the model validator
    test_session.execute(
        Question.__table__.insert().values(title="Escalated", content="Needs an admin", status="escalated")
    )
    test_session.commit()

    stats = routing_stats(test_session)

    assert stats.total == 5
    assert stats.pending == 1
    assert stats.assigned == 1
    assert stats.answered == 1
    assert stats.closed == 2


def test_moderator_workloads(test_session, make_moderator, make_question):
    busy = make_moderator(["python"], name="Busy")
    idle = make_moderator(["go"], name="Idle")
    make_moderator(["rust"], approved=False)
    make_question(status="assigned", assigned_to_id=busy)
    make_question(status="in-progress", assigned_to_id=busy)
    make_question(status="answered", assigned_to_id=busy)

    moderators = {m.id: m for m in routing_stats(test_session).moderators}

    assert set(moderators) == {busy, idle}
    assert moderators[busy].total_assigned == 3
    assert moderators[busy].active_questions == 2
    assert moderators[busy].skills == ["python"]
    assert moderators[idle].total_assigned == 0
    assert moderators[idle].active_questions == 0


def test_empty_database(test_session):
    payload = routing_stats(test_session).to_dict()

    assert payload == {
        "total": 0,
        "pending": 0,
        "assigned": 0,
        "answered": 0,
        "closed": 0,
        "moderators": [],
    }
