"""
Tests for stale question detection.
"""

from datetime import timedelta

import pytest

from qa_routing.models import utcnow
from qa_routing.routing import find_stale


def test_thirty_hours_included_one_hour_excluded(test_session, make_moderator, make_question):
    mod = make_moderator()
    now = utcnow()
    old = make_question(status="assigned", assigned_to_id=mod, updated_at=now - timedelta(hours=30))
    make_question(status="assigned", assigned_to_id=mod, updated_at=now - timedelta(hours=1))

    stale = find_stale(test_session, 24)

    assert [s.id for s in stale] == [old]
    assert stale[0].hours_since_update == 30


def test_only_active_statuses(test_session, make_moderator, make_question):
    mod = make_moderator()
    long_ago = utcnow() - timedelta(days=3)
    in_progress = make_question(status="in-progress", assigned_to_id=mod, updated_at=long_ago)
    for status in ("pending", "answered", "closed"):
        make_question(status=status, updated_at=long_ago)

    assert [s.id for s in find_stale(test_session, 24)] == [in_progress]


def test_oldest_update_first(test_session, make_moderator, make_question):
    mod = make_moderator()
    now = utcnow()
    newer = make_question(status="assigned", assigned_to_id=mod, updated_at=now - timedelta(hours=26))
    oldest = make_question(status="assigned", assigned_to_id=mod, updated_at=now - timedelta(hours=90))
    middle = make_question(status="in-progress", assigned_to_id=mod, updated_at=now - timedelta(hours=50))

    assert [s.id for s in find_stale(test_session, 24)] == [oldest, middle, newer]


def test_custom_threshold_and_reference_time(test_session, make_moderator, make_question):
    mod = make_moderator()
    now = utcnow()
    question = make_question(status="assigned", assigned_to_id=mod, updated_at=now - timedelta(hours=3))

    assert find_stale(test_session, 4, now=now) == []
    assert [s.id for s in find_stale(test_session, 2, now=now)] == [question]
    assert find_stale(test_session, 2, now=now)[0].hours_since_update == 3


def test_entry_includes_people(test_session, make_moderator, make_question):
    mod = make_moderator(name="Grace")
    make_question(status="assigned", assigned_to_id=mod, updated_at=utcnow() - timedelta(hours=48))

    entry = find_stale(test_session)[0].to_dict()

    assert entry["assigned_to"] == {"id": mod, "name": "Grace", "email": "moderator1@example.com"}
    assert entry["author"] is None
    assert entry["status"] == "assigned"


def test_scan_is_read_only(test_session, make_moderator, make_question, load_question):
    mod = make_moderator()
    question = make_question(status="assigned", assigned_to_id=mod, updated_at=utcnow() - timedelta(hours=40))

    find_stale(test_session, 24)
    loaded = load_question(question)

    assert loaded.status == "assigned"
    assert loaded.assigned_to_id == mod


def test_negative_threshold_rejected(test_session):
    with pytest.raises(ValueError):
        find_stale(test_session, -1)


@pytest.mark.parametrize("hours", [float("inf"), float("nan"), 1e20])
def test_unbounded_threshold_rejected(test_session, hours):
    with pytest.raises(ValueError):
        find_stale(test_session, hours)
