"""
Tests for the attendance signature state machine: counting, the change
limit boundary, rejection without state change and concurrent submissions.
"""

import threading

import pytest
from sqlalchemy import select

from scman.db.session import SessionLocal
from scman.models.response import Response
from scman.services.signatures import (
    ChangeLimitReachedError,
    EventNotFoundError,
    signature_service,
)


def stored_response(db, user, event):
    db.expire_all()
    return db.execute(
        select(Response).where(Response.user_id == user.id, Response.event_id == event.id)
    ).scalar_one_or_none()


class TestSignScenarios:

    def test_limit_two_walkthrough(self, db, member, make_event):
        event = make_event(change_limit=2)

        first = signature_service.sign(db, member.id, event.id, 1)
        assert (first.count, first.limit_reached) == (1, False)

        second = signature_service.sign(db, member.id, event.id, 2)
        assert (second.count, second.limit_reached) == (2, True)

        with pytest.raises(ChangeLimitReachedError):
            signature_service.sign(db, member.id, event.id, 0)

        response = stored_response(db, member, event)
        assert response.count == 2
        assert response.status == 2

    def test_limit_zero_allows_a_single_answer(self, db, member, make_event):
        event = make_event(change_limit=0)

        result = signature_service.sign(db, member.id, event.id, 1)
        assert result.count == 1
        assert result.limit_reached is True

        with pytest.raises(ChangeLimitReachedError):
            signature_service.sign(db, member.id, event.id, 2)

        assert stored_response(db, member, event).status == 1

    @pytest.mark.parametrize("change_limit", [1, 3, 5])
    def test_exactly_limit_submissions_are_accepted(self, db, member, make_event, change_limit):
        event = make_event(change_limit=change_limit)

        reports = [
            signature_service.sign(db, member.id, event.id, i % 3).limit_reached
            for i in range(change_limit)
        ]
        assert reports == [False] * (change_limit - 1) + [True]

        with pytest.raises(ChangeLimitReachedError):
            signature_service.sign(db, member.id, event.id, 1)
        assert stored_response(db, member, event).count == change_limit

    def test_same_status_resubmission_counts_as_a_change(self, db, member, make_event):
        event = make_event(change_limit=3)

        signature_service.sign(db, member.id, event.id, 1)
        result = signature_service.sign(db, member.id, event.id, 1)

        assert result.count == 2
        assert stored_response(db, member, event).count == 2

    def test_counts_are_per_user(self, db, make_user, make_event):
        event = make_event(change_limit=1)
        ana = make_user("ana")
        rui = make_user("rui")

        assert signature_service.sign(db, ana.id, event.id, 1).limit_reached is True
        assert signature_service.sign(db, rui.id, event.id, 0).limit_reached is True

        with pytest.raises(ChangeLimitReachedError):
            signature_service.sign(db, ana.id, event.id, 2)

    def test_updated_at_moves_forward(self, db, member, make_event):
        event = make_event(change_limit=5)

        signature_service.sign(db, member.id, event.id, 1)
        first = stored_response(db, member, event).updated_at
        signature_service.sign(db, member.id, event.id, 0)
        second = stored_response(db, member, event).updated_at

        assert second >= first

    def test_unknown_event(self, db, member):
        with pytest.raises(EventNotFoundError):
            signature_service.sign(db, member.id, 999, 1)


class TestLimitQueries:

    def test_limit_reached_tracks_submissions(self, db, member, make_event):
        event = make_event(change_limit=2)

        assert signature_service.limit_reached(db, member.id, event.id) is False
        signature_service.sign(db, member.id, event.id, 1)
        assert signature_service.limit_reached(db, member.id, event.id) is False
        signature_service.sign(db, member.id, event.id, 1)
        assert signature_service.limit_reached(db, member.id, event.id) is True

    def test_limit_zero_is_open_until_first_answer(self, db, member, make_event):
        event = make_event(change_limit=0)

        assert signature_service.limit_reached(db, member.id, event.id) is False
        signature_service.sign(db, member.id, event.id, 2)
        assert signature_service.limit_reached(db, member.id, event.id) is True

    def test_limit_reached_unknown_event(self, db, member):
        with pytest.raises(EventNotFoundError):
            signature_service.limit_reached(db, member.id, 404)

    def test_current_status(self, db, member, make_event):
        event = make_event()

        assert signature_service.current_status(db, member.id, event.id) == -1
        signature_service.sign(db, member.id, event.id, 2)
        assert signature_service.current_status(db, member.id, event.id) == 2


class TestConcurrentSubmissions:

    def _race(self, user_id, event_id, workers):
        barrier = threading.Barrier(workers)
        outcomes = []
        lock = threading.Lock()

        def submit(status):
            session = SessionLocal()
            try:
                barrier.wait()
                signature_service.sign(session, user_id, event_id, status)
                outcome = "ok"
            except ChangeLimitReachedError:
                outcome = "rejected"
            finally:
                session.close()
            with lock:
                outcomes.append(outcome)

        threads = [threading.Thread(target=submit, args=(i % 3,)) for i in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        return outcomes

    def test_one_slot_left_is_taken_once(self, db, member, make_event):
        event = make_event(change_limit=3)
        signature_service.sign(db, member.id, event.id, 1)
        signature_service.sign(db, member.id, event.id, 1)

        outcomes = self._race(member.id, event.id, workers=8)

        assert outcomes.count("ok") == 1
        assert outcomes.count("rejected") == 7
        assert stored_response(db, member, event).count == 3

    def test_first_answers_racing(self, db, member, make_event):
        event = make_event(change_limit=2)

        outcomes = self._race(member.id, event.id, workers=6)

        assert outcomes.count("ok") == 2
        assert stored_response(db, member, event).count == 2
