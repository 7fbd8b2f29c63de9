"""
Notification queue: expiry, dismissal, purging and the HTTP endpoints.
"""

import asyncio

import pytest

from scman.services.notifications import NotificationCenter


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def center(clock):
    return NotificationCenter(clock=clock, default_duration=3.0)


class TestNotificationCenter:

    def test_push_and_pending(self, center):
        first = center.push(1, "Signature saved.")
        second = center.push(1, "Failed to update status.", kind="error", duration=10)

        assert [n.id for n in center.pending(1)] == [first.id, second.id]
        assert center.pending(2) == []
        assert second.expires_at - second.created_at == 10

    def test_expired_notifications_are_hidden(self, center, clock):
        center.push(1, "short", duration=1)
        center.push(1, "long", duration=5)

        clock.advance(2)
        assert [n.message for n in center.pending(1)] == ["long"]

    def test_zero_default_duration_is_kept(self, clock):
        center = NotificationCenter(clock=clock, default_duration=0)

        n = center.push(1, "gone already")
        assert n.duration == 0
        assert center.pending(1) == []

    def test_dismiss(self, center):
        n = center.push(1, "hello")

        assert center.dismiss(2, n.id) is False
        assert center.dismiss(1, n.id) is True
        assert center.dismiss(1, n.id) is False
        assert center.pending(1) == []

    def test_purge_expired(self, center, clock):
        center.push(1, "a", duration=1)
        center.push(2, "b", duration=1)
        center.push(2, "c", duration=60)

        clock.advance(5)
        assert center.purge_expired() == 2
        assert [n.message for n in center.pending(2)] == ["c"]
        assert center.purge_expired() == 0

    def test_unknown_kind(self, center):
        with pytest.raises(ValueError):
            center.push(1, "?", kind="warning")

    def test_purger_task_runs_until_cancelled(self, center, clock):
        center.push(1, "gone", duration=0.5)
        clock.advance(1)

        async def scenario():
            task = asyncio.create_task(center.run_purger(interval=0.01))
            await asyncio.sleep(0.05)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(scenario())
        assert center._queues == {}


class TestNotificationEndpoints:

    def test_sign_pushes_notifications(self, client, member, make_event, auth_headers):
        event = make_event(change_limit=2)
        headers = auth_headers(member)

        client.post("/api/sign_evt", json={"event_id": event.id, "status": 1}, headers=headers)
        client.post("/api/sign_evt", json={"event_id": event.id, "status": 0}, headers=headers)
        client.post("/api/sign_evt", json={"event_id": event.id, "status": 2}, headers=headers)

        res = client.get("/api/notifications", headers=headers)
        assert res.status_code == 200
        notes = res.json()
        assert [(n["kind"], n["message"]) for n in notes] == [
            ("info", "Signature saved."),
            ("info", "No further changes possible for this event."),
            ("error", "Failed to update status."),
        ]

    def test_dismiss_endpoint(self, client, member, make_event, auth_headers):
        event = make_event()
        headers = auth_headers(member)
        client.post("/api/sign_evt", json={"event_id": event.id, "status": 1}, headers=headers)

        note_id = client.get("/api/notifications", headers=headers).json()[0]["id"]
        assert client.delete(f"/api/notifications/{note_id}", headers=headers).json() == {"ok": True}
        assert client.get("/api/notifications", headers=headers).json() == []
        assert client.delete(f"/api/notifications/{note_id}", headers=headers).status_code == 404

    def test_requires_token(self, client):
        assert client.get("/api/notifications").status_code == 401
