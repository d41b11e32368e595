import pytest
import requests

from notifications.client import NotificationClient, NotificationError
from notifications.messages import PushMessage, format_datetime, format_time
from notifications.sink import HttpNotificationSink, InMemoryNotificationSink, deliver_safely

from .conftest import NOW


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._payload = payload or {}
        self.content = b"{}" if payload is not None else b""

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse()
        self.error = error
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response


def test_client_requires_base_url(monkeypatch):
    monkeypatch.setattr("notifications.client.BASE_URL", None)

    with pytest.raises(ValueError):
        NotificationClient()


def test_push_and_sms_requests():
    session = FakeSession(FakeResponse(200, {"id": "n1"}))
    client = NotificationClient(base_url="http://gateway/", timeout=2, api_key="k", session=session)

    assert client.send_push("u1", "Hi", "Body", {"ride_id": "r1"}) == {"id": "n1"}
    client.send_sms("+91 1", "hello")

    push, sms = session.calls
    assert push["url"] == "http://gateway/push"
    assert push["json"] == {"user_id": "u1", "title": "Hi", "body": "Body", "data": {"ride_id": "r1"}}
    assert push["timeout"] == 2
    assert push["headers"] == {"Authorization": "Bearer k"}
    assert sms["url"] == "http://gateway/sms"
    assert sms["json"] == {"to": "+91 1", "message": "hello"}


def test_client_wraps_transport_errors():
    session = FakeSession(error=requests.Timeout("slow"))
    client = NotificationClient(base_url="http://gateway", session=session)

    with pytest.raises(NotificationError):
        client.send_sms("+91 1", "hello")


def test_client_rejects_error_status():
    client = NotificationClient(base_url="http://gateway", session=FakeSession(FakeResponse(503)))

    with pytest.raises(NotificationError):
        client.send_push("u1", "Hi", "Body")


def test_http_sink_forwards_to_client():
    session = FakeSession()
    sink = HttpNotificationSink(NotificationClient(base_url="http://gateway", session=session))

    sink.notify_user("u1", PushMessage("Title", "Body", {"type": "reminder"}))

    assert session.calls[0]["json"]["data"] == {"type": "reminder"}


def test_deliver_safely_swallows_failures():
    def broken(*args):
        raise NotificationError("down")

    assert deliver_safely(broken, "u1") is False
    assert deliver_safely(lambda *args: None, "u1") is True


def test_in_memory_inbox():
    sink = InMemoryNotificationSink()
    sink.notify_user("u1", PushMessage("A", "a"))
    sink.notify_user("u1", PushMessage("B", "b"))
    sink.notify_user("u2", PushMessage("C", "c"))

    assert len(sink.inbox("u1", unread_only=True)) == 2
    assert sink.mark_all_read("u1") == 2
    assert sink.inbox("u1", unread_only=True) == []
    assert len(sink.inbox("u2", unread_only=True)) == 1


def test_time_formatting():
    assert format_time(NOW) == "12:00 PM"
    assert format_datetime(NOW) == "Mon, Oct 19, 12:00 PM"
