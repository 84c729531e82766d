import pytest
import requests

from jobtracker import api_client
from jobtracker.api_client import ApiError, TrackerClient


class FakeResponse:
    def __init__(self, status_code: int, payload) -> None:
        self.status_code = status_code
        self._payload = payload

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture
def calls(monkeypatch):
    recorded: list[tuple] = []
    replies: list[FakeResponse] = []

    def fake_request(method, url, timeout=None, **kwargs):
        recorded.append((method, url, kwargs))
        return replies.pop(0)

    monkeypatch.setattr(api_client.requests, "request", fake_request)
    return recorded, replies


def test_list_and_create(calls):
    recorded, replies = calls
    replies.append(FakeResponse(200, {"success": True, "data": [{"id": "1"}]}))
    replies.append(FakeResponse(201, {"success": True, "data": {"id": "2"}}))

    client = TrackerClient("http://tracker.local/")
    assert client.list_jobs() == [{"id": "1"}]
    assert client.create_job({"jobTitle": "x"}) == {"id": "2"}
    assert recorded[0][:2] == ("GET", "http://tracker.local/api/jobs")
    assert recorded[1] == ("POST", "http://tracker.local/api/jobs", {"json": {"jobTitle": "x"}})


def test_update_delete_analyze_paths(calls):
    recorded, replies = calls
    for _ in range(3):
        replies.append(FakeResponse(200, {"success": True, "data": {"ok": 1}}))
    client = TrackerClient("http://t")
    client.update_job("abc", {"status": "Offer"})
    client.delete_job("abc")
    client.analyze(["one", "two"])
    assert [(m, u) for m, u, _ in recorded] == [
        ("PUT", "http://t/api/jobs/abc"),
        ("DELETE", "http://t/api/jobs/abc"),
        ("POST", "http://t/api/analyze"),
    ]
    assert recorded[2][2] == {"json": {"jobDescription": ["one", "two"]}}


def test_error_envelope_raises(calls):
    _, replies = calls
    replies.append(FakeResponse(400, {"success": False, "error": "All fields are required"}))
    with pytest.raises(ApiError) as exc_info:
        TrackerClient("http://t").create_job({})
    assert str(exc_info.value) == "All fields are required"
    assert exc_info.value.status == 400


def test_non_json_response_raises(calls):
    _, replies = calls
    replies.append(FakeResponse(502, ValueError("no json")))
    with pytest.raises(ApiError):
        TrackerClient("http://t").list_jobs()


def test_connection_error_raises(monkeypatch):
    def down(*args, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(api_client.requests, "request", down)
    with pytest.raises(ApiError, match="Could not reach"):
        TrackerClient("http://t").list_jobs()
