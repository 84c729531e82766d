from types import SimpleNamespace

import httpx
import openai
import pytest

from jobtracker.availability import AvailabilityTracker
from jobtracker.config import Settings
from jobtracker.errors import ProviderError, is_permanent
from jobtracker.providers import OpenAICompatibleProvider, get_providers


class FakeCompletions:
    def __init__(self, outcome) -> None:
        self.outcome = outcome
        self.kwargs: list[dict] = []

    def create(self, **kwargs):
        self.kwargs.append(kwargs)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def _provider(outcome) -> tuple[OpenAICompatibleProvider, FakeCompletions]:
    p = OpenAICompatibleProvider("primary", "xai", api_key="k", model="grok-4", base_url="https://api.x.ai/v1")
    completions = FakeCompletions(outcome)
    p._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return p, completions


def _reply(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def test_get_providers_order():
    assert get_providers(Settings()) == []

    both = get_providers(Settings(xai_api_key="a", openai_api_key="b"))
    assert [(p.name, p.label) for p in both] == [("primary", "xai"), ("secondary", "openai")]

    only_openai = get_providers(Settings(openai_api_key="b"))
    assert [p.name for p in only_openai] == ["secondary"]


def test_complete_json_mode():
    p, completions = _provider(_reply('{"summary": "ok"}'))
    assert p.complete([{"role": "user", "content": "x"}]) == '{"summary": "ok"}'
    assert completions.kwargs[0]["response_format"] == {"type": "json_object"}
    assert completions.kwargs[0]["model"] == "grok-4"


def test_complete_plain_mode_and_empty_reply():
    p, completions = _provider(_reply(None))
    assert p.complete([], json_mode=False) == "{}"
    assert "response_format" not in completions.kwargs[0]


def test_status_error_wrapped():
    request = httpx.Request("POST", "https://api.x.ai/v1/chat/completions")
    response = httpx.Response(403, request=request)
    err = openai.PermissionDeniedError(
        "forbidden", response=response, body={"error": {"message": "Your team has no credits"}}
    )
    p, _ = _provider(err)
    with pytest.raises(ProviderError) as exc_info:
        p.complete([])
    assert exc_info.value.status == 403
    assert exc_info.value.message == "Your team has no credits"
    assert is_permanent(exc_info.value)


def test_availability_window():
    now = [100.0]
    tracker = AvailabilityTracker(disable_seconds=60, clock=lambda: now[0])
    assert tracker.is_available("primary")
    assert tracker.disable("primary") == 160.0
    assert not tracker.is_available("primary")
    assert tracker.is_available("secondary")
    now[0] = 160.0
    assert tracker.is_available("primary")
    tracker.disable("primary", seconds=5)
    tracker.reset()
    assert tracker.is_available("primary")
