"""Shared fixtures: settings, fake providers, a fake clock and a Flask client."""
from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import pytest

os.environ.setdefault("LOG_TO_FILE", "false")
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from jobtracker.analyzer import FallbackOrchestrator  # noqa: E402
from jobtracker.availability import AvailabilityTracker  # noqa: E402
from jobtracker.config import Settings  # noqa: E402
from jobtracker.errors import ProviderError  # noqa: E402
from jobtracker.gateway import ProviderGateway  # noqa: E402
from jobtracker.providers.base import ChatProvider  # noqa: E402
from jobtracker.server import create_app  # noqa: E402
from jobtracker.store import JobStore  # noqa: E402

VALID_REPLY: dict[str, Any] = {
    "summary": "Backend engineer building Python APIs.",
    "suggestedSkills": ["Python", "SQL", "AWS"],
    "requirements": {
        "required": ["Python"],
        "preferred": ["Kubernetes"],
        "experience": "5+ years",
        "education": "Bachelor's degree",
    },
    "insights": {
        "salaryRange": "$90,000 - $110,000",
        "location": "Remote",
        "companySize": "Not specified",
        "competitionLevel": "Medium",
        "industryTrends": ["Cloud adoption"],
    },
    "actionItems": ["Quantify API performance work."],
}


class FakeProvider(ChatProvider):
    """Replays scripted replies; an Exception entry is raised instead of returned."""

    def __init__(self, name: str, label: str, replies: list[Any] | None = None) -> None:
        self.name = name
        self.label = label
        self.replies = list(replies or [])
        self.calls: list[bool] = []

    def complete(self, messages, *, json_mode=True):
        self.calls.append(json_mode)
        reply = self.replies.pop(0) if self.replies else VALID_REPLY
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def forbidden(provider: str = "primary") -> ProviderError:
    return ProviderError(provider, "Your team has no credits left", status=403)


def rate_limited(provider: str = "primary") -> ProviderError:
    return ProviderError(provider, "Too many requests", status=429)


def server_error(provider: str = "primary") -> ProviderError:
    return ProviderError(provider, "Internal server error", status=500)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def gateway(sleeps) -> ProviderGateway:
    return ProviderGateway(retries=1, base_delay=0.5, sleep=sleeps.append)


@pytest.fixture
def availability(clock) -> AvailabilityTracker:
    return AvailabilityTracker(disable_seconds=600, clock=clock)


@pytest.fixture
def make_orchestrator(gateway, availability):
    def _make(*providers: ChatProvider) -> FallbackOrchestrator:
        return FallbackOrchestrator(providers, gateway=gateway, availability=availability)

    return _make


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(jobs_file=tmp_path / "data" / "jobs.json")


@pytest.fixture
def store(settings) -> JobStore:
    return JobStore(settings.jobs_file)


@pytest.fixture
def client(settings, store, make_orchestrator):
    app = create_app(settings, store=store, orchestrator=make_orchestrator())
    app.config["TESTING"] = True
    return app.test_client()
