import pytest
from streamlit.testing.v1 import AppTest

import app

JOB = {
    "id": "job-1",
    "jobTitle": "Platform Engineer",
    "companyName": "Initech",
    "applicationLink": "https://initech.example/careers/42",
    "status": "Applied",
    "dateAdded": "2024-05-01T10:00:00.000Z",
}


class FakeClient:
    def __init__(self) -> None:
        self.jobs = [dict(JOB)]
        self.deleted: list[str] = []

    def list_jobs(self):
        return list(self.jobs)

    def delete_job(self, job_id):
        self.deleted.append(job_id)
        self.jobs = [j for j in self.jobs if j["id"] != job_id]


def _applications_page():
    import app

    app.page_applications()


@pytest.fixture
def fake_client(monkeypatch):
    fake = FakeClient()
    monkeypatch.setattr(app, "_client", lambda: fake)
    return fake


def _click(at, label):
    next(b for b in at.button if b.label == label).click().run()


def test_delete_asks_for_confirmation(fake_client):
    at = AppTest.from_function(_applications_page, default_timeout=10)
    at.run()
    _click(at, "🗑️ Delete application")
    assert fake_client.deleted == []
    assert "Platform Engineer" in at.warning[0].value

    _click(at, "Yes, delete")
    assert fake_client.deleted == ["job-1"]


def test_delete_can_be_cancelled(fake_client):
    at = AppTest.from_function(_applications_page, default_timeout=10)
    at.run()
    _click(at, "🗑️ Delete application")
    _click(at, "Cancel")
    assert fake_client.deleted == []
    assert not at.warning
    assert any(b.label == "🗑️ Delete application" for b in at.button)
