"""HTTP client for the tracker API, used by the Streamlit dashboard."""
from __future__ import annotations

from typing import Any

import requests

from jobtracker.log import get_logger

log = get_logger(__name__)


class ApiError(Exception):
    """The API answered ``success: false`` or could not be reached."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class TrackerClient:
    def __init__(self, base_url: str, *, timeout: float = 60.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            r = requests.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            log.warning("%s %s failed: %s", method, path, exc)
            raise ApiError(f"Could not reach the tracker API at {self.base_url}") from exc
        try:
            payload = r.json()
        except ValueError:
            raise ApiError(f"Unexpected response from {path} (HTTP {r.status_code})", r.status_code)
        if not isinstance(payload, dict):
            raise ApiError(f"Unexpected response from {path} (HTTP {r.status_code})", r.status_code)
        if not r.ok or not payload.get("success", False):
            raise ApiError(payload.get("error") or f"HTTP {r.status_code}", r.status_code)
        return payload

    def list_jobs(self) -> list[dict[str, Any]]:
        return self._request("GET", "/api/jobs").get("data") or []

    def create_job(self, form: dict[str, str]) -> dict[str, Any]:
        return self._request("POST", "/api/jobs", json=form)["data"]

    def update_job(self, job_id: str, form: dict[str, str]) -> dict[str, Any]:
        return self._request("PUT", f"/api/jobs/{job_id}", json=form)["data"]

    def delete_job(self, job_id: str) -> None:
        self._request("DELETE", f"/api/jobs/{job_id}")

    def analyze(self, job_description: str | list[str]) -> Any:
        """One result dict for a single description, a list for several."""
        return self._request("POST", "/api/analyze", json={"jobDescription": job_description})["data"]
