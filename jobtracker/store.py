"""Persist job applications as a JSON array with atomic whole-file rewrites."""
from __future__ import annotations

import fcntl
import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jobtracker.errors import StorageError
from jobtracker.log import get_logger
from jobtracker.models import JobRecord

log = get_logger(__name__)


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JobStore:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock_path = self.path.with_suffix(self.path.suffix + ".lock")

    def ensure(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self._write([])
            log.info("Created job store → %s", self.path.name)

    def read_jobs(self) -> list[JobRecord]:
        try:
            return self._load()
        except StorageError as exc:
            log.error("%s", exc)
            return []

    def _load(self) -> list[JobRecord]:
        """Read the file, raising StorageError when it cannot be parsed."""
        try:
            self.ensure()
            with open(self.path, "r", encoding="utf-8") as f:
                _lock(f, exclusive=False)
                try:
                    data = json.load(f)
                finally:
                    _unlock(f)
        except (OSError, ValueError) as exc:
            raise StorageError(f"Error reading jobs file {self.path}: {exc}") from exc
        if not isinstance(data, list):
            raise StorageError(f"Jobs file {self.path} does not hold a list")
        return [JobRecord.from_dict(d) for d in data if isinstance(d, dict)]

    def write_jobs(self, jobs: list[JobRecord]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._write([j.to_dict() for j in jobs])
        except OSError as exc:
            log.error("Error writing jobs file %s: %s", self.path, exc)
            raise StorageError("Failed to save jobs data") from exc

    def _write(self, payload: list[dict[str, Any]]) -> None:
        with open(self._lock_path, "a", encoding="utf-8") as lock_f:
            _lock(lock_f)
            try:
                fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".jobs-", suffix=".tmp")
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as f:
                        json.dump(payload, f, indent=2)
                    os.replace(tmp, self.path)
                except BaseException:
                    Path(tmp).unlink(missing_ok=True)
                    raise
            finally:
                _unlock(lock_f)

    def add_job(self, job: JobRecord) -> JobRecord:
        jobs = self._load()
        jobs.append(job)
        self.write_jobs(jobs)
        log.debug("Added %s @ %s [%s]", job.jobTitle, job.companyName, job.status)
        return job

    def get_job(self, job_id: str) -> JobRecord | None:
        for job in self.read_jobs():
            if job.id == job_id:
                return job
        return None

    def update_job(self, job_id: str, fields: dict[str, Any]) -> JobRecord | None:
        """Merge *fields* into the record and stamp ``dateUpdated``."""
        jobs = self._load()
        for i, job in enumerate(jobs):
            if job.id != job_id:
                continue
            merged = {**job.to_dict(), **fields, "id": job.id, "dateUpdated": utc_now()}
            jobs[i] = JobRecord.from_dict(merged)
            self.write_jobs(jobs)
            log.debug("Updated %s → %s", job_id, jobs[i].status)
            return jobs[i]
        return None

    def delete_job(self, job_id: str) -> bool:
        jobs = self._load()
        remaining = [j for j in jobs if j.id != job_id]
        if len(remaining) == len(jobs):
            return False
        self.write_jobs(remaining)
        log.debug("Deleted %s", job_id)
        return True
