"""
Flask HTTP API for the job tracker.

Routes:
  /api/jobs          GET  – list job applications (newest first)
                     POST – add a job application
  /api/jobs/<id>     GET/PUT/DELETE – read / update / delete one application
  /api/analyze       GET  – local analysis of ?jobDescription=... (one or many)
                     POST – analyze {"jobDescription": "..." | [...]}
"""
from __future__ import annotations

import uuid
from typing import Any
from urllib.parse import urlparse

from flask import Blueprint, Flask, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from jobtracker.analyzer import FallbackOrchestrator
from jobtracker.config import Settings, load_settings
from jobtracker.log import get_logger
from jobtracker.models import JobRecord, JobStatus
from jobtracker.providers import get_providers
from jobtracker.store import JobStore, utc_now

log = get_logger(__name__)

jobs_bp = Blueprint("jobs", __name__, url_prefix="/api/jobs")
analyze_bp = Blueprint("analyze", __name__, url_prefix="/api")

USAGE = 'Send POST { jobDescription: "..." } or GET ?jobDescription=...'


def _store() -> JobStore:
    return current_app.extensions["jobtracker.store"]


def _orchestrator() -> FallbackOrchestrator:
    return current_app.extensions["jobtracker.orchestrator"]


def _fail(error: str, status: int):
    return jsonify({"success": False, "error": error}), status


def _valid_url(value: str) -> bool:
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def validate_job_form(body: Any) -> tuple[dict[str, str] | None, str | None]:
    """Return (cleaned fields, None) or (None, error message)."""
    if not isinstance(body, dict):
        return None, "All fields are required"
    cleaned = {k: str(body.get(k) or "").strip() for k in ("jobTitle", "companyName", "applicationLink", "status")}
    if not all(cleaned.values()):
        return None, "All fields are required"
    if cleaned["status"] not in JobStatus.values():
        return None, f"Status must be one of: {', '.join(JobStatus.values())}"
    if not _valid_url(cleaned["applicationLink"]):
        return None, "Please provide a valid URL for the application link"
    return cleaned, None


# ── Jobs ─────────────────────────────────────────────────────────────────


@jobs_bp.errorhandler(Exception)
def _jobs_error(exc: Exception):
    if isinstance(exc, HTTPException):
        return exc
    log.error("Job route failed: %s", exc)
    return _fail("Internal Server Error", 500)


@jobs_bp.route("", methods=["GET"])
def list_jobs():
    jobs = sorted(_store().read_jobs(), key=lambda j: j.dateAdded, reverse=True)
    return jsonify({
        "success": True,
        "data": [j.to_dict() for j in jobs],
        "message": f"Retrieved {len(jobs)} job applications",
    })


@jobs_bp.route("", methods=["POST"])
def create_job():
    fields, error = validate_job_form(request.get_json(silent=True))
    if error:
        return _fail(error, 400)
    job = JobRecord(id=str(uuid.uuid4()), dateAdded=utc_now(), **fields)
    _store().add_job(job)
    log.info("Added job %s @ %s", job.jobTitle, job.companyName)
    return jsonify({
        "success": True,
        "data": job.to_dict(),
        "message": "Job application added successfully",
    }), 201


@jobs_bp.route("/<job_id>", methods=["GET"])
def get_job(job_id: str):
    job = _store().get_job(job_id)
    if job is None:
        return _fail("Job application not found", 404)
    return jsonify({"success": True, "data": job.to_dict(), "message": "Job application retrieved successfully"})


@jobs_bp.route("/<job_id>", methods=["PUT"])
def update_job(job_id: str):
    fields, error = validate_job_form(request.get_json(silent=True))
    if error:
        return _fail(error, 400)
    job = _store().update_job(job_id, fields)
    if job is None:
        return _fail("Job application not found", 404)
    return jsonify({"success": True, "data": job.to_dict(), "message": "Job application updated successfully"})


@jobs_bp.route("/<job_id>", methods=["DELETE"])
def delete_job(job_id: str):
    if not _store().delete_job(job_id):
        return _fail("Job application not found", 404)
    return jsonify({"success": True, "data": None, "message": "Job application deleted successfully"})


# ── Analysis ─────────────────────────────────────────────────────────────


def extract_job_descriptions() -> list[str] | None:
    """Descriptions from the JSON body, the query string, or a raw text body."""
    body = request.get_json(silent=True)
    if isinstance(body, dict) and body.get("jobDescription") is not None:
        value = body["jobDescription"]
        if isinstance(value, list):
            return [str(v) for v in value]
        return [str(value)]
    values = request.args.getlist("jobDescription")
    if values:
        return values
    if isinstance(body, str) and body.strip():
        return [body]
    # Malformed JSON is rejected, not analyzed as text.
    if body is None and not request.is_json:
        raw = request.get_data(as_text=True)
        if raw.strip():
            return [raw]
    return None


@analyze_bp.route("/analyze", methods=["GET"])
def analyze_get():
    jobs = extract_job_descriptions()
    if not jobs:
        return jsonify({"success": True, "message": USAGE})
    try:
        results = _orchestrator().analyze_many(jobs, local_only=True)
    except Exception as exc:
        return _unexpected(exc, jobs[0])
    return jsonify({
        "success": True,
        "data": [r.to_dict() for r in results],
        "fallback": True,
        "note": "GET -> used local analysis",
    })


@analyze_bp.route("/analyze", methods=["POST"])
def analyze_post():
    jobs = extract_job_descriptions() or []
    if not jobs:
        return _fail("jobDescription is required (string or array)", 400)
    try:
        if len(jobs) == 1:
            result = _orchestrator().analyze(jobs[0])
            return jsonify({"success": True, "data": result.to_dict(), "fallback": result.fallback})
        results = _orchestrator().analyze_many(jobs)
    except Exception as exc:
        return _unexpected(exc, jobs[0])
    return jsonify({
        "success": True,
        "data": [r.to_dict() for r in results],
        "fallback": True,
        "note": "Batch -> used local analysis",
    })


def _unexpected(exc: Exception, text: str):
    log.error("/api/analyze unexpected error: %s", exc)
    fallback = _orchestrator().local(text)
    return jsonify({
        "success": True,
        "data": fallback.to_dict(),
        "fallback": True,
        "message": "Unexpected server error; returned local fallback.",
    })


# ── App factory ──────────────────────────────────────────────────────────


def create_app(
    settings: Settings | None = None,
    *,
    store: JobStore | None = None,
    orchestrator: FallbackOrchestrator | None = None,
) -> Flask:
    settings = settings or load_settings()
    app = Flask(__name__)
    app.json.sort_keys = False
    app.extensions["jobtracker.settings"] = settings
    app.extensions["jobtracker.store"] = store or JobStore(settings.jobs_file)
    app.extensions["jobtracker.orchestrator"] = orchestrator or FallbackOrchestrator.from_settings(
        settings, get_providers(settings)
    )
    app.register_blueprint(jobs_bp)
    app.register_blueprint(analyze_bp)

    @app.errorhandler(405)
    def _method_not_allowed(exc):
        return _fail("Method not allowed", 405)

    @app.errorhandler(404)
    def _not_found(exc):
        return _fail("Not found", 404)

    return app
