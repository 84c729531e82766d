"""Streamlit UI for the job application tracker."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import streamlit as st

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from jobtracker.api_client import ApiError, TrackerClient
from jobtracker.config import load_settings
from jobtracker.log import get_logger
from jobtracker.models import JobStatus

log = get_logger(__name__)

# ── Constants ────────────────────────────────────────────────────────────

STATUS_COLORS: dict[str, str] = {
    "Applied": "#4a90d9",
    "Interviewing": "#f5a623",
    "Rejected": "#e74c3c",
    "Offer": "#27ae60",
    "Withdrawn": "#95a5a6",
}

PROVIDER_LABELS: dict[str, str] = {
    "primary": "xAI",
    "secondary": "OpenAI",
    "local": "local keyword analysis",
    "primary-degraded": "xAI (unreadable reply)",
    "secondary-degraded": "OpenAI (unreadable reply)",
}

_GLASS_CSS = """
<style>
[data-testid="stAppViewContainer"] {
    background: linear-gradient(135deg, #e8eaf6 0%, #f3e5f5 40%, #e0f2f1 100%);
}
[data-testid="stMetric"],
[data-testid="stForm"],
[data-testid="stExpander"] {
    background: rgba(255,255,255,0.6);
    backdrop-filter: blur(12px);
    -webkit-backdrop-filter: blur(12px);
    border-radius: 12px;
    border: 1px solid rgba(255,255,255,0.4);
    box-shadow: 0 4px 16px rgba(0,0,0,0.06);
}
[data-testid="stMetric"] { padding: 0.75rem 1rem; }
.status-pill {
    padding: 0.1rem 0.6rem; border-radius: 999px;
    color: white; font-size: 0.8rem; font-weight: 600;
}
h1, h2, h3 { color: #1a1a2e; }
</style>
"""

# ── Helpers ──────────────────────────────────────────────────────────────


@st.cache_resource
def _client() -> TrackerClient:
    return TrackerClient(load_settings().api_url)


def _load_jobs() -> list[dict[str, Any]]:
    try:
        return _client().list_jobs()
    except ApiError as exc:
        st.error(f"Could not load job applications: {exc}")
        return []


def _pill(status: str) -> str:
    color = STATUS_COLORS.get(status, "#7f8c8d")
    return f'<span class="status-pill" style="background:{color}">{status}</span>'


def _job_form(key: str, job: dict[str, Any] | None = None) -> dict[str, str] | None:
    """Render the add/edit form; return the submitted fields or None."""
    job = job or {}
    statuses = JobStatus.values()
    with st.form(key, clear_on_submit=not job):
        c1, c2 = st.columns(2)
        with c1:
            title = st.text_input("Job title *", value=job.get("jobTitle", ""))
            link = st.text_input("Application link *", value=job.get("applicationLink", ""),
                                 placeholder="https://...")
        with c2:
            company = st.text_input("Company *", value=job.get("companyName", ""))
            status = st.selectbox(
                "Status *",
                statuses,
                index=statuses.index(job["status"]) if job.get("status") in statuses else 0,
            )
        label = "Update application" if job else "Add application"
        if not st.form_submit_button(label, type="primary", use_container_width=True):
            return None
    return {"jobTitle": title, "companyName": company, "applicationLink": link, "status": status}


# ── Page: Applications ───────────────────────────────────────────────────


def page_applications() -> None:
    st.header("Job Applications")

    jobs = _load_jobs()

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total", len(jobs))
    c2.metric("Applied", sum(1 for j in jobs if j.get("status") == "Applied"))
    c3.metric("Interviewing", sum(1 for j in jobs if j.get("status") == "Interviewing"))
    c4.metric("Offers", sum(1 for j in jobs if j.get("status") == "Offer"))

    with st.expander("➕  Add a job application", expanded=not jobs):
        form = _job_form("add_job")
        if form:
            try:
                created = _client().create_job(form)
                st.success(f"Added {created['jobTitle']} @ {created['companyName']}")
                st.rerun()
            except ApiError as exc:
                st.error(str(exc))

    if not jobs:
        st.info("No job applications yet. Add your first one above.")
        return

    import pandas as pd

    df = pd.DataFrame(jobs)
    display_cols = ["jobTitle", "companyName", "status", "dateAdded", "applicationLink"]
    display_cols = [c for c in display_cols if c in df.columns]
    df["dateAdded"] = pd.to_datetime(df["dateAdded"], errors="coerce")

    st.dataframe(
        df[display_cols],
        use_container_width=True,
        column_config={
            "jobTitle": "Job Title",
            "companyName": "Company",
            "status": "Status",
            "dateAdded": st.column_config.DatetimeColumn("Date Added", format="YYYY-MM-DD"),
            "applicationLink": st.column_config.LinkColumn("Application Link"),
        },
        hide_index=True,
    )

    st.divider()
    st.subheader("Edit or delete")
    by_id = {j["id"]: j for j in jobs}
    selected = st.selectbox(
        "Application",
        list(by_id),
        format_func=lambda jid: f"{by_id[jid]['jobTitle']} @ {by_id[jid]['companyName']}",
    )
    if not selected:
        return
    job = by_id[selected]
    st.markdown(_pill(job.get("status", "")), unsafe_allow_html=True)

    form = _job_form(f"edit_{selected}", job)
    if form:
        try:
            _client().update_job(selected, form)
            st.success("Job application updated.")
            st.rerun()
        except ApiError as exc:
            st.error(str(exc))

    if st.session_state.get("confirm_delete") != selected:
        if st.button("🗑️ Delete application", use_container_width=True):
            st.session_state["confirm_delete"] = selected
            st.rerun()
        return

    st.warning(f"Delete **{job['jobTitle']}** at **{job['companyName']}**? This cannot be undone.")
    yes, no = st.columns(2)
    if no.button("Cancel", use_container_width=True):
        st.session_state.pop("confirm_delete", None)
        st.rerun()
    if yes.button("Yes, delete", type="primary", use_container_width=True):
        st.session_state.pop("confirm_delete", None)
        try:
            _client().delete_job(selected)
            st.success("Job application deleted.")
            st.rerun()
        except ApiError as exc:
            st.error(str(exc))


# ── Page: Analyzer ───────────────────────────────────────────────────────


def _render_analysis(result: dict[str, Any]) -> None:
    provider = result.get("provider", "local")
    if result.get("fallback"):
        st.warning(f"Produced by {PROVIDER_LABELS.get(provider, provider)} — no AI model answered.")
    else:
        st.caption(f"Analyzed by {PROVIDER_LABELS.get(provider, provider)}")

    st.subheader("Summary")
    st.write(result.get("summary") or "—")

    skills = result.get("suggestedSkills", [])
    if skills:
        st.subheader("Skills to highlight")
        st.markdown(" · ".join(f"`{s}`" for s in skills))

    reqs = result.get("requirements", {})
    ins = result.get("insights", {})
    c1, c2, c3 = st.columns(3)
    c1.metric("Experience", reqs.get("experience", "Not specified"))
    c2.metric("Location", ins.get("location", "Not specified"))
    c3.metric("Competition", ins.get("competitionLevel", "Not specified"))

    c1, c2, c3 = st.columns(3)
    c1.metric("Education", reqs.get("education", "Not specified"))
    c2.metric("Salary", ins.get("salaryRange", "Not specified"))
    c3.metric("Company size", ins.get("companySize", "Not specified"))

    for title, items in (
        ("Required", reqs.get("required", [])),
        ("Preferred", reqs.get("preferred", [])),
        ("Industry trends", ins.get("industryTrends", [])),
        ("Action items", result.get("actionItems", [])),
    ):
        if items:
            with st.expander(title, expanded=title == "Action items"):
                for item in items:
                    st.markdown(f"- {item}")


def page_analyzer() -> None:
    st.header("Job Description Analyzer")
    st.write("Paste a job description to get a summary, key skills and application tips.")

    with st.form("analyze"):
        text = st.text_area("Job description", height=260, max_chars=15_000)
        submitted = st.form_submit_button("Analyze", type="primary", use_container_width=True)

    if submitted:
        if not text.strip():
            st.error("Please paste a job description first.")
        else:
            with st.spinner("Analyzing job description…"):
                try:
                    st.session_state["analysis"] = _client().analyze(text)
                except ApiError as exc:
                    st.error(f"Analysis failed: {exc}")

    result = st.session_state.get("analysis")
    if result:
        st.divider()
        _render_analysis(result)


# ── Main ─────────────────────────────────────────────────────────────────


def _inject_css() -> None:
    st.markdown(_GLASS_CSS, unsafe_allow_html=True)


def _wrap_applications():
    _inject_css()
    page_applications()


def _wrap_analyzer():
    _inject_css()
    page_analyzer()


if __name__ == "__main__":
    pages = [
        st.Page(_wrap_applications, title="Applications", icon="📋", url_path="applications", default=True),
        st.Page(_wrap_analyzer, title="Analyzer", icon="🤖", url_path="analyzer"),
    ]
    st.navigation(pages).run()
