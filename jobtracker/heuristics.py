"""Keyword/regex analysis of a job description, used when no model answers."""
from __future__ import annotations

import re

from jobtracker.models import NOT_SPECIFIED, AnalysisResult, Insights, Requirements

DEFAULT_SUMMARY_MAX_CHARS = 220
MAX_SKILLS = 10

SKILL_POOL: list[str] = [
    "communication", "customer service", "project management", "leadership",
    "sales", "negotiation", "problem solving", "time management", "teamwork",
    "excel", "accounting", "bookkeeping", "financial modelling", "quickbooks",
    "marketing", "seo", "social media", "nursing", "clinical", "patient care",
    "logistics", "supply chain", "warehouse", "electrician", "plumbing",
    "carpentry", "hospitality", "teaching", "research", "data analysis",
    "javascript", "typescript", "react", "next.js", "node", "python", "sql",
    "docker", "kubernetes", "aws", "photoshop", "figma",
]

# Phrases that introduce a list of skills; group 1 is the list.
_SKILL_CUES: list[re.Pattern[str]] = [
    re.compile(r"skills?:\s*([^\n]+)", re.IGNORECASE),
    re.compile(r"experience (?:with|in|using)\s*([^.\n]+)", re.IGNORECASE),
    re.compile(r"proficient in\s*([^.\n]+)", re.IGNORECASE),
    re.compile(r"knowledge of\s*([^.\n]+)", re.IGNORECASE),
]
_SKILL_SPLIT_RE = re.compile(r",|\band\b|/|&", re.IGNORECASE)

_EXPERIENCE_RE = re.compile(r"(\d+)\+?\s*(?:years?|yrs?)\b", re.IGNORECASE)
_DEGREE_RE = re.compile(r"bachelor|b\.sc|bsc|master|msc|ph\.?d|associate", re.IGNORECASE)
_SALARY_RE = re.compile(r"[$£€₦]\s?[\d,]+(?:\s?[-–]\s?[$£€₦]?\s?[\d,]+)?")
_REMOTE_RE = re.compile(r"remote|work from home|wfh", re.IGNORECASE)
_CITY_RE = re.compile(
    r"london|new york|san francisco|lagos|nigeria|hybrid|onsite|berlin|tokyo|singapore|dubai|abuja",
    re.IGNORECASE,
)
_SENIORITY_RE = re.compile(r"senior|lead|principal|director", re.IGNORECASE)

COMPANY_SIZES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"startup|early-stage|seed", re.IGNORECASE), "Startup (1-50)"),
    (re.compile(r"scaleup|scale-up|series b|growth", re.IGNORECASE), "Scale-up (50-250)"),
    (re.compile(r"enterprise|1000|large company|corporation", re.IGNORECASE), "Large (1000+)"),
]

INDUSTRY_TRENDS: list[tuple[re.Pattern[str], list[str]]] = [
    (
        re.compile(r"nurs|clinic|patient|medical", re.IGNORECASE),
        ["Telehealth adoption", "Regulatory compliance", "Clinical automation"],
    ),
    (
        re.compile(r"account|finance|audit|bookkeeping", re.IGNORECASE),
        ["Regulatory automation", "Data analytics", "Security and fraud prevention"],
    ),
    (
        re.compile(r"sales|retail|crm|store", re.IGNORECASE),
        ["E-commerce growth", "Omnichannel experience", "CRM personalization"],
    ),
]
DEFAULT_TRENDS: list[str] = [
    "Remote/hybrid work where possible",
    "AI/automation increasing productivity",
    "Focus on regulatory & sustainability concerns",
]

ACTION_ITEMS: list[str] = [
    "Tailor your resume to highlight the skills and keywords above.",
    "Include measurable results (KPIs, percentages).",
    "Prepare concise examples that demonstrate relevant experience.",
    "State remote/relocation preference if location matters.",
]


def summarize(text: str, max_chars: int = DEFAULT_SUMMARY_MAX_CHARS) -> str:
    clean = " ".join(text.split())
    if len(clean) <= max_chars:
        return clean
    return clean[:max_chars].strip() + "..."


def extract_skills(text: str) -> list[str]:
    """Cue-phrase captures first, then vocabulary hits; lower-cased, max 10."""
    found: list[str] = []
    for pattern in _SKILL_CUES:
        for m in pattern.finditer(text):
            for part in _SKILL_SPLIT_RE.split(m.group(1)):
                term = part.strip().rstrip(".").strip().lower()
                if term:
                    found.append(term)
    low = text.lower()
    found.extend(k for k in SKILL_POOL if k in low)
    return list(dict.fromkeys(found))[:MAX_SKILLS]


def extract_experience(text: str) -> str:
    m = _EXPERIENCE_RE.search(text)
    return f"{m.group(1)}+ years" if m else NOT_SPECIFIED


def extract_education(text: str) -> str:
    m = _DEGREE_RE.search(text)
    if not m:
        return NOT_SPECIFIED
    degree = m.group(0).lower()
    if degree in ("master", "msc") or degree.startswith("ph"):
        return "Masters or higher (preferred)"
    if degree == "associate":
        return "Associate or Bachelor's (preferred)"
    return "Bachelor's degree (or equivalent) preferred"


def extract_salary(text: str) -> str:
    m = _SALARY_RE.search(text)
    return m.group(0).rstrip(",").strip() if m else NOT_SPECIFIED


def extract_location(text: str) -> str:
    if _REMOTE_RE.search(text):
        return "Remote"
    m = _CITY_RE.search(text)
    return m.group(0) if m else NOT_SPECIFIED


def classify_company_size(text: str) -> str:
    for pattern, label in COMPANY_SIZES:
        if pattern.search(text):
            return label
    return NOT_SPECIFIED


def competition_level(text: str) -> str:
    return "Medium" if _SENIORITY_RE.search(text) else "High"


def infer_industry_trends(text: str) -> list[str]:
    for pattern, trends in INDUSTRY_TRENDS:
        if pattern.search(text):
            return list(trends)
    return list(DEFAULT_TRENDS)


def basic_analysis(text: str, summary_max_chars: int = DEFAULT_SUMMARY_MAX_CHARS) -> AnalysisResult:
    """Deterministic local analysis; empty input yields a blank result."""
    text = (text or "").strip()
    if not text:
        return AnalysisResult(summary="", provider="local", fallback=True)

    return AnalysisResult(
        summary=summarize(text, summary_max_chars),
        suggestedSkills=extract_skills(text),
        requirements=Requirements(
            experience=extract_experience(text),
            education=extract_education(text),
        ),
        insights=Insights(
            salaryRange=extract_salary(text),
            location=extract_location(text),
            companySize=classify_company_size(text),
            competitionLevel=competition_level(text),
            industryTrends=infer_industry_trends(text),
        ),
        actionItems=list(ACTION_ITEMS),
        provider="local",
        fallback=True,
    )
