"""Data models for job records and job-description analyses."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

NOT_SPECIFIED = "Not specified"
COMPETITION_LEVELS: tuple[str, ...] = ("Low", "Medium", "High")


class JobStatus(str, Enum):
    APPLIED = "Applied"
    INTERVIEWING = "Interviewing"
    REJECTED = "Rejected"
    OFFER = "Offer"
    WITHDRAWN = "Withdrawn"

    @classmethod
    def values(cls) -> list[str]:
        return [s.value for s in cls]


@dataclass
class JobRecord:
    id: str
    jobTitle: str
    companyName: str
    applicationLink: str
    status: str
    dateAdded: str
    dateUpdated: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d = {
            "id": self.id,
            "jobTitle": self.jobTitle,
            "companyName": self.companyName,
            "applicationLink": self.applicationLink,
            "status": self.status,
            "dateAdded": self.dateAdded,
        }
        if self.dateUpdated:
            d["dateUpdated"] = self.dateUpdated
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JobRecord:
        return cls(
            id=str(data.get("id", "")),
            jobTitle=str(data.get("jobTitle", "")),
            companyName=str(data.get("companyName", "")),
            applicationLink=str(data.get("applicationLink", "")),
            status=str(data.get("status", JobStatus.APPLIED.value)),
            dateAdded=str(data.get("dateAdded", "")),
            dateUpdated=data.get("dateUpdated") or None,
        )


@dataclass
class Requirements:
    required: list[str] = field(default_factory=list)
    preferred: list[str] = field(default_factory=list)
    experience: str = NOT_SPECIFIED
    education: str = NOT_SPECIFIED


@dataclass
class Insights:
    salaryRange: str = NOT_SPECIFIED
    location: str = NOT_SPECIFIED
    companySize: str = NOT_SPECIFIED
    competitionLevel: str = NOT_SPECIFIED
    industryTrends: list[str] = field(default_factory=list)


@dataclass
class AnalysisResult:
    summary: str = NOT_SPECIFIED
    suggestedSkills: list[str] = field(default_factory=list)
    requirements: Requirements = field(default_factory=Requirements)
    insights: Insights = field(default_factory=Insights)
    actionItems: list[str] = field(default_factory=list)
    provider: str = "local"
    fallback: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "suggestedSkills": list(self.suggestedSkills),
            "requirements": {
                "required": list(self.requirements.required),
                "preferred": list(self.requirements.preferred),
                "experience": self.requirements.experience,
                "education": self.requirements.education,
            },
            "insights": {
                "salaryRange": self.insights.salaryRange,
                "location": self.insights.location,
                "companySize": self.insights.companySize,
                "competitionLevel": self.insights.competitionLevel,
                "industryTrends": list(self.insights.industryTrends),
            },
            "actionItems": list(self.actionItems),
            "provider": self.provider,
            "fallback": self.fallback,
        }

    @classmethod
    def from_model_output(cls, data: dict[str, Any]) -> AnalysisResult:
        """Coerce a model's JSON reply into a fully-populated result.

        Missing keys and values of the wrong type fall back to the defaults,
        so the returned object always has every field set.
        """
        reqs = data.get("requirements")
        reqs = reqs if isinstance(reqs, dict) else {}
        ins = data.get("insights")
        ins = ins if isinstance(ins, dict) else {}

        competition = _text(ins.get("competitionLevel")).capitalize()
        if competition not in COMPETITION_LEVELS:
            competition = NOT_SPECIFIED

        return cls(
            summary=_text(data.get("summary")),
            suggestedSkills=_text_list(data.get("suggestedSkills")),
            requirements=Requirements(
                required=_text_list(reqs.get("required")),
                preferred=_text_list(reqs.get("preferred")),
                experience=_text(reqs.get("experience")),
                education=_text(reqs.get("education")),
            ),
            insights=Insights(
                salaryRange=_text(ins.get("salaryRange")),
                location=_text(ins.get("location")),
                companySize=_text(ins.get("companySize")),
                competitionLevel=competition,
                industryTrends=_text_list(ins.get("industryTrends")),
            ),
            actionItems=_text_list(data.get("actionItems")),
            fallback=False,
        )


def _text(value: Any) -> str:
    if value is None:
        return NOT_SPECIFIED
    s = str(value).strip()
    return s or NOT_SPECIFIED


def _text_list(value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    return [str(v).strip() for v in value if v is not None and str(v).strip()]
