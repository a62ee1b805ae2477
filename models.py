"""
models.py — Data models for the Job Apply pipeline.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


def _pick(data: dict, snake: str, camel: str, default: Any = None) -> Any:
    """Read a payload key in snake_case, falling back to the camelCase REST name."""
    if snake in data:
        return data[snake]
    return data.get(camel, default)


@dataclass(frozen=True)
class ResumeFile:
    """Uploaded resume: file name plus base64-encoded contents."""
    name: str
    data: str = ""


@dataclass(frozen=True)
class CandidateProfile:
    resume_summary: str = ""
    resume_file: Optional[ResumeFile] = None
    preferred_companies: list[str] = field(default_factory=list)
    job_preference: str = ""
    salary_range: str = ""
    looking_for_internships: bool = False


@dataclass(frozen=True)
class ApplicationRequest:
    """One application run, immutable for the duration of the run."""
    job_title: str
    job_board_url: str
    application_count: int
    profile: CandidateProfile = field(default_factory=CandidateProfile)
    requester_identity: str = ""

    def __post_init__(self):
        if self.application_count is None or int(self.application_count) < 0:
            raise ValueError(f"application_count must be >= 0, got {self.application_count!r}")

    @classmethod
    def from_dict(cls, data: dict) -> "ApplicationRequest":
        """Build a request from a payload (snake_case or the original camelCase keys)."""
        profile_data = data.get("profile") or data.get("candidate_profile") or data

        resume_file = None
        raw_file = _pick(profile_data, "resume_file", "resumeFile")
        file_name = _pick(profile_data, "resume_file_name", "resumeFileName")
        if isinstance(raw_file, dict) and raw_file.get("name"):
            resume_file = ResumeFile(name=raw_file["name"], data=raw_file.get("data", ""))
        elif file_name:
            resume_file = ResumeFile(
                name=file_name,
                data=_pick(profile_data, "resume_file_data", "resumeFileData", "") or "",
            )

        profile = CandidateProfile(
            resume_summary=_pick(profile_data, "resume_summary", "resumeSummary", "") or "",
            resume_file=resume_file,
            preferred_companies=list(_pick(profile_data, "preferred_companies", "preferredCompanies", []) or []),
            job_preference=_pick(profile_data, "job_preference", "jobPreference", "") or "",
            salary_range=_pick(profile_data, "salary_range", "salaryRange", "") or "",
            looking_for_internships=bool(
                _pick(profile_data, "looking_for_internships", "lookingForInternships", False)
            ),
        )

        return cls(
            job_title=_pick(data, "job_title", "jobTitle", "") or "",
            job_board_url=_pick(data, "job_board_url", "jobBoardUrl", "") or "",
            application_count=int(_pick(data, "application_count", "applicationCount", 0) or 0),
            profile=profile,
            requester_identity=_pick(data, "requester_identity", "userEmail", "") or "",
        )


@dataclass(frozen=True)
class Posting:
    """A job link extracted from a listing page."""
    url: str
    display_text: str


@dataclass(frozen=True)
class FitScore:
    """Score in [0, 1] plus the scorer's justification."""
    score: float
    reasoning: str

    def __post_init__(self):
        if not 0.0 <= self.score <= 1.0:
            raise ValueError(f"score must be within [0, 1], got {self.score}")


class MatchStatus(Enum):
    APPLIED = "APPLIED"
    SKIPPED_LOW_SCORE = "SKIPPED_LOW_SCORE"
    SKIPPED_UNRELATED = "SKIPPED_UNRELATED"
    SKIPPED_PROMPT = "SKIPPED_PROMPT"
    ERROR = "ERROR"

    @property
    def carries_score(self) -> bool:
        return self in (MatchStatus.APPLIED, MatchStatus.SKIPPED_LOW_SCORE, MatchStatus.SKIPPED_PROMPT)


@dataclass(frozen=True)
class MatchOutcome:
    """
    Terminal decision for one posting.
    Use the per-status constructors; score-bearing statuses must carry a score,
    the others must not.
    """
    url: str
    display_text: str
    status: MatchStatus
    reason: str
    score: Optional[float] = None

    def __post_init__(self):
        if not self.reason:
            raise ValueError("reason is required for every outcome")
        if self.status.carries_score and self.score is None:
            raise ValueError(f"{self.status.value} outcome requires a score")
        if not self.status.carries_score and self.score is not None:
            raise ValueError(f"{self.status.value} outcome cannot carry a score")

    @classmethod
    def applied(cls, posting: Posting, fit: FitScore) -> "MatchOutcome":
        return cls(posting.url, posting.display_text, MatchStatus.APPLIED, fit.reasoning, fit.score)

    @classmethod
    def low_score(cls, posting: Posting, fit: FitScore) -> "MatchOutcome":
        return cls(posting.url, posting.display_text, MatchStatus.SKIPPED_LOW_SCORE, fit.reasoning, fit.score)

    @classmethod
    def needs_human(cls, posting: Posting, fit: FitScore, reason: str) -> "MatchOutcome":
        return cls(posting.url, posting.display_text, MatchStatus.SKIPPED_PROMPT, reason, fit.score)

    @classmethod
    def unrelated(cls, posting: Posting) -> "MatchOutcome":
        return cls(posting.url, posting.display_text, MatchStatus.SKIPPED_UNRELATED,
                   "Did not match job title keywords")

    @classmethod
    def error(cls, url: str, display_text: str, reason: str) -> "MatchOutcome":
        return cls(url, display_text, MatchStatus.ERROR, reason)

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "display_text": self.display_text,
            "status": self.status.value,
            "reason": self.reason,
            "score": self.score,
        }


@dataclass(frozen=True)
class ApplicationResult:
    """Outcome of one run. Counters are always tallied from `matches`."""
    job_board_url: str
    job_title: str
    requested_applications: int
    matches: tuple[MatchOutcome, ...] = ()

    def _count(self, status: MatchStatus) -> int:
        return sum(1 for m in self.matches if m.status is status)

    @property
    def applied_count(self) -> int:
        return self._count(MatchStatus.APPLIED)

    @property
    def skipped_low_score(self) -> int:
        return self._count(MatchStatus.SKIPPED_LOW_SCORE)

    @property
    def skipped_prompts(self) -> int:
        return self._count(MatchStatus.SKIPPED_PROMPT)

    @property
    def skipped_unrelated(self) -> int:
        return self._count(MatchStatus.SKIPPED_UNRELATED)

    @property
    def error_count(self) -> int:
        return self._count(MatchStatus.ERROR)

    def to_dict(self) -> dict:
        return {
            "job_board_url": self.job_board_url,
            "job_title": self.job_title,
            "requested_applications": self.requested_applications,
            "applied_count": self.applied_count,
            "skipped_low_score": self.skipped_low_score,
            "skipped_prompts": self.skipped_prompts,
            "skipped_unrelated": self.skipped_unrelated,
            "error_count": self.error_count,
            "matches": [m.to_dict() for m in self.matches],
        }


@dataclass(frozen=True)
class ApplicationHistoryRecord:
    """Durable record of one attempted posting, owned by a single user."""
    owner: str
    job_title: str
    job_url: str
    status: str
    match_reason: str = ""
    match_score: Optional[float] = None
    company_name: Optional[str] = None
    resume_id: Optional[str] = None
    applied_at: datetime = field(default_factory=datetime.now)
    id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "owner": self.owner,
            "job_title": self.job_title,
            "company_name": self.company_name,
            "job_url": self.job_url,
            "status": self.status,
            "match_score": self.match_score,
            "match_reason": self.match_reason,
            "applied_at": self.applied_at.isoformat(),
            "resume_id": self.resume_id,
        }
