"""
history.py — Projects a finished run into per-user application history.
Pure sink/query surface: it never changes how postings were classified.
"""

from datetime import datetime
from typing import Iterable, Optional

import database
from config import HISTORY_RECORD_STATUSES
from models import ApplicationHistoryRecord, ApplicationRequest, ApplicationResult, MatchOutcome, MatchStatus
from monitoring import get_logger

logger = get_logger("history")


def _match_company(display_text: str, preferred_companies: list[str]) -> Optional[str]:
    """First preferred company named in the posting text, if any."""
    text = (display_text or "").lower()
    for company in preferred_companies:
        if company and company.lower() in text:
            return company
    return None


def to_history_record(
    request: ApplicationRequest,
    outcome: MatchOutcome,
    applied_at: Optional[datetime] = None,
) -> ApplicationHistoryRecord:
    profile = request.profile
    return ApplicationHistoryRecord(
        owner=request.requester_identity,
        job_title=outcome.display_text or request.job_title,
        company_name=_match_company(outcome.display_text, profile.preferred_companies),
        job_url=outcome.url,
        status=outcome.status.value,
        match_score=outcome.score,
        match_reason=outcome.reason,
        applied_at=applied_at or datetime.now(),
        resume_id=profile.resume_file.name if profile.resume_file else None,
    )


def build_history_records(
    request: ApplicationRequest,
    result: ApplicationResult,
    statuses: Iterable[str] = HISTORY_RECORD_STATUSES,
) -> list[ApplicationHistoryRecord]:
    """Project the recordable outcomes of a run, keeping processing order."""
    wanted = {MatchStatus(s) for s in statuses}
    now = datetime.now()
    return [to_history_record(request, m, now) for m in result.matches if m.status in wanted]


def record_session(
    request: ApplicationRequest,
    result: ApplicationResult,
    statuses: Iterable[str] = HISTORY_RECORD_STATUSES,
) -> list[int]:
    """Persist a run's outcomes for the requester. Returns the new row IDs."""
    if not request.requester_identity:
        logger.warning("Request has no requester identity — history not recorded")
        return []

    records = build_history_records(request, result, statuses)
    ids = database.store_history_batch(records)
    logger.info(f"Recorded {len(ids)} history entries for {request.requester_identity}")
    return ids


def track_application(
    owner: str,
    job_title: str,
    job_url: str,
    company_name: Optional[str] = None,
    status: str = "applied",
) -> ApplicationHistoryRecord:
    """Record an application the user made by hand."""
    if not (owner or "").strip():
        raise ValueError("Owner identity is required")
    if not (job_title or "").strip():
        raise ValueError("Job title is required")
    if not (job_url or "").strip():
        raise ValueError("Job URL is required")

    record = ApplicationHistoryRecord(
        owner=owner,
        job_title=job_title.strip(),
        company_name=company_name,
        job_url=job_url.strip(),
        status=status or "applied",
        match_reason="Tracked manually",
    )
    record_id = database.store_history_record(record)
    logger.info(f"Tracked application {record_id} for {owner}: {job_title}")
    return database.get_history_record(record_id)


def get_application_history(owner: str, newest_first: bool = True) -> list[ApplicationHistoryRecord]:
    """All history records for `owner`; never anyone else's."""
    if not owner:
        return []
    return database.get_history_for_owner(owner, newest_first=newest_first)
