"""
service.py — Inbound operations: submit an application run, list history,
track a manual application. Identity is resolved upstream; every call here
already knows who the caller is.
"""

from typing import Optional

import history
from cache_warmer import CachingFetcher, ListingCache, start_background_warmup
from config import CACHE_WARM_DELAY_SECONDS, POPULAR_BOARDS, PipelineSettings
from database import init_db
from email_digest import EmailNotifier, Notifier
from models import ApplicationHistoryRecord, ApplicationRequest, ApplicationResult
from monitoring import get_logger
from pipeline import ApplicationPipeline
from scorer import ClaudeFitScorer, FitScorer
from scrapers.base import PageFetcher

logger = get_logger("service")


class ApplicationService:
    def __init__(self, pipeline: ApplicationPipeline, record_history: bool = True):
        self.pipeline = pipeline
        self.record_history = record_history
        self.warmup_thread = None
        init_db()

    @classmethod
    def from_config(
        cls,
        scorer: Optional[FitScorer] = None,
        notifier: Optional[Notifier] = None,
        cache: Optional[ListingCache] = None,
        warm_cache: bool = False,
    ) -> "ApplicationService":
        """
        Wire the production collaborators from config.py.
        With warm_cache, the popular boards are pre-fetched in the background
        into the same cache the pipeline reads from.
        """
        settings = PipelineSettings.from_config()
        fetcher = CachingFetcher(PageFetcher(timeout=settings.fetch_timeout_seconds), cache)
        pipeline = ApplicationPipeline(
            fetcher=fetcher,
            scorer=scorer or ClaudeFitScorer(),
            notifier=notifier or EmailNotifier(),
            settings=settings,
        )
        service = cls(pipeline)
        if warm_cache and POPULAR_BOARDS:
            service.warmup_thread = start_background_warmup(fetcher, POPULAR_BOARDS, CACHE_WARM_DELAY_SECONDS)
        return service

    def submit_application_run(self, request: ApplicationRequest) -> ApplicationResult:
        result = self.pipeline.apply_to_jobs(request)

        if self.record_history:
            try:
                history.record_session(request, result)
            except Exception as e:
                # Result is returned even when the history store is down
                logger.error(f"Failed to record history for {request.requester_identity}: {e}")

        return result

    def list_history(self, owner: str, newest_first: bool = True) -> list[ApplicationHistoryRecord]:
        return history.get_application_history(owner, newest_first=newest_first)

    def track_application(
        self,
        owner: str,
        job_title: str,
        job_url: str,
        company_name: Optional[str] = None,
        status: str = "applied",
    ) -> ApplicationHistoryRecord:
        return history.track_application(owner, job_title, job_url, company_name, status)
