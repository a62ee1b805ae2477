"""
pipeline.py — Application orchestrator.
fetch → extract → for each posting: relevance filter → score → threshold →
prompt check → classify, stopping once the requested number of applications
is reached.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Union

from config import PipelineSettings
from errors import FetchError, ScoringError
from models import ApplicationRequest, ApplicationResult, FitScore, MatchOutcome, MatchStatus, Posting
from monitoring import get_logger, log_pipeline_step, log_run_summary
from pre_filter import is_relevant
from prompt_detector import has_writing_prompt
from scrapers.base import PageFetcher
from scrapers.job_board import extract_postings
from scorer import FitScorer
from email_digest import Notifier

logger = get_logger("pipeline")

# Result of a scoring call: the score, or the reason it failed
ScoreAttempt = Union[FitScore, str]


class ApplicationPipeline:
    def __init__(
        self,
        fetcher: PageFetcher,
        scorer: FitScorer,
        notifier: Optional[Notifier] = None,
        settings: Optional[PipelineSettings] = None,
    ):
        self.fetcher = fetcher
        self.scorer = scorer
        self.notifier = notifier
        self.settings = settings or PipelineSettings()

    def apply_to_jobs(self, request: ApplicationRequest) -> ApplicationResult:
        """Run the pipeline for one request. Never raises; failures become ERROR outcomes."""
        run_start = time.time()
        matches = []

        def finish() -> ApplicationResult:
            result = ApplicationResult(
                job_board_url=request.job_board_url,
                job_title=request.job_title,
                requested_applications=request.application_count,
                matches=tuple(matches),
            )
            log_run_summary(logger, result, time.time() - run_start)
            return result

        if not (request.job_board_url or "").strip():
            logger.warning("Job board URL missing, skipping job application automation")
            return finish()

        self._log_request(request)

        # ===== 1. FETCH LISTING PAGE =====
        try:
            html = self.fetcher.fetch(request.job_board_url)
        except FetchError as e:
            logger.error(f"Failed to fetch job board {request.job_board_url}: {e}")
            matches.append(MatchOutcome.error(request.job_board_url, request.job_title, e.describe()))
            return finish()
        except Exception as e:
            logger.exception(f"Unexpected failure fetching {request.job_board_url}")
            return self._scrape_failed(request, matches, e, finish)

        # ===== 2. EXTRACT POSTINGS =====
        try:
            postings = extract_postings(html, request.job_board_url, self.settings.job_link_pattern)
        except Exception as e:
            logger.exception(f"Could not extract postings from {request.job_board_url}")
            return self._scrape_failed(request, matches, e, finish)

        # ===== 3. CLASSIFY IN EXTRACTION ORDER =====
        try:
            self._process_postings(request, postings, matches)
        except Exception as e:
            # Keep the trail built so far; the caller still gets a well-formed result
            logger.exception(f"Unexpected pipeline failure: {e}")
            matches.append(MatchOutcome.error(
                request.job_board_url, request.job_title, f"Unexpected pipeline failure: {e}"
            ))

        log_pipeline_step(logger, "Classification", len(postings), len(matches))
        return finish()

    @staticmethod
    def _scrape_failed(request: ApplicationRequest, matches: list, error: Exception, finish) -> ApplicationResult:
        matches.append(MatchOutcome.error(
            request.job_board_url, request.job_title, f"Failed to scrape job board: {error}"
        ))
        return finish()

    def _process_postings(self, request: ApplicationRequest, postings: list[Posting], matches: list):
        """
        Consume postings in windows. A window holds at most
        min(scoring_workers, remaining cap) relevant postings plus the unrelated
        ones between them, so nothing past the cap is ever scored. Scores are
        computed concurrently; classification walks the window in order on
        this thread, which is the only place `applied` changes.
        """
        workers = max(1, self.settings.scoring_workers)
        applied = 0
        index = 0

        with ThreadPoolExecutor(max_workers=workers) as pool:
            while index < len(postings) and applied < request.application_count:
                budget = min(workers, request.application_count - applied)
                window = []
                relevant = 0
                while index < len(postings) and relevant < budget:
                    posting = self._with_fallback_text(postings[index], request.job_title)
                    is_match = is_relevant(posting, request.job_title)
                    window.append((posting, is_match))
                    relevant += int(is_match)
                    index += 1

                futures = {
                    i: pool.submit(self._score, request, posting)
                    for i, (posting, is_match) in enumerate(window) if is_match
                }

                for i, (posting, is_match) in enumerate(window):
                    if applied >= request.application_count:
                        break
                    if not is_match:
                        matches.append(MatchOutcome.unrelated(posting))
                        continue

                    outcome = self._classify(request, posting, futures[i].result())
                    matches.append(outcome)
                    if outcome.status is MatchStatus.APPLIED:
                        applied += 1

    def _score(self, request: ApplicationRequest, posting: Posting) -> ScoreAttempt:
        try:
            fit = self.scorer.score(request, posting.display_text)
        except ScoringError as e:
            logger.error(f"Scoring failed for {posting.url}: {e}")
            return f"Scoring failed: {e}"
        except Exception as e:
            logger.exception(f"Unexpected scorer failure for {posting.url}")
            return f"Scoring failed: {type(e).__name__}: {e}"
        logger.info(f"AI score for job '{posting.display_text}': {fit.score:.2f} ({fit.reasoning})")
        return fit

    def _classify(self, request: ApplicationRequest, posting: Posting, attempt: ScoreAttempt) -> MatchOutcome:
        if isinstance(attempt, str):
            return MatchOutcome.error(posting.url, posting.display_text, attempt)

        if attempt.score < self.settings.min_score:
            logger.info(f"Skipping job '{posting.url}' due to low AI score")
            return MatchOutcome.low_score(posting, attempt)

        if has_writing_prompt(posting.url, self.settings.prompt_markers):
            reason = "Writing prompt detected; emailed user"
            if not self._escalate(request, posting):
                reason = "Writing prompt detected; notification failed"
            return MatchOutcome.needs_human(posting, attempt, reason)

        logger.info(f"Applying to: {posting.url}")
        return MatchOutcome.applied(posting, attempt)

    def _escalate(self, request: ApplicationRequest, posting: Posting) -> bool:
        """Best-effort notification; returns False instead of raising."""
        if self.notifier is None:
            logger.warning(f"No notifier configured; writing prompt at {posting.url} not escalated")
            return False
        try:
            self.notifier.notify(request.requester_identity, posting.url, request.job_title)
        except Exception as e:
            logger.error(f"Escalation for {posting.url} failed: {e}")
            return False
        return True

    @staticmethod
    def _with_fallback_text(posting: Posting, job_title: str) -> Posting:
        if posting.display_text:
            return posting
        return Posting(url=posting.url, display_text=job_title or posting.url)

    @staticmethod
    def _log_request(request: ApplicationRequest):
        profile = request.profile
        logger.info(f"Starting job application process for title '{request.job_title}' against '{request.job_board_url}'")
        logger.info(f"Application count target: {request.application_count}")
        logger.info(f"Resume summary length: {len(profile.resume_summary or '')}")
        if profile.resume_file:
            logger.info(
                f"Resume file: {profile.resume_file.name} (encoded length: {len(profile.resume_file.data or '')})"
            )
        logger.info(f"Preferred companies: {profile.preferred_companies}")
        logger.info(
            f"Job preference: {profile.job_preference} | Salary range: {profile.salary_range} | "
            f"Internship opt-in: {profile.looking_for_internships}"
        )
