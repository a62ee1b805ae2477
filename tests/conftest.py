import threading

import pytest

import database
from config import PipelineSettings
from models import ApplicationRequest, CandidateProfile, FitScore, ResumeFile
from pipeline import ApplicationPipeline

BOARD_URL = "https://www.linkedin.com/jobs/search/?keywords=software%20engineer"


def listing_html(links: list[tuple[str, str]]) -> str:
    """Minimal listing page with one anchor per (href, text) pair."""
    items = "\n".join(f'<li class="job-card"><a href="{href}">{text}</a></li>' for href, text in links)
    return f"""<html><body>
    <nav><a href="/feed/">Home</a><a href="/jobs/search/">Jobs</a></nav>
    <ul class="jobs-search__results-list">
    {items}
    </ul>
    <footer><a href="https://www.linkedin.com/legal/user-agreement">Terms</a></footer>
    </body></html>"""


class FakeFetcher:
    def __init__(self, html: str = "", error: Exception = None):
        self.html = html
        self.error = error
        self.calls = []

    def fetch(self, url: str) -> str:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.html


class FakeScorer:
    """Looks scores up by posting text; exceptions in the table are raised."""

    def __init__(self, table: dict = None, default: FitScore = None):
        self.table = table or {}
        self.default = default
        self.calls = []
        self._lock = threading.Lock()

    def score(self, request, posting_text):
        with self._lock:
            self.calls.append(posting_text)
        value = self.table.get(posting_text, self.default)
        if isinstance(value, Exception):
            raise value
        if value is None:
            raise AssertionError(f"unexpected scoring call for {posting_text!r}")
        return value


class FakeNotifier:
    def __init__(self, error: Exception = None):
        self.error = error
        self.sent = []

    def notify(self, recipient, posting_url, job_title):
        self.sent.append((recipient, posting_url, job_title))
        if self.error is not None:
            raise self.error


def fit(score: float, reasoning: str = None) -> FitScore:
    return FitScore(score=score, reasoning=reasoning or f"score {score}")


@pytest.fixture
def make_request():
    def _make(
        job_title="software engineer",
        job_board_url=BOARD_URL,
        application_count=2,
        requester_identity="candidate@example.com",
        **profile_kwargs,
    ):
        profile = CandidateProfile(
            resume_summary=profile_kwargs.pop("resume_summary", "Python backend engineer, 3 years"),
            resume_file=profile_kwargs.pop("resume_file", ResumeFile(name="resume.pdf", data="UEsDBA==")),
            preferred_companies=profile_kwargs.pop("preferred_companies", ["Stripe", "Datadog"]),
            **profile_kwargs,
        )
        return ApplicationRequest(
            job_title=job_title,
            job_board_url=job_board_url,
            application_count=application_count,
            profile=profile,
            requester_identity=requester_identity,
        )

    return _make


@pytest.fixture
def make_pipeline():
    def _make(fetcher, scorer, notifier=None, **settings_kwargs):
        return ApplicationPipeline(
            fetcher=fetcher,
            scorer=scorer,
            notifier=notifier if notifier is not None else FakeNotifier(),
            settings=PipelineSettings(**settings_kwargs),
        )

    return _make


@pytest.fixture
def history_db(tmp_path, monkeypatch):
    db_path = tmp_path / "applications.db"
    monkeypatch.setattr(database, "DB_PATH", db_path)
    database.init_db()
    return db_path
