"""
errors.py — Error taxonomy for the Job Apply pipeline.

- JobApplyError: base class for every custom error
- FetchError: the listing page could not be retrieved (ends the run early)
    - HttpStatusFetchError: the board answered with a non-2xx status
    - TransportFetchError: timeout, refused connection, malformed URL, ...
- ScoringError: the fit-scoring oracle failed for one posting
- NotificationError: an escalation message could not be delivered
"""

from typing import Optional


class JobApplyError(Exception):
    """Base class for all custom errors in the pipeline."""


class FetchError(JobApplyError):
    """Raised when the job board page cannot be fetched."""

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url

    def describe(self) -> str:
        """Human-readable reason embedded in the ERROR outcome."""
        return f"Failed to scrape job board: {self}"


class HttpStatusFetchError(FetchError):
    def __init__(self, url: str, status_code: int):
        super().__init__(url, f"HTTP {status_code} for {url}")
        self.status_code = status_code

    def describe(self) -> str:
        return f"HTTP error fetching URL ({self.status_code}): {self.url}"


class TransportFetchError(FetchError):
    def __init__(self, url: str, reason: str, cause: Optional[BaseException] = None):
        super().__init__(url, reason)
        self.reason = reason
        self.cause = cause


class ScoringError(JobApplyError):
    """Raised when the scoring service fails or returns something unusable."""


class NotificationError(JobApplyError):
    """Raised when a notification cannot be delivered."""
