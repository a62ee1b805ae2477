"""
prompt_detector.py — Flags postings that need a human-written response
(take-home assessment, essay question) before anyone can apply.

Current heuristic only looks at the posting URL. It runs after a posting has
passed the relevance filter and the score threshold.
"""

from typing import Iterable

from config import PROMPT_MARKERS

DEFAULT_PROMPT_MARKERS = tuple(PROMPT_MARKERS)


def has_writing_prompt(job_url: str, markers: Iterable[str] = DEFAULT_PROMPT_MARKERS) -> bool:
    """True if the URL contains any prompt marker (case-insensitive)."""
    url_lower = (job_url or "").lower()
    return any(marker.lower() in url_lower for marker in markers if marker)
