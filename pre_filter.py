"""
pre_filter.py — Lightweight keyword relevance gate applied BEFORE the scoring API.
Skips postings with zero overlap with the requested title to save API cost.

Intentionally coarse: a title keyword only has to appear somewhere in the
posting URL as a substring ("engineer" also matches "engineering"), and
short tokens such as "in" will match a lot. Swap in a stronger matcher here
rather than tightening the pipeline.
"""

from typing import Optional

from models import Posting


def title_keywords(job_title: Optional[str]) -> list[str]:
    """Lowercase whitespace-delimited tokens of the requested title."""
    return (job_title or "").lower().split()


def is_promising_job(job_url: str, job_title: Optional[str]) -> bool:
    """True if any title keyword appears in the URL; blank titles accept everything."""
    keywords = title_keywords(job_title)
    if not keywords:
        return True

    url_lower = (job_url or "").lower()
    return _has_any_keyword(url_lower, keywords)


def is_relevant(posting: Posting, job_title: Optional[str]) -> bool:
    return is_promising_job(posting.url, job_title)


def _has_any_keyword(text: str, keywords: list[str]) -> bool:
    """Check if any keyword appears in the text."""
    for keyword in keywords:
        if keyword in text:
            return True
    return False
