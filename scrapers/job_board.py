"""
job_board.py — Extracts job posting links from a fetched listing page.
Finds every anchor whose href matches the job-detail pattern (LinkedIn's
/jobs/view/ by default) and resolves it against the page URL.
"""

import re
from typing import Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from config import JOB_LINK_PATTERN
from models import Posting
from monitoring import get_logger

logger = get_logger("scrapers.job_board")

WHITESPACE_RE = re.compile(r"\s+")


def extract_postings(
    html: str,
    source_url: str,
    pattern: Union[str, re.Pattern, None] = None,
) -> list[Posting]:
    """
    Return postings in document order.
    Duplicates are kept; an empty page or one without job links yields [].
    """
    if pattern is None:
        pattern = JOB_LINK_PATTERN
    link_re = re.compile(pattern) if isinstance(pattern, str) else pattern
    soup = BeautifulSoup(html or "", "html.parser")
    postings = []

    for link in soup.find_all("a", href=True):
        href = link.get("href", "").strip()
        if not href or link_re.search(href) is None:
            continue

        job_url = urljoin(source_url, href)
        text = WHITESPACE_RE.sub(" ", link.get_text(" ", strip=True)).strip()
        postings.append(Posting(url=job_url, display_text=text))

    logger.info(f"Extracted {len(postings)} job links from {source_url}")
    return postings
