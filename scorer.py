"""
scorer.py — Claude API fit scoring with a calibrated prompt.
Uses Anthropic's Claude Haiku for cost-efficient posting-to-candidate matching.

Every failure surfaces as ScoringError. Never fall back to a zero score: a
silent zero cannot be told apart from a genuinely poor fit.
"""

import json
from typing import Optional, Protocol

import anthropic

from errors import ScoringError
from models import ApplicationRequest, FitScore
from config import ANTHROPIC_API_KEY, SCORER_MODEL, SCORER_MAX_TOKENS, SCORER_TIMEOUT_SECONDS
from monitoring import get_logger

logger = get_logger("scorer")


class FitScorer(Protocol):
    def score(self, request: ApplicationRequest, posting_text: str) -> FitScore:
        ...


SCORING_PROMPT = """You are screening job postings on behalf of a candidate who wants to apply for "{job_title}" roles.

Candidate profile:
- Resume summary: {resume_summary}
- Preferred companies: {preferred_companies}
- Job preference: {job_preference}
- Salary range: {salary_range}
- Open to internships: {internships}

SCORING CALIBRATION — use these anchors to ensure consistent scoring:

0.85-1.00 (Strong fit): the posting is the requested role at the right level, the resume covers its core requirements, and it matches the candidate's preferences.
0.60-0.84 (Good fit with gaps): right role family, one or two missing skills or a level/preference mismatch.
0.45-0.59 (Borderline): loosely related role or significant gaps, still worth an application.
0.00-0.44 (Poor fit): different role in practice, wrong seniority, or an internship when the candidate does not want one.

Here is the job posting:
{posting_text}

You MUST respond with valid JSON only, no markdown, no backticks, no other text. Keep reasoning under 60 words:
{{"score": 0.72, "reasoning": "Good fit because..."}}"""


def build_prompt(request: ApplicationRequest, posting_text: str) -> str:
    profile = request.profile
    return SCORING_PROMPT.format(
        job_title=request.job_title or "any",
        resume_summary=(profile.resume_summary or "Not provided")[:3000],
        preferred_companies=", ".join(profile.preferred_companies) or "None",
        job_preference=profile.job_preference or "Not specified",
        salary_range=profile.salary_range or "Not specified",
        internships="yes" if profile.looking_for_internships else "no",
        posting_text=(posting_text or "No description available")[:3000],
    )


def parse_score_response(text: str) -> FitScore:
    """Parse the model's JSON reply into a FitScore, raising ScoringError if unusable."""
    text = (text or "").strip()

    # Strip markdown code fences if present
    if text.startswith("```"):
        text = text.split("\n", 1)[-1]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    if text.startswith("json"):
        text = text[4:].strip()

    try:
        result = json.loads(text)
    except json.JSONDecodeError as e:
        raise ScoringError(f"Malformed scoring response: {e}") from e

    if not isinstance(result, dict) or "score" not in result:
        raise ScoringError(f"Scoring response missing 'score' field: {text[:200]}")

    try:
        score = float(result["score"])
    except (TypeError, ValueError) as e:
        raise ScoringError(f"Non-numeric score in response: {result['score']!r}") from e
    if not 0.0 <= score <= 1.0:
        raise ScoringError(f"Score {score} outside [0, 1]")

    reasoning = str(result.get("reasoning") or "").strip() or "No reasoning provided"
    return FitScore(score=score, reasoning=reasoning)


class ClaudeFitScorer:
    """Scores a posting against the candidate profile via the Anthropic API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = SCORER_MODEL,
        max_tokens: int = SCORER_MAX_TOKENS,
        timeout: float = SCORER_TIMEOUT_SECONDS,
        client: Optional[anthropic.Anthropic] = None,
    ):
        self.model = model
        self.max_tokens = max_tokens
        self._client = client
        self._api_key = api_key if api_key is not None else ANTHROPIC_API_KEY
        self._timeout = timeout

    @property
    def client(self) -> anthropic.Anthropic:
        if self._client is None:
            if not self._api_key:
                raise ScoringError("ANTHROPIC_API_KEY not set — cannot score postings")
            self._client = anthropic.Anthropic(api_key=self._api_key, timeout=self._timeout, max_retries=1)
        return self._client

    def score(self, request: ApplicationRequest, posting_text: str) -> FitScore:
        prompt = build_prompt(request, posting_text)

        # API failures are not retried here; the client already retries once
        reply = self._call_claude(prompt)
        try:
            return parse_score_response(reply)
        except ScoringError as e:
            # Retry once with stricter instructions
            logger.warning(f"Retrying scoring for '{posting_text[:80]}': {e}")

        retry_prompt = prompt + "\n\nCRITICAL: Respond ONLY with a JSON object. No other text whatsoever."
        return parse_score_response(self._call_claude(retry_prompt))

    def _call_claude(self, prompt: str) -> str:
        """Call Claude API and return the raw text reply."""
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APITimeoutError as e:
            raise ScoringError(f"Claude API timed out after {self._timeout:.0f}s") from e
        except anthropic.APIError as e:
            raise ScoringError(f"Claude API error: {e}") from e

        if not response.content:
            raise ScoringError("Claude API returned an empty response")
        return getattr(response.content[0], "text", "") or ""
