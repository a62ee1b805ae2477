"""
config.py — Loads preferences.yaml and environment variables.
Provides typed access to all configuration.
"""

import os
from dataclasses import dataclass
from pathlib import Path

import yaml
from dotenv import load_dotenv

# Load .env file
load_dotenv()

# Project root directory
PROJECT_ROOT = Path(__file__).parent

# Load preferences.yaml
PREFERENCES_PATH = Path(os.getenv("JOB_APPLY_PREFERENCES", PROJECT_ROOT / "preferences.yaml"))
_prefs = {}
if PREFERENCES_PATH.exists():
    with open(PREFERENCES_PATH, "r") as f:
        _prefs = yaml.safe_load(f) or {}


# --- Pipeline ---
_pipeline = _prefs.get("pipeline", {})
MIN_SCORE = float(_pipeline.get("min_score", 0.45))
FETCH_TIMEOUT_SECONDS = float(_pipeline.get("fetch_timeout_seconds", 15))
SCORING_WORKERS = int(_pipeline.get("scoring_workers", 1))
JOB_LINK_PATTERN = _pipeline.get("job_link_pattern", r"/jobs/view/")
PROMPT_MARKERS = [m.lower() for m in _pipeline.get("prompt_markers", ["assessment"])]

# --- Scorer ---
_scorer = _prefs.get("scorer", {})
SCORER_MODEL = _scorer.get("model", "claude-haiku-4-5-20251001")
SCORER_MAX_TOKENS = int(_scorer.get("max_tokens", 400))
SCORER_TIMEOUT_SECONDS = float(_scorer.get("timeout_seconds", 30))

# --- Email ---
_email = _prefs.get("email", {})
SMTP_HOST = _email.get("smtp_host", "smtp.gmail.com")
SMTP_PORT = int(_email.get("smtp_port", 465))
SMTP_TIMEOUT_SECONDS = float(_email.get("timeout_seconds", 30))

# --- History ---
_history = _prefs.get("history", {})
HISTORY_RECORD_STATUSES = _history.get(
    "record_statuses",
    ["APPLIED", "SKIPPED_LOW_SCORE", "SKIPPED_PROMPT", "ERROR"],
)

# --- Cache ---
_cache = _prefs.get("cache", {})
CACHE_TTL_SECONDS = float(_cache.get("ttl_seconds", 900))
CACHE_WARM_DELAY_SECONDS = float(_cache.get("warm_delay_seconds", 1.0))
POPULAR_BOARDS = _cache.get("popular_boards", [])

# --- API Keys & Secrets (from .env) ---
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")
GMAIL_ADDRESS = os.getenv("GMAIL_ADDRESS", "")
GMAIL_APP_PASSWORD = os.getenv("GMAIL_APP_PASSWORD", "")

# --- Database ---
DB_PATH = Path(os.getenv("DB_PATH", PROJECT_ROOT / "data" / "applications.db"))

# --- Logging ---
LOG_DIR = PROJECT_ROOT / "logs"
LOG_FILE = LOG_DIR / "job_apply.log"


@dataclass(frozen=True)
class PipelineSettings:
    """Knobs handed to the orchestrator at construction time. Defaults come from preferences.yaml."""
    min_score: float = MIN_SCORE
    fetch_timeout_seconds: float = FETCH_TIMEOUT_SECONDS
    scoring_workers: int = max(1, SCORING_WORKERS)
    job_link_pattern: str = JOB_LINK_PATTERN
    prompt_markers: tuple[str, ...] = tuple(PROMPT_MARKERS)

    @classmethod
    def from_config(cls) -> "PipelineSettings":
        return cls(
            min_score=MIN_SCORE,
            fetch_timeout_seconds=FETCH_TIMEOUT_SECONDS,
            scoring_workers=max(1, SCORING_WORKERS),
            job_link_pattern=JOB_LINK_PATTERN,
            prompt_markers=tuple(PROMPT_MARKERS),
        )


def validate_config():
    """Check that critical configuration is present."""
    warnings = []

    if not PREFERENCES_PATH.exists():
        warnings.append(f"Preferences file not found at {PREFERENCES_PATH} — using defaults")
    if not ANTHROPIC_API_KEY:
        warnings.append("ANTHROPIC_API_KEY is not set — scoring will not work")
    if not GMAIL_ADDRESS or not GMAIL_APP_PASSWORD:
        warnings.append("GMAIL_ADDRESS / GMAIL_APP_PASSWORD not set — prompt escalation emails will not be sent")
    if not 0.0 <= MIN_SCORE <= 1.0:
        warnings.append(f"pipeline.min_score={MIN_SCORE} is outside [0, 1]")

    return warnings
