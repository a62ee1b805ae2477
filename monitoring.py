"""
monitoring.py — Logging setup and run summaries for the Job Apply pipeline.
"""

import logging
import sys

from config import LOG_DIR, LOG_FILE
from models import MatchStatus


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Set up structured logging to both file and stderr.
    Returns the root logger for the application.
    """
    LOG_DIR.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("job_apply")
    logger.setLevel(level)

    # Prevent duplicate handlers on re-init
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    file_handler = logging.FileHandler(str(LOG_FILE), mode="a", encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    # Stderr keeps stdout free for the CLI's JSON output
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger for a specific module."""
    return logging.getLogger(f"job_apply.{name}")


def log_pipeline_step(logger: logging.Logger, step: str, input_count: int, output_count: int):
    """Log a pipeline step with input/output counts."""
    filtered = input_count - output_count
    logger.info(f"[{step}] {input_count} in → {output_count} out ({filtered} filtered)")


def log_run_summary(logger: logging.Logger, result, duration: float):
    """Log a complete run summary from an ApplicationResult."""
    logger.info("=" * 60)
    logger.info("RUN SUMMARY")
    logger.info(f"  Job board:         {result.job_board_url}")
    logger.info(f"  Job title:         {result.job_title}")
    logger.info(f"  Requested:         {result.requested_applications}")
    logger.info(f"  Applied:           {result.applied_count}")
    logger.info(f"  Skipped (score):   {result.skipped_low_score}")
    logger.info(f"  Skipped (prompt):  {result.skipped_prompts}")
    logger.info(f"  Skipped (topic):   {result.skipped_unrelated}")
    logger.info(f"  Errors:            {result.error_count}")
    logger.info(f"  Duration:          {duration:.1f}s")

    errors = [m for m in result.matches if m.status is MatchStatus.ERROR]
    if errors:
        logger.warning("ERRORS:")
        for outcome in errors:
            logger.warning(f"  - {outcome.url}: {outcome.reason}")

    logger.info("=" * 60)
