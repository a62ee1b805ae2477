import config
import prompt_detector
from config import PipelineSettings
from conftest import listing_html
from scrapers.job_board import extract_postings


def test_pipeline_settings_defaults_follow_preferences():
    settings = PipelineSettings()

    assert settings == PipelineSettings.from_config()
    assert settings.min_score == config.MIN_SCORE
    assert settings.fetch_timeout_seconds == config.FETCH_TIMEOUT_SECONDS
    assert settings.job_link_pattern == config.JOB_LINK_PATTERN
    assert settings.prompt_markers == tuple(config.PROMPT_MARKERS)


def test_shipped_preferences_values():
    settings = PipelineSettings()

    assert settings.min_score == 0.45
    assert settings.job_link_pattern == "/jobs/view/"
    assert settings.prompt_markers == ("assessment",)


def test_extractor_and_detector_default_to_configured_values(monkeypatch):
    monkeypatch.setattr("scrapers.job_board.JOB_LINK_PATTERN", r"/careers/\d+")
    html = listing_html([("/careers/42", "Engineer"), ("/jobs/view/1", "Other")])

    assert [p.display_text for p in extract_postings(html, "https://example.com/")] == ["Engineer"]
    assert prompt_detector.DEFAULT_PROMPT_MARKERS == tuple(config.PROMPT_MARKERS)
