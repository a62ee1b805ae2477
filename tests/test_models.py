import pytest

from models import (
    ApplicationRequest,
    ApplicationResult,
    FitScore,
    MatchOutcome,
    MatchStatus,
    Posting,
)

POSTING = Posting(url="https://www.linkedin.com/jobs/view/engineer-1", display_text="Engineer")


def test_fit_score_must_be_in_unit_interval():
    FitScore(0.0, "floor")
    FitScore(1.0, "ceiling")
    with pytest.raises(ValueError):
        FitScore(1.2, "too high")
    with pytest.raises(ValueError):
        FitScore(-0.01, "too low")


def test_score_bearing_outcomes_carry_the_score():
    fit = FitScore(0.7, "Good fit")

    applied = MatchOutcome.applied(POSTING, fit)
    low = MatchOutcome.low_score(POSTING, FitScore(0.2, "Poor fit"))
    prompt = MatchOutcome.needs_human(POSTING, fit, "Writing prompt detected; emailed user")

    assert (applied.status, applied.score, applied.reason) == (MatchStatus.APPLIED, 0.7, "Good fit")
    assert (low.status, low.score, low.reason) == (MatchStatus.SKIPPED_LOW_SCORE, 0.2, "Poor fit")
    assert prompt.status is MatchStatus.SKIPPED_PROMPT
    assert prompt.score == 0.7


def test_scoreless_outcomes_have_no_score():
    assert MatchOutcome.unrelated(POSTING).score is None
    assert MatchOutcome.unrelated(POSTING).reason == "Did not match job title keywords"
    assert MatchOutcome.error(POSTING.url, "Engineer", "Scoring failed: boom").score is None


def test_outcome_variants_are_enforced():
    with pytest.raises(ValueError):
        MatchOutcome(POSTING.url, "Engineer", MatchStatus.APPLIED, "missing score")
    with pytest.raises(ValueError):
        MatchOutcome(POSTING.url, "Engineer", MatchStatus.ERROR, "has score", score=0.5)
    with pytest.raises(ValueError):
        MatchOutcome(POSTING.url, "Engineer", MatchStatus.SKIPPED_UNRELATED, "")


def test_result_counters_are_tallied_from_matches():
    matches = (
        MatchOutcome.applied(POSTING, FitScore(0.9, "a")),
        MatchOutcome.unrelated(POSTING),
        MatchOutcome.low_score(POSTING, FitScore(0.1, "b")),
        MatchOutcome.needs_human(POSTING, FitScore(0.8, "c"), "prompt"),
        MatchOutcome.error(POSTING.url, "Engineer", "Scoring failed: x"),
        MatchOutcome.applied(POSTING, FitScore(0.95, "d")),
    )
    result = ApplicationResult(
        job_board_url="https://www.linkedin.com/jobs/search/",
        job_title="engineer",
        requested_applications=3,
        matches=matches,
    )

    assert result.applied_count == 2
    assert result.skipped_unrelated == 1
    assert result.skipped_low_score == 1
    assert result.skipped_prompts == 1
    assert result.error_count == 1

    payload = result.to_dict()
    assert payload["applied_count"] == 2
    assert [m["status"] for m in payload["matches"]] == [
        "APPLIED", "SKIPPED_UNRELATED", "SKIPPED_LOW_SCORE", "SKIPPED_PROMPT", "ERROR", "APPLIED",
    ]


def test_negative_application_count_is_rejected():
    with pytest.raises(ValueError):
        ApplicationRequest(job_title="x", job_board_url="https://example.com", application_count=-1)


def test_request_from_snake_case_payload():
    request = ApplicationRequest.from_dict({
        "job_title": "data scientist",
        "job_board_url": "https://www.linkedin.com/jobs/search/?keywords=data",
        "application_count": 4,
        "requester_identity": "me@example.com",
        "profile": {
            "resume_summary": "Stats PhD",
            "resume_file": {"name": "cv.pdf", "data": "abc"},
            "preferred_companies": ["Spotify"],
            "looking_for_internships": True,
        },
    })

    assert request.application_count == 4
    assert request.profile.resume_file.name == "cv.pdf"
    assert request.profile.preferred_companies == ["Spotify"]
    assert request.profile.looking_for_internships is True


def test_request_from_original_camel_case_payload():
    request = ApplicationRequest.from_dict({
        "jobTitle": "product manager",
        "jobBoardUrl": "https://www.linkedin.com/jobs/search/?keywords=pm",
        "applicationCount": 1,
        "resumeSummary": "PM at a fintech",
        "resumeFileName": "resume.docx",
        "resumeFileData": "UEsDBA==",
        "preferredCompanies": ["Monzo", "Revolut"],
        "jobPreference": "hybrid",
        "salaryRange": "80-100k",
        "lookingForInternships": False,
        "userEmail": "pm@example.com",
    })

    assert request.job_title == "product manager"
    assert request.requester_identity == "pm@example.com"
    assert request.profile.resume_summary == "PM at a fintech"
    assert request.profile.resume_file.data == "UEsDBA=="
    assert request.profile.job_preference == "hybrid"
