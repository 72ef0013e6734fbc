from agents.types import ScoringWeights
from services.scoring import recalculate_job_scores
from storage.applications import ApplicationRecord, get_application, insert_application


def _insert(job_id="job-r", match=86, transcript=90, video=60):
    return insert_application(
        ApplicationRecord(
            job_id=job_id,
            applicant_id="a1",
            applicant_name="Ada",
            match_score=match,
            transcript_match_score=transcript,
            video_match_score=video,
            scoring_weights=ScoringWeights(transcript=85, video=15),
        )
    )


def test_rescoring_scenario():
    app = _insert()
    updated = recalculate_job_scores("job-r", ScoringWeights(transcript=50, video=50))
    assert updated == 1
    stored = get_application(app.id)
    assert stored.match_score == 75
    assert stored.execution_level == "medium"
    assert stored.scoring_weights == ScoringWeights(transcript=50, video=50)


def test_rescoring_is_idempotent():
    apps = [_insert(), _insert(transcript=70, video=40)]
    weights = ScoringWeights(transcript=60, video=40)
    first = recalculate_job_scores("job-r", weights)
    scores_first = [get_application(a.id).match_score for a in apps]
    second = recalculate_job_scores("job-r", weights)
    scores_second = [get_application(a.id).match_score for a in apps]
    assert first == second == 2
    assert scores_first == scores_second == [78, 58]


def test_missing_stored_scores_use_fallbacks():
    legacy = _insert(match=72, transcript=None, video=None)
    recalculate_job_scores("job-r", ScoringWeights(transcript=50, video=50))
    # transcript falls back to match score, video to 50
    assert get_application(legacy.id).match_score == 61


def test_rescoring_is_scoped_to_job():
    other = _insert(job_id="job-other")
    assert recalculate_job_scores("job-r", ScoringWeights(transcript=0, video=100)) == 0
    assert get_application(other.id).match_score == 86


def test_rescoring_never_contacts_collaborators(failing_collaborators):
    _insert()
    recalculate_job_scores("job-r", ScoringWeights(transcript=50, video=50))
    assert all(count == 0 for count in failing_collaborators.values())
