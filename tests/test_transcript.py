import json

import pytest

from apps.checkins.transcript import derive_transcript


def test_known_field_used_verbatim_and_alone():
    payload = {"notes": "  Great week, hit all workouts ", "mood": "good", "message": ""}
    assert derive_transcript(payload) == "Great week, hit all workouts"


def test_known_fields_checked_in_order():
    payload = {"checkin_notes": "last", "message": "first", "transcript": "   "}
    assert derive_transcript(payload) == "first"


def test_non_string_transcript_field_is_ignored():
    payload = {"transcript": {"text": "nested"}, "name": "Jo"}
    assert derive_transcript(payload) == 'transcript: {\n  "text": "nested"\n}'


def test_derived_from_remaining_fields():
    payload = {
        "name": "Jo",
        "email": "jo@example.com",
        "timestamp": "2024-01-01T00:00:00Z",
        "weight": 180,
        "sleep": "7 hours",
        "answers": {"q1": "yes"},
        "skipped": None,
        "blank": "",
        "done": True,
    }
    transcript = derive_transcript(payload)
    assert transcript.splitlines()[0] == "weight: 180"
    assert "sleep: 7 hours" in transcript
    assert 'answers: {\n  "q1": "yes"\n}' in transcript
    assert "done: true" in transcript
    assert "Jo" not in transcript
    assert "skipped" not in transcript
    assert "blank" not in transcript
    assert "timestamp" not in transcript


def test_only_identity_fields_falls_back_to_whole_payload():
    payload = {"name": "Jo", "phone": "555"}
    transcript = derive_transcript(payload)
    assert json.loads(transcript) == payload


@pytest.mark.parametrize(
    "payload",
    [{}, {"id": 1}, {"contact": {}}, {"x": 0}, {"list": []}, {"name": "", "other": None}],
)
def test_transcript_is_never_empty(payload):
    assert derive_transcript(payload).strip()


def test_event_ids_are_not_transcribed():
    payload = {"event_id": "evt-1", "submissionId": "sub-2", "sleep": "7 hours"}
    assert derive_transcript(payload) == "sleep: 7 hours"


def test_form_submission_answers_are_rendered():
    payload = {
        "type": "FormSubmission",
        "formName": "Weekly Check-in",
        "contact": {"name": "Jo Ann"},
        "formSubmission": {
            "data": {
                "How was your week?": "Tired but training",
                "Workouts": 4,
                "Skipped": "",
                "Meals": ["oats", "salad"],
            }
        },
    }
    assert derive_transcript(payload) == (
        "Form: Weekly Check-in\n"
        "---\n"
        "How was your week?: Tired but training\n"
        "Workouts: 4\n"
        'Meals: ["oats", "salad"]'
    )


def test_form_submission_without_data_uses_remaining_fields():
    payload = {"formSubmission": {"id": "abc"}, "mood": "good"}
    transcript = derive_transcript(payload)
    assert "mood: good" in transcript


def test_transcript_field_beats_form_submission():
    payload = {"notes": "Short note", "formSubmission": {"data": {"q": "a"}}}
    assert derive_transcript(payload) == "Short note"
