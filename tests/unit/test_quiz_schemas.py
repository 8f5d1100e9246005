import pytest
from pydantic import ValidationError

from app.schemas.quiz import QuizSubmitRequest, QuizUpdate


def test_submit_answers_accept_integer_ids():
    request = QuizSubmitRequest.model_validate_json('{"answers": {"1": 7}, "time_spent": 12}')
    assert request.answers == {"1": 7}


@pytest.mark.parametrize("payload", [
    '{"answers": {"1": true}}',
    '{"answers": {"1": "7"}}',
    '{"answers": {"1": 7.5}}',
])
def test_submit_answers_reject_non_integer_ids(payload):
    with pytest.raises(ValidationError):
        QuizSubmitRequest.model_validate_json(payload)


def test_submit_rejects_negative_time_spent():
    with pytest.raises(ValidationError):
        QuizSubmitRequest(answers={}, time_spent=-1)


def test_update_rejects_null_title():
    with pytest.raises(ValidationError):
        QuizUpdate(title=None)
    assert QuizUpdate(description=None).model_dump(exclude_unset=True) == {"description": None}
