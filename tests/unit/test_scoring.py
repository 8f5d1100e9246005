from app.models.answer import Answer
from app.models.question import Question
from app.services.scoring import score_submission


def _question(question_id, points, answers):
    return Question(
        id=question_id,
        quiz_id=1,
        text=f"Question {question_id}",
        order=question_id,
        points=points,
        answers=[Answer(id=a_id, question_id=question_id, text=f"A{a_id}", is_correct=ok) for a_id, ok in answers],
    )


def _two_question_quiz():
    # Q1 worth 2 (A1 correct), Q2 worth 1 (A2 correct)
    return [
        _question(1, 2, [(11, True), (12, False)]),
        _question(2, 1, [(21, False), (22, True)]),
    ]


def test_all_correct_scores_every_point():
    result = score_submission(_two_question_quiz(), {"1": 11, "2": 22})
    assert result.score == 3
    assert result.correct_answers == 2
    assert result.total_questions == 2
    assert result.max_score == 3


def test_partial_submission_matches_worked_example():
    result = score_submission(_two_question_quiz(), {"1": 11, "2": 21})
    assert (result.score, result.correct_answers, result.total_questions) == (2, 1, 2)


def test_empty_answers_score_zero_but_count_all_questions():
    result = score_submission(_two_question_quiz(), {})
    assert result.score == 0
    assert result.correct_answers == 0
    assert result.total_questions == 2
    assert all(o.selected_answer_id is None for o in result.outcomes)


def test_answer_from_another_question_is_incorrect():
    # 22 is correct, but for question 2, not question 1
    result = score_submission(_two_question_quiz(), {"1": 22})
    assert result.score == 0
    assert result.correct_answers == 0


def test_fabricated_answer_id_is_incorrect():
    result = score_submission(_two_question_quiz(), {"1": 99999})
    assert result.correct_answers == 0


def test_unknown_question_keys_are_ignored_and_reported():
    result = score_submission(_two_question_quiz(), {"1": 11, "404": 11, "abc": 1})
    assert result.score == 2
    assert sorted(result.ignored_question_ids) == ["404", "abc"]


def test_question_without_correct_answer_never_scores():
    questions = [_question(1, 5, [(11, False), (12, False)])]
    assert score_submission(questions, {"1": 11}).score == 0
    assert score_submission(questions, {"1": 12}).score == 0


def test_any_of_several_correct_answers_scores():
    questions = [_question(1, 4, [(11, True), (12, True), (13, False)])]
    assert score_submission(questions, {"1": 11}).score == 4
    assert score_submission(questions, {"1": 12}).score == 4
    assert score_submission(questions, {"1": 13}).score == 0


def test_order_of_submitted_keys_does_not_matter():
    a = score_submission(_two_question_quiz(), {"1": 11, "2": 22})
    b = score_submission(_two_question_quiz(), {"2": 22, "1": 11})
    assert (a.score, a.correct_answers) == (b.score, b.correct_answers)


def test_outcomes_follow_quiz_order():
    result = score_submission(_two_question_quiz(), {"2": 22})
    assert [o.question_id for o in result.outcomes] == [1, 2]
    assert [o.points_earned for o in result.outcomes] == [0, 1]
