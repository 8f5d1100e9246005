import pytest
from sqlalchemy import delete, select, func

from app.core.exceptions import NotFoundError, ForbiddenError, BadRequestError
from app.models import Answer, Question, Submission, User, UserRole
from app.schemas.quiz import (
    QuizCreate,
    QuizUpdate,
    QuestionCreate,
    AnswerCreate,
    QuizSubmitRequest,
)
from app.services.quiz_service import QuizService


async def _count(db, model, *where):
    result = await db.execute(select(func.count()).select_from(model).where(*where))
    return result.scalar()


async def _score_of(db, user_id):
    result = await db.execute(select(User.score).where(User.id == user_id))
    return result.scalar_one()


# ============================================================
# Authoring
# ============================================================

async def test_create_quiz_is_owned_by_acting_user_and_unpublished(quiz_service, make_user):
    owner = await make_user()
    quiz = await quiz_service.create_quiz(
        QuizCreate(title="Capitals", description="Europe", cover_image="covers/eu.png"),
        owner,
    )
    assert quiz.created_by == owner.id
    assert quiz.is_published is False
    assert quiz.description == "Europe"


async def test_list_quizzes_filters_and_orders_newest_first(quiz_service, make_user, make_quiz):
    owner = await make_user()
    first, _ = await make_quiz(owner, published=False, title="First quiz")
    second, _ = await make_quiz(owner, published=True, title="Second quiz")
    third, _ = await make_quiz(owner, published=True, title="Third quiz")

    assert [q.id for q in await quiz_service.list_quizzes()] == [third.id, second.id, first.id]
    assert [q.id for q in await quiz_service.list_quizzes(True)] == [third.id, second.id]
    assert [q.id for q in await quiz_service.list_quizzes(False)] == [first.id]


async def test_update_quiz_changes_only_sent_fields(quiz_service, make_user):
    owner = await make_user()
    quiz = await quiz_service.create_quiz(QuizCreate(title="Old title", description="keep me"), owner)

    updated = await quiz_service.update_quiz(quiz.id, QuizUpdate(title="New title"), owner)

    assert updated.title == "New title"
    assert updated.description == "keep me"
    assert updated.updated_at is not None


async def test_full_quiz_orders_questions_by_author_order(quiz_service, make_user):
    owner = await make_user()
    quiz = await quiz_service.create_quiz(QuizCreate(title="Ordering"), owner)
    await quiz_service.add_question(quiz.id, QuestionCreate(text="Third question", order=3), owner)
    await quiz_service.add_question(quiz.id, QuestionCreate(text="First question", order=1, points=4), owner)

    full = await quiz_service.get_quiz_with_questions_and_answers(quiz.id)

    assert [q.order for q in full.questions] == [1, 3]
    assert full.questions[0].points == 4
    assert full.questions[1].points == 1


async def test_full_quiz_includes_answers_added_later(quiz_service, make_user, make_quiz):
    owner = await make_user()
    quiz, built = await make_quiz(owner, [(1, [("Paris", True)])])
    await quiz_service.get_quiz_with_questions_and_answers(quiz.id)

    question, _ = built[0]
    await quiz_service.add_answer(question.id, AnswerCreate(text="Lyon", is_correct=False), owner)

    full = await quiz_service.get_quiz_with_questions_and_answers(quiz.id)
    assert [a.text for a in full.questions[0].answers] == ["Paris", "Lyon"]


async def test_missing_resources_raise_not_found(quiz_service, make_user):
    user = await make_user()
    with pytest.raises(NotFoundError):
        await quiz_service.get_quiz(999)
    with pytest.raises(NotFoundError):
        await quiz_service.get_quiz_with_questions_and_answers(999)
    with pytest.raises(NotFoundError):
        await quiz_service.update_quiz(999, QuizUpdate(title="Nope"), user)
    with pytest.raises(NotFoundError):
        await quiz_service.delete_quiz(999, user)
    with pytest.raises(NotFoundError):
        await quiz_service.add_question(999, QuestionCreate(text="Lost question", order=1), user)
    with pytest.raises(NotFoundError):
        await quiz_service.add_answer(999, AnswerCreate(text="Lost", is_correct=True), user)


async def test_non_owner_cannot_mutate(quiz_service, make_user, make_quiz):
    owner = await make_user()
    intruder = await make_user()
    quiz, built = await make_quiz(owner, [(1, [("Yes", True)])])
    question, _ = built[0]

    with pytest.raises(ForbiddenError):
        await quiz_service.update_quiz(quiz.id, QuizUpdate(title="Hijacked"), intruder)
    with pytest.raises(ForbiddenError):
        await quiz_service.delete_quiz(quiz.id, intruder)
    with pytest.raises(ForbiddenError):
        await quiz_service.add_question(quiz.id, QuestionCreate(text="Sneaky question", order=2), intruder)
    with pytest.raises(ForbiddenError):
        await quiz_service.add_answer(question.id, AnswerCreate(text="Sneaky", is_correct=True), intruder)

    assert (await quiz_service.get_quiz(quiz.id)).title == "General Knowledge"


async def test_admin_is_not_an_owner(quiz_service, make_user, make_quiz):
    owner = await make_user()
    admin = await make_user(role=UserRole.ADMIN)
    quiz, _ = await make_quiz(owner)

    with pytest.raises(ForbiddenError):
        await quiz_service.delete_quiz(quiz.id, admin)


async def test_delete_quiz_cascades(db, quiz_service, make_user, make_quiz):
    owner = await make_user()
    player = await make_user()
    quiz, built = await make_quiz(owner, [(1, [("A", True), ("B", False)]), (2, [("C", True)])])
    await quiz_service.submit_quiz(quiz.id, QuizSubmitRequest(answers={}), player)
    question_ids = [q.id for q, _ in built]

    await quiz_service.delete_quiz(quiz.id, owner)

    with pytest.raises(NotFoundError):
        await quiz_service.get_quiz(quiz.id)
    assert await _count(db, Question, Question.quiz_id == quiz.id) == 0
    assert await _count(db, Answer, Answer.question_id.in_(question_ids)) == 0
    assert await _count(db, Submission, Submission.quiz_id == quiz.id) == 0


# ============================================================
# Submitting
# ============================================================

async def test_worked_example(quiz_service, make_user, make_quiz):
    owner = await make_user()
    player = await make_user()
    quiz, built = await make_quiz(
        owner,
        [
            (2, [("A1", True), ("B1", False)]),
            (1, [("A2", True), ("B2", False)]),
        ],
    )
    (q1, (a1, _)), (q2, (_, wrong)) = built

    result = await quiz_service.submit_quiz(
        quiz.id,
        QuizSubmitRequest(answers={str(q1.id): a1.id, str(q2.id): wrong.id}, time_spent=42),
        player,
    )

    assert (result.score, result.correct_answers, result.total_questions) == (2, 1, 2)
    assert result.max_score == 3
    assert result.submission.time_spent == 42
    assert result.submission.answers == {str(q1.id): a1.id, str(q2.id): wrong.id}


async def test_all_correct_scores_sum_of_points(quiz_service, make_user, make_quiz):
    owner = await make_user()
    player = await make_user()
    quiz, built = await make_quiz(
        owner,
        [(3, [("x", False), ("y", True)]), (5, [("z", True)]), (1, [("w", True)])],
    )
    answers = {str(q.id): next(a.id for a in ans if a.is_correct) for q, ans in built}

    result = await quiz_service.submit_quiz(quiz.id, QuizSubmitRequest(answers=answers), player)

    assert result.score == 9
    assert result.correct_answers == 3


async def test_empty_submission(quiz_service, make_user, make_quiz):
    owner = await make_user()
    player = await make_user()
    quiz, _ = await make_quiz(owner, [(1, [("a", True)]), (1, [("b", True)])])

    result = await quiz_service.submit_quiz(quiz.id, QuizSubmitRequest(answers={}), player)

    assert (result.score, result.correct_answers, result.total_questions) == (0, 0, 2)


async def test_answer_of_other_question_counts_as_incorrect(quiz_service, make_user, make_quiz):
    owner = await make_user()
    player = await make_user()
    quiz, built = await make_quiz(owner, [(1, [("a", True)]), (1, [("b", True)])])
    (q1, _), (_, (other_correct,)) = built

    result = await quiz_service.submit_quiz(
        quiz.id, QuizSubmitRequest(answers={str(q1.id): other_correct.id}), player
    )

    assert result.score == 0
    assert result.correct_answers == 0


async def test_unknown_question_keys_are_ignored(quiz_service, make_user, make_quiz):
    owner = await make_user()
    player = await make_user()
    quiz, built = await make_quiz(owner, [(2, [("a", True)])])
    (q1, (a1,)), = built

    result = await quiz_service.submit_quiz(
        quiz.id, QuizSubmitRequest(answers={str(q1.id): a1.id, "123456": a1.id}), player
    )

    assert result.score == 2
    assert result.ignored_question_ids == ["123456"]


async def test_unpublished_quiz_rejects_submission(db, quiz_service, make_user, make_quiz):
    owner = await make_user()
    player = await make_user()
    quiz, _ = await make_quiz(owner, [(1, [("a", True)])], published=False)

    with pytest.raises(BadRequestError):
        await quiz_service.submit_quiz(quiz.id, QuizSubmitRequest(answers={}), player)

    assert await _count(db, Submission, Submission.quiz_id == quiz.id) == 0


async def test_submit_to_missing_quiz(quiz_service, make_user):
    player = await make_user()
    with pytest.raises(NotFoundError):
        await quiz_service.submit_quiz(404, QuizSubmitRequest(answers={}), player)


async def test_score_is_credited_to_user(db, quiz_service, make_user, make_quiz):
    owner = await make_user()
    player = await make_user(score=10)
    quiz, built = await make_quiz(owner, [(4, [("a", True)])])
    (q1, (a1,)), = built

    await quiz_service.submit_quiz(quiz.id, QuizSubmitRequest(answers={str(q1.id): a1.id}), player)
    await quiz_service.submit_quiz(quiz.id, QuizSubmitRequest(answers={str(q1.id): a1.id}), player)

    assert await _score_of(db, player.id) == 18
    assert await _count(db, Submission, Submission.user_id == player.id) == 2


async def test_failed_submission_insert_rolls_back_score_credit(db, make_user, make_quiz, monkeypatch):
    owner = await make_user()
    player = await make_user()
    player_id = player.id
    quiz, built = await make_quiz(owner, [(3, [("a", True)])])
    quiz_id = quiz.id
    (q1, (a1,)), = built
    answers = {str(q1.id): a1.id}

    service = QuizService(db)

    async def _boom(*args, **kwargs):
        raise RuntimeError("connection lost")

    monkeypatch.setattr(service.submission_repo, "create", _boom)

    with pytest.raises(RuntimeError):
        await service.submit_quiz(quiz_id, QuizSubmitRequest(answers=answers), player)

    assert await _count(db, Submission, Submission.quiz_id == quiz_id) == 0
    assert await _score_of(db, player_id) == 0


async def test_submit_by_deleted_user_leaves_no_submission(db, quiz_service, make_user, make_quiz):
    owner = await make_user()
    player = await make_user()
    player_id = player.id
    quiz, built = await make_quiz(owner, [(2, [("a", True)])])
    quiz_id = quiz.id
    (q1, (a1,)), = built

    await db.execute(delete(User).where(User.id == player_id))
    await db.commit()

    with pytest.raises(NotFoundError):
        await quiz_service.submit_quiz(
            quiz_id, QuizSubmitRequest(answers={str(q1.id): a1.id}), player
        )

    assert await _count(db, Submission, Submission.quiz_id == quiz_id) == 0
    assert await _count(db, Submission, Submission.user_id == player_id) == 0


async def test_user_submissions_most_recent_first(quiz_service, make_user, make_quiz):
    owner = await make_user()
    player = await make_user()
    first_quiz, _ = await make_quiz(owner, [(1, [("a", True)])], title="Quiz one")
    second_quiz, _ = await make_quiz(owner, [(1, [("b", True)])], title="Quiz two")

    await quiz_service.submit_quiz(first_quiz.id, QuizSubmitRequest(answers={}), player)
    await quiz_service.submit_quiz(second_quiz.id, QuizSubmitRequest(answers={}), player)

    history = await quiz_service.get_user_submissions(player.id)
    assert [s.quiz_id for s in history] == [second_quiz.id, first_quiz.id]
    assert await quiz_service.get_user_submissions(owner.id) == []
