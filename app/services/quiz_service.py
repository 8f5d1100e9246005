"""
Quiz Service

Business logic for quiz operations:
- Quiz authoring (create/update/delete, questions, answers) restricted to the owner
- Quiz taking: grading a submission and crediting the user's score
- Submission history and leaderboards
"""

import logging
from typing import List, Optional
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, BadRequestError
from app.models.quiz import Quiz
from app.models.question import Question
from app.models.answer import Answer
from app.models.submission import Submission
from app.models.user import User
from app.repositories.quiz_repo import (
    QuizRepository,
    QuestionRepository,
    AnswerRepository,
)
from app.repositories.submission_repo import SubmissionRepository
from app.repositories.user_repo import UserRepository
from app.schemas.quiz import (
    QuizCreate,
    QuizUpdate,
    QuestionCreate,
    AnswerCreate,
    QuizSubmitRequest,
    SubmissionResponse,
    SubmissionResultResponse,
    QuizLeaderboardEntry,
    GlobalLeaderboardEntry,
)
from app.services.leaderboard import LeaderboardService
from app.services.ownership import ensure_owner
from app.services.scoring import score_submission

logger = logging.getLogger(__name__)


class QuizService:
    """Service for quiz authoring, taking and ranking."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.quiz_repo = QuizRepository(db)
        self.question_repo = QuestionRepository(db)
        self.answer_repo = AnswerRepository(db)
        self.submission_repo = SubmissionRepository(db)
        self.user_repo = UserRepository(db)
        self.leaderboard = LeaderboardService(db)

    # ============================================================
    # CREATE QUIZ
    # ============================================================

    async def create_quiz(self, quiz_data: QuizCreate, acting_user: User) -> Quiz:
        quiz = await self.quiz_repo.create_quiz(
            owner_id=acting_user.id,
            **quiz_data.model_dump(),
        )
        logger.info(f"Quiz {quiz.id} created by user {acting_user.id}")
        return quiz

    # ============================================================
    # READ
    # ============================================================

    async def get_quiz(self, quiz_id: int) -> Quiz:
        quiz = await self.quiz_repo.get_by_id(quiz_id)
        if not quiz:
            raise NotFoundError("Quiz not found")
        return quiz

    async def list_quizzes(self, is_published: Optional[bool] = None) -> List[Quiz]:
        return await self.quiz_repo.list_quizzes(is_published)

    async def get_quiz_with_questions_and_answers(self, quiz_id: int) -> Quiz:
        quiz = await self.quiz_repo.get_with_questions_and_answers(quiz_id)
        if not quiz:
            raise NotFoundError("Quiz not found")
        return quiz

    # ============================================================
    # UPDATE / DELETE QUIZ
    # ============================================================

    async def update_quiz(
        self,
        quiz_id: int,
        quiz_data: QuizUpdate,
        acting_user: User,
    ) -> Quiz:
        quiz = await self.get_quiz(quiz_id)
        ensure_owner(quiz.created_by, acting_user, "You can only update your own quizzes")

        update_data = quiz_data.model_dump(exclude_unset=True)
        if not update_data:
            return quiz

        quiz = await self.quiz_repo.update_quiz(quiz_id, **update_data)
        logger.info(f"Quiz {quiz_id} updated by user {acting_user.id}: {sorted(update_data)}")
        return quiz

    async def delete_quiz(self, quiz_id: int, acting_user: User) -> None:
        """Delete a quiz; the store cascades questions, answers and submissions."""
        quiz = await self.get_quiz(quiz_id)
        ensure_owner(quiz.created_by, acting_user, "You can only delete your own quizzes")

        await self.quiz_repo.delete(quiz_id)
        logger.info(f"Quiz {quiz_id} deleted by user {acting_user.id}")

    # ============================================================
    # QUESTIONS & ANSWERS
    # ============================================================

    async def add_question(
        self,
        quiz_id: int,
        question_data: QuestionCreate,
        acting_user: User,
    ) -> Question:
        quiz = await self.get_quiz(quiz_id)
        ensure_owner(
            quiz.created_by,
            acting_user,
            "You can only add questions to your own quizzes",
        )

        return await self.question_repo.create(
            quiz_id=quiz_id,
            **question_data.model_dump(),
        )

    async def add_answer(
        self,
        question_id: int,
        answer_data: AnswerCreate,
        acting_user: User,
    ) -> Answer:
        question = await self.question_repo.get_with_quiz(question_id)
        if not question:
            raise NotFoundError("Question not found")

        ensure_owner(
            question.quiz.created_by,
            acting_user,
            "You can only add answers to your own quiz questions",
        )

        return await self.answer_repo.create(
            question_id=question_id,
            **answer_data.model_dump(),
        )

    # ============================================================
    # SUBMIT QUIZ
    # ============================================================

    async def submit_quiz(
        self,
        quiz_id: int,
        submission_data: QuizSubmitRequest,
        acting_user: User,
    ) -> SubmissionResultResponse:
        """
        Grade a submission, record it and credit the user's score.

        The submission row and the score increment are written in one
        transaction: either both are stored or neither is.

        Raises:
            NotFoundError: quiz or user missing
            BadRequestError: quiz is not published
        """
        quiz = await self.get_quiz_with_questions_and_answers(quiz_id)

        if not quiz.is_published:
            raise BadRequestError("Quiz is not published yet")

        breakdown = score_submission(quiz.questions, submission_data.answers)
        user_id = acting_user.id

        try:
            # A deleted user surfaces here, before the submission insert
            user = await self.user_repo.increment_score(
                user_id, breakdown.score, commit=False
            )
            if user is None:
                raise NotFoundError("User not found")

            submission = await self.submission_repo.create(
                commit=False,
                user_id=user_id,
                quiz_id=quiz_id,
                score=breakdown.score,
                total_questions=breakdown.total_questions,
                correct_answers=breakdown.correct_answers,
                time_spent=submission_data.time_spent,
                answers=dict(submission_data.answers),
                completed_at=datetime.now(timezone.utc),
            )

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(
                f"Submission for quiz {quiz_id} by user {user_id} rolled back"
            )
            raise

        logger.info(
            f"User {user_id} scored {breakdown.score}/{breakdown.max_score} "
            f"on quiz {quiz_id} (submission {submission.id})"
        )

        return SubmissionResultResponse(
            score=breakdown.score,
            total_questions=breakdown.total_questions,
            correct_answers=breakdown.correct_answers,
            max_score=breakdown.max_score,
            ignored_question_ids=breakdown.ignored_question_ids,
            submission=SubmissionResponse.model_validate(submission),
        )

    # ============================================================
    # HISTORY & LEADERBOARDS
    # ============================================================

    async def get_user_submissions(self, user_id: int) -> List[Submission]:
        return await self.submission_repo.get_by_user(user_id)

    async def get_quiz_leaderboard(
        self,
        quiz_id: int,
        limit: Optional[int] = None,
    ) -> List[QuizLeaderboardEntry]:
        return await self.leaderboard.get_quiz_leaderboard(quiz_id, limit)

    async def get_global_leaderboard(
        self,
        limit: Optional[int] = None,
    ) -> List[GlobalLeaderboardEntry]:
        return await self.leaderboard.get_global_leaderboard(limit)
