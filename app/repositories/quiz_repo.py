"""
Quiz Repository

Data access layer for Quiz, Question and Answer models.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from app.repositories.base import BaseRepository
from app.models.quiz import Quiz
from app.models.question import Question
from app.models.answer import Answer


class QuizRepository(BaseRepository[Quiz]):
    """Repository for Quiz model."""

    def __init__(self, db: AsyncSession):
        super().__init__(Quiz, db)

    async def create_quiz(self, owner_id: int, **fields) -> Quiz:
        return await self.create(created_by=owner_id, **fields)

    async def list_quizzes(self, is_published: Optional[bool] = None) -> List[Quiz]:
        """List quizzes newest first, optionally filtered by publish state."""
        stmt = select(self.model)

        if is_published is not None:
            stmt = stmt.where(self.model.is_published == is_published)

        stmt = stmt.order_by(self.model.created_at.desc(), self.model.id.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def update_quiz(self, quiz_id: int, **fields) -> Optional[Quiz]:
        # updated_at is set explicitly so it moves even when no value changed
        return await self.update(quiz_id, updated_at=func.now(), **fields)

    async def get_with_questions_and_answers(self, quiz_id: int) -> Optional[Quiz]:
        """
        Load a quiz with its questions and every question's answers.

        Runs three selects (quiz, questions, answers). populate_existing
        makes sure collections cached earlier in the session are reloaded.
        """
        stmt = (
            select(self.model)
            .options(
                selectinload(self.model.questions).selectinload(Question.answers)
            )
            .where(self.model.id == quiz_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()


class QuestionRepository(BaseRepository[Question]):
    """Repository for Question model."""

    def __init__(self, db: AsyncSession):
        super().__init__(Question, db)

    async def get_by_quiz(self, quiz_id: int) -> List[Question]:
        stmt = (
            select(self.model)
            .where(self.model.quiz_id == quiz_id)
            .order_by(self.model.order, self.model.id)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_with_quiz(self, question_id: int) -> Optional[Question]:
        """Get a question together with its parent quiz (for ownership checks)."""
        stmt = (
            select(self.model)
            .options(selectinload(self.model.quiz))
            .where(self.model.id == question_id)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()


class AnswerRepository(BaseRepository[Answer]):
    """Repository for Answer model."""

    def __init__(self, db: AsyncSession):
        super().__init__(Answer, db)

    async def get_by_question(self, question_id: int) -> List[Answer]:
        stmt = (
            select(self.model)
            .where(self.model.question_id == question_id)
            .order_by(self.model.id)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
