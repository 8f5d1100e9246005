"""
Submission Repository

Data access layer for Submission model (append-only).
"""

from typing import List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.repositories.base import BaseRepository
from app.models.submission import Submission
from app.models.user import User


class SubmissionRepository(BaseRepository[Submission]):
    """Repository for Submission model."""

    def __init__(self, db: AsyncSession):
        super().__init__(Submission, db)

    async def get_by_user(self, user_id: int) -> List[Submission]:
        """A user's submissions, most recently completed first."""
        stmt = (
            select(self.model)
            .where(self.model.user_id == user_id)
            .order_by(self.model.completed_at.desc(), self.model.id.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_top_for_quiz(self, quiz_id: int, limit: int = 10) -> List[Tuple[Submission, str]]:
        """
        Best submissions for a quiz joined with the submitter's email.

        Ties go to the earlier completion, then the lower id.
        """
        stmt = (
            select(self.model, User.email)
            .join(User, self.model.user_id == User.id)
            .where(self.model.quiz_id == quiz_id)
            .order_by(
                self.model.score.desc(),
                self.model.completed_at.asc(),
                self.model.id.asc(),
            )
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]
