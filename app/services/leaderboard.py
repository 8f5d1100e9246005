"""
Leaderboard Service

Ranked views over submissions (per quiz) and users (global).

The global board reads the stored cumulative score on each user rather
than re-summing submissions.
"""

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import BadRequestError
from app.repositories.submission_repo import SubmissionRepository
from app.repositories.user_repo import UserRepository
from app.schemas.quiz import QuizLeaderboardEntry, GlobalLeaderboardEntry


class LeaderboardService:
    """Builds per-quiz and global leaderboards."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.submission_repo = SubmissionRepository(db)
        self.user_repo = UserRepository(db)

    def _resolve_limit(self, limit: int = None) -> int:
        """Default when omitted; reject limits outside 1..LEADERBOARD_MAX_LIMIT."""
        if limit is None:
            return settings.LEADERBOARD_DEFAULT_LIMIT
        if limit < 1 or limit > settings.LEADERBOARD_MAX_LIMIT:
            raise BadRequestError(
                f"limit must be between 1 and {settings.LEADERBOARD_MAX_LIMIT}"
            )
        return limit

    async def get_quiz_leaderboard(
        self,
        quiz_id: int,
        limit: int = None,
    ) -> List[QuizLeaderboardEntry]:
        """
        Top submissions for a quiz, highest score first.

        Ties go to whoever completed first. A quiz without submissions
        (or an unknown quiz id) yields an empty board.
        """
        rows = await self.submission_repo.get_top_for_quiz(
            quiz_id, self._resolve_limit(limit)
        )
        return [
            QuizLeaderboardEntry(
                rank=position,
                user_id=submission.user_id,
                user_email=email,
                score=submission.score,
                completed_at=submission.completed_at,
            )
            for position, (submission, email) in enumerate(rows, start=1)
        ]

    async def get_global_leaderboard(self, limit: int = None) -> List[GlobalLeaderboardEntry]:
        """Users by cumulative score; ties go to the earlier registration."""
        users = await self.user_repo.get_top_by_score(self._resolve_limit(limit))
        return [
            GlobalLeaderboardEntry(
                rank=position,
                user_id=user.id,
                email=user.email,
                total_score=user.score,
            )
            for position, user in enumerate(users, start=1)
        ]
