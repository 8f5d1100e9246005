"""
User Repository

Data access layer for User model.
All user-related database operations.
"""

from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func

from app.repositories.base import BaseRepository
from app.models import User, UserRole
from app.core.security import get_password_hash


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    # =================
    # Get by email
    # =================
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email address."""
        result = await self.db.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    # =================
    # Create user
    # =================
    async def create_user(
        self,
        email: str,
        password: str,
        role: UserRole = UserRole.USER
    ) -> User:
        """Create a new user with a hashed password and a zero score."""
        return await self.create(
            email=email,
            password_hash=get_password_hash(password),
            role=role,
            score=0,
        )

    # =================
    # Score
    # =================
    async def increment_score(self, user_id: int, delta: int, commit: bool = True) -> Optional[User]:
        """
        Add `delta` to the user's cumulative score.

        Runs a single `UPDATE ... SET score = score + :delta` so concurrent
        submissions by the same user cannot overwrite each other.
        Returns None when the user does not exist.
        """
        result = await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(score=User.score + delta, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None

        if commit:
            await self.db.commit()
        else:
            await self.db.flush()

        refreshed = await self.db.execute(
            select(User)
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        return refreshed.scalar_one()

    # =================
    # Ranking
    # =================
    async def get_top_by_score(self, limit: int = 10) -> List[User]:
        """Users by cumulative score, earliest registered first on ties."""
        result = await self.db.execute(
            select(User)
            .order_by(User.score.desc(), User.created_at.asc(), User.id.asc())
            .limit(limit)
        )
        return list(result.scalars().all())
