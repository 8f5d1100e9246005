import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import AuthenticationError, ConflictError
from app.core.security import (
    verify_password,
    create_access_token,
    create_token_pair,
    verify_refresh_token,
    verify_token,
)
from app.models import User
from app.repositories.user_repo import UserRepository
from app.schemas.auth import (
    UserRegister,
    UserLogin,
    TokenResponse,
    TokenRefreshResponse,
    UserResponse,
)

logger = logging.getLogger(__name__)


class AuthService:
    """
    Service class for authentication operations.

    """
    def __init__(self, db: AsyncSession):
        """
        Initialize with database session.

        Args:
            db: AsyncSession instance
        """
        self.db = db
        self.user_repo = UserRepository(db)

    # ============================================================
    # User Registration
    # ============================================================
    async def register(self, user_data: UserRegister) -> TokenResponse:
        """
        Register a new user.

        Self-registration always creates a regular user with a zero score.

        Raises:
            ConflictError: If email already exists
        """
        existing_user = await self.user_repo.get_by_email(user_data.email)
        if existing_user:
            raise ConflictError("User with this email already exists")

        try:
            user = await self.user_repo.create_user(
                email=user_data.email,
                password=user_data.password,
            )
        except IntegrityError:
            # Lost a race against a concurrent registration
            await self.db.rollback()
            raise ConflictError("User with this email already exists")

        logger.info(f"User {user.id} registered")
        return self._create_token_response(user)

    # ============================================================
    # User Login
    # ============================================================
    async def login(self, login_data: UserLogin) -> TokenResponse:
        """
        Authenticate user and return tokens.

        Raises:
            AuthenticationError: If credentials are invalid
        """
        user = await self.user_repo.get_by_email(login_data.email)

        if not user or not verify_password(login_data.password, user.password_hash):
            raise AuthenticationError("Invalid email or password")

        return self._create_token_response(user)

    # ============================================================
    # Token Refresh
    # ============================================================
    async def refresh_token(self, refresh_token: str) -> TokenRefreshResponse:
        """
        Create new access token from refresh token.

        Raises:
            AuthenticationError: If refresh token is invalid or the user is gone
        """
        user_id = verify_refresh_token(refresh_token)
        if not user_id:
            raise AuthenticationError("Invalid or expired refresh token")

        user = await self.user_repo.get_by_id(self._parse_user_id(user_id))
        if not user:
            raise AuthenticationError("User not found")

        return TokenRefreshResponse(
            access_token=create_access_token(
                subject=user.id,
                extra_claims=self._claims(user),
            ),
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        )

    # ============================================================
    # Get Current User
    # ============================================================
    async def get_current_user(self, token: str) -> User:
        """
        Resolve an access token to the user record.

        Raises:
            AuthenticationError: If token is invalid or user does not exist
        """
        payload = verify_token(token)
        if not payload:
            raise AuthenticationError("Invalid or expired token")

        user = await self.user_repo.get_by_id(self._parse_user_id(payload.get("sub")))
        if not user:
            raise AuthenticationError("User not found")

        return user

    # ============================================================
    # Helpers
    # ============================================================
    def _parse_user_id(self, subject) -> int:
        try:
            return int(subject)
        except (TypeError, ValueError):
            raise AuthenticationError("Invalid token subject")

    def _claims(self, user: User) -> dict:
        return {"email": user.email, "role": user.role.value}

    def _create_token_response(self, user: User) -> TokenResponse:
        tokens = create_token_pair(user.id, extra_claims=self._claims(user))
        return TokenResponse(
            user=UserResponse.model_validate(user),
            **tokens,
        )
