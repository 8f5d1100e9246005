"""
Ownership Guard

Decides whether an acting user may change a quiz or add content under it.
Callers load the resource first so that a missing resource surfaces as
NotFoundError before the guard runs.
"""

import logging

from app.core.config import settings
from app.core.exceptions import ForbiddenError
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)


def can_manage(owner_id: int, acting_user: User, admin_override: bool = False) -> bool:
    """True when `acting_user` owns the resource (or is an admin and the override is on)."""
    if acting_user.id == owner_id:
        return True
    return admin_override and acting_user.role == UserRole.ADMIN


def ensure_owner(
    owner_id: int,
    acting_user: User,
    message: str = "You can only modify your own quizzes",
    admin_override: bool = None,
) -> None:
    """
    Raise ForbiddenError unless `acting_user` may manage a resource owned by `owner_id`.

    Args:
        owner_id: id of the quiz creator
        acting_user: user performing the action
        message: error message for the caller
        admin_override: defaults to settings.ADMIN_CAN_MANAGE_ALL_QUIZZES
    """
    if admin_override is None:
        admin_override = settings.ADMIN_CAN_MANAGE_ALL_QUIZZES

    if not can_manage(owner_id, acting_user, admin_override):
        logger.warning(
            f"User {acting_user.id} denied on resource owned by user {owner_id}"
        )
        raise ForbiddenError(message)
