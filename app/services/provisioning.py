import logging
from typing import Optional

from app.models import User, UserRole
from app.repositories.factory import RepositoryFactory

logger = logging.getLogger(__name__)


def promote_to_admin(factory: RepositoryFactory, email: str) -> Optional[User]:
    """
    Grant the admin role to the user registered under `email`.

    One-time deployment step; the application never runs it on its own.
    Returns None when no such user exists.
    """
    users = factory.get_user_repository()
    user = users.get_by_email(email)
    if user is None:
        logger.warning(f"Admin provisioning: no user registered as {email}")
        return None

    if user.role == UserRole.ADMIN.value:
        logger.info(f"Admin provisioning: {user.email} is already an admin")
        return user

    user = users.set_role(user.id, UserRole.ADMIN)
    logger.info(f"Admin provisioning: promoted {user.email}")
    return user
