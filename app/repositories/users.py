from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.models import User, UserRole
from app.repositories.base import BaseRepository, RepositoryError
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_by_email(self, email: str) -> Optional[User]:
        """
        Case-insensitive lookup; emails are stored lowercased.
        """
        try:
            return (
                self.db.query(User)
                .filter(User.email == email.strip().lower())
                .first()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error getting user by email {email}: {e}")
            raise RepositoryError("Failed to get user by email") from e

    def create_user(self, username: str, email: str, role: UserRole = UserRole.USER, **profile) -> User:
        return self.create({
            "username": username.strip(),
            "email": email.strip().lower(),
            "role": UserRole(role).value,
            **profile,
        })

    def set_role(self, user_id: str, role: UserRole) -> Optional[User]:
        return self.update(user_id, {"role": UserRole(role).value})
