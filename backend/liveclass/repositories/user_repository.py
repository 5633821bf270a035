"""Read access to user accounts."""

from __future__ import annotations

from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.enums import Role
from ..core.exceptions import RepositoryException
from ..models.user import User
from .base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User rows."""

    def __init__(self, db: Session):
        super().__init__(db, User)

    def list_active_instructors(self, tenant_id: str) -> List[User]:
        try:
            return (
                self.db.query(User)
                .filter(
                    User.tenant_id == tenant_id,
                    User.role == Role.INSTRUCTOR.value,
                    User.is_active.is_(True),
                )
                .order_by(User.first_name, User.last_name, User.email)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error("Error listing instructors for tenant %s: %s", tenant_id, e)
            raise RepositoryException(f"Failed to list instructors: {e}") from e
