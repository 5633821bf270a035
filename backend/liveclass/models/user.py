# backend/liveclass/models/user.py
"""
User model.

Accounts are provisioned by the identity service; this table is read for
display names on meeting participants and for instructor reporting.
"""

from typing import Optional

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.sql import func
import ulid

from ..database import Base


class User(Base):
    """
    Platform account.

    Attributes:
        id: Primary key (ULID)
        email: Unique email address
        first_name / last_name: Optional profile names
        role: student | instructor | tenant | admin | superadmin
        tenant_id: Owning tenant (institute) for staff and students
        is_active: Whether the account may be used
    """

    __tablename__ = "users"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    role = Column(String(20), nullable=False, index=True)
    tenant_id = Column(String(26), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    @property
    def full_name(self) -> Optional[str]:
        parts = [p for p in (self.first_name, self.last_name) if p]
        if not parts:
            return None
        return " ".join(parts)

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"
