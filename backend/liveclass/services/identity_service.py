"""Display-name resolution for meeting participants."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from ..core.constants import FALLBACK_DISPLAY_NAME
from ..repositories.factory import RepositoryFactory
from .base import BaseService


@dataclass(frozen=True)
class NameLookup:
    """Outcome of a name lookup: a value, nothing, or the failure that occurred."""

    value: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class IdentityService(BaseService):
    """Resolves the name shown to other participants in a meeting."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)

    def lookup_display_name(self, user_id: str) -> NameLookup:
        """Profile name, else email, else empty; failures are returned, not raised."""
        try:
            user = self.user_repository.get_by_id(user_id)
        except Exception as exc:
            return NameLookup(error=exc)
        if user is None:
            return NameLookup()
        return NameLookup(value=user.full_name or user.email or None)

    def resolve_display_name(self, user_id: str) -> str:
        """Always returns a usable name, falling back to a generic placeholder."""
        lookup = self.lookup_display_name(user_id)
        if not lookup.ok:
            self.logger.warning(
                "Display name lookup failed for user %s: %s",
                user_id,
                lookup.error,
                extra={"user_id": user_id},
            )
        return lookup.value or FALLBACK_DISPLAY_NAME
