"""User repository."""

from typing import Optional

from sqlalchemy import select, func

from ..models import User, UserRole
from .base import Repository


class UserRepository(Repository[User]):
    """Repository for dashboard user accounts."""

    model = User

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email (for login)."""
        query = select(User).where(User.email == email)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        """Check if an email is already registered."""
        query = select(func.count()).select_from(User).where(User.email == email)
        result = await self.session.execute(query)
        return result.scalar_one() > 0

    async def admin_exists(self) -> bool:
        """Check if at least one admin account exists."""
        query = select(func.count()).select_from(User).where(User.role == UserRole.ADMIN)
        result = await self.session.execute(query)
        return result.scalar_one() > 0
