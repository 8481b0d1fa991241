"""Repository for UserProfile entity."""

from sqlmodel import select

from src.research_hub.models import UserProfile
from src.research_hub.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserProfile]):
    """Repository for UserProfile entity."""

    model = UserProfile

    async def get_by_email(self, email: str) -> UserProfile | None:
        """Get profile by email address (stored lowercased)."""
        result = await self.session.execute(
            select(UserProfile).where(UserProfile.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> UserProfile | None:
        result = await self.session.execute(
            select(UserProfile).where(UserProfile.username == username)
        )
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        """Check if a profile with the given email exists."""
        return await self.get_by_email(email) is not None

    async def exists_by_username(self, username: str) -> bool:
        return await self.get_by_username(username) is not None
