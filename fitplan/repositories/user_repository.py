from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fitplan.core.exceptions import NotFoundError, PreconditionFailedError
from fitplan.models.user import User, UserHealth, UserPreferences, UserProfile
from fitplan.repositories.base import Repository


@dataclass
class UserContext:
    """Everything the recommendation engine reads about a user."""

    user_id: int
    profile: UserProfile
    preferences: UserPreferences
    health: UserHealth | None


class UserRepository(Repository[User, int]):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> User | None:
        result = await self._session.execute(
            select(User)
            .options(selectinload(User.profile))
            .options(selectinload(User.preferences))
            .options(selectinload(User.health))
            .where(User.id == id)
        )
        return result.scalar_one_or_none()

    async def create(self, entity: User) -> User:
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def get_context(self, user_id: int) -> UserContext:
        """Load profile, preferences and health for a user.

        Raises:
            NotFoundError: If the user does not exist.
            PreconditionFailedError: If the user exists but has not finished
                onboarding (profile or preferences missing).
        """
        user = await self.get(user_id)
        if user is None:
            raise NotFoundError("user", details={"user_id": user_id})

        if user.profile is None or user.preferences is None:
            raise PreconditionFailedError(
                "User profile not complete. Please complete onboarding first.",
                details={
                    "user_id": user_id,
                    "has_profile": user.profile is not None,
                    "has_preferences": user.preferences is not None,
                },
            )

        return UserContext(
            user_id=user.id,
            profile=user.profile,
            preferences=user.preferences,
            health=user.health,
        )
