"""User profile repositories."""

import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from schemas.profile import UserProfile


class UserRepository(ABC):
    """Abstract store of user profiles. The matching engine only reads from it."""

    @abstractmethod
    def save(self, user: UserProfile) -> UserProfile:
        """Create or update a user profile, stamping updated_at."""
        pass

    @abstractmethod
    def get_by_id(self, user_id: str) -> Optional[UserProfile]:
        """Get a user by ID, or None."""
        pass

    @abstractmethod
    def get_all(self) -> list[UserProfile]:
        """Get all users in insertion order."""
        pass

    @abstractmethod
    def delete(self, user_id: str) -> bool:
        """Delete a user. Returns False if it did not exist."""
        pass

    @abstractmethod
    def clear(self):
        """Remove all users."""
        pass

    def get_all_except(self, user_id: str) -> list[UserProfile]:
        """Get all users except the specified one."""
        return [user for user in self.get_all() if user.id != user_id]

    def exists(self, user_id: str) -> bool:
        """Check if a user exists."""
        return self.get_by_id(user_id) is not None

    def get_by_skill_category(self, category: str) -> list[UserProfile]:
        """Get users offering or wanting a skill in the given category (case-insensitive)."""
        category_lower = category.lower()
        return [
            user for user in self.get_all()
            if any(
                skill.category is not None and skill.category.lower() == category_lower
                for skill in [*user.offers, *user.wants]
            )
        ]


class InMemoryUserRepository(UserRepository):
    """Dict-backed repository, useful for tests and small deployments."""

    def __init__(self):
        self._users: dict[str, UserProfile] = {}
        self._lock = threading.Lock()

    def save(self, user: UserProfile) -> UserProfile:
        updated_user = user.model_copy(update={"updated_at": datetime.now()})
        with self._lock:
            self._users[user.id] = updated_user
        return updated_user

    def get_by_id(self, user_id: str) -> Optional[UserProfile]:
        with self._lock:
            return self._users.get(user_id)

    def get_all(self) -> list[UserProfile]:
        with self._lock:
            return list(self._users.values())

    def delete(self, user_id: str) -> bool:
        with self._lock:
            return self._users.pop(user_id, None) is not None

    def clear(self):
        with self._lock:
            self._users.clear()
