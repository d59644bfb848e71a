"""User repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.user import User


class UserRepository(Protocol):
    """Repository for account records."""

    def get_by_id(self, user_id: int) -> Optional[User]:
        ...

    def get_by_email(self, email: str) -> Optional[User]:
        """Exact, case-sensitive email lookup."""
        ...

    def create(self, user: User) -> User:
        ...

    def save(self, user: User) -> User:
        ...

    def delete_with_data(self, user_id: int) -> bool:
        """Delete logs, habits and then the user; False when already gone."""
        ...
