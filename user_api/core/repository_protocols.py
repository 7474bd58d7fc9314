"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO
    - Storage enforces nothing about uniqueness except an optional unique index;
      save() may raise DuplicateEmailError when that index fires
"""

from typing import Protocol

from user_api.core.domain_types import UserId


class UserLike(Protocol):
    """Structural contract for a stored User."""
    id: str | None
    name: str
    email: str
    age: int


class UserRepository(Protocol):
    """Contract for user persistence — implemented by shell."""
    async def save(self, user: UserLike) -> UserLike: ...
    async def find_by_id(self, user_id: UserId) -> UserLike | None: ...
    async def exists_by_email(self, email: str) -> bool: ...
    async def find_all(self) -> list[UserLike]: ...
    async def remove_by_id(self, user_id: UserId) -> None: ...
