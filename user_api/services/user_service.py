"""User Service — business rules for the User resource.

Invariants:
    - Email uniqueness checked before every write that introduces a new email
    - Update with the user's own unchanged email skips the uniqueness lookup entirely
    - Absence is a value: get/update return None, delete returns False — never raise
    - id comes from storage on create and is preserved on update (never taken from input)
    - No retries: storage failures propagate as DatabaseError

Design Decisions:
    - Depends on the UserRepository protocol, not on SQLAlchemy: unit tests drive it
      with an in-memory fake (ADR: ExMA impureim sandwich)
    - Candidate validation happens before the service is called (API boundary);
      the service assumes a well-formed candidate
"""

import logging

from user_api.core.domain_types import UserId
from user_api.core.errors import DuplicateEmailError
from user_api.core.repository_protocols import UserRepository
from user_api.core.validate_user import UserCandidate
from user_api.models.user import User

logger = logging.getLogger(__name__)


class UserService:
    """Orchestrates uniqueness checks, existence checks and storage I/O."""

    def __init__(self, repository: UserRepository):
        self._repository = repository

    async def create_user(self, candidate: UserCandidate) -> User:
        """Persist a new user. Raises DuplicateEmailError if the email is taken."""
        logger.debug(f"Creating new user with email: {candidate.email}")
        await self._ensure_email_available(candidate.email)
        user = User(
            name=candidate.name, email=candidate.email, age=candidate.age,
        )
        saved = await self._repository.save(user)
        logger.info(
            f"Created user {saved.id} with email {saved.email}",
            extra={"user_id": saved.id},
        )
        return saved

    async def get_all_users(self) -> list[User]:
        users = await self._repository.find_all()
        logger.info(f"Retrieved {len(users)} users")
        return users

    async def get_user_by_id(self, user_id: UserId) -> User | None:
        user = await self._repository.find_by_id(user_id)
        if user is None:
            logger.warning(
                f"User not found with ID: {user_id}", extra={"user_id": user_id},
            )
        return user

    async def update_user(
        self, user_id: UserId, candidate: UserCandidate,
    ) -> User | None:
        """Full replacement of name, email and age.

        Returns None when no user has this id. Raises DuplicateEmailError when
        the email changes to one owned by another user.
        """
        existing = await self._repository.find_by_id(user_id)
        if existing is None:
            logger.warning(
                f"Attempt to update non-existent user with ID: {user_id}",
                extra={"user_id": user_id},
            )
            return None

        old_email = existing.email
        if candidate.email != old_email:
            await self._ensure_email_available(candidate.email)

        existing.name = candidate.name
        existing.email = candidate.email
        existing.age = candidate.age
        updated = await self._repository.save(existing)
        logger.info(
            f"Updated user {user_id}. Email changed from {old_email} to {updated.email}",
            extra={"user_id": user_id},
        )
        return updated

    async def delete_user(self, user_id: UserId) -> bool:
        """Permanently remove a user. Returns False when no user has this id."""
        existing = await self._repository.find_by_id(user_id)
        if existing is None:
            logger.warning(
                f"Attempt to delete non-existent user with ID: {user_id}",
                extra={"user_id": user_id},
            )
            return False
        email = existing.email
        await self._repository.remove_by_id(user_id)
        logger.info(
            f"Deleted user {user_id} (email: {email})", extra={"user_id": user_id},
        )
        return True

    async def _ensure_email_available(self, email: str) -> None:
        if await self._repository.exists_by_email(email):
            logger.warning(
                f"Duplicate email rejected: {email}",
                extra={"error_code": "DUPLICATE_EMAIL"},
            )
            raise DuplicateEmailError(email)
