"""User Repository — SQLAlchemy implementation of the UserRepository protocol.

Invariants:
    - One repository per request session; every write commits immediately
    - save() assigns id on first insert (model default) and returns the refreshed row
    - A unique-index violation on email surfaces as DuplicateEmailError, never as a 500
    - find_all() imposes no ORDER BY — storage-defined order

Design Decisions:
    - Unique index as the authoritative guarantee: the service's exists_by_email
      check is a fast path, two concurrent writers can both pass it
      (ADR: check-then-write is not transactional)
    - remove_by_id issues a DELETE by key rather than loading the row again
"""

import logging

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from user_api.core.domain_types import UserId
from user_api.core.errors import DuplicateEmailError
from user_api.models.user import User

logger = logging.getLogger(__name__)


class SqlUserRepository:
    """Persists User rows through an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def save(self, user: User) -> User:
        # rollback expires persistent rows: read the email before committing
        email = user.email
        self._db.add(user)
        try:
            await self._db.commit()
        except IntegrityError as e:
            await self._db.rollback()
            logger.warning(
                f"Unique index rejected email {email}: {e.orig}",
                extra={"error_code": "DUPLICATE_EMAIL"},
            )
            raise DuplicateEmailError(email) from e
        await self._db.refresh(user)
        return user

    async def find_by_id(self, user_id: UserId) -> User | None:
        return await self._db.get(User, user_id)

    async def exists_by_email(self, email: str) -> bool:
        result = await self._db.scalar(
            select(exists().where(User.email == email)),
        )
        return bool(result)

    async def find_all(self) -> list[User]:
        result = await self._db.execute(select(User))
        return list(result.scalars().all())

    async def remove_by_id(self, user_id: UserId) -> None:
        await self._db.execute(delete(User).where(User.id == user_id))
        await self._db.commit()
