"""User ORM — persists the single User resource.

Invariants:
    - id is an opaque string key (UUID4 text) assigned at first save, never reused
    - email carries a unique index: the authoritative uniqueness guarantee
    - name/email/age are non-nullable; range and grammar rules live in core/validate_user.py

Design Decisions:
    - String id over native UUID column: identifiers are opaque to clients and the
      same column type works on PostgreSQL and SQLite (ADR: test DB parity)
    - No created_at/updated_at: no audit trail
"""

import uuid

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from user_api.db.base import Base


def _new_user_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """User record — the only entity."""
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=_new_user_id,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(320), nullable=False, unique=True, index=True,
    )
    age: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, email={self.email!r})"
