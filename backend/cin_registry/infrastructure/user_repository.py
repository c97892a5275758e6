"""User Repository — SQLAlchemy implementation of core.repository_protocols.UserRepository.

Invariants:
    - One repository per AsyncSession (per request); never shared across requests
    - save() commits and refreshes: the returned row always carries its id
    - A unique-constraint violation on insert is rolled back and surfaced as
      DuplicateCinError
    - Every other SQLAlchemyError leaves as DatabaseError naming the operation,
      so callers only ever see core/errors.py types for storage failures

Design Decisions:
    - Repository catches IntegrityError itself instead of relying on the
      session manager: the service must see "duplicate CIN", not "database failed"
    - Re-check by CIN after rollback decides whether the violation was the CIN
      constraint, without parsing driver-specific error text
"""

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cin_registry.core.errors import DatabaseError, ErrorContext
from cin_registry.core.repository_protocols import UserCandidate
from cin_registry.models.user import User

logger = logging.getLogger(__name__)


class DuplicateCinError(Exception):
    """Insert rejected by the uq_users_cin constraint."""

    def __init__(self, cin: str):
        super().__init__(f"CIN {cin} violates uq_users_cin")
        self.cin = cin


class SqlUserRepository:
    """User persistence over an async SQLAlchemy session."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def find_by_cin(self, cin: str) -> User | None:
        try:
            result = await self._db.execute(select(User).where(User.cin == cin))
        except SQLAlchemyError as e:
            raise DatabaseError(str(e), "query", ErrorContext(cin=cin)) from e
        return result.scalar_one_or_none()

    async def find_by_cin_and_release_date(
        self, cin: str, release_date: date,
    ) -> User | None:
        try:
            result = await self._db.execute(
                select(User).where(
                    User.cin == cin,
                    User.cin_release_date == release_date,
                ),
            )
        except SQLAlchemyError as e:
            raise DatabaseError(
                str(e), "query", ErrorContext(cin=cin, release_date=release_date),
            ) from e
        return result.scalar_one_or_none()

    async def save(self, candidate: UserCandidate) -> User:
        """Insert a new user and return it with its assigned id."""
        user = User(
            name=candidate.name,
            cin=candidate.cin,
            cin_release_date=candidate.cin_release_date,
            is_married=bool(candidate.is_married),
        )
        self._db.add(user)
        try:
            await self._db.commit()
        except IntegrityError as e:
            await self._db.rollback()
            if await self.find_by_cin(candidate.cin) is not None:
                logger.warning(
                    f"Insert lost CIN race: {candidate.cin} committed concurrently",
                    extra={"cin": candidate.cin},
                )
                raise DuplicateCinError(candidate.cin) from e
            raise DatabaseError(
                str(e), "commit", ErrorContext(cin=candidate.cin),
            ) from e
        except SQLAlchemyError as e:
            await self._db.rollback()
            raise DatabaseError(
                str(e), "commit", ErrorContext(cin=candidate.cin),
            ) from e
        await self._db.refresh(user)
        logger.info(
            f"User {user.id} persisted",
            extra={"user_id": user.id, "cin": user.cin},
        )
        return user
