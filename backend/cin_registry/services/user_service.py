"""User Service — CIN uniqueness enforcement and persistence orchestration.

Invariants:
    - create() requires a candidate that already passed validate_user_candidate
    - A CIN is admitted at most once: pre-check by CIN, then insert
    - A duplicate detected late (unique constraint) raises the same
      UserConflictError as the pre-check, never an internal error
    - Lookups raise UserNotFoundError instead of returning None

Design Decisions:
    - Explicitly constructed with an injected UserRepository: no container, no
      module-level instance; FastAPI builds one per request around its session
    - Pre-check stays even with the constraint: it is the common-case path and
      avoids a failed INSERT for every duplicate submission
"""

import logging
from datetime import date

from cin_registry.core.errors import ErrorContext, UserConflictError, UserNotFoundError
from cin_registry.core.repository_protocols import UserCandidate, UserLike, UserRepository
from cin_registry.infrastructure.user_repository import DuplicateCinError

logger = logging.getLogger(__name__)


class UserService:
    """Creates and looks up users through a UserRepository."""

    def __init__(self, repository: UserRepository):
        self._repository = repository

    async def create(self, candidate: UserCandidate) -> UserLike:
        """Persist a validated candidate. Raises UserConflictError on duplicate CIN."""
        cin = candidate.cin
        if await self._repository.find_by_cin(cin) is not None:
            logger.warning(
                f"User creation failed: CIN {cin} already exists.",
                extra={"cin": cin},
            )
            raise UserConflictError(cin)
        try:
            user = await self._repository.save(candidate)
        except DuplicateCinError as e:
            raise UserConflictError(
                cin, ErrorContext(debug_info={"detected_by": "unique_constraint"}),
            ) from e
        logger.info(
            f"User created with CIN {cin}",
            extra={"cin": cin, "user_id": user.id},
        )
        return user

    async def find_by_cin(self, cin: str) -> UserLike:
        logger.debug(f"Looking up user by CIN: {cin}", extra={"cin": cin})
        user = await self._repository.find_by_cin(cin)
        if user is None:
            raise UserNotFoundError(cin)
        return user

    async def find_by_cin_and_release_date(
        self, cin: str, release_date: date,
    ) -> UserLike:
        logger.debug(
            f"Looking up user by CIN: {cin} and Release Date: {release_date}",
            extra={"cin": cin, "release_date": release_date.isoformat()},
        )
        user = await self._repository.find_by_cin_and_release_date(
            cin, release_date,
        )
        if user is None:
            raise UserNotFoundError(cin, release_date)
        return user
