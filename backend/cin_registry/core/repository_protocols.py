"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but the pure validators that read UserCandidate are never async
"""

from datetime import date
from typing import Protocol


class UserCandidate(Protocol):
    """Structural contract for an incoming, not-yet-persisted user.

    Satisfied by the API request schema; keeps core free of Pydantic.
    """
    name: str | None
    cin: str | None
    cin_release_date: date | None
    is_married: bool


class UserLike(Protocol):
    """Structural contract for a persisted user (ORM row)."""
    id: int
    name: str
    cin: str
    cin_release_date: date
    is_married: bool


class UserRepository(Protocol):
    """Contract for user persistence — implemented by shell."""
    async def find_by_cin(self, cin: str) -> UserLike | None: ...
    async def find_by_cin_and_release_date(
        self, cin: str, release_date: date,
    ) -> UserLike | None: ...
    async def save(self, candidate: UserCandidate) -> UserLike: ...
