"""User Schemas — request binding and response shape for the users API.

Invariants:
    - UserCreate binds leniently: every field optional so the ordered rules in
      core/enforce_user.py decide which message the caller sees
    - UserCreate ignores an incoming id (extra fields dropped)
    - UserResponse always carries the server-assigned id

Design Decisions:
    - coerce_numbers_to_str on UserCreate: a JSON number CIN (12345678) binds as
      "12345678" and is then validated like any other string
    - cinReleaseDate accepts only YYYY-MM-DD text (blank text binds as missing): numbers and
      datetimes fail binding and surface as rule #1
    - Explicit aliases instead of an alias generator: the wire names are a contract
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cin_registry.core.enforce_user import parse_iso_date
from cin_registry.core.repository_protocols import UserLike


class UserCreate(BaseModel):
    """Create-user payload. Satisfies core.repository_protocols.UserCandidate."""
    model_config = ConfigDict(
        populate_by_name=True, coerce_numbers_to_str=True, extra="ignore",
    )

    name: str | None = None
    cin: str | None = None
    cin_release_date: date | None = Field(None, alias="cinReleaseDate")
    is_married: bool = Field(False, alias="isMarried")

    @field_validator("is_married", mode="before")
    @classmethod
    def null_married_is_false(cls, v):
        return False if v is None else v

    @field_validator("cin_release_date", mode="before")
    @classmethod
    def release_date_is_iso_text(cls, v):
        if v is None or (isinstance(v, date) and not isinstance(v, datetime)):
            return v
        if isinstance(v, str) and not v.strip():
            return None
        parsed = parse_iso_date(v) if isinstance(v, str) else None
        if parsed is None:
            raise ValueError("cinReleaseDate must be a YYYY-MM-DD date")
        return parsed


class UserResponse(BaseModel):
    """Persisted user as returned to the caller."""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    cin: str
    cin_release_date: date = Field(alias="cinReleaseDate")
    is_married: bool = Field(alias="isMarried")

    @classmethod
    def from_user(cls, user: UserLike) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            cin=user.cin,
            cin_release_date=user.cin_release_date,
            is_married=user.is_married,
        )
