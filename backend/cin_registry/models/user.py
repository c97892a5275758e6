"""User ORM — persists registry users keyed by CIN.

Invariants:
    - id is an integer primary key assigned by the database on insert
    - cin is unique at the table level (uq_users_cin): last-resort guard
      for concurrent creates that both pass the service pre-check
    - All columns non-nullable; is_married defaults to False

Design Decisions:
    - Integer (not BigInteger) primary key: autoincrements on both PostgreSQL and SQLite
    - Composite index on (cin, cin_release_date) serves the lookup route
"""

from datetime import date

from sqlalchemy import Boolean, Date, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from cin_registry.core.domain_types import CIN_LENGTH
from cin_registry.db.base import Base


class User(Base):
    """A registered person identified by CIN."""
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("cin", name="uq_users_cin"),
        Index("ix_users_cin_release_date", "cin", "cin_release_date"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    cin: Mapped[str] = mapped_column(String(CIN_LENGTH), nullable=False)
    cin_release_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_married: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, cin={self.cin!r})"
