"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the only entity

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete for create_all and alembic
"""

from cin_registry.models.user import User  # noqa: F401
