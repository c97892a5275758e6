"""Infrastructure Layer — database access and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Storage failures are mapped to core/errors.py types before leaving this layer

Design Decisions:
    - Repository implementations live here, their Protocols live in core/
"""
