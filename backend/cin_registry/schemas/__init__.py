"""Pydantic Schemas — request/response contracts for API endpoints.

Invariants:
    - Schemas bind input at the system boundary; field rules live in core/enforce_user.py
    - Wire names are camelCase, Python attributes snake_case

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence (ADR: DDD boundary)
"""
