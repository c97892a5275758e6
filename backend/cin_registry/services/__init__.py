"""Services Layer — orchestration between routes, core rules, and repositories.

Invariants:
    - Services raise core/errors.py types; they never build HTTP responses
    - Services receive repositories by injection (no module-level state)
"""
