"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps the integer identity assigned by the store
    - Cin wraps the raw 8-digit code exactly as submitted
    - Every validation rule is an Enum member — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON/log fields without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
Cin = NewType("Cin", str)


# ─── Constants ───────────────────────────────────────────────────

CIN_LENGTH = 8
CIN_DIGITS = frozenset("0123456789")


# ─── Enums ───────────────────────────────────────────────────────

class UserRule(str, Enum):
    """Create-user validation rules, in evaluation order."""
    USER_DATA_MISSING = "USER_DATA_MISSING"
    CIN_MISSING = "CIN_MISSING"
    CIN_LENGTH = "CIN_LENGTH"
    CIN_NOT_NUMERIC = "CIN_NOT_NUMERIC"
    NAME_MISSING = "NAME_MISSING"
    RELEASE_DATE_MISSING = "RELEASE_DATE_MISSING"
    RELEASE_DATE_IN_FUTURE = "RELEASE_DATE_IN_FUTURE"


class LookupRule(str, Enum):
    """Lookup-route parameter rules, in evaluation order."""
    INVALID_CIN_FORMAT = "INVALID_CIN_FORMAT"
    RELEASE_DATE_PARAM_MISSING = "RELEASE_DATE_PARAM_MISSING"
