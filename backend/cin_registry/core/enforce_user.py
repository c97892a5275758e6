"""User Validation Enforcement — ordered field rules for incoming user records.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no clock reads
    - Return error dict on violation, None on success
    - validate_user_candidate stops at the FIRST violated rule (short-circuit)
    - Messages are part of the external contract and never change wording

Design Decisions:
    - "today" is a parameter: callers own the clock, tests pin it
    - CIN length measured on the raw value (not trimmed): " 1234567" is 8 chars
      and fails the numeric rule, never the length rule
    - Digits are ASCII 0-9 only: str.isdigit() would accept other scripts
    - One ordered rule list for create; lookup has its own single format check
"""

import re
from datetime import date

from cin_registry.core.domain_types import CIN_DIGITS, CIN_LENGTH, LookupRule, UserRule
from cin_registry.core.repository_protocols import UserCandidate

ISO_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

USER_MESSAGES: dict[UserRule, str] = {
    UserRule.USER_DATA_MISSING: "User data cannot be null.",
    UserRule.CIN_MISSING: "CIN cannot be null or empty.",
    UserRule.CIN_LENGTH: "CIN must be 8 characters long.",
    UserRule.CIN_NOT_NUMERIC: "CIN must contain only numbers.",
    UserRule.NAME_MISSING: "Name cannot be null or empty.",
    UserRule.RELEASE_DATE_MISSING: "CIN Release Date cannot be null.",
    UserRule.RELEASE_DATE_IN_FUTURE: "CIN Release Date cannot be in the future.",
}

LOOKUP_MESSAGES: dict[LookupRule, str] = {
    LookupRule.INVALID_CIN_FORMAT: "Invalid CIN format in URL.",
    LookupRule.RELEASE_DATE_PARAM_MISSING: (
        "Release Date parameter ('releaseDate') cannot be null."
    ),
}


def is_numeric(value: str) -> bool:
    """True when value is non-empty and made only of ASCII digits."""
    return bool(value) and all(ch in CIN_DIGITS for ch in value)


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


# --- Create-user rules --------------------------------------------------------

def check_user_present(candidate: UserCandidate | None) -> dict | None:
    """Rule #1: the record itself must be present."""
    if candidate is None:
        return _user_error(UserRule.USER_DATA_MISSING)
    return None


def check_cin_present(cin: str | None) -> dict | None:
    """Rule #2: CIN present and not blank."""
    if _is_blank(cin):
        return _user_error(UserRule.CIN_MISSING)
    return None


def check_cin_length(cin: str) -> dict | None:
    """Rule #3: CIN is exactly 8 characters."""
    if len(cin) != CIN_LENGTH:
        return _user_error(UserRule.CIN_LENGTH)
    return None


def check_cin_numeric(cin: str) -> dict | None:
    """Rule #4: CIN contains only decimal digits."""
    if not is_numeric(cin):
        return _user_error(UserRule.CIN_NOT_NUMERIC)
    return None


def check_name_present(name: str | None) -> dict | None:
    """Rule #5: name present and not blank."""
    if _is_blank(name):
        return _user_error(UserRule.NAME_MISSING)
    return None


def check_release_date_present(release_date: date | None) -> dict | None:
    """Rule #6: CIN release date present."""
    if release_date is None:
        return _user_error(UserRule.RELEASE_DATE_MISSING)
    return None


def check_release_date_not_future(release_date: date, today: date) -> dict | None:
    """Rule #7: release date is today or earlier."""
    if release_date > today:
        return _user_error(UserRule.RELEASE_DATE_IN_FUTURE)
    return None


def validate_user_candidate(
    candidate: UserCandidate | None, today: date,
) -> dict | None:
    """Run the create-user rules in order. Returns the first error, or None."""
    error = check_user_present(candidate)
    if error:
        return error
    error = check_cin_present(candidate.cin)
    if error:
        return error
    return (
        check_cin_length(candidate.cin)
        or check_cin_numeric(candidate.cin)
        or check_name_present(candidate.name)
        or check_release_date_present(candidate.cin_release_date)
        or check_release_date_not_future(candidate.cin_release_date, today)
    )


# --- Lookup rules -------------------------------------------------------------

def check_cin_path_format(cin: str | None) -> dict | None:
    """CIN taken from the URL: present, 8 chars, digits only."""
    if _is_blank(cin) or len(cin) != CIN_LENGTH or not is_numeric(cin):
        return _lookup_error(LookupRule.INVALID_CIN_FORMAT)
    return None


def check_release_date_param(release_date: str | None) -> dict | None:
    """releaseDate query parameter must be supplied; blank counts as absent."""
    if _is_blank(release_date):
        return _lookup_error(LookupRule.RELEASE_DATE_PARAM_MISSING)
    return None


def validate_lookup_params(
    cin: str | None, release_date: str | None,
) -> dict | None:
    """Run the lookup checks in order. Returns the first error, or None."""
    return check_cin_path_format(cin) or check_release_date_param(release_date)


# --- Date parsing -------------------------------------------------------------

def parse_iso_date(value: str) -> date | None:
    """Parse YYYY-MM-DD. None for any other shape or an impossible date."""
    if not ISO_DATE_PATTERN.fullmatch(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


# --- Helpers ------------------------------------------------------------------

def _user_error(rule: UserRule) -> dict:
    return _error(rule.value, USER_MESSAGES[rule])


def _lookup_error(rule: LookupRule) -> dict:
    return _error(rule.value, LOOKUP_MESSAGES[rule])


def _error(code: str, message: str) -> dict:
    """Construct a standard error dict."""
    return {
        "status": "error",
        "error_code": code,
        "message": message,
    }
