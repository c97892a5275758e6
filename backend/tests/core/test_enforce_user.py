"""User rule enforcement tests — pure tests for create and lookup validation.

Tests cover:
    Rules #1-#7 individually (check_* functions)
    validate_user_candidate: first failing rule wins, regardless of later fields
    Boundaries: same-day date accepted, tomorrow rejected; CIN of length 7/9 vs non-digit
    Lookup: check_cin_path_format, check_release_date_param, validate_lookup_params
    parse_iso_date: YYYY-MM-DD only, impossible dates rejected
"""

from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from cin_registry.core.enforce_user import (
    check_cin_length,
    check_cin_numeric,
    check_cin_path_format,
    check_cin_present,
    check_name_present,
    check_release_date_not_future,
    check_release_date_param,
    check_release_date_present,
    check_user_present,
    is_numeric,
    parse_iso_date,
    validate_lookup_params,
    validate_user_candidate,
)

TODAY = date(2024, 6, 15)


def _candidate(**overrides):
    fields = {
        "name": "Jane Doe",
        "cin": "12345678",
        "cin_release_date": date(2020, 1, 1),
        "is_married": False,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


# --- Rule #1: check_user_present ----------------------------------------------

def test_missing_record_fails():
    error = check_user_present(None)
    assert error["error_code"] == "USER_DATA_MISSING"
    assert error["message"] == "User data cannot be null."


def test_present_record_passes():
    assert check_user_present(_candidate()) is None


# --- Rule #2: check_cin_present -----------------------------------------------

@pytest.mark.parametrize("cin", [None, "", "   ", "\t\n"])
def test_blank_cin_fails(cin):
    error = check_cin_present(cin)
    assert error["message"] == "CIN cannot be null or empty."


# --- Rule #3: check_cin_length ------------------------------------------------

@pytest.mark.parametrize("cin", ["1234567", "123456789", "1"])
def test_wrong_length_fails(cin):
    error = check_cin_length(cin)
    assert error["message"] == "CIN must be 8 characters long."


def test_length_measured_before_trim():
    assert check_cin_length(" 1234567") is None


# --- Rule #4: check_cin_numeric -----------------------------------------------

@pytest.mark.parametrize("cin", ["1234567A", "ABCDEFGH", "-1234567", "1234.567", " 1234567"])
def test_non_digit_fails(cin):
    error = check_cin_numeric(cin)
    assert error["message"] == "CIN must contain only numbers."


def test_non_ascii_digits_rejected():
    arabic_indic = "١٢٣٤٥٦٧٨"
    assert arabic_indic.isdigit()
    assert not is_numeric(arabic_indic)
    assert check_cin_numeric(arabic_indic) is not None


def test_all_digits_pass():
    assert check_cin_numeric("00000000") is None


# --- Rule #5: check_name_present ----------------------------------------------

@pytest.mark.parametrize("name", [None, "", "  "])
def test_blank_name_fails(name):
    error = check_name_present(name)
    assert error["message"] == "Name cannot be null or empty."


# --- Rules #6 and #7: release date --------------------------------------------

def test_missing_release_date_fails():
    error = check_release_date_present(None)
    assert error["message"] == "CIN Release Date cannot be null."


def test_same_day_release_date_passes():
    assert check_release_date_not_future(TODAY, TODAY) is None


def test_tomorrow_release_date_fails():
    error = check_release_date_not_future(TODAY + timedelta(days=1), TODAY)
    assert error["error_code"] == "RELEASE_DATE_IN_FUTURE"
    assert error["message"] == "CIN Release Date cannot be in the future."


# --- validate_user_candidate: ordering ----------------------------------------

def test_valid_candidate_passes():
    assert validate_user_candidate(_candidate(), TODAY) is None


@pytest.mark.parametrize(
    ("overrides", "expected"),
    [
        (
            {"cin": None, "name": None, "cin_release_date": None},
            "CIN cannot be null or empty.",
        ),
        (
            {"cin": "123", "name": "", "cin_release_date": None},
            "CIN must be 8 characters long.",
        ),
        (
            {"cin": "1234567A", "name": " ", "cin_release_date": TODAY + timedelta(days=3)},
            "CIN must contain only numbers.",
        ),
        (
            {"name": None, "cin_release_date": None},
            "Name cannot be null or empty.",
        ),
        (
            {"cin_release_date": None},
            "CIN Release Date cannot be null.",
        ),
        (
            {"cin_release_date": TODAY + timedelta(days=1)},
            "CIN Release Date cannot be in the future.",
        ),
    ],
)
def test_first_failing_rule_wins(overrides, expected):
    error = validate_user_candidate(_candidate(**overrides), TODAY)
    assert error["message"] == expected


def test_none_candidate_reports_rule_one():
    error = validate_user_candidate(None, TODAY)
    assert error["message"] == "User data cannot be null."


@pytest.mark.parametrize(
    ("cin", "expected"),
    [
        ("1234567", "CIN must be 8 characters long."),
        ("123456789", "CIN must be 8 characters long."),
        ("123456A", "CIN must be 8 characters long."),
        ("1234567A", "CIN must contain only numbers."),
    ],
)
def test_length_and_numeric_never_both(cin, expected):
    error = validate_user_candidate(_candidate(cin=cin), TODAY)
    assert error["message"] == expected


# --- Lookup checks ------------------------------------------------------------

@pytest.mark.parametrize("cin", [None, "", "   ", "1234567", "123456789", "1234567A"])
def test_invalid_path_cin_fails(cin):
    error = check_cin_path_format(cin)
    assert error["error_code"] == "INVALID_CIN_FORMAT"
    assert error["message"] == "Invalid CIN format in URL."


def test_valid_path_cin_passes():
    assert check_cin_path_format("00000000") is None


@pytest.mark.parametrize("release_date", [None, "", "   "])
def test_missing_release_date_param_fails(release_date):
    error = check_release_date_param(release_date)
    assert error["error_code"] == "RELEASE_DATE_PARAM_MISSING"
    assert error["message"] == "Release Date parameter ('releaseDate') cannot be null."


def test_lookup_checks_cin_before_date():
    error = validate_lookup_params("bad", None)
    assert error["message"] == "Invalid CIN format in URL."


def test_lookup_passes_with_valid_params():
    assert validate_lookup_params("12345678", "2023-01-15") is None


def test_lookup_checks_cin_before_blank_date():
    error = validate_lookup_params("abc", "")
    assert error["message"] == "Invalid CIN format in URL."


def test_lookup_does_not_parse_the_date():
    assert validate_lookup_params("12345678", "xx") is None


# --- parse_iso_date -----------------------------------------------------------

def test_parse_iso_date():
    assert parse_iso_date("2023-01-15") == date(2023, 1, 15)


@pytest.mark.parametrize(
    "value",
    ["15-01-2023", "20230115", "2023-1-15", "2023-02-30", "2023-01-15T00:00:00",
     "\u0662\u0660\u0662\u0663-01-15", ""],
)
def test_parse_rejects_other_shapes(value):
    assert parse_iso_date(value) is None
