"""Field predicates applied to inbound payloads.

Every function here is pure: it takes a raw value and answers ``True`` or
``False``. Callers decide which message to report.
"""
import re
from typing import Any

from email_validator import validate_email, EmailNotValidError

from .db.models.users.user import (
    EMAIL_MIN, EMAIL_MAX,
    PASSWORD_MIN, PASSWORD_MAX,
    AGE_MIN, AGE_MAX,
    ABOUT_MIN, ABOUT_MAX,
    SKILLS_MAX,
    GENDERS,
)

NAME_PATTERN = re.compile(r"^[a-zA-Zà-ÿÀ-Ÿ' -]{2,30}$")
USERNAME_PATTERN = re.compile(r"^(?!.*[_.]{2})[a-zA-Z0-9][a-zA-Z0-9._]{2,28}[a-zA-Z0-9]$")
PHONE_PATTERN = re.compile(r"^\+?[0-9\s\-]{7,20}$")
PHOTO_URL_PATTERN = re.compile(r"^(https?://)?(www\.)?[a-zA-Z0-9\-]+(\.[a-zA-Z]{2,})(/[^\s]*)?$")
URL_PATTERN = re.compile(
    r"^(https?://)?"
    r"([a-zA-Z0-9]([a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?\.)+[a-zA-Z]{2,}"
    r"(:\d{1,5})?"
    r"([/?#][^\s]*)?$"
)
ABOUT_PATTERN = re.compile(r"^.{%d,%d}$" % (ABOUT_MIN, ABOUT_MAX))


def _is_text(value: Any) -> bool:
    return isinstance(value, str)


def is_email(value: Any) -> bool:
    if not _is_text(value) or not (EMAIL_MIN <= len(value) <= EMAIL_MAX):
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_name(value: Any) -> bool:
    # fullmatch so a trailing newline cannot slip past "$"
    return _is_text(value) and NAME_PATTERN.fullmatch(value) is not None


def is_username(value: Any) -> bool:
    return _is_text(value) and USERNAME_PATTERN.fullmatch(value) is not None


def is_phone(value: Any) -> bool:
    return _is_text(value) and PHONE_PATTERN.fullmatch(value) is not None


def is_age(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return AGE_MIN <= value <= AGE_MAX


def is_photo_url(value: Any) -> bool:
    return _is_text(value) and PHOTO_URL_PATTERN.fullmatch(value) is not None


def is_url(value: Any) -> bool:
    return _is_text(value) and URL_PATTERN.fullmatch(value) is not None


def is_about(value: Any) -> bool:
    return _is_text(value) and ABOUT_PATTERN.fullmatch(value) is not None


def is_skills(value: Any) -> bool:
    return isinstance(value, list) and len(value) <= SKILLS_MAX


def is_password(value: Any) -> bool:
    return _is_text(value) and PASSWORD_MIN <= len(value) <= PASSWORD_MAX


def is_gender(value: Any) -> bool:
    return value in GENDERS
