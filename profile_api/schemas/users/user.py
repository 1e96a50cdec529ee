# profile_api/schemas/users/user.py
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from typing import Optional, List, Dict, Any, Type, TypeVar
from datetime import datetime

from ... import validators
from ...exceptions import ErrorKind, ProfileError
from ...db.models.users.user import (
    FIRST_NAME_MIN, FIRST_NAME_MAX,
    LAST_NAME_MIN, LAST_NAME_MAX,
    PHOTO_URL_MAX,
    DEFAULT_PHOTO_URL,
    DEFAULT_ABOUT,
)

ALLOWED_UPDATES = ("phone", "age", "photoUrl", "about", "skills", "password")

SKILLS_MESSAGE = "Cannot add more than 5 skills."
PHONE_MESSAGE = "Invalid phone number."
AGE_MESSAGE = "Invalid Age."
ABOUT_MESSAGE = "About me should be between 5 and 150 characters."
PASSWORD_MESSAGE = "Password must be between 8 and 100 characters."

RequestT = TypeVar("RequestT", bound=BaseModel)

__all__ = [
    "ALLOWED_UPDATES",
    "SignupRequest",
    "UpdateRequest",
    "LookupRequest",
    "DeleteRequest",
    "UserResponse",
    "parse_payload",
    "parse_update",
]


def _coerce_phone(v):
    # JSON numbers are accepted and kept as their decimal text
    if isinstance(v, int) and not isinstance(v, bool):
        return str(v)
    return v


def _coerce_age(v):
    if v is None or isinstance(v, bool):
        raise ValueError(AGE_MESSAGE)
    if isinstance(v, float) and v.is_integer():
        return int(v)
    if isinstance(v, str):
        try:
            return int(v.strip())
        except ValueError:
            raise ValueError(AGE_MESSAGE)
    return v


def _check_age(v: int) -> int:
    if not validators.is_age(v):
        raise ValueError(AGE_MESSAGE)
    return v


def _check_phone(v: Optional[str]) -> str:
    if not validators.is_phone(v):
        raise ValueError(PHONE_MESSAGE)
    return v


def _check_about(v: Optional[str]) -> str:
    if v is None:
        raise ValueError(ABOUT_MESSAGE)
    v = v.strip()
    if not validators.is_about(v):
        raise ValueError(ABOUT_MESSAGE)
    return v


def _check_skills(v: Optional[List[str]]) -> List[str]:
    if v is None:
        raise ValueError("Invalid skills.")
    if not validators.is_skills(v):
        raise ValueError(SKILLS_MESSAGE)
    return v


def _check_password(v: Optional[str]) -> str:
    if not validators.is_password(v):
        raise ValueError(PASSWORD_MESSAGE)
    return v


class SignupRequest(BaseModel):
    """Validated signup payload. Field order is the order checks are reported in."""

    model_config = ConfigDict(extra="ignore")

    email: str
    first_name: str = Field(..., alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    username: str
    password: str
    phone: Optional[str] = None
    gender: Optional[str] = None
    age: Optional[int] = None
    photo_url: str = Field(DEFAULT_PHOTO_URL, alias="photoUrl")
    about: str = DEFAULT_ABOUT
    skills: List[str] = Field(default_factory=list)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        if not validators.is_email(v):
            raise ValueError("Invalid Email.")
        return v.strip().lower()

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v, info):
        if v is None:
            return v
        if not validators.is_name(v):
            raise ValueError("Invalid Name")
        v = v.strip()
        if info.field_name == "first_name":
            low, high = FIRST_NAME_MIN, FIRST_NAME_MAX
        else:
            low, high = LAST_NAME_MIN, LAST_NAME_MAX
        if not (low <= len(v) <= high):
            raise ValueError(f"Name must be between {low} and {high} characters.")
        return v

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        if not validators.is_username(v):
            raise ValueError("Invalid username.")
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return _check_password(v)

    @field_validator("phone", mode="before")
    @classmethod
    def coerce_phone(cls, v):
        return _coerce_phone(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v is None:
            return v
        return _check_phone(v)

    @field_validator("gender")
    @classmethod
    def validate_gender(cls, v):
        if v is not None and not validators.is_gender(v):
            raise ValueError("Gender must be one of male, female or other.")
        return v

    @field_validator("age", mode="before")
    @classmethod
    def coerce_age(cls, v):
        if v is None:
            return v
        return _coerce_age(v)

    @field_validator("age")
    @classmethod
    def validate_age(cls, v):
        if v is None:
            return v
        return _check_age(v)

    @field_validator("photo_url")
    @classmethod
    def validate_photo_url(cls, v):
        if len(v) > PHOTO_URL_MAX or not validators.is_url(v):
            raise ValueError("Invalid Photo Url.")
        return v

    @field_validator("about")
    @classmethod
    def validate_about(cls, v):
        return _check_about(v)

    @field_validator("skills")
    @classmethod
    def validate_skills(cls, v):
        return _check_skills(v)


class UpdateRequest(BaseModel):
    """Partial update restricted to ALLOWED_UPDATES.

    Explicit nulls are rejected; only the fields the client sent are applied.
    """

    model_config = ConfigDict(extra="forbid")

    skills: Optional[List[str]] = None
    phone: Optional[str] = None
    age: Optional[int] = None
    photo_url: Optional[str] = Field(None, alias="photoUrl")
    about: Optional[str] = None
    password: Optional[str] = None

    @field_validator("skills")
    @classmethod
    def validate_skills(cls, v):
        return _check_skills(v)

    @field_validator("phone", mode="before")
    @classmethod
    def coerce_phone(cls, v):
        return _coerce_phone(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return _check_phone(v)

    @field_validator("age", mode="before")
    @classmethod
    def coerce_age(cls, v):
        return _coerce_age(v)

    @field_validator("age")
    @classmethod
    def validate_age(cls, v):
        return _check_age(v)

    @field_validator("photo_url")
    @classmethod
    def validate_photo_url(cls, v):
        if not validators.is_photo_url(v):
            raise ValueError("Invalid photo url.")
        if len(v) > PHOTO_URL_MAX or not validators.is_url(v):
            raise ValueError("Invalid Photo Url.")
        return v

    @field_validator("about")
    @classmethod
    def validate_about(cls, v):
        return _check_about(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return _check_password(v)

    def changes(self) -> Dict[str, Any]:
        """Fields present in the payload, keyed by record attribute name"""
        return self.model_dump(exclude_unset=True)


class LookupRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class DeleteRequest(BaseModel):
    id: str = Field(..., alias="_id")


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str = Field(..., alias="_id")
    first_name: str = Field(..., alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    email: str
    username: str
    phone: Optional[str] = None
    gender: Optional[str] = None
    age: Optional[int] = None
    photo_url: str = Field(..., alias="photoUrl")
    about: str
    skills: List[str] = []
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")


def _describe(error: Dict[str, Any]) -> str:
    field = ".".join(str(part) for part in error.get("loc", ())) or "body"
    if error.get("type") == "value_error":
        return str(error["ctx"]["error"])
    if error.get("type") == "missing":
        return f"{field} is required."
    if error.get("type") == "extra_forbidden":
        return "Can only update certain fields."
    return f"{field}: {error.get('msg')}"


def parse_payload(model: Type[RequestT], payload: Any) -> RequestT:
    """Turn an untyped JSON body into a validated request model.

    Raises ProfileError(VALIDATION) carrying the first failure's message.
    """
    if not isinstance(payload, dict):
        raise ProfileError(ErrorKind.VALIDATION, "Request body must be a JSON object.")
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ProfileError(ErrorKind.VALIDATION, _describe(e.errors()[0]))


def parse_update(payload: Any) -> UpdateRequest:
    if isinstance(payload, dict) and not all(key in ALLOWED_UPDATES for key in payload):
        raise ProfileError(ErrorKind.VALIDATION, "Can only update certain fields.")
    return parse_payload(UpdateRequest, payload)
