# profile_api/db/models/users/user.py
from typing import Optional, List
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from datetime import datetime, timezone
import uuid

# Field limits shared with the request schemas
FIRST_NAME_MIN, FIRST_NAME_MAX = 2, 30
LAST_NAME_MIN, LAST_NAME_MAX = 2, 30
EMAIL_MIN, EMAIL_MAX = 5, 254
USERNAME_MAX = 30
PASSWORD_MIN, PASSWORD_MAX = 8, 100
PHONE_MAX = 20
AGE_MIN, AGE_MAX = 8, 100
PHOTO_URL_MAX = 100
ABOUT_MIN, ABOUT_MAX = 5, 150
SKILLS_MAX = 5
GENDERS = ("male", "female", "other")

DEFAULT_PHOTO_URL = "https://cdn.pixabay.com/photo/2015/10/05/22/37/blank-profile-picture-973460_640.png"
DEFAULT_ABOUT = "Default about section."


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    __tablename__ = "users"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    first_name: str = Field(max_length=FIRST_NAME_MAX)
    last_name: Optional[str] = Field(max_length=LAST_NAME_MAX, default=None)
    email: str = Field(max_length=EMAIL_MAX, unique=True, index=True)
    username: str = Field(max_length=USERNAME_MAX, unique=True, index=True)
    password: str = Field(max_length=PASSWORD_MAX)
    phone: Optional[str] = Field(max_length=PHONE_MAX, default=None)
    gender: Optional[str] = Field(max_length=10, default=None)
    age: Optional[int] = Field(default=None)
    photo_url: str = Field(max_length=PHOTO_URL_MAX, default=DEFAULT_PHOTO_URL)
    about: str = Field(max_length=ABOUT_MAX, default=DEFAULT_ABOUT)
    skills: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
