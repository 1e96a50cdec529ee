from typing import Protocol, Optional, List, Dict, Any
from datetime import datetime

class UserDto:
    def __init__(self, id: str, first_name: str, last_name: Optional[str], email: str, username: str,
                 phone: Optional[str], gender: Optional[str], age: Optional[int], photo_url: str,
                 about: str, skills: List[str], created_at: datetime, updated_at: datetime):
        self.id = id
        self.first_name = first_name
        self.last_name = last_name
        self.email = email
        self.username = username
        self.phone = phone
        self.gender = gender
        self.age = age
        self.photo_url = photo_url
        self.about = about
        self.skills = skills
        self.created_at = created_at
        self.updated_at = updated_at

    def __repr__(self) -> str:
        return f"UserDto(id={self.id!r}, email={self.email!r}, username={self.username!r})"

class DuplicateUserError(Exception):
    """Storage rejected an insert because email or username is taken."""

class UserRepository(Protocol):
    def find_by_username(self, username: str) -> List[UserDto]:
        ...

    def find_by_email(self, email: str) -> List[UserDto]:
        ...

    def list_all(self) -> List[UserDto]:
        ...

    def create(self, fields: Dict[str, Any]) -> UserDto:
        ...

    def delete_by_id(self, user_id: str) -> Optional[UserDto]:
        ...

    def update_by_id(self, user_id: str, changes: Dict[str, Any]) -> Optional[UserDto]:
        ...
