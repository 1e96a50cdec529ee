from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .....db.models import User
from .....db.models.users.user import utc_now
from .....application.ports.user_repo import UserRepository, UserDto, DuplicateUserError

def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive values; they were written as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value

class SqlUserRepository(UserRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, user: User) -> UserDto:
        return UserDto(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            username=user.username,
            phone=user.phone,
            gender=user.gender,
            age=user.age,
            photo_url=user.photo_url,
            about=user.about,
            skills=list(user.skills or []),
            created_at=_as_utc(user.created_at),
            updated_at=_as_utc(user.updated_at),
        )

    def find_by_username(self, username: str) -> List[UserDto]:
        rows = self.session.exec(select(User).where(User.username == username)).all()
        return [self._to_dto(r) for r in rows]

    def find_by_email(self, email: str) -> List[UserDto]:
        rows = self.session.exec(select(User).where(User.email == email)).all()
        return [self._to_dto(r) for r in rows]

    def list_all(self) -> List[UserDto]:
        rows = self.session.exec(select(User).order_by(User.created_at)).all()
        return [self._to_dto(r) for r in rows]

    def create(self, fields: Dict[str, Any]) -> UserDto:
        user = User(**fields)
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateUserError(str(e.orig)) from e
        self.session.refresh(user)
        return self._to_dto(user)

    def delete_by_id(self, user_id: str) -> Optional[UserDto]:
        user = self.session.get(User, user_id)
        if not user:
            return None
        dto = self._to_dto(user)
        self.session.delete(user)
        self.session.commit()
        return dto

    def update_by_id(self, user_id: str, changes: Dict[str, Any]) -> Optional[UserDto]:
        user = self.session.get(User, user_id)
        if not user:
            return None
        for key, value in changes.items():
            setattr(user, key, value)
        user.updated_at = utc_now()
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return self._to_dto(user)
