from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, List
import logging

from sqlalchemy.exc import SQLAlchemyError

from ..ports.user_repo import UserRepository, UserDto, DuplicateUserError
from ...exceptions import ErrorKind, ProfileError
from ...schemas.users.user import (
    SignupRequest,
    LookupRequest,
    DeleteRequest,
    parse_payload,
    parse_update,
)

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "User already exists. Please try a different email or username."


@contextmanager
def _storage(action: str):
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Storage failure while {action}: {e}")
        raise ProfileError(ErrorKind.STORAGE, f"Storage failure while {action}.") from e


@dataclass
class ProfileService:
    user_repo: UserRepository

    def signup(self, payload: Any) -> UserDto:
        req = parse_payload(SignupRequest, payload)

        # Separate lookups, username first
        with _storage("checking for duplicates"):
            same_username = self.user_repo.find_by_username(req.username)
            same_email = self.user_repo.find_by_email(req.email)
        if same_username or same_email:
            raise ProfileError(ErrorKind.CONFLICT, DUPLICATE_MESSAGE)

        try:
            with _storage("adding user"):
                user = self.user_repo.create(req.model_dump())
        except DuplicateUserError:
            # Lost the race against a concurrent signup
            logger.warning(f"Unique constraint rejected signup for {req.username}")
            raise ProfileError(ErrorKind.CONFLICT, DUPLICATE_MESSAGE)
        logger.info(f"Created user {user.id}")
        return user

    def feed(self) -> List[UserDto]:
        with _storage("reading feed"):
            return self.user_repo.list_all()

    def lookup(self, payload: Any) -> List[UserDto]:
        req = parse_payload(LookupRequest, payload)
        with _storage("looking up user"):
            users = self.user_repo.find_by_email(req.email)
        if not users:
            raise ProfileError(ErrorKind.NOT_FOUND, "There is no username with such email.")
        return users

    def delete(self, payload: Any) -> None:
        req = parse_payload(DeleteRequest, payload)
        with _storage("deleting user"):
            deleted = self.user_repo.delete_by_id(req.id)
        if deleted is None:
            logger.info(f"Delete requested for unknown user {req.id}")

    def update(self, user_id: str, payload: Any) -> UserDto:
        req = parse_update(payload)
        with _storage("updating user"):
            user = self.user_repo.update_by_id(user_id, req.changes())
        if user is None:
            raise ProfileError(ErrorKind.NOT_FOUND, "Cannot update User.")
        return user
