from typing import Any, List
from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from sqlmodel import Session
import logging

from ..database import get_session
from ..exceptions import ErrorKind, ProfileError
from ..schemas.users.user import UserResponse
from ..application.services.profile_service import ProfileService
from ..infrastructure.persistence.sqlalchemy.repositories.user_repository_sql import SqlUserRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])


def get_profile_service(session: Session = Depends(get_session)) -> ProfileService:
    return ProfileService(user_repo=SqlUserRepository(session))


@router.post("/signup", response_class=PlainTextResponse)
def signup(
    payload: Any = Body(None),
    profile_service: ProfileService = Depends(get_profile_service),
):
    try:
        profile_service.signup(payload)
    except ProfileError as e:
        logger.info(f"Signup rejected ({e.kind.value}): {e.message}")
        raise HTTPException(status_code=400, detail=f"Error adding user. {e.message}")
    return PlainTextResponse("User added Successfully.")


@router.get("/feed", response_class=PlainTextResponse)
def feed(profile_service: ProfileService = Depends(get_profile_service)):
    try:
        users = profile_service.feed()
    except ProfileError:
        raise HTTPException(status_code=400, detail="Something went wrong getting feed users.")
    # Records stay server-side; callers only get the acknowledgment
    records = [UserResponse.model_validate(u).model_dump(mode="json", by_alias=True) for u in users]
    logger.info(f"Feed ({len(records)} users): {records}")
    return PlainTextResponse("Got feed data.")


@router.get("/user", response_model=List[UserResponse])
def get_user_by_email(
    payload: Any = Body(None),
    profile_service: ProfileService = Depends(get_profile_service),
):
    try:
        users = profile_service.lookup(payload)
    except ProfileError as e:
        if e.kind == ErrorKind.NOT_FOUND:
            raise HTTPException(status_code=404, detail=e.message)
        logger.error(f"Lookup by email failed: {e.message}")
        raise HTTPException(status_code=400, detail="Something went wrong getting user by email.")
    return [UserResponse.model_validate(u) for u in users]


@router.delete("/user", response_class=PlainTextResponse)
def delete_user(
    payload: Any = Body(None),
    profile_service: ProfileService = Depends(get_profile_service),
):
    try:
        profile_service.delete(payload)
    except ProfileError as e:
        logger.error(f"Delete failed: {e.message}")
        raise HTTPException(status_code=400, detail="Something went wrong deleting user...")
    return PlainTextResponse("Deleted user")


@router.patch("/user/{user_id}", response_class=PlainTextResponse)
def update_user(
    user_id: str,
    payload: Any = Body(None),
    profile_service: ProfileService = Depends(get_profile_service),
):
    try:
        profile_service.update(user_id, payload)
    except ProfileError as e:
        raise HTTPException(status_code=400, detail=f"Something went wrong updating user...{e.message}")
    return PlainTextResponse("Updated user.")
